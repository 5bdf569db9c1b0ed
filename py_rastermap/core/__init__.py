"""
Core raster import functionality.
"""

from .classifiers import RasterDataType, get_classifier
from .gradient import sample_quantized_gradient
from .raster_import import load_raster
from .raster_io import (
    ImageFileType,
    RasterImage,
    RasterImportError,
    RasterFileNotFoundError,
    UnsupportedImageFormatError,
    ImageTooLargeError,
    RasterDecodeError,
    is_valid_raster_dimension,
    read_raster_file,
    read_raster_size,
)
from .raster_mapper import HeightmapRotation, RasterScale, apply_raster_to_map, compute_raster_scale
from .tile_map import ArrayTileMap, TileMap, TileMapConfig

__all__ = ['RasterDataType', 'get_classifier', 'sample_quantized_gradient', 'load_raster',
           'ImageFileType', 'RasterImage', 'RasterImportError', 'RasterFileNotFoundError',
           'UnsupportedImageFormatError', 'ImageTooLargeError', 'RasterDecodeError',
           'is_valid_raster_dimension', 'read_raster_file', 'read_raster_size',
           'HeightmapRotation', 'RasterScale', 'apply_raster_to_map', 'compute_raster_scale',
           'ArrayTileMap', 'TileMap', 'TileMapConfig']
