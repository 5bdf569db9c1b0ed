"""
Modification of a map from raster images.

``load_raster`` is the single entry point: it decodes the image, maps it onto
the grid and runs the classifier of the chosen category on every covered
tile. Decoding happens completely before the first tile is touched, so a
rejected file leaves the map unchanged.
"""

from pathlib import Path
from typing import Iterable, Optional, Union

import structlog

from ..utils.random import RandomSource, resolve_prng
from .classifiers import RasterDataType, get_classifier
from .raster_io import ImageFileType, RasterImportError, read_raster_file
from .raster_mapper import HeightmapRotation, apply_raster_to_map

logger = structlog.get_logger()


def load_raster(
    tile_map,
    file_type: ImageFileType,
    data_type: RasterDataType,
    filename: Union[str, Path],
    subdir: Optional[str] = None,
    *,
    rotation: Optional[HeightmapRotation] = None,
    search_paths: Optional[Iterable[Union[str, Path]]] = None,
    prng: Optional[RandomSource] = None,
) -> None:
    """
    Import a raster of ``data_type`` onto ``tile_map``.

    Args:
        tile_map: World grid implementing the TileMap protocol
        file_type: Container format of the file
        data_type: Import category selecting the classifier
        filename: File name or path of the raster
        subdir: Subdirectory of the search paths, settings default when omitted
        rotation: Raster orientation, settings default when omitted
        search_paths: Directories to search, settings default when omitted
        prng: Random source, the shared sequence when omitted

    Raises:
        RasterImportError: The file could not be found, read or accepted
        ValueError: Unknown import category
    """
    from ..config import settings

    classifier = get_classifier(data_type)
    if subdir is None:
        subdir = settings.default_subdir
    if rotation is None:
        rotation = settings.heightmap_rotation
    if search_paths is None:
        search_paths = settings.search_paths
    prng = resolve_prng(prng)

    logger.info(
        "Importing raster",
        filename=str(filename),
        file_type=file_type.value,
        data_type=RasterDataType(data_type).name,
    )

    try:
        raster = read_raster_file(file_type, filename, subdir, search_paths)
    except RasterImportError as e:
        logger.error("Raster import failed", title=e.title, message=e.message)
        raise

    try:
        classified = apply_raster_to_map(
            tile_map,
            raster,
            lambda tile, r, g, b: classifier(tile_map, tile, r, g, b, prng),
            rotation=HeightmapRotation(rotation),
        )
    finally:
        # The buffer belongs to this pass only.
        raster.pixels = None

    logger.info(
        "Raster applied",
        width=raster.width,
        height=raster.height,
        tiles_classified=classified,
    )
