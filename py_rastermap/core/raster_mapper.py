"""
Geometric mapping of a raster onto the tile grid.

The raster is scaled to fit the map while keeping its aspect ratio, centered
along the other axis, and sampled with nearest-neighbour lookups. All geometry
uses fixed-point integers so the same image always lands on the same tiles.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Tuple

import numpy as np
import structlog

from .raster_io import MAX_RASTER_SIDE_LENGTH_IN_PIXELS, RasterImage

logger = structlog.get_logger()

# Fixed-point denominator for scale factors.
NUM_DIV = 16384

assert NUM_DIV <= 0xFFFFFFFF // MAX_RASTER_SIDE_LENGTH_IN_PIXELS


class HeightmapRotation(IntEnum):
    """Orientation of an imported image relative to the map."""

    COUNTER_CLOCKWISE = 0
    CLOCKWISE = 1


@dataclass(frozen=True)
class RasterScale:
    """Scale factor (in 1/NUM_DIV units) and centering padding for one pass."""

    raster_scale: int
    row_pad: int = 0
    col_pad: int = 0


TileCallback = Callable[[int, int, int, int], None]


def map_dimensions(tile_map, rotation: HeightmapRotation) -> Tuple[int, int]:
    """Return (width, height) of the grid as seen by the raster."""
    if rotation == HeightmapRotation.COUNTER_CLOCKWISE:
        return tile_map.size_x, tile_map.size_y
    if rotation == HeightmapRotation.CLOCKWISE:
        return tile_map.size_y, tile_map.size_x
    raise ValueError(f"Unknown heightmap rotation: {rotation}")


def compute_raster_scale(
    raster_width: int, raster_height: int, map_width: int, map_height: int
) -> RasterScale:
    """
    Fit the raster inside the map, preserving its aspect ratio.

    A relatively wider raster is scaled to the map width and centered
    vertically; otherwise it is scaled to the map height and centered
    horizontally.
    """
    if (raster_width * NUM_DIV) // raster_height > (map_width * NUM_DIV) // map_height:
        scale = max((map_width * NUM_DIV) // raster_width, 1)
        row_pad = max((1 + map_height - (raster_height * scale) // NUM_DIV) // 2, 0)
        return RasterScale(scale, row_pad=row_pad)

    scale = max((map_height * NUM_DIV) // raster_height, 1)
    col_pad = max((1 + map_width - (raster_width * scale) // NUM_DIV) // 2, 0)
    return RasterScale(scale, col_pad=col_pad)


def apply_raster_to_map(
    tile_map,
    raster: RasterImage,
    callback: TileCallback,
    rotation: HeightmapRotation = HeightmapRotation.COUNTER_CLOCKWISE,
) -> int:
    """
    Call ``callback(tile, r, g, b)`` for every inner tile covered by the raster.

    Rows are visited in order, columns within a row in order; tiles in the
    padding band and border tiles are skipped without a call.

    Args:
        tile_map: World grid implementing the TileMap protocol
        raster: Decoded raster with pixels
        callback: Per-tile classifier
        rotation: Orientation of the raster on the grid

    Returns:
        Number of tiles passed to ``callback``
    """
    map_width, map_height = map_dimensions(tile_map, rotation)
    scale = compute_raster_scale(raster.width, raster.height, map_width, map_height)

    logger.debug(
        "Mapping raster onto grid",
        raster_width=raster.width,
        raster_height=raster.height,
        map_width=map_width,
        map_height=map_height,
        rotation=rotation.name,
        raster_scale=scale.raster_scale,
        row_pad=scale.row_pad,
        col_pad=scale.col_pad,
    )

    map_rows = np.arange(scale.row_pad, map_height - scale.row_pad)
    map_cols = np.arange(scale.col_pad, map_width - scale.col_pad)

    # Nearest-neighbour source indices, computed once per axis.
    raster_rows = ((map_rows - scale.row_pad) * NUM_DIV) // scale.raster_scale
    if rotation == HeightmapRotation.COUNTER_CLOCKWISE:
        raster_cols = ((map_width - 1 - map_cols - scale.col_pad) * NUM_DIV) // scale.raster_scale
    else:
        raster_cols = ((map_cols - scale.col_pad) * NUM_DIV) // scale.raster_scale

    raster_rows = np.clip(raster_rows, 0, raster.height - 1)
    raster_cols = np.clip(raster_cols, 0, raster.width - 1)

    pixels = raster.pixels.reshape(raster.height, raster.width, 3)
    classified = 0

    for map_row, raster_row in zip(map_rows.tolist(), raster_rows.tolist()):
        row_pixels = pixels[raster_row]
        for map_col, raster_col in zip(map_cols.tolist(), raster_cols.tolist()):
            if rotation == HeightmapRotation.COUNTER_CLOCKWISE:
                tile = tile_map.tile_xy(map_col, map_row)
            else:
                tile = tile_map.tile_xy(map_row, map_col)

            if not tile_map.is_inner_tile(tile):
                continue

            r, g, b = row_pixels[raster_col].tolist()
            callback(tile, r, g, b)
            classified += 1

    return classified
