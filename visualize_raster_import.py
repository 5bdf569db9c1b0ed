#!/usr/bin/env python3
"""
Visualize a raster import on a flat map.
Imports an image for one category and renders the resulting tiles as a color map.
"""

import sys
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

sys.path.append(str(Path(__file__).parent))

from py_rastermap.core import (
    ArrayTileMap,
    ImageFileType,
    RasterDataType,
    TileMapConfig,
    load_raster,
)
from py_rastermap.core.tiles import Landscape, TileType, WaterClass
from py_rastermap.utils.log_config import configure_logging
from py_rastermap.utils.random import set_random_seed, get_prng


# One color per visual class: void, grass..desert, trees, sea, canal, river
PALETTE = np.array(
    [
        [0, 0, 0],  # void
        [118, 170, 70],  # grass
        [150, 130, 90],  # rough
        [130, 130, 130],  # rocks
        [200, 170, 60],  # fields
        [240, 240, 250],  # snow
        [230, 210, 140],  # desert
        [30, 100, 40],  # trees
        [40, 80, 170],  # sea
        [80, 140, 220],  # canal
        [60, 120, 200],  # river
    ],
    dtype=np.uint8,
)


def tile_classes(tile_map: ArrayTileMap) -> np.ndarray:
    """Reduce tile state to one class index per tile."""
    classes = np.zeros(tile_map.size_x * tile_map.size_y, dtype=np.uint8)

    clear = tile_map.types == TileType.CLEAR
    classes[clear] = tile_map.grounds[clear] + 1
    classes[clear & tile_map.snow] = 5
    classes[tile_map.types == TileType.TREES] = 7

    water = tile_map.types == TileType.WATER
    classes[water & (tile_map.water_classes == WaterClass.SEA)] = 8
    classes[water & (tile_map.water_classes == WaterClass.CANAL)] = 9
    classes[water & (tile_map.water_classes == WaterClass.RIVER)] = 10

    return classes.reshape(tile_map.size_y, tile_map.size_x)


def visualize_raster_import(
    filename,
    data_type="terrain",
    size_x=256,
    size_y=256,
    landscape="temperate",
    seed="123456",
    output="raster_import.png",
):
    """
    Import a raster onto a fresh map and save a picture of the result.

    Args:
        filename: PNG or BMP file to import
        data_type: Import category name
        size_x: Map width in tiles
        size_y: Map height in tiles
        landscape: Landscape name
        seed: Random seed
        output: Output image path
    """
    configure_logging()
    set_random_seed(seed)

    path = Path(filename)
    file_type = ImageFileType.BMP if path.suffix.lower() == ".bmp" else ImageFileType.PNG

    tile_map = ArrayTileMap(
        TileMapConfig(size_x=size_x, size_y=size_y, landscape=Landscape[landscape.upper()])
    )

    print(f"Importing {path} as {data_type} onto a {size_x}x{size_y} map...")
    load_raster(tile_map, file_type, RasterDataType[data_type.upper()], path, prng=get_prng())

    print("Tile types:")
    for name, count in tile_map.type_counts().items():
        print(f"  {name}: {count}")

    fig, ax = plt.subplots(figsize=(8, 8 * size_y / size_x))
    ax.imshow(PALETTE[tile_classes(tile_map)], interpolation="nearest")
    ax.set_title(f"{path.name} ({data_type})")
    ax.set_axis_off()
    fig.savefig(output, dpi=150, bbox_inches="tight")
    plt.close(fig)

    print(f"Saved visualization to {output}")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: visualize_raster_import.py IMAGE [CATEGORY] [SIZE_X] [SIZE_Y]")
        sys.exit(1)

    args = sys.argv[1:]
    visualize_raster_import(
        args[0],
        data_type=args[1] if len(args) > 1 else "terrain",
        size_x=int(args[2]) if len(args) > 2 else 256,
        size_y=int(args[3]) if len(args) > 3 else 256,
    )
