"""
Per-tile terrain classifiers.

Each import category reads the three channels of a sampled pixel with its own
meaning and mutates the tile through the TileMap API:

    Category  Red                    Green                  Blue
    TERRAIN   grass->dirt density    rough probability      rock probability
    FIELDS    field type             field probability      -
    WATER     canal                  river                  sea
    TREES     growth stage           density                species
    SNOW      -                      -                      snow density
    DESERT    desert density         desert zone            -
    TROPICS   desert zone            rainforest zone        normal zone

Channel values below 0x10 generally mean "no data" for that channel.
"""

from enum import IntEnum
from typing import Callable, Dict

from ..utils.random import RandomSource
from .gradient import sample_quantized_gradient
from .tiles import (
    ClearGround,
    INVALID_INDUSTRY,
    Landscape,
    OWNER_NONE,
    OWNER_WATER,
    Slope,
    TileType,
    TreeGround,
    TropicZone,
    is_halftile_slope,
    TREE_COUNT_SUB_ARCTIC,
    TREE_COUNT_SUB_TROPICAL,
    TREE_COUNT_TEMPERATE,
    TREE_COUNT_TOYLAND,
    TREE_INVALID,
    TREE_RAINFOREST,
    TREE_SUB_ARCTIC,
    TREE_TEMPERATE,
    TREE_TOYLAND,
)

# Cutoffs for the low and high extremes. Indexed images with a limited palette
# may use values slightly away from 0x00 and 0xFF.
LOWER_CUTOFF = 0x0F
UPPER_CUTOFF = 0xF0

# Channel values below this carry no data.
NO_DATA_THRESHOLD = 0x10

FIELD_TYPE_COUNT = 9


class RasterDataType(IntEnum):
    """What an imported raster describes."""

    TERRAIN = 1
    FIELDS = 2
    WATER = 3
    TREES = 4
    SNOW = 5
    DESERT = 6
    TROPICS = 7


Classifier = Callable[..., None]


def replace_ground(tile_map, tile: int, ground: ClearGround, density: int = 3) -> None:
    """Change the ground of a clear or tree tile, keeping its trees if possible."""
    current = tile_map.tile_type(tile)

    if current == TileType.CLEAR:
        tile_map.set_clear_ground_density(tile, ground, density)
    elif current == TileType.TREES:
        if ground == ClearGround.GRASS:
            tile_map.set_tree_ground_density(tile, TreeGround.GRASS, density)
        elif ground == ClearGround.ROUGH:
            tile_map.set_tree_ground_density(tile, TreeGround.ROUGH, density)
        elif ground in (ClearGround.ROCKS, ClearGround.FIELDS):
            tile_map.make_clear(tile, ground, density)
        elif ground in (ClearGround.SNOW, ClearGround.DESERT):
            tile_map.set_tree_ground_density(tile, TreeGround.SNOW_DESERT, density)
        else:
            raise ValueError(f"Unknown clear ground: {ground}")


def _is_clear_or_trees(tile_map, tile: int) -> bool:
    return tile_map.tile_type(tile) in (TileType.CLEAR, TileType.TREES)


def apply_terrain(tile_map, tile: int, r: int, g: int, b: int, prng: RandomSource) -> None:
    """Red: grass to dirt density. Green: rough land. Blue: rocks."""
    if not _is_clear_or_trees(tile_map, tile):
        return

    if r >= NO_DATA_THRESHOLD:
        density = sample_quantized_gradient(r, 3, UPPER_CUTOFF, LOWER_CUTOFF, prng)
        if density < 3:
            replace_ground(tile_map, tile, ClearGround.GRASS, density)

    if g >= NO_DATA_THRESHOLD:
        if sample_quantized_gradient(g, 1, LOWER_CUTOFF, UPPER_CUTOFF, prng):
            replace_ground(tile_map, tile, ClearGround.ROUGH)

    if b >= NO_DATA_THRESHOLD:
        if sample_quantized_gradient(b, 1, LOWER_CUTOFF, UPPER_CUTOFF, prng):
            replace_ground(tile_map, tile, ClearGround.ROCKS)


def apply_fields(tile_map, tile: int, r: int, g: int, b: int, prng: RandomSource) -> None:
    """Red: field type, each step of 16 a different crop. Green: field probability."""
    if not _is_clear_or_trees(tile_map, tile):
        return
    if r < NO_DATA_THRESHOLD:
        return

    field_type = ((r >> 4) - 1) % FIELD_TYPE_COUNT

    if sample_quantized_gradient(g, 1, LOWER_CUTOFF, UPPER_CUTOFF, prng):
        tile_map.make_field(tile, field_type, INVALID_INDUSTRY)


def apply_water(tile_map, tile: int, r: int, g: int, b: int, prng: RandomSource) -> None:
    """Red: canal. Green: river. Blue: sea. First bright channel wins."""
    if r >= UPPER_CUTOFF:
        slope = tile_map.tile_slope(tile)
        if slope == Slope.FLAT:
            owner = tile_map.tile_owner(tile)
            if owner == OWNER_WATER:
                owner = OWNER_NONE
            tile_map.make_canal(tile, owner, prng.next_uint32())
        # A canal needs flat land but a river also fits a half-tile slope.
        elif g >= UPPER_CUTOFF and is_halftile_slope(slope):
            tile_map.make_river(tile, prng.next_uint32())
    elif g >= UPPER_CUTOFF:
        slope = tile_map.tile_slope(tile)
        if slope == Slope.FLAT or is_halftile_slope(slope):
            tile_map.make_river(tile, prng.next_uint32())
    elif b >= UPPER_CUTOFF:
        if tile_map.is_tile_flat(tile) and tile_map.tile_height(tile) == 0:
            tile_map.make_sea(tile)


def tree_type_lookup(value: int, landscape: Landscape) -> int:
    """
    Map a channel byte to a tree type of the landscape.

    Each step of 16 selects the next type of the landscape's table, wrapping
    around; values below 0x10 select no tree.
    """
    if value < NO_DATA_THRESHOLD:
        return TREE_INVALID

    index = (value >> 4) - 1
    if landscape == Landscape.TEMPERATE:
        return TREE_TEMPERATE + index % TREE_COUNT_TEMPERATE
    if landscape == Landscape.ARCTIC:
        return TREE_SUB_ARCTIC + index % TREE_COUNT_SUB_ARCTIC
    if landscape == Landscape.TROPIC:
        return TREE_RAINFOREST + index % TREE_COUNT_SUB_TROPICAL
    if landscape == Landscape.TOYLAND:
        return TREE_TOYLAND + index % TREE_COUNT_TOYLAND
    raise ValueError(f"Unknown landscape: {landscape}")


def apply_trees(tile_map, tile: int, r: int, g: int, b: int, prng: RandomSource) -> None:
    """Red: growth stage. Green: density. Blue: tree type."""
    if r < NO_DATA_THRESHOLD:
        growth = 3  # adult
    else:
        growth = sample_quantized_gradient(r, 6, LOWER_CUTOFF, UPPER_CUTOFF, prng)

    # Levels 0-4 minus one: the lowest level means no trees.
    density = sample_quantized_gradient(g, 3 + 1, LOWER_CUTOFF, UPPER_CUTOFF, prng) - 1
    if density < 0:
        return

    if b < NO_DATA_THRESHOLD:
        tree = tile_map.random_tree_type(tile, (prng.next_uint32() >> 24) & 0xFF)
    else:
        tree = tree_type_lookup(b, tile_map.landscape)

    if tree == TREE_INVALID:
        return
    if tile_map.can_plant_trees_on_tile(tile, True):
        tile_map.plant_trees_on_tile(tile, tree, density, growth)


def apply_snow(tile_map, tile: int, r: int, g: int, b: int, prng: RandomSource) -> None:
    """Blue: snow density."""
    density = sample_quantized_gradient(b, 3 + 1, LOWER_CUTOFF, UPPER_CUTOFF, prng) - 1
    if density < 0:
        return

    tile_type = tile_map.tile_type(tile)
    if tile_type == TileType.CLEAR:
        if tile_map.is_snow_tile(tile):
            tile_map.set_clear_ground_density(tile, ClearGround.SNOW, density)
        else:
            tile_map.make_snow(tile, density)
    elif tile_type == TileType.TREES:
        ground = tile_map.tree_ground(tile)
        if ground in (TreeGround.GRASS, TreeGround.SNOW_DESERT):
            tile_map.set_tree_ground_density(tile, TreeGround.SNOW_DESERT, density)
        elif ground in (TreeGround.ROUGH, TreeGround.ROUGH_SNOW):
            tile_map.set_tree_ground_density(tile, TreeGround.ROUGH_SNOW, density)


def apply_desert(tile_map, tile: int, r: int, g: int, b: int, prng: RandomSource) -> None:
    """Red: desert density. Green: desert tropic zone."""
    # Desert density is either 1 or 3.
    density = sample_quantized_gradient(r, 1 + 1, LOWER_CUTOFF, UPPER_CUTOFF, prng) * 2 - 1
    if density < 0:
        return

    replace_ground(tile_map, tile, ClearGround.DESERT, density)

    if g > UPPER_CUTOFF:
        tile_map.set_tropic_zone(tile, TropicZone.DESERT)


def apply_tropics(tile_map, tile: int, r: int, g: int, b: int, prng: RandomSource) -> None:
    """Red: desert zone. Green: rainforest zone. Blue: normal zone."""
    if r > UPPER_CUTOFF:
        tile_map.set_tropic_zone(tile, TropicZone.DESERT)
    elif g > UPPER_CUTOFF:
        tile_map.set_tropic_zone(tile, TropicZone.RAINFOREST)
    elif b > UPPER_CUTOFF:
        tile_map.set_tropic_zone(tile, TropicZone.NORMAL)


CLASSIFIERS: Dict[RasterDataType, Classifier] = {
    RasterDataType.TERRAIN: apply_terrain,
    RasterDataType.FIELDS: apply_fields,
    RasterDataType.WATER: apply_water,
    RasterDataType.TREES: apply_trees,
    RasterDataType.SNOW: apply_snow,
    RasterDataType.DESERT: apply_desert,
    RasterDataType.TROPICS: apply_tropics,
}


def get_classifier(data_type: RasterDataType) -> Classifier:
    """Return the classifier for an import category."""
    try:
        return CLASSIFIERS[RasterDataType(data_type)]
    except (KeyError, ValueError) as e:
        raise ValueError(f"Unknown raster data type: {data_type}") from e
