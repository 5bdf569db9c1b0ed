"""
Tile vocabulary shared by the raster importer and the world model.

Values mirror the classic tile-game encoding so that imported maps keep the
same tree tables, owners and ground kinds the rest of the game expects.
"""

from enum import IntEnum, IntFlag


class TileType(IntEnum):
    """Kind of content on a tile."""

    CLEAR = 0
    RAILWAY = 1
    ROAD = 2
    HOUSE = 3
    TREES = 4
    STATION = 5
    WATER = 6
    VOID = 7
    INDUSTRY = 8
    TUNNELBRIDGE = 9
    OBJECT = 10


class ClearGround(IntEnum):
    """Ground kinds of a clear tile."""

    GRASS = 0
    ROUGH = 1
    ROCKS = 2
    FIELDS = 3
    SNOW = 4
    DESERT = 5


class TreeGround(IntEnum):
    """Ground kinds beneath trees."""

    GRASS = 0
    ROUGH = 1
    SNOW_DESERT = 2
    SHORE = 3
    ROUGH_SNOW = 4


class WaterClass(IntEnum):
    SEA = 0
    CANAL = 1
    RIVER = 2
    INVALID = 3


class TropicZone(IntEnum):
    NORMAL = 0
    DESERT = 1
    RAINFOREST = 2


class Landscape(IntEnum):
    TEMPERATE = 0
    ARCTIC = 1
    TROPIC = 2
    TOYLAND = 3


class Slope(IntFlag):
    """Raised corners of a tile plus the steep and half-tile markers."""

    FLAT = 0
    W = 0x01
    S = 0x02
    E = 0x04
    N = 0x08
    STEEP = 0x10
    HALFTILE = 0x20


def is_halftile_slope(slope: int) -> bool:
    return bool(slope & Slope.HALFTILE)


# Owners
OWNER_NONE = 0x10
OWNER_WATER = 0x12

INVALID_INDUSTRY = 0xFFFF

# Tree types: first index of each landscape's table.
TREE_TEMPERATE = 0x00
TREE_SUB_ARCTIC = 0x0C
TREE_RAINFOREST = 0x14
TREE_CACTUS = 0x1B
TREE_SUB_TROPICAL = 0x1C
TREE_TOYLAND = 0x20
TREE_INVALID = 0xFF

TREE_COUNT_TEMPERATE = TREE_SUB_ARCTIC - TREE_TEMPERATE
TREE_COUNT_SUB_ARCTIC = TREE_RAINFOREST - TREE_SUB_ARCTIC
TREE_COUNT_RAINFOREST = TREE_CACTUS - TREE_RAINFOREST
TREE_COUNT_SUB_TROPICAL = TREE_TOYLAND - TREE_SUB_TROPICAL
TREE_COUNT_TOYLAND = 9

# Largest supported map side, in tiles.
MAX_MAP_SIZE_BITS = 16
MAX_MAP_SIZE = 1 << MAX_MAP_SIZE_BITS
