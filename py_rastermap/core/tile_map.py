"""
World model interface consumed by the raster importer.

The importer never touches tile storage directly: every query and mutation goes
through the ``TileMap`` protocol. ``ArrayTileMap`` is a NumPy-backed
implementation used by the preview tooling and the test-suite.
"""

from dataclasses import dataclass
from typing import Protocol

import numpy as np
import structlog

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
    WaterClass,
    TREE_CACTUS,
    TREE_COUNT_RAINFOREST,
    TREE_COUNT_SUB_ARCTIC,
    TREE_COUNT_SUB_TROPICAL,
    TREE_COUNT_TEMPERATE,
    TREE_COUNT_TOYLAND,
    TREE_INVALID,
    TREE_RAINFOREST,
    TREE_SUB_ARCTIC,
    TREE_SUB_TROPICAL,
    TREE_TEMPERATE,
    TREE_TOYLAND,
    MAX_MAP_SIZE,
)

logger = structlog.get_logger()


class TileMap(Protocol):
    """Query and mutation API of the world grid, addressed by tile index."""

    landscape: Landscape

    @property
    def size_x(self) -> int: ...

    @property
    def size_y(self) -> int: ...

    def tile_xy(self, x: int, y: int) -> int: ...

    def is_inner_tile(self, tile: int) -> bool: ...

    def tile_type(self, tile: int) -> TileType: ...

    def tile_slope(self, tile: int) -> Slope: ...

    def tile_height(self, tile: int) -> int: ...

    def tile_owner(self, tile: int) -> int: ...

    def is_tile_flat(self, tile: int) -> bool: ...

    def is_snow_tile(self, tile: int) -> bool: ...

    def tree_ground(self, tile: int) -> TreeGround: ...

    def tropic_zone(self, tile: int) -> TropicZone: ...

    def set_clear_ground_density(self, tile: int, ground: ClearGround, density: int) -> None: ...

    def set_tree_ground_density(self, tile: int, ground: TreeGround, density: int) -> None: ...

    def make_clear(self, tile: int, ground: ClearGround, density: int) -> None: ...

    def make_snow(self, tile: int, density: int) -> None: ...

    def make_field(self, tile: int, field_type: int, industry: int) -> None: ...

    def make_canal(self, tile: int, owner: int, random_bits: int) -> None: ...

    def make_river(self, tile: int, random_bits: int) -> None: ...

    def make_sea(self, tile: int) -> None: ...

    def set_tropic_zone(self, tile: int, zone: TropicZone) -> None: ...

    def can_plant_trees_on_tile(self, tile: int, allow_desert: bool) -> bool: ...

    def plant_trees_on_tile(self, tile: int, tree_type: int, count: int, growth: int) -> None: ...

    def random_tree_type(self, tile: int, seed: int) -> int: ...


@dataclass
class TileMapConfig:
    """Configuration for an in-memory tile map."""

    size_x: int
    size_y: int
    landscape: Landscape = Landscape.TEMPERATE
    height: int = 1


class ArrayTileMap:
    """
    Flat-array tile map.

    Every tile attribute lives in its own 1-D NumPy array indexed by
    ``y * size_x + x``. Ground holds a ``ClearGround`` on clear tiles and a
    ``TreeGround`` on tree tiles. Snow on clear tiles is a flag over the raw
    ground so rough snow can melt back to rough land.
    """

    def __init__(self, config: TileMapConfig):
        if not (2 < config.size_x <= MAX_MAP_SIZE and 2 < config.size_y <= MAX_MAP_SIZE):
            raise ValueError(
                f"Map size {config.size_x}x{config.size_y} outside 3..{MAX_MAP_SIZE}"
            )

        self.config = config
        self.landscape = config.landscape
        n_tiles = config.size_x * config.size_y

        self.types = np.full(n_tiles, TileType.CLEAR, dtype=np.uint8)
        self.heights = np.full(n_tiles, config.height, dtype=np.uint8)
        self.slopes = np.zeros(n_tiles, dtype=np.uint8)
        self.owners = np.full(n_tiles, OWNER_NONE, dtype=np.uint8)
        self.grounds = np.full(n_tiles, ClearGround.GRASS, dtype=np.uint8)
        self.densities = np.full(n_tiles, 3, dtype=np.uint8)
        self.snow = np.zeros(n_tiles, dtype=bool)
        self.field_types = np.zeros(n_tiles, dtype=np.uint8)
        self.industries = np.full(n_tiles, INVALID_INDUSTRY, dtype=np.uint16)
        self.tree_types = np.full(n_tiles, TREE_INVALID, dtype=np.uint8)
        self.tree_counts = np.zeros(n_tiles, dtype=np.uint8)
        self.tree_growth = np.zeros(n_tiles, dtype=np.uint8)
        self.tropic_zones = np.full(n_tiles, TropicZone.NORMAL, dtype=np.uint8)
        self.water_classes = np.full(n_tiles, WaterClass.INVALID, dtype=np.uint8)
        self.random_bits = np.zeros(n_tiles, dtype=np.uint8)

        # Border tiles are void, like the edge of a real map.
        border = ~self._inner_mask()
        self.types[border] = TileType.VOID

        logger.debug(
            "Created tile map",
            size_x=config.size_x,
            size_y=config.size_y,
            landscape=self.landscape.name,
        )

    def _inner_mask(self) -> np.ndarray:
        xs = np.tile(np.arange(self.size_x), self.size_y)
        ys = np.repeat(np.arange(self.size_y), self.size_x)
        return (xs > 0) & (xs < self.size_x - 1) & (ys > 0) & (ys < self.size_y - 1)

    # Geometry

    @property
    def size_x(self) -> int:
        return self.config.size_x

    @property
    def size_y(self) -> int:
        return self.config.size_y

    def tile_xy(self, x: int, y: int) -> int:
        return y * self.size_x + x

    def tile_x(self, tile: int) -> int:
        return tile % self.size_x

    def tile_y(self, tile: int) -> int:
        return tile // self.size_x

    def is_inner_tile(self, tile: int) -> bool:
        x, y = self.tile_x(tile), self.tile_y(tile)
        return 0 < x < self.size_x - 1 and 0 < y < self.size_y - 1

    # Queries

    def tile_type(self, tile: int) -> TileType:
        return TileType(int(self.types[tile]))

    def tile_slope(self, tile: int) -> Slope:
        return Slope(int(self.slopes[tile]))

    def tile_height(self, tile: int) -> int:
        return int(self.heights[tile])

    def tile_owner(self, tile: int) -> int:
        return int(self.owners[tile])

    def is_tile_flat(self, tile: int) -> bool:
        return int(self.slopes[tile]) == Slope.FLAT

    def is_snow_tile(self, tile: int) -> bool:
        return self.tile_type(tile) == TileType.CLEAR and bool(self.snow[tile])

    def clear_ground(self, tile: int) -> ClearGround:
        if self.snow[tile]:
            return ClearGround.SNOW
        return ClearGround(int(self.grounds[tile]))

    def tree_ground(self, tile: int) -> TreeGround:
        return TreeGround(int(self.grounds[tile]))

    def density(self, tile: int) -> int:
        return int(self.densities[tile])

    def tropic_zone(self, tile: int) -> TropicZone:
        return TropicZone(int(self.tropic_zones[tile]))

    # Mutators

    def set_clear_ground_density(self, tile: int, ground: ClearGround, density: int) -> None:
        if ground == ClearGround.SNOW:
            self.snow[tile] = True
        else:
            self.snow[tile] = False
            self.grounds[tile] = ground
        self.densities[tile] = density

    def set_tree_ground_density(self, tile: int, ground: TreeGround, density: int) -> None:
        self.grounds[tile] = ground
        self.densities[tile] = density

    def make_clear(self, tile: int, ground: ClearGround, density: int) -> None:
        self._reset(tile, TileType.CLEAR, OWNER_NONE)
        self.set_clear_ground_density(tile, ground, density)

    def make_snow(self, tile: int, density: int) -> None:
        # Fields do not survive under snow.
        if self.types[tile] == TileType.CLEAR and self.grounds[tile] == ClearGround.FIELDS:
            self.grounds[tile] = ClearGround.GRASS
            self.field_types[tile] = 0
            self.industries[tile] = INVALID_INDUSTRY
        self.snow[tile] = True
        self.densities[tile] = density

    def make_field(self, tile: int, field_type: int, industry: int) -> None:
        self._reset(tile, TileType.CLEAR, OWNER_NONE)
        self.grounds[tile] = ClearGround.FIELDS
        self.densities[tile] = 3
        self.field_types[tile] = field_type
        self.industries[tile] = industry

    def make_canal(self, tile: int, owner: int, random_bits: int) -> None:
        self._make_water(tile, WaterClass.CANAL, owner, random_bits)

    def make_river(self, tile: int, random_bits: int) -> None:
        self._make_water(tile, WaterClass.RIVER, OWNER_WATER, random_bits)

    def make_sea(self, tile: int) -> None:
        self._make_water(tile, WaterClass.SEA, OWNER_WATER, 0)

    def set_tropic_zone(self, tile: int, zone: TropicZone) -> None:
        self.tropic_zones[tile] = zone

    def can_plant_trees_on_tile(self, tile: int, allow_desert: bool) -> bool:
        if self.tile_type(tile) != TileType.CLEAR:
            return False
        raw_ground = int(self.grounds[tile])
        if raw_ground in (ClearGround.FIELDS, ClearGround.ROCKS):
            return False
        return allow_desert or raw_ground != ClearGround.DESERT

    def plant_trees_on_tile(self, tile: int, tree_type: int, count: int, growth: int) -> None:
        """Turn a clear tile into a tree tile, carrying its ground over."""
        ground = self.clear_ground(tile)
        density = self.density(tile)

        if ground == ClearGround.GRASS:
            tree_ground = TreeGround.GRASS
        elif ground == ClearGround.ROUGH:
            tree_ground = TreeGround.ROUGH
        elif ground == ClearGround.SNOW:
            if self.grounds[tile] == ClearGround.ROUGH:
                tree_ground = TreeGround.ROUGH_SNOW
            else:
                tree_ground = TreeGround.SNOW_DESERT
        else:
            tree_ground = TreeGround.SNOW_DESERT

        self._reset(tile, TileType.TREES, OWNER_NONE)
        self.grounds[tile] = tree_ground
        self.densities[tile] = density
        self.tree_types[tile] = tree_type
        self.tree_counts[tile] = count
        self.tree_growth[tile] = growth

    def random_tree_type(self, tile: int, seed: int) -> int:
        """Pick a tree type for the landscape from an 8-bit seed."""
        if self.landscape == Landscape.TEMPERATE:
            return seed * TREE_COUNT_TEMPERATE // 256 + TREE_TEMPERATE
        if self.landscape == Landscape.ARCTIC:
            return seed * TREE_COUNT_SUB_ARCTIC // 256 + TREE_SUB_ARCTIC
        if self.landscape == Landscape.TROPIC:
            zone = self.tropic_zone(tile)
            if zone == TropicZone.NORMAL:
                return seed * TREE_COUNT_SUB_TROPICAL // 256 + TREE_SUB_TROPICAL
            if zone == TropicZone.DESERT:
                return TREE_INVALID if seed > 12 else TREE_CACTUS
            return seed * TREE_COUNT_RAINFOREST // 256 + TREE_RAINFOREST
        return seed * TREE_COUNT_TOYLAND // 256 + TREE_TOYLAND

    # Helpers

    def _reset(self, tile: int, tile_type: TileType, owner: int) -> None:
        self.types[tile] = tile_type
        self.owners[tile] = owner
        self.snow[tile] = False
        self.field_types[tile] = 0
        self.industries[tile] = INVALID_INDUSTRY
        self.tree_types[tile] = TREE_INVALID
        self.tree_counts[tile] = 0
        self.tree_growth[tile] = 0
        self.water_classes[tile] = WaterClass.INVALID
        self.random_bits[tile] = 0

    def _make_water(self, tile: int, water_class: WaterClass, owner: int, random_bits: int) -> None:
        self._reset(tile, TileType.WATER, owner)
        self.grounds[tile] = 0
        self.densities[tile] = 0
        self.water_classes[tile] = water_class
        self.random_bits[tile] = random_bits & 0xFF

    def type_counts(self) -> dict:
        """Number of tiles per tile type, for summaries."""
        values, counts = np.unique(self.types, return_counts=True)
        return {TileType(int(v)).name: int(c) for v, c in zip(values, counts)}
