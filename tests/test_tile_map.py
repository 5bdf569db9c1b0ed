"""Tests for the in-memory tile map."""

import numpy as np
import pytest

from py_rastermap.core.tile_map import ArrayTileMap, TileMapConfig
from py_rastermap.core.tiles import (
    ClearGround,
    INVALID_INDUSTRY,
    Landscape,
    OWNER_NONE,
    TileType,
    TreeGround,
    TropicZone,
    TREE_CACTUS,
    TREE_INVALID,
    TREE_RAINFOREST,
    TREE_SUB_ARCTIC,
    TREE_SUB_TROPICAL,
    TREE_TEMPERATE,
    TREE_TOYLAND,
)


@pytest.fixture
def tile_map():
    return ArrayTileMap(TileMapConfig(size_x=6, size_y=5))


class TestGeometry:

    def test_tile_index(self, tile_map):
        tile = tile_map.tile_xy(4, 3)
        assert tile == 3 * 6 + 4
        assert (tile_map.tile_x(tile), tile_map.tile_y(tile)) == (4, 3)

    def test_border_is_void(self, tile_map):
        assert tile_map.tile_type(tile_map.tile_xy(0, 2)) == TileType.VOID
        assert tile_map.tile_type(tile_map.tile_xy(5, 2)) == TileType.VOID
        assert tile_map.tile_type(tile_map.tile_xy(2, 4)) == TileType.VOID
        assert tile_map.tile_type(tile_map.tile_xy(2, 2)) == TileType.CLEAR

    def test_inner_tiles(self, tile_map):
        inner = [t for t in range(6 * 5) if tile_map.is_inner_tile(t)]
        assert len(inner) == 4 * 3
        assert np.all(tile_map.types[inner] == TileType.CLEAR)

    @pytest.mark.parametrize("size", [(2, 8), (8, 2), (0, 0)])
    def test_invalid_size(self, size):
        with pytest.raises(ValueError):
            ArrayTileMap(TileMapConfig(size_x=size[0], size_y=size[1]))


class TestGround:

    def test_snow_keeps_raw_ground(self, tile_map):
        tile = tile_map.tile_xy(1, 1)
        tile_map.set_clear_ground_density(tile, ClearGround.ROUGH, 3)
        tile_map.make_snow(tile, 2)

        assert tile_map.clear_ground(tile) == ClearGround.SNOW
        assert int(tile_map.grounds[tile]) == ClearGround.ROUGH

    def test_snow_turns_fields_to_grass(self, tile_map):
        tile = tile_map.tile_xy(2, 2)
        tile_map.make_field(tile, 4, 7)
        tile_map.make_snow(tile, 1)

        assert tile_map.clear_ground(tile) == ClearGround.SNOW
        assert int(tile_map.grounds[tile]) == ClearGround.GRASS
        assert int(tile_map.field_types[tile]) == 0
        assert int(tile_map.industries[tile]) == INVALID_INDUSTRY
        assert tile_map.can_plant_trees_on_tile(tile, allow_desert=False)

    def test_field_resets_tile(self, tile_map):
        tile = tile_map.tile_xy(1, 1)
        tile_map.plant_trees_on_tile(tile, TREE_TEMPERATE, 2, 1)
        tile_map.make_field(tile, 4, 7)

        assert tile_map.tile_type(tile) == TileType.CLEAR
        assert tile_map.clear_ground(tile) == ClearGround.FIELDS
        assert int(tile_map.tree_types[tile]) == TREE_INVALID
        assert int(tile_map.industries[tile]) == 7


class TestTrees:

    def test_plant_carries_rough_snow(self, tile_map):
        tile = tile_map.tile_xy(2, 2)
        tile_map.set_clear_ground_density(tile, ClearGround.ROUGH, 3)
        tile_map.make_snow(tile, 1)

        tile_map.plant_trees_on_tile(tile, TREE_TEMPERATE, 1, 0)

        assert tile_map.tile_type(tile) == TileType.TREES
        assert tile_map.tree_ground(tile) == TreeGround.ROUGH_SNOW
        assert tile_map.density(tile) == 1
        assert tile_map.tile_owner(tile) == OWNER_NONE

    def test_can_plant(self, tile_map):
        grass, desert, rocks, fields = (tile_map.tile_xy(x, 1) for x in range(1, 5))
        tile_map.set_clear_ground_density(desert, ClearGround.DESERT, 3)
        tile_map.set_clear_ground_density(rocks, ClearGround.ROCKS, 3)
        tile_map.make_field(fields, 0, 0)

        assert tile_map.can_plant_trees_on_tile(grass, False)
        assert tile_map.can_plant_trees_on_tile(desert, True)
        assert not tile_map.can_plant_trees_on_tile(desert, False)
        assert not tile_map.can_plant_trees_on_tile(rocks, True)
        assert not tile_map.can_plant_trees_on_tile(fields, True)
        assert not tile_map.can_plant_trees_on_tile(tile_map.tile_xy(0, 0), True)

    @pytest.mark.parametrize(
        "landscape,zone,seed,expected",
        [
            (Landscape.TEMPERATE, TropicZone.NORMAL, 0, TREE_TEMPERATE),
            (Landscape.TEMPERATE, TropicZone.NORMAL, 255, TREE_TEMPERATE + 11),
            (Landscape.ARCTIC, TropicZone.NORMAL, 255, TREE_SUB_ARCTIC + 7),
            (Landscape.TROPIC, TropicZone.NORMAL, 0, TREE_SUB_TROPICAL),
            (Landscape.TROPIC, TropicZone.RAINFOREST, 255, TREE_RAINFOREST + 6),
            (Landscape.TROPIC, TropicZone.DESERT, 12, TREE_CACTUS),
            (Landscape.TROPIC, TropicZone.DESERT, 13, TREE_INVALID),
            (Landscape.TOYLAND, TropicZone.NORMAL, 255, TREE_TOYLAND + 8),
        ],
    )
    def test_random_tree_type(self, landscape, zone, seed, expected):
        tile_map = ArrayTileMap(TileMapConfig(size_x=4, size_y=4, landscape=landscape))
        tile = tile_map.tile_xy(1, 1)
        tile_map.set_tropic_zone(tile, zone)

        assert tile_map.random_tree_type(tile, seed) == expected


class TestSummary:

    def test_type_counts(self, tile_map):
        tile_map.make_sea(tile_map.tile_xy(1, 1))

        counts = tile_map.type_counts()

        assert counts["WATER"] == 1
        assert counts["CLEAR"] == 11
        assert counts["VOID"] == 30 - 12
