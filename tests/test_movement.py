"""Tests for ship reachability and move validation."""

import pytest

from models import CoreColor, Terrain
from movement import MovementSystem, PossibleMove
from conftest import make_sea_map, sea_color, set_land


def coords(tiles):
    return {(tile.q, tile.r) for tile in tiles}


class TestReachableSeaTiles:
    @pytest.mark.parametrize("move_range,count", [(0, 0), (1, 6), (2, 18), (3, 36)])
    def test_open_sea_rings(self, sea_map, move_range, count):
        movement = MovementSystem(sea_map)
        assert len(movement.reachable_sea_tiles((0, 0), move_range)) == count

    def test_origin_excluded(self, sea_map):
        movement = MovementSystem(sea_map)
        assert (1, 0) not in coords(movement.reachable_sea_tiles((1, 0), 2))

    def test_tiles_carry_color(self, sea_map):
        for tile in MovementSystem(sea_map).reachable_sea_tiles((0, 0), 2):
            assert tile.color == sea_color(tile.q, tile.r)

    def test_land_blocks_movement(self, sea_map):
        for q, r in [(1, -1), (0, 1), (-1, 1), (-1, 0), (0, -1)]:
            set_land(sea_map, (q, r), Terrain.CITY, CoreColor.RED)
        movement = MovementSystem(sea_map)
        assert coords(movement.reachable_sea_tiles((0, 0), 1)) == {(1, 0)}
        assert coords(movement.reachable_sea_tiles((0, 0), 2)) == {(1, 0), (2, -1), (2, 0), (1, 1)}

    def test_shallows_block_movement(self, sea_map):
        set_land(sea_map, (1, 0), Terrain.SHALLOW)
        reachable = coords(MovementSystem(sea_map).reachable_sea_tiles((0, 0), 1))
        assert (1, 0) not in reachable
        assert len(reachable) == 5

    def test_monotonic_in_range(self):
        hex_map = make_sea_map(radius=5)
        set_land(hex_map, (2, 0), Terrain.TEMPLE, CoreColor.BLUE)
        set_land(hex_map, (0, 2), Terrain.SHALLOW)
        movement = MovementSystem(hex_map)
        for origin in [(0, 0), (3, -1), (-2, 4)]:
            for move_range in range(6):
                smaller = coords(movement.reachable_sea_tiles(origin, move_range))
                larger = coords(movement.reachable_sea_tiles(origin, move_range + 1))
                assert smaller <= larger


class TestValidateMove:
    def test_valid_move(self, sea_map):
        movement = MovementSystem(sea_map)
        assert movement.validate_move((0, 0), (1, 0), CoreColor.PINK, 3) == (True, None)

    def test_destination_missing(self, sea_map):
        is_valid, reason = MovementSystem(sea_map).validate_move((0, 0), (9, 9), CoreColor.PINK, 3)
        assert not is_valid
        assert "does not exist" in reason

    def test_destination_not_sea(self, sea_map):
        set_land(sea_map, (1, 0), Terrain.OFFERINGS)
        is_valid, reason = MovementSystem(sea_map).validate_move((0, 0), (1, 0), CoreColor.PINK, 3)
        assert not is_valid
        assert "not sea" in reason

    def test_wrong_color(self, sea_map):
        is_valid, reason = MovementSystem(sea_map).validate_move((0, 0), (1, 0), CoreColor.RED, 3)
        assert not is_valid
        assert "needs red" in reason

    def test_out_of_range(self, sea_map):
        # (3, 0) is yellow and three hops away
        movement = MovementSystem(sea_map)
        assert movement.validate_move((0, 0), (3, 0), CoreColor.YELLOW, 3)[0]
        is_valid, reason = movement.validate_move((0, 0), (3, 0), CoreColor.YELLOW, 2)
        assert not is_valid
        assert "not within 2" in reason


class TestAvailableMoves:
    def test_moves_for_color(self, sea_map):
        moves = MovementSystem(sea_map).get_available_moves_for_color((0, 0), CoreColor.PINK)
        assert all(move.color == CoreColor.PINK for move in moves)
        assert all(move.favor_cost == 0 for move in moves)
        assert {(1, 0), (0, -1)} <= {(move.q, move.r) for move in moves}

    def test_minimal_favor_recorded(self):
        hex_map = make_sea_map(radius=4)
        movement = MovementSystem(hex_map)
        # (4, -3) is pink and four hops away
        assert (4, -3) not in {(m.q, m.r) for m in movement.get_available_moves_for_color((0, 0), CoreColor.PINK)}
        moves = movement.get_available_moves_for_color((0, 0), CoreColor.PINK, base_range=3, max_favor=2)
        by_coords = {(m.q, m.r): m for m in moves}
        assert by_coords[(4, -3)] == PossibleMove(4, -3, CoreColor.PINK, 1)
        assert by_coords[(1, 0)].favor_cost == 0

    def test_origin_never_offered(self, sea_map):
        moves = MovementSystem(sea_map).get_available_moves_for_color((1, 0), CoreColor.PINK, max_favor=3)
        assert (1, 0) not in {(m.q, m.r) for m in moves}

    def test_each_destination_once(self, sea_map):
        moves = MovementSystem(sea_map).get_available_moves_for_color((0, 0), CoreColor.BLUE, max_favor=3)
        destinations = [(m.q, m.r) for m in moves]
        assert len(destinations) == len(set(destinations))
