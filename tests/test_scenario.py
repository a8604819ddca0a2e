"""Tests for the demo heist board and map file loading."""

import sys
import os
import json

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from heistcity.core.enums import GridType
from heistcity.core.grid import get_grid
from heistcity.engine.alert import compute_alert_level
from heistcity.engine.scenario import build_demo_map, load_map_file
from heistcity.engine.victory import find_deployment_zone


@pytest.mark.parametrize("grid_type", [GridType.HEX, GridType.SQUARE])
class TestDemoMap:
    def test_everything_in_bounds(self, grid_type):
        grid = get_grid(grid_type)
        board = build_demo_map(grid_type)
        for pos in [c.position for c in board.characters] + [it.position for it in board.items]:
            assert grid.in_bounds(pos), pos

    def test_ids_and_cells_unique(self, grid_type):
        board = build_demo_map(grid_type)
        ids = [c.id for c in board.characters] + [it.id for it in board.items]
        assert len(ids) == len(set(ids))
        cells = [c.position for c in board.characters] + [it.position for it in board.items]
        assert len(cells) == len(set(cells))

    def test_crews_start_in_their_zones(self, grid_type):
        board = build_demo_map(grid_type)
        for player in (1, 2):
            zone = find_deployment_zone(board.zones, player)
            assert zone is not None
            crew = [c for c in board.characters if c.player_number == player]
            assert len(crew) == 3
            assert all(zone.contains(c.position) for c in crew)

    def test_starts_quiet(self, grid_type):
        assert compute_alert_level(build_demo_map(grid_type)).level == 0


class TestMapFiles:
    def test_round_trip(self, tmp_path):
        board = build_demo_map()
        path = tmp_path / "heist.json"
        path.write_text(json.dumps(board.to_dict()), encoding="utf-8")
        assert load_map_file(path) == board

    def test_camel_case_fields(self, tmp_path):
        path = tmp_path / "tiny.json"
        path.write_text(json.dumps({
            "characters": [{
                "id": "x", "playerNumber": 2, "position": {"x": 1, "y": 2},
                "state": "Hidden", "stats": {"wounds": 3, "maxWounds": 6},
                "wasStunned": True, "actions": ["move", ""],
            }],
            "items": [{"id": "crate", "type": "gear", "position": {"x": 0, "y": 0}, "provideCover": True}],
        }), encoding="utf-8")
        board = load_map_file(str(path))
        char = board.character("x")
        assert char.stats.wounds == 3 and char.stats.max_wounds == 6
        assert char.was_stunned
        assert char.actions == ("move",)
        assert board.item("crate").grants_cover
        assert board.zones == ()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_map_file(tmp_path / "nope.json")
