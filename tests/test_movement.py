"""Tests for movement budgets and move validation."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from heistcity.core.enums import GridType, MoveKind
from heistcity.core.equipment import EquipmentItem, StatBonus, register_equipment
from heistcity.core.models import Position
from heistcity.spatial.movement import get_effective_movement, validate_move, validate_move_and_attack
from heistcity.systems.spatial_index import build_wall_map
from tests.helpers.board import make_board, make_character, wall

register_equipment(EquipmentItem(id="test-sneakers", stat_bonus=StatBonus(movement=1)))


class TestMovementBudget:
    def test_budgets_from_base_movement(self):
        runner = make_character("r")
        assert get_effective_movement(runner) == 4
        assert get_effective_movement(runner, MoveKind.HUSTLE) == 10
        assert get_effective_movement(runner, MoveKind.SPRINT) == 16

    def test_fixed_budgets(self):
        runner = make_character("r", movement=9)
        assert get_effective_movement(runner, MoveKind.NINJA_VANISH) == 3
        assert get_effective_movement(runner, MoveKind.CQC_TECHNIQUE) == 3
        assert get_effective_movement(runner, MoveKind.MOVE_IT_ALONG) == 1
        assert get_effective_movement(runner, MoveKind.ALL_ACCORDING_TO_PLAN) == 1

    def test_equipment_adds_movement(self):
        runner = make_character("r", equipment=("test-sneakers",))
        assert get_effective_movement(runner) == 5
        assert get_effective_movement(runner, MoveKind.HUSTLE) == 12


class TestValidateMove:
    def _validate(self, board, char_id, dest, kind=MoveKind.MOVE):
        return validate_move(
            board.character(char_id), Position(*dest), build_wall_map(board), board, GridType.HEX, kind,
        )

    def test_move_within_budget(self):
        board = make_board([make_character("r")])
        result = self._validate(board, "r", (4, 0))
        assert result.valid
        assert result.distance == 4
        assert result.path[0] == Position(0, 0)
        assert result.path[-1] == Position(4, 0)

    def test_move_beyond_budget(self):
        board = make_board([make_character("r")])
        result = self._validate(board, "r", (5, 0))
        assert not result.valid
        assert "not reachable within 4" in result.reason

    def test_sprint_goes_further(self):
        board = make_board([make_character("r")])
        assert self._validate(board, "r", (10, 0), MoveKind.SPRINT).valid

    def test_out_of_bounds(self):
        board = make_board([make_character("r", pos=(14, 0))])
        result = self._validate(board, "r", (16, 0))
        assert not result.valid
        assert "out of bounds" in result.reason

    def test_blocked_destination(self):
        board = make_board([make_character("r")], [wall("w", (2, 0))])
        result = self._validate(board, "r", (2, 0))
        assert not result.valid
        assert "blocked" in result.reason

    def test_occupied_destination(self):
        board = make_board([make_character("r"), make_character("o", pos=(2, 0))])
        result = self._validate(board, "r", (2, 0))
        assert not result.valid
        assert "occupied" in result.reason

    def test_staying_put_is_valid(self):
        board = make_board([make_character("r")])
        result = self._validate(board, "r", (0, 0))
        assert result.valid
        assert result.distance == 0

    def test_detour_counts_against_budget(self):
        # Wall forces a three-step route to a cell two steps away.
        board = make_board([make_character("r", movement=2)], [wall("w", (1, 0))])
        assert not self._validate(board, "r", (2, 0)).valid
        board = make_board([make_character("r", movement=3)], [wall("w", (1, 0))])
        assert self._validate(board, "r", (2, 0)).valid


class TestMoveAndAttack:
    def _board(self):
        return make_board([make_character("r"), make_character("t", player=2, pos=(4, 0))])

    def test_cqc_into_contact(self):
        board = self._board()
        result = validate_move_and_attack(
            board.character("r"), Position(3, 0), Position(4, 0), build_wall_map(board), board, GridType.HEX,
        )
        assert result.valid
        assert result.distance == 3

    def test_target_not_adjacent_after_move(self):
        board = self._board()
        result = validate_move_and_attack(
            board.character("r"), Position(2, 0), Position(4, 0), build_wall_map(board), board, GridType.HEX,
        )
        assert not result.valid
        assert "must be adjacent" in result.reason

    def test_requires_cqc_kind(self):
        board = self._board()
        result = validate_move_and_attack(
            board.character("r"), Position(3, 0), Position(4, 0), build_wall_map(board), board,
            GridType.HEX, MoveKind.MOVE,
        )
        assert not result.valid
        assert "cqc-technique" in result.reason
