"""
Unit tests for Board class.

Tests mine placement, cascade reveal, flag bookkeeping, the win condition
and observation generation.
"""
import random

import numpy as np
import pytest
from minesweeper import Board, CellState, Difficulty, ErrorKind, Position

from conftest import FixedLayout, make_board


def count_mines(board: Board) -> int:
    return sum(1 for cell in board.all_cells() if cell.is_mine)


# ============================================================================
# Board Initialization Tests
# ============================================================================

class TestBoardInitialization:
    """Test board creation and initial state."""

    def test_grid_matches_dimensions(self) -> None:
        board = Board(Difficulty("Custom", 3, 5, 2))
        cells = list(board.all_cells())
        assert len(cells) == 15
        assert cells[-1].position == Position(2, 4)

    def test_new_board_all_cells_hidden_without_mines(self, beginner_board: Board) -> None:
        assert all(cell.is_hidden for cell in beginner_board.all_cells())
        assert count_mines(beginner_board) == 0
        assert beginner_board.mines_placed is False

    def test_get_cell_out_of_bounds_returns_none(self, beginner_board: Board) -> None:
        assert beginner_board.get_cell(Position(9, 0)) is None
        assert beginner_board.get_cell(Position(8, 8)) is not None

    def test_neighbors_are_bounds_filtered(self, beginner_board: Board) -> None:
        assert len(beginner_board.neighbors(Position(0, 0))) == 3
        assert len(beginner_board.neighbors(Position(8, 4))) == 5
        assert len(beginner_board.neighbors(Position(4, 4))) == 8


# ============================================================================
# Mine Placement Tests
# ============================================================================

class TestPlaceMines:
    """Test mine placement and adjacency counts."""

    @pytest.mark.parametrize("difficulty", Difficulty.presets())
    def test_places_exact_mine_count(self, difficulty: Difficulty) -> None:
        board = Board(difficulty, random.Random(7))
        assert board.place_mines(Position(0, 0)).ok
        assert count_mines(board) == difficulty.mine_count

    def test_excluded_position_never_gets_a_mine(self) -> None:
        """The densest legal board still leaves the first click safe."""
        difficulty = Difficulty("Dense", 3, 3, 7)
        for seed in range(50):
            for row in range(3):
                for col in range(3):
                    board = Board(difficulty, random.Random(seed))
                    board.place_mines(Position(row, col))
                    assert board.get_cell(Position(row, col)).is_mine is False

    def test_adjacent_counts_are_exact(self, beginner_board: Board) -> None:
        beginner_board.place_mines(Position(4, 4))
        for cell in beginner_board.all_cells():
            if cell.is_mine:
                continue
            expected = sum(
                1 for neighbor in beginner_board.neighbors(cell.position)
                if beginner_board.get_cell(neighbor).is_mine
            )
            assert cell.adjacent_mines == expected

    def test_split_board_counts(self, split_board: Board) -> None:
        observation = [
            [split_board.get_cell(Position(r, c)).adjacent_mines for c in (0, 1, 3, 4)]
            for r in range(5)
        ]
        assert observation[0] == [0, 2, 2, 0]
        assert observation[2] == [0, 3, 3, 0]

    def test_placement_is_idempotent(self, beginner_board: Board) -> None:
        beginner_board.place_mines(Position(0, 0))
        before = beginner_board.mine_positions()
        assert beginner_board.place_mines(Position(5, 5)).ok
        assert beginner_board.mine_positions() == before

    def test_same_seed_same_layout(self) -> None:
        first = Board(Difficulty("Beginner", 9, 9, 10), random.Random(99))
        second = Board(Difficulty("Beginner", 9, 9, 10), random.Random(99))
        first.place_mines(Position(4, 4))
        second.place_mines(Position(4, 4))
        assert first.mine_positions() == second.mine_positions()

    def test_invalid_exclusion_fails(self, beginner_board: Board) -> None:
        result = beginner_board.place_mines(Position(20, 0))
        assert result.kind == ErrorKind.INVALID_INPUT
        assert beginner_board.mines_placed is False

    def test_protect_neighbors_keeps_neighbourhood_clear(self) -> None:
        for seed in range(20):
            board = Board(Difficulty("Custom", 9, 9, 40), random.Random(seed))
            board.place_mines(Position(4, 4), protect_neighbors=True)
            clear = [Position(4, 4)] + board.neighbors(Position(4, 4))
            assert not any(board.get_cell(p).is_mine for p in clear)
            assert board.get_cell(Position(4, 4)).adjacent_mines == 0

    def test_protect_neighbors_falls_back_when_board_is_too_dense(self) -> None:
        board = Board(Difficulty("Dense", 3, 3, 7), random.Random(3))
        assert board.place_mines(Position(1, 1), protect_neighbors=True).ok
        assert count_mines(board) == 7
        assert board.get_cell(Position(1, 1)).is_mine is False


# ============================================================================
# Reveal Tests
# ============================================================================

class TestReveal:
    """Test cell revealing behavior."""

    def test_reveal_before_mines_placed_fails(self, beginner_board: Board) -> None:
        result = beginner_board.reveal_cell(Position(0, 0))
        assert result.kind == ErrorKind.ILLEGAL_STATE

    def test_reveal_out_of_bounds_fails(self, corner_mine_board: Board) -> None:
        result = corner_mine_board.reveal_cell(Position(0, 4))
        assert result.kind == ErrorKind.INVALID_INPUT

    def test_reveal_numbered_cell_reveals_only_itself(self, corner_mine_board: Board) -> None:
        result = corner_mine_board.reveal_cell(Position(2, 2))
        assert result.value == [Position(2, 2)]
        assert corner_mine_board.revealed_count == 1

    def test_reveal_already_revealed_is_noop(self, corner_mine_board: Board) -> None:
        corner_mine_board.reveal_cell(Position(2, 2))
        result = corner_mine_board.reveal_cell(Position(2, 2))
        assert result.ok and result.value == []
        assert corner_mine_board.revealed_count == 1

    def test_reveal_flagged_cell_fails(self, corner_mine_board: Board) -> None:
        corner_mine_board.toggle_flag(Position(1, 1))
        result = corner_mine_board.reveal_cell(Position(1, 1))
        assert result.kind == ErrorKind.ILLEGAL_STATE
        assert corner_mine_board.get_cell(Position(1, 1)).is_flagged
        assert corner_mine_board.revealed_count == 0

    def test_reveal_questioned_cell_fails(self, corner_mine_board: Board) -> None:
        corner_mine_board.toggle_question(Position(1, 1))
        assert corner_mine_board.reveal_cell(Position(1, 1)).failed

    def test_reveal_mine_returns_mine_position(self, corner_mine_board: Board) -> None:
        result = corner_mine_board.reveal_cell(Position(3, 3))
        assert result.value == [Position(3, 3)]
        assert corner_mine_board.is_any_mine_revealed()


# ============================================================================
# Cascade Reveal Tests
# ============================================================================

class TestCascadeReveal:
    """Test empty cell cascade behavior."""

    def test_cascade_reveals_every_safe_cell(self, corner_mine_board: Board) -> None:
        result = corner_mine_board.reveal_cell(Position(0, 0))
        assert len(result.value) == 15
        assert result.value[0] == Position(0, 0)
        assert len(set(result.value)) == 15
        assert corner_mine_board.revealed_count == 15
        assert corner_mine_board.get_cell(Position(3, 3)).is_hidden

    def test_cascade_stops_at_numbered_border(self, split_board: Board) -> None:
        """The left region and its numbered border open; nothing past the wall."""
        split_board.reveal_cell(Position(2, 0))
        revealed = {c.position for c in split_board.all_cells() if c.is_revealed}
        expected = {Position(r, c) for r in range(5) for c in (0, 1)}
        assert revealed == expected

    def test_cascade_skips_flagged_and_questioned_cells(self, corner_mine_board: Board) -> None:
        corner_mine_board.toggle_flag(Position(0, 3))
        corner_mine_board.toggle_question(Position(3, 0))
        result = corner_mine_board.reveal_cell(Position(0, 0))
        assert Position(0, 3) not in result.value
        assert Position(3, 0) not in result.value
        assert corner_mine_board.get_cell(Position(0, 3)).state == CellState.FLAGGED
        assert corner_mine_board.get_cell(Position(3, 0)).state == CellState.QUESTIONED
        assert len(result.value) == 13

    def test_cascade_on_large_open_board(self) -> None:
        """Iterative fill handles boards far beyond the recursion limit."""
        board = make_board(100, 100, [(99, 99)])
        result = board.reveal_cell(Position(0, 0))
        assert len(result.value) == 100 * 100 - 1
        assert board.is_game_won()


# ============================================================================
# Flag / Question Tests
# ============================================================================

class TestMarks:
    """Test flag bookkeeping."""

    def test_flag_and_unflag_updates_count(self, beginner_board: Board) -> None:
        assert beginner_board.toggle_flag(Position(0, 0)).value is True
        assert beginner_board.flagged_count == 1
        assert beginner_board.toggle_flag(Position(0, 0)).value is False
        assert beginner_board.flagged_count == 0

    def test_question_over_flag_decrements_count(self, beginner_board: Board) -> None:
        beginner_board.toggle_flag(Position(0, 0))
        assert beginner_board.toggle_question(Position(0, 0)).value is True
        assert beginner_board.flagged_count == 0
        beginner_board.toggle_flag(Position(0, 0))
        assert beginner_board.flagged_count == 1

    def test_flag_revealed_cell_fails(self, corner_mine_board: Board) -> None:
        corner_mine_board.reveal_cell(Position(2, 2))
        result = corner_mine_board.toggle_flag(Position(2, 2))
        assert result.kind == ErrorKind.ILLEGAL_STATE
        assert result.error == "Cannot flag a revealed cell"
        assert corner_mine_board.toggle_question(Position(2, 2)).failed

    def test_flag_out_of_bounds_fails(self, beginner_board: Board) -> None:
        assert beginner_board.toggle_flag(Position(9, 9)).kind == ErrorKind.INVALID_INPUT


# ============================================================================
# Win / Loss Display Tests
# ============================================================================

class TestEndConditions:
    """Test win detection and mine exposure."""

    def test_not_won_until_every_safe_cell_revealed(self, split_board: Board) -> None:
        split_board.reveal_cell(Position(0, 0))
        assert split_board.is_game_won() is False
        split_board.reveal_cell(Position(0, 4))
        assert split_board.is_game_won() is True

    def test_won_regardless_of_mine_flags(self, corner_mine_board: Board) -> None:
        corner_mine_board.toggle_flag(Position(3, 3))
        corner_mine_board.reveal_cell(Position(0, 0))
        assert corner_mine_board.is_game_won() is True

    def test_reveal_all_mines_only_touches_mines(self, split_board: Board) -> None:
        split_board.toggle_flag(Position(0, 2))
        split_board.reveal_all_mines()
        for cell in split_board.all_cells():
            assert cell.is_revealed is cell.is_mine
        assert split_board.revealed_count == 0
        assert split_board.flagged_count == 1


# ============================================================================
# Observation Tests
# ============================================================================

class TestObservation:
    """Test observation array and rendering."""

    def test_observation_shape_and_dtype(self) -> None:
        board = Board(Difficulty("Custom", 4, 6, 3))
        obs = board.get_observation()
        assert obs.shape == (4, 6)
        assert obs.dtype == np.int8
        assert np.all(obs == -1)

    def test_observation_reflects_marks_and_counts(self, corner_mine_board: Board) -> None:
        corner_mine_board.toggle_flag(Position(0, 0))
        corner_mine_board.toggle_question(Position(0, 1))
        corner_mine_board.reveal_cell(Position(2, 2))
        obs = corner_mine_board.get_observation()
        assert obs[0, 0] == -2
        assert obs[0, 1] == -3
        assert obs[2, 2] == 1

    def test_hidden_positions(self, corner_mine_board: Board) -> None:
        corner_mine_board.reveal_cell(Position(2, 2))
        corner_mine_board.toggle_flag(Position(0, 0))
        hidden = corner_mine_board.hidden_positions()
        assert len(hidden) == 14
        assert Position(2, 2) not in hidden

    def test_render(self, corner_mine_board: Board) -> None:
        corner_mine_board.reveal_cell(Position(0, 0))
        assert corner_mine_board.render().splitlines() == [
            "       ",
            "       ",
            "    1 1",
            "    1 .",
        ]


# ============================================================================
# Rehydration Tests
# ============================================================================

class TestFromCells:
    """Test rebuilding boards from cells."""

    def test_counters_are_recomputed(self, corner_mine_board: Board) -> None:
        corner_mine_board.reveal_cell(Position(2, 2))
        corner_mine_board.toggle_flag(Position(3, 3))
        rebuilt = Board.from_cells(
            corner_mine_board.difficulty, corner_mine_board.all_cells(), True,
        )
        assert rebuilt.revealed_count == 1
        assert rebuilt.flagged_count == 1
        assert rebuilt.mine_positions() == [Position(3, 3)]


def test_fixed_layout_rejects_wrong_count() -> None:
    """Guard for the layout double itself."""
    with pytest.raises(AssertionError):
        FixedLayout([(0, 0)]).sample([Position(0, 0)], 2)
