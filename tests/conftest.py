"""
Pytest configuration and shared fixtures.
"""
import random
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent.parent))

from minesweeper import Board, Cell, Difficulty, Game, Position


# ============================================================================
# Test Doubles
# ============================================================================

class FixedLayout(random.Random):
    """Random source that always 'chooses' the given mine positions."""

    def __init__(self, mines: Iterable[Tuple[int, int]]) -> None:
        super().__init__(0)
        self.mines: List[Position] = [Position(row, col) for row, col in mines]

    def sample(self, population: Sequence, k: int, **kwargs) -> list:
        assert k == len(self.mines)
        assert all(mine in population for mine in self.mines)
        return list(self.mines)


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


def make_difficulty(rows: int, columns: int, mines: int) -> Difficulty:
    return Difficulty("Custom", rows, columns, mines)


def make_game(
    rows: int,
    columns: int,
    mines: Iterable[Tuple[int, int]],
    clock: FakeClock = None,
) -> Game:
    """Game whose first reveal places mines exactly at ``mines``."""
    layout = FixedLayout(mines)
    return Game(
        "game-1",
        "player-1",
        make_difficulty(rows, columns, len(layout.mines)),
        rng=layout,
        clock=clock or FakeClock(),
    )


def make_board(rows: int, columns: int, mines: Iterable[Tuple[int, int]]) -> Board:
    """Board with mines already placed at ``mines``, avoiding no particular cell."""
    layout = FixedLayout(mines)
    board = Board(make_difficulty(rows, columns, len(layout.mines)), layout)
    free = next(
        cell.position for cell in board.all_cells() if cell.position not in layout.mines
    )
    board.place_mines(free)
    return board


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def beginner_board() -> Board:
    """Create a beginner difficulty board with a seeded random source."""
    return Board(Difficulty("Beginner", 9, 9, 10), random.Random(42))


@pytest.fixture
def corner_mine_board() -> Board:
    """
    4x4 board with a single mine in the bottom-right corner.

        0 0 0 0
        0 0 0 0
        0 0 1 1
        0 0 1 *
    """
    return make_board(4, 4, [(3, 3)])


@pytest.fixture
def split_board() -> Board:
    """
    5x5 board with a wall of mines down column 2.

        0 2 * 2 0
        0 3 * 3 0
        0 3 * 3 0
        0 3 * 3 0
        0 2 * 2 0
    """
    return make_board(5, 5, [(row, 2) for row in range(5)])


# ============================================================================
# Cell Fixtures
# ============================================================================

@pytest.fixture
def hidden_cell() -> Cell:
    """Create a hidden cell."""
    return Cell(Position(0, 0))


@pytest.fixture
def mine_cell() -> Cell:
    """Create a cell containing a mine."""
    return Cell(Position(0, 0), is_mine=True)


# ============================================================================
# Game Fixtures
# ============================================================================

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def beginner_game(clock: FakeClock) -> Game:
    """Beginner game with a fixed seed and fake clock."""
    return Game(
        "game-1",
        "player-1",
        Difficulty("Beginner", 9, 9, 10),
        rng=random.Random(1234),
        clock=clock,
    )


@pytest.fixture
def corner_game(clock: FakeClock) -> Game:
    """4x4 game with one mine at (3, 3)."""
    return make_game(4, 4, [(3, 3)], clock)
