"""
Board module for Minesweeper game.

Implements the game board with mine placement, cascading reveals,
flag bookkeeping and the win condition. The board knows nothing about
game status or timing; the Game aggregate inspects its return values.
"""
import logging
import random
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Iterable, Iterator, List, Optional, Set

import numpy as np

from .cell import Cell, CellState
from .difficulty import Difficulty, BEGINNER
from .position import Position
from .result import Result

logger = logging.getLogger(__name__)


# ============================================================================
# Board Class
# ============================================================================

@dataclass
class Board:
    """
    Minesweeper game board.

    The grid is allocated up front with every cell hidden and mine-free;
    mines are placed later, exactly once, by ``place_mines``.
    """

    difficulty: Difficulty = BEGINNER
    rng: random.Random = field(default_factory=random.Random, repr=False)
    _grid: List[List[Cell]] = field(default_factory=list, repr=False)
    _mines_placed: bool = False
    _revealed_count: int = 0
    _flagged_count: int = 0

    def __post_init__(self) -> None:
        """Initialize the grid after dataclass creation."""
        if not self._grid:
            self._init_grid()

    # ========================================================================
    # Grid Initialization (Low-level)
    # ========================================================================

    def _init_grid(self) -> None:
        """Create empty grid of cells."""
        self._grid = [
            [Cell(Position(row, col)) for col in range(self.difficulty.columns)]
            for row in range(self.difficulty.rows)
        ]

    @classmethod
    def from_cells(
        cls,
        difficulty: Difficulty,
        cells: Iterable[Cell],
        mines_placed: bool,
        rng: Optional[random.Random] = None,
    ) -> "Board":
        """
        Rebuild a board from row-major cells.

        The caller guarantees the cell count matches the difficulty; the
        revealed and flagged counters are recomputed from cell states.
        """
        cells = list(cells)
        grid = [
            cells[row * difficulty.columns:(row + 1) * difficulty.columns]
            for row in range(difficulty.rows)
        ]
        board = cls(difficulty, rng or random.Random(), grid, mines_placed)
        # Mines exposed for the loss display are not counted; only the one
        # that ended the game was revealed by play.
        board._revealed_count = board.revealed_safe_count() + (
            1 if board.is_any_mine_revealed() else 0
        )
        board._flagged_count = sum(
            1 for cell in board.all_cells() if cell.is_flagged
        )
        return board

    # ========================================================================
    # Mine Placement (Low-level)
    # ========================================================================

    def place_mines(
        self, exclude: Position, protect_neighbors: bool = False
    ) -> Result[None]:
        """
        Place mines randomly, keeping ``exclude`` mine-free.

        Does nothing if mines were already placed.

        Args:
            exclude: Position to keep mine-free (the first click).
            protect_neighbors: Also keep the neighbours of ``exclude``
                mine-free when the board has room for it.

        Returns:
            Success, or an invalid-input failure for an off-board position.
        """
        if self._mines_placed:
            return Result.success()
        if not self.is_valid_position(exclude):
            return Result.invalid(f"First click position {exclude} is invalid")

        excluded = {exclude}
        if protect_neighbors:
            excluded.update(self.neighbors(exclude))
        positions = self._get_valid_mine_positions(excluded)
        if len(positions) < self.difficulty.mine_count:
            logger.debug(
                "Not enough room to protect neighbours of %s, protecting the cell only",
                exclude,
            )
            positions = self._get_valid_mine_positions({exclude})

        mine_positions = self.rng.sample(positions, self.difficulty.mine_count)
        for position in mine_positions:
            self._cell_at(position).place_mine()
        self._calculate_adjacent_mines()
        self._mines_placed = True

        logger.debug(
            "Placed %d mines on %dx%d board avoiding %s",
            len(mine_positions), self.difficulty.rows, self.difficulty.columns, exclude,
        )
        return Result.success()

    def _get_valid_mine_positions(self, excluded: Set[Position]) -> List[Position]:
        """Get all valid positions for mine placement, in row-major order."""
        return [
            cell.position for cell in self.all_cells()
            if cell.position not in excluded
        ]

    def _calculate_adjacent_mines(self) -> None:
        """Calculate adjacent mine counts for all non-mine cells."""
        for cell in self.all_cells():
            if not cell.is_mine:
                cell.set_adjacent_mines(self._count_adjacent_mines(cell.position))

    def _count_adjacent_mines(self, position: Position) -> int:
        """Count mines adjacent to a specific cell."""
        return sum(
            1 for neighbor in self.neighbors(position)
            if self._cell_at(neighbor).is_mine
        )

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def neighbors(self, position: Position) -> List[Position]:
        """Get in-bounds neighbouring positions."""
        return [
            neighbor for neighbor in position.neighbors()
            if self.is_valid_position(neighbor)
        ]

    def is_valid_position(self, position: Position) -> bool:
        """Check if position is within board bounds."""
        return position.is_within_bounds(self.difficulty.rows, self.difficulty.columns)

    def _cell_at(self, position: Position) -> Cell:
        return self._grid[position.row][position.column]

    # ========================================================================
    # Cell Actions (Mid-level)
    # ========================================================================

    def reveal_cell(self, position: Position) -> Result[List[Position]]:
        """
        Reveal a cell, cascading through empty regions.

        Returns:
            Result with the positions newly revealed by this call, in
            reveal order. The list is empty if the cell was already
            revealed. Flagged and questioned cells must be cleared
            before they can be revealed.
        """
        if not self.is_valid_position(position):
            return Result.invalid(f"Position {position} is outside the board")
        if not self._mines_placed:
            return Result.illegal("Mines have not been placed yet")

        cell = self._cell_at(position)
        if cell.is_revealed:
            return Result.success([])
        if not cell.reveal():
            return Result.illegal(f"Cannot reveal a {cell.state.value} cell")

        self._revealed_count += 1
        revealed = [position]
        if not cell.is_mine and cell.adjacent_mines == 0:
            revealed.extend(self._cascade_reveal(position))
        return Result.success(revealed)

    def _cascade_reveal(self, start: Position) -> List[Position]:
        """
        Breadth-first flood fill from an empty cell.

        Numbered cells are revealed but not expanded; flagged and
        questioned cells are left untouched.
        """
        revealed: List[Position] = []
        queue: Deque[Position] = deque([start])
        visited: Set[Position] = {start}

        while queue:
            current = queue.popleft()
            for neighbor in self.neighbors(current):
                if neighbor in visited:
                    continue
                visited.add(neighbor)
                cell = self._cell_at(neighbor)
                if not cell.reveal():
                    continue
                self._revealed_count += 1
                revealed.append(neighbor)
                if not cell.is_mine and cell.adjacent_mines == 0:
                    queue.append(neighbor)

        return revealed

    def toggle_flag(self, position: Position) -> Result[bool]:
        """
        Toggle flag on a cell.

        Returns:
            Result carrying whether the cell is flagged afterwards.
        """
        if not self.is_valid_position(position):
            return Result.invalid(f"Position {position} is outside the board")
        cell = self._cell_at(position)
        was_flagged = cell.is_flagged
        if not cell.toggle_flag():
            return Result.illegal("Cannot flag a revealed cell")
        self._track_flag_change(was_flagged, cell)
        return Result.success(cell.is_flagged)

    def toggle_question(self, position: Position) -> Result[bool]:
        """
        Toggle question mark on a cell.

        Returns:
            Result carrying whether the cell is questioned afterwards.
        """
        if not self.is_valid_position(position):
            return Result.invalid(f"Position {position} is outside the board")
        cell = self._cell_at(position)
        was_flagged = cell.is_flagged
        if not cell.toggle_question():
            return Result.illegal("Cannot question a revealed cell")
        self._track_flag_change(was_flagged, cell)
        return Result.success(cell.is_questioned)

    def _track_flag_change(self, was_flagged: bool, cell: Cell) -> None:
        if was_flagged and not cell.is_flagged:
            self._flagged_count -= 1
        elif cell.is_flagged and not was_flagged:
            self._flagged_count += 1

    def reveal_all_mines(self) -> None:
        """Expose every mine for the end-of-game display. Counters are untouched."""
        for cell in self.all_cells():
            if cell.is_mine:
                cell.state = CellState.REVEALED

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def mines_placed(self) -> bool:
        return self._mines_placed

    @property
    def revealed_count(self) -> int:
        """Cells revealed by play (end-of-game mine exposure not included)."""
        return self._revealed_count

    @property
    def flagged_count(self) -> int:
        return self._flagged_count

    def is_game_won(self) -> bool:
        """Check if all non-mine cells are revealed."""
        return all(cell.is_revealed for cell in self.all_cells() if not cell.is_mine)

    def is_any_mine_revealed(self) -> bool:
        return any(cell.is_revealed for cell in self.all_cells() if cell.is_mine)

    def revealed_safe_count(self) -> int:
        return sum(
            1 for cell in self.all_cells() if cell.is_revealed and not cell.is_mine
        )

    def get_cell(self, position: Position) -> Optional[Cell]:
        """Get cell at position, or None if invalid."""
        if not self.is_valid_position(position):
            return None
        return self._cell_at(position)

    def all_cells(self) -> Iterator[Cell]:
        """Iterate cells in row-major order."""
        for row in self._grid:
            yield from row

    def mine_positions(self) -> List[Position]:
        return [cell.position for cell in self.all_cells() if cell.is_mine]

    def hidden_positions(self) -> List[Position]:
        """
        Get positions that can still be revealed.

        Returns:
            List of hidden positions in row-major order.
        """
        return [cell.position for cell in self.all_cells() if cell.is_hidden]

    def get_observation(self) -> np.ndarray:
        """
        Get board state as a numpy array.

        Returns:
            2D int8 array using the ``Cell.to_observation`` encoding.
        """
        obs = np.zeros((self.difficulty.rows, self.difficulty.columns), dtype=np.int8)
        for cell in self.all_cells():
            obs[cell.position.row, cell.position.column] = cell.to_observation()
        return obs

    def render(self) -> str:
        """Render board as a text grid."""
        return "\n".join(
            " ".join(cell.display_value() for cell in row) for row in self._grid
        )
