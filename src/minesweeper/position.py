"""
Position module for Minesweeper game.

Immutable (row, column) coordinates with neighbour enumeration.
"""
from dataclasses import dataclass
from typing import Iterator, Tuple


# ============================================================================
# Constants
# ============================================================================

NEIGHBOR_DELTAS: Tuple[Tuple[int, int], ...] = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1),  (1, 0),  (1, 1),
)


# ============================================================================
# Position Value Object
# ============================================================================

@dataclass(frozen=True, order=True)
class Position:
    """
    A zero-indexed cell coordinate on the board.

    Attributes:
        row: Row index (>= 0).
        column: Column index (>= 0).
    """

    row: int
    column: int

    def __post_init__(self) -> None:
        """Reject negative coordinates."""
        if self.row < 0:
            raise ValueError("Row cannot be negative")
        if self.column < 0:
            raise ValueError("Column cannot be negative")

    @classmethod
    def of(cls, row: int, column: int) -> "Position":
        """Shorthand constructor."""
        return cls(row, column)

    def neighbors(self) -> Iterator["Position"]:
        """
        Yield the Moore neighbourhood of this position.

        Only negative coordinates are dropped here; the board is
        responsible for filtering out positions past its far edges.
        """
        for delta_row, delta_col in NEIGHBOR_DELTAS:
            new_row = self.row + delta_row
            new_col = self.column + delta_col
            if new_row >= 0 and new_col >= 0:
                yield Position(new_row, new_col)

    def is_within_bounds(self, rows: int, columns: int) -> bool:
        """Check if position fits a board of the given size."""
        return 0 <= self.row < rows and 0 <= self.column < columns

    def as_tuple(self) -> Tuple[int, int]:
        return self.row, self.column

    def __str__(self) -> str:
        return f"({self.row},{self.column})"
