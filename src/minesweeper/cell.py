"""
Cell module for Minesweeper game.

Represents individual cells on the game board with their state
(hidden/revealed/flagged/questioned) and content (mine/number).
"""
from enum import Enum
from dataclasses import dataclass

from .position import Position


# ============================================================================
# Constants
# ============================================================================

class CellState(Enum):
    """Possible visual states of a cell."""

    HIDDEN = "hidden"
    REVEALED = "revealed"
    FLAGGED = "flagged"
    QUESTIONED = "questioned"


# Observation encoding shared with the environment
OBS_HIDDEN = -1
OBS_FLAGGED = -2
OBS_QUESTIONED = -3
OBS_MINE = 9


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass
class Cell:
    """
    Represents a single cell in the Minesweeper grid.

    State machine (REVEALED is terminal and only reachable through reveal):

        flag:     HIDDEN -> FLAGGED -> HIDDEN,  QUESTIONED -> FLAGGED
        question: HIDDEN -> QUESTIONED -> HIDDEN,  FLAGGED -> QUESTIONED

    Attributes:
        position: Where the cell sits on its board.
        is_mine: Whether this cell contains a mine.
        adjacent_mines: Count of mines in neighboring cells (0-8).
        state: Current visual state.
    """

    position: Position
    is_mine: bool = False
    adjacent_mines: int = 0
    state: CellState = CellState.HIDDEN

    def place_mine(self) -> None:
        """Arm this cell. Only legal while it is still hidden."""
        if self.state != CellState.HIDDEN:
            raise ValueError(f"Cannot place mine in a {self.state.value} cell")
        self.is_mine = True

    def set_adjacent_mines(self, count: int) -> None:
        if not 0 <= count <= 8:
            raise ValueError("Adjacent mine count must be between 0 and 8")
        self.adjacent_mines = count

    def reveal(self) -> bool:
        """
        Reveal this cell.

        Returns:
            True if cell was successfully revealed, False if already
            revealed, flagged or questioned.
        """
        if self.state != CellState.HIDDEN:
            return False
        self.state = CellState.REVEALED
        return True

    def toggle_flag(self) -> bool:
        """
        Toggle flag on this cell.

        Returns:
            True if flag was toggled, False if cell is revealed.
        """
        if self.state == CellState.REVEALED:
            return False
        if self.state == CellState.FLAGGED:
            self.state = CellState.HIDDEN
        else:
            self.state = CellState.FLAGGED
        return True

    def toggle_question(self) -> bool:
        """
        Toggle question mark on this cell.

        Returns:
            True if the mark was toggled, False if cell is revealed.
        """
        if self.state == CellState.REVEALED:
            return False
        if self.state == CellState.QUESTIONED:
            self.state = CellState.HIDDEN
        else:
            self.state = CellState.QUESTIONED
        return True

    @property
    def is_safe(self) -> bool:
        return not self.is_mine

    @property
    def is_hidden(self) -> bool:
        """Check if cell is hidden."""
        return self.state == CellState.HIDDEN

    @property
    def is_revealed(self) -> bool:
        """Check if cell is revealed."""
        return self.state == CellState.REVEALED

    @property
    def is_flagged(self) -> bool:
        """Check if cell is flagged."""
        return self.state == CellState.FLAGGED

    @property
    def is_questioned(self) -> bool:
        """Check if cell is marked with a question mark."""
        return self.state == CellState.QUESTIONED

    def to_observation(self) -> int:
        """
        Convert cell to an integer observation value.

        Returns:
            -1: Hidden cell
            -2: Flagged cell
            -3: Questioned cell
            0-8: Revealed cell with adjacent mine count
            9: Revealed mine (game over state)
        """
        if self.state == CellState.HIDDEN:
            return OBS_HIDDEN
        if self.state == CellState.FLAGGED:
            return OBS_FLAGGED
        if self.state == CellState.QUESTIONED:
            return OBS_QUESTIONED
        if self.is_mine:
            return OBS_MINE
        return self.adjacent_mines

    def display_value(self) -> str:
        """Single character used by text renderings."""
        if self.state == CellState.FLAGGED:
            return "F"
        if self.state == CellState.QUESTIONED:
            return "?"
        if self.state == CellState.HIDDEN:
            return "."
        if self.is_mine:
            return "*"
        if self.adjacent_mines == 0:
            return " "
        return str(self.adjacent_mines)

    def __str__(self) -> str:
        content = "mine" if self.is_mine else f"adjacent: {self.adjacent_mines}"
        return f"Cell at {self.position}: {self.state.value} ({content})"
