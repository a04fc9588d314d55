"""
Difficulty module for Minesweeper game.

Board dimensions and mine count, with the classic presets.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from .result import Result


# ============================================================================
# Validation
# ============================================================================

def validate_dimensions(rows: int, columns: int, mine_count: int) -> Optional[str]:
    """
    Check board dimensions and mine count.

    At least one cell besides the first click must stay free of mines,
    so the mine count has to be strictly below ``rows * columns - 1``.

    Returns:
        Error message, or None if the values are valid.
    """
    if rows <= 0:
        return "Rows must be greater than zero"
    if columns <= 0:
        return "Columns must be greater than zero"
    if mine_count < 0:
        return "Mine count cannot be negative"
    max_mines = rows * columns - 2
    if mine_count > max_mines:
        return f"Too many mines (max {max(max_mines, 0)})"
    return None


# ============================================================================
# Difficulty Data Class
# ============================================================================

@dataclass(frozen=True)
class Difficulty:
    """
    Configuration for a Minesweeper board.

    Attributes:
        name: Display name ("Beginner", "Custom", ...).
        rows: Number of rows.
        columns: Number of columns.
        mine_count: Total mines to place.
    """

    name: str
    rows: int
    columns: int
    mine_count: int

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        error = validate_dimensions(self.rows, self.columns, self.mine_count)
        if error:
            raise ValueError(error)

    @classmethod
    def custom(
        cls, name: str, rows: int, columns: int, mine_count: int
    ) -> Result["Difficulty"]:
        """
        Create a custom difficulty without raising.

        Returns:
            Result carrying the difficulty, or an invalid-input failure.
        """
        if not name or not name.strip():
            return Result.invalid("Difficulty name cannot be empty")
        error = validate_dimensions(rows, columns, mine_count)
        if error:
            return Result.invalid(error)
        return Result.success(cls(name.strip(), rows, columns, mine_count))

    @classmethod
    def from_name(cls, name: str) -> Optional["Difficulty"]:
        """Look up a preset by name (case-insensitive)."""
        if not name:
            return None
        for preset in PRESETS:
            if preset.name.lower() == name.strip().lower():
                return preset
        return None

    @staticmethod
    def presets() -> Tuple["Difficulty", ...]:
        return PRESETS

    @property
    def total_cells(self) -> int:
        return self.rows * self.columns

    @property
    def safe_cells(self) -> int:
        return self.total_cells - self.mine_count

    @property
    def mine_density(self) -> float:
        """Mines as a percentage of all cells."""
        return self.mine_count / self.total_cells * 100

    def __str__(self) -> str:
        return f"{self.name} ({self.rows}x{self.columns}, {self.mine_count} mines)"


# Preset difficulty levels
BEGINNER = Difficulty("Beginner", 9, 9, 10)
INTERMEDIATE = Difficulty("Intermediate", 16, 16, 40)
EXPERT = Difficulty("Expert", 16, 30, 99)

PRESETS: Tuple[Difficulty, ...] = (BEGINNER, INTERMEDIATE, EXPERT)
