"""
Flat, storage-friendly representation of a game.

A snapshot holds only plain values (strings, ints, bools, datetimes) so
any persistence layer can store it. ``to_dict``/``from_dict`` go one step
further and produce JSON-ready primitives.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .cell import Cell, CellState
from .difficulty import Difficulty
from .position import Position
from .result import SnapshotError

GAME_STATUSES = ("not_started", "in_progress", "won", "lost", "paused")


def _parse_time(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError) as exc:
        raise SnapshotError(f"Invalid timestamp: {value!r}") from exc


def _format_time(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class CellSnapshot:
    """One cell as (state, mine, adjacent count)."""

    state: str
    has_mine: bool
    adjacent_mines: int

    @classmethod
    def from_cell(cls, cell: Cell) -> "CellSnapshot":
        return cls(cell.state.value, cell.is_mine, cell.adjacent_mines)


@dataclass(frozen=True)
class GameSnapshot:
    """
    Everything needed to rebuild a game.

    Cells are stored row-major, ``rows * columns`` of them.
    """

    game_id: str
    player_id: str
    difficulty_name: str
    rows: int
    columns: int
    mine_count: int
    status: str
    mines_placed: bool
    is_first_move: bool
    move_count: int
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    paused_at: Optional[datetime] = None
    protect_neighbors: bool = False
    cells: List[CellSnapshot] = field(default_factory=list)

    # ========================================================================
    # Validation
    # ========================================================================

    def difficulty(self) -> Difficulty:
        """Resolve the preset, or a custom difficulty for other dimensions."""
        preset = Difficulty.from_name(self.difficulty_name)
        if preset is not None and (preset.rows, preset.columns, preset.mine_count) == (
            self.rows, self.columns, self.mine_count
        ):
            return preset
        result = Difficulty.custom(
            self.difficulty_name or "Custom", self.rows, self.columns, self.mine_count
        )
        if result.failed:
            raise SnapshotError(f"Cannot rebuild difficulty: {result.error}")
        return result.value

    def build_cells(self) -> List[Cell]:
        """
        Validate the snapshot and turn it into row-major cells.

        Raises:
            SnapshotError: If the snapshot is internally inconsistent.
        """
        difficulty = self.difficulty()
        if len(self.cells) != difficulty.total_cells:
            raise SnapshotError(
                f"Expected {difficulty.total_cells} cells for a "
                f"{self.rows}x{self.columns} board, got {len(self.cells)}"
            )
        if self.status not in GAME_STATUSES:
            raise SnapshotError(f"Unknown game status: {self.status!r}")
        if self.status != "not_started" and self.started_at is None:
            raise SnapshotError(f"Game in status {self.status!r} has no start time")
        if self.status == "paused" and self.paused_at is None:
            raise SnapshotError("Paused game has no pause time")
        if self.status in ("won", "lost") and self.completed_at is None:
            raise SnapshotError(f"Game in status {self.status!r} has no completion time")
        if self.status != "not_started" and not self.mines_placed:
            raise SnapshotError(f"Game in status {self.status!r} has no mines")

        cells = []
        for index, data in enumerate(self.cells):
            try:
                state = CellState(data.state)
            except ValueError as exc:
                raise SnapshotError(f"Unknown cell state: {data.state!r}") from exc
            if not 0 <= data.adjacent_mines <= 8:
                raise SnapshotError(
                    f"Adjacent mine count {data.adjacent_mines} out of range"
                )
            row, col = divmod(index, self.columns)
            cells.append(Cell(Position(row, col), bool(data.has_mine), data.adjacent_mines, state))

        mines = sum(1 for cell in cells if cell.is_mine)
        expected = self.mine_count if self.mines_placed else 0
        if mines != expected:
            raise SnapshotError(f"Expected {expected} mines, found {mines}")
        return cells

    # ========================================================================
    # Primitive Conversion
    # ========================================================================

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-ready primitives."""
        return {
            "game_id": self.game_id,
            "player_id": self.player_id,
            "difficulty_name": self.difficulty_name,
            "rows": self.rows,
            "columns": self.columns,
            "mine_count": self.mine_count,
            "status": self.status,
            "mines_placed": self.mines_placed,
            "is_first_move": self.is_first_move,
            "move_count": self.move_count,
            "started_at": _format_time(self.started_at),
            "completed_at": _format_time(self.completed_at),
            "paused_at": _format_time(self.paused_at),
            "protect_neighbors": self.protect_neighbors,
            "cells": [
                [cell.state, cell.has_mine, cell.adjacent_mines] for cell in self.cells
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameSnapshot":
        """Inverse of ``to_dict``."""
        try:
            return cls(
                game_id=str(data["game_id"]),
                player_id=str(data["player_id"]),
                difficulty_name=data["difficulty_name"],
                rows=int(data["rows"]),
                columns=int(data["columns"]),
                mine_count=int(data["mine_count"]),
                status=data["status"],
                mines_placed=bool(data["mines_placed"]),
                is_first_move=bool(data["is_first_move"]),
                move_count=int(data.get("move_count", 0)),
                started_at=_parse_time(data.get("started_at")),
                completed_at=_parse_time(data.get("completed_at")),
                paused_at=_parse_time(data.get("paused_at")),
                protect_neighbors=bool(data.get("protect_neighbors", False)),
                cells=[
                    CellSnapshot(state, bool(has_mine), int(adjacent))
                    for state, has_mine, adjacent in data["cells"]
                ],
            )
        except (KeyError, TypeError, ValueError) as exc:
            if isinstance(exc, SnapshotError):
                raise
            raise SnapshotError(f"Malformed snapshot: {exc}") from exc
