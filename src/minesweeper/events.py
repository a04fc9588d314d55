"""
Game events.

Plain records of facts that happened to a game. The game only appends
them; delivering them anywhere is up to the caller.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Tuple

from .difficulty import Difficulty
from .position import Position


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class GameEvent:
    """Base record for everything a game emits."""

    game_id: str
    player_id: str
    occurred_at: datetime = field(default_factory=utcnow, kw_only=True)


@dataclass(frozen=True)
class GameStarted(GameEvent):
    difficulty: Difficulty


@dataclass(frozen=True)
class CellRevealed(GameEvent):
    """A reveal call, with every position the cascade uncovered."""

    position: Position
    has_mine: bool
    adjacent_mines: int
    revealed_positions: Tuple[Position, ...]


@dataclass(frozen=True)
class CellFlagged(GameEvent):
    position: Position
    is_flagged: bool


@dataclass(frozen=True)
class CellQuestioned(GameEvent):
    position: Position
    is_questioned: bool


@dataclass(frozen=True)
class GameWon(GameEvent):
    duration: timedelta
    flags_used: int


@dataclass(frozen=True)
class GameLost(GameEvent):
    mine_position: Position
    duration: timedelta


@dataclass(frozen=True)
class GamePaused(GameEvent):
    pass


@dataclass(frozen=True)
class GameResumed(GameEvent):
    pass
