"""
Minesweeper game engine.

Provides the game/board/cell state machine: mine placement with a safe
first click, cascading reveals, flags and question marks, pause/resume
timing, snapshots for persistence and a Gymnasium environment.
"""
from .position import Position
from .result import ErrorKind, Result, SnapshotError
from .difficulty import Difficulty, BEGINNER, INTERMEDIATE, EXPERT
from .cell import Cell, CellState
from .board import Board
from .events import (
    GameEvent,
    GameStarted,
    CellRevealed,
    CellFlagged,
    CellQuestioned,
    GameWon,
    GameLost,
    GamePaused,
    GameResumed,
)
from .snapshot import CellSnapshot, GameSnapshot
from .game import Game, GameStatistics, GameStatus, create_game
from .environment import MinesweeperEnv

__all__ = [
    "Position",
    "ErrorKind",
    "Result",
    "SnapshotError",
    "Difficulty",
    "BEGINNER",
    "INTERMEDIATE",
    "EXPERT",
    "Cell",
    "CellState",
    "Board",
    "GameEvent",
    "GameStarted",
    "CellRevealed",
    "CellFlagged",
    "CellQuestioned",
    "GameWon",
    "GameLost",
    "GamePaused",
    "GameResumed",
    "CellSnapshot",
    "GameSnapshot",
    "Game",
    "GameStatistics",
    "GameStatus",
    "create_game",
    "MinesweeperEnv",
]
