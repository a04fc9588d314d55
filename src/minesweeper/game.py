"""
Game module for Minesweeper.

The Game aggregate owns one Board and layers status, timing, counters
and events on top of it. Every mutating call returns a Result; callers
branch on failures instead of catching exceptions.
"""
import logging
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, List, Optional, Tuple

from .board import Board
from .difficulty import Difficulty
from .events import (
    CellFlagged,
    CellQuestioned,
    CellRevealed,
    GameEvent,
    GameLost,
    GamePaused,
    GameResumed,
    GameStarted,
    GameWon,
    utcnow,
)
from .position import Position
from .result import Result
from .snapshot import CellSnapshot, GameSnapshot

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


# ============================================================================
# Constants
# ============================================================================

class GameStatus(Enum):
    """Possible states of the game."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    WON = "won"
    LOST = "lost"
    PAUSED = "paused"


@dataclass(frozen=True)
class GameStatistics:
    """Point-in-time summary of a game."""

    game_id: str
    player_id: str
    difficulty: Difficulty
    status: GameStatus
    duration: timedelta
    cells_revealed: int
    flags_used: int
    progress_percentage: float
    move_count: int
    remaining_mines: int
    started_at: Optional[datetime]
    completed_at: Optional[datetime]


# ============================================================================
# Game Aggregate
# ============================================================================

class Game:
    """
    A single Minesweeper session.

    Status flows NOT_STARTED -> IN_PROGRESS -> WON | LOST, with
    IN_PROGRESS <-> PAUSED on the side. WON and LOST are terminal.
    Mines are placed on the first reveal, never on the clicked cell.
    """

    def __init__(
        self,
        game_id: str,
        player_id: str,
        difficulty: Difficulty,
        rng: Optional[random.Random] = None,
        clock: Optional[Clock] = None,
        protect_neighbors: bool = False,
    ) -> None:
        """
        Initialize a new, not yet started game.

        Args:
            game_id: Identifier assigned by the caller.
            player_id: Owner of the game.
            difficulty: Board configuration.
            rng: Random source for mine placement (seed it for tests).
            clock: Returns the current aware UTC time.
            protect_neighbors: Keep the first click's neighbours mine-free too.
        """
        self.game_id = game_id
        self.player_id = player_id
        self.board = Board(difficulty, rng or random.Random())
        self.status = GameStatus.NOT_STARTED
        self.started_at: Optional[datetime] = None
        self.completed_at: Optional[datetime] = None
        self.paused_at: Optional[datetime] = None
        self.is_first_move = True
        self.move_count = 0
        self.protect_neighbors = protect_neighbors
        self._clock: Clock = clock or utcnow
        self._events: List[GameEvent] = []

    @property
    def difficulty(self) -> Difficulty:
        return self.board.difficulty

    # ========================================================================
    # Player Actions
    # ========================================================================

    def reveal(self, position: Position) -> Result[List[Position]]:
        """
        Reveal a cell, starting the game on the first call.

        Returns:
            Result with the positions newly revealed (empty when the cell
            was already revealed), or a failure when the game is over,
            paused, the position is off the board, or the cell is marked.
            The move counter only advances when at least one cell was
            revealed; re-revealing an open cell is not a move.
        """
        if self.is_completed:
            return self._reject("reveal", Result.illegal("Game is completed"))
        if not self.board.is_valid_position(position):
            return self._reject(
                "reveal", Result.invalid(f"Position {position} is outside the board")
            )
        if self.status == GameStatus.PAUSED:
            return self._reject(
                "reveal", Result.illegal("Game is paused; resume it before revealing")
            )

        cell = self.board.get_cell(position)
        if cell.is_flagged or cell.is_questioned:
            return self._reject(
                "reveal", Result.illegal(f"Cannot reveal a {cell.state.value} cell")
            )

        if self.status == GameStatus.NOT_STARTED:
            started = self._start(position)
            if started.failed:
                return self._reject("reveal", started)

        result = self.board.reveal_cell(position)
        if result.failed:
            return self._reject("reveal", result)
        revealed = result.value
        if not revealed:
            return result

        self.move_count += 1
        self._emit(
            CellRevealed,
            position=position,
            has_mine=cell.is_mine,
            adjacent_mines=cell.adjacent_mines,
            revealed_positions=tuple(revealed),
        )

        if cell.is_mine:
            self._lose(position)
        elif self.board.is_game_won():
            self._win()
        return result

    def toggle_flag(self, position: Position) -> Result[bool]:
        """
        Flag or unflag a cell.

        Returns:
            Result carrying whether the cell is flagged afterwards.
        """
        if self.is_completed:
            return self._reject("flag", Result.illegal("Game is completed"))
        result = self.board.toggle_flag(position)
        if result.failed:
            return self._reject("flag", result)
        self._emit(CellFlagged, position=position, is_flagged=result.value)
        return result

    def toggle_question(self, position: Position) -> Result[bool]:
        """
        Put or remove a question mark. Only while the game is in progress.

        Returns:
            Result carrying whether the cell is questioned afterwards.
        """
        if self.status != GameStatus.IN_PROGRESS:
            return self._reject("question", Result.illegal("Game is not in progress"))
        result = self.board.toggle_question(position)
        if result.failed:
            return self._reject("question", result)
        self._emit(CellQuestioned, position=position, is_questioned=result.value)
        return result

    def pause(self) -> Result[None]:
        """Stop the clock. Only an in-progress game can be paused."""
        if self.status != GameStatus.IN_PROGRESS:
            return self._reject("pause", Result.illegal("Game is not in progress"))
        self.status = GameStatus.PAUSED
        self.paused_at = self._clock()
        self._emit(GamePaused)
        logger.info("Game %s paused", self.game_id)
        return Result.success()

    def resume(self) -> Result[None]:
        """
        Restart the clock of a paused game.

        The start time moves forward by the pause length so paused time
        never counts towards the elapsed duration.
        """
        if self.status != GameStatus.PAUSED:
            return self._reject("resume", Result.illegal("Game is not paused"))
        now = self._clock()
        if self.paused_at is not None and self.started_at is not None:
            self.started_at += now - self.paused_at
        self.paused_at = None
        self.status = GameStatus.IN_PROGRESS
        self._emit(GameResumed)
        logger.info("Game %s resumed", self.game_id)
        return Result.success()

    # ========================================================================
    # Transitions (Low-level)
    # ========================================================================

    def _start(self, first_click: Position) -> Result[None]:
        placed = self.board.place_mines(first_click, self.protect_neighbors)
        if placed.failed:
            return placed
        self.started_at = self._clock()
        self.status = GameStatus.IN_PROGRESS
        self.is_first_move = False
        self._emit(GameStarted, difficulty=self.difficulty)
        logger.info(
            "Game %s started for player %s on %s", self.game_id, self.player_id, self.difficulty
        )
        return Result.success()

    def _lose(self, mine_position: Position) -> None:
        self.status = GameStatus.LOST
        self.completed_at = self._clock()
        self.board.reveal_all_mines()
        self._emit(GameLost, mine_position=mine_position, duration=self.elapsed_duration())
        logger.info("Game %s lost on mine at %s", self.game_id, mine_position)

    def _win(self) -> None:
        self.status = GameStatus.WON
        self.completed_at = self._clock()
        duration = self.elapsed_duration()
        self._emit(GameWon, duration=duration, flags_used=self.board.flagged_count)
        logger.info("Game %s won in %s", self.game_id, duration)

    def _emit(self, event_type, **fields) -> None:
        self._events.append(
            event_type(self.game_id, self.player_id, occurred_at=self._clock(), **fields)
        )

    def _reject(self, action: str, result: Result) -> Result:
        logger.debug("Game %s rejected %s: %s", self.game_id, action, result.error)
        return result

    # ========================================================================
    # Queries
    # ========================================================================

    @property
    def is_completed(self) -> bool:
        return self.status in (GameStatus.WON, GameStatus.LOST)

    @property
    def is_active(self) -> bool:
        return self.status == GameStatus.IN_PROGRESS

    @property
    def events(self) -> Tuple[GameEvent, ...]:
        """Events emitted since the last ``pull_events`` call."""
        return tuple(self._events)

    def pull_events(self) -> List[GameEvent]:
        """Return pending events and clear them."""
        events, self._events = self._events, []
        return events

    def elapsed_duration(self) -> timedelta:
        """Play time so far, excluding paused intervals."""
        if self.status == GameStatus.NOT_STARTED or self.started_at is None:
            return timedelta(0)
        end = self.completed_at or self.paused_at or self._clock()
        return end - self.started_at

    def remaining_mine_count(self) -> int:
        """Mines minus flags, never below zero."""
        return max(0, self.difficulty.mine_count - self.board.flagged_count)

    def progress_percentage(self) -> float:
        """Share of safe cells revealed, 0-100."""
        if not self.board.mines_placed:
            return 0.0
        total_safe = self.difficulty.safe_cells
        if total_safe == 0:
            return 100.0
        return self.board.revealed_safe_count() / total_safe * 100.0

    def statistics(self) -> GameStatistics:
        return GameStatistics(
            game_id=self.game_id,
            player_id=self.player_id,
            difficulty=self.difficulty,
            status=self.status,
            duration=self.elapsed_duration(),
            cells_revealed=self.board.revealed_count,
            flags_used=self.board.flagged_count,
            progress_percentage=self.progress_percentage(),
            move_count=self.move_count,
            remaining_mines=self.remaining_mine_count(),
            started_at=self.started_at,
            completed_at=self.completed_at,
        )

    # ========================================================================
    # Persistence Boundary
    # ========================================================================

    def snapshot(self) -> GameSnapshot:
        """Export the game as a flat snapshot."""
        return GameSnapshot(
            game_id=self.game_id,
            player_id=self.player_id,
            difficulty_name=self.difficulty.name,
            rows=self.difficulty.rows,
            columns=self.difficulty.columns,
            mine_count=self.difficulty.mine_count,
            status=self.status.value,
            mines_placed=self.board.mines_placed,
            is_first_move=self.is_first_move,
            move_count=self.move_count,
            started_at=self.started_at,
            completed_at=self.completed_at,
            paused_at=self.paused_at,
            protect_neighbors=self.protect_neighbors,
            cells=[CellSnapshot.from_cell(cell) for cell in self.board.all_cells()],
        )

    @classmethod
    def restore(
        cls,
        snapshot: GameSnapshot,
        rng: Optional[random.Random] = None,
        clock: Optional[Clock] = None,
    ) -> "Game":
        """
        Rebuild a game from a snapshot.

        Raises:
            SnapshotError: If the snapshot is inconsistent.
        """
        cells = snapshot.build_cells()
        difficulty = snapshot.difficulty()
        game = cls(
            snapshot.game_id,
            snapshot.player_id,
            difficulty,
            rng=rng,
            clock=clock,
            protect_neighbors=snapshot.protect_neighbors,
        )
        game.board = Board.from_cells(difficulty, cells, snapshot.mines_placed, game.board.rng)
        game.status = GameStatus(snapshot.status)
        game.started_at = snapshot.started_at
        game.completed_at = snapshot.completed_at
        game.paused_at = snapshot.paused_at
        game.is_first_move = snapshot.is_first_move
        game.move_count = snapshot.move_count
        return game


def create_game(
    game_id: str,
    player_id: str,
    difficulty: Difficulty,
    rng: Optional[random.Random] = None,
    clock: Optional[Clock] = None,
    protect_neighbors: bool = False,
) -> Game:
    """Create a new game; mines are placed on the first reveal."""
    return Game(game_id, player_id, difficulty, rng, clock, protect_neighbors)
