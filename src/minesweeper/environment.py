"""
Gymnasium environment wrapper for Minesweeper.

Drives a Game through the standard RL interface so automated players
can be plugged into the engine.
"""
import random
from typing import Any, Dict, Optional, Tuple, SupportsFloat

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .cell import OBS_MINE, OBS_QUESTIONED
from .difficulty import BEGINNER, Difficulty
from .game import Game, GameStatus
from .position import Position


# ============================================================================
# Minesweeper Environment
# ============================================================================

class MinesweeperEnv(gym.Env):
    """
    Gymnasium environment for Minesweeper.

    Observation:
        2D array using the ``Cell.to_observation`` encoding
        (-3 questioned, -2 flagged, -1 hidden, 0-8 counts, 9 mine).

    Actions:
        Discrete action space of size rows * columns.
        Action i reveals the cell at (i // columns, i % columns).

    Rewards:
        - +1 for revealing a safe cell
        - +10 for winning the game
        - -10 for hitting a mine
        - -0.1 for invalid action (already revealed/flagged)
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        difficulty: Optional[Difficulty] = None,
        render_mode: Optional[str] = None,
        protect_neighbors: bool = False,
    ) -> None:
        """
        Initialize the Minesweeper environment.

        Args:
            difficulty: Board configuration (default: Beginner).
            render_mode: How to render the environment.
            protect_neighbors: Keep the first click's neighbours mine-free.
        """
        super().__init__()

        self.difficulty = difficulty or BEGINNER
        self.render_mode = render_mode
        self.protect_neighbors = protect_neighbors
        self._episode = 0
        self.game = self._new_game(random.Random())

        self.observation_space = spaces.Box(
            low=OBS_QUESTIONED,
            high=OBS_MINE,
            shape=(self.difficulty.rows, self.difficulty.columns),
            dtype=np.int8,
        )
        self.action_space = spaces.Discrete(self.difficulty.total_cells)

        self._steps = 0

    def _new_game(self, rng: random.Random) -> Game:
        self._episode += 1
        return Game(
            f"env-{self._episode}",
            "agent",
            self.difficulty,
            rng=rng,
            protect_neighbors=self.protect_neighbors,
        )

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Start a new game.

        Args:
            seed: Random seed for reproducible mine layouts.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        rng = random.Random(int(self.np_random.integers(2**32)))
        self.game = self._new_game(rng)
        self._steps = 0

        return self.game.board.get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Reveal one cell.

        Args:
            action: Cell index to reveal (row * columns + col).

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        position = self._action_to_position(int(action))
        self._steps += 1

        reward = self._calculate_reward(position)

        observation = self.game.board.get_observation()
        terminated = self.game.is_completed
        truncated = False

        return observation, reward, terminated, truncated, self._get_info()

    def _action_to_position(self, action: int) -> Position:
        """Convert flat action index to a board position."""
        row, col = divmod(action, self.difficulty.columns)
        return Position(row, col)

    def _calculate_reward(self, position: Position) -> float:
        """
        Reveal the cell and score the outcome.

        Returns:
            Reward value.
        """
        result = self.game.reveal(position)
        if result.failed or not result.value:
            return -0.1
        if self.game.status == GameStatus.WON:
            return 10.0
        if self.game.status == GameStatus.LOST:
            return -10.0
        return 1.0

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        return {
            "steps": self._steps,
            "revealed": self.game.board.revealed_count,
            "total_safe": self.difficulty.safe_cells,
            "game_state": self.game.status.name,
            "progress": self.game.progress_percentage(),
            "remaining_mines": self.game.remaining_mine_count(),
            "valid_actions": len(self.game.board.hidden_positions()),
        }

    def render(self) -> Optional[str]:
        """Render the current board state."""
        if self.render_mode == "ansi":
            return self.game.board.render()
        if self.render_mode == "human":
            print(self.game.board.render())
        return None

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of valid actions.

        Returns:
            Boolean array where True = hidden cell that can be revealed.
        """
        mask = np.zeros(self.action_space.n, dtype=bool)
        for position in self.game.board.hidden_positions():
            mask[position.row * self.difficulty.columns + position.column] = True
        return mask
