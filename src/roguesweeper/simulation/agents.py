"""
Agents that play RogueSweeper through the gymnasium environment.
"""
from abc import ABC, abstractmethod
from typing import Optional, Tuple

import numpy as np

from ..game.stage import MAX_COLS, MAX_ROWS


# ============================================================================
# Base Agent Interface
# ============================================================================

class BaseAgent(ABC):
    """
    Interface for RogueSweeper agents.

    An agent maps an observation (and optionally a mask of legal cells)
    to the flat index of the cell to reveal.
    """

    def __init__(
        self, board_height: int = MAX_ROWS, board_width: int = MAX_COLS
    ) -> None:
        """
        Args:
            board_height: Rows of the (padded) observation.
            board_width: Columns of the (padded) observation.
        """
        self.board_height = board_height
        self.board_width = board_width

    @abstractmethod
    def select_action(
        self,
        observation: np.ndarray,
        valid_actions: Optional[np.ndarray] = None,
    ) -> int:
        """
        Pick the next cell to reveal.

        Args:
            observation: 2D array of visible cell values.
            valid_actions: Optional boolean mask over flat cell indices.

        Returns:
            Action index (row * board_width + col).
        """

    def action_to_position(self, action: int) -> Tuple[int, int]:
        """Convert flat action index to (row, col) position."""
        return action // self.board_width, action % self.board_width

    def get_valid_actions_from_obs(self, observation: np.ndarray) -> np.ndarray:
        """Hidden cells (value -1) are the legal reveals."""
        return observation.flatten() == -1

    def reset(self) -> None:
        """Forget per-run state. Stateless agents need nothing."""


# ============================================================================
# Random Agent
# ============================================================================

class RandomAgent(BaseAgent):
    """Reveals a uniformly random hidden cell. Baseline for comparisons."""

    def __init__(
        self,
        board_height: int = MAX_ROWS,
        board_width: int = MAX_COLS,
        seed: Optional[int] = None,
    ) -> None:
        super().__init__(board_height, board_width)
        self.rng = np.random.default_rng(seed)

    def select_action(
        self,
        observation: np.ndarray,
        valid_actions: Optional[np.ndarray] = None,
    ) -> int:
        if valid_actions is None:
            valid_actions = self.get_valid_actions_from_obs(observation)

        valid_indices = np.flatnonzero(valid_actions)
        if len(valid_indices) == 0:
            # Nothing legal left; the environment will reject this
            return 0
        return int(self.rng.choice(valid_indices))
