"""
Gymnasium environment wrapper for RogueSweeper.

Exposes a whole run (many stages) through the standard RL interface so
agents can be simulated and compared.
"""
import random
from typing import Any, Dict, Optional, SupportsFloat, Tuple

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .run import IntentResult, RunConfig, RunController
from .stage import MAX_COLS, MAX_ROWS, StageGenerator
from .state import GamePhase, Outcome


# Observation value for cells outside the current (smaller) board
OFF_BOARD = -3


# ============================================================================
# RogueSweeper Environment
# ============================================================================

class RogueSweeperEnv(gym.Env):
    """
    Gymnasium environment for a RogueSweeper run.

    Observation:
        MAX_ROWS x MAX_COLS array, top-left aligned with the current board:
        - -3 = outside the current board
        - -2 = flagged cell
        - -1 = hidden cell
        - 0-8 = revealed cell with adjacent mine count
        - 9 = revealed mine

    Actions:
        Discrete action space of size MAX_ROWS * MAX_COLS.
        Action i reveals cell (i // MAX_COLS, i % MAX_COLS).

    Between stages the environment acknowledges the pause itself and
    always takes the first reward option.

    Rewards:
        - +1 for revealing a safe cell that leaves the stage unfinished
        - +10 for the reveal that clears a stage (instead of +1)
        - -10 for losing a life or the run
        - -0.1 for an invalid action
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        config: Optional[RunConfig] = None,
        generator: Optional[StageGenerator] = None,
        render_mode: Optional[str] = None,
    ) -> None:
        """
        Initialize the RogueSweeper environment.

        Args:
            config: Run configuration (default: 3 lives, endless stages).
            generator: Stage formula (default: the standard progression).
            render_mode: How to render the environment.
        """
        super().__init__()

        self.config = config or RunConfig()
        self.generator = generator or StageGenerator()
        self.render_mode = render_mode
        self._steps = 0
        self.controller = self._make_controller(None)

        self.observation_space = spaces.Box(
            low=OFF_BOARD,
            high=9,
            shape=(MAX_ROWS, MAX_COLS),
            dtype=np.int8,
        )
        self.action_space = spaces.Discrete(MAX_ROWS * MAX_COLS)

    def _make_controller(self, seed: Optional[int]) -> RunController:
        # Stage time is measured in steps so runs are reproducible
        return RunController(
            config=self.config,
            generator=self.generator,
            rng=random.Random(seed),
            clock=lambda: float(self._steps),
        )

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Start a new run.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        self._steps = 0
        self.controller = self._make_controller(seed)
        return self._get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Reveal one cell.

        Args:
            action: Cell index (row * MAX_COLS + col).

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        row, col = self._action_to_position(int(action))
        self._steps += 1

        result = self.controller.reveal(row, col)
        reward = self._calculate_reward(result)
        self._settle()

        terminated = self.controller.phase.is_terminal
        return self._get_observation(), reward, terminated, False, self._get_info()

    def _action_to_position(self, action: int) -> Tuple[int, int]:
        """Convert flat action index to (row, col) position."""
        return action // MAX_COLS, action % MAX_COLS

    def _calculate_reward(self, result: IntentResult) -> float:
        if not result.accepted:
            return -0.1
        if result.outcome == Outcome.NORMAL:
            return 10.0
        if result.outcome == Outcome.DETONATED:
            return -10.0
        return 1.0

    def _settle(self) -> None:
        """Skip the pauses between stage attempts."""
        controller = self.controller
        if controller.phase in (GamePhase.STAGE_COMPLETE, GamePhase.LIFE_LOST):
            controller.advance()
        if controller.phase == GamePhase.REWARD_SELECTION:
            controller.select_reward(0)

    def _get_observation(self) -> np.ndarray:
        obs = np.full((MAX_ROWS, MAX_COLS), OFF_BOARD, dtype=np.int8)
        board_obs = self.controller.board.get_observation()
        obs[: board_obs.shape[0], : board_obs.shape[1]] = board_obs
        return obs

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        controller = self.controller
        ledger = controller.ledger
        return {
            "steps": self._steps,
            "stage": controller.state.stage,
            "lives": ledger.lives,
            "score": ledger.total_score,
            "stages_cleared": ledger.stages_cleared,
            "revealed": controller.board.revealed_count,
            "game_state": controller.phase.name,
            "valid_actions": len(controller.board.get_valid_actions()),
        }

    def render(self) -> Optional[str]:
        """Render the current board state."""
        if self.render_mode == "ansi":
            return self._render_ansi()
        if self.render_mode == "human":
            print(self._render_ansi())
        return None

    def _render_ansi(self) -> str:
        snapshot = self.controller.snapshot()
        header = (
            f"Stage {snapshot.stage} | Lives {snapshot.lives} | "
            f"Score {snapshot.score}"
        )
        return header + "\n" + snapshot.render_text()

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of valid actions.

        Returns:
            Boolean array where True = hidden cell on the current board.
        """
        mask = np.zeros(self.action_space.n, dtype=bool)
        for row, col in self.controller.board.get_valid_actions():
            mask[row * MAX_COLS + col] = True
        return mask

