"""
Stage generator for RogueSweeper.

Maps a stage number to the size and mine density of its board. Boards
grow by one row and column every three stages and get denser by one
percentage point per stage, both capped.
"""
import math
import random
from dataclasses import dataclass
from typing import Optional

from .board import BoardConfig


# ============================================================================
# Constants
# ============================================================================

BASE_SIZE = 8
MAX_BASE_SIZE = 20
SIZE_JITTER = 2

# Largest board the default formula can produce
MAX_ROWS = MAX_BASE_SIZE + SIZE_JITTER
MAX_COLS = MAX_BASE_SIZE + SIZE_JITTER


# ============================================================================
# Stage Generator
# ============================================================================

@dataclass
class StageGenerator:
    """
    Procedural board configuration per stage.

    Attributes:
        base_size: Side length at stage 0 before jitter.
        max_base_size: Cap on the side length before jitter.
        size_jitter: Upper bound of the random extra rows/cols.
        stages_per_size_step: Stages between one-cell size increases.
        base_mine_ratio: Mine density at stage 0.
        mine_ratio_step: Density increase per stage.
        max_mine_ratio: Density cap.
    """

    base_size: int = BASE_SIZE
    max_base_size: int = MAX_BASE_SIZE
    size_jitter: int = SIZE_JITTER
    stages_per_size_step: int = 3
    base_mine_ratio: float = 0.10
    mine_ratio_step: float = 0.01
    max_mine_ratio: float = 0.25

    def __post_init__(self) -> None:
        if self.base_size < 1 or self.max_base_size < self.base_size:
            raise ValueError("Invalid base size range")
        if self.size_jitter < 0:
            raise ValueError("Size jitter cannot be negative")
        if self.stages_per_size_step < 1:
            raise ValueError("Stages per size step must be positive")

    def base_for(self, stage: int) -> int:
        """Side length of the board before random jitter."""
        return min(
            self.base_size + stage // self.stages_per_size_step,
            self.max_base_size,
        )

    def mine_ratio_for(self, stage: int) -> float:
        """Fraction of cells holding mines at this stage."""
        return min(
            self.base_mine_ratio + self.mine_ratio_step * stage,
            self.max_mine_ratio,
        )

    def config_for(
        self, stage: int, rng: Optional[random.Random] = None
    ) -> BoardConfig:
        """
        Build the board configuration for a stage.

        Rows and columns get independent jitter draws, so two calls for
        the same stage may differ unless the random source is seeded.

        Args:
            stage: Stage number, starting at 1.
            rng: Random source (module-level ``random`` if omitted).

        Returns:
            A validated BoardConfig.

        Raises:
            ValueError: If stage < 1, or if the parameters produce a board
                with no safe cell.
        """
        if stage < 1:
            raise ValueError(f"Stage must be at least 1, got {stage}")
        rng = rng or random

        base = self.base_for(stage)
        rows = base + rng.randint(0, self.size_jitter)
        cols = base + rng.randint(0, self.size_jitter)
        # Floor after rounding away float noise (0.11 * 100 must give 11)
        mines = math.floor(round(rows * cols * self.mine_ratio_for(stage), 9))

        return BoardConfig(width=cols, height=rows, num_mines=mines)
