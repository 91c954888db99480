"""
Resource ledger for RogueSweeper.

Tracks what persists across the stages of one run: lives, safe-reveal
charges, score and clear counters. Rewards picked after each stage are
the only way to gain lives or charges.
"""
import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


# ============================================================================
# Constants
# ============================================================================

STARTING_LIVES = 3
STARTING_CHARGES = 1

POINTS_PER_MINE = 10
TIME_BONUS_SECONDS = 300
POINTS_PER_STAGE = 5


class Reward(Enum):
    """Reward options offered after a stage clear."""

    EXTRA_LIFE = "extra_life"
    SAFE_REVEAL_CHARGE = "safe_reveal_charge"


def stage_score(total_mines: int, elapsed_seconds: int, stage: int) -> int:
    """
    Points awarded for clearing a stage.

    Args:
        total_mines: Mines on the cleared board.
        elapsed_seconds: Whole seconds since the first reveal.
        stage: Stage number that was cleared.

    Returns:
        Mine points plus a time bonus that runs out after 300 seconds,
        plus a per-stage bonus.
    """
    time_bonus = max(0, TIME_BONUS_SECONDS - elapsed_seconds)
    return total_mines * POINTS_PER_MINE + time_bonus + stage * POINTS_PER_STAGE


def draw_rewards(
    rng: Optional[random.Random] = None, count: int = 3
) -> List[Reward]:
    """Draw ``count`` reward options with replacement."""
    rng = rng or random
    options = list(Reward)
    return [rng.choice(options) for _ in range(count)]


# ============================================================================
# Ledger
# ============================================================================

@dataclass
class ResourceLedger:
    """
    Run-persistent resources and statistics.

    Attributes:
        lives: Remaining lives. Never drops to 0: losing the last one
            ends the run instead.
        safe_reveal_charges: One-shot safe reveals available.
        total_score: Accumulated score; only ever grows.
        stages_cleared: Stages completed in this run.
        perfect_clears: Stages completed through a perfect verification.
        hints_used: Hints requested in this run.
    """

    lives: int = STARTING_LIVES
    safe_reveal_charges: int = STARTING_CHARGES
    total_score: int = 0
    stages_cleared: int = 0
    perfect_clears: int = 0
    hints_used: int = 0

    def spend_life(self) -> bool:
        """
        Pay one life for a mistake.

        Returns:
            True if the player survives (a life was deducted), False if
            that was the last life and the run is over.
        """
        if self.lives > 1:
            self.lives -= 1
            return True
        return False

    def spend_charge(self) -> bool:
        """Consume a safe-reveal charge if one is available."""
        if self.safe_reveal_charges <= 0:
            return False
        self.safe_reveal_charges -= 1
        return True

    def record_clear(self, points: int, perfect: bool = False) -> None:
        """Bank the score of a cleared stage."""
        self.total_score += max(0, points)
        self.stages_cleared += 1
        if perfect:
            self.perfect_clears += 1

    def record_hint(self) -> None:
        self.hints_used += 1

    def apply_reward(self, reward: Reward) -> None:
        """Apply a picked reward."""
        if reward == Reward.EXTRA_LIFE:
            self.lives += 1
        elif reward == Reward.SAFE_REVEAL_CHARGE:
            self.safe_reveal_charges += 1
