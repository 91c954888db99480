"""
Run state for RogueSweeper.

Holds the phase enum, outcome and rejection codes reported to callers,
and the RunState container owned by a RunController.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .board import Board
from .ledger import ResourceLedger, Reward


# ============================================================================
# Constants
# ============================================================================

class GamePhase(Enum):
    """Lifecycle phase of a run. Exactly one is active at a time."""

    WAITING = "waiting"
    PLAYING = "playing"
    STAGE_COMPLETE = "stage_complete"
    REWARD_SELECTION = "reward_selection"
    LIFE_LOST = "life_lost"
    WON = "won"
    LOST = "lost"

    @property
    def is_terminal(self) -> bool:
        return self in (GamePhase.WON, GamePhase.LOST)


class Outcome(Enum):
    """How the most recent stage attempt ended."""

    NORMAL = "normal"
    PERFECT = "perfect"
    WRONG_FLAG = "wrong_flag"
    MISSING_FLAGS = "missing_flags"
    TOO_MANY_FLAGS = "too_many_flags"
    DETONATED = "detonated"


class Rejection(Enum):
    """Why an intent was refused. Rejected intents change nothing."""

    OUT_OF_BOUNDS = "out_of_bounds"
    WRONG_PHASE = "wrong_phase"
    GAME_OVER = "game_over"
    NOT_STARTED = "not_started"
    INVALID_TARGET = "invalid_target"
    NOT_ARMED = "not_armed"
    NO_CHARGES = "no_charges"
    NO_SAFE_CELLS = "no_safe_cells"
    INVALID_REWARD = "invalid_reward"


# ============================================================================
# Run State
# ============================================================================

@dataclass
class RunState:
    """
    Everything one run knows about itself.

    Attributes:
        board: Board of the current stage attempt.
        stage: Current stage number (1-based).
        phase: Current lifecycle phase.
        ledger: Lives, charges, score and counters.
        safe_reveal_armed: Next use_safe_reveal targets a cell.
        last_outcome: Result of the latest stage attempt.
        last_flag_accuracy: Flag accuracy when the latest stage attempt
            ended; None while an attempt is in progress.
        reward_options: Rewards on offer during REWARD_SELECTION.
        hint: Cell suggested by the latest hint.
        started_at: Clock value of the first reveal of this stage.
        finished_at: Clock value when the stage attempt ended.
        advance_at: Clock value when a pending auto-advance is due.
    """

    board: Board
    stage: int = 1
    phase: GamePhase = GamePhase.WAITING
    ledger: ResourceLedger = field(default_factory=ResourceLedger)
    safe_reveal_armed: bool = False
    last_outcome: Optional[Outcome] = None
    last_flag_accuracy: Optional[int] = None
    reward_options: List[Reward] = field(default_factory=list)
    hint: Optional[Tuple[int, int]] = None
    started_at: Optional[float] = None
    finished_at: Optional[float] = None
    advance_at: Optional[float] = None

    def elapsed_seconds(self, now: float) -> int:
        """Whole seconds on the stage timer, frozen once the stage ends."""
        if self.started_at is None:
            return 0
        end = self.finished_at if self.finished_at is not None else now
        return max(0, int(end - self.started_at))
