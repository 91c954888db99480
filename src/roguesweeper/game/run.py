"""
Run controller for RogueSweeper.

Drives one run through its stages as a state machine:

    WAITING --first reveal--> PLAYING
    PLAYING --all safe cells revealed / perfect verify--> STAGE_COMPLETE
    PLAYING --mine or failed verify, lives left--> LIFE_LOST --> WAITING
    PLAYING --mine or failed verify, last life--> LOST
    STAGE_COMPLETE --> REWARD_SELECTION --reward picked--> WAITING (stage + 1)

Every intent is processed to completion and answered with an
IntentResult. Illegal intents are rejected with a reason and leave the
run untouched; the current phase decides which intents are accepted.
"""
import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from .board import Board, ChordOutcome, Position
from .ledger import (
    ResourceLedger,
    STARTING_CHARGES,
    STARTING_LIVES,
    draw_rewards,
    stage_score,
)
from .snapshot import RunSnapshot
from .stage import StageGenerator
from .state import GamePhase, Outcome, Rejection, RunState
from .verification import VerificationOutcome, tally_flags


logger = logging.getLogger(__name__)

_VERIFICATION_FAILURES = {
    VerificationOutcome.WRONG_FLAG: Outcome.WRONG_FLAG,
    VerificationOutcome.MISSING_FLAGS: Outcome.MISSING_FLAGS,
    VerificationOutcome.TOO_MANY_FLAGS: Outcome.TOO_MANY_FLAGS,
}


# ============================================================================
# Configuration
# ============================================================================

@dataclass
class RunConfig:
    """
    Tunables of a run.

    Attributes:
        starting_lives: Lives at the start of a run.
        starting_charges: Safe-reveal charges at the start of a run.
        reward_choices: Reward options offered after each clear.
        stage_complete_delay: Seconds before a clear moves on to rewards.
        life_lost_delay: Seconds before a failed attempt restarts.
        final_stage: Clearing this stage wins the run. None plays forever.
    """

    starting_lives: int = STARTING_LIVES
    starting_charges: int = STARTING_CHARGES
    reward_choices: int = 3
    stage_complete_delay: float = 1.5
    life_lost_delay: float = 1.5
    final_stage: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        if self.starting_lives < 1:
            raise ValueError("A run needs at least one life")
        if self.starting_charges < 0:
            raise ValueError("Safe-reveal charges cannot be negative")
        if self.reward_choices < 1:
            raise ValueError("At least one reward choice is required")
        if self.stage_complete_delay < 0 or self.life_lost_delay < 0:
            raise ValueError("Delays cannot be negative")
        if self.final_stage is not None and self.final_stage < 1:
            raise ValueError("Final stage must be at least 1")


# ============================================================================
# Intent Result
# ============================================================================

@dataclass(frozen=True)
class IntentResult:
    """
    Answer to one player intent.

    Attributes:
        intent: Name of the intent (``"reveal"``, ``"verify"``, ...).
        snapshot: State of the run after the intent.
        rejection: Why the intent was refused, None if accepted.
        outcome: Stage outcome the intent produced, if any. A safe reveal
            that finds a mine reports DETONATED while play continues.
        position: Cell of interest: the hinted cell, the mine that went
            off, or the cell a safe reveal flagged.
    """

    intent: str
    snapshot: RunSnapshot
    rejection: Optional[Rejection] = None
    outcome: Optional[Outcome] = None
    position: Optional[Position] = None

    @property
    def accepted(self) -> bool:
        return self.rejection is None


Listener = Callable[[IntentResult], None]


# ============================================================================
# Run Controller
# ============================================================================

class RunController:
    """
    Owns the RunState of one game session and applies player intents.

    The random source and the clock are injectable so tests can make
    mine placement, stage sizes and timing deterministic.
    """

    def __init__(
        self,
        config: Optional[RunConfig] = None,
        generator: Optional[StageGenerator] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        """
        Initialize a run at stage 1.

        Args:
            config: Run tunables (defaults: 3 lives, 1 charge).
            generator: Stage-to-board formula.
            rng: Random source for boards, rewards and hints.
            clock: Monotonic seconds source for the stage timer.
        """
        self.config = config or RunConfig()
        self.generator = generator or StageGenerator()
        self.rng = rng or random.Random()
        self.clock = clock or time.monotonic
        self._listeners: List[Listener] = []
        self.state = self._fresh_state()

    # ========================================================================
    # Listeners
    # ========================================================================

    def subscribe(self, listener: Listener) -> None:
        """Call ``listener`` with every IntentResult from now on."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ========================================================================
    # Accessors
    # ========================================================================

    @property
    def phase(self) -> GamePhase:
        return self.state.phase

    @property
    def board(self) -> Board:
        return self.state.board

    @property
    def ledger(self) -> ResourceLedger:
        return self.state.ledger

    @property
    def elapsed_seconds(self) -> int:
        return self.state.elapsed_seconds(self.clock())

    def snapshot(self) -> RunSnapshot:
        """Capture what a renderer may show right now."""
        return RunSnapshot.capture(self.state, self.clock())

    # ========================================================================
    # Run Lifecycle
    # ========================================================================

    def new_game(self) -> IntentResult:
        """Abandon the current run and start over at stage 1."""
        self.state = self._fresh_state()
        logger.info("New run started")
        return self._accept("new_game")

    def advance(self) -> IntentResult:
        """
        Acknowledge a finished stage attempt.

        STAGE_COMPLETE moves to reward selection (or WON once the final
        stage is cleared); LIFE_LOST restarts the stage on a new board.
        """
        state = self.state
        if state.phase == GamePhase.STAGE_COMPLETE:
            state.advance_at = None
            final_stage = self.config.final_stage
            if final_stage is not None and state.stage >= final_stage:
                state.phase = GamePhase.WON
                logger.info(
                    "Run won after stage %d with %d points",
                    state.stage, state.ledger.total_score,
                )
                return self._accept("advance")
            state.reward_options = draw_rewards(
                self.rng, self.config.reward_choices
            )
            state.phase = GamePhase.REWARD_SELECTION
            return self._accept("advance")

        if state.phase == GamePhase.LIFE_LOST:
            self._start_stage(state.stage)
            return self._accept("advance")

        if state.phase.is_terminal:
            return self._reject("advance", Rejection.GAME_OVER)
        return self._reject("advance", Rejection.WRONG_PHASE)

    def tick(self) -> Optional[IntentResult]:
        """
        Perform a pending auto-advance once its delay has passed.

        Returns:
            The advance result, or None if nothing was due.
        """
        due = self.state.advance_at
        if due is None or self.clock() < due:
            return None
        return self.advance()

    def select_reward(self, index: int) -> IntentResult:
        """Take one of the offered rewards and move to the next stage."""
        rejection = self._phase_rejection(GamePhase.REWARD_SELECTION)
        if rejection:
            return self._reject("select_reward", rejection)
        options = self.state.reward_options
        if not 0 <= index < len(options):
            return self._reject("select_reward", Rejection.INVALID_REWARD)

        reward = options[index]
        self.state.ledger.apply_reward(reward)
        logger.info("Reward picked: %s", reward.value)
        self._start_stage(self.state.stage + 1)
        return self._accept("select_reward")

    # ========================================================================
    # Board Intents
    # ========================================================================

    def reveal(self, row: int, col: int) -> IntentResult:
        """
        Open a cell. The first reveal of a stage places the mines.

        Args:
            row: Row index.
            col: Column index.
        """
        rejection = self._phase_rejection(GamePhase.WAITING, GamePhase.PLAYING)
        if rejection:
            return self._reject("reveal", rejection)
        rejection = self._target_rejection(row, col)
        if rejection:
            return self._reject("reveal", rejection)

        if self.state.phase == GamePhase.WAITING:
            self._begin_play(row, col)
        self.state.hint = None
        self.state.board.reveal(row, col)
        return self._after_reveal("reveal", row, col)

    def toggle_flag(self, row: int, col: int) -> IntentResult:
        """Place or remove a player flag."""
        rejection = self._phase_rejection(GamePhase.WAITING, GamePhase.PLAYING)
        if rejection:
            return self._reject("toggle_flag", rejection)
        board = self.state.board
        if not board.in_bounds(row, col):
            return self._reject("toggle_flag", Rejection.OUT_OF_BOUNDS)
        if not board.toggle_flag(row, col):
            return self._reject("toggle_flag", Rejection.INVALID_TARGET)
        return self._accept("toggle_flag")

    def chord(self, row: int, col: int) -> IntentResult:
        """Reveal the unflagged neighbors of a satisfied number."""
        rejection = self._playing_rejection()
        if rejection:
            return self._reject("chord", rejection)
        board = self.state.board
        if not board.in_bounds(row, col):
            return self._reject("chord", Rejection.OUT_OF_BOUNDS)

        result = board.chord_reveal(row, col)
        if result.outcome == ChordOutcome.INVALID:
            return self._reject("chord", Rejection.INVALID_TARGET)
        self.state.hint = None
        if result.outcome == ChordOutcome.DETONATED:
            return self._lose_life("chord", Outcome.DETONATED, result.mine)
        if board.is_cleared:
            return self._complete_stage("chord", Outcome.NORMAL)
        return self._accept("chord")

    def verify(self) -> IntentResult:
        """
        Check the flags against the mines.

        An exact match clears the stage as PERFECT regardless of the
        cells still hidden; any mismatch costs a life.
        """
        rejection = self._playing_rejection()
        if rejection:
            return self._reject("verify", rejection)

        tally = tally_flags(self.state.board)
        logger.debug(
            "Verification: %d correct, %d incorrect, %d mines",
            tally.correct_flags, tally.incorrect_flags, tally.total_mines,
        )
        if tally.is_perfect:
            return self._complete_stage("verify", Outcome.PERFECT)
        return self._lose_life("verify", _VERIFICATION_FAILURES[tally.outcome])

    def hint(self) -> IntentResult:
        """Point at a random hidden safe cell without revealing it."""
        rejection = self._playing_rejection()
        if rejection:
            return self._reject("hint", rejection)
        candidates = self.state.board.hidden_safe_cells()
        if not candidates:
            return self._reject("hint", Rejection.NO_SAFE_CELLS)

        position = self.rng.choice(candidates)
        self.state.hint = position
        self.state.ledger.record_hint()
        return self._accept("hint", position=position)

    # ========================================================================
    # Safe Reveal
    # ========================================================================

    def arm_safe_reveal(self) -> IntentResult:
        """Enter safe-reveal mode; the next target is checked first."""
        rejection = self._playing_rejection()
        if rejection:
            return self._reject("arm_safe_reveal", rejection)
        if self.state.ledger.safe_reveal_charges <= 0:
            return self._reject("arm_safe_reveal", Rejection.NO_CHARGES)
        self.state.safe_reveal_armed = True
        return self._accept("arm_safe_reveal")

    def disarm_safe_reveal(self) -> IntentResult:
        """Leave safe-reveal mode without spending a charge."""
        rejection = self._playing_rejection()
        if rejection:
            return self._reject("disarm_safe_reveal", rejection)
        if not self.state.safe_reveal_armed:
            return self._reject("disarm_safe_reveal", Rejection.NOT_ARMED)
        self.state.safe_reveal_armed = False
        return self._accept("disarm_safe_reveal")

    def use_safe_reveal(self, row: int, col: int) -> IntentResult:
        """
        Spend a charge to inspect a cell before opening it.

        A safe cell is revealed normally. A mine costs a life and gets a
        permanent engine flag instead of ending the stage; on the last
        life the run is lost. Illegal targets cost nothing and keep the
        mode armed.

        Args:
            row: Row index.
            col: Column index.
        """
        intent = "use_safe_reveal"
        rejection = self._playing_rejection()
        if rejection:
            return self._reject(intent, rejection)
        state = self.state
        if not state.safe_reveal_armed:
            return self._reject(intent, Rejection.NOT_ARMED)
        if state.ledger.safe_reveal_charges <= 0:
            return self._reject(intent, Rejection.NO_CHARGES)
        rejection = self._target_rejection(row, col)
        if rejection:
            return self._reject(intent, rejection)

        state.ledger.spend_charge()
        state.safe_reveal_armed = False
        state.hint = None
        board = state.board
        if board.get_cell(row, col).is_mine:
            if state.ledger.spend_life():
                board.auto_flag(row, col)
                logger.info(
                    "Safe reveal found a mine at (%d, %d); %d lives left",
                    row, col, state.ledger.lives,
                )
                return self._accept(intent, Outcome.DETONATED, (row, col))
            return self._finish_run(intent, Outcome.DETONATED, (row, col))

        board.reveal(row, col)
        return self._after_reveal(intent, row, col)

    # ========================================================================
    # Transitions (Internal)
    # ========================================================================

    def _fresh_state(self) -> RunState:
        ledger = ResourceLedger(
            lives=self.config.starting_lives,
            safe_reveal_charges=self.config.starting_charges,
        )
        return RunState(board=self._build_board(1), ledger=ledger)

    def _build_board(self, stage: int) -> Board:
        return Board(self.generator.config_for(stage, self.rng))

    def _start_stage(self, stage: int) -> None:
        """Replace the board and wait for the first reveal."""
        state = self.state
        state.board = self._build_board(stage)
        state.stage = stage
        state.phase = GamePhase.WAITING
        state.safe_reveal_armed = False
        state.reward_options = []
        state.last_flag_accuracy = None
        state.hint = None
        state.started_at = None
        state.finished_at = None
        state.advance_at = None

    def _begin_play(self, row: int, col: int) -> None:
        state = self.state
        board = state.board
        if not board.mines_placed:
            board.place_mines(row, col, self.rng)
        state.started_at = self.clock()
        state.phase = GamePhase.PLAYING
        logger.info(
            "Stage %d started: %dx%d board, %d mines",
            state.stage, board.rows, board.cols, board.total_mines,
        )

    def _after_reveal(self, intent: str, row: int, col: int) -> IntentResult:
        board = self.state.board
        if board.get_cell(row, col).is_mine:
            return self._lose_life(intent, Outcome.DETONATED, (row, col))
        if board.is_cleared:
            return self._complete_stage(intent, Outcome.NORMAL)
        return self._accept(intent)

    def _complete_stage(self, intent: str, outcome: Outcome) -> IntentResult:
        state = self.state
        perfect = outcome == Outcome.PERFECT
        if not perfect:
            state.board.flag_remaining_mines()
        self._record_flag_accuracy()
        self._stop_timer()

        elapsed = state.elapsed_seconds(self.clock())
        points = stage_score(state.board.total_mines, elapsed, state.stage)
        state.ledger.record_clear(points, perfect)
        state.last_outcome = outcome
        state.safe_reveal_armed = False
        state.phase = GamePhase.STAGE_COMPLETE
        state.advance_at = self.clock() + self.config.stage_complete_delay
        logger.info(
            "Stage %d cleared (%s) in %ds: +%d points",
            state.stage, outcome.value, elapsed, points,
        )
        return self._accept(intent, outcome)

    def _lose_life(
        self,
        intent: str,
        outcome: Outcome,
        position: Optional[Position] = None,
    ) -> IntentResult:
        state = self.state
        if not state.ledger.spend_life():
            return self._finish_run(intent, outcome, position)

        self._end_attempt(outcome)
        state.phase = GamePhase.LIFE_LOST
        state.advance_at = self.clock() + self.config.life_lost_delay
        logger.info(
            "Stage %d failed (%s); %d lives left",
            state.stage, outcome.value, state.ledger.lives,
        )
        return self._accept(intent, outcome, position)

    def _finish_run(
        self,
        intent: str,
        outcome: Outcome,
        position: Optional[Position] = None,
    ) -> IntentResult:
        state = self.state
        self._end_attempt(outcome)
        state.phase = GamePhase.LOST
        state.advance_at = None
        logger.info(
            "Run lost on stage %d (%s) with %d points",
            state.stage, outcome.value, state.ledger.total_score,
        )
        return self._accept(intent, outcome, position)

    def _end_attempt(self, outcome: Outcome) -> None:
        state = self.state
        state.board.reveal_all_mines()
        self._record_flag_accuracy()
        state.last_outcome = outcome
        state.safe_reveal_armed = False
        self._stop_timer()

    def _record_flag_accuracy(self) -> None:
        """Store the flag accuracy of the attempt that just ended."""
        self.state.last_flag_accuracy = tally_flags(self.state.board).flag_accuracy

    def _stop_timer(self) -> None:
        if self.state.started_at is not None:
            self.state.finished_at = self.clock()

    # ========================================================================
    # Validation (Internal)
    # ========================================================================

    def _phase_rejection(self, *allowed: GamePhase) -> Optional[Rejection]:
        phase = self.state.phase
        if phase in allowed:
            return None
        if phase.is_terminal:
            return Rejection.GAME_OVER
        return Rejection.WRONG_PHASE

    def _playing_rejection(self) -> Optional[Rejection]:
        """Rejection for intents that need mines on the board."""
        if self.state.phase == GamePhase.WAITING:
            return Rejection.NOT_STARTED
        return self._phase_rejection(GamePhase.PLAYING)

    def _target_rejection(self, row: int, col: int) -> Optional[Rejection]:
        board = self.state.board
        if not board.in_bounds(row, col):
            return Rejection.OUT_OF_BOUNDS
        if not board.get_cell(row, col).is_hidden:
            return Rejection.INVALID_TARGET
        return None

    def _reject(self, intent: str, rejection: Rejection) -> IntentResult:
        logger.debug("Rejected %s: %s", intent, rejection.value)
        return self._emit(IntentResult(intent, self.snapshot(), rejection))

    def _accept(
        self,
        intent: str,
        outcome: Optional[Outcome] = None,
        position: Optional[Position] = None,
    ) -> IntentResult:
        result = IntentResult(
            intent, self.snapshot(), outcome=outcome, position=position
        )
        return self._emit(result)

    def _emit(self, result: IntentResult) -> IntentResult:
        for listener in list(self._listeners):
            listener(result)
        return result
