"""
Flag verification for RogueSweeper.

Compares the flags on a board with the real mine layout and classifies
the result. A perfect match completes the stage; anything else costs a
life.
"""
from dataclasses import dataclass
from enum import Enum

from .board import Board


class VerificationOutcome(Enum):
    """Classification of a flag check."""

    PERFECT = "perfect"
    WRONG_FLAG = "wrong_flag"
    MISSING_FLAGS = "missing_flags"
    TOO_MANY_FLAGS = "too_many_flags"


def classify(
    correct_flags: int, incorrect_flags: int, total_mines: int
) -> VerificationOutcome:
    """
    Classify flag counts, earlier rules taking precedence.

    Args:
        correct_flags: Flags sitting on mines.
        incorrect_flags: Flags sitting on safe cells.
        total_mines: Mines on the board.

    Returns:
        PERFECT, WRONG_FLAG, MISSING_FLAGS or TOO_MANY_FLAGS.
    """
    if correct_flags == total_mines and incorrect_flags == 0:
        return VerificationOutcome.PERFECT
    if incorrect_flags > 0:
        return VerificationOutcome.WRONG_FLAG
    if correct_flags < total_mines:
        return VerificationOutcome.MISSING_FLAGS
    # Unreachable on a consistent board: correct flags cannot outnumber mines
    return VerificationOutcome.TOO_MANY_FLAGS


@dataclass(frozen=True)
class FlagTally:
    """Counts gathered by a verification sweep."""

    correct_flags: int
    incorrect_flags: int
    total_mines: int

    @property
    def outcome(self) -> VerificationOutcome:
        return classify(
            self.correct_flags, self.incorrect_flags, self.total_mines
        )

    @property
    def is_perfect(self) -> bool:
        return self.outcome == VerificationOutcome.PERFECT

    @property
    def flag_accuracy(self) -> int:
        """Percentage of mines flagged, penalized by wrong flags."""
        denominator = self.total_mines + self.incorrect_flags
        if denominator == 0:
            return 100
        return round(100 * self.correct_flags / denominator)


def tally_flags(board: Board) -> FlagTally:
    """
    Scan every cell and count correct and incorrect flags.

    Engine-placed flags count like player flags.
    """
    correct = 0
    incorrect = 0
    for row in board.cells():
        for cell in row:
            if not cell.is_flagged:
                continue
            if cell.is_mine:
                correct += 1
            else:
                incorrect += 1
    return FlagTally(correct, incorrect, board.total_mines)
