"""
RogueSweeper game module.

Provides the game state engine: board, stage formula, flag
verification, resource ledger and the run controller.
"""
from .cell import Cell, CellState
from .board import Board, BoardConfig, ChordOutcome, ChordResult
from .stage import StageGenerator, MAX_ROWS, MAX_COLS
from .verification import FlagTally, VerificationOutcome, classify, tally_flags
from .ledger import ResourceLedger, Reward, draw_rewards, stage_score
from .state import GamePhase, Outcome, Rejection, RunState
from .snapshot import CellView, RunSnapshot
from .run import IntentResult, RunConfig, RunController
from .environment import RogueSweeperEnv

__all__ = [
    "Cell",
    "CellState",
    "Board",
    "BoardConfig",
    "ChordOutcome",
    "ChordResult",
    "StageGenerator",
    "MAX_ROWS",
    "MAX_COLS",
    "FlagTally",
    "VerificationOutcome",
    "classify",
    "tally_flags",
    "ResourceLedger",
    "Reward",
    "draw_rewards",
    "stage_score",
    "GamePhase",
    "Outcome",
    "Rejection",
    "RunState",
    "CellView",
    "RunSnapshot",
    "IntentResult",
    "RunConfig",
    "RunController",
    "RogueSweeperEnv",
]
