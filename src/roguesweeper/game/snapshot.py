"""
Read-only snapshots of a run for renderers.

A snapshot copies only what the player may see: mines and neighbor
counts of unrevealed cells are never included.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .cell import Cell
from .ledger import Reward
from .state import GamePhase, Outcome, RunState


# ============================================================================
# Cell View
# ============================================================================

@dataclass(frozen=True)
class CellView:
    """
    Visible part of one cell.

    Attributes:
        revealed: Cell has been opened.
        flagged: Cell carries a flag.
        auto_flagged: The flag was placed by the engine.
        mine: Whether the cell is a mine; None while unrevealed.
        adjacent_mines: Neighbor mine count; None unless revealed and safe.
    """

    revealed: bool
    flagged: bool
    auto_flagged: bool
    mine: Optional[bool] = None
    adjacent_mines: Optional[int] = None

    @classmethod
    def from_cell(cls, cell: Cell) -> "CellView":
        if not cell.is_revealed:
            return cls(False, cell.is_flagged, cell.auto_flagged)
        return cls(
            revealed=True,
            flagged=False,
            auto_flagged=cell.auto_flagged,
            mine=cell.is_mine,
            adjacent_mines=None if cell.is_mine else cell.adjacent_mines,
        )

    def to_symbol(self) -> str:
        """Single-character rendering of the cell."""
        if self.flagged:
            return "F"
        if not self.revealed:
            return "."
        if self.mine:
            return "*"
        if self.adjacent_mines == 0:
            return " "
        return str(self.adjacent_mines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "revealed": self.revealed,
            "flagged": self.flagged,
            "auto_flagged": self.auto_flagged,
            "mine": self.mine,
            "adjacent_mines": self.adjacent_mines,
        }


# ============================================================================
# Run Snapshot
# ============================================================================

@dataclass(frozen=True)
class RunSnapshot:
    """Immutable view of a run after an intent."""

    phase: GamePhase
    stage: int
    score: int
    lives: int
    safe_reveal_charges: int
    safe_reveal_armed: bool
    stages_cleared: int
    perfect_clears: int
    hints_used: int
    elapsed_seconds: int
    last_outcome: Optional[Outcome]
    last_flag_accuracy: Optional[int]
    reward_options: Tuple[Reward, ...]
    hint: Optional[Tuple[int, int]]
    rows: int
    cols: int
    total_mines: int
    flagged_count: int
    revealed_count: int
    cells: Tuple[Tuple[CellView, ...], ...]

    @classmethod
    def capture(cls, state: RunState, now: float) -> "RunSnapshot":
        """
        Copy the visible state of a run.

        Args:
            state: The run to capture.
            now: Current clock value, for the stage timer.

        Returns:
            A snapshot that no later intent can change.
        """
        board = state.board
        ledger = state.ledger
        cells = tuple(
            tuple(CellView.from_cell(cell) for cell in row)
            for row in board.cells()
        )
        return cls(
            phase=state.phase,
            stage=state.stage,
            score=ledger.total_score,
            lives=ledger.lives,
            safe_reveal_charges=ledger.safe_reveal_charges,
            safe_reveal_armed=state.safe_reveal_armed,
            stages_cleared=ledger.stages_cleared,
            perfect_clears=ledger.perfect_clears,
            hints_used=ledger.hints_used,
            elapsed_seconds=state.elapsed_seconds(now),
            last_outcome=state.last_outcome,
            last_flag_accuracy=state.last_flag_accuracy,
            reward_options=tuple(state.reward_options),
            hint=state.hint,
            rows=board.rows,
            cols=board.cols,
            total_mines=board.total_mines,
            flagged_count=board.flagged_count,
            revealed_count=board.revealed_count,
            cells=cells,
        )

    def cell(self, row: int, col: int) -> CellView:
        return self.cells[row][col]

    @property
    def mines_left(self) -> int:
        """Mine counter shown to the player (can go negative)."""
        return self.total_mines - self.flagged_count

    def render_text(self) -> str:
        """Render the board as rows of space-separated symbols."""
        return "\n".join(
            " ".join(view.to_symbol() for view in row) for row in self.cells
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation."""
        return {
            "phase": self.phase.value,
            "stage": self.stage,
            "score": self.score,
            "lives": self.lives,
            "safe_reveal_charges": self.safe_reveal_charges,
            "safe_reveal_armed": self.safe_reveal_armed,
            "stages_cleared": self.stages_cleared,
            "perfect_clears": self.perfect_clears,
            "hints_used": self.hints_used,
            "elapsed_seconds": self.elapsed_seconds,
            "last_outcome": (
                self.last_outcome.value if self.last_outcome else None
            ),
            "last_flag_accuracy": self.last_flag_accuracy,
            "reward_options": [reward.value for reward in self.reward_options],
            "hint": list(self.hint) if self.hint else None,
            "rows": self.rows,
            "cols": self.cols,
            "total_mines": self.total_mines,
            "flagged_count": self.flagged_count,
            "revealed_count": self.revealed_count,
            "cells": [[view.to_dict() for view in row] for row in self.cells],
        }
