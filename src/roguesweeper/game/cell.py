"""
Cell module for RogueSweeper.

A cell is one grid position: whether it holds a mine, how many mines
touch it, and what the player currently sees there.
"""
from enum import Enum, auto
from dataclasses import dataclass


# ============================================================================
# Constants
# ============================================================================

class CellState(Enum):
    """Visible state of a cell. Flagged and revealed are mutually exclusive."""

    HIDDEN = auto()
    REVEALED = auto()
    FLAGGED = auto()


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass
class Cell:
    """
    A single cell in the RogueSweeper grid.

    Attributes:
        is_mine: Whether this cell contains a mine.
        adjacent_mines: Mines among the (up to 8) neighbors. Written once
            when mines are placed.
        state: Hidden, revealed or flagged.
        auto_flagged: Flag was placed by the engine; the player cannot
            remove it.
    """

    is_mine: bool = False
    adjacent_mines: int = 0
    state: CellState = CellState.HIDDEN
    auto_flagged: bool = False

    def reveal(self) -> bool:
        """
        Reveal this cell.

        Returns:
            True if the cell went from hidden to revealed.
        """
        if self.state != CellState.HIDDEN:
            return False
        self.state = CellState.REVEALED
        return True

    def toggle_flag(self) -> bool:
        """
        Toggle the player's flag on this cell.

        Returns:
            True if the flag changed, False for revealed or
            engine-flagged cells.
        """
        if self.state == CellState.REVEALED or self.auto_flagged:
            return False
        if self.state == CellState.HIDDEN:
            self.state = CellState.FLAGGED
        else:
            self.state = CellState.HIDDEN
        return True

    def lock_flag(self) -> bool:
        """
        Place a permanent engine flag.

        Returns:
            True if the cell was not flagged before.
        """
        if self.state == CellState.REVEALED:
            return False
        newly_flagged = self.state == CellState.HIDDEN
        self.state = CellState.FLAGGED
        self.auto_flagged = True
        return newly_flagged

    @property
    def is_hidden(self) -> bool:
        """Check if cell is hidden."""
        return self.state == CellState.HIDDEN

    @property
    def is_revealed(self) -> bool:
        """Check if cell is revealed."""
        return self.state == CellState.REVEALED

    @property
    def is_flagged(self) -> bool:
        """Check if cell is flagged."""
        return self.state == CellState.FLAGGED

    def to_observation(self) -> int:
        """
        Encode the visible part of the cell as an integer.

        Returns:
            -1: Hidden cell
            -2: Flagged cell
            0-8: Revealed cell with adjacent mine count
            9: Revealed mine
        """
        if self.state == CellState.HIDDEN:
            return -1
        if self.state == CellState.FLAGGED:
            return -2
        if self.is_mine:
            return 9
        return self.adjacent_mines
