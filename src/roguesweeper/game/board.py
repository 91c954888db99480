"""
Board module for RogueSweeper.

Implements the grid of one stage: mine placement, iterative flood-fill
reveal, flags and chord reveal. Win/loss bookkeeping lives in the run
controller; the board only reports what happened.
"""
import random
from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable, List, Optional, Tuple

import numpy as np

from .cell import Cell, CellState


Position = Tuple[int, int]


# ============================================================================
# Configuration
# ============================================================================

@dataclass
class BoardConfig:
    """
    Dimensions and mine count of a board.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        num_mines: Total mines to place.
    """

    width: int = 9
    height: int = 9
    num_mines: int = 10

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.width < 1 or self.height < 1:
            raise ValueError("Board dimensions must be positive")
        if self.num_mines < 0:
            raise ValueError("Number of mines cannot be negative")
        # The first revealed cell is always kept free of mines
        max_mines = self.width * self.height - 1
        if self.num_mines > max_mines:
            raise ValueError(f"Too many mines (max {max_mines})")

    @property
    def total_cells(self) -> int:
        return self.width * self.height

    @property
    def safe_cells(self) -> int:
        return self.total_cells - self.num_mines


# ============================================================================
# Chord Result
# ============================================================================

class ChordOutcome(Enum):
    """Result classification of a chord reveal."""

    INVALID = auto()
    SAFE = auto()
    DETONATED = auto()


@dataclass(frozen=True)
class ChordResult:
    """
    Outcome of a chord reveal.

    Attributes:
        outcome: Whether the chord was invalid, safe or hit a mine.
        revealed: Number of cells newly revealed.
        mine: Position of the detonated mine, if any.
    """

    outcome: ChordOutcome
    revealed: int = 0
    mine: Optional[Position] = None


# ============================================================================
# Board Class
# ============================================================================

@dataclass
class Board:
    """
    RogueSweeper stage board.

    Mines are placed lazily on the first reveal so the clicked cell is
    never a mine. ``revealed_count`` and ``flagged_count`` are kept in
    step with the grid on every mutation.
    """

    config: BoardConfig = field(default_factory=lambda: BoardConfig())
    _grid: List[List[Cell]] = field(default_factory=list, repr=False)
    _mines_placed: bool = False
    _revealed_count: int = 0
    _revealed_mines: int = 0
    _flagged_count: int = 0

    def __post_init__(self) -> None:
        """Initialize the grid after dataclass creation."""
        self._init_grid()

    # ========================================================================
    # Grid Initialization (Low-level)
    # ========================================================================

    def _init_grid(self) -> None:
        """Create empty grid of cells."""
        self._grid = [
            [Cell() for _ in range(self.config.width)]
            for _ in range(self.config.height)
        ]

    def place_mines(
        self,
        exclude_row: int,
        exclude_col: int,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Place mines uniformly at random, keeping one cell free.

        Args:
            exclude_row: Row of the first revealed cell.
            exclude_col: Column of the first revealed cell.
            rng: Random source (module-level ``random`` if omitted).

        Raises:
            RuntimeError: If mines were already placed on this board.
        """
        rng = rng or random
        positions = self._get_valid_mine_positions((exclude_row, exclude_col))
        self.place_mines_at(rng.sample(positions, self.config.num_mines))

    def place_mines_at(self, positions: Iterable[Position]) -> None:
        """
        Place mines at explicit positions.

        Args:
            positions: Distinct in-bounds (row, col) pairs, exactly
                ``config.num_mines`` of them.

        Raises:
            RuntimeError: If mines were already placed on this board.
            ValueError: If the positions do not match the configuration.
        """
        if self._mines_placed:
            raise RuntimeError("Mines have already been placed on this board")
        mines = set(positions)
        if len(mines) != self.config.num_mines:
            raise ValueError(
                f"Expected {self.config.num_mines} distinct mine positions, "
                f"got {len(mines)}"
            )
        for row, col in mines:
            if not self.in_bounds(row, col):
                raise ValueError(f"Mine position ({row}, {col}) is off the board")
            self._grid[row][col].is_mine = True
        self._calculate_adjacent_mines()
        self._mines_placed = True

    def _get_valid_mine_positions(self, exclude: Position) -> List[Position]:
        """Get all valid positions for mine placement."""
        positions = []
        for row in range(self.config.height):
            for col in range(self.config.width):
                if (row, col) != exclude:
                    positions.append((row, col))
        return positions

    def _calculate_adjacent_mines(self) -> None:
        """Calculate adjacent mine counts for all non-mine cells."""
        for row in range(self.config.height):
            for col in range(self.config.width):
                if not self._grid[row][col].is_mine:
                    count = self._count_adjacent_mines(row, col)
                    self._grid[row][col].adjacent_mines = count

    def _count_adjacent_mines(self, row: int, col: int) -> int:
        """Count mines adjacent to a specific cell."""
        count = 0
        for neighbor_row, neighbor_col in self.neighbors(row, col):
            if self._grid[neighbor_row][neighbor_col].is_mine:
                count += 1
        return count

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def neighbors(self, row: int, col: int) -> List[Position]:
        """
        Get in-bounds Moore neighbors of a cell.

        Args:
            row: Row index of center cell.
            col: Column index of center cell.

        Returns:
            Up to 8 (row, col) tuples; fewer on edges and corners.
        """
        neighbors = []
        for delta_row in (-1, 0, 1):
            for delta_col in (-1, 0, 1):
                if delta_row == 0 and delta_col == 0:
                    continue
                new_row = row + delta_row
                new_col = col + delta_col
                if self.in_bounds(new_row, new_col):
                    neighbors.append((new_row, new_col))
        return neighbors

    def count_flagged_neighbors(self, row: int, col: int) -> int:
        """Count flagged cells adjacent to position."""
        count = 0
        for neighbor_row, neighbor_col in self.neighbors(row, col):
            if self._grid[neighbor_row][neighbor_col].is_flagged:
                count += 1
        return count

    def in_bounds(self, row: int, col: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= row < self.config.height and 0 <= col < self.config.width

    # ========================================================================
    # Cell Actions (Mid-level)
    # ========================================================================

    def reveal(self, row: int, col: int) -> int:
        """
        Reveal a cell, flooding outwards from zero-count cells.

        The flood uses an explicit queue so large empty regions never
        deepen the call stack. Flagged cells stop the flood.

        Args:
            row: Row index to reveal.
            col: Column index to reveal.

        Returns:
            Number of newly revealed cells (0 if nothing happened).
        """
        if not self.in_bounds(row, col):
            return 0
        if not self._grid[row][col].is_hidden:
            return 0

        revealed = 0
        queue = deque([(row, col)])
        while queue:
            current_row, current_col = queue.popleft()
            cell = self._grid[current_row][current_col]
            if not cell.reveal():
                continue
            self._revealed_count += 1
            revealed += 1

            if cell.is_mine:
                self._revealed_mines += 1
                continue
            if cell.adjacent_mines > 0:
                continue
            for neighbor_row, neighbor_col in self.neighbors(
                current_row, current_col
            ):
                if self._grid[neighbor_row][neighbor_col].is_hidden:
                    queue.append((neighbor_row, neighbor_col))

        return revealed

    def toggle_flag(self, row: int, col: int) -> bool:
        """
        Toggle the player's flag on a cell.

        Args:
            row: Row index.
            col: Column index.

        Returns:
            True if the flag changed.
        """
        if not self.in_bounds(row, col):
            return False
        cell = self._grid[row][col]
        if not cell.toggle_flag():
            return False
        self._flagged_count += 1 if cell.is_flagged else -1
        return True

    def auto_flag(self, row: int, col: int) -> bool:
        """Place an engine flag the player cannot remove."""
        if not self.in_bounds(row, col):
            return False
        cell = self._grid[row][col]
        if cell.is_revealed:
            return False
        if cell.lock_flag():
            self._flagged_count += 1
        return True

    def chord_reveal(self, row: int, col: int) -> ChordResult:
        """
        Reveal all unflagged neighbors once the flags match the number.

        Args:
            row: Row index of a revealed numbered cell.
            col: Column index of a revealed numbered cell.

        Returns:
            ChordResult; DETONATED carries the mine that was opened.
        """
        if not self._can_chord(row, col):
            return ChordResult(ChordOutcome.INVALID)

        revealed = 0
        for neighbor_row, neighbor_col in self.neighbors(row, col):
            neighbor = self._grid[neighbor_row][neighbor_col]
            if not neighbor.is_hidden:
                continue
            revealed += self.reveal(neighbor_row, neighbor_col)
            if neighbor.is_mine:
                return ChordResult(
                    ChordOutcome.DETONATED,
                    revealed,
                    (neighbor_row, neighbor_col),
                )

        return ChordResult(ChordOutcome.SAFE, revealed)

    def _can_chord(self, row: int, col: int) -> bool:
        """Check if chord action is valid."""
        if not self.in_bounds(row, col):
            return False
        cell = self._grid[row][col]
        if not cell.is_revealed or cell.is_mine or cell.adjacent_mines == 0:
            return False
        return self.count_flagged_neighbors(row, col) == cell.adjacent_mines

    # ========================================================================
    # Whole-board Sweeps
    # ========================================================================

    def reveal_all_mines(self) -> None:
        """
        Reveal mines for the loss display.

        Flagged mines keep their flag and stay unrevealed, so no cell is
        ever both flagged and revealed. Renderers show them as flags.
        """
        for row in self._grid:
            for cell in row:
                if cell.is_mine and cell.reveal():
                    self._revealed_count += 1
                    self._revealed_mines += 1

    def flag_remaining_mines(self) -> None:
        """Auto-flag every mine the player left unflagged."""
        for row in range(self.config.height):
            for col in range(self.config.width):
                cell = self._grid[row][col]
                if cell.is_mine and cell.is_hidden:
                    self.auto_flag(row, col)

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def rows(self) -> int:
        return self.config.height

    @property
    def cols(self) -> int:
        return self.config.width

    @property
    def total_mines(self) -> int:
        return self.config.num_mines

    @property
    def mines_placed(self) -> bool:
        """Whether the mine layout has been fixed."""
        return self._mines_placed

    @property
    def revealed_count(self) -> int:
        return self._revealed_count

    @property
    def flagged_count(self) -> int:
        return self._flagged_count

    @property
    def is_cleared(self) -> bool:
        """Check if every non-mine cell is revealed."""
        if not self._mines_placed:
            return False
        return self.safe_cells_revealed() >= self.config.safe_cells

    def safe_cells_revealed(self) -> int:
        """Revealed cells that are not mines."""
        return self._revealed_count - self._revealed_mines

    def get_cell(self, row: int, col: int) -> Optional[Cell]:
        """Get cell at position, or None if invalid."""
        if not self.in_bounds(row, col):
            return None
        return self._grid[row][col]

    def cells(self) -> List[List[Cell]]:
        """Rows of cells, for read-only views."""
        return self._grid

    def mine_positions(self) -> List[Position]:
        """Positions of every mine on the board."""
        return [
            (row, col)
            for row in range(self.config.height)
            for col in range(self.config.width)
            if self._grid[row][col].is_mine
        ]

    def hidden_safe_cells(self) -> List[Position]:
        """Hidden, unflagged cells without a mine."""
        return [
            (row, col)
            for row in range(self.config.height)
            for col in range(self.config.width)
            if self._grid[row][col].state == CellState.HIDDEN
            and not self._grid[row][col].is_mine
        ]

    def get_observation(self) -> np.ndarray:
        """
        Get board state as a numpy array.

        Returns:
            2D int8 array where:
                -1 = hidden
                -2 = flagged
                0-8 = revealed with adjacent count
                9 = revealed mine
        """
        obs = np.zeros((self.config.height, self.config.width), dtype=np.int8)
        for row in range(self.config.height):
            for col in range(self.config.width):
                obs[row, col] = self._grid[row][col].to_observation()
        return obs

    def get_valid_actions(self) -> List[Position]:
        """
        Get list of cells that can still be revealed.

        Returns:
            List of hidden (row, col) positions.
        """
        actions = []
        for row in range(self.config.height):
            for col in range(self.config.width):
                if self._grid[row][col].state == CellState.HIDDEN:
                    actions.append((row, col))
        return actions
