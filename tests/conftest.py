"""
Pytest configuration and shared fixtures.
"""
import random
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from roguesweeper.game import (
    Board,
    BoardConfig,
    Cell,
    RunConfig,
    RunController,
    StageGenerator,
)


# ============================================================================
# Test Doubles
# ============================================================================

class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass
class FixedStageGenerator(StageGenerator):
    """Stage generator that always builds the same board size."""

    rows: int = 5
    cols: int = 5
    mines: int = 3

    def config_for(
        self, stage: int, rng: Optional[random.Random] = None
    ) -> BoardConfig:
        if stage < 1:
            raise ValueError(f"Stage must be at least 1, got {stage}")
        return BoardConfig(width=self.cols, height=self.rows, num_mines=self.mines)


def make_controller(
    mines: List[tuple],
    rows: int = 5,
    cols: int = 5,
    lives: int = 3,
    charges: int = 1,
    clock: Optional[ManualClock] = None,
    **config_kwargs,
) -> RunController:
    """Controller whose first board has the given mine layout."""
    controller = RunController(
        config=RunConfig(
            starting_lives=lives, starting_charges=charges, **config_kwargs
        ),
        generator=FixedStageGenerator(rows=rows, cols=cols, mines=len(mines)),
        rng=random.Random(1234),
        clock=clock or ManualClock(),
    )
    controller.board.place_mines_at(mines)
    return controller


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def default_board() -> Board:
    """Create a default 9x9 board with 10 mines."""
    return Board()


@pytest.fixture
def empty_board() -> Board:
    """Create a board with no mines for cascade testing."""
    return Board(BoardConfig(5, 5, 0))


@pytest.fixture
def corner_mine_board() -> Board:
    """
    5x5 board with a single mine in the bottom-right corner.

    Layout (M = mine):
        0 0 0 0 0
        0 0 0 0 0
        0 0 0 0 0
        0 0 0 1 1
        0 0 0 1 M
    """
    board = Board(BoardConfig(5, 5, 1))
    board.place_mines_at([(4, 4)])
    return board


@pytest.fixture
def wall_board() -> Board:
    """
    5x5 board with a column of mines splitting it in two.

    Layout (M = mine):
        0 2 M 2 0
        0 3 M 3 0
        0 3 M 3 0
        0 3 M 3 0
        0 2 M 2 0
    """
    board = Board(BoardConfig(5, 5, 5))
    board.place_mines_at([(row, 2) for row in range(5)])
    return board


# ============================================================================
# Cell Fixtures
# ============================================================================

@pytest.fixture
def hidden_cell() -> Cell:
    """Create a hidden cell."""
    return Cell()


@pytest.fixture
def mine_cell() -> Cell:
    """Create a cell containing a mine."""
    return Cell(is_mine=True)


# ============================================================================
# Run Fixtures
# ============================================================================

@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def corner_run(clock: ManualClock) -> RunController:
    """Run on a 5x5 board with one mine at (4, 4)."""
    return make_controller([(4, 4)], clock=clock)


@pytest.fixture
def wall_run(clock: ManualClock) -> RunController:
    """Run on a 5x5 board with a wall of mines in column 2."""
    return make_controller([(row, 2) for row in range(5)], clock=clock)


@pytest.fixture
def run_factory(clock: ManualClock):
    """Build controllers with a scripted first-stage mine layout."""
    def factory(mines: List[tuple], **kwargs) -> RunController:
        kwargs.setdefault("clock", clock)
        return make_controller(mines, **kwargs)
    return factory
