"""
Unit tests for Board class.

Tests configuration validation, mine placement, flood fill, flags,
chord reveal and whole-board sweeps.
"""
import random

import numpy as np
import pytest
from roguesweeper.game import Board, BoardConfig, ChordOutcome


def count_revealed(board: Board) -> int:
    return sum(1 for row in board.cells() for cell in row if cell.is_revealed)


# ============================================================================
# Board Configuration Tests
# ============================================================================

class TestBoardConfig:
    """Test board configuration validation."""

    def test_valid_config_creation(self) -> None:
        config = BoardConfig(9, 9, 10)
        assert (config.width, config.height, config.num_mines) == (9, 9, 10)
        assert config.safe_cells == 71

    def test_zero_width_raises_error(self) -> None:
        with pytest.raises(ValueError, match="dimensions must be positive"):
            BoardConfig(0, 9, 10)

    def test_negative_mines_raises_error(self) -> None:
        with pytest.raises(ValueError, match="cannot be negative"):
            BoardConfig(9, 9, -1)

    def test_mines_filling_every_cell_raises_error(self) -> None:
        """One cell must always stay safe for the first reveal."""
        with pytest.raises(ValueError, match="Too many mines"):
            BoardConfig(3, 3, 9)

    def test_max_mines_is_valid(self) -> None:
        assert BoardConfig(3, 3, 8).num_mines == 8


# ============================================================================
# Mine Placement Tests
# ============================================================================

class TestMinePlacement:
    """Test random and scripted mine placement."""

    def test_new_board_has_no_mines(self, default_board: Board) -> None:
        assert default_board.mines_placed is False
        assert default_board.mine_positions() == []
        assert default_board.revealed_count == 0
        assert default_board.flagged_count == 0

    def test_place_mines_places_configured_count(
        self, default_board: Board, seeded_rng: random.Random
    ) -> None:
        default_board.place_mines(4, 4, seeded_rng)
        assert len(default_board.mine_positions()) == 10
        assert default_board.mines_placed is True

    @pytest.mark.parametrize("row,col", [(0, 0), (0, 2), (1, 1), (2, 0), (2, 2)])
    def test_excluded_cell_is_never_a_mine(self, row: int, col: int) -> None:
        """With every other cell mined, the excluded cell stays safe."""
        board = Board(BoardConfig(3, 3, 8))
        board.place_mines(row, col, random.Random(row * 3 + col))
        assert board.get_cell(row, col).is_mine is False
        assert len(board.mine_positions()) == 8

    @pytest.mark.parametrize("seed", range(5))
    def test_adjacent_counts_match_mines(self, seed: int) -> None:
        """Every safe cell counts exactly the mines among its neighbors."""
        board = Board(BoardConfig(12, 10, 30))
        board.place_mines(5, 5, random.Random(seed))
        mines = set(board.mine_positions())

        for row in range(board.rows):
            for col in range(board.cols):
                cell = board.get_cell(row, col)
                if cell.is_mine:
                    continue
                expected = sum(
                    1 for neighbor in board.neighbors(row, col)
                    if neighbor in mines
                )
                assert cell.adjacent_mines == expected

    def test_place_mines_twice_raises_error(
        self, corner_mine_board: Board
    ) -> None:
        with pytest.raises(RuntimeError):
            corner_mine_board.place_mines(0, 0)

    def test_place_mines_at_wrong_count_raises_error(
        self, default_board: Board
    ) -> None:
        with pytest.raises(ValueError, match="Expected 10"):
            default_board.place_mines_at([(0, 0)])

    def test_place_mines_at_off_board_raises_error(self) -> None:
        board = Board(BoardConfig(3, 3, 1))
        with pytest.raises(ValueError, match="off the board"):
            board.place_mines_at([(5, 5)])


# ============================================================================
# Neighbor Tests
# ============================================================================

class TestNeighbors:
    """Test Moore neighborhood enumeration."""

    def test_corner_has_three_neighbors(self, default_board: Board) -> None:
        assert sorted(default_board.neighbors(0, 0)) == [(0, 1), (1, 0), (1, 1)]

    def test_edge_has_five_neighbors(self, default_board: Board) -> None:
        assert len(default_board.neighbors(0, 4)) == 5

    def test_interior_has_eight_neighbors(self, default_board: Board) -> None:
        assert len(default_board.neighbors(4, 4)) == 8


# ============================================================================
# Reveal Tests
# ============================================================================

class TestReveal:
    """Test single reveals and the flood fill."""

    def test_reveal_numbered_cell_reveals_only_itself(
        self, wall_board: Board
    ) -> None:
        assert wall_board.reveal(2, 3) == 1
        assert wall_board.revealed_count == 1

    def test_reveal_out_of_bounds_is_noop(self, wall_board: Board) -> None:
        assert wall_board.reveal(-1, 0) == 0
        assert wall_board.reveal(0, 100) == 0
        assert wall_board.revealed_count == 0

    def test_reveal_twice_is_noop(self, wall_board: Board) -> None:
        wall_board.reveal(2, 3)
        assert wall_board.reveal(2, 3) == 0
        assert wall_board.revealed_count == 1

    def test_reveal_flagged_cell_is_noop(self, wall_board: Board) -> None:
        wall_board.toggle_flag(2, 3)
        assert wall_board.reveal(2, 3) == 0
        assert wall_board.get_cell(2, 3).is_flagged is True

    def test_flood_stops_at_numbered_border(self, wall_board: Board) -> None:
        """Zero region plus its numbered border, never past the mines."""
        revealed = wall_board.reveal(0, 0)

        assert revealed == 10
        for row in range(5):
            assert wall_board.get_cell(row, 0).is_revealed is True
            assert wall_board.get_cell(row, 1).is_revealed is True
            assert wall_board.get_cell(row, 2).is_revealed is False
            assert wall_board.get_cell(row, 3).is_revealed is False

    def test_flood_skips_flagged_cells(self, empty_board: Board) -> None:
        empty_board.place_mines_at([])
        empty_board.toggle_flag(2, 2)
        empty_board.reveal(0, 0)

        assert empty_board.get_cell(2, 2).is_flagged is True
        assert empty_board.revealed_count == 24

    def test_revealed_count_matches_grid(self, wall_board: Board) -> None:
        wall_board.reveal(0, 0)
        wall_board.reveal(2, 3)
        wall_board.reveal(0, 2)
        assert wall_board.revealed_count == count_revealed(wall_board)

    def test_flood_fill_handles_huge_board(self) -> None:
        """Iterative flood fill has no recursion limit."""
        board = Board(BoardConfig(100, 100, 0))
        board.place_mines_at([])
        assert board.reveal(50, 50) == 10000
        assert board.is_cleared is True

    def test_clearing_all_safe_cells(self, wall_board: Board) -> None:
        wall_board.reveal(0, 0)
        assert wall_board.is_cleared is False
        wall_board.reveal(0, 4)
        assert wall_board.is_cleared is True

    def test_revealed_mine_does_not_count_as_cleared(
        self, corner_mine_board: Board
    ) -> None:
        corner_mine_board.reveal(4, 4)
        assert corner_mine_board.safe_cells_revealed() == 0
        assert corner_mine_board.is_cleared is False


# ============================================================================
# Flag Tests
# ============================================================================

class TestFlag:
    """Test player and engine flags on the board."""

    def test_flag_updates_count(self, default_board: Board) -> None:
        assert default_board.toggle_flag(0, 0) is True
        assert default_board.flagged_count == 1
        assert default_board.toggle_flag(0, 0) is True
        assert default_board.flagged_count == 0

    def test_flag_revealed_cell_fails(self, wall_board: Board) -> None:
        wall_board.reveal(0, 0)
        assert wall_board.toggle_flag(0, 0) is False
        assert wall_board.flagged_count == 0

    def test_flag_out_of_bounds_fails(self, default_board: Board) -> None:
        assert default_board.toggle_flag(9, 9) is False

    def test_auto_flag_cannot_be_toggled(self, wall_board: Board) -> None:
        assert wall_board.auto_flag(0, 2) is True
        assert wall_board.toggle_flag(0, 2) is False
        assert wall_board.get_cell(0, 2).is_flagged is True
        assert wall_board.get_cell(0, 2).is_revealed is False
        assert wall_board.flagged_count == 1

    def test_count_flagged_neighbors(self, wall_board: Board) -> None:
        wall_board.toggle_flag(1, 2)
        wall_board.toggle_flag(2, 2)
        wall_board.toggle_flag(4, 4)
        assert wall_board.count_flagged_neighbors(2, 3) == 2


# ============================================================================
# Chord Tests
# ============================================================================

class TestChord:
    """Test chord reveal around numbered cells."""

    def test_chord_with_matching_flags_reveals_neighbors(
        self, wall_board: Board
    ) -> None:
        wall_board.reveal(2, 3)
        for row in (1, 2, 3):
            wall_board.toggle_flag(row, 2)

        result = wall_board.chord_reveal(2, 3)

        assert result.outcome == ChordOutcome.SAFE
        assert result.revealed == 9
        for row in range(5):
            assert wall_board.get_cell(row, 3).is_revealed is True
            assert wall_board.get_cell(row, 4).is_revealed is True

    def test_chord_with_wrong_flag_detonates(self, wall_board: Board) -> None:
        wall_board.reveal(2, 3)
        wall_board.toggle_flag(1, 2)
        wall_board.toggle_flag(2, 2)
        wall_board.toggle_flag(1, 3)

        result = wall_board.chord_reveal(2, 3)

        assert result.outcome == ChordOutcome.DETONATED
        assert result.mine == (3, 2)
        assert wall_board.get_cell(3, 2).is_revealed is True

    def test_chord_with_too_few_flags_is_invalid(
        self, wall_board: Board
    ) -> None:
        wall_board.reveal(2, 3)
        wall_board.toggle_flag(1, 2)
        assert wall_board.chord_reveal(2, 3).outcome == ChordOutcome.INVALID
        assert wall_board.revealed_count == 1

    def test_chord_on_hidden_cell_is_invalid(self, wall_board: Board) -> None:
        assert wall_board.chord_reveal(2, 3).outcome == ChordOutcome.INVALID

    def test_chord_on_zero_cell_is_invalid(self, wall_board: Board) -> None:
        wall_board.reveal(0, 0)
        assert wall_board.chord_reveal(0, 0).outcome == ChordOutcome.INVALID


# ============================================================================
# Sweep Tests
# ============================================================================

class TestSweeps:
    """Test whole-board display sweeps."""

    def test_reveal_all_mines_keeps_flags(self, wall_board: Board) -> None:
        wall_board.toggle_flag(0, 2)
        wall_board.reveal_all_mines()

        assert wall_board.get_cell(0, 2).is_flagged is True
        assert wall_board.get_cell(0, 2).is_revealed is False
        for row in range(1, 5):
            assert wall_board.get_cell(row, 2).is_revealed is True
        assert wall_board.revealed_count == 4
        assert wall_board.revealed_count == count_revealed(wall_board)

    def test_flag_remaining_mines(self, wall_board: Board) -> None:
        wall_board.toggle_flag(0, 2)
        wall_board.flag_remaining_mines()

        assert wall_board.flagged_count == 5
        assert wall_board.get_cell(0, 2).auto_flagged is False
        assert wall_board.get_cell(4, 2).auto_flagged is True

    def test_hidden_safe_cells(self, wall_board: Board) -> None:
        wall_board.reveal(0, 0)
        wall_board.toggle_flag(0, 3)
        cells = wall_board.hidden_safe_cells()
        assert len(cells) == 9
        assert (0, 3) not in cells


# ============================================================================
# Observation Tests
# ============================================================================

class TestObservation:
    """Test observation array."""

    def test_observation_shape_and_dtype(self) -> None:
        board = Board(BoardConfig(width=7, height=4, num_mines=3))
        obs = board.get_observation()
        assert obs.shape == (4, 7)
        assert obs.dtype == np.int8
        assert np.all(obs == -1)

    def test_observation_after_reveal(self, wall_board: Board) -> None:
        wall_board.reveal(0, 0)
        wall_board.toggle_flag(0, 2)
        obs = wall_board.get_observation()
        assert obs[0, 0] == 0
        assert obs[0, 1] == 2
        assert obs[1, 1] == 3
        assert obs[0, 2] == -2
        assert obs[0, 3] == -1

    def test_valid_actions_are_hidden_cells(self, wall_board: Board) -> None:
        wall_board.reveal(0, 0)
        wall_board.toggle_flag(0, 2)
        actions = wall_board.get_valid_actions()
        assert len(actions) == 14
        assert (0, 0) not in actions
        assert (0, 2) not in actions
