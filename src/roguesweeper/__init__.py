"""
RogueSweeper: roguelike Minesweeper.

Clear ever larger boards, keep your lives and safe-reveal charges
between stages, and verify your flags for a perfect clear.
"""
__version__ = "0.1.0"
