"""
Simulation module for RogueSweeper.

Provides baseline agents and an evaluator that plays full runs through
the gymnasium environment.
"""
from .agents import BaseAgent, RandomAgent
from .evaluator import EvaluationConfig, RunStats, Evaluator

__all__ = [
    "BaseAgent",
    "RandomAgent",
    "EvaluationConfig",
    "RunStats",
    "Evaluator",
]
