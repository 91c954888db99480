"""
Evaluation harness for RogueSweeper agents.

Plays complete runs through the gymnasium environment and aggregates
how far and how well each agent gets.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional
import json
import logging

import numpy as np

from ..game.environment import RogueSweeperEnv
from ..game.run import RunConfig
from .agents import BaseAgent


logger = logging.getLogger(__name__)


# ============================================================================
# Evaluation Configuration
# ============================================================================

@dataclass
class EvaluationConfig:
    """Configuration for evaluating agents."""

    num_runs: int = 100
    max_steps_per_run: int = 2000
    seed: Optional[int] = None
    run_config: RunConfig = field(default_factory=RunConfig)

    def __post_init__(self) -> None:
        if self.num_runs < 1:
            raise ValueError("At least one run is required")
        if self.max_steps_per_run < 1:
            raise ValueError("Max steps per run must be positive")


# ============================================================================
# Run Statistics
# ============================================================================

@dataclass
class RunStats:
    """Statistics for a single run."""

    total_reward: float = 0.0
    steps: int = 0
    stages_cleared: int = 0
    score: int = 0
    final_stage: int = 1
    finished: bool = False


# ============================================================================
# Agent Evaluator
# ============================================================================

class Evaluator:
    """
    Evaluate and compare agents over many runs.

    Run ``i`` is seeded with ``seed + i`` when a seed is configured, so
    every agent faces the same sequence of boards.
    """

    def __init__(self, config: Optional[EvaluationConfig] = None) -> None:
        self.config = config or EvaluationConfig()

    def play_run(
        self, agent: BaseAgent, env: RogueSweeperEnv, seed: Optional[int]
    ) -> RunStats:
        """
        Play one run until it ends or the step budget runs out.

        Args:
            agent: Agent choosing the cells.
            env: Environment to play in.
            seed: Seed for this run's boards.

        Returns:
            Statistics of the run.
        """
        stats = RunStats()
        observation, info = env.reset(seed=seed)
        agent.reset()

        for _ in range(self.config.max_steps_per_run):
            action = agent.select_action(observation, env.get_action_mask())
            observation, reward, terminated, truncated, info = env.step(action)

            stats.total_reward += float(reward)
            stats.steps += 1

            if terminated or truncated:
                stats.finished = True
                break

        stats.stages_cleared = info["stages_cleared"]
        stats.score = info["score"]
        stats.final_stage = info["stage"]
        return stats

    def evaluate(self, agent: BaseAgent) -> Dict[str, float]:
        """
        Evaluate a single agent.

        Args:
            agent: Agent to evaluate.

        Returns:
            Dictionary with averaged metrics and the best stage reached.
        """
        env = RogueSweeperEnv(config=self.config.run_config)
        runs: List[RunStats] = []

        for index in range(self.config.num_runs):
            seed = None if self.config.seed is None else self.config.seed + index
            runs.append(self.play_run(agent, env, seed))

        return {
            "avg_stages_cleared": float(np.mean([r.stages_cleared for r in runs])),
            "best_stage": float(max(r.final_stage for r in runs)),
            "avg_score": float(np.mean([r.score for r in runs])),
            "avg_steps": float(np.mean([r.steps for r in runs])),
            "avg_reward": float(np.mean([r.total_reward for r in runs])),
            "finished_rate": float(np.mean([r.finished for r in runs])),
        }

    def compare(
        self, agents: Dict[str, BaseAgent]
    ) -> Dict[str, Dict[str, float]]:
        """
        Compare multiple agents.

        Args:
            agents: Dictionary of agent_name -> agent.

        Returns:
            Dictionary of agent_name -> evaluation metrics.
        """
        results = {}
        for name, agent in agents.items():
            logger.info("Evaluating %s over %d runs", name, self.config.num_runs)
            results[name] = self.evaluate(agent)
        return results

    @staticmethod
    def save_results(
        results: Dict[str, Dict[str, float]], path: str
    ) -> Path:
        """Write evaluation results to a JSON file."""
        output = Path(path)
        output.parent.mkdir(parents=True, exist_ok=True)
        with open(output, "w") as f:
            json.dump(results, f, indent=2)
        return output
