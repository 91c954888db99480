#!/usr/bin/env python3
"""Watch the random agent play RogueSweeper runs."""
import time
import os

from roguesweeper.game import RogueSweeperEnv
from roguesweeper.simulation import RandomAgent


def clear_screen():
    os.system('cls' if os.name == 'nt' else 'clear')


def demo(delay: float = 0.3, runs: int = 3, seed: int = None):
    """Run demo games with visualization."""
    env = RogueSweeperEnv(render_mode="ansi")
    agent = RandomAgent(seed=seed)

    print("Starting in 2 seconds...")
    time.sleep(2)

    best_stage = 0

    for run in range(runs):
        obs, info = env.reset(seed=None if seed is None else seed + run)
        agent.reset()

        done = False
        step = 0

        while not done:
            action = agent.select_action(obs, env.get_action_mask())
            obs, reward, terminated, truncated, info = env.step(action)
            done = terminated or truncated
            step += 1

            clear_screen()
            print(f"=== Run {run + 1}/{runs} | Step {step} ===")
            print(f"Best stage so far: {best_stage}\n")
            print(env.render())

            if done:
                print(f"\n*** RUN OVER on stage {info['stage']} "
                      f"with {info['score']} points ***")

            time.sleep(delay)

        best_stage = max(best_stage, info["stage"])
        time.sleep(1.0)  # Pause between runs

    print(f"\n=== Final: best stage {best_stage} over {runs} runs ===")


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser()
    parser.add_argument("--delay", type=float, default=0.3, help="Delay between moves")
    parser.add_argument("--runs", type=int, default=3, help="Number of runs")
    parser.add_argument("--seed", type=int, default=None, help="Base seed")
    args = parser.parse_args()

    demo(delay=args.delay, runs=args.runs, seed=args.seed)
