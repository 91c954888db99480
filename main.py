#!/usr/bin/env python3
"""
RogueSweeper - Main entry point.

Usage:
    python main.py play [--seed N] [--lives N]
    python main.py simulate [--runs N] [--seed N] [--output FILE]
"""
import argparse
import logging
import random
from typing import Callable, Dict, List

from roguesweeper.game import GamePhase, IntentResult, RunConfig, RunController
from roguesweeper.simulation import EvaluationConfig, Evaluator, RandomAgent


HELP_TEXT = """Commands:
  r ROW COL   reveal a cell            f ROW COL   toggle a flag
  c ROW COL   chord a number           v           verify flags
  s           arm safe reveal          x           disarm safe reveal
  u ROW COL   use safe reveal          h           hint
  p N         pick reward N (0-2)      n           new game
  ?           this help                q           quit"""


def print_snapshot(controller: RunController) -> None:
    """Print the status line and the board."""
    snap = controller.snapshot()
    armed = " [SAFE REVEAL ARMED]" if snap.safe_reveal_armed else ""
    print(
        f"\nStage {snap.stage} | Score {snap.score} | Lives {snap.lives} | "
        f"Charges {snap.safe_reveal_charges} | Mines left {snap.mines_left} | "
        f"Time {snap.elapsed_seconds:03d} | {snap.phase.value}{armed}"
    )
    header = "    " + " ".join(str(col % 10) for col in range(snap.cols))
    print(header)
    for row, line in enumerate(snap.render_text().split("\n")):
        print(f"{row:>3} {line}")
    if snap.hint:
        print(f"Hint: ({snap.hint[0]}, {snap.hint[1]}) is safe")
    if snap.phase == GamePhase.REWARD_SELECTION:
        for index, reward in enumerate(snap.reward_options):
            print(f"  [{index}] {reward.value}")


def describe(result: IntentResult) -> None:
    """Print feedback for a rejected or eventful intent."""
    if not result.accepted:
        print(f"Rejected: {result.rejection.value}")
        return
    if result.outcome is None:
        return
    snap = result.snapshot
    if snap.phase == GamePhase.STAGE_COMPLETE:
        print(f"Stage cleared ({result.outcome.value})! Score: {snap.score}")
    elif snap.phase == GamePhase.LIFE_LOST:
        print(f"Life lost ({result.outcome.value}). Lives left: {snap.lives}")
    elif snap.phase == GamePhase.LOST:
        print(f"Run over ({result.outcome.value}). Final score: {snap.score}")
        print(f"Stages cleared: {snap.stages_cleared}")
    elif result.position:
        print(f"Safe reveal found a mine at {result.position}. "
              f"Lives left: {snap.lives}")


def play(args: argparse.Namespace) -> None:
    """Play a run in the terminal."""
    controller = RunController(
        config=RunConfig(starting_lives=args.lives),
        rng=random.Random(args.seed),
    )
    cell_commands: Dict[str, Callable[[int, int], IntentResult]] = {
        "r": controller.reveal,
        "f": controller.toggle_flag,
        "c": controller.chord,
        "u": controller.use_safe_reveal,
    }
    plain_commands: Dict[str, Callable[[], IntentResult]] = {
        "v": controller.verify,
        "s": controller.arm_safe_reveal,
        "x": controller.disarm_safe_reveal,
        "h": controller.hint,
        "n": controller.new_game,
    }

    print(HELP_TEXT)
    while True:
        print_snapshot(controller)
        if controller.phase in (GamePhase.STAGE_COMPLETE, GamePhase.LIFE_LOST):
            try:
                input("Press Enter to continue...")
            except EOFError:
                break
            controller.advance()
            continue

        try:
            parts: List[str] = input("> ").split()
        except EOFError:
            break
        if not parts:
            continue
        command, params = parts[0].lower(), parts[1:]

        if command == "q":
            break
        if command == "?":
            print(HELP_TEXT)
            continue
        try:
            numbers = [int(value) for value in params]
        except ValueError:
            print("Arguments must be integers")
            continue

        if command in cell_commands and len(numbers) == 2:
            describe(cell_commands[command](*numbers))
        elif command in plain_commands and not numbers:
            describe(plain_commands[command]())
        elif command == "p" and len(numbers) == 1:
            describe(controller.select_reward(numbers[0]))
        else:
            print("Unknown command, type ? for help")


def simulate(args: argparse.Namespace) -> None:
    """Evaluate the random baseline over many runs."""
    config = EvaluationConfig(
        num_runs=args.runs,
        max_steps_per_run=args.max_steps,
        seed=args.seed,
    )
    evaluator = Evaluator(config)

    print(f"Simulating {args.runs} runs...")
    results = evaluator.compare({"Random": RandomAgent(seed=args.seed)})

    print("\n" + "=" * 60)
    print("Simulation Results")
    print("=" * 60)
    print(f"{'Agent':<12} {'Stages':>8} {'Best':>6} {'Score':>10} {'Steps':>8}")
    print("-" * 60)
    for name, metrics in results.items():
        print(
            f"{name:<12} {metrics['avg_stages_cleared']:>8.2f} "
            f"{metrics['best_stage']:>6.0f} "
            f"{metrics['avg_score']:>10.1f} "
            f"{metrics['avg_steps']:>8.1f}"
        )

    if args.output:
        path = Evaluator.save_results(results, args.output)
        print(f"\nResults saved to: {path}")


def main() -> None:
    """Parse arguments and run the appropriate command."""
    parser = argparse.ArgumentParser(
        description="RogueSweeper - roguelike Minesweeper"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Log engine events"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    play_parser.add_argument(
        "--seed", type=int, default=None, help="Seed for reproducible boards"
    )
    play_parser.add_argument(
        "--lives", type=int, default=3, help="Lives at the start of the run"
    )

    simulate_parser = subparsers.add_parser(
        "simulate", help="Evaluate the random agent"
    )
    simulate_parser.add_argument(
        "--runs", type=int, default=100, help="Number of runs to play"
    )
    simulate_parser.add_argument(
        "--max-steps", type=int, default=2000, help="Step budget per run"
    )
    simulate_parser.add_argument(
        "--seed", type=int, default=None, help="Base seed for the runs"
    )
    simulate_parser.add_argument(
        "--output", type=str, default=None, help="Write results as JSON"
    )

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        )

    if args.command == "play":
        play(args)
    elif args.command == "simulate":
        simulate(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
