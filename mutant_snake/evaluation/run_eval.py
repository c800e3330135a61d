"""
Evaluation Harness
==================

Runs a snake agent against the fixed seed bank, computes score statistics
and optionally records each run on a leaderboard.

Usage:
    python -m mutant_snake.evaluation.run_eval --agent contestants/baseline_greedy
    python -m mutant_snake.evaluation.run_eval --agent my_agent.py --leaderboard scores.json
"""

from __future__ import annotations

import argparse
import importlib.util
import json
import logging
import os
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

import numpy as np

from mutant_snake.snake_core.env_gym import SnakeEnv
from mutant_snake.snake_core.leaderboard import LeaderboardStore


@dataclass
class EvalResult:
    """Result for a single seed."""
    seed: int
    final_score: int
    length: int
    steps: int
    evolution_tier: str
    termination_reason: str
    elapsed_time: float
    actions: Optional[List[int]] = None


@dataclass
class EvalSummary:
    """Summary of evaluation across all seeds."""
    mean_score: float
    std_score: float
    min_score: int
    max_score: int
    median_score: float
    total_time: float
    results: List[EvalResult]


def load_seed_bank(path: Optional[str] = None) -> List[int]:
    """
    Load the evaluation seed bank.

    Args:
        path: Path to seed_bank.json. Uses default if None.

    Returns:
        List of seeds.
    """
    if path is None:
        path = os.path.join(os.path.dirname(__file__), "seed_bank.json")

    with open(path, "r") as f:
        data = json.load(f)

    return data["seeds"]


def load_agent(agent_path: str) -> Callable:
    """
    Load an agent from a path.

    Args:
        agent_path: Path to agent directory or agent.py file.

    Returns:
        Agent's act function.
    """
    agent_path = Path(agent_path)

    if agent_path.is_dir():
        agent_file = agent_path / "agent.py"
    else:
        agent_file = agent_path

    if not agent_file.exists():
        raise FileNotFoundError(f"Agent file not found: {agent_file}")

    spec = importlib.util.spec_from_file_location("agent_module", agent_file)
    if spec is None or spec.loader is None:
        raise ImportError(f"Failed to load agent module from {agent_file}")

    module = importlib.util.module_from_spec(spec)
    sys.modules["agent_module"] = module
    spec.loader.exec_module(module)

    # Look for SnakeAgent class or act function
    if hasattr(module, "SnakeAgent"):
        agent_instance = getattr(module, "SnakeAgent")()
        if hasattr(agent_instance, "act"):
            return agent_instance.act
        raise AttributeError("SnakeAgent class must have an 'act' method")

    if hasattr(module, "act"):
        return getattr(module, "act")

    raise AttributeError(
        "Agent module must have either 'SnakeAgent' class with 'act' method "
        "or standalone 'act' function"
    )


def evaluate_single_seed(
    agent_fn: Callable,
    seed: int,
    record_actions: bool = False,
    verbose: bool = False
) -> EvalResult:
    """
    Evaluate agent on a single seed.

    Args:
        agent_fn: Agent's act function (obs) -> action.
        seed: Random seed.
        record_actions: If True, keep the action sequence on the result.
        verbose: If True, print progress.

    Returns:
        EvalResult for this seed.
    """
    env = SnakeEnv()

    obs, info = env.reset(seed=seed)

    # Agents exposing reset(seed) get the same seed as the environment
    agent_reset = getattr(getattr(agent_fn, "__self__", None), "reset", None)
    if callable(agent_reset):
        agent_reset(seed)

    actions = [] if record_actions else None
    start_time = time.time()
    steps = 0

    done = False
    while not done:
        action = int(agent_fn(obs))

        if record_actions:
            actions.append(action)

        obs, _, terminated, truncated, info = env.step(action)
        steps += 1
        done = terminated or truncated

    elapsed = time.time() - start_time

    result = EvalResult(
        seed=seed,
        final_score=info["score"],
        length=info["length"],
        steps=steps,
        evolution_tier=info["evolution_tier"],
        termination_reason=info["terminated_reason"],
        elapsed_time=elapsed,
        actions=actions
    )

    env.close()

    if verbose:
        print(f"  Seed {seed}: score={result.final_score}, tier={result.evolution_tier}, "
              f"steps={result.steps}, end={result.termination_reason}, time={elapsed:.2f}s")

    return result


def evaluate_agent(
    agent_fn: Callable,
    seeds: Optional[List[int]] = None,
    record_actions: bool = False,
    verbose: bool = True,
    leaderboard: Optional[LeaderboardStore] = None,
    player_id: str = "agent"
) -> EvalSummary:
    """
    Evaluate agent on all seeds in the seed bank.

    Args:
        agent_fn: Agent's act function (obs) -> action.
        seeds: List of seeds. Uses seed_bank.json if None.
        record_actions: If True, keep action sequences (written by save_results).
        verbose: If True, print progress.
        leaderboard: If given, every run's final score is merged under player_id.
        player_id: Leaderboard identity for this agent.

    Returns:
        EvalSummary with aggregate statistics.
    """
    if seeds is None:
        seeds = load_seed_bank()

    if verbose:
        print(f"Evaluating on {len(seeds)} seeds...")

    results: List[EvalResult] = []
    total_start = time.time()

    for i, seed in enumerate(seeds):
        if verbose:
            print(f"[{i+1}/{len(seeds)}] Running seed {seed}...")

        result = evaluate_single_seed(
            agent_fn,
            seed,
            record_actions=record_actions,
            verbose=verbose
        )
        results.append(result)

        if leaderboard is not None:
            leaderboard.merge(player_id, result.final_score)

    total_time = time.time() - total_start

    scores = [r.final_score for r in results]

    summary = EvalSummary(
        mean_score=float(np.mean(scores)),
        std_score=float(np.std(scores)),
        min_score=int(min(scores)),
        max_score=int(max(scores)),
        median_score=float(np.median(scores)),
        total_time=total_time,
        results=results
    )

    if verbose:
        print()
        print("=" * 50)
        print("EVALUATION SUMMARY")
        print("=" * 50)
        print(f"Seeds evaluated: {len(seeds)}")
        print(f"Mean score:      {summary.mean_score:.2f}")
        print(f"Std deviation:   {summary.std_score:.2f}")
        print(f"Min score:       {summary.min_score}")
        print(f"Max score:       {summary.max_score}")
        print(f"Median score:    {summary.median_score:.2f}")
        print(f"Total time:      {total_time:.2f}s")
        print("=" * 50)

    return summary


def save_results(
    summary: EvalSummary,
    agent_name: str,
    output_path: str
) -> None:
    """Save evaluation results to JSON."""
    data = {
        "agent": agent_name,
        "timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
        "mean_score": summary.mean_score,
        "std_score": summary.std_score,
        "min_score": summary.min_score,
        "max_score": summary.max_score,
        "median_score": summary.median_score,
        "total_time": summary.total_time,
        "results": [
            {
                "seed": r.seed,
                "final_score": r.final_score,
                "length": r.length,
                "steps": r.steps,
                "evolution_tier": r.evolution_tier,
                "termination_reason": r.termination_reason,
                "elapsed_time": r.elapsed_time
            }
            for r in summary.results
        ]
    }

    # Only present for recorded runs
    for entry, r in zip(data["results"], summary.results):
        if r.actions is not None:
            entry["actions"] = r.actions

    with open(output_path, "w") as f:
        json.dump(data, f, indent=2)

    print(f"Results saved to {output_path}")


def main():
    parser = argparse.ArgumentParser(description="Evaluate a snake agent")
    parser.add_argument(
        "--agent",
        type=str,
        required=True,
        help="Path to agent directory or agent.py file"
    )
    parser.add_argument(
        "--seeds",
        type=str,
        default=None,
        help="Path to seed bank JSON (uses default if not specified)"
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Path to save results JSON"
    )
    parser.add_argument(
        "--leaderboard",
        type=str,
        default=None,
        help="Leaderboard JSON file to merge final scores into"
    )
    parser.add_argument(
        "--player",
        type=str,
        default=None,
        help="Leaderboard identity (defaults to the agent directory name)"
    )
    parser.add_argument(
        "--record",
        action="store_true",
        help="Include each run's action sequence in the results JSON"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Reduce output verbosity"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        help="Logging level for engine messages"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    print(f"Loading agent from {args.agent}...")
    try:
        agent_fn = load_agent(args.agent)
    except (FileNotFoundError, ImportError, AttributeError) as e:
        print(f"Error loading agent: {e}")
        return 1

    seeds = None
    if args.seeds:
        seeds = load_seed_bank(args.seeds)

    agent_name = Path(args.agent).stem if Path(args.agent).is_file() else Path(args.agent).name
    leaderboard = LeaderboardStore(args.leaderboard) if args.leaderboard else None

    summary = evaluate_agent(
        agent_fn,
        seeds=seeds,
        record_actions=args.record,
        verbose=not args.quiet,
        leaderboard=leaderboard,
        player_id=args.player or agent_name
    )

    if args.output:
        save_results(summary, agent_name, args.output)

    if leaderboard is not None and not args.quiet:
        print("Leaderboard:")
        for rank, entry in enumerate(leaderboard.entries, start=1):
            print(f"  {rank:2d}. {entry.player_id:<24} {entry.score}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
