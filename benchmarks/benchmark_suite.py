"""
Benchmark suite for Treasure Hunter.

Runs the agent on islands of increasing difficulty, measuring:
- Whether the treasure made it home
- Turns taken and how many were forward moves
- Tools spent (chops, unlocks, blasts)
- Wall-clock time per hunt
"""

import time
from dataclasses import dataclass
from typing import Callable

from treasure_hunter import HuntConfig, TreasureHunter
from treasure_hunter.worlds import (
    Island, IslandConfig,
    make_corridor_island, make_key_door_island,
    make_lake_island, make_fortress_island,
)
from treasure_hunter.terrain import Action


@dataclass
class BenchmarkProblem:
    """A benchmark island."""
    name: str
    make_island: Callable[[], Island]
    difficulty: str = "easy"  # easy, medium, hard


def make_maze_island() -> Island:
    return Island(IslandConfig(layout=[
        "***********",
        "*   *    $*",
        "* * * *****",
        "* *   *   *",
        "* ***** * *",
        "*       * *",
        "*****^*** *",
        "*         *",
        "***********",
    ]))


def make_two_lakes_island() -> Island:
    return Island(IslandConfig(layout=[
        "****************",
        "*a T  ~~ T ~~ $*",
        "*     ~~   ~~ T*",
        "*  ^  ~~   ~~  *",
        "****************",
    ]))


# ---------------------------------------------------------------------------
# Benchmark islands — ordered by difficulty
# ---------------------------------------------------------------------------

BENCHMARKS = [
    BenchmarkProblem("corridor", make_corridor_island, "easy"),
    BenchmarkProblem("maze", make_maze_island, "easy"),
    BenchmarkProblem("key_door", make_key_door_island, "medium"),
    BenchmarkProblem("fortress", make_fortress_island, "medium"),
    BenchmarkProblem("lake", make_lake_island, "hard"),
    BenchmarkProblem("two_lakes", make_two_lakes_island, "hard"),
]


def run_benchmark(problem: BenchmarkProblem, max_turns: int = 2000) -> dict:
    """Run a single benchmark island."""
    hunter = TreasureHunter(HuntConfig(max_turns=max_turns))

    t0 = time.time()
    result = hunter.hunt(problem.make_island())
    elapsed = time.time() - t0

    return {
        "name": problem.name,
        "difficulty": problem.difficulty,
        "won": result.won,
        "drowned": result.drowned,
        "stuck": result.stuck,
        "turns": result.turns,
        "forward": result.actions.count(Action.MOVE_FORWARD),
        "chops": result.actions.count(Action.CHOP_TREE),
        "unlocks": result.actions.count(Action.UNLOCK_DOOR),
        "blasts": result.actions.count(Action.USE_DYNAMITE),
        "visited": result.world_model.visited_count(),
        "time_sec": elapsed,
    }


def run_all_benchmarks(max_turns: int = 2000, verbose: bool = True):
    """Run all benchmark islands and print a summary table."""
    print("=" * 90)
    print("  Treasure Hunter — Benchmark Suite")
    print("=" * 90)
    print()

    results = []
    for problem in BENCHMARKS:
        r = run_benchmark(problem, max_turns=max_turns)
        results.append(r)
        if verbose:
            status = "✓" if r["won"] else "✗"
            print(f"  [{problem.difficulty:6s}] {problem.name:12s} {status} "
                  f"turns={r['turns']:4d}  "
                  f"forward={r['forward']:4d}  "
                  f"C/U/B={r['chops']}/{r['unlocks']}/{r['blasts']}  "
                  f"visited={r['visited']:3d}  "
                  f"time={r['time_sec']:.2f}s")

    # Summary
    won = sum(1 for r in results if r["won"])
    total = len(results)
    print()
    print("=" * 90)
    print(f"  Solved: {won}/{total}")

    by_difficulty = {}
    for r in results:
        d = r["difficulty"]
        if d not in by_difficulty:
            by_difficulty[d] = {"won": 0, "total": 0}
        by_difficulty[d]["total"] += 1
        if r["won"]:
            by_difficulty[d]["won"] += 1

    for d in ["easy", "medium", "hard"]:
        if d in by_difficulty:
            s = by_difficulty[d]
            print(f"    {d:8s}: {s['won']}/{s['total']}")

    print("=" * 90)

    return results


if __name__ == "__main__":
    run_all_benchmarks()
