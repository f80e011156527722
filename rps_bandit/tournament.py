"""Simulation modes: a single match and the full gauntlet.

Supports parallel execution via ProcessPoolExecutor for multi-core speedup.
Supports optional on_match_done callback for live progress tracking.
"""

import os
from typing import Optional, Callable
from concurrent.futures import ProcessPoolExecutor, as_completed

from .agent import AgentConfig, MetaBanditAgent
from .engine import run_match, MatchResult
from .opponents import Opponent, get_all_opponents


# ---------------------------------------------------------------------------
# Worker function for parallel execution (must be top-level for pickling)
# ---------------------------------------------------------------------------

def _run_match_worker(
    opponent: Opponent,
    rounds: int,
    seed: Optional[int],
    config: Optional[AgentConfig] = None,
    record_moves: bool = False,
) -> MatchResult:
    """Run a single match in a worker process.

    The agent is built inside the worker; the opponent instance travels
    as-is, so a configured or unregistered bot keeps its settings.
    run_match resets it before the first round.
    """
    agent = MetaBanditAgent(config=config)
    return run_match(agent, opponent, rounds=rounds, seed=seed, record_moves=record_moves)


def simulate(
    opponent: Opponent,
    rounds: int = 1000,
    seed: Optional[int] = None,
    config: Optional[AgentConfig] = None,
) -> MatchResult:
    """Play one fresh agent against ``opponent``, recording every move."""
    agent = MetaBanditAgent(config=config)
    return run_match(agent, opponent, rounds=rounds, seed=seed, record_moves=True)


def gauntlet(
    pool: Optional[list[Opponent]] = None,
    rounds: int = 1000,
    seed: Optional[int] = None,
    config: Optional[AgentConfig] = None,
    parallel: bool = True,
    on_match_done: Optional[Callable[[int, int, MatchResult], None]] = None,
) -> list[MatchResult]:
    """Run a fresh agent against every opponent in the pool.

    Args:
        pool: Opponent instances, used as given. Parallel runs pickle
              them into worker processes.
        parallel: If True, run matches across multiple CPU cores.
        on_match_done: Optional callback(completed, total, result) called
                       after each match finishes. Used for progress tracking.
    """
    if pool is None:
        pool = get_all_opponents()

    jobs = []
    for i, opponent in enumerate(pool):
        match_seed = (seed * 1000 + i) if seed is not None else None
        jobs.append((opponent, rounds, match_seed))

    if parallel and len(jobs) > 1:
        return _run_parallel(jobs, config, on_match_done=on_match_done)

    results = []
    for i, (opponent, rds, ms) in enumerate(jobs):
        result = _run_match_worker(opponent, rds, ms, config)
        results.append(result)
        if on_match_done:
            on_match_done(i + 1, len(jobs), result)
    return results


# ---------------------------------------------------------------------------
# Parallel execution helper
# ---------------------------------------------------------------------------

def _run_parallel(
    jobs: list[tuple[Opponent, int, Optional[int]]],
    config: Optional[AgentConfig],
    on_match_done: Optional[Callable[[int, int, MatchResult], None]] = None,
) -> list[MatchResult]:
    """Run a batch of matches in parallel using ProcessPoolExecutor.

    Results come back in job order regardless of completion order.
    """
    max_workers = min(os.cpu_count() or 4, len(jobs))
    total = len(jobs)

    results: list[Optional[MatchResult]] = [None] * total
    completed = 0

    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        future_to_idx = {}
        for idx, (opponent, rounds, mseed) in enumerate(jobs):
            future = executor.submit(_run_match_worker, opponent, rounds, mseed, config)
            future_to_idx[future] = idx

        for future in as_completed(future_to_idx):
            idx = future_to_idx[future]
            result = future.result()
            results[idx] = result
            completed += 1

            if on_match_done:
                on_match_done(completed, total, result)

    return results  # type: ignore[return-value]
