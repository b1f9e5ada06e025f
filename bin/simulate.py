"""Run a headless batch of hands and print per-seat statistics.

Compares AI strategies seat by seat under the default rule set.

Usage:
    python bin/simulate.py --target 200
    python bin/simulate.py --mode ranking --target 20 --strategies yaku_progress,random,avoid_deal_in,agari_priority
    python bin/simulate.py --seed <hex seed> --log-dir logs/experiments
"""

from __future__ import annotations

import argparse
import logging
import sys
import time

from colorjong.logic.ai_player_controller import AIPlayerController
from colorjong.logic.enums import BatchMode, StrategyId
from colorjong.logic.rng import generate_seed, validate_seed_hex
from colorjong.logic.settings import EngineSettings
from colorjong.logic.state import NUM_SEATS, SEATS
from colorjong.session.batch import BatchRunner, BatchSession
from shared.logging import setup_logging


def _parse_strategies(value: str) -> dict[int, StrategyId]:
    names = [name.strip() for name in value.split(",") if name.strip()]
    if len(names) == 1:
        names *= NUM_SEATS
    if len(names) != NUM_SEATS:
        msg = f"expected 1 or {NUM_SEATS} strategies, got {len(names)}"
        raise argparse.ArgumentTypeError(msg)
    try:
        strategies = [StrategyId(name) for name in names]
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e
    if StrategyId.HUMAN in strategies:
        msg = "batch seats cannot be human"
        raise argparse.ArgumentTypeError(msg)
    return dict(zip(SEATS, strategies, strict=True))


def print_report(session: BatchSession, strategies: dict[int, StrategyId], elapsed: float) -> None:
    print("=" * 60)
    print(f"BATCH ({session.mode})")
    print("=" * 60)
    print(f"Hands played: {session.games_played}")
    print(f"Sets played: {session.sets_played}")
    print(f"Draws: {session.draws}")
    print(f"Elapsed: {elapsed:.2f}s")
    print()

    win_rates = session.win_rates()
    average_ranks = session.average_ranks()
    print(f"{'seat':>4}  {'strategy':<15}  {'wins':>6}  {'win%':>6}  {'score':>7}  {'avg rank':>8}  places")
    for seat in SEATS:
        places = "/".join(str(c) for c in session.rank_counts[seat])
        print(
            f"{seat:>4}  {strategies[seat]:<15}  {session.wins[seat]:>6}  {win_rates[seat]:>6.1%}  "
            f"{session.cumulative_scores[seat]:>7}  {average_ranks[seat]:>8.2f}  {places}"
        )


def main() -> None:
    settings = EngineSettings()
    parser = argparse.ArgumentParser(description="Run a batch of AI-only hands")
    parser.add_argument(
        "--mode",
        type=BatchMode,
        choices=list(BatchMode),
        default=settings.default_batch_mode,
        help="wins: target counts hands; ranking: target counts sets (default: %(default)s)",
    )
    parser.add_argument(
        "-n",
        "--target",
        type=int,
        default=settings.default_target,
        help="number of hands or sets to play (default: %(default)s)",
    )
    parser.add_argument(
        "--strategies",
        type=_parse_strategies,
        default=_parse_strategies(StrategyId.YAKU_PROGRESS),
        help="one strategy for all seats or a comma-separated list of four",
    )
    parser.add_argument("--seed", help="hex seed for reproducible runs (default: random)")
    parser.add_argument(
        "--log-dir",
        default=settings.log_dir,
        help="directory for the timestamped simulation log (default: %(default)s)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log every engine event")
    args = parser.parse_args()

    if args.target < 1:
        print("Target must be at least 1", file=sys.stderr)
        sys.exit(1)

    seed = args.seed or generate_seed()
    try:
        validate_seed_hex(seed)
    except ValueError as e:
        print(f"Invalid seed: {e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(log_dir=args.log_dir, level=logging.DEBUG if args.verbose else logging.WARNING)

    controller = AIPlayerController.from_strategies(args.strategies, seed)
    runner = BatchRunner(controller=controller, seed=seed, settings=settings)

    start = time.perf_counter()
    session = runner.run(args.mode, args.target)
    print(f"Seed: {seed}")
    print_report(session, args.strategies, time.perf_counter() - start)


if __name__ == "__main__":
    main()
