#!/usr/bin/env python3
"""
Benchmark coin selection algorithms on a synthetic wallet.

Usage:
    python benchmark_selection.py [--coins=1000] [--target=5000000] [--fee-rate=2.5]

Example:
    python benchmark_selection.py --coins 2000 --seed 7 --rounds 5

Output:
    One line per algorithm: mean time, coins selected and waste
"""

from __future__ import annotations

import argparse
import random
import sys
import time

from loguru import logger

from utxoselect import (
    Algorithm,
    DEFAULT_MIN_CHANGE_VALUE,
    Coin,
    SelectionError,
    SelectionOptions,
    Selector,
    get_settings,
    setup_logging,
)


def make_wallet(count: int, seed: int) -> list[Coin]:
    """Generate ``count`` P2WPKH-sized coins with log-uniform values."""
    rng = random.Random(seed)
    return [
        Coin(
            value=int(10 ** rng.uniform(3, 7)),
            weight=272,
            creation_sequence=i,
        )
        for i in range(count)
    ]


def benchmark(
    selector: Selector,
    algorithm: Algorithm,
    coins: list[Coin],
    options: SelectionOptions,
    rounds: int,
    seed: int,
) -> str:
    elapsed = 0.0
    outcome = ""
    for _ in range(rounds):
        start = time.perf_counter()
        try:
            result = selector.run_algorithm(algorithm, coins, options, seed)
            outcome = f"{len(result.selected_inputs)} coins, waste={result.waste}"
        except SelectionError as e:
            outcome = f"failed: {type(e).__name__}"
        elapsed += time.perf_counter() - start

    mean_ms = elapsed / rounds * 1000
    return f"{algorithm.value:<14}{mean_ms:>10.2f} ms  {outcome}"


def main():
    parser = argparse.ArgumentParser(description="Benchmark coin selection algorithms")
    parser.add_argument("--coins", type=int, default=1000, help="Wallet size (default: 1000)")
    parser.add_argument(
        "--target", type=int, default=5_000_000, help="Payment amount (default: 5000000)"
    )
    parser.add_argument(
        "--fee-rate", type=float, default=2.5, help="Fee rate per weight unit (default: 2.5)"
    )
    parser.add_argument("--seed", type=int, default=0, help="Wallet and RNG seed (default: 0)")
    parser.add_argument("--rounds", type=int, default=3, help="Runs per algorithm (default: 3)")
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Show per-algorithm debug logs"
    )

    args = parser.parse_args()
    settings = get_settings().model_copy(update={"seed": args.seed})
    setup_logging("DEBUG" if args.verbose else settings.log_level)

    coins = make_wallet(args.coins, args.seed)
    options = SelectionOptions(
        target_value=args.target,
        fee_rate=args.fee_rate,
        long_term_fee_rate=1.0,
        base_weight=172,
        change_weight=124,
        change_cost=272,
        min_change_value=DEFAULT_MIN_CHANGE_VALUE,
    )
    selector = Selector(settings)

    logger.info(f"Benchmarking {args.coins} coins, target={args.target}")
    for algorithm in selector.algorithms:
        print(benchmark(selector, algorithm, coins, options, args.rounds, args.seed))

    start = time.perf_counter()
    try:
        best = selector.select(coins, options)
    except SelectionError as e:
        print(f"selector failed: {e}", file=sys.stderr)
        sys.exit(1)
    elapsed_ms = (time.perf_counter() - start) * 1000
    print(f"{'selector':<14}{elapsed_ms:>10.2f} ms  best={best.algorithm}, waste={best.waste}")


if __name__ == "__main__":
    main()
