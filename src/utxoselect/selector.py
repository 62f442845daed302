"""
Coin selection orchestration.

Runs the configured algorithms against the same read-only request, scores
every success with the shared waste metric and returns the best one.

Implements:
- Sequential selection (select)
- Concurrent selection with one worker thread per algorithm (select_async)
- Waste-minimizing and first-success policies
- Aggregation of per-algorithm failures into a single typed error
"""

from __future__ import annotations

import asyncio
import random
from collections.abc import Sequence

from loguru import logger

from utxoselect.algorithms import (
    select_coin_bnb,
    select_coin_fifo,
    select_coin_knapsack,
    select_coin_leastchange,
    select_coin_lowestlarger,
    select_coin_srd,
)
from utxoselect.config import SelectorSettings, get_settings
from utxoselect.errors import (
    InsufficientFundsError,
    InvalidOptionsError,
    NoMatchFoundError,
    SelectionError,
)
from utxoselect.models import (
    Algorithm,
    Coin,
    SelectionOptions,
    SelectionPolicy,
    SelectionResult,
)


def _make_rng(seed: int | None) -> random.Random:
    """Fresh random source per algorithm run so concurrent runs never share state."""
    return random.Random(seed) if seed is not None else random.Random()


class Selector:
    """Runs a fixed set of coin selection algorithms and picks the winner."""

    def __init__(self, settings: SelectorSettings | None = None):
        self.settings = settings or get_settings()

    @property
    def algorithms(self) -> list[Algorithm]:
        return self.settings.algorithms

    def run_algorithm(
        self,
        algorithm: Algorithm,
        coins: Sequence[Coin],
        options: SelectionOptions,
        seed: int | None = None,
    ) -> SelectionResult:
        """
        Dispatch a single algorithm with the configured bounds.

        Raises:
            SelectionError: Whatever the algorithm reports
        """
        if algorithm is Algorithm.BNB:
            return select_coin_bnb(coins, options, max_tries=self.settings.bnb_max_tries)
        if algorithm is Algorithm.KNAPSACK:
            return select_coin_knapsack(
                coins,
                options,
                rng=_make_rng(seed),
                iterations=self.settings.knapsack_iterations,
            )
        if algorithm is Algorithm.SRD:
            return select_coin_srd(coins, options, rng=_make_rng(seed))
        if algorithm is Algorithm.LOWEST_LARGER:
            return select_coin_lowestlarger(coins, options)
        if algorithm is Algorithm.FIFO:
            return select_coin_fifo(coins, options)
        if algorithm is Algorithm.LEAST_CHANGE:
            return select_coin_leastchange(coins, options)
        raise ValueError(f"Unknown algorithm: {algorithm}")

    def _attempt(
        self,
        algorithm: Algorithm,
        coins: Sequence[Coin],
        options: SelectionOptions,
        seed: int | None,
    ) -> SelectionResult | SelectionError:
        try:
            result = self.run_algorithm(algorithm, coins, options, seed)
        except InvalidOptionsError:
            raise
        except SelectionError as e:
            logger.debug(f"{algorithm.value} failed: {e}")
            return e

        logger.debug(
            f"{algorithm.value}: {len(result.selected_inputs)} coins, "
            f"change={result.change_value}, waste={result.waste}"
        )
        return result

    def select(
        self,
        coins: Sequence[Coin],
        options: SelectionOptions,
        seed: int | None = None,
    ) -> SelectionResult:
        """
        Select coins for a payment.

        Args:
            coins: Candidate coins, identified by position
            options: Selection request
            seed: Seed for randomized algorithms (defaults to the configured seed)

        Returns:
            Lowest-waste result, or the first success under first_success policy

        Raises:
            InvalidOptionsError: If options are invalid (no algorithm runs)
            InsufficientFundsError: If every algorithm reported insufficient funds
            NoMatchFoundError: If funds suffice but no algorithm found a selection
        """
        options.check()
        coins = tuple(coins)
        if seed is None:
            seed = self.settings.seed

        outcomes: list[tuple[Algorithm, SelectionResult | SelectionError]] = []
        for algorithm in self.algorithms:
            outcome = self._attempt(algorithm, coins, options, seed)
            outcomes.append((algorithm, outcome))
            if (
                self.settings.policy is SelectionPolicy.FIRST_SUCCESS
                and isinstance(outcome, SelectionResult)
            ):
                break

        return self._pick(outcomes)

    async def select_async(
        self,
        coins: Sequence[Coin],
        options: SelectionOptions,
        seed: int | None = None,
    ) -> SelectionResult:
        """
        Like select, but runs every algorithm concurrently in worker threads.

        Algorithms only read the shared coins and options, so no locking is
        needed. The outcome equals select() for the same seed.
        """
        options.check()
        coins = tuple(coins)
        if seed is None:
            seed = self.settings.seed

        algorithms = list(self.algorithms)
        results = await asyncio.gather(
            *(
                asyncio.to_thread(self._attempt, algorithm, coins, options, seed)
                for algorithm in algorithms
            )
        )
        return self._pick(list(zip(algorithms, results, strict=True)))

    def _pick(
        self, outcomes: list[tuple[Algorithm, SelectionResult | SelectionError]]
    ) -> SelectionResult:
        successes = [
            (order, result)
            for order, (_, result) in enumerate(outcomes)
            if isinstance(result, SelectionResult)
        ]

        if successes:
            if self.settings.policy is SelectionPolicy.FIRST_SUCCESS:
                _, best = successes[0]
            else:
                _, best = min(successes, key=lambda s: (s[1].sort_key, s[0]))
            logger.info(
                f"Selected {len(best.selected_inputs)} coins via {best.algorithm}: "
                f"total={best.total_value}, change={best.change_value}, "
                f"fee={best.fee}, waste={best.waste}"
            )
            return best

        failures: dict[str, SelectionError] = {
            algorithm.value: outcome
            for algorithm, outcome in outcomes
            if isinstance(outcome, SelectionError)
        }
        summary = "; ".join(f"{name}: {error}" for name, error in failures.items())

        insufficient = [e for e in failures.values() if isinstance(e, InsufficientFundsError)]
        if len(insufficient) == len(failures):
            first = insufficient[0]
            logger.warning(f"Insufficient funds for selection: {summary}")
            raise InsufficientFundsError(
                f"Insufficient funds: {summary}",
                required=first.required,
                available=first.available,
                failures=failures,
            )

        logger.warning(f"No algorithm found a selection: {summary}")
        raise NoMatchFoundError(f"No selection found: {summary}", failures=failures)


def select_coins(
    coins: Sequence[Coin],
    options: SelectionOptions,
    seed: int | None = None,
    settings: SelectorSettings | None = None,
) -> SelectionResult:
    """Select coins with the configured algorithms (see Selector.select)."""
    return Selector(settings).select(coins, options, seed=seed)


async def select_coins_async(
    coins: Sequence[Coin],
    options: SelectionOptions,
    seed: int | None = None,
    settings: SelectorSettings | None = None,
) -> SelectionResult:
    """Concurrent variant of select_coins (see Selector.select_async)."""
    return await Selector(settings).select_async(coins, options, seed=seed)
