"""
Shared fixtures for coin selection tests.
"""

from __future__ import annotations

import random
from collections.abc import Callable

import pytest

from utxoselect.config import SelectorSettings
from utxoselect.models import Coin, ExcessStrategy, SelectionOptions

P2WPKH_INPUT_WEIGHT = 272
P2WPKH_OUTPUT_WEIGHT = 124


@pytest.fixture
def scenario_a_coins() -> list[Coin]:
    """Three coins where two of them sum to the target exactly."""
    return [
        Coin(value=100_000, weight=P2WPKH_INPUT_WEIGHT),
        Coin(value=50_000, weight=P2WPKH_INPUT_WEIGHT),
        Coin(value=30_000, weight=P2WPKH_INPUT_WEIGHT),
    ]


@pytest.fixture
def zero_fee_options() -> SelectionOptions:
    """Free transaction paying 80k with free change."""
    return SelectionOptions(target_value=80_000, fee_rate=0.0)


@pytest.fixture
def fee_coins() -> list[Coin]:
    """Coins whose effective values at 1 sat/wu are 100k, 50k and 30k."""
    return [
        Coin(value=100_272, weight=P2WPKH_INPUT_WEIGHT),
        Coin(value=50_272, weight=P2WPKH_INPUT_WEIGHT),
        Coin(value=30_272, weight=P2WPKH_INPUT_WEIGHT),
    ]


@pytest.fixture
def fee_options() -> SelectionOptions:
    """
    80k payment at 1 sat/wu.

    drain_fee=124, cost_of_change=396, so any excess up to 396 is dropped.
    """
    return SelectionOptions(
        target_value=80_000,
        fee_rate=1.0,
        change_weight=P2WPKH_OUTPUT_WEIGHT,
        change_cost=P2WPKH_INPUT_WEIGHT,
    )


@pytest.fixture
def selector_settings() -> SelectorSettings:
    """Seeded settings with a short knapsack run."""
    return SelectorSettings(seed=7, knapsack_iterations=200)


@pytest.fixture
def random_request() -> Callable[[int], tuple[list[Coin], SelectionOptions]]:
    """Factory producing a reproducible random wallet and request per seed."""

    def make(seed: int) -> tuple[list[Coin], SelectionOptions]:
        rng = random.Random(seed)
        coins = [
            Coin(
                value=rng.randint(1, 200_000),
                weight=rng.choice([148, 272, 392, 580]),
                input_count=rng.randint(1, 3),
                creation_sequence=rng.choice([None, rng.randint(0, 1_000)]),
            )
            for _ in range(rng.randint(1, 30))
        ]
        options = SelectionOptions(
            target_value=rng.randint(1, 400_000),
            fee_rate=rng.choice([0.0, 0.25, 1.0, 5.0]),
            long_term_fee_rate=rng.choice([None, 1.0]),
            base_weight=rng.choice([0, 44, 172]),
            change_weight=P2WPKH_OUTPUT_WEIGHT,
            change_cost=rng.choice([0, P2WPKH_INPUT_WEIGHT]),
            min_change_value=rng.choice([0, 546, 5_000]),
            excess_strategy=rng.choice(list(ExcessStrategy)),
        )
        return coins, options

    return make
