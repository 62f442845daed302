"""
Cost model shared by every selection algorithm.

Pure functions for fees, effective value and waste. Waste follows the
wallet convention:

    waste = sum(input fee now - input fee at long-term rate)
          + (cost_of_change if change is created else excess)

which is the excess-plus-timing formula with the change offset taken as
``change_value - change_cost``. Waste only ranks selections; sufficiency is
decided by ``resolve_excess``.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal

from utxoselect.models import Coin, ExcessStrategy, SelectionOptions, SelectionResult


def calculate_fee(weight: int, fee_rate: float) -> int:
    """
    Fee for ``weight`` weight units at ``fee_rate`` per unit, rounded up.

    Decimal arithmetic keeps rates like 0.1 from rounding 100 units up to 11.
    """
    if weight == 0 or fee_rate == 0:
        return 0
    return math.ceil(Decimal(weight) * Decimal(str(fee_rate)))


def effective_value(coin: Coin, fee_rate: float) -> int:
    """Coin value minus the fee of spending it. May be negative."""
    return coin.value - calculate_fee(coin.weight, fee_rate)


def input_waste(weight: int, options: SelectionOptions) -> int:
    """Timing cost of spending ``weight`` now rather than at the long-term rate."""
    return calculate_fee(weight, options.fee_rate) - calculate_fee(weight, options.long_term_rate)


def calculate_waste(
    options: SelectionOptions, selected_weight: int, excess: int, change_value: int
) -> int:
    """
    Waste score of a selection.

    Args:
        options: Selection request
        selected_weight: Total weight of the selected coins
        excess: Effective value left after target and base fee
        change_value: Change output amount (0 when changeless)

    Returns:
        Integer waste, lower is better
    """
    waste = input_waste(selected_weight, options)
    if change_value > 0:
        return waste + options.cost_of_change
    return waste + excess


@dataclass(frozen=True, slots=True)
class Candidate:
    """A coin with its fee-adjusted value, keyed by its index in the caller's sequence."""

    index: int
    value: int
    weight: int
    effective_value: int
    input_count: int
    creation_sequence: int | None


def make_candidates(coins: Sequence[Coin], options: SelectionOptions) -> list[Candidate]:
    """Wrap every coin with its effective value, preserving index order."""
    return [
        Candidate(
            index=i,
            value=coin.value,
            weight=coin.weight,
            effective_value=effective_value(coin, options.fee_rate),
            input_count=coin.input_count,
            creation_sequence=coin.creation_sequence,
        )
        for i, coin in enumerate(coins)
    ]


@dataclass(frozen=True, slots=True)
class ExcessPolicy:
    """Change bounds of a request, resolved once so hot loops stay cheap."""

    strategy: ExcessStrategy
    tolerance: int
    min_change_excess: int
    drain_fee: int
    cost_of_change: int

    @classmethod
    def from_options(cls, options: SelectionOptions) -> ExcessPolicy:
        return cls(
            strategy=options.excess_strategy,
            tolerance=options.changeless_tolerance,
            min_change_excess=options.min_change_excess,
            drain_fee=options.drain_fee,
            cost_of_change=options.cost_of_change,
        )

    def resolve(self, excess: int) -> int | None:
        """
        Decide the change output for a given excess.

        Returns:
            The change value (0 for a changeless selection), or None when the
            excess is negative or cannot be disposed of within the bounds
        """
        if excess < 0:
            return None
        if self.strategy is ExcessStrategy.TO_RECIPIENT:
            return 0

        changeless_ok = excess <= self.tolerance
        if self.strategy is ExcessStrategy.TO_FEE:
            return 0 if changeless_ok else None

        change = excess - self.drain_fee
        change_ok = excess >= self.min_change_excess and change > 0
        if changeless_ok and change_ok:
            # Dropping costs the excess, change costs cost_of_change
            return 0 if excess <= self.cost_of_change else change
        if changeless_ok:
            return 0
        if change_ok:
            return change
        return None

    def is_stranded(self, excess: int) -> bool:
        """True if more value could still turn an unacceptable excess into change."""
        return (
            excess >= 0
            and self.strategy is ExcessStrategy.TO_CHANGE
            and excess < self.min_change_excess
        )


def resolve_excess(excess: int, options: SelectionOptions) -> int | None:
    """Change value for ``excess`` under ``options``, or None if unacceptable."""
    return ExcessPolicy.from_options(options).resolve(excess)


def build_result(
    algorithm: str,
    candidates: Iterable[Candidate],
    options: SelectionOptions,
    policy: ExcessPolicy | None = None,
) -> SelectionResult | None:
    """
    Turn a chosen set of candidates into a SelectionResult.

    Returns:
        The result, or None if the selection does not cover the request within
        the change bounds
    """
    if policy is None:
        policy = ExcessPolicy.from_options(options)

    chosen = sorted(candidates, key=lambda c: c.index)
    if not chosen:
        return None

    effective_sum = sum(c.effective_value for c in chosen)
    excess = effective_sum - options.required_value
    change_value = policy.resolve(excess)
    if change_value is None:
        return None

    total_value = sum(c.value for c in chosen)
    total_weight = sum(c.weight for c in chosen)
    paid_to_recipient = excess if options.excess_strategy is ExcessStrategy.TO_RECIPIENT else 0

    return SelectionResult(
        algorithm=algorithm,
        selected_inputs=tuple(c.index for c in chosen),
        total_value=total_value,
        total_weight=total_weight,
        input_count=sum(c.input_count for c in chosen),
        fee=total_value - options.target_value - change_value - paid_to_recipient,
        change_value=change_value,
        excess=excess,
        waste=calculate_waste(options, total_weight, excess, change_value),
    )


def evaluate_selection(
    coins: Sequence[Coin],
    indices: Iterable[int],
    options: SelectionOptions,
    algorithm: str = "manual",
) -> SelectionResult | None:
    """
    Score an arbitrary selection of coins by index.

    Useful for comparing a hand-picked set against algorithm output.

    Raises:
        InvalidOptionsError: If options are invalid
        IndexError: If an index does not refer to a coin
    """
    options.check()
    unique = sorted(set(indices))
    for i in unique:
        if not 0 <= i < len(coins):
            raise IndexError(f"Coin index {i} out of range for {len(coins)} coins")

    candidates = make_candidates(coins, options)
    return build_result(algorithm, (candidates[i] for i in unique), options)
