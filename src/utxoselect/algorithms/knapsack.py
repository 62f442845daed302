"""
Randomized knapsack coin selection.

Approximates subset-sum when branch-and-bound cannot find a changeless match:
each pass shuffles the candidates and accumulates them, and whenever the
running total becomes acceptable the selection is recorded and the last coin
is dropped again to look for a tighter fit further down the permutation.
"""

from __future__ import annotations

import random
from collections.abc import Sequence

from loguru import logger

from utxoselect.algorithms.common import prepare_candidates
from utxoselect.constants import KNAPSACK_ITERATIONS
from utxoselect.cost import Candidate, build_result, input_waste
from utxoselect.errors import NoMatchFoundError
from utxoselect.models import Coin, SelectionOptions, SelectionResult

ALGORITHM = "knapsack"


def select_coin_knapsack(
    coins: Sequence[Coin],
    options: SelectionOptions,
    rng: random.Random | None = None,
    iterations: int = KNAPSACK_ITERATIONS,
) -> SelectionResult:
    """
    Select coins with randomized passes, keeping the lowest-waste result.

    Args:
        coins: Candidate coins
        options: Selection request
        rng: Random source; pass a seeded instance for reproducible output
        iterations: Number of shuffled passes

    Returns:
        Best selection seen across all passes

    Raises:
        InvalidOptionsError: If options are invalid
        InsufficientFundsError: If the coins cannot cover the request
        NoMatchFoundError: If no pass produced an acceptable selection
    """
    candidates, policy = prepare_candidates(coins, options, ALGORITHM)
    if rng is None:
        rng = random.Random()

    target = options.required_value
    order = list(candidates)
    best: SelectionResult | None = None
    waste_by_weight: dict[int, int] = {}

    def score(weight: int, excess: int, change: int) -> int:
        if weight not in waste_by_weight:
            waste_by_weight[weight] = input_waste(weight, options)
        return waste_by_weight[weight] + (policy.cost_of_change if change > 0 else excess)

    for _ in range(iterations):
        rng.shuffle(order)
        selected: list[Candidate] = []
        running = 0
        weight = 0
        inputs = 0

        for candidate in order:
            selected.append(candidate)
            running += candidate.effective_value
            weight += candidate.weight
            inputs += candidate.input_count
            excess = running - target
            if excess < 0:
                continue

            change = policy.resolve(excess)
            if change is None and policy.is_stranded(excess):
                # More value can still make the change output worthwhile
                continue

            if change is not None:
                waste = score(weight, excess, change)
                if best is None or (waste, inputs, len(selected)) <= best.sort_key[:3]:
                    result = build_result(ALGORITHM, selected, options, policy)
                    if result is not None and (best is None or result.sort_key < best.sort_key):
                        best = result

            # Backtrack: drop the coin that reached the target and keep looking
            selected.pop()
            running -= candidate.effective_value
            weight -= candidate.weight
            inputs -= candidate.input_count

    if best is None:
        raise NoMatchFoundError(
            f"{ALGORITHM}: no acceptable selection in {iterations} passes over "
            f"{len(candidates)} candidates"
        )

    logger.debug(
        f"{ALGORITHM}: best of {iterations} passes uses {len(best.selected_inputs)} coins, "
        f"waste={best.waste}"
    )
    return best
