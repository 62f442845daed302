"""
Least-change coin selection.

Greedy accumulation by descending effective value, refined by single swaps
that trade one selected coin for a smaller unselected one when that shrinks
the leftover.
"""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from utxoselect.algorithms.common import accumulate, prepare_candidates
from utxoselect.cost import build_result
from utxoselect.models import Coin, SelectionOptions, SelectionResult

ALGORITHM = "leastchange"


def _leftover_key(result: SelectionResult) -> tuple[int, int, int, tuple[int, ...]]:
    return (result.excess, result.input_count, result.waste, result.selected_inputs)


def select_coin_leastchange(
    coins: Sequence[Coin],
    options: SelectionOptions,
) -> SelectionResult:
    """
    Select coins so that the leftover above the target is as small as possible.

    Args:
        coins: Candidate coins
        options: Selection request

    Returns:
        The greedy selection or the best single-swap improvement on it

    Raises:
        InvalidOptionsError: If options are invalid
        InsufficientFundsError: If the coins cannot cover the request
        NoMatchFoundError: If no greedy stopping point fits the change bounds
    """
    candidates, policy = prepare_candidates(coins, options, ALGORITHM)
    required = options.required_value

    ordered = sorted(candidates, key=lambda c: (-c.effective_value, c.index))
    greedy = accumulate(ALGORITHM, ordered, options, policy)

    chosen = set(greedy.selected_inputs)
    selected = [c for c in ordered if c.index in chosen]
    unselected = [c for c in ordered if c.index not in chosen]
    selected_total = sum(c.effective_value for c in selected)

    best = greedy
    swaps = 0
    for out in selected:
        base = selected_total - out.effective_value
        for replacement in unselected:
            if replacement.effective_value >= out.effective_value:
                continue
            excess = base + replacement.effective_value - required
            if excess > best.excess or policy.resolve(excess) is None:
                continue
            trial = [c for c in selected if c is not out]
            trial.append(replacement)
            result = build_result(ALGORITHM, trial, options, policy)
            if result is not None and _leftover_key(result) < _leftover_key(best):
                best = result
                swaps += 1

    logger.debug(
        f"{ALGORITHM}: greedy leftover {greedy.excess}, final leftover {best.excess} "
        f"after {swaps} improving swaps"
    )
    return best
