"""
Branch-and-bound coin selection.

Depth-first search over include/exclude decisions on coins sorted by
descending effective value, looking for a selection whose effective value
lands in the changeless window [required, required + tolerance]. The search
runs on an explicit stack so the node-visit cap is exact and deep coin sets
never hit the recursion limit.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from loguru import logger

from utxoselect.algorithms.common import prepare_candidates
from utxoselect.constants import BNB_MAX_TRIES
from utxoselect.cost import Candidate, build_result, input_waste
from utxoselect.errors import NoMatchFoundError
from utxoselect.models import Coin, SelectionOptions, SelectionResult

ALGORITHM = "bnb"


@dataclass(frozen=True, slots=True)
class _Frame:
    depth: int
    effective_value: int
    weight: int
    selected: tuple[int, ...]  # positions in the sorted candidate list


def _suffix_sums(ordered: Sequence[Candidate]) -> list[int]:
    remaining = [0] * (len(ordered) + 1)
    for i in range(len(ordered) - 1, -1, -1):
        remaining[i] = remaining[i + 1] + ordered[i].effective_value
    return remaining


def _next_distinct(ordered: Sequence[Candidate]) -> list[int]:
    """For each position, the next position holding a coin that is not equivalent."""
    n = len(ordered)
    result = [n] * n
    for i in range(n - 2, -1, -1):
        same = (ordered[i].effective_value, ordered[i].weight) == (
            ordered[i + 1].effective_value,
            ordered[i + 1].weight,
        )
        result[i] = result[i + 1] if same else i + 1
    return result


def select_coin_bnb(
    coins: Sequence[Coin],
    options: SelectionOptions,
    max_tries: int = BNB_MAX_TRIES,
) -> SelectionResult:
    """
    Find the lowest-waste selection that needs no change output.

    Args:
        coins: Candidate coins
        options: Selection request
        max_tries: Maximum number of search nodes to visit

    Returns:
        Best selection found within the node budget

    Raises:
        InvalidOptionsError: If options are invalid
        InsufficientFundsError: If the coins cannot cover the request
        NoMatchFoundError: If no selection fits the window within max_tries
    """
    candidates, policy = prepare_candidates(coins, options, ALGORITHM)

    ordered = sorted(candidates, key=lambda c: (-c.effective_value, c.index))
    n = len(ordered)
    remaining = _suffix_sums(ordered)
    next_distinct = _next_distinct(ordered)

    target = options.required_value
    upper = target + policy.tolerance
    # Adding inputs only raises timing waste when spending now is dearer
    prune_on_waste = options.fee_rate > options.long_term_rate

    best: SelectionResult | None = None
    stack = [_Frame(depth=0, effective_value=0, weight=0, selected=())]
    tries = 0

    while stack:
        if tries >= max_tries:
            logger.debug(f"{ALGORITHM}: node budget of {max_tries} exhausted")
            break
        tries += 1
        frame = stack.pop()
        value = frame.effective_value

        if value > upper:
            continue

        if value >= target:
            result = build_result(
                ALGORITHM, (ordered[i] for i in frame.selected), options, policy
            )
            if result is not None and (best is None or result.sort_key < best.sort_key):
                best = result
            continue

        if frame.depth >= n or value + remaining[frame.depth] < target:
            continue

        if prune_on_waste and best is not None:
            if input_waste(frame.weight, options) > best.waste:
                continue

        candidate = ordered[frame.depth]
        # Exclusion skips coins equivalent to this one; the inclusion branch
        # already covers every count of them.
        stack.append(
            _Frame(
                depth=next_distinct[frame.depth],
                effective_value=value,
                weight=frame.weight,
                selected=frame.selected,
            )
        )
        stack.append(
            _Frame(
                depth=frame.depth + 1,
                effective_value=value + candidate.effective_value,
                weight=frame.weight + candidate.weight,
                selected=frame.selected + (frame.depth,),
            )
        )

    logger.debug(f"{ALGORITHM}: visited {tries} nodes over {n} candidates")

    if best is None:
        raise NoMatchFoundError(
            f"{ALGORITHM}: no selection within [{target}, {upper}] after {tries} tries"
        )
    return best
