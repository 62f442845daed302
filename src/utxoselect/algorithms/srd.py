"""
Single Random Draw coin selection.
"""

from __future__ import annotations

import random
from collections.abc import Sequence

from utxoselect.algorithms.common import accumulate, prepare_candidates
from utxoselect.models import Coin, SelectionOptions, SelectionResult

ALGORITHM = "srd"


def select_coin_srd(
    coins: Sequence[Coin],
    options: SelectionOptions,
    rng: random.Random | None = None,
) -> SelectionResult:
    """
    Shuffle the coins and take them until the target is covered.

    The result carries change unless the drawn total happens to land within
    the changeless tolerance. No backtracking.
    """
    candidates, policy = prepare_candidates(coins, options, ALGORITHM)
    if rng is None:
        rng = random.Random()

    order = list(candidates)
    rng.shuffle(order)
    return accumulate(ALGORITHM, order, options, policy)
