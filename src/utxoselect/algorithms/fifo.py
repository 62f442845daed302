"""
First-in-first-out coin selection.
"""

from __future__ import annotations

from collections.abc import Sequence

from utxoselect.algorithms.common import accumulate, prepare_candidates
from utxoselect.constants import UNSEQUENCED
from utxoselect.models import Coin, SelectionOptions, SelectionResult

ALGORITHM = "fifo"


def select_coin_fifo(coins: Sequence[Coin], options: SelectionOptions) -> SelectionResult:
    """
    Spend the oldest coins first.

    Coins are ordered by creation_sequence (coins without one go last, in
    index order) and taken until the target plus fees is covered.
    """
    candidates, policy = prepare_candidates(coins, options, ALGORITHM)

    ordered = sorted(
        candidates,
        key=lambda c: (
            UNSEQUENCED if c.creation_sequence is None else c.creation_sequence,
            c.index,
        ),
    )
    return accumulate(ALGORITHM, ordered, options, policy)
