"""
Lowest-larger coin selection: spend one coin when one suffices.
"""

from __future__ import annotations

from collections.abc import Sequence

from utxoselect.algorithms.common import prepare_candidates
from utxoselect.cost import build_result
from utxoselect.errors import NoMatchFoundError
from utxoselect.models import Coin, SelectionOptions, SelectionResult

ALGORITHM = "lowestlarger"


def select_coin_lowestlarger(
    coins: Sequence[Coin],
    options: SelectionOptions,
) -> SelectionResult:
    """
    Pick the smallest single coin that covers the target plus fees.

    Coins are tried in ascending effective value; a coin whose leftover is
    too big to drop but too small for a change output is skipped in favour of
    the next larger one.

    Raises:
        InvalidOptionsError: If options are invalid
        InsufficientFundsError: If the coins cannot cover the request
        NoMatchFoundError: If no single coin is acceptable
    """
    candidates, policy = prepare_candidates(coins, options, ALGORITHM)
    required = options.required_value

    larger = sorted(
        (c for c in candidates if c.effective_value >= required),
        key=lambda c: (c.effective_value, c.index),
    )
    for candidate in larger:
        result = build_result(ALGORITHM, [candidate], options, policy)
        if result is not None:
            return result

    raise NoMatchFoundError(
        f"{ALGORITHM}: none of {len(larger)} coins covering {required} fits the change bounds"
    )
