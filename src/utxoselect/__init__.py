"""
utxoselect - Coin selection for UTXO-based transactions

Provides fee-aware selection algorithms, a shared waste metric and a selector
that runs several algorithms and keeps the cheapest result.
"""

__version__ = "0.1.0"

from utxoselect.algorithms import (
    select_coin_bnb,
    select_coin_fifo,
    select_coin_knapsack,
    select_coin_leastchange,
    select_coin_lowestlarger,
    select_coin_srd,
)
from utxoselect.config import SelectorSettings, get_settings
from utxoselect.constants import (
    BNB_MAX_TRIES,
    DEFAULT_MIN_CHANGE_VALUE,
    KNAPSACK_ITERATIONS,
    STANDARD_DUST_LIMIT,
)
from utxoselect.cost import (
    calculate_fee,
    calculate_waste,
    effective_value,
    evaluate_selection,
    resolve_excess,
)
from utxoselect.errors import (
    InsufficientFundsError,
    InvalidOptionsError,
    NoMatchFoundError,
    SelectionError,
)
from utxoselect.log import setup_logging
from utxoselect.models import (
    Algorithm,
    Coin,
    ExcessStrategy,
    SelectionOptions,
    SelectionPolicy,
    SelectionResult,
)
from utxoselect.selector import Selector, select_coins, select_coins_async

__all__ = [
    "Algorithm",
    "BNB_MAX_TRIES",
    "Coin",
    "DEFAULT_MIN_CHANGE_VALUE",
    "ExcessStrategy",
    "InsufficientFundsError",
    "InvalidOptionsError",
    "KNAPSACK_ITERATIONS",
    "NoMatchFoundError",
    "STANDARD_DUST_LIMIT",
    "SelectionError",
    "SelectionOptions",
    "SelectionPolicy",
    "SelectionResult",
    "Selector",
    "SelectorSettings",
    "calculate_fee",
    "calculate_waste",
    "effective_value",
    "evaluate_selection",
    "get_settings",
    "resolve_excess",
    "select_coin_bnb",
    "select_coin_fifo",
    "select_coin_knapsack",
    "select_coin_leastchange",
    "select_coin_lowestlarger",
    "select_coin_srd",
    "select_coins",
    "select_coins_async",
    "setup_logging",
]
