"""
Coin selection algorithms.

Each algorithm takes the caller's coins and a SelectionOptions request and
returns a SelectionResult, or raises a SelectionError subclass.
"""

from utxoselect.algorithms.bnb import select_coin_bnb
from utxoselect.algorithms.fifo import select_coin_fifo
from utxoselect.algorithms.knapsack import select_coin_knapsack
from utxoselect.algorithms.leastchange import select_coin_leastchange
from utxoselect.algorithms.lowestlarger import select_coin_lowestlarger
from utxoselect.algorithms.srd import select_coin_srd

__all__ = [
    "select_coin_bnb",
    "select_coin_fifo",
    "select_coin_knapsack",
    "select_coin_leastchange",
    "select_coin_lowestlarger",
    "select_coin_srd",
]
