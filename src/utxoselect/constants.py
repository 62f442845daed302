"""
Coin selection constants.

Search bounds follow the conventions of wallet implementations that ship
branch-and-bound and knapsack selection:
- BNB_MAX_TRIES: node visits before branch-and-bound gives up
- KNAPSACK_ITERATIONS: randomized passes per knapsack run
"""

from __future__ import annotations

# Standard P2PKH dust limit in Bitcoin Core, handy as a min_change_value
STANDARD_DUST_LIMIT = 546  # satoshis

# Change below this is rarely worth creating on mainnet
DEFAULT_MIN_CHANGE_VALUE = 5 * STANDARD_DUST_LIMIT  # 2730 satoshis

# Branch-and-bound node visit cap.
# 100k visits keeps worst-case runtime well under a second for a few thousand
# candidates while still finding exact matches on typical wallets.
BNB_MAX_TRIES = 100_000

# Number of shuffled passes the knapsack solver performs
KNAPSACK_ITERATIONS = 1000

# Sequence assigned to coins without a creation_sequence so FIFO spends them last
UNSEQUENCED = 2**63 - 1
