"""
Coin selection data models.

Requests are immutable Pydantic models; results are plain frozen dataclasses
produced once per successful selection.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field

from utxoselect.errors import InvalidOptionsError


class ExcessStrategy(str, Enum):
    """What to do with value left over after the target and fees are paid."""

    TO_CHANGE = "to_change"
    TO_FEE = "to_fee"
    TO_RECIPIENT = "to_recipient"


class Algorithm(str, Enum):
    BNB = "bnb"
    KNAPSACK = "knapsack"
    SRD = "srd"
    LOWEST_LARGER = "lowestlarger"
    FIFO = "fifo"
    LEAST_CHANGE = "leastchange"


class SelectionPolicy(str, Enum):
    """How the selector picks among successful algorithms."""

    MINIMIZE_WASTE = "minimize_waste"
    FIRST_SUCCESS = "first_success"


class Coin(BaseModel):
    """
    A spendable candidate input (a single UTXO or a group spent together).

    Coins are identified by their position in the sequence handed to a
    selection algorithm; the library never mutates them.
    """

    value: int = Field(..., ge=0, description="Amount in the smallest unit")
    weight: int = Field(..., ge=0, description="Weight units added when spent")
    input_count: int = Field(default=1, ge=1, description="UTXOs grouped in this coin")
    creation_sequence: int | None = Field(
        default=None, ge=0, description="Age order for FIFO, lower is older"
    )

    model_config = {"frozen": True}

    @property
    def input_cost(self) -> int:
        """Weight contribution of spending this coin."""
        return self.weight


class SelectionOptions(BaseModel):
    """
    A single selection request.

    Fee rates are expressed per weight unit. The change bounds map onto a
    (min, max) cost-of-change pair: ``min_change_value`` is the smallest change
    output worth creating, ``max_change_value`` is the largest excess that may
    be dropped to fees instead of creating change (defaults to the cost of
    creating and later spending a change output, widened to the fee of one
    average input plus one average output when those weights are given).
    """

    target_value: int
    fee_rate: float
    long_term_fee_rate: float | None = None
    min_absolute_fee: int = 0
    base_weight: int = 0
    change_weight: int = 0
    change_cost: int = 0
    avg_input_weight: int = 0
    avg_output_weight: int = 0
    min_change_value: int = 0
    max_change_value: int | None = None
    excess_strategy: ExcessStrategy = ExcessStrategy.TO_CHANGE

    model_config = {"frozen": True}

    def check(self) -> None:
        """
        Reject nonsensical requests before any search begins.

        Raises:
            InvalidOptionsError: If any option is out of range
        """
        if self.target_value <= 0:
            raise InvalidOptionsError(f"Target value must be positive, got {self.target_value}")
        if not math.isfinite(self.fee_rate):
            raise InvalidOptionsError(f"Fee rate must be finite, got {self.fee_rate}")
        if self.fee_rate < 0:
            raise InvalidOptionsError(f"Fee rate cannot be negative, got {self.fee_rate}")
        if self.long_term_fee_rate is not None:
            if not math.isfinite(self.long_term_fee_rate):
                raise InvalidOptionsError(
                    f"Long-term fee rate must be finite, got {self.long_term_fee_rate}"
                )
            if self.long_term_fee_rate < 0:
                raise InvalidOptionsError(
                    f"Long-term fee rate cannot be negative, got {self.long_term_fee_rate}"
                )

        for name in (
            "min_absolute_fee",
            "base_weight",
            "change_weight",
            "change_cost",
            "avg_input_weight",
            "avg_output_weight",
            "min_change_value",
        ):
            if getattr(self, name) < 0:
                raise InvalidOptionsError(f"{name} cannot be negative, got {getattr(self, name)}")

        if self.max_change_value is not None:
            if self.max_change_value < 0:
                raise InvalidOptionsError(
                    f"max_change_value cannot be negative, got {self.max_change_value}"
                )
            if self.min_change_value > self.max_change_value:
                raise InvalidOptionsError(
                    f"min_change_value {self.min_change_value} exceeds "
                    f"max_change_value {self.max_change_value}"
                )

    @property
    def long_term_rate(self) -> float:
        if self.long_term_fee_rate is None:
            return self.fee_rate
        return self.long_term_fee_rate

    @property
    def base_fee(self) -> int:
        """Fee for the non-input parts of the transaction."""
        from utxoselect.cost import calculate_fee

        return max(calculate_fee(self.base_weight, self.fee_rate), self.min_absolute_fee)

    @property
    def required_value(self) -> int:
        """Effective value the selected coins must cover."""
        return self.target_value + self.base_fee

    @property
    def drain_fee(self) -> int:
        """Fee for adding a change output now."""
        from utxoselect.cost import calculate_fee

        return calculate_fee(self.change_weight, self.fee_rate)

    @property
    def cost_of_change(self) -> int:
        """Cost of creating a change output now and spending it later."""
        return self.drain_fee + self.change_cost

    @property
    def match_range(self) -> int:
        """Fee of one average input plus one average output."""
        from utxoselect.cost import calculate_fee

        return calculate_fee(self.avg_input_weight, self.fee_rate) + calculate_fee(
            self.avg_output_weight, self.fee_rate
        )

    @property
    def changeless_tolerance(self) -> int:
        """
        Largest excess that may be dropped rather than turned into change.

        Defaults to the larger of the cost of change and the match range.
        """
        if self.max_change_value is None:
            return max(self.cost_of_change, self.match_range)
        return self.max_change_value

    @property
    def min_change_excess(self) -> int:
        """Smallest excess that funds a change output of at least min_change_value."""
        return self.min_change_value + self.drain_fee


@dataclass(frozen=True)
class SelectionResult:
    """Result of coin selection"""

    algorithm: str
    selected_inputs: tuple[int, ...]
    total_value: int
    total_weight: int
    input_count: int
    fee: int
    change_value: int
    excess: int
    waste: int

    @property
    def has_change(self) -> bool:
        return self.change_value > 0

    @property
    def sort_key(self) -> tuple[int, int, int, tuple[int, ...]]:
        """Ranking key: lower waste, then fewer inputs, then earlier coins."""
        return (self.waste, self.input_count, len(self.selected_inputs), self.selected_inputs)
