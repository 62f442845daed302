"""
Tests for the fee, effective value and waste model.
"""

from __future__ import annotations

import pytest

from utxoselect.cost import (
    ExcessPolicy,
    calculate_fee,
    calculate_waste,
    effective_value,
    evaluate_selection,
    input_waste,
    resolve_excess,
)
from utxoselect.errors import InvalidOptionsError
from utxoselect.models import Coin, ExcessStrategy, SelectionOptions


@pytest.fixture
def change_options() -> SelectionOptions:
    """drain_fee=100, cost_of_change=150, smallest change 1000."""
    return SelectionOptions(
        target_value=10_000,
        fee_rate=1.0,
        change_weight=100,
        change_cost=50,
        min_change_value=1_000,
    )


class TestCalculateFee:
    """Tests for fee rounding."""

    @pytest.mark.parametrize(
        ("weight", "rate", "expected"),
        [
            (272, 1.0, 272),
            (272, 1.5, 408),
            (100, 0.1, 10),
            (1, 0.3, 1),
            (3, 0.25, 1),
            (0, 5.0, 0),
            (500, 0.0, 0),
        ],
    )
    def test_fee_rounds_up(self, weight: int, rate: float, expected: int) -> None:
        assert calculate_fee(weight, rate) == expected

    def test_effective_value(self) -> None:
        """Test effective value subtracts the input fee."""
        assert effective_value(Coin(value=1_000, weight=272), 2.0) == 456

    def test_effective_value_can_be_negative(self) -> None:
        """Test dust coins have negative effective value."""
        assert effective_value(Coin(value=100, weight=272), 1.0) == -172


class TestWaste:
    """Tests for waste scoring."""

    def test_input_waste_positive_when_fees_are_high(self) -> None:
        options = SelectionOptions(target_value=1, fee_rate=10.0, long_term_fee_rate=5.0)
        assert input_waste(100, options) == 500

    def test_input_waste_negative_when_fees_are_low(self) -> None:
        """Test consolidating at a cheap rate lowers waste."""
        options = SelectionOptions(target_value=1, fee_rate=1.0, long_term_fee_rate=5.0)
        assert input_waste(100, options) == -400

    def test_changeless_waste_counts_excess(self, change_options: SelectionOptions) -> None:
        assert calculate_waste(change_options, 272, excess=120, change_value=0) == 120

    def test_change_waste_counts_cost_of_change(self, change_options: SelectionOptions) -> None:
        assert calculate_waste(change_options, 272, excess=5_000, change_value=4_900) == 150

    def test_waste_includes_timing_cost(self) -> None:
        options = SelectionOptions(target_value=1, fee_rate=10.0, long_term_fee_rate=5.0)
        assert calculate_waste(options, 100, excess=7, change_value=0) == 507


class TestExcessResolution:
    """Tests for turning leftover value into change or fee."""

    def test_negative_excess_is_unacceptable(self, change_options: SelectionOptions) -> None:
        assert resolve_excess(-1, change_options) is None

    @pytest.mark.parametrize("excess", [0, 75, 150])
    def test_small_excess_is_dropped(self, change_options: SelectionOptions, excess: int) -> None:
        """Test excess within the cost of change goes to fees."""
        assert resolve_excess(excess, change_options) == 0

    @pytest.mark.parametrize("excess", [151, 600, 1_099])
    def test_gap_excess_is_stranded(self, change_options: SelectionOptions, excess: int) -> None:
        """Test excess too big to drop and too small for change is refused."""
        assert resolve_excess(excess, change_options) is None
        assert ExcessPolicy.from_options(change_options).is_stranded(excess)

    def test_change_is_excess_minus_drain_fee(self, change_options: SelectionOptions) -> None:
        assert resolve_excess(1_100, change_options) == 1_000
        assert resolve_excess(5_000, change_options) == 4_900
        assert not ExcessPolicy.from_options(change_options).is_stranded(5_000)

    def test_to_fee_never_creates_change(self, change_options: SelectionOptions) -> None:
        options = change_options.model_copy(update={"excess_strategy": ExcessStrategy.TO_FEE})
        assert resolve_excess(150, options) == 0
        assert resolve_excess(5_000, options) is None
        assert not ExcessPolicy.from_options(options).is_stranded(500)

    def test_to_recipient_accepts_any_excess(self, change_options: SelectionOptions) -> None:
        options = change_options.model_copy(
            update={"excess_strategy": ExcessStrategy.TO_RECIPIENT}
        )
        assert resolve_excess(5_000, options) == 0
        assert resolve_excess(-1, options) is None

    def test_wide_tolerance_prefers_cheaper_outcome(self) -> None:
        """Test that change wins over dropping once the excess exceeds its cost."""
        options = SelectionOptions(
            target_value=10_000,
            fee_rate=1.0,
            change_weight=100,
            change_cost=50,
            min_change_value=1_000,
            max_change_value=2_000,
        )
        assert resolve_excess(100, options) == 0
        assert resolve_excess(1_500, options) == 1_400
        assert resolve_excess(2_500, options) == 2_400


class TestEvaluateSelection:
    """Tests for scoring a hand-picked selection."""

    def test_exact_match(
        self, scenario_a_coins: list[Coin], zero_fee_options: SelectionOptions
    ) -> None:
        result = evaluate_selection(scenario_a_coins, [2, 1], zero_fee_options)
        assert result is not None
        assert result.selected_inputs == (1, 2)
        assert result.total_value == 80_000
        assert result.fee == 0
        assert result.waste == 0
        assert result.algorithm == "manual"

    def test_duplicate_indices_collapse(
        self, scenario_a_coins: list[Coin], zero_fee_options: SelectionOptions
    ) -> None:
        result = evaluate_selection(scenario_a_coins, [1, 2, 2], zero_fee_options)
        assert result is not None
        assert result.selected_inputs == (1, 2)

    def test_fee_accounting_with_change(
        self, fee_coins: list[Coin], fee_options: SelectionOptions
    ) -> None:
        """Test fee covers inputs and the change output."""
        result = evaluate_selection(fee_coins, [0], fee_options)
        assert result is not None
        assert result.excess == 20_000
        assert result.change_value == 19_876
        assert result.fee == 272 + 124
        assert result.waste == 396
        assert result.total_value == 80_000 + result.fee + result.change_value

    def test_to_recipient_excess_not_counted_as_fee(self) -> None:
        coins = [Coin(value=60_000, weight=100)]
        options = SelectionOptions(
            target_value=50_000, fee_rate=1.0, excess_strategy=ExcessStrategy.TO_RECIPIENT
        )
        result = evaluate_selection(coins, [0], options)
        assert result is not None
        assert result.excess == 9_900
        assert result.change_value == 0
        assert result.fee == 100

    def test_insufficient_selection_returns_none(
        self, scenario_a_coins: list[Coin], zero_fee_options: SelectionOptions
    ) -> None:
        assert evaluate_selection(scenario_a_coins, [2], zero_fee_options) is None
        assert evaluate_selection(scenario_a_coins, [], zero_fee_options) is None

    def test_index_out_of_range(
        self, scenario_a_coins: list[Coin], zero_fee_options: SelectionOptions
    ) -> None:
        with pytest.raises(IndexError):
            evaluate_selection(scenario_a_coins, [3], zero_fee_options)

    def test_invalid_options(self, scenario_a_coins: list[Coin]) -> None:
        with pytest.raises(InvalidOptionsError):
            evaluate_selection(
                scenario_a_coins, [0], SelectionOptions(target_value=0, fee_rate=0.0)
            )
