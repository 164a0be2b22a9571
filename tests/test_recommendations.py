"""Tests for recommendation text and result validation."""

import pytest

from rebalance_calculator import (
    RebalancingCalculation,
    RebalancingResult,
    get_rebalancing_recommendations,
    validate_calculations,
)
from rebalance_calculator.calculator import BALANCED_MESSAGE

from conftest import make_portfolio, make_target


def make_calculation(**overrides):
    fields = dict(
        stock_name="Apple Inc.",
        ticker="AAPL",
        current_quantity=10,
        current_weight=50.0,
        target_weight=50.0,
        current_value=1500.0,
        target_value=1500.0,
        difference=0.0,
        action="hold",
        quantity_change=0,
        value_change=0,
        minimum_trading_unit=1,
        adjusted_quantity_change=0,
        adjusted_value_change=0,
    )
    fields.update(overrides)
    return RebalancingCalculation(**fields)


def make_result(calculations, **overrides):
    fields = dict(
        calculations=calculations,
        total_current_value=3000.0,
        total_target_value=3000.0,
        total_rebalance_value=0.0,
        total_buy_value=0.0,
        total_sell_value=0.0,
        is_balanced=False,
        has_significant_differences=True,
        rebalance_threshold=5.0,
    )
    fields.update(overrides)
    return RebalancingResult(**fields)


class TestRecommendations:

    def test_balanced_portfolio_gets_single_message(self, calculator, target_allocation):
        portfolio = make_portfolio(
            ("Apple Inc.", "AAPL", 14, 140.0, 150.0),
            ("Microsoft Corp.", "MSFT", 3, 280.0, 300.0),
        )
        result = calculator.calculate(portfolio, target_allocation)

        assert calculator.get_recommendations(result) == [BALANCED_MESSAGE]

    def test_buy_and_sell_sections(self, calculator, simple_result):
        assert calculator.get_recommendations(simple_result) == [
            "Consider buying:",
            "  • Apple Inc.: 4 shares ($600.00)",
            "Consider selling:",
            "  • Microsoft Corp.: 2 shares ($600.00)",
        ]

    def test_total_line_when_rebalance_value_is_positive(self, calculator, current_portfolio, target_allocation):
        result = calculator.calculate(current_portfolio, target_allocation,
                                      {"consider_commission": True, "commission": 20.0})

        assert calculator.get_recommendations(result) == [
            "Consider selling:",
            "  • Microsoft Corp.: 2 shares ($600.00)",
            "Total rebalancing value: $600.00",
        ]

    def test_fractional_quantities(self, calculator, target_allocation):
        portfolio = make_portfolio(
            ("Apple Inc.", "AAPL", 11, 140.0, 150.0),
            ("Microsoft Corp.", "MSFT", 5, 280.0, 300.0),
        )
        result = calculator.calculate(portfolio, target_allocation, {"allow_partial_shares": True})

        lines = calculator.get_recommendations(result)

        assert "  • Apple Inc.: 3.7 shares ($555.00)" in lines

    def test_unsized_buy_is_not_listed(self, calculator, current_portfolio):
        target = make_target(
            ("Apple Inc.", "AAPL", 50),
            ("Microsoft Corp.", "MSFT", 30),
            ("Google Inc.", "GOOGL", 20),
        )
        result = calculator.calculate(current_portfolio, target)

        lines = calculator.get_recommendations(result)

        assert not any("Google" in line for line in lines)
        assert "Consider buying:" not in lines
        assert lines[0] == "Consider selling:"

    def test_lines_follow_result_order(self):
        result = make_result([
            make_calculation(stock_name="Beta", action="buy",
                             adjusted_quantity_change=1, adjusted_value_change=10.0),
            make_calculation(stock_name="Alpha", action="buy",
                             adjusted_quantity_change=2, adjusted_value_change=20.0),
        ], total_buy_value=30.0, total_rebalance_value=30.0)

        assert get_rebalancing_recommendations(result) == [
            "Consider buying:",
            "  • Beta: 1 shares ($10.00)",
            "  • Alpha: 2 shares ($20.00)",
            "Total rebalancing value: $30.00",
        ]


class TestValidation:

    def test_clean_result_is_valid(self, calculator, simple_result):
        validation = calculator.validate(simple_result)

        assert validation.is_valid is True
        assert validation.issues == []

    def test_target_weights_not_summing_to_100(self, calculator, current_portfolio):
        target = make_target(("Apple Inc.", "AAPL", 60), ("Microsoft Corp.", "MSFT", 30))
        result = calculator.calculate(current_portfolio, target)

        validation = calculator.validate(result)

        assert validation.is_valid is False
        assert "Target weights total 90.00% instead of 100%" in validation.issues

    def test_weights_within_tolerance_pass(self, calculator, current_portfolio):
        target = make_target(("Apple Inc.", "AAPL", 70.005), ("Microsoft Corp.", "MSFT", 30))
        result = calculator.calculate(current_portfolio, target)

        assert not any("Target weights" in issue for issue in calculator.validate(result).issues)

    def test_negative_quantities_are_reported(self):
        result = make_result([
            make_calculation(stock_name="Apple Inc.", current_quantity=1, action="sell",
                             adjusted_quantity_change=-10, adjusted_value_change=-1500.0, target_weight=50.0),
            make_calculation(stock_name="Microsoft Corp.", current_quantity=2, action="sell",
                             adjusted_quantity_change=-3, adjusted_value_change=-900.0, target_weight=50.0),
        ])

        validation = validate_calculations(result)

        assert validation.is_valid is False
        assert validation.issues == [
            "Negative quantities would result for: Apple Inc., Microsoft Corp."
        ]

    def test_large_rebalance_is_flagged(self, calculator):
        portfolio = make_portfolio(("Apple Inc.", "AAPL", 10, 140.0, 150.0))
        target = make_target(("Google Inc.", "GOOGL", 100))
        result = calculator.calculate(portfolio, target)

        validation = calculator.validate(result)

        assert result.total_rebalance_value == pytest.approx(1500)
        assert validation.issues == [
            "Rebalancing requires moving more than 50% of portfolio value - consider gradual rebalancing"
        ]

    def test_empty_result_only_reports_weights(self, calculator):
        result = calculator.calculate(make_portfolio(), make_target())

        validation = calculator.validate(result)

        assert validation.issues == ["Target weights total 0.00% instead of 100%"]

    def test_empty_portfolio_with_full_target_is_valid(self, calculator, target_allocation):
        result = calculator.calculate(make_portfolio(), target_allocation)

        assert calculator.validate(result).is_valid is True

    def test_validation_does_not_mutate(self, calculator, simple_result):
        before = simple_result.model_dump()
        calculator.validate(simple_result)
        assert simple_result.model_dump() == before
