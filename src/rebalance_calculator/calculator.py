"""Rebalancing calculation with unit rounding and commission filtering"""

from typing import List, Mapping, Optional, Tuple, Union
import logging
import math
from portfolio_models import (
    Holding,
    PortfolioSnapshot,
    RebalancingOptions,
    TargetAllocationEntry,
    TargetAllocationSet,
)
from .formatting import format_currency, format_quantity
from .models import RebalancingCalculation, RebalancingResult, ValidationResult

# A trade is uneconomical when its commission exceeds this share of its value
COMMISSION_COST_RATIO = 0.1
TARGET_WEIGHT_TOLERANCE = 0.01
MAX_REBALANCE_FRACTION = 0.5

BALANCED_MESSAGE = 'Your portfolio is well-balanced and aligned with your target allocation.'

OptionsInput = Union[RebalancingOptions, Mapping, None]


class RebalancingCalculator:
    """Compare a portfolio with its target allocation and propose trades"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def calculate(self, current_portfolio: PortfolioSnapshot, target_allocation: TargetAllocationSet,
                  options: OptionsInput = None) -> RebalancingResult:
        """
        Calculate rebalancing trades for every stock in either the portfolio or the target.
        Returns RebalancingResult sorted by absolute weight difference, largest first
        """
        opts = self._resolve_options(options)
        total_value = current_portfolio.total_value

        current_map = {holding.stock_key: holding for holding in current_portfolio.holdings}
        target_map = {entry.stock_key: entry for entry in target_allocation.stocks}

        # Current keys first, then keys only present in the target
        all_keys = list(current_map)
        all_keys.extend(key for key in target_map if key not in current_map)

        calculations = []
        total_buy_value = 0.0
        total_sell_value = 0.0

        for key in all_keys:
            calculation = self._calculate_stock(
                key=key,
                holding=current_map.get(key),
                target=target_map.get(key),
                total_value=total_value,
                opts=opts
            )
            calculations.append(calculation)

            if calculation.adjusted_value_change > 0:
                total_buy_value += calculation.adjusted_value_change
            elif calculation.adjusted_value_change < 0:
                total_sell_value += abs(calculation.adjusted_value_change)

        has_significant_differences = any(
            abs(calc.difference) > opts.rebalance_threshold for calc in calculations
        )
        total_rebalance_value = abs(total_buy_value - total_sell_value)

        self.logger.debug(
            f"Rebalance summary: {len(calculations)} stocks, buy ${total_buy_value:,.2f}, "
            f"sell ${total_sell_value:,.2f}, significant={has_significant_differences}"
        )

        return RebalancingResult(
            calculations=sorted(calculations, key=lambda calc: abs(calc.difference), reverse=True),
            total_current_value=total_value,
            total_target_value=total_value,
            total_rebalance_value=total_rebalance_value,
            total_buy_value=total_buy_value,
            total_sell_value=total_sell_value,
            is_balanced=not has_significant_differences,
            has_significant_differences=has_significant_differences,
            rebalance_threshold=opts.rebalance_threshold
        )

    def get_recommendations(self, result: RebalancingResult) -> List[str]:
        """Turn a result into human-readable buy/sell lines, in result order"""
        if result.is_balanced:
            return [BALANCED_MESSAGE]

        recommendations = []

        buy_calculations = result.buy_calculations
        if buy_calculations:
            recommendations.append('Consider buying:')
            for calc in buy_calculations:
                recommendations.append(
                    f"  • {calc.stock_name}: {format_quantity(abs(calc.adjusted_quantity_change))} shares "
                    f"({format_currency(calc.adjusted_value_change)})"
                )

        sell_calculations = result.sell_calculations
        if sell_calculations:
            recommendations.append('Consider selling:')
            for calc in sell_calculations:
                recommendations.append(
                    f"  • {calc.stock_name}: {format_quantity(abs(calc.adjusted_quantity_change))} shares "
                    f"({format_currency(abs(calc.adjusted_value_change))})"
                )

        if result.total_rebalance_value > 0:
            recommendations.append(
                f"Total rebalancing value: {format_currency(result.total_rebalance_value)}"
            )

        return recommendations

    def validate(self, result: RebalancingResult) -> ValidationResult:
        """Check a computed result for problems the caller should know about"""
        issues = []

        total_target_weight = sum(calc.target_weight for calc in result.calculations)
        if abs(total_target_weight - 100) > TARGET_WEIGHT_TOLERANCE:
            issues.append(f"Target weights total {total_target_weight:.2f}% instead of 100%")

        # Unit rounding never clamps against the quantity actually held
        overdrawn = [
            calc.stock_name for calc in result.calculations
            if calc.current_quantity + calc.adjusted_quantity_change < 0
        ]
        if overdrawn:
            issues.append(f"Negative quantities would result for: {', '.join(overdrawn)}")

        if result.total_rebalance_value > result.total_current_value * MAX_REBALANCE_FRACTION:
            issues.append(
                'Rebalancing requires moving more than 50% of portfolio value - consider gradual rebalancing'
            )

        for issue in issues:
            self.logger.debug(f"Validation issue: {issue}")

        return ValidationResult(is_valid=not issues, issues=issues)

    def _resolve_options(self, options: OptionsInput) -> RebalancingOptions:
        """Fill omitted options with their defaults"""
        if options is None:
            return RebalancingOptions()
        if isinstance(options, RebalancingOptions):
            return options
        return RebalancingOptions(**options)

    def _calculate_stock(self, key: str, holding: Optional[Holding], target: Optional[TargetAllocationEntry],
                         total_value: float, opts: RebalancingOptions) -> RebalancingCalculation:
        """Derive weights, action and trade size for one stock key"""
        current_quantity = holding.quantity if holding else 0
        current_price = holding.current_price if holding else 0
        current_value = holding.total_value if holding else 0
        current_weight = (current_value / total_value) * 100 if total_value > 0 else 0

        target_weight = target.target_weight if target else 0
        target_value = (target_weight / 100) * total_value

        difference = current_weight - target_weight
        value_change = target_value - current_value

        action = 'hold'
        if abs(difference) > opts.rebalance_threshold:
            action = 'sell' if difference > 0 else 'buy'

        # Without a price the direction is known but the size is not
        quantity_change = 0
        if current_price > 0 and action != 'hold':
            quantity_change = value_change / current_price

        adjusted_quantity_change, adjusted_value_change = self._apply_unit_constraint(
            quantity_change, value_change, current_price, action, opts
        )

        if self._is_uneconomical(adjusted_quantity_change, adjusted_value_change, opts):
            self.logger.debug(
                f"Skipping {action} for {key}: commission ${abs(adjusted_quantity_change) * opts.commission:,.2f} "
                f"exceeds {COMMISSION_COST_RATIO * 100:.0f}% of ${abs(adjusted_value_change):,.2f}"
            )
            adjusted_quantity_change = 0
            adjusted_value_change = 0
            action = 'hold'

        if action != 'hold':
            self.logger.debug(
                f"{action.upper()} {key}: weight {current_weight:.2f}% -> {target_weight:.2f}%, "
                f"{adjusted_quantity_change} units (${adjusted_value_change:,.2f})"
            )

        return RebalancingCalculation(
            stock_name=(target.stock_name if target else None) or (holding.stock_name if holding else None) or key,
            ticker=(target.ticker if target else None) or (holding.ticker if holding else None) or None,
            current_quantity=current_quantity,
            current_weight=current_weight,
            target_weight=target_weight,
            current_value=current_value,
            target_value=target_value,
            difference=difference,
            action=action,
            quantity_change=quantity_change,
            value_change=value_change,
            minimum_trading_unit=opts.minimum_trading_unit,
            adjusted_quantity_change=adjusted_quantity_change,
            adjusted_value_change=adjusted_value_change
        )

    def _apply_unit_constraint(self, quantity_change: float, value_change: float, current_price: float,
                               action: str, opts: RebalancingOptions) -> Tuple[float, float]:
        """Round the trade magnitude down to whole trading units, keeping the action's sign"""
        # Unpriced rows carry a direction but no size
        if current_price <= 0:
            return 0, 0

        # Hold rows keep their raw value change and count toward the totals
        if opts.allow_partial_shares or quantity_change == 0:
            return quantity_change, value_change

        unit = opts.minimum_trading_unit
        units = math.floor(abs(quantity_change) / unit) * unit
        adjusted_quantity_change = units if action == 'buy' else -units
        return adjusted_quantity_change, adjusted_quantity_change * current_price

    def _is_uneconomical(self, adjusted_quantity_change: float, adjusted_value_change: float,
                         opts: RebalancingOptions) -> bool:
        """Check whether commission eats too much of the trade"""
        if not opts.consider_commission or opts.commission <= 0 or adjusted_quantity_change == 0:
            return False
        commission_cost = abs(adjusted_quantity_change) * opts.commission
        return commission_cost > abs(adjusted_value_change) * COMMISSION_COST_RATIO


_default_calculator = RebalancingCalculator()


def calculate_rebalancing(current_portfolio: PortfolioSnapshot, target_allocation: TargetAllocationSet,
                          options: OptionsInput = None) -> RebalancingResult:
    return _default_calculator.calculate(current_portfolio, target_allocation, options)


def get_rebalancing_recommendations(result: RebalancingResult) -> List[str]:
    return _default_calculator.get_recommendations(result)


def validate_calculations(result: RebalancingResult) -> ValidationResult:
    return _default_calculator.validate(result)
