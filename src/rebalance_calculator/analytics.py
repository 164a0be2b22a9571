"""Portfolio analytics and trade summaries built on top of rebalancing results"""

from typing import List
import logging
import math
from portfolio_models import PortfolioSnapshot, TargetAllocationSet, stock_key
from .models import (
    AllocationValidationResult,
    HealthScore,
    Imbalance,
    PerformanceMetrics,
    PortfolioAnalytics,
    RebalancingCalculation,
    RebalancingResult,
    RiskMetrics,
    TradingInsights,
    TradingSummary,
)

logger = logging.getLogger(__name__)

DEFAULT_IMBALANCE_THRESHOLD = 5.0
SEVERITY_ORDER = {'high': 3, 'medium': 2, 'low': 1}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _weight(value: float, total_value: float) -> float:
    return (value / total_value) * 100 if total_value > 0 else 0


def validate_allocations(target: TargetAllocationSet) -> AllocationValidationResult:
    """
    Check a target allocation before it is saved or used.

    Unlike RebalancingCalculator.validate, this looks at the allocation itself:
    it must have entries, sum to 100% and give every entry a name and a weight
    in (0, 100].
    """
    errors = []

    if not target.stocks:
        errors.append('At least one stock allocation is required')

    total_weight = sum(stock.target_weight for stock in target.stocks)
    if abs(total_weight - 100) > 0.01:
        errors.append(f"Total allocation must equal 100%, current total: {total_weight:.2f}%")

    for index, stock in enumerate(target.stocks, start=1):
        if not stock.stock_name.strip():
            errors.append(f"Stock {index}: Name is required")
        if stock.target_weight <= 0:
            errors.append(f"Stock {index}: Weight must be greater than 0")
        if stock.target_weight > 100:
            errors.append(f"Stock {index}: Weight cannot exceed 100%")

    return AllocationValidationResult(is_valid=not errors, errors=errors, total_weight=total_weight)


def summarize_trades(calculations: List[RebalancingCalculation], commission: float = 0) -> TradingSummary:
    """Totals over the calculations that carry a buy or sell action"""
    actionable = [calc for calc in calculations if calc.action != 'hold']
    buys = [calc for calc in actionable if calc.action == 'buy']
    sells = [calc for calc in actionable if calc.action == 'sell']

    total_buy_value = sum(abs(calc.adjusted_value_change) for calc in buys)
    total_sell_value = sum(abs(calc.adjusted_value_change) for calc in sells)
    total_commission = sum(abs(calc.adjusted_quantity_change) * commission for calc in actionable)

    return TradingSummary(
        total_trades=len(actionable),
        buy_trades=len(buys),
        sell_trades=len(sells),
        total_buy_value=total_buy_value,
        total_sell_value=total_sell_value,
        total_buy_quantity=sum(abs(calc.adjusted_quantity_change) for calc in buys),
        total_sell_quantity=sum(abs(calc.adjusted_quantity_change) for calc in sells),
        total_commission=total_commission,
        net_cash_flow=total_sell_value - total_buy_value - total_commission
    )


def generate_trading_insights(calculations: List[RebalancingCalculation], commission: float = 0) -> TradingInsights:
    summary = summarize_trades(calculations, commission)
    total_value = summary.total_buy_value + summary.total_sell_value
    efficiency = total_value / summary.total_trades if summary.total_trades > 0 else 0

    if summary.total_trades > 5 or summary.total_buy_value > 10000:
        priority = 'high'
    elif summary.total_trades > 2 or summary.total_buy_value > 1000:
        priority = 'medium'
    else:
        priority = 'low'

    return TradingInsights(
        total_trades=summary.total_trades,
        buy_trades=summary.buy_trades,
        sell_trades=summary.sell_trades,
        total_value=total_value,
        total_commission=summary.total_commission,
        efficiency=efficiency,
        priority=priority
    )


def calculate_risk_metrics(portfolio: PortfolioSnapshot) -> RiskMetrics:
    weights = [_weight(h.total_value, portfolio.total_value) for h in portfolio.holdings]
    concentration = max(weights) if weights else 0

    # Spread of per-holding returns stands in for volatility
    returns = [h.profit_loss_percent for h in portfolio.holdings]
    volatility = 0.0
    if returns:
        mean_return = sum(returns) / len(returns)
        volatility = math.sqrt(sum((r - mean_return) ** 2 for r in returns) / len(returns))

    return RiskMetrics(
        concentration=concentration,
        volatility=volatility,
        diversification_ratio=100 / concentration if concentration > 0 else 0
    )


def calculate_performance_metrics(portfolio: PortfolioSnapshot) -> PerformanceMetrics:
    holdings = portfolio.holdings
    ranked = sorted(holdings, key=lambda h: h.profit_loss_percent, reverse=True)
    profitable = [h for h in holdings if h.profit_loss > 0]

    return PerformanceMetrics(
        total_return=portfolio.total_profit_loss,
        total_return_percentage=portfolio.total_profit_loss_percent,
        top_performer=ranked[0].stock_name if ranked else None,
        worst_performer=ranked[-1].stock_name if ranked else None,
        win_rate=(len(profitable) / len(holdings)) * 100 if holdings else 0
    )


def calculate_diversification_score(portfolio: PortfolioSnapshot) -> int:
    """0-100, where 100 means every holding has the same weight"""
    if not portfolio.holdings:
        return 0

    weights = [_weight(h.total_value, portfolio.total_value) for h in portfolio.holdings]
    ideal_weight = 100 / len(weights)
    average_deviation = sum(abs(w - ideal_weight) for w in weights) / len(weights)
    return _round_half_up(max(0, 100 - average_deviation * 2))


def calculate_portfolio_analytics(portfolio: PortfolioSnapshot) -> PortfolioAnalytics:
    return PortfolioAnalytics(
        total_value=portfolio.total_value,
        stock_count=len(portfolio.holdings),
        diversification_score=calculate_diversification_score(portfolio),
        risk_metrics=calculate_risk_metrics(portfolio),
        performance_metrics=calculate_performance_metrics(portfolio)
    )


def calculate_health_score(portfolio: PortfolioSnapshot) -> HealthScore:
    analytics = calculate_portfolio_analytics(portfolio)

    diversification = analytics.diversification_score
    performance = max(0, min(100, 50 + analytics.performance_metrics.win_rate * 0.5))
    risk = max(0, 100 - analytics.risk_metrics.concentration)
    overall = diversification * 0.4 + performance * 0.3 + risk * 0.3

    return HealthScore(
        overall=_round_half_up(overall),
        diversification=diversification,
        performance=_round_half_up(performance),
        risk=_round_half_up(risk)
    )


def detect_imbalances(portfolio: PortfolioSnapshot, target: TargetAllocationSet,
                      threshold: float = DEFAULT_IMBALANCE_THRESHOLD) -> List[Imbalance]:
    """List target stocks whose weight is off by more than threshold, most severe first"""
    current_map = {h.stock_key: h for h in portfolio.holdings}
    imbalances = []

    for entry in target.stocks:
        key = entry.stock_key
        holding = current_map.get(key)
        current_weight = _weight(holding.total_value, portfolio.total_value) if holding else 0
        difference = current_weight - entry.target_weight

        if abs(difference) <= threshold:
            continue

        deviation = abs(difference)
        if deviation > 10:
            severity = 'high'
        elif deviation > 5:
            severity = 'medium'
        else:
            severity = 'low'

        if difference > 0:
            issue = f"Overweight by {deviation:.1f}%"
            recommendation = f"Consider reducing {key} position"
        else:
            issue = f"Underweight by {deviation:.1f}%"
            recommendation = f"Consider buying more {key}"

        imbalances.append(Imbalance(
            stock_key=key,
            issue=issue,
            recommendation=recommendation,
            severity=severity
        ))

    return sorted(imbalances, key=lambda i: SEVERITY_ORDER[i.severity], reverse=True)


def simulate_rebalanced_portfolio(portfolio: PortfolioSnapshot, result: RebalancingResult) -> PortfolioSnapshot:
    """
    Apply the proposed trades to the current holdings.

    Stocks that only appear in the target are not added since they have no
    known price; holdings that end at zero or below are dropped.
    """
    changes = {
        stock_key(calc.ticker, calc.stock_name): calc.adjusted_quantity_change
        for calc in result.calculations
    }

    holdings = []
    for holding in portfolio.holdings:
        new_quantity = holding.quantity + changes.get(holding.stock_key, 0)
        if new_quantity <= 0:
            logger.debug(f"Dropping {holding.stock_key} from simulated portfolio (quantity {new_quantity})")
            continue
        holdings.append(holding.model_copy(update={'quantity': new_quantity}))

    return PortfolioSnapshot.from_holdings(holdings)
