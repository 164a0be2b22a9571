from .calculator import (
    RebalancingCalculator,
    calculate_rebalancing,
    get_rebalancing_recommendations,
    validate_calculations,
)
from .models import (
    RebalancingCalculation,
    RebalancingResult,
    ValidationResult,
    AllocationValidationResult,
    TradingSummary,
    TradingInsights,
    PortfolioAnalytics,
    HealthScore,
    Imbalance,
)
from .analytics import (
    validate_allocations,
    summarize_trades,
    generate_trading_insights,
    calculate_portfolio_analytics,
    calculate_health_score,
    detect_imbalances,
    simulate_rebalanced_portfolio,
)
from portfolio_models import (
    Holding,
    PortfolioSnapshot,
    TargetAllocationEntry,
    TargetAllocationSet,
    RebalancingOptions,
)

__version__ = "1.0.0"

__all__ = [
    "RebalancingCalculator",
    "calculate_rebalancing",
    "get_rebalancing_recommendations",
    "validate_calculations",
    "RebalancingCalculation",
    "RebalancingResult",
    "ValidationResult",
    "AllocationValidationResult",
    "TradingSummary",
    "TradingInsights",
    "PortfolioAnalytics",
    "HealthScore",
    "Imbalance",
    "validate_allocations",
    "summarize_trades",
    "generate_trading_insights",
    "calculate_portfolio_analytics",
    "calculate_health_score",
    "detect_imbalances",
    "simulate_rebalanced_portfolio",
    "Holding",
    "PortfolioSnapshot",
    "TargetAllocationEntry",
    "TargetAllocationSet",
    "RebalancingOptions",
    "__version__",
]
