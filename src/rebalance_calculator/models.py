from typing import List, Literal, Optional
from pydantic import BaseModel, Field

RebalanceAction = Literal['buy', 'sell', 'hold']


class RebalancingCalculation(BaseModel):
    """Per-stock comparison of current and target weights with the proposed trade"""
    stock_name: str
    ticker: Optional[str] = None
    current_quantity: float
    current_weight: float
    target_weight: float
    current_value: float
    target_value: float
    difference: float  # current_weight - target_weight
    action: RebalanceAction
    quantity_change: float
    value_change: float
    minimum_trading_unit: int
    adjusted_quantity_change: float
    adjusted_value_change: float


class RebalancingResult(BaseModel):
    """Full output of a rebalancing calculation"""
    calculations: List[RebalancingCalculation] = Field(default_factory=list)
    total_current_value: float
    total_target_value: float
    total_rebalance_value: float
    total_buy_value: float
    total_sell_value: float
    is_balanced: bool
    has_significant_differences: bool
    rebalance_threshold: float

    @property
    def buy_calculations(self) -> List[RebalancingCalculation]:
        """Calculations with a sized buy trade."""
        return [c for c in self.calculations if c.adjusted_quantity_change > 0]

    @property
    def sell_calculations(self) -> List[RebalancingCalculation]:
        """Calculations with a sized sell trade."""
        return [c for c in self.calculations if c.adjusted_quantity_change < 0]


class ValidationResult(BaseModel):
    """Advisory issues found in a rebalancing result"""
    is_valid: bool
    issues: List[str] = Field(default_factory=list)


class AllocationValidationResult(BaseModel):
    """Problems found in a target allocation before it is used"""
    is_valid: bool
    errors: List[str] = Field(default_factory=list)
    total_weight: float


class TradingSummary(BaseModel):
    total_trades: int
    buy_trades: int
    sell_trades: int
    total_buy_value: float
    total_sell_value: float
    total_buy_quantity: float
    total_sell_quantity: float
    total_commission: float
    net_cash_flow: float


class TradingInsights(BaseModel):
    total_trades: int
    buy_trades: int
    sell_trades: int
    total_value: float
    total_commission: float
    efficiency: float  # value moved per trade
    priority: Literal['high', 'medium', 'low']


class RiskMetrics(BaseModel):
    concentration: float  # highest single weight
    volatility: float
    diversification_ratio: float


class PerformanceMetrics(BaseModel):
    total_return: float
    total_return_percentage: float
    top_performer: Optional[str] = None
    worst_performer: Optional[str] = None
    win_rate: float


class PortfolioAnalytics(BaseModel):
    total_value: float
    stock_count: int
    diversification_score: int
    risk_metrics: RiskMetrics
    performance_metrics: PerformanceMetrics


class HealthScore(BaseModel):
    overall: int
    diversification: int
    performance: int
    risk: int


class Imbalance(BaseModel):
    stock_key: str
    issue: str
    recommendation: str
    severity: Literal['high', 'medium', 'low']
