from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


def stock_key(ticker: Optional[str], stock_name: str) -> str:
    """Identity used to match a holding to its target entry.

    The ticker wins when present, so two stocks sharing a display name but
    trading under different tickers stay separate.
    """
    return ticker or stock_name


# Current portfolio models
class Holding(BaseModel):
    """A single owned position"""
    id: Optional[str] = None
    stock_name: str
    ticker: Optional[str] = None
    quantity: float
    purchase_price: float
    current_price: float

    @property
    def stock_key(self) -> str:
        return stock_key(self.ticker, self.stock_name)

    @property
    def total_value(self) -> float:
        return self.quantity * self.current_price

    @property
    def total_cost(self) -> float:
        return self.quantity * self.purchase_price

    @property
    def profit_loss(self) -> float:
        return self.total_value - self.total_cost

    @property
    def profit_loss_percent(self) -> float:
        cost = self.total_cost
        return (self.profit_loss / cost) * 100 if cost > 0 else 0


class PortfolioSnapshot(BaseModel):
    """Holdings plus totals captured when the snapshot was built"""
    holdings: List[Holding] = Field(default_factory=list)
    total_value: float = 0.0
    total_cost: float = 0.0

    @classmethod
    def from_holdings(cls, holdings: List[Holding]) -> "PortfolioSnapshot":
        return cls(
            holdings=list(holdings),
            total_value=sum(h.total_value for h in holdings),
            total_cost=sum(h.total_cost for h in holdings),
        )

    @property
    def total_profit_loss(self) -> float:
        return self.total_value - self.total_cost

    @property
    def total_profit_loss_percent(self) -> float:
        return (self.total_profit_loss / self.total_cost) * 100 if self.total_cost > 0 else 0


# Target allocation models
class TargetAllocationEntry(BaseModel):
    """Desired weight for one stock, as a percentage (0-100]"""
    stock_name: str
    ticker: Optional[str] = None
    target_weight: float

    @property
    def stock_key(self) -> str:
        return stock_key(self.ticker, self.stock_name)


class TargetAllocationSet(BaseModel):
    """Target portfolio; total_weight should equal 100 but is not enforced"""
    name: Optional[str] = None
    description: Optional[str] = None
    stocks: List[TargetAllocationEntry] = Field(default_factory=list)
    total_weight: float = 0.0

    @classmethod
    def from_entries(cls, stocks: List[TargetAllocationEntry], name: Optional[str] = None,
                     description: Optional[str] = None) -> "TargetAllocationSet":
        return cls(
            name=name,
            description=description,
            stocks=list(stocks),
            total_weight=sum(s.target_weight for s in stocks),
        )


# Calculation options
class RebalancingOptions(BaseModel):
    """Knobs for a rebalancing run; every field has a usable default"""
    model_config = ConfigDict(extra="forbid")

    minimum_trading_unit: int = Field(
        default=1,
        ge=1,
        description="Trades are rounded down to multiples of this unit"
    )
    rebalance_threshold: float = Field(
        default=5.0,
        ge=0.0,
        description="Weight deviation (percentage points) that triggers a trade"
    )
    allow_partial_shares: bool = Field(
        default=False,
        description="Skip unit rounding and trade fractional quantities"
    )
    commission: float = Field(
        default=0.0,
        ge=0.0,
        description="Commission charged per traded unit"
    )
    consider_commission: bool = Field(
        default=False,
        description="Suppress trades whose commission makes them uneconomical"
    )
