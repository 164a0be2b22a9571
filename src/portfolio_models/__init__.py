from .models import (
    stock_key,
    # Current portfolio models
    Holding,
    PortfolioSnapshot,
    # Target allocation models
    TargetAllocationEntry,
    TargetAllocationSet,
    # Calculation options
    RebalancingOptions,
)
from .exceptions import (
    PortfolioDataError,
    InvalidHoldingError,
    InvalidAllocationError,
)

__version__ = "1.0.0"

__all__ = [
    "stock_key",
    "Holding",
    "PortfolioSnapshot",
    "TargetAllocationEntry",
    "TargetAllocationSet",
    "RebalancingOptions",
    "PortfolioDataError",
    "InvalidHoldingError",
    "InvalidAllocationError",
    "__version__",
]
