import json
import yaml
from dataclasses import dataclass, field
from numbers import Real
from pathlib import Path
from typing import Any, Dict, List, Optional
from portfolio_models import (
    Holding,
    PortfolioSnapshot,
    RebalancingOptions,
    TargetAllocationEntry,
    TargetAllocationSet,
    PortfolioDataError,
    InvalidHoldingError,
    InvalidAllocationError,
)
from rebalancer_config import InputLimitsConfig
from rebalancer_cli.logger import AppLogger

app_logger = AppLogger(__name__)


@dataclass
class PortfolioDocument:
    """Everything a portfolio file describes"""
    portfolio: PortfolioSnapshot
    target: TargetAllocationSet
    options: Dict[str, Any] = field(default_factory=dict)


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


class PortfolioFileService:
    """Reads portfolio files and rejects input the calculator must not see"""

    def __init__(self, limits: Optional[InputLimitsConfig] = None):
        self.limits = limits or InputLimitsConfig()

    def load(self, path: str | Path) -> PortfolioDocument:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Portfolio file not found: {path}")

        app_logger.log_debug(f"Reading portfolio file {path}")

        with open(path, 'r', encoding='utf-8') as f:
            try:
                if path.suffix.lower() == '.json':
                    raw = json.load(f)
                else:
                    raw = yaml.safe_load(f)
            except (json.JSONDecodeError, yaml.YAMLError) as e:
                raise PortfolioDataError(f"Could not parse {path}: {e}") from e

        document = self.parse(raw)
        app_logger.log_info(
            f"Loaded {len(document.portfolio.holdings)} holdings and "
            f"{len(document.target.stocks)} target allocations from {path}"
        )
        return document

    def parse(self, raw: Any) -> PortfolioDocument:
        if not isinstance(raw, dict):
            raise PortfolioDataError("Portfolio file must contain a mapping at the top level")

        portfolio_data = raw.get('portfolio') or {}
        target_data = raw.get('target') or {}
        options = raw.get('options') or {}

        if not isinstance(portfolio_data, dict):
            raise PortfolioDataError("'portfolio' must be a mapping")
        if not isinstance(target_data, dict):
            raise PortfolioDataError("'target' must be a mapping")
        if not isinstance(options, dict):
            raise PortfolioDataError("'options' must be a mapping")
        unknown = sorted(str(key) for key in options if key not in RebalancingOptions.model_fields)
        if unknown:
            raise PortfolioDataError(
                f"Unknown options: {', '.join(unknown)} (expected {', '.join(RebalancingOptions.model_fields)})"
            )

        holdings = [
            self.parse_holding(index, item)
            for index, item in enumerate(self._as_list(portfolio_data.get('holdings'), 'portfolio.holdings'), start=1)
        ]

        return PortfolioDocument(
            portfolio=PortfolioSnapshot.from_holdings(holdings),
            target=self.parse_target(target_data),
            options=dict(options)
        )

    def parse_holding(self, index: int, item: Any) -> Holding:
        """Validate one holding entry against the configured input limits"""
        if not isinstance(item, dict):
            raise InvalidHoldingError(f"Holding {index}: must be a mapping")

        label = f"Holding {index}"
        stock_name = self._parse_name(item.get('stock_name'), label, InvalidHoldingError)
        label = f"Holding {index} ({stock_name})"
        ticker = self._parse_ticker(item.get('ticker'), label, InvalidHoldingError)

        quantity = item.get('quantity')
        if not _is_number(quantity):
            raise InvalidHoldingError(f"{label}: quantity must be a number")
        if not self.limits.min_quantity <= quantity <= self.limits.max_quantity:
            raise InvalidHoldingError(
                f"{label}: quantity must be between {self.limits.min_quantity} and {self.limits.max_quantity}"
            )

        prices = {}
        for price_field in ('purchase_price', 'current_price'):
            price = item.get(price_field)
            if not _is_number(price):
                raise InvalidHoldingError(f"{label}: {price_field} must be a number")
            if not self.limits.min_price <= price <= self.limits.max_price:
                raise InvalidHoldingError(
                    f"{label}: {price_field} must be between {self.limits.min_price} and {self.limits.max_price}"
                )
            prices[price_field] = float(price)

        return Holding(
            id=str(item['id']) if item.get('id') is not None else None,
            stock_name=stock_name,
            ticker=ticker,
            quantity=float(quantity),
            **prices
        )

    def parse_target(self, target_data: Dict[str, Any]) -> TargetAllocationSet:
        name = target_data.get('name')
        if name is not None:
            if not isinstance(name, str) or len(name.strip()) > self.limits.max_portfolio_name_length:
                raise InvalidAllocationError(
                    f"Target name must be a string of at most {self.limits.max_portfolio_name_length} characters"
                )
            name = name.strip()

        description = target_data.get('description')
        if description is not None and not isinstance(description, str):
            raise InvalidAllocationError("Target description must be a string")

        entries = []
        for index, item in enumerate(self._as_list(target_data.get('stocks'), 'target.stocks'), start=1):
            if not isinstance(item, dict):
                raise InvalidAllocationError(f"Allocation {index}: must be a mapping")

            label = f"Allocation {index}"
            stock_name = self._parse_name(item.get('stock_name'), label, InvalidAllocationError)
            label = f"Allocation {index} ({stock_name})"
            ticker = self._parse_ticker(item.get('ticker'), label, InvalidAllocationError)

            weight = item.get('target_weight')
            if not _is_number(weight):
                raise InvalidAllocationError(f"{label}: target_weight must be a number")
            if not 0 <= weight <= 100:
                raise InvalidAllocationError(f"{label}: target_weight must be between 0 and 100")

            entries.append(TargetAllocationEntry(stock_name=stock_name, ticker=ticker, target_weight=float(weight)))

        total_weight = sum(entry.target_weight for entry in entries)
        if entries and abs(total_weight - 100) > 0.01:
            app_logger.log_warning(f"Target allocation totals {total_weight:.2f}%, not 100%")

        return TargetAllocationSet.from_entries(entries, name=name, description=description)

    def _parse_name(self, value: Any, label: str, error_cls: type) -> str:
        if not isinstance(value, str) or not value.strip():
            raise error_cls(f"{label}: stock_name is required")
        name = value.strip()
        if len(name) > self.limits.max_stock_name_length:
            raise error_cls(f"{label}: stock_name must be at most {self.limits.max_stock_name_length} characters")
        return name

    def _parse_ticker(self, value: Any, label: str, error_cls: type) -> Optional[str]:
        if value is None:
            return None
        if not isinstance(value, str):
            raise error_cls(f"{label}: ticker must be a string")
        ticker = value.strip().upper()
        if not ticker:
            return None
        if len(ticker) > self.limits.max_ticker_length:
            raise error_cls(f"{label}: ticker must be at most {self.limits.max_ticker_length} characters")
        return ticker

    def _as_list(self, value: Any, location: str) -> List[Any]:
        if value is None:
            return []
        if not isinstance(value, list):
            raise PortfolioDataError(f"'{location}' must be a list")
        return value
