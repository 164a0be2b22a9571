"""
Shared pytest fixtures for the rebalancer test suite.

The baseline portfolio holds Apple and Microsoft at $1,500 each ($3,000 in
total) and the baseline target asks for 70/30.
"""

import pytest

from portfolio_models import (
    Holding,
    PortfolioSnapshot,
    RebalancingOptions,
    TargetAllocationEntry,
    TargetAllocationSet,
)
from rebalance_calculator import RebalancingCalculator
from rebalancer_config import reset_config


def make_portfolio(*holdings):
    """Build a snapshot from (name, ticker, quantity, purchase_price, current_price) tuples."""
    return PortfolioSnapshot.from_holdings([
        Holding(stock_name=name, ticker=ticker, quantity=quantity,
                purchase_price=purchase_price, current_price=current_price)
        for name, ticker, quantity, purchase_price, current_price in holdings
    ])


def make_target(*entries, name="Target Portfolio"):
    """Build a target allocation from (name, ticker, weight) tuples."""
    return TargetAllocationSet.from_entries(
        [TargetAllocationEntry(stock_name=n, ticker=t, target_weight=w) for n, t, w in entries],
        name=name,
    )


@pytest.fixture
def calculator():
    return RebalancingCalculator()


@pytest.fixture
def current_portfolio():
    return make_portfolio(
        ("Apple Inc.", "AAPL", 10, 140.0, 150.0),
        ("Microsoft Corp.", "MSFT", 5, 280.0, 300.0),
    )


@pytest.fixture
def target_allocation():
    return make_target(
        ("Apple Inc.", "AAPL", 70),
        ("Microsoft Corp.", "MSFT", 30),
    )


@pytest.fixture
def default_options():
    return RebalancingOptions()


@pytest.fixture
def simple_result(calculator, current_portfolio, target_allocation, default_options):
    return calculator.calculate(current_portfolio, target_allocation, default_options)


@pytest.fixture(autouse=True)
def clean_config():
    """Never leak the config singleton between tests."""
    reset_config()
    yield
    reset_config()
