"""Application configuration management for the portfolio rebalancer."""

from .models import (
    AppConfig,
    RebalancingConfig,
    InputLimitsConfig,
    LoggingConfig,
)
from .loader import load_config, get_config, use_default_config, reset_config

__all__ = [
    "AppConfig",
    "RebalancingConfig",
    "InputLimitsConfig",
    "LoggingConfig",
    "load_config",
    "get_config",
    "use_default_config",
    "reset_config",
]
