"""Pydantic models for application configuration with validation."""

from typing import Any, Dict, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class RebalancingConfig(BaseModel):
    """Default rebalancing options, overridable per run."""

    model_config = ConfigDict(extra="forbid")

    minimum_trading_unit: int = Field(
        default=1,
        ge=1,
        le=1000000,
        description="Trades are rounded down to multiples of this unit"
    )
    rebalance_threshold: float = Field(
        default=5.0,
        ge=0.0,
        le=100.0,
        description="Weight deviation in percentage points that triggers a buy or sell"
    )
    allow_partial_shares: bool = Field(
        default=False,
        description="Trade fractional quantities instead of whole units"
    )
    commission: float = Field(
        default=0.0,
        ge=0.0,
        description="Commission per traded unit"
    )
    consider_commission: bool = Field(
        default=False,
        description="Drop trades whose commission exceeds 10% of their value"
    )

    def to_options_dict(self) -> Dict[str, Any]:
        """Keyword arguments for RebalancingOptions."""
        return self.model_dump()


class InputLimitsConfig(BaseModel):
    """Bounds used to reject malformed portfolio input."""

    model_config = ConfigDict(extra="forbid")

    min_quantity: float = Field(
        default=0.0,
        ge=0.0,
        description="Smallest accepted holding quantity"
    )
    max_quantity: float = Field(
        default=999999,
        gt=0,
        description="Largest accepted holding quantity"
    )
    min_price: float = Field(
        default=0.01,
        ge=0.0,
        description="Smallest accepted purchase or current price"
    )
    max_price: float = Field(
        default=999999,
        gt=0,
        description="Largest accepted purchase or current price"
    )
    max_stock_name_length: int = Field(
        default=50,
        ge=1,
        le=500,
        description="Maximum stock display name length"
    )
    max_ticker_length: int = Field(
        default=10,
        ge=1,
        le=32,
        description="Maximum ticker symbol length"
    )
    max_portfolio_name_length: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Maximum target portfolio name length"
    )


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(extra="forbid")

    level: str = Field(
        default="INFO",
        description="Root log level"
    )
    format: Literal["text", "json"] = Field(
        default="text",
        description="Log line format"
    )
    file_path: Optional[str] = Field(
        default=None,
        description="Also write logs to this file (rotated daily) when set"
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate the level is one the logging module knows."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(
                f"Invalid log level '{v}'. Must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL"
            )
        return level


class AppConfig(BaseModel):
    """Root application configuration."""

    model_config = ConfigDict(extra="forbid")

    rebalancing: RebalancingConfig = Field(
        default_factory=RebalancingConfig,
        description="Default rebalancing options"
    )
    input_limits: InputLimitsConfig = Field(
        default_factory=InputLimitsConfig,
        description="Portfolio input validation bounds"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration"
    )
