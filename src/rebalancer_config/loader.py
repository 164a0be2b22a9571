"""Reads config.yaml into an AppConfig and keeps the active instance."""

import logging
import yaml
from pathlib import Path
from typing import Any, Dict, Optional

from .models import AppConfig

logger = logging.getLogger(__name__)

# Active configuration for this process
_config: Optional[AppConfig] = None


def _read_yaml(config_path: Path) -> Dict[str, Any]:
    with open(config_path, 'r', encoding='utf-8') as f:
        raw_config = yaml.safe_load(f)

    # An empty file means "all defaults"
    if raw_config is None:
        return {}
    if not isinstance(raw_config, dict):
        raise ValueError(f"Invalid configuration: expected a mapping at the top level of {config_path}")
    return raw_config


def _log_effective_config(config: AppConfig) -> None:
    rebalancing = config.rebalancing
    limits = config.input_limits
    logger.info("Effective rebalancer configuration:")
    logger.info(f"  Trading unit {rebalancing.minimum_trading_unit}, threshold {rebalancing.rebalance_threshold}%, "
                f"partial shares {'on' if rebalancing.allow_partial_shares else 'off'}")
    logger.info(f"  Commission ${rebalancing.commission}/unit "
                f"({'applied' if rebalancing.consider_commission else 'ignored'})")
    logger.info(f"  Quantity {limits.min_quantity}-{limits.max_quantity}, "
                f"price ${limits.min_price}-${limits.max_price}")
    logger.info(f"  Logging {config.logging.level} as {config.logging.format}"
                f"{f' to {config.logging.file_path}' if config.logging.file_path else ''}")


def load_config(config_path: str | Path) -> AppConfig:
    """
    Parse and validate a YAML config file, then make it the active config.

    Raises:
        FileNotFoundError: the file does not exist
        ValueError: the content does not validate against AppConfig
        yaml.YAMLError: the file is not valid YAML
    """
    global _config

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger.info(f"Reading configuration {config_path}")
    raw_config = _read_yaml(config_path)

    try:
        config = AppConfig(**raw_config)
    except Exception as e:
        raise ValueError(f"Invalid configuration: {e}") from e

    _config = config
    _log_effective_config(config)
    return config


def use_default_config() -> AppConfig:
    """Make an all-defaults AppConfig the active config."""
    global _config
    _config = AppConfig()
    logger.debug("No config file given, using defaults")
    return _config


def get_config() -> AppConfig:
    """Return the active config; RuntimeError if none was loaded."""
    if _config is None:
        raise RuntimeError(
            "Configuration not loaded. Call load_config() or use_default_config() first."
        )
    return _config


def reset_config() -> None:
    global _config
    _config = None
