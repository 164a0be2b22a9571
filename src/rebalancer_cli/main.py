"""
Portfolio Rebalancer command line entry point.

Loads configuration, sets up structured logging and dispatches to one of the
commands in rebalancer_cli.commands.
"""
import argparse
import logging
import os
import sys
import uuid
from pathlib import Path
from typing import Optional, Sequence
import yaml
from rebalancer_config import load_config, use_default_config
from rebalance_calculator import RebalancingCalculator
from rebalancer_cli.commands import COMMANDS
from rebalancer_cli.context import RunInfo, set_current_run, clear_current_run
from rebalancer_cli.logger import configure_root_logger
from rebalancer_cli.services import PortfolioFileService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="portfolio-rebalancer",
        description="Compare a stock portfolio with its target allocation and propose trades."
    )
    parser.add_argument("--config", type=Path, default=None,
                        help="Path to config.yaml (default: $REBALANCER_CONFIG, else built-in defaults)")
    parser.add_argument("--log-level", default=None,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Override the configured log level")

    subparsers = parser.add_subparsers(dest="command", required=True)

    rebalance = subparsers.add_parser("rebalance", help="Calculate rebalancing trades")
    rebalance.add_argument("file", type=Path, help="Portfolio file (YAML or JSON)")
    rebalance.add_argument("--threshold", type=float, default=None,
                           help="Rebalance threshold in percentage points")
    rebalance.add_argument("--unit", type=int, default=None, help="Minimum trading unit")
    rebalance.add_argument("--partial", action="store_true", default=None,
                           help="Allow partial shares")
    rebalance.add_argument("--commission", type=float, default=None,
                           help="Commission per unit; enables the commission filter")
    rebalance.add_argument("--json", action="store_true", help="Print the full result as JSON")
    rebalance.add_argument("--strict", action="store_true",
                           help="Exit with status 2 when validation reports issues")

    analyze = subparsers.add_parser("analyze", help="Print portfolio analytics")
    analyze.add_argument("file", type=Path, help="Portfolio file (YAML or JSON)")
    analyze.add_argument("--json", action="store_true", help="Print analytics as JSON")

    validate_target = subparsers.add_parser("validate-target", help="Check the target allocation")
    validate_target.add_argument("file", type=Path, help="Portfolio file (YAML or JSON)")

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config_path = args.config or os.getenv('REBALANCER_CONFIG')
    try:
        config = load_config(config_path) if config_path else use_default_config()
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        # Logging is not configured yet, so report on stderr only
        print(f"error: {e}", file=sys.stderr)
        return 1

    configure_root_logger(config.logging, args.log_level)

    services = {
        'config': config,
        'calculator': RebalancingCalculator(),
        'portfolio_file_service': PortfolioFileService(config.input_limits),
    }

    command = COMMANDS[args.command](args)
    set_current_run(RunInfo(run_id=uuid.uuid4().hex[:12], command=args.command, portfolio=args.file.name))
    try:
        logger.debug(f"Executing {command!r}")
        result = command.execute(services)
    finally:
        clear_current_run()

    for line in result.output:
        print(line)
    if result.error:
        print(f"error: {result.error}", file=sys.stderr)

    return result.exit_code


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
