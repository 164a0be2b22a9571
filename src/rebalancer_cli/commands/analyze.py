"""
Analyze command implementation.
"""

import json
import yaml
from typing import Dict, Any
from portfolio_models import PortfolioDataError
from rebalance_calculator import calculate_health_score, calculate_portfolio_analytics, detect_imbalances
from rebalance_calculator.formatting import format_currency, format_percentage_value
from rebalancer_cli.commands.base import Command, CommandResult, CommandStatus
from rebalancer_cli.logger import AppLogger

app_logger = AppLogger(__name__)


class AnalyzeCommand(Command):
    """Command to print portfolio analytics, health score and imbalances"""

    def _get_command_type(self) -> str:
        return "analyze"

    def execute(self, services: Dict[str, Any]) -> CommandResult:
        app_logger.log_info(f"Analyzing portfolio in {self.args.file}")

        try:
            document = services['portfolio_file_service'].load(self.args.file)
        except (PortfolioDataError, OSError, ValueError, yaml.YAMLError) as e:
            app_logger.log_error(f"Analyze failed: {e}")
            return CommandResult(status=CommandStatus.FAILED, error=str(e))

        threshold = services['config'].rebalancing.rebalance_threshold
        analytics = calculate_portfolio_analytics(document.portfolio)
        health = calculate_health_score(document.portfolio)
        imbalances = detect_imbalances(document.portfolio, document.target, threshold)

        data = {
            'analytics': analytics.model_dump(),
            'health_score': health.model_dump(),
            'imbalances': [imbalance.model_dump() for imbalance in imbalances],
        }

        if getattr(self.args, 'json', False):
            output = json.dumps(data, indent=2).splitlines()
        else:
            risk = analytics.risk_metrics
            performance = analytics.performance_metrics
            output = [
                f"Portfolio value: {format_currency(analytics.total_value)} across {analytics.stock_count} stocks",
                f"Total return: {format_currency(performance.total_return)} "
                f"({format_percentage_value(performance.total_return_percentage)})",
                f"Win rate: {format_percentage_value(performance.win_rate)}",
                f"Top performer: {performance.top_performer or '-'}",
                f"Worst performer: {performance.worst_performer or '-'}",
                f"Concentration: {format_percentage_value(risk.concentration)}",
                f"Volatility: {risk.volatility:.2f}",
                f"Diversification score: {analytics.diversification_score}/100",
                f"Health score: {health.overall}/100 (diversification {health.diversification}, "
                f"performance {health.performance}, risk {health.risk})",
            ]
            if imbalances:
                output.append("Imbalances:")
                output.extend(
                    f"  [{imbalance.severity}] {imbalance.stock_key}: {imbalance.issue} - {imbalance.recommendation}"
                    for imbalance in imbalances
                )

        return CommandResult(
            status=CommandStatus.SUCCESS,
            output=output,
            message="Analyze command executed successfully",
            data=data
        )
