"""
Rebalance command implementation.
"""

import json
import yaml
from typing import Dict, Any, List
from portfolio_models import PortfolioDataError, RebalancingOptions
from rebalance_calculator import RebalancingResult, ValidationResult, summarize_trades
from rebalance_calculator.formatting import format_currency, format_percentage_value
from rebalancer_cli.commands.base import Command, CommandResult, CommandStatus
from rebalancer_cli.logger import AppLogger

app_logger = AppLogger(__name__)

# argparse destination -> RebalancingOptions field
OPTION_OVERRIDES = {
    'threshold': 'rebalance_threshold',
    'unit': 'minimum_trading_unit',
    'partial': 'allow_partial_shares',
    'commission': 'commission',
}


class RebalanceCommand(Command):
    """Command to calculate and print rebalancing trades"""

    def _get_command_type(self) -> str:
        return "rebalance"

    def execute(self, services: Dict[str, Any]) -> CommandResult:
        """Execute rebalance command"""
        app_logger.log_info(f"Calculating rebalance for {self.args.file}")

        try:
            document = services['portfolio_file_service'].load(self.args.file)
            options = self._build_options(services['config'].rebalancing.to_options_dict(), document.options)

            calculator = services['calculator']
            result = calculator.calculate(document.portfolio, document.target, options)
            recommendations = calculator.get_recommendations(result)
            validation = calculator.validate(result)
        except (PortfolioDataError, OSError, ValueError, yaml.YAMLError) as e:
            app_logger.log_error(f"Rebalance failed: {e}")
            return CommandResult(status=CommandStatus.FAILED, error=str(e))

        if result.is_balanced:
            app_logger.log_info("Portfolio is balanced, no trades needed")
        else:
            app_logger.log_info(
                f"Proposed {len(result.buy_calculations)} buys and {len(result.sell_calculations)} sells "
                f"(${result.total_rebalance_value:,.2f} net)"
            )
        for issue in validation.issues:
            app_logger.log_warning(f"Validation issue: {issue}")

        data = {
            'result': result.model_dump(),
            'recommendations': recommendations,
            'validation': validation.model_dump(),
            'trading_summary': summarize_trades(result.calculations, options.commission).model_dump(),
        }

        if getattr(self.args, 'json', False):
            output = json.dumps(data, indent=2).splitlines()
        else:
            output = self._render(document.target.name or str(self.args.file), result, recommendations, validation)

        status = CommandStatus.SUCCESS
        if getattr(self.args, 'strict', False) and not validation.is_valid:
            status = CommandStatus.INVALID

        return CommandResult(
            status=status,
            output=output,
            message="Rebalance command executed successfully",
            data=data
        )

    def _build_options(self, defaults: Dict[str, Any], file_options: Dict[str, Any]) -> RebalancingOptions:
        """Config defaults, then the file's options, then command line flags"""
        merged = {**defaults, **file_options}
        for arg_name, option_name in OPTION_OVERRIDES.items():
            value = getattr(self.args, arg_name, None)
            if value is not None:
                merged[option_name] = value
        # A commission on the command line only matters if it is considered
        if getattr(self.args, 'commission', None) is not None:
            merged['consider_commission'] = True
        return RebalancingOptions(**merged)

    def _render(self, title: str, result: RebalancingResult, recommendations: List[str],
                validation: ValidationResult) -> List[str]:
        lines = [
            f"Rebalancing: {title}",
            f"Portfolio value: {format_currency(result.total_current_value)}",
            f"Threshold: {format_percentage_value(result.rebalance_threshold)}",
            "",
        ]

        for calc in result.calculations:
            lines.append(
                f"{calc.stock_name:<30} {format_percentage_value(calc.current_weight):>8} -> "
                f"{format_percentage_value(calc.target_weight):>8}  {calc.action.upper()}"
            )

        lines.append("")
        lines.extend(recommendations)

        if validation.issues:
            lines.append("")
            lines.append("Validation issues:")
            lines.extend(f"  - {issue}" for issue in validation.issues)

        return lines
