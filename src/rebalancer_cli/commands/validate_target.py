"""
Validate-target command implementation.
"""

import yaml
from typing import Dict, Any
from portfolio_models import PortfolioDataError
from rebalance_calculator import validate_allocations
from rebalance_calculator.formatting import format_percentage_value
from rebalancer_cli.commands.base import Command, CommandResult, CommandStatus
from rebalancer_cli.logger import AppLogger

app_logger = AppLogger(__name__)


class ValidateTargetCommand(Command):
    """Command to check a target allocation before using it"""

    def _get_command_type(self) -> str:
        return "validate-target"

    def execute(self, services: Dict[str, Any]) -> CommandResult:
        try:
            document = services['portfolio_file_service'].load(self.args.file)
        except (PortfolioDataError, OSError, ValueError, yaml.YAMLError) as e:
            app_logger.log_error(f"Target validation failed: {e}")
            return CommandResult(status=CommandStatus.FAILED, error=str(e))

        validation = validate_allocations(document.target)
        output = [f"Total weight: {format_percentage_value(validation.total_weight)}"]

        if validation.is_valid:
            output.append("Target allocation is valid")
            status = CommandStatus.SUCCESS
        else:
            output.append("Target allocation has errors:")
            output.extend(f"  - {error}" for error in validation.errors)
            app_logger.log_warning(f"Target allocation has {len(validation.errors)} errors")
            status = CommandStatus.INVALID

        return CommandResult(status=status, output=output, data=validation.model_dump())
