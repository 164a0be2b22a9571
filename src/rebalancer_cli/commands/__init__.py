from .base import Command, CommandResult, CommandStatus
from .rebalance import RebalanceCommand
from .analyze import AnalyzeCommand
from .validate_target import ValidateTargetCommand

COMMANDS = {
    'rebalance': RebalanceCommand,
    'analyze': AnalyzeCommand,
    'validate-target': ValidateTargetCommand,
}

__all__ = [
    "Command",
    "CommandResult",
    "CommandStatus",
    "RebalanceCommand",
    "AnalyzeCommand",
    "ValidateTargetCommand",
    "COMMANDS",
]
