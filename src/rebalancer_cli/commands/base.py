"""
Base classes for CLI commands.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional
from enum import Enum


class CommandStatus(Enum):
    """Status of command execution"""
    SUCCESS = "success"
    FAILED = "failed"
    INVALID = "invalid"


EXIT_CODES = {
    CommandStatus.SUCCESS: 0,
    CommandStatus.FAILED: 1,
    CommandStatus.INVALID: 2,
}


@dataclass
class CommandResult:
    """Result of command execution"""
    status: CommandStatus
    output: List[str] = field(default_factory=list)
    message: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def exit_code(self) -> int:
        return EXIT_CODES[self.status]


class Command(ABC):
    """Abstract base class for all CLI commands"""

    def __init__(self, args: Any):
        self.args = args
        self.command_type = self._get_command_type()

    @abstractmethod
    def _get_command_type(self) -> str:
        """Return the command type identifier"""
        pass

    @abstractmethod
    def execute(self, services: Dict[str, Any]) -> CommandResult:
        """
        Execute the command with provided services

        Args:
            services: Dictionary of service instances (calculator, portfolio_file_service, config)

        Returns:
            CommandResult: The result of command execution
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(file={getattr(self.args, 'file', None)})"
