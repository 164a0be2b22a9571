"""
Run context management using ContextVar for thread- and task-safe propagation.
"""

from contextvars import ContextVar
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RunInfo:
    """Identifies one CLI command run in log output"""
    run_id: str
    command: str
    portfolio: Optional[str] = None


# Context variable to store the current run
current_run: ContextVar[Optional[RunInfo]] = ContextVar('current_run', default=None)


def set_current_run(run: RunInfo) -> None:
    """Set the current run in the context."""
    current_run.set(run)


def get_current_run() -> Optional[RunInfo]:
    """Get the current run from the context."""
    return current_run.get()


def clear_current_run() -> None:
    """Clear the current run from the context."""
    current_run.set(None)
