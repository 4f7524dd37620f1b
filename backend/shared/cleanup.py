"""
Best-effort cleanup chains.

A cleanup chain is an ordered list of steps. Every step runs even when an
earlier one failed; failures are collected as warnings in the final report.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CleanupStep:
    """One named step of a cleanup chain."""

    name: str
    action: Callable[[], Awaitable[Any]]


class CleanupReport(BaseModel):
    """Aggregated outcome of a cleanup chain."""

    completed: list[str] = Field(default_factory=list, description="Steps that succeeded")
    warnings: list[str] = Field(default_factory=list, description="One entry per failed step")

    @property
    def ok(self) -> bool:
        """True when every step succeeded."""
        return not self.warnings


async def run_cleanup(steps: list[CleanupStep]) -> CleanupReport:
    """
    Run each step in order, recording failures instead of raising.

    Args:
        steps: Steps to run, in order

    Returns:
        CleanupReport listing completed steps and warnings
    """
    report = CleanupReport()
    for step in steps:
        try:
            await step.action()
        except Exception as e:
            logger.warning(f"Cleanup step '{step.name}' failed: {e}")
            report.warnings.append(f"{step.name}: {e}")
        else:
            report.completed.append(step.name)
    return report
