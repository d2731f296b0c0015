# PATH: execution/step_executor.py
"""
Step executor interface.

STEP EXECUTOR CONTRACT:
=======================

  start(signer, step, on_status, settings) → None
    - carries out one step against the signing capability
    - calls on_status(step, execution) at every status transition
    - returns normally on success or after being stopped
    - raises on failure

  stop()
    - safe at any time, including before start returns
    - makes `stopped` True; start's eventual return is a halt,
      not a failure

A fresh executor is created for every attempt at a step; executors are
never reused across steps.
=======================
"""

from abc import ABC, abstractmethod
from typing import Any, Callable

from core.models import Execution, Step
from execution.settings import ExecutionSettings

StatusUpdate = Callable[[Step, Execution], None]


class StepExecutor(ABC):
    """Base class for step executors."""

    def __init__(self):
        self._stopped = False

    @property
    def stopped(self) -> bool:
        return self._stopped

    def stop(self) -> None:
        """Request the executor to stop reporting progress and return."""
        self._stopped = True

    @abstractmethod
    async def start(
        self,
        signer: Any,
        step: Step,
        on_status: StatusUpdate,
        settings: ExecutionSettings,
    ) -> None:
        """Execute one step."""


StepExecutorFactory = Callable[[], StepExecutor]
