# PATH: execution/paper_executor.py
"""
HOPS Paper Step Executor.

PAPER EXECUTION CONTRACT:
=========================

Runs a step without submitting anything on-chain:
  1. PENDING       - execution created, from_amount recorded
  2. RUNNING       - process started, waits `delay_ms`
  3. DONE          - to_amount derived from the quoted estimate,
                     scaled to the actual from_amount, minus
                     `slippage_bps`
  or FAILED        - step id listed in `fail_step_ids`; raises

If stop() is called while waiting, start returns without reporting
further progress; the step stays RUNNING and can be picked up again by
a resume.
=========================
"""

import asyncio
from dataclasses import dataclass, field
from decimal import Decimal
from datetime import datetime, timezone
from typing import Any, Optional, Set

from core.constants import ExecutionStatus, StepType
from core.exceptions import StepExecutionError
from core.logging import get_logger
from core.models import Execution, Process, Step
from execution.settings import ExecutionSettings
from execution.step_executor import StatusUpdate, StepExecutor

logger = get_logger("hops.execution.paper")

BPS = Decimal("10000")


@dataclass
class PaperExecutorConfig:
    """Configuration for the paper step executor."""
    delay_ms: int = 0
    slippage_bps: int = 0
    fail_step_ids: Set[str] = field(default_factory=set)


def simulate_to_amount(step: Step, slippage_bps: int = 0) -> str:
    """
    Output amount for a step, scaled from its estimate.

    Without an estimate the step is treated as 1:1.
    """
    from_amount = Decimal(step.action.from_amount)
    if step.estimate is None or Decimal(step.estimate.from_amount) == 0:
        out = from_amount
    else:
        rate = Decimal(step.estimate.to_amount) / Decimal(step.estimate.from_amount)
        out = from_amount * rate
    out = out * (BPS - Decimal(slippage_bps)) / BPS
    return str(int(out))


def _process_type(step: Step) -> str:
    return "CROSS_CHAIN" if step.type == StepType.CROSS else "SWAP"


class PaperStepExecutor(StepExecutor):
    """
    Step executor that simulates execution.

    Used for offline runs and tests; the signer is accepted but unused.
    """

    def __init__(self, config: Optional[PaperExecutorConfig] = None):
        super().__init__()
        self.config = config or PaperExecutorConfig()

    def _report(self, step: Step, execution: Execution, on_status: StatusUpdate) -> None:
        if self.stopped:
            return
        on_status(step, execution)

    async def start(
        self,
        signer: Any,
        step: Step,
        on_status: StatusUpdate,
        settings: ExecutionSettings,
    ) -> None:
        execution = Execution(
            status=ExecutionStatus.PENDING,
            from_amount=step.action.from_amount,
        )
        self._report(step, execution, on_status)

        process = Process(
            type=_process_type(step),
            message=f"Paper {step.type.value} via {step.tool}",
            status=ExecutionStatus.RUNNING,
        )
        execution.process.append(process)
        execution.status = ExecutionStatus.RUNNING
        self._report(step, execution, on_status)

        if self.config.delay_ms:
            await asyncio.sleep(self.config.delay_ms / 1000)

        if self.stopped:
            logger.debug(
                "Paper step stopped before completion",
                extra={"context": {"step_id": step.id}},
            )
            return

        if step.id in self.config.fail_step_ids:
            process.status = ExecutionStatus.FAILED
            execution.status = ExecutionStatus.FAILED
            execution.error = "Simulated failure"
            on_status(step, execution)
            raise StepExecutionError(
                f"Paper execution failed for step {step.id}",
                details={"step_id": step.id, "tool": step.tool},
            )

        execution.to_amount = simulate_to_amount(step, self.config.slippage_bps)
        process.status = ExecutionStatus.DONE
        process.done_at = datetime.now(timezone.utc).isoformat()
        execution.status = ExecutionStatus.DONE
        on_status(step, execution)


def paper_executor_factory(config: Optional[PaperExecutorConfig] = None):
    """Factory producing a fresh PaperStepExecutor per step."""
    config = config or PaperExecutorConfig()

    def factory() -> PaperStepExecutor:
        return PaperStepExecutor(config)

    return factory
