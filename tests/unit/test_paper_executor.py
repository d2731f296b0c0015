"""
tests/unit/test_paper_executor.py - Paper step executor tests.
"""

import asyncio

import pytest

from core.constants import ExecutionStatus
from core.exceptions import StepExecutionError
from execution.paper_executor import (
    PaperExecutorConfig,
    PaperStepExecutor,
    paper_executor_factory,
    simulate_to_amount,
)
from execution.settings import merge_settings
from route_fixtures import build_step


class TestSimulateToAmount:

    def test_scales_estimate_to_actual_amount(self):
        step = build_step("s", "1000", to_amount="990")
        step.action.from_amount = "500"

        assert simulate_to_amount(step) == "495"

    def test_applies_slippage_and_rounds_down(self):
        step = build_step("s", "1000", to_amount="1000")

        assert simulate_to_amount(step, slippage_bps=15) == "998"

    def test_without_estimate_is_one_to_one(self):
        step = build_step("s", "1234")
        step.estimate = None

        assert simulate_to_amount(step) == "1234"


class TestPaperStepExecutor:

    @pytest.mark.asyncio
    async def test_reports_pending_running_done(self):
        step = build_step("s", "1000", to_amount="990")
        statuses = []

        def on_status(s, execution):
            s.execution = execution
            statuses.append(execution.status)

        await PaperStepExecutor().start(None, step, on_status, merge_settings())

        assert statuses == [ExecutionStatus.PENDING, ExecutionStatus.RUNNING, ExecutionStatus.DONE]
        assert step.execution.to_amount == "990"
        assert step.execution.process[0].type == "SWAP"
        assert step.execution.process[0].done_at is not None

    @pytest.mark.asyncio
    async def test_configured_failure_raises(self):
        step = build_step("bad", "1000")
        statuses = []
        executor = PaperStepExecutor(PaperExecutorConfig(fail_step_ids={"bad"}))

        with pytest.raises(StepExecutionError) as exc_info:
            await executor.start(None, step, lambda s, e: statuses.append(e.status), merge_settings())

        assert statuses[-1] == ExecutionStatus.FAILED
        assert exc_info.value.details["step_id"] == "bad"

    @pytest.mark.asyncio
    async def test_stop_during_delay_returns_without_done(self):
        step = build_step("s", "1000")
        statuses = []
        executor = PaperStepExecutor(PaperExecutorConfig(delay_ms=50))

        task = asyncio.create_task(
            executor.start(None, step, lambda s, e: statuses.append(e.status), merge_settings())
        )
        await asyncio.sleep(0.01)
        executor.stop()
        await task

        assert executor.stopped
        assert ExecutionStatus.DONE not in statuses

    def test_factory_creates_fresh_executors(self):
        factory = paper_executor_factory()
        first, second = factory(), factory()

        assert first is not second
        assert first.config is second.config
