# PATH: execution/orchestrator.py
"""
HOPS Route Execution Orchestrator.

ROUTE EXECUTION CONTRACT:
=========================

Lifecycle operations:
  execute_route(signer, route, settings)  → route
      no-op if the route is already registered
  resume_route(signer, route, settings)   → route
      no-op if registered and no executor was stopped
  stop_execution(route)                   → route
      signal every executor, deregister
  move_execution_to_background(route)     → route
      signal every executor, keep registration
  update_execution_settings(settings, route)
      UnregisteredRouteError if not registered

Step sequencing (one loop per route, steps strictly in order):
  1. checkpoint: abort if the registry entry is gone
  2. skip steps whose execution is DONE
  3. chain amounts: previous execution.to_amount → action.from_amount
  4. fresh executor per step, awaited before moving on
  5. executor raises  → step FAILED, route stopped, error re-raised
     executor stopped → return, registration kept (HALTED)
  6. all steps processed → deregister (COMPLETED)
  7. sequencing task cancelled → executors stopped, deregister (STOPPED)

The route passed in is mutated in place; the update callback receives
that same instance after every step status change.
=========================
"""

import asyncio
from collections import OrderedDict
from typing import Any, List, Optional

from core.constants import ExecutionStatus, SkipReason
from core.exceptions import UnregisteredRouteError
from core.logging import get_logger, log_error, log_route, log_step
from core.models import Execution, Route, Step
from execution.paper_executor import paper_executor_factory
from execution.registry import ActiveRouteRegistry, ExecutionData
from execution.settings import (
    DEFAULT_EXECUTION_SETTINGS,
    ExecutionSettings,
    SettingsInput,
    merge_settings,
)
from execution.state_machine import RouteState
from execution.step_executor import StepExecutorFactory

logger = get_logger("hops.execution.orchestrator")

# Skip reasons kept for routes that are not registered
MAX_SKIP_REASONS = 1024


class RouteOrchestrator:
    """
    Drives route execution step by step.

    The registry is injected so that tests (and separate SDK instances)
    get isolated sets of active routes.
    """

    def __init__(
        self,
        registry: Optional[ActiveRouteRegistry] = None,
        executor_factory: Optional[StepExecutorFactory] = None,
        default_settings: Optional[ExecutionSettings] = None,
    ):
        self.registry = registry if registry is not None else ActiveRouteRegistry()
        self._executor_factory = executor_factory or paper_executor_factory()
        self._default_settings = default_settings or DEFAULT_EXECUTION_SETTINGS
        self._skip_reasons: "OrderedDict[str, SkipReason]" = OrderedDict()

    # ------------------------------------------------------------------
    # Lifecycle operations
    # ------------------------------------------------------------------

    async def execute_route(
        self,
        signer: Any,
        route: Route,
        settings: SettingsInput = None,
    ) -> Route:
        """Start executing a route unless it is already active."""
        async with self.registry.lock(route.id):
            if self.registry.get(route.id) is not None:
                self._skip(route, SkipReason.ALREADY_ACTIVE)
                return route
            data = self._claim(route, settings)

        log_route(logger, route.id, "start", steps=len(route.steps))
        return await self._execute_steps(signer, route, data)

    async def resume_route(
        self,
        signer: Any,
        route: Route,
        settings: SettingsInput = None,
    ) -> Route:
        """
        Continue a halted route from its first step that is not DONE.

        An unregistered route is executed from scratch (DONE steps are
        still skipped).
        """
        async with self.registry.lock(route.id):
            data = self.registry.get(route.id)
            if data is None:
                data = self._claim(route, settings)
            elif not data.halted:
                self._skip(route, SkipReason.NOT_HALTED)
                return route
            elif data.active:
                self._skip(route, SkipReason.STILL_RUNNING)
                return route
            else:
                if settings is not None:
                    data.settings = merge_settings(settings, self._default_settings)
                data.active = True
                data.state.transition_to(RouteState.RUNNING, reason="resume")
                self._skip_reasons.pop(route.id, None)

        log_route(logger, route.id, "resume", executors=len(data.executors))
        return await self._execute_steps(signer, route, data)

    async def stop_execution(self, route: Route) -> Route:
        """Signal every executor of the route to stop and deregister it."""
        async with self.registry.lock(route.id):
            data = self.registry.get(route.id)
            if data is None:
                self._skip(route, SkipReason.NOT_ACTIVE)
                return route
            self._teardown(route, data)
            self._set_state(data, RouteState.STOPPED, "stop_execution")

        log_route(logger, route.id, "stopped", executors=len(data.executors))
        return route

    async def move_execution_to_background(self, route: Route) -> Route:
        """
        Signal every executor to stop but keep the route registered.

        The route cannot be started again while in the background; a
        resume_route picks it up once the running step has returned.
        """
        async with self.registry.lock(route.id):
            data = self.registry.get(route.id)
            if data is None:
                self._skip(route, SkipReason.NOT_ACTIVE)
                return route
            stopped = data.stop_executors()

        log_route(logger, route.id, "background", executors=stopped)
        return route

    def update_execution_settings(self, settings: SettingsInput, route: Route) -> None:
        """
        Replace the effective settings of an active route.

        Raises:
            UnregisteredRouteError: the route has no active execution
        """
        data = self.registry.get(route.id)
        if data is None:
            raise UnregisteredRouteError(route.id)
        data.settings = merge_settings(settings, self._default_settings)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_active_routes(self) -> List[Route]:
        return self.registry.list_routes()

    def get_active_route(self, route: Route) -> Optional[Route]:
        data = self.registry.get(route.id)
        return data.route if data is not None else None

    def get_route_state(self, route: Route) -> Optional[RouteState]:
        """Lifecycle state of the route's registry entry, if any."""
        data = self.registry.get(route.id)
        return data.state.state if data is not None else None

    def last_skip_reason(self, route: Route) -> Optional[SkipReason]:
        """Why the most recent lifecycle call on this route did nothing."""
        return self._skip_reasons.get(route.id)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _claim(self, route: Route, settings: SettingsInput) -> ExecutionData:
        data = ExecutionData(
            route=route,
            settings=merge_settings(settings, self._default_settings),
            active=True,
        )
        self.registry.register(route.id, data)
        data.state.transition_to(RouteState.RUNNING, reason="execute")
        self._skip_reasons.pop(route.id, None)
        return data

    def _skip(self, route: Route, reason: SkipReason) -> None:
        self._skip_reasons[route.id] = reason
        self._skip_reasons.move_to_end(route.id)
        while len(self._skip_reasons) > MAX_SKIP_REASONS:
            self._skip_reasons.popitem(last=False)
        logger.info(
            f"Route {route.id}: nothing to do",
            extra={"context": {"route_id": route.id, "skip_reason": reason.value}},
        )

    def _teardown(self, route: Route, data: ExecutionData) -> None:
        data.stop_executors()
        self._release(route, data)

    def _release(self, route: Route, data: ExecutionData) -> None:
        data.active = False
        if self.registry.remove(route.id, expected=data) is not None:
            self._skip_reasons.pop(route.id, None)

    def _abandon(self, route: Route, data: ExecutionData) -> None:
        """Clean up after the sequencing task was cancelled."""
        if self._owns(route, data):
            self._set_state(data, RouteState.STOPPED, "cancelled")
            self._teardown(route, data)
            log_route(logger, route.id, "cancelled")
        else:
            data.active = False

    @staticmethod
    def _set_state(data: ExecutionData, state: RouteState, reason: str) -> None:
        if data.state.can_transition_to(state):
            data.state.transition_to(state, reason=reason)

    def _owns(self, route: Route, data: ExecutionData) -> bool:
        return self.registry.get(route.id) is data

    def _make_update(self, route: Route, data: ExecutionData):
        def update(step: Step, execution: Execution) -> None:
            step.execution = execution
            if not self._owns(route, data):
                return
            try:
                data.settings.update_callback(route)
            except Exception:
                logger.exception(
                    "Update callback raised",
                    extra={"context": {"route_id": route.id, "step_id": step.id}},
                )

        return update

    def _mark_failed(self, step: Step, error: Exception, update) -> None:
        execution = step.execution
        if execution is not None and execution.status == ExecutionStatus.FAILED:
            return
        if execution is None:
            execution = Execution(from_amount=step.action.from_amount)
        execution.status = ExecutionStatus.FAILED
        execution.error = str(error)
        update(step, execution)

    async def _execute_steps(
        self,
        signer: Any,
        route: Route,
        data: ExecutionData,
    ) -> Route:
        try:
            return await self._run_steps(signer, route, data)
        except asyncio.CancelledError:
            self._abandon(route, data)
            raise

    async def _run_steps(
        self,
        signer: Any,
        route: Route,
        data: ExecutionData,
    ) -> Route:
        update = self._make_update(route, data)

        for index, step in enumerate(route.steps):
            # Checkpoint: stop_execution removed the route in the meantime
            if not self._owns(route, data):
                log_route(logger, route.id, "aborted", step_index=index)
                return route

            if step.is_done:
                log_step(logger, route.id, index, "SKIPPED_DONE", step_id=step.id)
                continue

            previous = route.steps[index - 1] if index > 0 else None
            if previous is not None and previous.execution and previous.execution.to_amount:
                step.action.from_amount = previous.execution.to_amount

            executor = self._executor_factory()
            data.executors.append(executor)
            log_step(
                logger, route.id, index, "STARTED",
                step_id=step.id, from_amount=step.action.from_amount,
            )

            try:
                await executor.start(signer, step, update, data.settings)
            except Exception as e:
                self._mark_failed(step, e, update)
                log_error(
                    logger,
                    getattr(getattr(e, "code", None), "value", type(e).__name__),
                    f"Step {step.id} failed, stopping route {route.id}",
                    route_id=route.id,
                    step_index=index,
                )
                async with self.registry.lock(route.id):
                    self._set_state(data, RouteState.FAILED, str(e))
                    self._teardown(route, data)
                raise

            if not self._owns(route, data):
                log_route(logger, route.id, "aborted", step_index=index)
                return route

            if executor.stopped:
                data.active = False
                self._set_state(data, RouteState.HALTED, f"stopped at step {index}")
                log_route(logger, route.id, "halted", step_index=index)
                return route

            log_step(
                logger, route.id, index,
                step.execution.status.value if step.execution else "UNKNOWN",
                step_id=step.id,
                to_amount=step.execution.to_amount if step.execution else None,
            )

        async with self.registry.lock(route.id):
            self._set_state(data, RouteState.COMPLETED, "all steps processed")
            self._release(route, data)

        log_route(logger, route.id, "completed")
        return route
