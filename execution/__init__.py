# PATH: execution/__init__.py
"""
HOPS Execution Layer.

This module contains the execution layer components:
- settings: Execution settings and default merging
- state_machine: Route lifecycle state machine with transitions
- step_executor: Step executor interface
- paper_executor: Simulated step executor for offline runs
- registry: Active route registry
- orchestrator: Route execution orchestrator
"""

from execution.settings import (
    DEFAULT_EXECUTION_SETTINGS,
    ExecutionSettings,
    merge_settings,
)
from execution.state_machine import (
    RouteState,
    RouteStateMachine,
    StateTransition,
    VALID_TRANSITIONS,
)
from execution.step_executor import (
    StepExecutor,
    StepExecutorFactory,
)
from execution.paper_executor import (
    PaperExecutorConfig,
    PaperStepExecutor,
    paper_executor_factory,
)
from execution.registry import (
    ActiveRouteRegistry,
    ExecutionData,
)
from execution.orchestrator import RouteOrchestrator

__all__ = [
    # Settings
    "DEFAULT_EXECUTION_SETTINGS",
    "ExecutionSettings",
    "merge_settings",
    # State machine
    "RouteState",
    "RouteStateMachine",
    "StateTransition",
    "VALID_TRANSITIONS",
    # Executors
    "StepExecutor",
    "StepExecutorFactory",
    "PaperExecutorConfig",
    "PaperStepExecutor",
    "paper_executor_factory",
    # Registry
    "ActiveRouteRegistry",
    "ExecutionData",
    # Orchestrator
    "RouteOrchestrator",
]
