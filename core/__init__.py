"""
core - Core utilities and models for HOPS.

This package contains:
- models.py: Data models (Route, Step, Action, Execution, Token)
- constants.py: Enums and constants
- exceptions.py: Typed exceptions with error codes
- validators.py: Structural checks for requests, steps and tokens
- logging.py: Structured JSON logging
"""

from core.constants import (
    ExecutionStatus,
    SkipReason,
    StepType,
)
from core.exceptions import (
    ErrorCode,
    HopsError,
    InvalidTransitionError,
    RouteAlreadyActiveError,
    ServiceError,
    StepExecutionError,
    UnregisteredRouteError,
    ValidationError,
)
from core.logging import get_logger, setup_logging
from core.models import (
    Action,
    Estimate,
    Execution,
    Process,
    Route,
    Step,
    Token,
    TokenAmount,
)

__all__ = [
    # Constants
    "ExecutionStatus",
    "SkipReason",
    "StepType",
    # Exceptions
    "ErrorCode",
    "HopsError",
    "InvalidTransitionError",
    "RouteAlreadyActiveError",
    "ServiceError",
    "StepExecutionError",
    "UnregisteredRouteError",
    "ValidationError",
    # Models
    "Action",
    "Estimate",
    "Execution",
    "Process",
    "Route",
    "Step",
    "Token",
    "TokenAmount",
    # Logging
    "get_logger",
    "setup_logging",
]
