# PATH: core/constants.py
"""
Constants for HOPS.

Contains enums, defaults, and configuration constants shared by the
models, the route service client and the execution layer.
"""

from enum import Enum
from typing import Final

# =============================================================================
# ROUTE SERVICE DEFAULTS
# =============================================================================

DEFAULT_API_URL: Final[str] = "https://test.li.finance/api/"
DEFAULT_TIMEOUT_SECONDS: Final[int] = 10

# Path segments appended to the api url
POSSIBILITIES_PATH: Final[str] = "possibilities"
ROUTES_PATH: Final[str] = "routes"
STEP_TRANSACTION_PATH: Final[str] = "steps/transaction"

# Error messages are prefixed so callers can tell SDK-side rejections apart
VALIDATION_PREFIX: Final[str] = "SDK Validation"


class ExecutionStatus(str, Enum):
    """Status of a single step execution."""
    PENDING = "PENDING"
    ACTION_REQUIRED = "ACTION_REQUIRED"
    CHAIN_SWITCH_REQUIRED = "CHAIN_SWITCH_REQUIRED"
    RUNNING = "RUNNING"
    DONE = "DONE"
    FAILED = "FAILED"


class StepType(str, Enum):
    """Kind of operation a step performs."""
    SWAP = "swap"
    CROSS = "cross"
    LIFI = "lifi"


class SkipReason(str, Enum):
    """
    Why a lifecycle call returned without touching the route.

    execute_route and resume_route return the route unchanged in these
    cases; the reason is logged and can be queried afterwards.
    """
    ALREADY_ACTIVE = "ALREADY_ACTIVE"
    NOT_HALTED = "NOT_HALTED"
    # Halted, but the loop that was stopped has not returned yet
    STILL_RUNNING = "STILL_RUNNING"
    NOT_ACTIVE = "NOT_ACTIVE"
