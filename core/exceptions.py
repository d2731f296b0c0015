# PATH: core/exceptions.py
"""
Typed exceptions for HOPS.

Every error carries an ErrorCode and a details dict so that log lines
and callers can tell validation, registry, service and execution
failures apart without parsing messages.
"""

from enum import Enum
from typing import Optional

from core.constants import VALIDATION_PREFIX


class ErrorCode(str, Enum):
    """Canonical error codes."""
    # Validation
    VALIDATION_INVALID_REQUEST = "VALIDATION_INVALID_REQUEST"
    VALIDATION_INVALID_STEP = "VALIDATION_INVALID_STEP"
    VALIDATION_INVALID_TOKEN = "VALIDATION_INVALID_TOKEN"
    VALIDATION_MISSING_FIELD = "VALIDATION_MISSING_FIELD"
    VALIDATION_EMPTY_LIST = "VALIDATION_EMPTY_LIST"

    # Registry / lifecycle
    ROUTE_NOT_ACTIVE = "ROUTE_NOT_ACTIVE"
    ROUTE_ALREADY_ACTIVE = "ROUTE_ALREADY_ACTIVE"
    INVALID_TRANSITION = "INVALID_TRANSITION"

    # Remote route service
    SERVICE_HTTP_ERROR = "SERVICE_HTTP_ERROR"
    SERVICE_TIMEOUT = "SERVICE_TIMEOUT"
    SERVICE_TRANSPORT_ERROR = "SERVICE_TRANSPORT_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"

    # Step execution
    EXECUTION_FAILED = "EXECUTION_FAILED"

    UNKNOWN = "UNKNOWN"


class HopsError(Exception):
    """Base exception for HOPS."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self):
        return f"[{self.code.value}] {self.message}"


class ValidationError(HopsError):
    """Malformed request, step or token. Raised before any state changes."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VALIDATION_INVALID_REQUEST,
        details: Optional[dict] = None,
    ):
        super().__init__(f"{VALIDATION_PREFIX}: {message}", code, details)


class UnregisteredRouteError(HopsError):
    """Operation requires an active execution but the route has none."""

    def __init__(self, route_id: str, message: str = ""):
        super().__init__(
            message or f"Cannot set ExecutionSettings for unactive route {route_id}",
            ErrorCode.ROUTE_NOT_ACTIVE,
            {"route_id": route_id},
        )
        self.route_id = route_id


class RouteAlreadyActiveError(HopsError):
    """A registry entry already exists for this route id."""

    def __init__(self, route_id: str):
        super().__init__(
            f"Route {route_id} is already registered",
            ErrorCode.ROUTE_ALREADY_ACTIVE,
            {"route_id": route_id},
        )
        self.route_id = route_id


class InvalidTransitionError(HopsError):
    """Raised when an invalid lifecycle transition is attempted."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, ErrorCode.INVALID_TRANSITION, details)


class ServiceError(HopsError):
    """Remote route service call failed."""
    pass


class StepExecutionError(HopsError):
    """A step executor failed to carry out its step."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, ErrorCode.EXECUTION_FAILED, details)
