# PATH: core/validators.py
"""
Structural validators for HOPS.

Checks run on the wire representation (camelCase dicts) so the same
guard covers both model objects (via to_dict) and raw service payloads.

CONTRACTS:
- is_*(): Never raise; return True/False
- require_*(): Raise ValidationError with an "SDK Validation:" message

USAGE:
    from core.validators import is_step, require_routes_request

    if not is_step(step):
        ...
    require_routes_request(request)
"""

from typing import Any, Dict, Iterable

from core.constants import StepType
from core.exceptions import ErrorCode, ValidationError
from core.logging import get_logger

logger = get_logger("hops.validators")

STEP_TYPES = {t.value for t in StepType}


def _as_dict(obj: Any) -> Any:
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    return obj


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and len(value) > 0


def _is_amount(value: Any) -> bool:
    """Amounts are integer strings in the smallest token unit."""
    return _is_non_empty_str(value) and value.isdigit()


def _optional_str(data: Dict[str, Any], key: str) -> bool:
    return key not in data or data[key] is None or isinstance(data[key], str)


# =============================================================================
# TOKENS
# =============================================================================

def is_token(obj: Any) -> bool:
    """A token needs an address, decimals and a chain id."""
    data = _as_dict(obj)
    if not isinstance(data, dict):
        return False
    return (
        _is_non_empty_str(data.get("address"))
        and _is_int(data.get("decimals"))
        and _is_int(data.get("chainId"))
    )


# =============================================================================
# ROUTES REQUEST
# =============================================================================

def _is_routes_options(options: Any) -> bool:
    if options is None:
        return True
    if not isinstance(options, dict):
        return False
    if "slippage" in options and not _is_number(options["slippage"]):
        return False
    if "order" in options and options["order"] not in ("RECOMMENDED", "FASTEST", "CHEAPEST", "SAFEST"):
        return False
    if "infiniteApproval" in options and not isinstance(options["infiniteApproval"], bool):
        return False
    for key in ("allowSwitchChain", "integrator", "referrer"):
        if key in options and options[key] is not None and not isinstance(options[key], (str, bool)):
            return False
    return True


def is_routes_request(obj: Any) -> bool:
    """Check the shape of a request for possible routes."""
    data = _as_dict(obj)
    if not isinstance(data, dict):
        return False
    return (
        _is_int(data.get("fromChainId"))
        and _is_amount(data.get("fromAmount"))
        and _is_non_empty_str(data.get("fromTokenAddress"))
        and _is_int(data.get("toChainId"))
        and _is_non_empty_str(data.get("toTokenAddress"))
        and _optional_str(data, "fromAddress")
        and _optional_str(data, "toAddress")
        and _is_routes_options(data.get("options"))
    )


# =============================================================================
# STEPS
# =============================================================================

def _is_action(data: Any) -> bool:
    return (
        isinstance(data, dict)
        and _is_int(data.get("fromChainId"))
        and _is_int(data.get("toChainId"))
        and is_token(data.get("fromToken"))
        and is_token(data.get("toToken"))
        and _is_amount(data.get("fromAmount"))
        and _is_number(data.get("slippage"))
    )


def _is_estimate(data: Any) -> bool:
    return (
        isinstance(data, dict)
        and _is_amount(data.get("fromAmount"))
        and _is_amount(data.get("toAmount"))
        and _is_amount(data.get("toAmountMin"))
        and isinstance(data.get("approvalAddress", ""), str)
    )


def is_step(obj: Any) -> bool:
    """Check the shape of a single step (id, type, tool, action, estimate)."""
    data = _as_dict(obj)
    if not isinstance(data, dict):
        return False
    return (
        _is_non_empty_str(data.get("id"))
        and data.get("type") in STEP_TYPES
        and _is_non_empty_str(data.get("tool"))
        and _is_action(data.get("action"))
        and _is_estimate(data.get("estimate"))
    )


# =============================================================================
# RAISING VARIANTS
# =============================================================================

def require_routes_request(obj: Any) -> None:
    if not is_routes_request(obj):
        raise ValidationError(
            "Invalid Routes Request",
            code=ErrorCode.VALIDATION_INVALID_REQUEST,
        )


def require_step(obj: Any) -> None:
    if not is_step(obj):
        raise ValidationError(
            "Invalid Step",
            code=ErrorCode.VALIDATION_INVALID_STEP,
            details={"step_id": getattr(obj, "id", None)},
        )


def require_wallet_address(wallet_address: Any) -> None:
    if not wallet_address:
        raise ValidationError(
            "Missing walletAddress",
            code=ErrorCode.VALIDATION_MISSING_FIELD,
        )


def require_tokens(tokens: Iterable[Any]) -> None:
    """Reject an empty token list or any token that fails is_token."""
    tokens = list(tokens)
    if not tokens:
        raise ValidationError(
            "Empty token list passed",
            code=ErrorCode.VALIDATION_EMPTY_LIST,
        )
    invalid = [t for t in tokens if not is_token(t)]
    if invalid:
        logger.debug(
            "Rejected tokens",
            extra={"context": {"invalid_count": len(invalid)}},
        )
        raise ValidationError(
            "Invalid token passed",
            code=ErrorCode.VALIDATION_INVALID_TOKEN,
            details={"invalid_count": len(invalid)},
        )
