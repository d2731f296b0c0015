"""
Unit tests for core/validators.py.
"""

import pytest

from core.exceptions import ErrorCode, ValidationError
from core.validators import (
    is_routes_request,
    is_step,
    is_token,
    require_routes_request,
    require_step,
    require_tokens,
    require_wallet_address,
)
from route_fixtures import USDC_ETH, build_step

VALID_REQUEST = {
    "fromChainId": 1,
    "fromAmount": "1000000",
    "fromTokenAddress": "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",
    "toChainId": 137,
    "toTokenAddress": "0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174",
    "options": {"slippage": 0.03, "order": "RECOMMENDED"},
}


class TestIsToken:

    def test_model_and_dict_accepted(self):
        assert is_token(USDC_ETH)
        assert is_token({"chainId": 1, "address": "0x1", "decimals": 18})

    @pytest.mark.parametrize("data", [
        None,
        {"chainId": 1, "address": "", "decimals": 18},
        {"chainId": "1", "address": "0x1", "decimals": 18},
        {"chainId": 1, "address": "0x1", "decimals": True},
        {"chainId": 1, "address": "0x1"},
    ])
    def test_rejects_malformed(self, data):
        assert not is_token(data)


class TestIsRoutesRequest:

    def test_valid(self):
        assert is_routes_request(VALID_REQUEST)

    def test_options_optional(self):
        request = {k: v for k, v in VALID_REQUEST.items() if k != "options"}
        assert is_routes_request(request)

    @pytest.mark.parametrize("key,value", [
        ("fromAmount", "1.5"),
        ("fromAmount", "1,000"),
        ("fromAmount", ""),
        ("fromChainId", "1"),
        ("toTokenAddress", ""),
        ("fromAddress", 12),
        ("options", {"order": "RANDOM"}),
        ("options", {"slippage": "0.03"}),
    ])
    def test_rejects_bad_field(self, key, value):
        assert not is_routes_request({**VALID_REQUEST, key: value})

    def test_require_raises_with_prefix(self):
        with pytest.raises(ValidationError) as exc_info:
            require_routes_request({})
        assert "SDK Validation: Invalid Routes Request" in str(exc_info.value)
        assert exc_info.value.code == ErrorCode.VALIDATION_INVALID_REQUEST


class TestIsStep:

    def test_valid_step_model(self):
        assert is_step(build_step("s1", "100"))

    def test_unknown_type_rejected(self):
        data = build_step("s1", "100").to_dict()
        data["type"] = "teleport"
        assert not is_step(data)

    def test_missing_estimate_rejected(self):
        step = build_step("s1", "100")
        step.estimate = None
        assert not is_step(step)

    def test_require_step(self):
        with pytest.raises(ValidationError) as exc_info:
            require_step({"id": "x"})
        assert exc_info.value.code == ErrorCode.VALIDATION_INVALID_STEP


class TestBalanceInputs:

    def test_missing_wallet(self):
        with pytest.raises(ValidationError, match="Missing walletAddress"):
            require_wallet_address("")

    def test_empty_token_list(self):
        with pytest.raises(ValidationError, match="Empty token list passed"):
            require_tokens([])

    def test_invalid_token(self):
        with pytest.raises(ValidationError, match="Invalid token passed") as exc_info:
            require_tokens([USDC_ETH, {"address": "0x1"}])
        assert exc_info.value.details["invalid_count"] == 1
