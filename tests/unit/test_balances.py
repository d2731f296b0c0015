"""
tests/unit/test_balances.py - Balance service validation and delegation.
"""

import pytest

from core.exceptions import ErrorCode, ServiceError, ValidationError
from core.models import TokenAmount
from route_fixtures import USDC_ETH, USDC_POL
from services.balances import BalanceService

WALLET = "0x552008c0f6870c2f77e5cC1d2eb9bdff03e30Ea0"


class FakeProvider:
    def __init__(self):
        self.calls = []

    async def get_token_balance(self, wallet_address, token):
        self.calls.append(("one", wallet_address, token))
        return TokenAmount(token=token, amount="42")

    async def get_token_balances(self, wallet_address, tokens):
        self.calls.append(("many", wallet_address, tokens))
        return [TokenAmount(token=t, amount="1") for t in tokens]

    async def get_token_balances_for_chains(self, wallet_address, tokens_by_chain):
        self.calls.append(("chains", wallet_address, tokens_by_chain))
        return {
            chain: [TokenAmount(token=t, amount="0") for t in tokens]
            for chain, tokens in tokens_by_chain.items()
        }


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.mark.asyncio
async def test_single_balance_delegates(provider):
    result = await BalanceService(provider).get_token_balance(WALLET, USDC_ETH)

    assert result.amount == "42"
    assert provider.calls == [("one", WALLET, USDC_ETH)]


@pytest.mark.asyncio
async def test_balances_for_chains(provider):
    result = await BalanceService(provider).get_token_balances_for_chains(
        WALLET, {1: [USDC_ETH], 137: [USDC_POL]}
    )

    assert set(result) == {1, 137}


@pytest.mark.asyncio
async def test_missing_wallet_rejected_before_provider(provider):
    with pytest.raises(ValidationError, match="Missing walletAddress"):
        await BalanceService(provider).get_token_balances("", [USDC_ETH])

    assert provider.calls == []


@pytest.mark.asyncio
async def test_empty_tokens_rejected(provider):
    with pytest.raises(ValidationError, match="Empty token list passed"):
        await BalanceService(provider).get_token_balances(WALLET, [])


@pytest.mark.asyncio
async def test_no_provider_configured():
    with pytest.raises(ServiceError) as exc_info:
        await BalanceService().get_token_balance(WALLET, USDC_ETH)

    assert exc_info.value.code == ErrorCode.SERVICE_UNAVAILABLE
