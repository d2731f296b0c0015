"""
services/balances.py - Balance service interface.

Balance lookups are delegated to an injected provider; HOPS only
validates the inputs before handing them over.
"""

from typing import Dict, List, Optional, Protocol

from core.exceptions import ErrorCode, ServiceError
from core.models import Token, TokenAmount
from core.validators import require_tokens, require_wallet_address


class BalanceProvider(Protocol):
    """What HOPS needs from a balance service."""

    async def get_token_balance(self, wallet_address: str, token: Token) -> Optional[TokenAmount]:
        ...

    async def get_token_balances(self, wallet_address: str, tokens: List[Token]) -> List[TokenAmount]:
        ...

    async def get_token_balances_for_chains(
        self,
        wallet_address: str,
        tokens_by_chain: Dict[int, List[Token]],
    ) -> Dict[int, List[TokenAmount]]:
        ...


class BalanceService:
    """Validating front for a BalanceProvider."""

    def __init__(self, provider: Optional[BalanceProvider] = None):
        self._provider = provider

    def _require_provider(self) -> BalanceProvider:
        if self._provider is None:
            raise ServiceError(
                "No balance provider configured",
                code=ErrorCode.SERVICE_UNAVAILABLE,
            )
        return self._provider

    async def get_token_balance(self, wallet_address: str, token: Token) -> Optional[TokenAmount]:
        require_wallet_address(wallet_address)
        require_tokens([token])
        return await self._require_provider().get_token_balance(wallet_address, token)

    async def get_token_balances(self, wallet_address: str, tokens: List[Token]) -> List[TokenAmount]:
        require_wallet_address(wallet_address)
        require_tokens(tokens)
        return await self._require_provider().get_token_balances(wallet_address, tokens)

    async def get_token_balances_for_chains(
        self,
        wallet_address: str,
        tokens_by_chain: Dict[int, List[Token]],
    ) -> Dict[int, List[TokenAmount]]:
        require_wallet_address(wallet_address)
        require_tokens([t for tokens in tokens_by_chain.values() for t in tokens])
        return await self._require_provider().get_token_balances_for_chains(
            wallet_address, tokens_by_chain
        )
