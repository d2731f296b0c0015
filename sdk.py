"""
sdk.py - HOPS SDK facade.

One object giving access to the route service, route execution and
balance lookups. Each HopsSDK owns its own active route registry.

Usage:
    sdk = HopsSDK()
    response = await sdk.get_routes(request)
    route = Route.from_dict(response["routes"][0])
    await sdk.execute_route(signer, route, {"update_callback": print})
    await sdk.close()
"""

from typing import Any, Dict, List, Optional

from config import SdkConfig, load_sdk_config
from core.models import Route, Step, Token, TokenAmount
from execution.orchestrator import RouteOrchestrator
from execution.registry import ActiveRouteRegistry
from execution.settings import SettingsInput
from execution.step_executor import StepExecutorFactory
from services.api_client import RouteServiceClient
from services.balances import BalanceProvider, BalanceService


class HopsSDK:
    """Entry point combining the route service client, orchestrator and balances."""

    def __init__(
        self,
        config: Optional[SdkConfig] = None,
        registry: Optional[ActiveRouteRegistry] = None,
        executor_factory: Optional[StepExecutorFactory] = None,
        balance_provider: Optional[BalanceProvider] = None,
        client: Optional[RouteServiceClient] = None,
    ):
        self.config = config or load_sdk_config()
        self.client = client or RouteServiceClient(
            api_url=self.config.api_url,
            timeout_seconds=self.config.timeout_seconds,
        )
        self.orchestrator = RouteOrchestrator(
            registry=registry,
            executor_factory=executor_factory,
            default_settings=self.config.default_execution_settings(),
        )
        self.balances = BalanceService(balance_provider)

    async def close(self) -> None:
        await self.client.close()

    # Route service

    async def get_possibilities(self, request: Optional[dict] = None) -> dict:
        return await self.client.get_possibilities(request)

    async def get_routes(self, routes_request: dict) -> dict:
        return await self.client.get_routes(routes_request)

    async def get_step_transaction(self, step: Step) -> dict:
        return await self.client.get_step_transaction(step)

    # Execution

    async def execute_route(self, signer: Any, route: Route, settings: SettingsInput = None) -> Route:
        return await self.orchestrator.execute_route(signer, route, settings)

    async def resume_route(self, signer: Any, route: Route, settings: SettingsInput = None) -> Route:
        return await self.orchestrator.resume_route(signer, route, settings)

    async def stop_execution(self, route: Route) -> Route:
        return await self.orchestrator.stop_execution(route)

    async def move_execution_to_background(self, route: Route) -> Route:
        return await self.orchestrator.move_execution_to_background(route)

    def update_execution_settings(self, settings: SettingsInput, route: Route) -> None:
        self.orchestrator.update_execution_settings(settings, route)

    def get_active_routes(self) -> List[Route]:
        return self.orchestrator.get_active_routes()

    def get_active_route(self, route: Route) -> Optional[Route]:
        return self.orchestrator.get_active_route(route)

    # Balances

    async def get_token_balance(self, wallet_address: str, token: Token) -> Optional[TokenAmount]:
        return await self.balances.get_token_balance(wallet_address, token)

    async def get_token_balances(self, wallet_address: str, tokens: List[Token]) -> List[TokenAmount]:
        return await self.balances.get_token_balances(wallet_address, tokens)

    async def get_token_balances_for_chains(
        self,
        wallet_address: str,
        tokens_by_chain: Dict[int, List[Token]],
    ) -> Dict[int, List[TokenAmount]]:
        return await self.balances.get_token_balances_for_chains(wallet_address, tokens_by_chain)
