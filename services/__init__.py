"""
services/ - External service access.

Modules:
- api_client: Route service HTTP client
- balances: Balance provider interface with input validation
"""

from services.api_client import RouteServiceClient, resolve_api_url
from services.balances import BalanceProvider, BalanceService

__all__ = [
    "RouteServiceClient",
    "resolve_api_url",
    "BalanceProvider",
    "BalanceService",
]
