"""
services/api_client.py - Route service HTTP client.

Thin async client for the remote route/quote service:
- possibilities: chains, tokens, bridges and exchanges on offer
- routes: candidate routes for a transfer request
- steps/transaction: transaction payload for one step

Payloads are passed through as dicts; the client only validates what
it sends and turns transport failures into ServiceError.
"""

import os
import time
from typing import Any

import httpx
from dotenv import load_dotenv

from core.constants import (
    DEFAULT_API_URL,
    DEFAULT_TIMEOUT_SECONDS,
    POSSIBILITIES_PATH,
    ROUTES_PATH,
    STEP_TRANSACTION_PATH,
)
from core.exceptions import ErrorCode, ServiceError
from core.logging import get_logger
from core.models import Step
from core.validators import is_step, require_routes_request

logger = get_logger(__name__)

# Load environment variables
load_dotenv()


def resolve_api_url(api_url: str | None = None) -> str:
    """Explicit url, then HOPS_API_URL, then the default; always ends with '/'."""
    url = api_url or os.getenv("HOPS_API_URL") or DEFAULT_API_URL
    return url if url.endswith("/") else url + "/"


class RouteServiceClient:
    """
    Client for the route service.

    The underlying httpx.AsyncClient is created on first use and must
    be closed with close() (or by using the client as an async context
    manager).
    """

    def __init__(
        self,
        api_url: str | None = None,
        timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_url = resolve_api_url(api_url)
        self.timeout_seconds = timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.api_url,
                timeout=httpx.Timeout(self.timeout_seconds),
                limits=httpx.Limits(max_connections=10),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "RouteServiceClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _post(self, path: str, payload: Any) -> Any:
        """
        POST a JSON payload and return the decoded body.

        Raises:
            ServiceError: on timeout, transport failure or non-2xx status
        """
        client = await self._get_client()
        url = self.api_url + path
        start_ms = int(time.time() * 1000)

        try:
            resp = await client.post(path, json=payload)
        except httpx.TimeoutException as e:
            latency_ms = int(time.time() * 1000) - start_ms
            raise ServiceError(
                f"Route service timeout after {latency_ms}ms",
                code=ErrorCode.SERVICE_TIMEOUT,
                details={"url": url, "latency_ms": latency_ms},
            ) from e
        except httpx.HTTPError as e:
            raise ServiceError(
                f"Route service request failed: {e}",
                code=ErrorCode.SERVICE_TRANSPORT_ERROR,
                details={"url": url},
            ) from e

        latency_ms = int(time.time() * 1000) - start_ms

        if resp.is_error:
            raise ServiceError(
                f"Route service returned HTTP {resp.status_code}",
                code=ErrorCode.SERVICE_HTTP_ERROR,
                details={"url": url, "status": resp.status_code, "body": resp.text[:500]},
            )

        logger.debug(
            f"POST {path}",
            extra={"context": {"url": url, "status": resp.status_code, "latency_ms": latency_ms}},
        )
        return resp.json()

    async def get_possibilities(self, request: dict | None = None) -> dict:
        """Chains, tokens, bridges and exchanges available for a request."""
        return await self._post(POSSIBILITIES_PATH, request)

    async def get_routes(self, routes_request: dict) -> dict:
        """
        Candidate routes for a transfer.

        Raises:
            ValidationError: the request is malformed (nothing is sent)
        """
        require_routes_request(routes_request)
        return await self._post(ROUTES_PATH, routes_request)

    async def get_step_transaction(self, step: Step | dict) -> dict:
        """
        Transaction payload for one step.

        An invalid step is only logged; it is still sent to the service.
        """
        if not is_step(step):
            logger.warning(
                "SDK Validation: Invalid Step",
                extra={"context": {"step_id": getattr(step, "id", None)}},
            )
        payload = step.to_dict() if isinstance(step, Step) else step
        return await self._post(STEP_TRANSACTION_PATH, payload)
