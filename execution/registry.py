# PATH: execution/registry.py
"""
execution/registry.py - Active route registry.

Maps route id → ExecutionData for every route that is currently
execution-owned (running, or halted and waiting for a resume).

- At most one entry per route id
- Entries are created when execution starts and removed on completion,
  failure or stop; halted routes keep their entry
- Each id in use has its own asyncio.Lock for read-modify-write sequences
  (claim, reclaim, stop); the registry never awaits anything itself

The registry is owned by whoever creates it and handed to the
orchestrator; there is no process-wide instance.
"""

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, Dict, List, Optional

from core.exceptions import RouteAlreadyActiveError
from core.logging import get_logger
from core.models import Route
from execution.settings import ExecutionSettings
from execution.state_machine import RouteStateMachine
from execution.step_executor import StepExecutor

logger = get_logger("hops.execution.registry")


@dataclass
class ExecutionData:
    """Execution state of one active route."""
    route: Route
    settings: ExecutionSettings
    executors: List[StepExecutor] = field(default_factory=list)
    state: Optional[RouteStateMachine] = None
    # True while a sequencing loop is advancing this route
    active: bool = False

    def __post_init__(self):
        if self.state is None:
            self.state = RouteStateMachine(route_id=self.route.id)

    @property
    def halted(self) -> bool:
        """Any executor created so far reports it was stopped."""
        return any(executor.stopped for executor in self.executors)

    def stop_executors(self) -> int:
        for executor in self.executors:
            executor.stop()
        return len(self.executors)


class ActiveRouteRegistry:
    """
    Registry of active route executions by route id.
    """

    def __init__(self):
        self._entries: Dict[str, ExecutionData] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        # Tasks holding or waiting for each lock
        self._lock_users: Dict[str, int] = {}

    @asynccontextmanager
    async def lock(self, route_id: str) -> AsyncIterator[None]:
        """
        Hold the lock guarding read-modify-write sequences on one route id.

        The lock is dropped once no task holds or waits for it.
        """
        lock = self._locks.get(route_id)
        if lock is None:
            lock = self._locks[route_id] = asyncio.Lock()
        self._lock_users[route_id] = self._lock_users.get(route_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[route_id] -= 1
            if self._lock_users[route_id] == 0:
                del self._lock_users[route_id]
                del self._locks[route_id]

    @property
    def lock_count(self) -> int:
        return len(self._locks)

    def register(self, route_id: str, data: ExecutionData) -> ExecutionData:
        """
        Insert an entry.

        Raises:
            RouteAlreadyActiveError: an entry already exists for route_id
        """
        if route_id in self._entries:
            raise RouteAlreadyActiveError(route_id)
        self._entries[route_id] = data
        logger.debug(
            "Route registered",
            extra={"context": {"route_id": route_id, "active_routes": len(self._entries)}},
        )
        return data

    def get(self, route_id: str) -> Optional[ExecutionData]:
        return self._entries.get(route_id)

    def remove(
        self,
        route_id: str,
        expected: Optional[ExecutionData] = None,
    ) -> Optional[ExecutionData]:
        """
        Delete an entry. Idempotent.

        If `expected` is given, the entry is only removed when it is that
        exact ExecutionData (a newer entry under the same id is kept).
        """
        current = self._entries.get(route_id)
        if current is None:
            return None
        if expected is not None and current is not expected:
            return None
        del self._entries[route_id]
        logger.debug(
            "Route removed",
            extra={"context": {"route_id": route_id, "active_routes": len(self._entries)}},
        )
        return current

    def list_routes(self) -> List[Route]:
        """Snapshot of all registered routes."""
        return [data.route for data in self._entries.values()]

    def __contains__(self, route_id: object) -> bool:
        return route_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def route_ids(self) -> List[str]:
        return list(self._entries.keys())
