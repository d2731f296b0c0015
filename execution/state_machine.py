# PATH: execution/state_machine.py
"""
HOPS Route Lifecycle State Machine.

ROUTE STATE CONTRACT:
=====================

States (RouteState):
  IDLE       → entry created, not yet claimed by a loop
  RUNNING    → sequencing loop is advancing steps
  HALTED     → an executor reported it was stopped; resumable
  COMPLETED  → every step finished
  FAILED     → a step raised; route stopped and deregistered
  STOPPED    → stop_execution removed the route

Transitions:
  IDLE     → RUNNING    (loop starts)
  RUNNING  → HALTED     (executor stopped mid-step)
  RUNNING  → COMPLETED  (all steps done)
  RUNNING  → FAILED     (step raised)
  HALTED   → RUNNING    (resume)
  RUNNING/HALTED → STOPPED (stop_execution, cancelled loop)

COMPLETED, FAILED and STOPPED are terminal for one registry entry. A
later execute/resume creates a fresh entry with a fresh machine.
=====================
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from core.exceptions import InvalidTransitionError


class RouteState(str, Enum):
    """Route lifecycle states."""
    IDLE = "IDLE"
    RUNNING = "RUNNING"
    HALTED = "HALTED"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    STOPPED = "STOPPED"


VALID_TRANSITIONS: Dict[RouteState, List[RouteState]] = {
    RouteState.IDLE: [RouteState.RUNNING],
    RouteState.RUNNING: [
        RouteState.HALTED,
        RouteState.COMPLETED,
        RouteState.FAILED,
        RouteState.STOPPED,
    ],
    RouteState.HALTED: [RouteState.RUNNING, RouteState.STOPPED],
    RouteState.COMPLETED: [],  # Terminal state
    RouteState.FAILED: [],  # Terminal state
    RouteState.STOPPED: [],  # Terminal state
}


@dataclass
class StateTransition:
    """Record of a state transition."""
    from_state: RouteState
    to_state: RouteState
    timestamp: str = ""
    reason: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = datetime.now(timezone.utc).isoformat()


@dataclass
class RouteStateMachine:
    """
    Lifecycle of one registry entry.

    Tracks current state and transition history.
    """
    route_id: str
    state: RouteState = RouteState.IDLE
    history: List[StateTransition] = field(default_factory=list)
    created_at: str = ""

    def __post_init__(self):
        if not self.created_at:
            self.created_at = datetime.now(timezone.utc).isoformat()

    def can_transition_to(self, new_state: RouteState) -> bool:
        return new_state in VALID_TRANSITIONS.get(self.state, [])

    def transition_to(
        self,
        new_state: RouteState,
        reason: str = "",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> StateTransition:
        """
        Transition to a new state.

        Raises InvalidTransitionError if transition is not valid.
        """
        if not self.can_transition_to(new_state):
            raise InvalidTransitionError(
                f"Cannot transition route {self.route_id} from {self.state.value} to {new_state.value}. "
                f"Valid transitions: {[s.value for s in VALID_TRANSITIONS.get(self.state, [])]}",
                details={"route_id": self.route_id},
            )

        transition = StateTransition(
            from_state=self.state,
            to_state=new_state,
            reason=reason,
            metadata=metadata or {},
        )

        self.history.append(transition)
        self.state = new_state

        return transition

    @property
    def is_terminal(self) -> bool:
        return len(VALID_TRANSITIONS.get(self.state, [])) == 0

    @property
    def is_halted(self) -> bool:
        return self.state == RouteState.HALTED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "route_id": self.route_id,
            "state": self.state.value,
            "is_terminal": self.is_terminal,
            "created_at": self.created_at,
            "history": [
                {
                    "from_state": t.from_state.value,
                    "to_state": t.to_state.value,
                    "timestamp": t.timestamp,
                    "reason": t.reason,
                    "metadata": t.metadata,
                }
                for t in self.history
            ],
        }
