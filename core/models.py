# PATH: core/models.py
"""
Core data models for HOPS.

ROUTE CONTRACT:
===============
  Route  - stable `id`, ordered `steps` (order fixed once constructed)
  Step   - `action` (mutable `from_amount`), optional `execution`
  Execution - `status`, `to_amount` once the step has produced output

Amounts are integer strings in the token's smallest unit, exactly as
the route service returns them. Route and Step objects are shared by
reference between the caller and the orchestrator: execution progress
is written onto the same instances the caller passed in.

Dicts produced by to_dict() use the service's camelCase keys so that a
step can be posted back to the service unchanged.
===============
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from core.constants import ExecutionStatus, StepType


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class Token:
    """Token on a specific chain."""
    chain_id: int
    address: str
    symbol: str
    decimals: int
    name: str = ""
    coin_key: Optional[str] = None
    logo_uri: Optional[str] = None
    price_usd: Optional[str] = None

    def __hash__(self) -> int:
        return hash((self.chain_id, self.address.lower()))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return False
        return self.chain_id == other.chain_id and self.address.lower() == other.address.lower()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Token":
        return cls(
            chain_id=data["chainId"],
            address=data["address"],
            symbol=data["symbol"],
            decimals=data["decimals"],
            name=data.get("name", ""),
            coin_key=data.get("coinKey"),
            logo_uri=data.get("logoURI"),
            price_usd=data.get("priceUSD"),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "chainId": self.chain_id,
            "address": self.address,
            "symbol": self.symbol,
            "decimals": self.decimals,
            "name": self.name,
        }
        if self.coin_key is not None:
            result["coinKey"] = self.coin_key
        if self.logo_uri is not None:
            result["logoURI"] = self.logo_uri
        if self.price_usd is not None:
            result["priceUSD"] = self.price_usd
        return result


@dataclass
class TokenAmount:
    """Token together with a balance."""
    token: Token
    amount: str
    block_number: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.token.to_dict(),
            "amount": self.amount,
            "blockNumber": self.block_number,
        }


@dataclass
class Action:
    """What a step does: move `from_amount` of one token into another."""
    from_chain_id: int
    to_chain_id: int
    from_token: Token
    to_token: Token
    from_amount: str
    slippage: float = 0.03
    from_address: Optional[str] = None
    to_address: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Action":
        return cls(
            from_chain_id=data["fromChainId"],
            to_chain_id=data["toChainId"],
            from_token=Token.from_dict(data["fromToken"]),
            to_token=Token.from_dict(data["toToken"]),
            from_amount=str(data["fromAmount"]),
            slippage=data.get("slippage", 0.03),
            from_address=data.get("fromAddress"),
            to_address=data.get("toAddress"),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "fromChainId": self.from_chain_id,
            "toChainId": self.to_chain_id,
            "fromToken": self.from_token.to_dict(),
            "toToken": self.to_token.to_dict(),
            "fromAmount": self.from_amount,
            "slippage": self.slippage,
        }
        if self.from_address is not None:
            result["fromAddress"] = self.from_address
        if self.to_address is not None:
            result["toAddress"] = self.to_address
        return result


@dataclass
class Estimate:
    """Quoted outcome of a step before it runs."""
    from_amount: str
    to_amount: str
    to_amount_min: str
    approval_address: str = ""
    execution_duration: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Estimate":
        return cls(
            from_amount=str(data["fromAmount"]),
            to_amount=str(data["toAmount"]),
            to_amount_min=str(data.get("toAmountMin", data["toAmount"])),
            approval_address=data.get("approvalAddress", ""),
            execution_duration=data.get("executionDuration", 0.0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fromAmount": self.from_amount,
            "toAmount": self.to_amount,
            "toAmountMin": self.to_amount_min,
            "approvalAddress": self.approval_address,
            "executionDuration": self.execution_duration,
        }


@dataclass
class Process:
    """One sub-task of a step execution (approval, swap, bridge wait, ...)."""
    type: str
    message: str
    status: ExecutionStatus = ExecutionStatus.PENDING
    tx_hash: Optional[str] = None
    tx_link: Optional[str] = None
    started_at: str = ""
    done_at: Optional[str] = None

    def __post_init__(self):
        if not self.started_at:
            self.started_at = _now_iso()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Process":
        return cls(
            type=data["type"],
            message=data.get("message", ""),
            status=ExecutionStatus(data.get("status", "PENDING")),
            tx_hash=data.get("txHash"),
            tx_link=data.get("txLink"),
            started_at=data.get("startedAt", ""),
            done_at=data.get("doneAt"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "message": self.message,
            "status": self.status.value,
            "txHash": self.tx_hash,
            "txLink": self.tx_link,
            "startedAt": self.started_at,
            "doneAt": self.done_at,
        }


@dataclass
class Execution:
    """Execution state of one step. Written by the step executor."""
    status: ExecutionStatus = ExecutionStatus.PENDING
    process: List[Process] = field(default_factory=list)
    from_amount: Optional[str] = None
    to_amount: Optional[str] = None
    error: Optional[str] = None

    @property
    def is_done(self) -> bool:
        return self.status == ExecutionStatus.DONE

    @property
    def is_failed(self) -> bool:
        return self.status == ExecutionStatus.FAILED

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Execution":
        return cls(
            status=ExecutionStatus(data["status"]),
            process=[Process.from_dict(p) for p in data.get("process", [])],
            from_amount=data.get("fromAmount"),
            to_amount=data.get("toAmount"),
            error=data.get("error"),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "status": self.status.value,
            "process": [p.to_dict() for p in self.process],
        }
        if self.from_amount is not None:
            result["fromAmount"] = self.from_amount
        if self.to_amount is not None:
            result["toAmount"] = self.to_amount
        if self.error is not None:
            result["error"] = self.error
        return result


@dataclass
class Step:
    """A single swap or bridge leg of a route."""
    id: str
    type: StepType
    tool: str
    action: Action
    estimate: Optional[Estimate] = None
    execution: Optional[Execution] = None
    included_steps: List["Step"] = field(default_factory=list)

    @property
    def is_done(self) -> bool:
        return self.execution is not None and self.execution.is_done

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Step":
        estimate = data.get("estimate")
        execution = data.get("execution")
        return cls(
            id=data["id"],
            type=StepType(data["type"]),
            tool=data["tool"],
            action=Action.from_dict(data["action"]),
            estimate=Estimate.from_dict(estimate) if estimate else None,
            execution=Execution.from_dict(execution) if execution else None,
            included_steps=[cls.from_dict(s) for s in data.get("includedSteps", [])],
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "id": self.id,
            "type": self.type.value,
            "tool": self.tool,
            "action": self.action.to_dict(),
        }
        if self.estimate is not None:
            result["estimate"] = self.estimate.to_dict()
        if self.execution is not None:
            result["execution"] = self.execution.to_dict()
        if self.included_steps:
            result["includedSteps"] = [s.to_dict() for s in self.included_steps]
        return result


@dataclass
class Route:
    """Ordered sequence of steps moving an amount between chains."""
    id: str
    from_chain_id: int
    to_chain_id: int
    from_token: Token
    to_token: Token
    from_amount: str
    to_amount: str
    steps: List[Step] = field(default_factory=list)
    to_amount_min: str = ""
    from_amount_usd: Optional[str] = None
    to_amount_usd: Optional[str] = None
    from_address: Optional[str] = None
    to_address: Optional[str] = None

    @property
    def is_done(self) -> bool:
        return bool(self.steps) and all(step.is_done for step in self.steps)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Route":
        return cls(
            id=data["id"],
            from_chain_id=data["fromChainId"],
            to_chain_id=data["toChainId"],
            from_token=Token.from_dict(data["fromToken"]),
            to_token=Token.from_dict(data["toToken"]),
            from_amount=str(data["fromAmount"]),
            to_amount=str(data["toAmount"]),
            steps=[Step.from_dict(s) for s in data.get("steps", [])],
            to_amount_min=str(data.get("toAmountMin", "")),
            from_amount_usd=data.get("fromAmountUSD"),
            to_amount_usd=data.get("toAmountUSD"),
            from_address=data.get("fromAddress"),
            to_address=data.get("toAddress"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "fromChainId": self.from_chain_id,
            "toChainId": self.to_chain_id,
            "fromToken": self.from_token.to_dict(),
            "toToken": self.to_token.to_dict(),
            "fromAmount": self.from_amount,
            "toAmount": self.to_amount,
            "toAmountMin": self.to_amount_min,
            "fromAmountUSD": self.from_amount_usd,
            "toAmountUSD": self.to_amount_usd,
            "fromAddress": self.from_address,
            "toAddress": self.to_address,
            "steps": [s.to_dict() for s in self.steps],
        }
