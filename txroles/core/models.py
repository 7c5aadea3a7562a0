from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class Decision(str, Enum):
    AUTHORIZED = "authorized"
    REJECTED = "rejected"


class ReceiptStatus(str, Enum):
    SEALED = "SEALED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class TransactionArgument:
    type: str
    value: Any

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "value": self.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TransactionArgument":
        return cls(type=data["type"], value=data["value"])


@dataclass(frozen=True)
class Proposal:
    proposalId: str
    scriptCode: str
    # Tuple keeps the record immutable; order is significant
    arguments: Tuple[TransactionArgument, ...] = field(default_factory=tuple)
    description: str = ""
    createdAtMs: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "proposalId": self.proposalId,
            "scriptCode": self.scriptCode,
            "arguments": [a.to_dict() for a in self.arguments],
            "description": self.description,
            "createdAtMs": self.createdAtMs,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Proposal":
        return cls(
            proposalId=data["proposalId"],
            scriptCode=data["scriptCode"],
            arguments=tuple(TransactionArgument.from_dict(a) for a in data.get("arguments") or []),
            description=data.get("description") or "",
            createdAtMs=int(data.get("createdAtMs") or 0),
        )


@dataclass(frozen=True)
class Authorization:
    proposalId: str
    decision: Decision
    # Only issued for approvals; a rejection ends the path
    authorizationId: Optional[str] = None
    decidedAtMs: int = 0

    @property
    def approved(self) -> bool:
        return self.decision == Decision.AUTHORIZED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "authorizationId": self.authorizationId,
            "proposalId": self.proposalId,
            "decision": self.decision.value,
            "decidedAtMs": self.decidedAtMs,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Authorization":
        return cls(
            proposalId=data["proposalId"],
            decision=Decision(data["decision"]),
            authorizationId=data.get("authorizationId"),
            decidedAtMs=int(data.get("decidedAtMs") or 0),
        )


@dataclass(frozen=True)
class Receipt:
    transactionId: str
    authorizationId: str
    resourceLimit: float
    status: ReceiptStatus
    resourceUsed: Optional[float] = None
    error: Optional[str] = None
    createdAtMs: int = 0

    @property
    def sealed(self) -> bool:
        return self.status == ReceiptStatus.SEALED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "transactionId": self.transactionId,
            "authorizationId": self.authorizationId,
            "resourceLimit": self.resourceLimit,
            "resourceUsed": self.resourceUsed,
            "status": self.status.value,
            "error": self.error,
            "createdAtMs": self.createdAtMs,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Receipt":
        used = data.get("resourceUsed")
        return cls(
            transactionId=data["transactionId"],
            authorizationId=data["authorizationId"],
            resourceLimit=float(data["resourceLimit"]),
            status=ReceiptStatus(data["status"]),
            resourceUsed=float(used) if used is not None else None,
            error=data.get("error"),
            createdAtMs=int(data.get("createdAtMs") or 0),
        )


def arguments_as_list(arguments) -> List[Dict[str, Any]]:
    return [a.to_dict() for a in arguments]
