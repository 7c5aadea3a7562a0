from dataclasses import dataclass
from typing import Any, Dict, Generic, TypeVar, Union

from txroles.core.errors import PipelineError
from txroles.core.models import Authorization, Proposal, Receipt, arguments_as_list

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T
    summary: str = ""

    @property
    def success(self) -> bool:
        return True

    def to_payload(self) -> Dict[str, Any]:
        return render_payload(self.value)


@dataclass(frozen=True)
class Err:
    code: str
    error: str
    summary: str = ""

    @property
    def success(self) -> bool:
        return False

    @classmethod
    def from_exception(cls, exc: PipelineError, summary: str = "") -> "Err":
        return cls(code=exc.code, error=exc.message, summary=summary)

    def to_payload(self) -> Dict[str, Any]:
        return {"success": False, "error": self.error, "code": self.code}


Result = Union[Ok[T], Err]


def render_payload(value) -> Dict[str, Any]:
    """JSON-shaped response record for a successful stage."""
    if isinstance(value, Proposal):
        return {
            "success": True,
            "proposalId": value.proposalId,
            "scriptCode": value.scriptCode,
            "arguments": arguments_as_list(value.arguments),
            "description": value.description,
        }
    if isinstance(value, Authorization):
        out = {
            "success": True,
            "proposalId": value.proposalId,
            "status": value.decision.value,
        }
        if value.authorizationId:
            out["authorizationId"] = value.authorizationId
        return out
    if isinstance(value, Receipt):
        out = {
            "success": True,
            "authorizationId": value.authorizationId,
            "transactionId": value.transactionId,
            "resourceLimit": value.resourceLimit,
            "resourceUsed": value.resourceUsed,
            "status": value.status.value,
        }
        if value.error:
            out["error"] = value.error
        return out
    raise TypeError(f"No payload shape for {type(value).__name__}")
