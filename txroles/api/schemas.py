from typing import Any, Dict, Literal, Optional
from pydantic import BaseModel, StrictBool

class ProposeRequest(BaseModel):
    scriptCode: str = ""
    # JSON text as produced by upstream extractors; a raw list is accepted too
    arguments: Any = "[]"
    description: str = ""

class AuthorizeRequest(BaseModel):
    proposalId: str
    # Strict: "false" / 0 must never be read as approval
    approve: StrictBool

class PayRequest(BaseModel):
    authorizationId: str
    # Lenient by contract; unusable values fall back to the default limit
    resourceLimit: Optional[Any] = None

class IntentRequest(BaseModel):
    text: str = ""

class StageResponse(BaseModel):
    result: Dict[str, Any]
    summary: str = ""

class QueuedResponse(BaseModel):
    success: bool = True
    jobId: str
    status: Literal["queued"] = "queued"

class IntentResponse(BaseModel):
    stage: Optional[Literal["propose", "authorize", "pay"]] = None
    identifier: Optional[str] = None
    approve: Optional[bool] = None
