import json
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from starlette.concurrency import run_in_threadpool

from txroles.api.auth import require_api_key
from txroles.api.schemas import (
    AuthorizeRequest,
    IntentRequest,
    IntentResponse,
    PayRequest,
    ProposeRequest,
    QueuedResponse,
    StageResponse,
)
from txroles.core.ids import AUTHORIZATION_PREFIX, PROPOSAL_PREFIX
from txroles.core.pipeline import Pipeline, build_pipeline, default_store
from txroles.intent.keywords import detect_stage, extract_identifier, wants_rejection
from txroles.observability.logging import log
from txroles.store.record_repo import RecordRepo

router = APIRouter(prefix="/api", dependencies=[Depends(require_api_key)])

_pipeline: Optional[Pipeline] = None


def get_pipeline() -> Pipeline:
    global _pipeline
    if _pipeline is None:
        _pipeline = build_pipeline(store=default_store())
    return _pipeline


def get_record_repo() -> RecordRepo:
    return RecordRepo()


def _arguments_text(arguments: Any) -> str:
    if isinstance(arguments, str):
        return arguments
    # Structured input: serialize and let the Proposer judge the shape
    return json.dumps(arguments)


def _limit_text(limit: Any) -> str:
    return "" if limit is None else str(limit)


@router.post("/proposals", response_model=StageResponse)
async def propose(req: ProposeRequest, pipeline: Pipeline = Depends(get_pipeline)):
    result = await run_in_threadpool(
        pipeline.proposer.propose, req.scriptCode, _arguments_text(req.arguments), req.description
    )
    return StageResponse(result=result.to_payload(), summary=result.summary)


@router.post("/authorizations", response_model=StageResponse)
async def authorize(req: AuthorizeRequest, pipeline: Pipeline = Depends(get_pipeline)):
    result = await run_in_threadpool(pipeline.authorizer.authorize, req.proposalId, req.approve)
    return StageResponse(result=result.to_payload(), summary=result.summary)


@router.post("/payments")
async def pay(
    req: PayRequest,
    run_async: bool = Query(False, alias="async"),
    pipeline: Pipeline = Depends(get_pipeline),
):
    limit_text = _limit_text(req.resourceLimit)
    if run_async:
        # Lazy import: rq is only needed when a worker takes the payment
        from txroles.queue.jobs import execute_payment_job
        from txroles.queue.rq_conn import get_queue

        job = get_queue().enqueue(execute_payment_job, req.authorizationId, limit_text)
        log(event="payment_job_enqueued", authorizationId=req.authorizationId[:80], jobId=job.id)
        return QueuedResponse(jobId=job.id)

    result = await pipeline.payer.pay(req.authorizationId, limit_text)
    return StageResponse(result=result.to_payload(), summary=result.summary)


@router.post("/intent", response_model=IntentResponse)
def intent(req: IntentRequest):
    stage = detect_stage(req.text)
    if stage == "authorize":
        return IntentResponse(
            stage=stage,
            identifier=extract_identifier(req.text, PROPOSAL_PREFIX),
            approve=not wants_rejection(req.text),
        )
    if stage == "pay":
        return IntentResponse(stage=stage, identifier=extract_identifier(req.text, AUTHORIZATION_PREFIX))
    return IntentResponse(stage=stage)


@router.get("/records/{record_id}")
def get_record(record_id: str, repo: RecordRepo = Depends(get_record_repo)):
    record = repo.load(record_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Record not found")
    return record.to_dict()
