import asyncio

from txroles.core.pipeline import build_pipeline, default_store
from txroles.observability.logging import log


def execute_payment_job(authorization_id: str, resource_limit_text: str = "") -> dict:
    """
    Background payment: runs the Payer stage in the worker and returns the
    result payload (stored by RQ as the job result).
    """
    log(event="payment_job_start", authorizationId=str(authorization_id)[:80])
    try:
        pipeline = build_pipeline(store=default_store())
        result = asyncio.run(pipeline.payer.pay(authorization_id, resource_limit_text))
    except Exception as e:
        log(event="payment_job_exception", authorizationId=str(authorization_id)[:80], error=str(e))
        raise

    payload = result.to_payload()
    log(
        event="payment_job_done",
        authorizationId=str(authorization_id)[:80],
        success=bool(payload.get("success")),
        status=payload.get("status"),
    )
    return {"result": payload, "summary": result.summary}
