from typing import Optional

from redis import Redis
from rq import Queue
from txroles.settings import settings


def get_queue(name: Optional[str] = None) -> Queue:
    """RQ queue for background payments. Binary connection, as RQ pickles job payloads."""
    conn = Redis.from_url(settings.REDIS_URL)
    return Queue(
        name or settings.RQ_QUEUE_NAME,
        connection=conn,
        default_timeout=settings.PAYMENT_JOB_TIMEOUT_SEC,
    )
