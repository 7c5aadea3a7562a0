from typing import Optional

from redis import Redis
from txroles.settings import settings


def get_redis(url: Optional[str] = None) -> Redis:
    # Records are stored as JSON text
    return Redis.from_url(url or settings.REDIS_URL, decode_responses=True)
