import secrets

from fastapi import Header, HTTPException
from txroles.settings import settings


def require_api_key(x_api_key: str = Header(default="", alias="x-api-key")):
    """
    Gate for the stage routes. Open when API_KEY is unset; otherwise the
    x-api-key header must match it.
    """
    expected = settings.API_KEY
    if not expected:
        return
    if not secrets.compare_digest(x_api_key.encode(), expected.encode()):
        raise HTTPException(status_code=401, detail="Invalid API key")
