import asyncio
import math
import random
import time
from typing import Optional

import httpx

from txroles.core.errors import LedgerError
from txroles.ledger.client import LedgerSubmission


class HttpLedgerClient:
    """Ledger gateway over HTTP.

    POST {base_url}/transactions
      request:  {scriptRef, authorizationRef, resourceLimit}
      response: {transactionId, resourceUsed, sealed, error?}

    Timeouts are retried within ``budget_sec``; anything else fails at once.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout_sec: float = 10.0,
        max_retries: int = 2,
        budget_sec: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.api_key = api_key
        self.timeout_sec = float(timeout_sec)
        self.max_retries = max(1, int(max_retries))
        self.budget_sec = float(budget_sec) if budget_sec else self.timeout_sec * self.max_retries
        self._client = client

    def _headers(self) -> dict:
        h = {"Content-Type": "application/json"}
        if self.api_key:
            h["Authorization"] = f"Bearer {self.api_key}"
        return h

    async def submit(self, script_ref: str, authorization_ref: str, resource_limit: float) -> LedgerSubmission:
        if not self.base_url:
            raise LedgerError("LEDGER_URL is not set")

        url = f"{self.base_url}/transactions"
        payload = {
            "scriptRef": script_ref,
            "authorizationRef": authorization_ref,
            "resourceLimit": float(resource_limit),
        }

        client = self._client or httpx.AsyncClient(timeout=self.timeout_sec)
        start = time.monotonic()
        attempt = 0
        last_err = None
        try:
            while (time.monotonic() - start) < self.budget_sec and attempt < self.max_retries:
                attempt += 1
                try:
                    resp = await client.post(url, headers=self._headers(), json=payload)
                    resp.raise_for_status()
                    return _parse_submission(resp.json())
                except httpx.TimeoutException as e:
                    last_err = e
                    remaining = self.budget_sec - (time.monotonic() - start)
                    if remaining <= 0:
                        break
                    await asyncio.sleep(min(0.2 + random.uniform(0.0, 0.1), max(0.0, remaining)))
                except httpx.HTTPStatusError as e:
                    raise LedgerError(
                        f"Ledger responded {e.response.status_code}: {(e.response.text or '')[:200]}"
                    ) from e
                except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
                    raise LedgerError(f"Ledger submission failed: {e}") from e
        finally:
            if self._client is None:
                await client.aclose()

        elapsed = round(time.monotonic() - start, 3)
        raise LedgerError(f"Ledger submission timed out (attempts={attempt}, elapsed={elapsed}s): {last_err}")


def _parse_submission(data: dict) -> LedgerSubmission:
    used = float(data.get("resourceUsed") or 0.0)
    if not math.isfinite(used):
        raise LedgerError(f"Ledger reported invalid resource usage: {data.get('resourceUsed')}")
    return LedgerSubmission(
        transactionId=data.get("transactionId") or None,
        resourceUsed=used,
        sealed=bool(data["sealed"]),
        error=data.get("error") or None,
    )
