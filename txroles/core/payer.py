import math
import re
import time
from typing import Callable, Optional

from txroles.core.errors import InvalidAuthorizationId, PipelineError
from txroles.core.ids import AUTHORIZATION_PREFIX, TRANSACTION_PREFIX, IdGenerator, TimestampIdGenerator, has_prefix
from txroles.core.models import Receipt, ReceiptStatus
from txroles.core.results import Err, Ok, Result
from txroles.core.summary import error_summary, receipt_summary
from txroles.ledger.client import LedgerClient, LedgerSubmission
from txroles.observability.logging import log
from txroles.settings import settings
from txroles.utils.time import elapsed_ms, now_ms


_LEADING_DECIMAL = re.compile(r"\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def parse_resource_limit(text, default: Optional[float]) -> Optional[float]:
    """
    Lenient limit parsing: anything that is not a finite positive decimal
    falls back to ``default``. Never raises.
    """
    if text is None:
        return default
    # Leading decimal only, so "0.001 FLOW" reads as 0.001
    m = _LEADING_DECIMAL.match(str(text))
    if not m:
        return default
    value = float(m.group(0))
    if not math.isfinite(value) or value <= 0:
        return default
    return value


class Payer:
    """
    Third stage: pays for and executes an authorized transaction.

    The ledger call is the only await. Its failures become a FAILED receipt
    instead of an exception, so the caller always gets an outcome to report.
    """

    def __init__(
        self,
        ledger: LedgerClient,
        ids: Optional[IdGenerator] = None,
        store=None,
        default_limit: Optional[float] = None,
        script_ref_for: Optional[Callable[[str], Optional[str]]] = None,
        clock: Callable[[], int] = now_ms,
    ):
        self.ledger = ledger
        self.ids = ids or TimestampIdGenerator(TRANSACTION_PREFIX)
        self.store = store
        self.default_limit = float(default_limit if default_limit is not None else settings.DEFAULT_RESOURCE_LIMIT)
        self._script_ref_for = script_ref_for
        self._clock = clock

    async def pay(self, authorization_id: str, resource_limit_text) -> Result[Receipt]:
        if not has_prefix(authorization_id, AUTHORIZATION_PREFIX):
            e = InvalidAuthorizationId("Invalid authorization ID format")
            log(event="payment_invalid", authorizationId=str(authorization_id)[:80], code=e.code, error=e.message)
            return Err.from_exception(e, summary=error_summary("pay for transaction", e.message))

        parsed = parse_resource_limit(resource_limit_text, None)
        limit = parsed if parsed is not None else self.default_limit

        log(
            event="payment_submit",
            authorizationId=authorization_id,
            resourceLimit=limit,
            defaultedLimit=parsed is None,
        )

        t0 = time.monotonic()
        try:
            script_ref = self._resolve_script_ref(authorization_id)
            submission = await self.ledger.submit(script_ref, authorization_id, limit)
        except PipelineError as e:
            receipt = self._failed(authorization_id, limit, e.message)
        except Exception as e:
            receipt = self._failed(authorization_id, limit, f"{type(e).__name__}: {e}")
        else:
            receipt = self._from_submission(authorization_id, limit, submission)

        if receipt.sealed:
            log(
                event="payment_sealed",
                authorizationId=authorization_id,
                transactionId=receipt.transactionId,
                resourceUsed=receipt.resourceUsed,
                elapsedMs=elapsed_ms(t0),
            )
        else:
            log(
                event="payment_failed",
                authorizationId=authorization_id,
                transactionId=receipt.transactionId,
                error=str(receipt.error)[:500],
                elapsedMs=elapsed_ms(t0),
            )

        if self.store is not None:
            try:
                self.store.save(receipt)
            except Exception as e:
                log(event="receipt_save_failed", transactionId=receipt.transactionId, errorType=type(e).__name__, error=str(e)[:300])
        return Ok(receipt, summary=receipt_summary(receipt))

    def _resolve_script_ref(self, authorization_id: str) -> str:
        if self._script_ref_for is None:
            return authorization_id
        return self._script_ref_for(authorization_id) or authorization_id

    def _from_submission(self, authorization_id: str, limit: float, sub: LedgerSubmission) -> Receipt:
        used = float(sub.resourceUsed or 0.0)
        if not math.isfinite(used):
            return self._failed(authorization_id, limit, f"Ledger reported invalid resource usage: {sub.resourceUsed}")
        # Ledger-reported usage is clamped into [0, limit]
        used = min(max(used, 0.0), limit)
        tx_id = sub.transactionId or self.ids.next()
        if not sub.sealed:
            return Receipt(
                transactionId=tx_id,
                authorizationId=authorization_id,
                resourceLimit=limit,
                status=ReceiptStatus.FAILED,
                resourceUsed=used,
                error=sub.error or "Transaction was not sealed",
                createdAtMs=int(self._clock()),
            )
        return Receipt(
            transactionId=tx_id,
            authorizationId=authorization_id,
            resourceLimit=limit,
            status=ReceiptStatus.SEALED,
            resourceUsed=used,
            createdAtMs=int(self._clock()),
        )

    def _failed(self, authorization_id: str, limit: float, message: str) -> Receipt:
        return Receipt(
            transactionId=self.ids.next(),
            authorizationId=authorization_id,
            resourceLimit=limit,
            status=ReceiptStatus.FAILED,
            error=message,
            createdAtMs=int(self._clock()),
        )
