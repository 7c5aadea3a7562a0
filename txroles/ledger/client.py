import asyncio
import random
from dataclasses import dataclass
from typing import Optional, Protocol

from txroles.core.errors import LedgerError
from txroles.core.ids import TRANSACTION_PREFIX, IdGenerator, TimestampIdGenerator


@dataclass(frozen=True)
class LedgerSubmission:
    transactionId: Optional[str]
    resourceUsed: float
    sealed: bool
    error: Optional[str] = None


class LedgerClient(Protocol):
    async def submit(self, script_ref: str, authorization_ref: str, resource_limit: float) -> LedgerSubmission:
        """Submit and wait for settlement. Raises LedgerError on failure."""
        ...


class SimulatedLedgerClient:
    """
    In-process stand-in for a ledger.

    Spends a fixed share of the limit (rounded to 8 decimals) and fails with
    probability ``failure_rate``.
    """

    def __init__(
        self,
        usage_ratio: float = 0.7,
        failure_rate: float = 0.0,
        settle_delay_sec: float = 0.0,
        ids: Optional[IdGenerator] = None,
        rng: Optional[random.Random] = None,
    ):
        self.usage_ratio = min(max(float(usage_ratio), 0.0), 1.0)
        self.failure_rate = min(max(float(failure_rate), 0.0), 1.0)
        self.settle_delay_sec = max(0.0, float(settle_delay_sec))
        self.ids = ids or TimestampIdGenerator(TRANSACTION_PREFIX)
        self._rng = rng or random.Random()
        self.submissions = 0

    async def submit(self, script_ref: str, authorization_ref: str, resource_limit: float) -> LedgerSubmission:
        self.submissions += 1
        if self.settle_delay_sec:
            await asyncio.sleep(self.settle_delay_sec)

        if self.failure_rate and self._rng.random() < self.failure_rate:
            raise LedgerError("Simulated ledger rejected the transaction")

        used = round(resource_limit * self.usage_ratio, 8)
        return LedgerSubmission(
            transactionId=self.ids.next(),
            resourceUsed=min(used, resource_limit),
            sealed=True,
        )
