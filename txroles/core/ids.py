"""
Identifier generation and format checks.

Every record in the pipeline is addressed by an opaque string of the form
``<prefix>-<timestamp_ms>-<random>``. Generators are injectable so tests can
swap in deterministic sequences instead of the wall clock.
"""
import random
import re
from typing import Callable, Optional, Protocol

from txroles.utils.time import now_ms

PROPOSAL_PREFIX = "proposal"
AUTHORIZATION_PREFIX = "auth"
TRANSACTION_PREFIX = "tx"

# Random suffix range. The timestamp part is already unique per generator,
# the suffix separates generators running in different processes.
RANDOM_SUFFIX_MAX = 1_000_000


class IdGenerator(Protocol):
    def next(self) -> str:
        ...


class TimestampIdGenerator:
    """Produces ``<prefix>-<ms>-<random>`` with a monotonic millisecond part."""

    def __init__(
        self,
        prefix: str,
        clock: Optional[Callable[[], int]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.prefix = prefix
        self._clock = clock or now_ms
        self._rng = rng or random.SystemRandom()
        self._last_ms = 0

    def _tick(self) -> int:
        ms = int(self._clock())
        # Same or earlier millisecond: step past the last one handed out
        if ms <= self._last_ms:
            ms = self._last_ms + 1
        self._last_ms = ms
        return ms

    def next(self) -> str:
        return f"{self.prefix}-{self._tick()}-{self._rng.randrange(RANDOM_SUFFIX_MAX)}"


class SequenceIdGenerator:
    """Deterministic ``<prefix>-<stamp>-<n>`` ids for tests and replays."""

    def __init__(self, prefix: str, start: int = 1, stamp: int = 1000):
        self.prefix = prefix
        self.stamp = int(stamp)
        self._n = int(start)

    def next(self) -> str:
        out = f"{self.prefix}-{self.stamp}-{self._n}"
        self._n += 1
        return out


def has_prefix(identifier, prefix: str) -> bool:
    """Stage-level format gate: the identifier must start with ``<prefix>-``."""
    if not isinstance(identifier, str) or not identifier:
        return False
    return identifier.startswith(f"{prefix}-")


def matches_format(identifier, prefix: str) -> bool:
    """Strict ``<prefix>-<digits>-<digits>`` check."""
    if not isinstance(identifier, str):
        return False
    return re.fullmatch(rf"{re.escape(prefix)}-\d+-\d+", identifier) is not None


def prefix_of(identifier: str) -> Optional[str]:
    for p in (PROPOSAL_PREFIX, AUTHORIZATION_PREFIX, TRANSACTION_PREFIX):
        if has_prefix(identifier, p):
            return p
    return None
