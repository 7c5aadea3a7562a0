"""
Redis-backed record store for proposals, authorizations and receipts.

The stages only ever write here; lookups serve the API and the payment
worker. Serializing concurrent writers for the same id is left to Redis
(one SET per record, records are immutable once written).
"""
import json
from dataclasses import fields as dc_fields
from typing import Optional, Union

from txroles.core.ids import AUTHORIZATION_PREFIX, PROPOSAL_PREFIX, TRANSACTION_PREFIX, prefix_of
from txroles.core.models import Authorization, Proposal, Receipt
from txroles.observability.logging import log
from txroles.settings import settings
from txroles.store.redis_conn import get_redis

PREFIX = "record:"

Record = Union[Proposal, Authorization, Receipt]

_KINDS = {
    PROPOSAL_PREFIX: Proposal,
    AUTHORIZATION_PREFIX: Authorization,
    TRANSACTION_PREFIX: Receipt,
}


def _key(record_id: str) -> str:
    return f"{PREFIX}{record_id}"


def record_id(record: Record) -> Optional[str]:
    if isinstance(record, Proposal):
        return record.proposalId
    if isinstance(record, Authorization):
        # Rejections carry no id of their own; keyed under the proposal
        return record.authorizationId or f"{record.proposalId}:rejected"
    if isinstance(record, Receipt):
        return record.transactionId
    return None


def _filter_kwargs(cls, data: dict) -> dict:
    """Drop unknown keys so cls.from_dict never sees stale fields."""
    allowed = {f.name for f in dc_fields(cls)}
    return {k: v for k, v in data.items() if k in allowed}


class RecordRepo:
    def __init__(self, redis=None, ttl_sec: Optional[int] = None):
        self._redis = redis
        self.ttl_sec = int(settings.RECORD_TTL_SEC if ttl_sec is None else ttl_sec)

    @property
    def redis(self):
        if self._redis is None:
            self._redis = get_redis()
        return self._redis

    def save(self, record: Record) -> bool:
        """Persist a record. Store outages are logged, never raised into a stage."""
        rid = record_id(record)
        if not rid:
            return False
        try:
            raw = json.dumps(record.to_dict())
            if self.ttl_sec > 0:
                self.redis.set(_key(rid), raw, ex=self.ttl_sec)
            else:
                self.redis.set(_key(rid), raw)
            return True
        except Exception as e:
            log(event="record_save_failed", recordId=rid, errorType=type(e).__name__, error=str(e)[:300])
            return False

    def _load(self, rid: str, cls):
        raw = self.redis.get(_key(rid))
        if not raw:
            return None
        data = _filter_kwargs(cls, json.loads(raw))
        return cls.from_dict(data)

    def load_proposal(self, proposal_id: str) -> Optional[Proposal]:
        return self._load(proposal_id, Proposal)

    def load_authorization(self, authorization_id: str) -> Optional[Authorization]:
        return self._load(authorization_id, Authorization)

    def load_receipt(self, transaction_id: str) -> Optional[Receipt]:
        return self._load(transaction_id, Receipt)

    def load(self, rid: str) -> Optional[Record]:
        if rid.endswith(":rejected"):
            cls = Authorization
        else:
            cls = _KINDS.get(prefix_of(rid) or "")
        if cls is None:
            return None
        return self._load(rid, cls)

    def proposal_id_for(self, authorization_id: str) -> Optional[str]:
        """Script reference lookup for the Payer; None when unknown or unreachable."""
        try:
            auth = self.load_authorization(authorization_id)
        except Exception as e:
            log(event="record_lookup_failed", recordId=authorization_id, errorType=type(e).__name__)
            return None
        return auth.proposalId if auth else None
