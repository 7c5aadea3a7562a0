from dataclasses import dataclass
from typing import Dict, Optional

from txroles.core.authorizer import Authorizer
from txroles.core.ids import AUTHORIZATION_PREFIX, PROPOSAL_PREFIX, TRANSACTION_PREFIX, IdGenerator
from txroles.core.payer import Payer
from txroles.core.proposer import Proposer
from txroles.ledger.client import LedgerClient
from txroles.ledger.factory import build_ledger_client
from txroles.settings import settings


@dataclass
class Pipeline:
    proposer: Proposer
    authorizer: Authorizer
    payer: Payer


def build_pipeline(
    ledger: Optional[LedgerClient] = None,
    store=None,
    id_generators: Optional[Dict[str, IdGenerator]] = None,
    default_limit: Optional[float] = None,
) -> Pipeline:
    """
    Construct the three stage handlers and wire the ledger into the Payer.

    ``id_generators`` is keyed by id prefix (``proposal``, ``auth``, ``tx``);
    missing entries get a timestamp generator. When a store is given, records
    are written after each successful stage and the Payer resolves the script
    reference through it.
    """
    ids = id_generators or {}
    ledger = ledger if ledger is not None else build_ledger_client(settings)

    script_ref_for = getattr(store, "proposal_id_for", None) if store is not None else None

    return Pipeline(
        proposer=Proposer(ids=ids.get(PROPOSAL_PREFIX), store=store),
        authorizer=Authorizer(ids=ids.get(AUTHORIZATION_PREFIX), store=store),
        payer=Payer(
            ledger=ledger,
            ids=ids.get(TRANSACTION_PREFIX),
            store=store,
            default_limit=default_limit,
            script_ref_for=script_ref_for,
        ),
    )


def default_store():
    """Record store per settings; None when persistence is off."""
    if not settings.STORE_RECORDS:
        return None
    from txroles.store.record_repo import RecordRepo
    return RecordRepo()
