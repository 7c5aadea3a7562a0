# Pipeline states (documentation/testing view; no stage keeps internal state)

from typing import Optional, Union

from txroles.core.errors import InvalidTransition
from txroles.core.models import Authorization, Decision, Proposal, Receipt

# Created by the Proposer; awaiting a decision
PROPOSED = "PROPOSED"

# Approved by the Authorizer; the only state that feeds the Payer
AUTHORIZED = "AUTHORIZED"

# Terminal: declined, no authorization id issued
REJECTED = "REJECTED"

# Terminal: ledger settled the transaction
SEALED = "SEALED"

# Terminal: ledger refused or errored
FAILED = "FAILED"

# Events
APPROVE = "approve"
REJECT = "reject"
PAY_SUCCESS = "pay_success"
PAY_FAILURE = "pay_failure"

TRANSITIONS = {
    (PROPOSED, APPROVE): AUTHORIZED,
    (PROPOSED, REJECT): REJECTED,
    (AUTHORIZED, PAY_SUCCESS): SEALED,
    (AUTHORIZED, PAY_FAILURE): FAILED,
}

# PROPOSED counts as terminal for a single stage run; it only moves on when
# the caller invokes the Authorizer with its id.
TERMINAL_STATES = {PROPOSED, REJECTED, SEALED, FAILED}


def next_state(state: str, event: str) -> str:
    try:
        return TRANSITIONS[(state, event)]
    except KeyError:
        raise InvalidTransition(f"No transition from {state} on {event}") from None


def is_terminal(state: str) -> bool:
    return state in TERMINAL_STATES


def state_of(record: Union[Proposal, Authorization, Receipt, None]) -> Optional[str]:
    """Pipeline state a freshly produced record puts its transaction in."""
    if isinstance(record, Proposal):
        return PROPOSED
    if isinstance(record, Authorization):
        return AUTHORIZED if record.decision == Decision.AUTHORIZED else REJECTED
    if isinstance(record, Receipt):
        return SEALED if record.sealed else FAILED
    return None
