from typing import Callable, Optional

from txroles.core.errors import InvalidProposalId, PipelineError
from txroles.core.ids import AUTHORIZATION_PREFIX, PROPOSAL_PREFIX, IdGenerator, TimestampIdGenerator, has_prefix
from txroles.core.models import Authorization, Decision
from txroles.core.results import Err, Ok, Result
from txroles.core.summary import authorization_summary, error_summary
from txroles.observability.logging import log
from txroles.utils.time import now_ms


class Authorizer:
    """
    Second stage: records an approve/reject decision for a proposal id.

    Only the id format is checked. Whether the proposal exists is the record
    store's business; a format-valid id is accepted as is.
    """

    def __init__(
        self,
        ids: Optional[IdGenerator] = None,
        store=None,
        clock: Callable[[], int] = now_ms,
    ):
        self.ids = ids or TimestampIdGenerator(AUTHORIZATION_PREFIX)
        self.store = store
        self._clock = clock

    def authorize(self, proposal_id: str, approve: bool) -> Result[Authorization]:
        action = "authorize" if approve is True else "reject"
        try:
            auth = self._decide(proposal_id, approve)
        except PipelineError as e:
            log(event="authorization_invalid", proposalId=str(proposal_id)[:80], code=e.code, error=e.message)
            return Err.from_exception(e, summary=error_summary(f"{action} transaction proposal", e.message))

        if auth.approved:
            log(event="authorization_granted", proposalId=auth.proposalId, authorizationId=auth.authorizationId)
        else:
            log(event="authorization_rejected", proposalId=auth.proposalId)

        if self.store is not None:
            self.store.save(auth)
        return Ok(auth, summary=authorization_summary(auth))

    def _decide(self, proposal_id: str, approve: bool) -> Authorization:
        if not has_prefix(proposal_id, PROPOSAL_PREFIX):
            raise InvalidProposalId("Invalid proposal ID format")

        # Only an explicit True approves
        if approve is True:
            return Authorization(
                proposalId=proposal_id,
                decision=Decision.AUTHORIZED,
                authorizationId=self.ids.next(),
                decidedAtMs=int(self._clock()),
            )
        return Authorization(
            proposalId=proposal_id,
            decision=Decision.REJECTED,
            decidedAtMs=int(self._clock()),
        )
