import json
from typing import Any, Callable, List, Optional

from txroles.core.errors import EmptyScript, InvalidArguments, PipelineError
from txroles.core.ids import PROPOSAL_PREFIX, IdGenerator, TimestampIdGenerator
from txroles.core.models import Proposal, TransactionArgument
from txroles.core.results import Err, Ok, Result
from txroles.core.summary import error_summary, proposal_summary
from txroles.observability.logging import log
from txroles.utils.time import now_ms


def parse_arguments(arguments_json: str) -> List[TransactionArgument]:
    """
    Parse the JSON argument list into ``{type, value}`` records.

    Raises InvalidArguments if the text is not JSON, is not an array, or holds
    an element that is not an object with a string ``type`` and a ``value``.
    """
    if not isinstance(arguments_json, str) or not arguments_json.strip():
        raise InvalidArguments("Invalid arguments format: arguments must be a JSON array")
    try:
        raw = json.loads(arguments_json)
    except ValueError as e:
        raise InvalidArguments(f"Invalid arguments format: {e}") from e
    except RecursionError as e:
        raise InvalidArguments("Invalid arguments format: nesting is too deep") from e

    if not isinstance(raw, list):
        raise InvalidArguments("Invalid arguments format: Arguments must be an array")

    out = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict) or "value" not in item or not isinstance(item.get("type"), str):
            raise InvalidArguments(
                f"Invalid arguments format: element {i} must be an object with 'type' and 'value'"
            )
        out.append(TransactionArgument(type=item["type"], value=item["value"]))
    return out


class Proposer:
    """First stage: turns transaction intent into an immutable Proposal."""

    def __init__(
        self,
        ids: Optional[IdGenerator] = None,
        store=None,
        clock: Callable[[], int] = now_ms,
    ):
        self.ids = ids or TimestampIdGenerator(PROPOSAL_PREFIX)
        self.store = store
        self._clock = clock

    def propose(self, script_code: str, arguments_json: str, description: str) -> Result[Proposal]:
        try:
            proposal = self._create(script_code, arguments_json, description)
        except PipelineError as e:
            log(event="proposal_rejected_invalid", code=e.code, error=e.message)
            return Err.from_exception(e, summary=error_summary("create transaction proposal", e.message))

        log(
            event="proposal_created",
            proposalId=proposal.proposalId,
            argumentCount=len(proposal.arguments),
            scriptCode=proposal.scriptCode,
            description=proposal.description,
        )
        if self.store is not None:
            self.store.save(proposal)
        return Ok(proposal, summary=proposal_summary(proposal))

    def _create(self, script_code: Any, arguments_json: str, description: Any) -> Proposal:
        args = parse_arguments(arguments_json)

        if not isinstance(script_code, str) or not script_code.strip():
            raise EmptyScript("Transaction code cannot be empty")

        # Id is drawn only after validation passes
        return Proposal(
            proposalId=self.ids.next(),
            scriptCode=script_code,
            arguments=tuple(args),
            description=description if isinstance(description, str) else "",
            createdAtMs=int(self._clock()),
        )
