class PipelineError(Exception):
    """Base for stage failures. ``code`` is stable, ``message`` is display text."""

    code = "pipeline_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# Validation (fatal): raised before any side effect, no identifier issued

class InvalidArguments(PipelineError):
    code = "invalid_arguments"


class EmptyScript(PipelineError):
    code = "empty_script"


class InvalidProposalId(PipelineError):
    code = "invalid_proposal_id"


class InvalidAuthorizationId(PipelineError):
    code = "invalid_authorization_id"


# Execution: raised by ledger clients, captured into a FAILED receipt

class LedgerError(PipelineError):
    code = "ledger_error"


class InvalidTransition(PipelineError):
    code = "invalid_transition"
