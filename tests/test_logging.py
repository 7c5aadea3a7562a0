import json
from unittest.mock import patch

from txroles.observability.logging import log
from txroles.settings import settings


def test_log_emits_json_line(capsys):
    with patch.object(settings, "ENABLE_SCRIPT_REDACTION", False):
        log(event="proposal_created", proposalId="proposal-1-1", scriptCode="transaction {}")
    line = json.loads(capsys.readouterr().out.strip())
    assert line["event"] == "proposal_created"
    assert line["proposalId"] == "proposal-1-1"
    assert line["scriptCode"] == "transaction {}"
    assert isinstance(line["ts"], int)


def test_log_redacts_script(capsys):
    with patch.object(settings, "ENABLE_SCRIPT_REDACTION", True):
        log(
            event="proposal_created",
            proposalId="proposal-1-1",
            scriptCode="transaction {}",
            request={"scriptCode": "abc", "approve": True},
        )
    line = json.loads(capsys.readouterr().out.strip())
    assert line["scriptCode"] == "[REDACTED:14chars]"
    assert line["request"] == {"scriptCode": "[REDACTED:3chars]", "approve": True}
    assert line["proposalId"] == "proposal-1-1"
