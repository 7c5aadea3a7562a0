import re
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from txroles.api.auth import require_api_key
from txroles.api.routes import get_pipeline, get_record_repo
from txroles.core.ids import SequenceIdGenerator
from txroles.core.models import Proposal
from txroles.core.pipeline import build_pipeline
from txroles.ledger.client import SimulatedLedgerClient
from txroles.main import app
from txroles.settings import settings

client = TestClient(app, raise_server_exceptions=False)


@pytest.fixture(autouse=True)
def wired_pipeline():
    pipeline = build_pipeline(
        ledger=SimulatedLedgerClient(ids=SequenceIdGenerator("tx", stamp=3)),
        id_generators={
            "proposal": SequenceIdGenerator("proposal", stamp=1),
            "auth": SequenceIdGenerator("auth", stamp=2),
        },
        default_limit=0.0001,
    )
    app.dependency_overrides[require_api_key] = lambda: None
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    yield pipeline
    app.dependency_overrides = {}


def test_health():
    assert client.get("/health").json() == {"status": "ok"}


def test_propose_route():
    resp = client.post(
        "/api/proposals",
        json={"scriptCode": "transaction {}", "arguments": '[{"type":"UFix64","value":"1.0"}]', "description": "t"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["result"]["success"] is True
    assert body["result"]["proposalId"] == "proposal-1-1"
    assert body["result"]["arguments"] == [{"type": "UFix64", "value": "1.0"}]
    assert "proposal-1-1" in body["summary"]


def test_propose_route_accepts_structured_arguments():
    resp = client.post("/api/proposals", json={"scriptCode": "transaction {}", "arguments": []})
    assert resp.json()["result"]["success"] is True


def test_propose_route_map_arguments_is_error_result():
    resp = client.post("/api/proposals", json={"scriptCode": "transaction {}", "arguments": {"type": "A", "value": 1}})
    assert resp.status_code == 200
    assert resp.json()["result"]["success"] is False
    assert resp.json()["result"]["code"] == "invalid_arguments"
    assert resp.json()["summary"].startswith("Unable to create transaction proposal")


def test_authorize_route():
    resp = client.post("/api/authorizations", json={"proposalId": "proposal-123-1", "approve": True})
    result = resp.json()["result"]
    assert result == {
        "success": True,
        "proposalId": "proposal-123-1",
        "authorizationId": "auth-2-1",
        "status": "authorized",
    }


def test_authorize_route_bad_id():
    result = client.post("/api/authorizations", json={"proposalId": "bad-id", "approve": True}).json()["result"]
    assert result["success"] is False
    assert "authorizationId" not in result


def test_authorize_route_rejects_string_boolean():
    resp = client.post("/api/authorizations", json={"proposalId": "proposal-1-1", "approve": "false"})
    assert resp.status_code == 422


def test_pay_route():
    resp = client.post("/api/payments", json={"authorizationId": "auth-123-1", "resourceLimit": "0.001"})
    result = resp.json()["result"]
    assert result["success"] is True
    assert result["status"] == "SEALED"
    assert result["transactionId"] == "tx-3-1"
    assert result["resourceUsed"] <= 0.001


def test_pay_route_numeric_and_missing_limit():
    r1 = client.post("/api/payments", json={"authorizationId": "auth-1-1", "resourceLimit": 0.5}).json()["result"]
    r2 = client.post("/api/payments", json={"authorizationId": "auth-1-1"}).json()["result"]
    assert r1["resourceLimit"] == 0.5
    assert r2["resourceLimit"] == 0.0001


def test_pay_route_bad_id():
    result = client.post("/api/payments", json={"authorizationId": "proposal-1-1", "resourceLimit": "1"}).json()["result"]
    assert result == {"success": False, "error": "Invalid authorization ID format", "code": "invalid_authorization_id"}


@patch("txroles.queue.rq_conn.get_queue")
def test_pay_route_async_enqueues(mock_get_queue):
    job = MagicMock()
    job.id = "job-1"
    mock_get_queue.return_value.enqueue.return_value = job
    resp = client.post("/api/payments?async=true", json={"authorizationId": "auth-1-1", "resourceLimit": "0.01"})
    assert resp.json() == {"success": True, "jobId": "job-1", "status": "queued"}
    args = mock_get_queue.return_value.enqueue.call_args.args
    assert args[1:] == ("auth-1-1", "0.01")


def test_intent_route():
    r = client.post("/api/intent", json={"text": "Reject the transaction proposal-1234567890-123"}).json()
    assert r == {"stage": "authorize", "identifier": "proposal-1234567890-123", "approve": False}
    r = client.post("/api/intent", json={"text": "pay for auth-1-2 with gas 0.001"}).json()
    assert r["stage"] == "pay"
    assert r["identifier"] == "auth-1-2"
    r = client.post("/api/intent", json={"text": "hello there"}).json()
    assert r["stage"] is None


def test_get_record_route():
    repo = MagicMock()
    repo.load.side_effect = lambda rid: Proposal(proposalId=rid, scriptCode="x") if rid == "proposal-1-1" else None
    app.dependency_overrides[get_record_repo] = lambda: repo
    assert client.get("/api/records/proposal-1-1").json()["proposalId"] == "proposal-1-1"
    assert client.get("/api/records/proposal-2-2").status_code == 404


def test_api_key_enforced_when_configured():
    app.dependency_overrides.pop(require_api_key, None)
    with patch.object(settings, "API_KEY", "k"):
        assert client.post("/api/intent", json={"text": "x"}).status_code == 401
        assert client.post("/api/intent", json={"text": "x"}, headers={"x-api-key": "k"}).status_code == 200
        assert client.post("/api/intent", json={"text": "x"}, headers={"x-api-key": "kk"}).status_code == 401


def test_api_key_open_when_unset():
    app.dependency_overrides.pop(require_api_key, None)
    with patch.object(settings, "API_KEY", ""):
        assert client.post("/api/intent", json={"text": "x"}).status_code == 200


def test_unhandled_error_has_error_shape(wired_pipeline):
    wired_pipeline.proposer.propose = MagicMock(side_effect=RuntimeError("kaboom"))
    resp = client.post("/api/proposals", json={"scriptCode": "x", "arguments": "[]"})
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "Internal error: RuntimeError"}


def test_ids_in_responses_well_formed():
    app.dependency_overrides[get_pipeline] = lambda: build_pipeline(ledger=SimulatedLedgerClient())
    pid = client.post("/api/proposals", json={"scriptCode": "x", "arguments": "[]"}).json()["result"]["proposalId"]
    aid = client.post("/api/authorizations", json={"proposalId": pid, "approve": True}).json()["result"]["authorizationId"]
    assert re.fullmatch(r"proposal-\d+-\d+", pid)
    assert re.fullmatch(r"auth-\d+-\d+", aid)
