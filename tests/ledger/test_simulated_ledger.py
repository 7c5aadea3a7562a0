import asyncio
import random
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from txroles.core.errors import LedgerError
from txroles.core.ids import SequenceIdGenerator
from txroles.ledger.client import SimulatedLedgerClient
from txroles.ledger.factory import build_ledger_client
from txroles.ledger.http_client import HttpLedgerClient


def test_simulated_submit_seals_with_ratio():
    client = SimulatedLedgerClient(usage_ratio=0.5, ids=SequenceIdGenerator("tx", stamp=9))
    sub = asyncio.run(client.submit("proposal-1-1", "auth-1-1", 0.002))
    assert sub.sealed is True
    assert sub.transactionId == "tx-9-1"
    assert sub.resourceUsed == 0.001
    assert client.submissions == 1


def test_simulated_usage_rounded_to_eight_decimals():
    sub = asyncio.run(SimulatedLedgerClient().submit("s", "auth-1-1", 0.000123456789))
    assert sub.resourceUsed == round(0.000123456789 * 0.7, 8)


def test_simulated_ratio_is_clamped():
    client = SimulatedLedgerClient(usage_ratio=3.0)
    sub = asyncio.run(client.submit("s", "auth-1-1", 1.0))
    assert sub.resourceUsed == 1.0


def test_simulated_failure():
    client = SimulatedLedgerClient(failure_rate=1.0, rng=random.Random(0))
    with pytest.raises(LedgerError):
        asyncio.run(client.submit("s", "auth-1-1", 1.0))


@patch("txroles.ledger.client.asyncio.sleep")
def test_simulated_settle_delay_awaited(mock_sleep):
    async def _noop(_):
        return None

    mock_sleep.side_effect = _noop
    asyncio.run(SimulatedLedgerClient(settle_delay_sec=0.25).submit("s", "auth-1-1", 1.0))
    mock_sleep.assert_called_once_with(0.25)


def _cfg(**kw):
    base = dict(
        LEDGER_MODE="simulated",
        LEDGER_URL="",
        LEDGER_API_KEY="",
        LEDGER_TIMEOUT_SEC=5.0,
        LEDGER_MAX_RETRIES=2,
        SIMULATED_USAGE_RATIO=0.7,
        SIMULATED_FAILURE_RATE=0.0,
        SIMULATED_SETTLE_DELAY_SEC=0.0,
    )
    base.update(kw)
    return SimpleNamespace(**base)


def test_factory_simulated():
    client = build_ledger_client(_cfg(SIMULATED_USAGE_RATIO=0.4))
    assert isinstance(client, SimulatedLedgerClient)
    assert client.usage_ratio == 0.4


def test_factory_http():
    client = build_ledger_client(_cfg(LEDGER_MODE="http", LEDGER_URL="http://ledger:8080/", LEDGER_API_KEY="k"))
    assert isinstance(client, HttpLedgerClient)
    assert client.base_url == "http://ledger:8080"
    assert client.api_key == "k"


@patch("txroles.ledger.factory.log")
def test_factory_unknown_mode_falls_back(mock_log):
    client = build_ledger_client(_cfg(LEDGER_MODE="carrier-pigeon"))
    assert isinstance(client, SimulatedLedgerClient)
    assert mock_log.call_args.kwargs["event"] == "ledger_mode_unknown"
