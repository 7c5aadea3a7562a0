from txroles.ledger.client import LedgerClient, SimulatedLedgerClient
from txroles.ledger.http_client import HttpLedgerClient
from txroles.observability.logging import log
from txroles.settings import settings


def build_ledger_client(cfg=settings) -> LedgerClient:
    mode = (getattr(cfg, "LEDGER_MODE", "simulated") or "simulated").lower()
    if mode == "http":
        return HttpLedgerClient(
            base_url=cfg.LEDGER_URL,
            api_key=cfg.LEDGER_API_KEY,
            timeout_sec=cfg.LEDGER_TIMEOUT_SEC,
            max_retries=cfg.LEDGER_MAX_RETRIES,
        )
    if mode != "simulated":
        log(event="ledger_mode_unknown", mode=mode, fallback="simulated")
    return SimulatedLedgerClient(
        usage_ratio=cfg.SIMULATED_USAGE_RATIO,
        failure_rate=cfg.SIMULATED_FAILURE_RATE,
        settle_delay_sec=cfg.SIMULATED_SETTLE_DELAY_SEC,
    )
