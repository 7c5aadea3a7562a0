import os
from dotenv import load_dotenv

load_dotenv()

class Settings:
    API_KEY: str = os.getenv("API_KEY", "")
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    RQ_QUEUE_NAME: str = os.getenv("RQ_QUEUE_NAME", "payments")
    # Upper bound for one background payment, ledger retries included
    PAYMENT_JOB_TIMEOUT_SEC: int = int(os.getenv("PAYMENT_JOB_TIMEOUT_SEC", "120"))

    # Payer: fallback fee/gas ceiling when the caller's limit is missing or unusable
    DEFAULT_RESOURCE_LIMIT: float = float(os.getenv("DEFAULT_RESOURCE_LIMIT", "0.0001"))

    # Ledger client selection
    # - "simulated": in-process ledger (no network)
    # - "http": POST to LEDGER_URL
    LEDGER_MODE: str = os.getenv("LEDGER_MODE", "simulated").lower()
    LEDGER_URL: str = os.getenv("LEDGER_URL", "").rstrip("/")
    LEDGER_API_KEY: str = os.getenv("LEDGER_API_KEY", "")
    LEDGER_TIMEOUT_SEC: float = float(os.getenv("LEDGER_TIMEOUT_SEC", "10.0"))
    LEDGER_MAX_RETRIES: int = int(os.getenv("LEDGER_MAX_RETRIES", "2"))

    # Simulated ledger knobs
    SIMULATED_USAGE_RATIO: float = float(os.getenv("SIMULATED_USAGE_RATIO", "0.7"))
    SIMULATED_FAILURE_RATE: float = float(os.getenv("SIMULATED_FAILURE_RATE", "0.0"))
    SIMULATED_SETTLE_DELAY_SEC: float = float(os.getenv("SIMULATED_SETTLE_DELAY_SEC", "0.0"))

    # Record store (optional; the pipeline never reads from it)
    STORE_RECORDS: bool = os.getenv("STORE_RECORDS", "false").lower() == "true"
    RECORD_TTL_SEC: int = int(os.getenv("RECORD_TTL_SEC", "0"))  # 0 = keep forever

    # Logs: hide transaction source text
    ENABLE_SCRIPT_REDACTION: bool = os.getenv("ENABLE_SCRIPT_REDACTION", "true").lower() == "true"

settings = Settings()
