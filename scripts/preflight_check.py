#!/usr/bin/env python3
import sys
import os

print("Running preflight import check...")
try:
    os.environ.setdefault("REDIS_URL", "redis://localhost:6379/0")

    import txroles.main
    print("Import txroles.main: OK")

    import txroles.queue.jobs
    print("Import txroles.queue.jobs: OK")

    from txroles.ledger.factory import build_ledger_client
    print(f"Ledger client: {type(build_ledger_client()).__name__}")

    print("Preflight check passed.")
    sys.exit(0)
except Exception as e:
    print(f"Preflight check FAILED: {e}")
    import traceback
    traceback.print_exc()
    sys.exit(1)
