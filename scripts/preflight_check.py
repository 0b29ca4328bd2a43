#!/usr/bin/env python3
import os
import sys

print("Running preflight import check...")
try:
    # Dummy env so settings load without a .env file
    os.environ.setdefault("REDIS_URL", "redis://localhost:6379/0")

    import petspot.main
    print("Import petspot.main: OK")

    import petspot.core.controller
    print("Import petspot.core.controller: OK")

    import petspot.client.announcement_client
    print("Import petspot.client.announcement_client: OK")

    print("Preflight check passed.")
    sys.exit(0)
except Exception as e:
    print(f"Preflight check FAILED: {e}")
    import traceback
    traceback.print_exc()
    sys.exit(1)
