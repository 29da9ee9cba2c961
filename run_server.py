#!/usr/bin/env python3
"""
AlphaVault - direct run script.

Starts the dashboard API with uvicorn. Configuration comes from
ALPHAVAULT_* environment variables or a local .env file.
"""
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def main() -> int:
    import uvicorn

    host = os.getenv("ALPHAVAULT_HOST", "0.0.0.0")
    port = int(os.getenv("ALPHAVAULT_PORT", "8010"))
    print(f"AlphaVault - serving on http://{host}:{port}")
    uvicorn.run(
        "alphavault.app:build_default_app",
        factory=True,
        host=host,
        port=port,
        log_level="info",
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
