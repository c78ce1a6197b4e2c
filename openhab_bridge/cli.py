from __future__ import annotations

import argparse
import os

import uvicorn

from openhab_bridge.config import load_bridge_config


def main() -> None:
    config = load_bridge_config()
    parser = argparse.ArgumentParser(prog="openhab-bridge", description="Run the openHAB bridge server")
    parser.add_argument("--host", default=config.host)
    parser.add_argument("--port", type=int, default=config.port)
    parser.add_argument("--log-level", default=os.environ.get("OPENHAB_LOG_LEVEL", "info").lower())
    args = parser.parse_args()

    # Single worker: the reconciliation loop and its timer live in-process.
    uvicorn.run(
        "openhab_bridge.main:app",
        host=args.host,
        port=args.port,
        log_level=args.log_level,
        workers=1,
    )


if __name__ == "__main__":
    main()
