"""
Main entrypoint: FastAPI server for the snapshot trigger.

Env: SOLANA_RPC_URL, SNAPSHOT_SHEET_ID, SNAPSHOT_TOKEN_MINT, DATABASE_URL, API_HOST, API_PORT, LOG_LEVEL.

Equivalent: uvicorn solana_snapshot.api_server.app:app --host 0.0.0.0 --port 8000
"""

import os

# Configure structured JSON logging before other imports that may log
from solana_snapshot.snapshot_logging import get_logger
from solana_snapshot.config.env import get_solana_rpc_url, mask_rpc_url

logger = get_logger("main")


def main() -> None:
    api_host = os.getenv("API_HOST", "0.0.0.0").strip()
    api_port = int(os.getenv("API_PORT", "8000").strip() or "8000")

    from solana_snapshot.api_server.app import app
    import uvicorn

    logger.info(
        "main_server_starting",
        host=api_host,
        port=api_port,
        rpc_url=mask_rpc_url(get_solana_rpc_url()),
    )
    uvicorn.run(app, host=api_host, port=api_port, log_level=os.getenv("LOG_LEVEL", "info").lower())


if __name__ == "__main__":
    main()
