"""
Show a wallet's SPL token account, optionally for one mint.

Usage:
  python -m solana_snapshot.tools.token_holdings <wallet> [--mint MINT]
"""

from __future__ import annotations

import argparse
import json
import sys

from solana_snapshot.core.exceptions import RetrievalFailure
from solana_snapshot.service import SolanaTransactionService
from solana_snapshot.snapshot_logging import get_logger

logger = get_logger(__name__)


def _build_service() -> SolanaTransactionService:
    return SolanaTransactionService()


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Token holdings of a Solana wallet")
    ap.add_argument("wallet", help="Owner wallet address (base58)")
    ap.add_argument("--mint", default=None, help="Only the account holding this mint")
    args = ap.parse_args(argv)

    try:
        service = _build_service()
    except ValueError as e:
        logger.error("solana_config_invalid", error=str(e))
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    try:
        with service:
            holding = service.get_token_holdings(args.wallet, args.mint)
    except RetrievalFailure as e:
        logger.error("token_holdings_failed", wallet=args.wallet, error=str(e))
        print(f"An error occurred: {e}", file=sys.stderr)
        return 1

    if holding is None:
        print("No token holdings found.")
        return 0
    print(f"Account: {holding.pubkey}")
    print(f"Mint: {holding.mint or 'N/A'}")
    print(f"Amount: {holding.ui_amount if holding.ui_amount is not None else 'N/A'}")
    print(json.dumps(holding.to_json(), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
