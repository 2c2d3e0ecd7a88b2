"""
Print the latest transactions for every account matching a token hash.

One signature page (--limit) per matching account; each retrieved
transaction is listed with its signature and block time.

Usage:
  python -m solana_snapshot.tools.get_latest_transactions <token_hash> --limit 10
"""

from __future__ import annotations

import argparse
import sys

from solana_snapshot.core.exceptions import RetrievalFailure
from solana_snapshot.service import SolanaTransactionService
from solana_snapshot.snapshot_logging import get_logger

logger = get_logger(__name__)

SEPARATOR = "--------------------------------------"


def _build_service() -> SolanaTransactionService:
    return SolanaTransactionService()


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Retrieve the latest Solana transactions for a token hash")
    ap.add_argument("token_hash", help="Token hash matched at offset 0 of program accounts")
    ap.add_argument("--limit", type=int, default=10, help="Signatures per account (default: 10)")
    ap.add_argument("--before", default=None, help="Only signatures older than this one")
    ap.add_argument("--until", default=None, help="Stop at this signature")
    args = ap.parse_args(argv)

    print(f"Retrieving the latest {args.limit} Solana transactions for token hash: {args.token_hash}")
    try:
        service = _build_service()
    except ValueError as e:
        logger.error("solana_config_invalid", error=str(e))
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    try:
        with service:
            transactions = service.get_transactions_for_token(
                args.token_hash, args.limit, args.before, args.until
            )
    except RetrievalFailure as e:
        logger.error("get_latest_transactions_failed", token_hash=args.token_hash, error=str(e))
        print(f"An error occurred: {e}", file=sys.stderr)
        return 1

    if not transactions:
        print("No transactions found for this token hash.")
        return 0

    print(f"Found {len(transactions)} transactions.")
    for tx in transactions:
        block_time = tx.block_time if tx.block_time is not None else "N/A"
        print(f"Transaction Signature: {tx.signature or 'N/A'}")
        print(f"Block Time: {block_time}")
        print(SEPARATOR)
    print("Successfully retrieved and displayed transactions.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
