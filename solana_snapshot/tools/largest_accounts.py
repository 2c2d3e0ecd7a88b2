"""
List the largest accounts on the cluster, or the largest holders of one mint.

Usage:
  python -m solana_snapshot.tools.largest_accounts [--filter circulating|nonCirculating]
  python -m solana_snapshot.tools.largest_accounts --mint MINT [--commitment finalized]
"""

from __future__ import annotations

import argparse
import sys

from solana_snapshot.core.exceptions import RetrievalFailure
from solana_snapshot.service import SolanaTransactionService
from solana_snapshot.snapshot_logging import get_logger

logger = get_logger(__name__)


def _build_service() -> SolanaTransactionService:
    return SolanaTransactionService()


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Largest Solana accounts or token holders")
    ap.add_argument("--filter", choices=["circulating", "nonCirculating"], default=None)
    ap.add_argument("--mint", default=None, help="List the largest holders of this token mint instead")
    ap.add_argument(
        "--commitment",
        choices=["processed", "confirmed", "finalized"],
        default=None,
        help="Commitment for --mint queries",
    )
    args = ap.parse_args(argv)

    try:
        service = _build_service()
    except ValueError as e:
        logger.error("solana_config_invalid", error=str(e))
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    try:
        with service:
            if args.mint:
                holders = service.get_largest_token_accounts(args.mint, args.commitment)
                for h in holders:
                    print(f"{h.address}\t{h.ui_amount_string or h.amount}")
                count = len(holders)
            else:
                accounts = service.get_largest_accounts(args.filter)
                for a in accounts:
                    print(f"{a.address}\t{a.lamports}")
                count = len(accounts)
    except RetrievalFailure as e:
        logger.error("largest_accounts_failed", error=str(e))
        print(f"An error occurred: {e}", file=sys.stderr)
        return 1

    print(f"{count} accounts.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
