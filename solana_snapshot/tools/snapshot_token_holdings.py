"""
Snapshot each tracked wallet's balance of one token into the holdings sheet.

Rolls Today into Yesterday, writes the new balance and the difference.
Sheet, tab, and mint default to SNAPSHOT_* env values.

Usage:
  python -m solana_snapshot.tools.snapshot_token_holdings [--sheet-id ID] [--token MINT]
"""

from __future__ import annotations

import argparse
import sys

from solana_snapshot.config.env import get_snapshot_settings
from solana_snapshot.core.exceptions import RetrievalFailure, StorageError
from solana_snapshot.service import SolanaTransactionService
from solana_snapshot.snapshot.holdings import run_snapshot
from solana_snapshot.snapshot_logging import get_logger
from solana_snapshot.storage.sheets import CsvSpreadsheetClient

logger = get_logger(__name__)


def _build_service() -> SolanaTransactionService:
    return SolanaTransactionService()


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Snapshot token holdings of tracked wallets into a sheet")
    ap.add_argument("--sheet-id", default=None, help="Spreadsheet id (default: SNAPSHOT_SHEET_ID)")
    ap.add_argument("--sheet-name", default=None, help="Tab name (default: SNAPSHOT_SHEET_NAME or Sheet1)")
    ap.add_argument("--token", default=None, help="Token mint (default: SNAPSHOT_TOKEN_MINT)")
    ap.add_argument("--sheets-dir", default=None, help="Directory holding sheet CSVs (default: SNAPSHOT_SHEETS_DIR)")
    args = ap.parse_args(argv)

    try:
        settings = get_snapshot_settings(
            sheet_id=args.sheet_id,
            token_mint=args.token,
            sheet_name=args.sheet_name,
            sheets_dir=args.sheets_dir,
        )
        service = _build_service()
    except ValueError as e:
        logger.error("snapshot_config_invalid", error=str(e))
        print(f"[snapshot] ERROR: {e}", file=sys.stderr)
        return 1

    sheets = CsvSpreadsheetClient(settings.sheets_dir)
    try:
        with service:
            summary = run_snapshot(
                service,
                sheets,
                settings.sheet_id,
                settings.token_mint,
                sheet_name=settings.sheet_name,
            )
    except (RetrievalFailure, StorageError) as e:
        logger.error("snapshot_failed", sheet_id=settings.sheet_id, error=str(e))
        print(f"An error occurred: {e}", file=sys.stderr)
        return 1

    for row in summary.rows:
        values = ",".join(str(v) for v in row.values())
        print(f"Pushed to row: {row.sheet_row}, values: {values}")
    print(f"Updated {summary.rows_updated} of {summary.rows_read} rows; skipped {len(summary.skipped)}.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
