"""
Holdings snapshot job shared by the HTTP trigger and the CLI.
"""

from solana_snapshot.snapshot.holdings import (
    SnapshotRow,
    SnapshotSummary,
    WalletRow,
    parse_wallet_rows,
    roll_forward,
    run_snapshot,
)

__all__ = [
    "SnapshotRow",
    "SnapshotSummary",
    "WalletRow",
    "parse_wallet_rows",
    "roll_forward",
    "run_snapshot",
]
