"""
Collaborators the service writes to: a spreadsheet for holding snapshots and
a key-value table for fetched transactions.
"""

from solana_snapshot.storage.sheets import CsvSpreadsheetClient, SpreadsheetClient, row_range
from solana_snapshot.storage.transaction_store import (
    TransactionStore,
    record_from_transaction,
)

__all__ = [
    "CsvSpreadsheetClient",
    "SpreadsheetClient",
    "TransactionStore",
    "record_from_transaction",
    "row_range",
]
