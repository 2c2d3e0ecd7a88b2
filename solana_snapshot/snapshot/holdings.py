"""
Daily token-holdings snapshot.

Reads the tracked wallets from a sheet (header row, then
Who | Wallet Address | Yesterday | Today | Diff), looks up each wallet's
current balance for one mint, rolls Today into Yesterday, and writes every
updated row back in place with a single batch write.

Wallets without a holding for the mint are skipped and left untouched.
A RetrievalFailure aborts the run before anything is written.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from pydantic import BaseModel, Field
from solders.pubkey import Pubkey

from solana_snapshot.service import SolanaTransactionService
from solana_snapshot.snapshot_logging import get_logger
from solana_snapshot.storage.sheets import SpreadsheetClient, row_range

logger = get_logger(__name__)


@dataclass
class WalletRow:
    """One data row of the snapshot sheet. index is 0-based over data rows."""

    index: int
    who: str
    wallet_address: str
    yesterday: float | None = None
    today: float | None = None

    @property
    def sheet_row(self) -> int:
        # +1 for the header, +1 for 1-based rows
        return self.index + 2


class SnapshotRow(BaseModel):
    sheet_row: int
    who: str
    wallet_address: str
    yesterday: float
    today: float
    diff: float

    def values(self) -> list[Any]:
        return [self.who, self.wallet_address, self.yesterday, self.today, self.diff]


class SnapshotSummary(BaseModel):
    sheet_id: str
    token_mint: str
    rows_read: int = 0
    rows_updated: int = 0
    skipped: list[str] = Field(default_factory=list, description="Wallets with no holding or an invalid address")
    rows: list[SnapshotRow] = Field(default_factory=list)


def _parse_amount(value: Any) -> float | None:
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        logger.warning("snapshot_amount_unparseable", value=text)
        return None


def parse_wallet_rows(values: Sequence[Sequence[Any]]) -> list[WalletRow]:
    """Turn raw sheet values (header first) into WalletRow entries."""
    rows: list[WalletRow] = []
    for idx, raw in enumerate(values[1:]):
        cells = list(raw) + [None] * (4 - len(raw))
        rows.append(
            WalletRow(
                index=idx,
                who=str(cells[0] or "").strip(),
                wallet_address=str(cells[1] or "").strip(),
                yesterday=_parse_amount(cells[2]),
                today=_parse_amount(cells[3]),
            )
        )
    return rows


def roll_forward(row: WalletRow, amount: float) -> SnapshotRow:
    """First sighting: yesterday = today = amount, diff 0. Otherwise shift today into yesterday."""
    yesterday = amount if row.today is None else row.today
    return SnapshotRow(
        sheet_row=row.sheet_row,
        who=row.who,
        wallet_address=row.wallet_address,
        yesterday=yesterday,
        today=amount,
        diff=amount - yesterday,
    )


def _is_valid_wallet(wallet: str) -> bool:
    try:
        Pubkey.from_string(wallet)
    except Exception:
        return False
    return True


def run_snapshot(
    service: SolanaTransactionService,
    sheets: SpreadsheetClient,
    sheet_id: str,
    token_mint: str,
    sheet_name: str = "Sheet1",
) -> SnapshotSummary:
    values = sheets.read_rows(sheet_id, sheet_name)
    wallets = parse_wallet_rows(values)
    summary = SnapshotSummary(sheet_id=sheet_id, token_mint=token_mint, rows_read=len(wallets))
    logger.info("snapshot_started", sheet_id=sheet_id, token_mint=token_mint, wallet_count=len(wallets))

    for wallet in wallets:
        if not wallet.wallet_address or not _is_valid_wallet(wallet.wallet_address):
            logger.warning("snapshot_invalid_wallet", sheet_row=wallet.sheet_row, wallet=wallet.wallet_address)
            summary.skipped.append(wallet.wallet_address)
            continue
        holding = service.get_token_holdings(wallet.wallet_address, token_mint)
        amount = holding.ui_amount if holding is not None else None
        if amount is None:
            logger.info("snapshot_no_holding", wallet=wallet.wallet_address)
            summary.skipped.append(wallet.wallet_address)
            continue
        row = roll_forward(wallet, amount)
        summary.rows.append(row)
        logger.info(
            "snapshot_row_pushed",
            sheet_row=row.sheet_row,
            values=row.values(),
        )

    if summary.rows:
        updates = [(row_range(sheet_name, row.sheet_row), [row.values()]) for row in summary.rows]
        sheets.batch_write(sheet_id, updates)
    summary.rows_updated = len(summary.rows)
    logger.info(
        "snapshot_finished",
        sheet_id=sheet_id,
        rows_updated=summary.rows_updated,
        skipped=len(summary.skipped),
    )
    return summary
