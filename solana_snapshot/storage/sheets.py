"""
Spreadsheet collaborator: rows in, rows out.

The snapshot job only needs read_rows/write_rows (plus a batch form of the
latter). CsvSpreadsheetClient stores each tab of a spreadsheet as
<base_dir>/<sheet_id>/<tab>.csv and understands A1 row ranges:

    "Sheet1"        whole tab
    "Sheet1!3:3"    row 3 (1-based)
    "Sheet1!2:10"   rows 2..10 inclusive
"""

from __future__ import annotations

import csv
import os
import re
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, Sequence

from solana_snapshot.core.exceptions import StorageError
from solana_snapshot.snapshot_logging import get_logger

logger = get_logger(__name__)

_RANGE_RE = re.compile(r"^(?P<tab>[^!]+?)(?:!(?P<start>\d+):(?P<end>\d+))?$")

Row = list[Any]


class SpreadsheetClient(Protocol):
    def read_rows(self, sheet_id: str, range: str) -> list[list[str]]: ...

    def write_rows(self, sheet_id: str, range: str, rows: Sequence[Row]) -> None: ...

    def batch_write(self, sheet_id: str, updates: Sequence[tuple[str, Sequence[Row]]]) -> None: ...


@dataclass(frozen=True)
class RowRange:
    tab: str
    start: int | None = None  # 1-based, inclusive
    end: int | None = None

    @classmethod
    def parse(cls, value: str) -> "RowRange":
        m = _RANGE_RE.match((value or "").strip())
        if not m:
            raise StorageError(f"Invalid sheet range: {value!r}")
        if m.group("start") is None:
            return cls(tab=m.group("tab"))
        start, end = int(m.group("start")), int(m.group("end"))
        if start < 1 or end < start:
            raise StorageError(f"Invalid sheet range: {value!r}")
        return cls(tab=m.group("tab"), start=start, end=end)

    @property
    def whole_tab(self) -> bool:
        return self.start is None


def row_range(tab: str, row: int) -> str:
    """A1 range for a single 1-based row, e.g. Sheet1!3:3."""
    return f"{tab}!{row}:{row}"


class CsvSpreadsheetClient:
    """CSV-file backed spreadsheet. One directory per sheet id, one file per tab."""

    def __init__(self, base_dir: str | Path) -> None:
        self._base_dir = Path(base_dir)

    def _tab_path(self, sheet_id: str, tab: str) -> Path:
        if not sheet_id or "/" in sheet_id or "\\" in sheet_id or sheet_id.startswith("."):
            raise StorageError(f"Invalid sheet id: {sheet_id!r}")
        return self._base_dir / sheet_id / f"{tab}.csv"

    def _load(self, path: Path) -> list[list[str]]:
        if not path.exists():
            return []
        try:
            with open(path, newline="", encoding="utf-8") as f:
                return [list(row) for row in csv.reader(f)]
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    def _store(self, path: Path, rows: list[list[Any]]) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", newline="", encoding="utf-8") as f:
                csv.writer(f).writerows(rows)
            os.replace(tmp, path)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e

    def read_rows(self, sheet_id: str, range: str) -> list[list[str]]:
        rr = RowRange.parse(range)
        rows = self._load(self._tab_path(sheet_id, rr.tab))
        if rr.whole_tab:
            return rows
        return rows[rr.start - 1 : rr.end]

    def write_rows(self, sheet_id: str, range: str, rows: Sequence[Row]) -> None:
        self.batch_write(sheet_id, [(range, rows)])

    def batch_write(self, sheet_id: str, updates: Sequence[tuple[str, Sequence[Row]]]) -> None:
        """Apply several range writes with one read-modify-write per tab."""
        by_tab: dict[str, list[tuple[RowRange, Sequence[Row]]]] = {}
        for range_str, rows in updates:
            rr = RowRange.parse(range_str)
            by_tab.setdefault(rr.tab, []).append((rr, rows))

        for tab, tab_updates in by_tab.items():
            path = self._tab_path(sheet_id, tab)
            current = self._load(path)
            for rr, rows in tab_updates:
                values = [["" if v is None else v for v in row] for row in rows]
                if rr.whole_tab:
                    current = values
                    continue
                if len(values) > rr.end - rr.start + 1:
                    raise StorageError(
                        f"{len(values)} rows do not fit range {tab}!{rr.start}:{rr.end}"
                    )
                while len(current) < rr.start - 1 + len(values):
                    current.append([])
                for offset, row in enumerate(values):
                    current[rr.start - 1 + offset] = row
            self._store(path, current)
            logger.debug("sheet_tab_written", sheet_id=sheet_id, tab=tab, updates=len(tab_updates))
