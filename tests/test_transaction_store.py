"""
Pytest tests for the SQLAlchemy transaction store and record mapping.

Uses a temporary SQLite file per test.
"""

from __future__ import annotations

import pytest

from solana_snapshot.core.exceptions import StorageError
from solana_snapshot.rpc.models import TransactionRecord
from solana_snapshot.storage.transaction_store import TransactionStore, record_from_transaction

from conftest import FakeRpc

SOURCE = "9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka"
DESTINATION = "7F1WzVNQ1Qpurqxxdyv3UrFQR3uoNepULVW9A4bAJ5nZ"


def _record(tx_id: str, **overrides) -> dict:
    record = {
        "transaction_id": tx_id,
        "blockchain": "solana",
        "from_address": SOURCE,
        "to_address": DESTINATION,
        "amount": 1.25,
        "timestamp": 1700000000,
    }
    record.update(overrides)
    return record


@pytest.fixture
def store(tmp_path):
    s = TransactionStore(f"sqlite:///{tmp_path / 'transactions.db'}")
    s.init_db()
    yield s
    s.dispose()


def test_put_then_get(store):
    store.put(_record("Sig1"))

    assert store.get("Sig1") == _record("Sig1")
    assert store.get("Unknown") is None


def test_put_is_upsert(store):
    store.put(_record("Sig1"))
    store.put(_record("Sig1", amount=9.0))

    assert store.get("Sig1")["amount"] == 9.0
    assert len(store.scan()) == 1


def test_put_allows_missing_timestamp(store):
    store.put(_record("Sig1", timestamp=None))
    assert store.get("Sig1")["timestamp"] is None


def test_put_rejects_incomplete_record(store):
    with pytest.raises(StorageError, match="from_address"):
        store.put(_record("Sig1", from_address=""))


def test_scan_filters_and_order(store):
    store.put(_record("SigB", blockchain="solana"))
    store.put(_record("SigA", blockchain="solana", from_address=DESTINATION))
    store.put(_record("SigC", blockchain="devnet"))

    assert [r["transaction_id"] for r in store.scan()] == ["SigA", "SigB", "SigC"]
    assert [r["transaction_id"] for r in store.scan({"blockchain": "solana"})] == ["SigA", "SigB"]
    assert [
        r["transaction_id"]
        for r in store.scan({"blockchain": "solana", "from_address": SOURCE})
    ] == ["SigB"]


def test_scan_unknown_field(store):
    with pytest.raises(StorageError, match="Unknown filter"):
        store.scan({"color": "blue"})


def test_record_from_transaction_uses_first_transfer():
    body = FakeRpc.transaction(
        "Sig1",
        block_time=1700000123,
        transfer={
            "program": "system",
            "parsed": {
                "type": "transfer",
                "info": {"source": SOURCE, "destination": DESTINATION, "lamports": 250_000_000},
            },
        },
    )
    body["transaction"]["message"]["instructions"].append(
        {
            "program": "system",
            "parsed": {"type": "transfer", "info": {"source": DESTINATION, "destination": SOURCE, "lamports": 1}},
        }
    )

    record = record_from_transaction(TransactionRecord.model_validate(body))

    assert record == {
        "transaction_id": "Sig1",
        "blockchain": "solana",
        "from_address": SOURCE,
        "to_address": DESTINATION,
        "amount": 0.25,
        "timestamp": 1700000123,
    }


def test_record_from_transaction_without_transfer():
    tx = TransactionRecord.model_validate(FakeRpc.transaction("Sig1"))
    assert record_from_transaction(tx) is None
