"""
Pytest tests for the FastAPI trigger: /health, /snapshot, /transactions/{token_hash}.

Dependencies are overridden with the fake-RPC service, an in-memory sheet,
and a temporary SQLite transaction store.
"""

from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from solana_snapshot.api_server.server import (
    app,
    get_service,
    get_settings,
    get_sheets,
    get_store,
)
from solana_snapshot.config.env import SnapshotSettings
from solana_snapshot.storage.sheets import CsvSpreadsheetClient
from solana_snapshot.storage.transaction_store import TransactionStore

from conftest import FakeRpc

MINT = "BfxhMerBkBhRUGn4tX5YrBRqLqN8VjvUXHhU7K9Fpump"
WALLET = "9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka"
DESTINATION = "7F1WzVNQ1Qpurqxxdyv3UrFQR3uoNepULVW9A4bAJ5nZ"


@pytest.fixture
def sheets(tmp_path) -> CsvSpreadsheetClient:
    return CsvSpreadsheetClient(tmp_path / "sheets")


@pytest.fixture
def store(tmp_path):
    s = TransactionStore(f"sqlite:///{tmp_path / 'api.db'}")
    s.init_db()
    yield s
    s.dispose()


@pytest.fixture
def client(service, sheets, store):
    """TestClient with every external collaborator overridden."""
    settings = SnapshotSettings(sheet_id="sheet-1", token_mint=MINT)
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_service] = lambda: service
    app.dependency_overrides[get_sheets] = lambda: sheets
    app.dependency_overrides[get_store] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_snapshot_updates_sheet(client, fake_rpc, sheets):
    sheets.write_rows(
        "sheet-1",
        "Sheet1",
        [["Who", "Wallet Address", "Yesterday", "Today", "Diff"], ["alice", WALLET, "1", "4", "3"]],
    )
    fake_rpc.responder = lambda method, params: FakeRpc.result([FakeRpc.token_account("Acct1", MINT, 10.0)])

    r = client.get("/snapshot")

    assert r.status_code == 200
    data = r.json()
    assert data["sheet_id"] == "sheet-1"
    assert data["rows_updated"] == 1
    assert data["rows"][0]["diff"] == 6.0
    assert sheets.read_rows("sheet-1", "Sheet1!2:2") == [["alice", WALLET, "4.0", "10.0", "6.0"]]


def test_snapshot_retrieval_failure_is_500(client, fake_rpc, sheets):
    sheets.write_rows("sheet-1", "Sheet1", [["Who", "Wallet Address"], ["alice", WALLET]])
    fake_rpc.responder = lambda method, params: httpx.Response(503)

    r = client.get("/snapshot")

    assert r.status_code == 500
    assert "503" in r.json()["error"]


def test_snapshot_missing_settings_is_500(monkeypatch):
    monkeypatch.setenv("SNAPSHOT_SHEET_ID", "")
    monkeypatch.setenv("SNAPSHOT_TOKEN_MINT", "")
    r = TestClient(app).get("/snapshot")
    assert r.status_code == 500
    assert "SNAPSHOT_SHEET_ID" in r.json()["error"]


def test_transactions_stores_transfers(client, fake_rpc, store):
    transfer = {
        "program": "system",
        "parsed": {
            "type": "transfer",
            "info": {"source": WALLET, "destination": DESTINATION, "lamports": 3_000_000_000},
        },
    }

    def respond(method, params):
        if method == "getProgramAccounts":
            return FakeRpc.result([FakeRpc.token_account("A1", MINT)])
        if method == "getConfirmedSignaturesForAddress2":
            return FakeRpc.result([{"signature": "S1"}, {"signature": "S2"}])
        if params[0] == "S1":
            return FakeRpc.result(FakeRpc.transaction("S1", transfer=transfer))
        return FakeRpc.result(FakeRpc.transaction("S2"))

    fake_rpc.responder = respond

    r = client.get(f"/transactions/{MINT}", params={"limit": 5})

    assert r.status_code == 200
    data = r.json()
    assert data["token_hash"] == MINT
    assert data["count"] == 2
    assert data["stored"] == 1
    assert [t["transaction"]["signatures"][0] for t in data["transactions"]] == ["S1", "S2"]
    assert store.get("S1")["amount"] == 3.0
    assert store.get("S2") is None
    page_params = [c["params"][1] for c in fake_rpc.calls if c["method"] == "getConfirmedSignaturesForAddress2"]
    assert page_params == [{"limit": 5, "before": None, "until": None}]


def test_transactions_retrieval_failure_is_500(client, fake_rpc):
    fake_rpc.responder = lambda method, params: httpx.Response(503)

    r = client.get(f"/transactions/{MINT}")

    assert r.status_code == 500
    error = r.json()["error"]
    assert error.startswith("Failed to retrieve Solana transactions: ")
    assert "503" in error


def test_transactions_invalid_token_hash(client, fake_rpc):
    r = client.get("/transactions/not-a-token")
    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid token hash"
    assert fake_rpc.calls == []


def test_transactions_limit_bounds(client):
    assert client.get(f"/transactions/{MINT}", params={"limit": 0}).status_code == 422
    assert client.get(f"/transactions/{MINT}", params={"limit": 1001}).status_code == 422


def test_malformed_rpc_config_is_500_error(monkeypatch, store):
    """A bad SOLANA_RPC_* value surfaces as {"error": ...}, not a traceback."""
    monkeypatch.setenv("SOLANA_RPC_MAX_WORKERS", "many")
    app.dependency_overrides[get_store] = lambda: store
    try:
        r = TestClient(app).get(f"/transactions/{MINT}")
    finally:
        app.dependency_overrides.clear()

    assert r.status_code == 500
    assert "SOLANA_RPC_MAX_WORKERS" in r.json()["error"]
