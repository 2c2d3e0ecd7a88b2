"""
Tests for snapshot_logging: import without cycles, event capture, api-key masking.
"""

from __future__ import annotations

from structlog.testing import capture_logs

from solana_snapshot.snapshot_logging import bind_method, get_logger
from solana_snapshot.snapshot_logging.logger import _event_type, _redact_api_keys


def test_get_logger_binds_module_name():
    with capture_logs() as logs:
        get_logger("solana_snapshot.snapshot").info("snapshot_started", sheet_id="sheet-1")

    assert logs == [
        {
            "event": "snapshot_started",
            "logger": "solana_snapshot.snapshot",
            "sheet_id": "sheet-1",
            "log_level": "info",
        }
    ]


def test_bind_method_carries_rpc_method():
    with capture_logs() as logs:
        bind_method("getTransaction").warning("rpc_error", code=-32009)

    assert logs[0]["method"] == "getTransaction"
    assert logs[0]["logger"] == "solana_snapshot.rpc"
    assert logs[0]["log_level"] == "warning"


def test_redact_api_keys():
    event = {
        "event": "rpc_request_failed",
        "rpc_url": "https://mainnet.helius-rpc.com/?api-key=secret123",
        "error": "Client error for url 'https://x.test/?api-key=abc&foo=1'",
        "status_code": 503,
    }

    out = _redact_api_keys(None, "error", event)

    assert out["rpc_url"] == "https://mainnet.helius-rpc.com/?api-key=***"
    assert out["error"] == "Client error for url 'https://x.test/?api-key=***&foo=1'"
    assert out["status_code"] == 503


def test_event_type_rename():
    out = _event_type(None, "info", {"event": "token_transactions_retrieved"})
    assert out == {
        "event_type": "token_transactions_retrieved",
        "message": "token_transactions_retrieved",
    }
