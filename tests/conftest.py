"""
Pytest fixtures for solana_snapshot tests.

The Solana RPC endpoint is replaced by httpx.MockTransport driven by a
FakeRpc: each test supplies a responder(method, params) returning either a
JSON body (sent with status 200) or a ready-made httpx.Response. Every
request body is recorded on FakeRpc.calls.
"""

from __future__ import annotations

import json
import os
from typing import Any, Callable

# Before solana_snapshot configures structlog: debug records must reach capture_logs
os.environ["LOG_LEVEL"] = "DEBUG"

import httpx  # noqa: E402
import pytest  # noqa: E402

from solana_snapshot.config.env import SolanaConfig  # noqa: E402
from solana_snapshot.rpc.transport import RpcTransport  # noqa: E402
from solana_snapshot.service import SolanaTransactionService  # noqa: E402

RPC_URL = "https://rpc.test.invalid"
SLP_PROGRAM_ID = "SLPProgram1111111111111111111111111111111111"

Responder = Callable[[str, list[Any]], Any]


class FakeRpc:
    def __init__(self, responder: Responder | None = None) -> None:
        self.responder = responder
        self.calls: list[dict[str, Any]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.calls.append(body)
        if self.responder is None:
            raise AssertionError(f"unexpected RPC call: {body['method']}")
        out = self.responder(body["method"], body["params"])
        if isinstance(out, httpx.Response):
            return out
        return httpx.Response(200, json=out)

    @property
    def methods(self) -> list[str]:
        return [c["method"] for c in self.calls]

    @staticmethod
    def result(value: Any) -> dict[str, Any]:
        return {"jsonrpc": "2.0", "id": 1, "result": value}

    @staticmethod
    def error(code: int = -32009, message: str = "Transaction not available") -> dict[str, Any]:
        return {"jsonrpc": "2.0", "id": 1, "error": {"code": code, "message": message}}

    @staticmethod
    def token_account(pubkey: str, mint: str, ui_amount: float | None = 1.0) -> dict[str, Any]:
        return {
            "pubkey": pubkey,
            "account": {
                "data": {
                    "parsed": {
                        "info": {
                            "mint": mint,
                            "owner": "9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka",
                            "state": "initialized",
                            "tokenAmount": {
                                "amount": str(int((ui_amount or 0) * 1_000_000)),
                                "decimals": 6,
                                "uiAmount": ui_amount,
                                "uiAmountString": str(ui_amount),
                            },
                        },
                        "type": "account",
                    },
                    "program": "spl-token",
                    "space": 165,
                },
                "executable": False,
                "lamports": 2039280,
                "owner": "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA",
                "rentEpoch": 18446744073709551615,
            },
        }

    @staticmethod
    def transaction(signature: str, block_time: int | None = 1700000000, transfer: dict | None = None) -> dict[str, Any]:
        instructions = []
        if transfer is not None:
            instructions.append(transfer)
        return {
            "slot": 250000000,
            "blockTime": block_time,
            "meta": {"err": None, "fee": 5000},
            "transaction": {
                "signatures": [signature],
                "message": {
                    "accountKeys": [],
                    "instructions": instructions,
                    "recentBlockhash": "11111111111111111111111111111111",
                },
            },
        }


@pytest.fixture
def fake_rpc() -> FakeRpc:
    return FakeRpc()


@pytest.fixture
def solana_config() -> SolanaConfig:
    return SolanaConfig(rpc_url=RPC_URL, slp_program_id=SLP_PROGRAM_ID)


@pytest.fixture
def make_transport(fake_rpc):
    """Factory: RpcTransport over a MockTransport bound to fake_rpc."""
    transports: list[RpcTransport] = []

    def _make(config: SolanaConfig) -> RpcTransport:
        client = httpx.Client(transport=httpx.MockTransport(fake_rpc))
        transport = RpcTransport(config, client=client)
        transports.append(transport)
        return transport

    yield _make
    for t in transports:
        t._client.close()


@pytest.fixture
def make_service(solana_config, make_transport):
    """Factory: SolanaTransactionService on the fake RPC; config fields may be overridden."""

    def _make(**overrides: Any) -> SolanaTransactionService:
        config = solana_config
        if overrides:
            fields = {**solana_config.__dict__, **overrides}
            config = SolanaConfig(**fields)
        return SolanaTransactionService(config, transport=make_transport(config))

    return _make


@pytest.fixture
def service(make_service) -> SolanaTransactionService:
    return make_service()
