"""
FastAPI server: HTTP trigger for the snapshot job and the token transaction pipeline.

GET /snapshot runs the holdings snapshot synchronously and returns its summary.
GET /transactions/{token_hash} runs the aggregation pipeline and stores every
transaction that carries a parsed transfer. RetrievalFailure maps to HTTP 500
with {"error": message}. Config via env (see solana_snapshot.config.env).
"""

from __future__ import annotations

import functools
from typing import Any, Iterator

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from solders.pubkey import Pubkey

from solana_snapshot.config.env import (
    SnapshotSettings,
    get_database_url,
    get_snapshot_settings,
)
from solana_snapshot.core.exceptions import ConfigurationError, RetrievalFailure, StorageError
from solana_snapshot.rpc.signatures import DEFAULT_PAGE_LIMIT
from solana_snapshot.service import SolanaTransactionService
from solana_snapshot.snapshot.holdings import SnapshotSummary, run_snapshot
from solana_snapshot.snapshot_logging import get_logger
from solana_snapshot.storage.sheets import CsvSpreadsheetClient, SpreadsheetClient
from solana_snapshot.storage.transaction_store import TransactionStore, record_from_transaction

logger = get_logger(__name__)


# -----------------------------------------------------------------------------
# Config and dependencies
# -----------------------------------------------------------------------------


def get_settings() -> SnapshotSettings:
    try:
        return get_snapshot_settings()
    except ValueError as e:
        logger.error("api_settings_invalid", error=str(e))
        raise ConfigurationError(str(e)) from e


def get_service() -> Iterator[SolanaTransactionService]:
    """Dependency: one service (and HTTP connection pool) per request."""
    try:
        service = SolanaTransactionService()
    except ValueError as e:
        logger.error("api_solana_config_invalid", error=str(e))
        raise ConfigurationError(str(e)) from e
    try:
        yield service
    finally:
        service.close()


def get_sheets(settings: SnapshotSettings = Depends(get_settings)) -> SpreadsheetClient:
    return CsvSpreadsheetClient(settings.sheets_dir)


@functools.lru_cache(maxsize=4)
def _store_for(url: str) -> TransactionStore:
    store = TransactionStore(url)
    store.init_db()
    return store


def get_store() -> TransactionStore:
    """Dependency: app-scoped store per DATABASE_URL; tables created on first use."""
    return _store_for(get_database_url())


# -----------------------------------------------------------------------------
# Response models
# -----------------------------------------------------------------------------


class TransactionsResponse(BaseModel):
    """GET /transactions/{token_hash} response."""

    token_hash: str = Field(..., description="Token hash the program accounts were matched on")
    count: int = Field(..., description="Number of transactions retrieved")
    stored: int = Field(..., description="Number of transactions written to the store")
    transactions: list[dict[str, Any]] = Field(default_factory=list, description="jsonParsed getTransaction results, account-major order")


class ErrorResponse(BaseModel):
    error: str


# -----------------------------------------------------------------------------
# App and routes
# -----------------------------------------------------------------------------

app = FastAPI(
    title="Solana Snapshot API",
    description="Trigger token-holding snapshots and token transaction retrieval.",
    version="0.1.0",
)


@app.exception_handler(RetrievalFailure)
async def retrieval_failure_handler(request: Request, exc: RetrievalFailure) -> JSONResponse:
    logger.error("api_retrieval_failed", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("api_storage_failed", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.get("/health")
def health() -> dict[str, str]:
    """Liveness probe: API is up."""
    return {"status": "ok"}


@app.get(
    "/snapshot",
    response_model=SnapshotSummary,
    responses={500: {"model": ErrorResponse}},
)
def snapshot(
    settings: SnapshotSettings = Depends(get_settings),
    service: SolanaTransactionService = Depends(get_service),
    sheets: SpreadsheetClient = Depends(get_sheets),
) -> SnapshotSummary:
    """Run the token-holdings snapshot against the configured sheet and mint."""
    logger.info("api_snapshot_called", sheet_id=settings.sheet_id)
    return run_snapshot(
        service,
        sheets,
        settings.sheet_id,
        settings.token_mint,
        sheet_name=settings.sheet_name,
    )


@app.get(
    "/transactions/{token_hash}",
    response_model=TransactionsResponse,
    responses={500: {"model": ErrorResponse}},
)
def token_transactions(
    token_hash: str,
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=1000),
    before: str | None = Query(None),
    until: str | None = Query(None),
    service: SolanaTransactionService = Depends(get_service),
    store: TransactionStore = Depends(get_store),
) -> TransactionsResponse:
    """Fetch transactions for every account matching token_hash and store their transfers."""
    token_hash = token_hash.strip()
    try:
        Pubkey.from_string(token_hash)
    except Exception:
        raise HTTPException(status_code=400, detail="Invalid token hash")
    logger.info("api_transactions_called", token_hash=token_hash, limit=limit)

    transactions = service.get_transactions_for_token(token_hash, limit, before, until)
    stored = 0
    for tx in transactions:
        record = record_from_transaction(tx)
        if record is None:
            continue
        store.put(record)
        stored += 1

    return TransactionsResponse(
        token_hash=token_hash,
        count=len(transactions),
        stored=stored,
        transactions=[tx.to_json() for tx in transactions],
    )
