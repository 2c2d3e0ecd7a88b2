"""
Environment variable loading and validation for the snapshot service.

- SOLANA_NETWORK: devnet | mainnet (default: mainnet)
- SOLANA_RPC_URL: RPC endpoint (read from .env)
- HELIUS_API_KEY: Helius API key (fallback for RPC URL when SOLANA_RPC_URL is unset)
- SPL_TOKEN_PROGRAM_ID: SPL token program scanned for wallet holdings
- SLP_PROGRAM_ID: program scanned by the token-hash transaction pipeline
- SOLANA_RPC_TIMEOUT_SEC, SOLANA_RPC_RATE_LIMIT, SOLANA_RPC_MAX_WORKERS
- SNAPSHOT_SHEET_ID, SNAPSHOT_SHEET_NAME, SNAPSHOT_SHEETS_DIR, SNAPSHOT_TOKEN_MINT
- DATABASE_URL: SQLAlchemy URL for the transaction store (default: SQLite file)
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is solana_snapshot/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

SPL_TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"

DEVNET_RPC_URL = "https://api.devnet.solana.com"
MAINNET_RPC_URL = "https://api.mainnet-beta.solana.com"
HELIUS_MAINNET_URL_TEMPLATE = "https://mainnet.helius-rpc.com/?api-key={key}"
HELIUS_DEVNET_URL_TEMPLATE = "https://devnet.helius-rpc.com/?api-key={key}"

DEFAULT_REQUEST_TIMEOUT_SEC = 30.0
DEFAULT_SHEET_NAME = "Sheet1"
DEFAULT_DATABASE_URL = "sqlite:///transactions.db"


@dataclass(frozen=True)
class SolanaConfig:
    """Endpoint and program ids handed to the transport and account query."""

    rpc_url: str = MAINNET_RPC_URL
    spl_token_program_id: str = SPL_TOKEN_PROGRAM_ID
    slp_program_id: str = SPL_TOKEN_PROGRAM_ID
    request_timeout_sec: float = DEFAULT_REQUEST_TIMEOUT_SEC
    requests_per_sec: float | None = None  # None disables the rate limiter
    max_workers: int = 1  # 1 = fully sequential pipeline

    def __post_init__(self) -> None:
        if not self.rpc_url.strip():
            raise ValueError("rpc_url must be non-empty")
        if self.request_timeout_sec <= 0:
            raise ValueError("request_timeout_sec must be positive")
        if self.requests_per_sec is not None and self.requests_per_sec <= 0:
            raise ValueError("requests_per_sec must be positive when set")
        if self.max_workers < 1:
            raise ValueError("max_workers must be >= 1")


@dataclass(frozen=True)
class SnapshotSettings:
    """Where the holdings snapshot reads and writes, and which mint it tracks."""

    sheet_id: str
    token_mint: str
    sheet_name: str = DEFAULT_SHEET_NAME
    sheets_dir: Path = Path("sheets")


def load_snapshot_env() -> None:
    """Load .env from project root. Safe to call multiple times."""
    load_dotenv(_ENV_PATH)


def _env(name: str) -> str:
    return (os.getenv(name) or "").strip()


def _env_float(name: str, default: float | None) -> float | None:
    raw = _env(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def get_solana_network() -> str:
    """
    Return SOLANA_NETWORK from env: devnet | mainnet.
    Default: mainnet.
    """
    load_snapshot_env()
    raw = (_env("SOLANA_NETWORK") or _env("SOLANA_CLUSTER") or "mainnet").lower()
    return "devnet" if raw == "devnet" else "mainnet"


def get_solana_rpc_url() -> str:
    """
    Resolve Solana RPC URL from env.
    Order: SOLANA_RPC_URL > HELIUS_API_KEY (network-specific) > devnet/mainnet default.
    """
    load_snapshot_env()
    url = _env("SOLANA_RPC_URL")
    if url:
        return url
    network = get_solana_network()
    key = _env("HELIUS_API_KEY")
    if key:
        if network == "devnet":
            return HELIUS_DEVNET_URL_TEMPLATE.format(key=key)
        return HELIUS_MAINNET_URL_TEMPLATE.format(key=key)
    return DEVNET_RPC_URL if network == "devnet" else MAINNET_RPC_URL


def get_solana_config() -> SolanaConfig:
    """Build SolanaConfig from env. Raises ValueError on malformed numbers."""
    load_snapshot_env()
    return SolanaConfig(
        rpc_url=get_solana_rpc_url(),
        spl_token_program_id=_env("SPL_TOKEN_PROGRAM_ID") or SPL_TOKEN_PROGRAM_ID,
        slp_program_id=_env("SLP_PROGRAM_ID") or SPL_TOKEN_PROGRAM_ID,
        request_timeout_sec=_env_float("SOLANA_RPC_TIMEOUT_SEC", DEFAULT_REQUEST_TIMEOUT_SEC),
        requests_per_sec=_env_float("SOLANA_RPC_RATE_LIMIT", None),
        max_workers=_env_int("SOLANA_RPC_MAX_WORKERS", 1),
    )


def get_snapshot_settings(
    sheet_id: str | None = None,
    token_mint: str | None = None,
    sheet_name: str | None = None,
    sheets_dir: str | Path | None = None,
) -> SnapshotSettings:
    """
    Build SnapshotSettings. Each explicit argument wins over its SNAPSHOT_* env var.

    Sheet id and token mint are required; the ValueError names every one
    that is missing from both places.
    """
    load_snapshot_env()
    sheet_id = (sheet_id or "").strip() or _env("SNAPSHOT_SHEET_ID")
    token_mint = (token_mint or "").strip() or _env("SNAPSHOT_TOKEN_MINT")
    missing = [
        name
        for name, value in (("SNAPSHOT_SHEET_ID", sheet_id), ("SNAPSHOT_TOKEN_MINT", token_mint))
        if not value
    ]
    if missing:
        raise ValueError(f"{' and '.join(missing)} must be set")
    return SnapshotSettings(
        sheet_id=sheet_id,
        token_mint=token_mint,
        sheet_name=sheet_name or _env("SNAPSHOT_SHEET_NAME") or DEFAULT_SHEET_NAME,
        sheets_dir=Path(sheets_dir or _env("SNAPSHOT_SHEETS_DIR") or "sheets"),
    )


def get_database_url() -> str:
    """Return DATABASE_URL for the transaction store, or a local SQLite file."""
    load_snapshot_env()
    return _env("DATABASE_URL") or DEFAULT_DATABASE_URL


def mask_rpc_url(url: str) -> str:
    """Hide an api-key query value so the URL can be logged."""
    if "api-key=" in url:
        return url.split("api-key=")[0] + "api-key=***"
    return url
