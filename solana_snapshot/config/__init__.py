"""
Configuration for the snapshot service.

Loads settings from environment variables and an optional .env file and
exposes them as frozen dataclasses passed explicitly into the RPC layer.
"""

from solana_snapshot.config.env import (  # noqa: F401
    SPL_TOKEN_PROGRAM_ID,
    SnapshotSettings,
    SolanaConfig,
    get_database_url,
    get_snapshot_settings,
    get_solana_config,
)

__all__ = [
    "SPL_TOKEN_PROGRAM_ID",
    "SnapshotSettings",
    "SolanaConfig",
    "get_database_url",
    "get_snapshot_settings",
    "get_solana_config",
]
