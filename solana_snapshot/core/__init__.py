"""
Core utilities: exceptions shared by the RPC layer, storage, and surfaces.
"""

from solana_snapshot.core.exceptions import (  # noqa: F401
    ConfigurationError,
    DecodeError,
    HttpStatusError,
    RetrievalFailure,
    RpcError,
    StorageError,
    TransportError,
)

__all__ = [
    "ConfigurationError",
    "DecodeError",
    "HttpStatusError",
    "RetrievalFailure",
    "RpcError",
    "StorageError",
    "TransportError",
]
