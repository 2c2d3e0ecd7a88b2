"""
Application-level exceptions.

TransportError and its subclasses stay inside the RPC layer. Callers of the
account, signature, transaction, and pipeline operations only ever see
RetrievalFailure, which carries a human-readable message and nothing else.
"""

from __future__ import annotations


class TransportError(Exception):
    """A single JSON-RPC exchange failed (network, status, body, or RPC error)."""


class HttpStatusError(TransportError):
    """Endpoint answered with a non-200 HTTP status."""

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"Solana RPC request failed with status code {status_code}")


class RpcError(TransportError):
    """Response body carried a JSON-RPC error object."""

    def __init__(self, code: int, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"Solana RPC error: {message} (code={code})")


class DecodeError(TransportError):
    """Response body was not JSON or did not match the expected shape."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Invalid response from Solana RPC: {detail}")


class RetrievalFailure(Exception):
    """Data could not be retrieved from the blockchain. Message text only."""


class StorageError(Exception):
    """Spreadsheet or transaction store operation failed."""


class ConfigurationError(Exception):
    """Settings from env (or .env) are missing or malformed."""
