"""
Helpers shared by the RPC operations: validate result payloads into models
and turn transport failures into RetrievalFailure.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, TypeVar

from pydantic import BaseModel, ValidationError

from solana_snapshot.core.exceptions import DecodeError, RetrievalFailure, TransportError
from solana_snapshot.snapshot_logging import get_logger

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


def decode_one(model: type[M], value: Any) -> M:
    """Validate a single payload; wrong-typed fields raise DecodeError."""
    try:
        return model.model_validate(value)
    except ValidationError as e:
        raise DecodeError(f"{model.__name__}: {e.error_count()} invalid field(s)") from e


def decode_list(model: type[M], value: Any) -> list[M]:
    """Validate a list payload. None decodes to an empty list."""
    if value is None:
        return []
    if not isinstance(value, list):
        raise DecodeError(f"expected a list of {model.__name__}, got {type(value).__name__}")
    return [decode_one(model, item) for item in value]


def context_value(result: Any) -> Any:
    """Unwrap {"context": ..., "value": ...} results; None when absent."""
    if result is None:
        return None
    if not isinstance(result, dict):
        raise DecodeError(f"expected an object with 'value', got {type(result).__name__}")
    return result.get("value")


@contextmanager
def retrieval(context: str, **fields: Any) -> Iterator[None]:
    """Log a TransportError and re-raise it as RetrievalFailure("<context>: <message>")."""
    try:
        yield
    except TransportError as e:
        logger.error("rpc_retrieval_failed", context=context, error=str(e), **fields)
        # message text only; transport details stay out of the caller's reach
        raise RetrievalFailure(f"{context}: {e}") from None
