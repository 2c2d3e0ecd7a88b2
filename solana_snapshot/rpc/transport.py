"""
JSON-RPC transport: one POST per call against the configured Solana endpoint.

send_raw() returns the decoded envelope and only raises for failures below
the JSON-RPC layer (network, HTTP status, undecodable body). send() also
raises RpcError when the envelope carries an error object, and DecodeError
when it carries neither result nor error. Every failure is logged with the
method name before it propagates.
"""

from __future__ import annotations

from typing import Any, Sequence

import httpx
from pydantic import ValidationError

from solana_snapshot.config.env import SolanaConfig, mask_rpc_url
from solana_snapshot.core.exceptions import (
    DecodeError,
    HttpStatusError,
    RpcError,
    TransportError,
)
from solana_snapshot.rpc.models import RpcRequest, RpcResponse
from solana_snapshot.rpc.rate_limit import RateLimiter
from solana_snapshot.snapshot_logging import bind_method, get_logger

logger = get_logger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


class RpcTransport:
    """
    Blocking JSON-RPC client for one endpoint.

    Args:
        config: endpoint URL, timeout, optional requests-per-second cap.
        client: optional httpx.Client (tests pass one built on MockTransport).
            A client passed in is not closed by close().
        rate_limiter: overrides the limiter built from config.requests_per_sec.
    """

    def __init__(
        self,
        config: SolanaConfig,
        *,
        client: httpx.Client | None = None,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        self._rpc_url = config.rpc_url
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=httpx.Timeout(config.request_timeout_sec)
        )
        if rate_limiter is None and config.requests_per_sec:
            rate_limiter = RateLimiter(config.requests_per_sec)
        self._rate_limiter = rate_limiter

    @property
    def rpc_url(self) -> str:
        return self._rpc_url

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "RpcTransport":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def send(self, method: str, params: Sequence[Any] | None = None) -> RpcResponse:
        """Send one call; raise TransportError unless the response holds a usable result."""
        response = self.send_raw(method, params)
        if response.has_error:
            err = response.error
            bind_method(method).error(
                "rpc_error", code=err.code, error_message=err.message
            )
            raise RpcError(err.code, err.message)
        if not response.has_result:
            bind_method(method).error("rpc_missing_result")
            raise DecodeError("response has neither result nor error")
        return response

    def send_raw(self, method: str, params: Sequence[Any] | None = None) -> RpcResponse:
        """Send one call; return the envelope as-is, error object included."""
        if not method or not method.strip():
            raise ValueError("method must be non-empty")
        request = RpcRequest(method=method, params=list(params or []))
        log = bind_method(method)

        if self._rate_limiter is not None:
            waited = self._rate_limiter.acquire()
            if waited:
                log.debug("rpc_rate_limited", waited_sec=round(waited, 3))

        try:
            resp = self._client.post(
                self._rpc_url,
                json=request.model_dump(),
                headers=JSON_HEADERS,
            )
        except httpx.HTTPError as e:
            log.error(
                "rpc_request_failed",
                rpc_url=mask_rpc_url(self._rpc_url),
                error=str(e),
            )
            raise TransportError(f"Solana RPC request failed: {e}") from e

        if resp.status_code != 200:
            log.error("rpc_http_status", status_code=resp.status_code)
            raise HttpStatusError(resp.status_code)

        try:
            body = resp.json()
        except ValueError as e:
            log.error("rpc_decode_failed", status_code=resp.status_code, error=str(e))
            raise DecodeError("body is not valid JSON") from e
        if not isinstance(body, dict):
            log.error("rpc_decode_failed", body_type=type(body).__name__)
            raise DecodeError(f"expected a JSON object, got {type(body).__name__}")

        try:
            return RpcResponse.model_validate(body)
        except ValidationError as e:
            log.error("rpc_decode_failed", error=str(e))
            raise DecodeError(str(e)) from e
