"""
Signature pagination over getConfirmedSignaturesForAddress2.

One call returns one page, newest first. before/until are opaque signature
cursors passed through untouched; both are always sent, null meaning no bound.
"""

from __future__ import annotations

from typing import Iterator

from solana_snapshot.rpc.decode import decode_list, retrieval
from solana_snapshot.rpc.models import SignatureEntry
from solana_snapshot.rpc.transport import RpcTransport
from solana_snapshot.snapshot_logging import get_logger

logger = get_logger(__name__)

SIGNATURES_METHOD = "getConfirmedSignaturesForAddress2"
DEFAULT_PAGE_LIMIT = 100


class SignaturePaginator:
    def __init__(self, transport: RpcTransport) -> None:
        self._transport = transport

    def get_signatures(
        self,
        address: str,
        limit: int = DEFAULT_PAGE_LIMIT,
        before: str | None = None,
        until: str | None = None,
    ) -> list[SignatureEntry]:
        """Fetch a single page of signatures for `address` (result, or [])."""
        params = [address, {"limit": limit, "before": before, "until": until}]
        with retrieval("Failed to retrieve transaction signatures", address=address):
            response = self._transport.send(SIGNATURES_METHOD, params)
            entries = decode_list(SignatureEntry, response.result)
        logger.debug(
            "signature_page_fetched",
            address=address,
            count=len(entries),
            before=before,
            until=until,
        )
        return entries

    def iter_signature_pages(
        self,
        address: str,
        limit: int = DEFAULT_PAGE_LIMIT,
        before: str | None = None,
        until: str | None = None,
        max_pages: int | None = None,
    ) -> Iterator[list[SignatureEntry]]:
        """
        Walk pages backwards in time by moving `before` to the last signature seen.

        Stops after an empty or short page, or after max_pages pages.
        """
        pages = 0
        cursor = before
        while max_pages is None or pages < max_pages:
            page = self.get_signatures(address, limit=limit, before=cursor, until=until)
            if not page:
                return
            pages += 1
            yield page
            if len(page) < limit:
                return
            cursor = page[-1].signature
