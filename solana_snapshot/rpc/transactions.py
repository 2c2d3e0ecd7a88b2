"""
Transaction fetch over getTransaction (jsonParsed, confirmed).

An RPC error for a single signature is a miss, not a failure: it is logged
as a warning and yields None so a batch keeps going. Transport failures
still raise RetrievalFailure.
"""

from __future__ import annotations

from solana_snapshot.rpc.decode import decode_one, retrieval
from solana_snapshot.rpc.models import TransactionRecord
from solana_snapshot.rpc.transport import RpcTransport
from solana_snapshot.snapshot_logging import get_logger

logger = get_logger(__name__)

TRANSACTION_OPTIONS = {"encoding": "jsonParsed", "commitment": "confirmed"}


class TransactionFetcher:
    def __init__(self, transport: RpcTransport) -> None:
        self._transport = transport

    def get_transaction(self, signature: str) -> TransactionRecord | None:
        params = [signature, dict(TRANSACTION_OPTIONS)]
        with retrieval(f"Failed to retrieve transaction {signature}", signature=signature):
            response = self._transport.send_raw("getTransaction", params)
            if response.has_error:
                logger.warning(
                    "transaction_rpc_error",
                    signature=signature,
                    code=response.error.code,
                    error_message=response.error.message,
                )
                return None
            if response.result is None:
                logger.debug("transaction_not_found", signature=signature)
                return None
            return decode_one(TransactionRecord, response.result)
