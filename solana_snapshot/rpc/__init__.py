"""
Solana JSON-RPC client package.

Transport, account queries, signature pagination, transaction fetch, and
the aggregation pipeline that chains them.
"""

from solana_snapshot.rpc.accounts import AccountQuery
from solana_snapshot.rpc.models import (
    LargestAccount,
    LargestTokenAccount,
    RpcRequest,
    RpcResponse,
    SignatureEntry,
    TokenAccount,
    TransactionRecord,
    Transfer,
)
from solana_snapshot.rpc.pipeline import AggregationPipeline
from solana_snapshot.rpc.signatures import SignaturePaginator
from solana_snapshot.rpc.transactions import TransactionFetcher
from solana_snapshot.rpc.transport import RpcTransport

__all__ = [
    "AccountQuery",
    "AggregationPipeline",
    "LargestAccount",
    "LargestTokenAccount",
    "RpcRequest",
    "RpcResponse",
    "RpcTransport",
    "SignatureEntry",
    "SignaturePaginator",
    "TokenAccount",
    "TransactionFetcher",
    "TransactionRecord",
    "Transfer",
]
