"""
SolanaTransactionService: one object wiring transport, account query,
signature pagination, transaction fetch, and the aggregation pipeline.

The HTTP trigger and the command-line tools consume this facade only.
"""

from __future__ import annotations

from typing import Any, Iterator

from solana_snapshot.config.env import SolanaConfig, get_solana_config
from solana_snapshot.rpc.accounts import AccountQuery
from solana_snapshot.rpc.models import (
    LargestAccount,
    LargestTokenAccount,
    SignatureEntry,
    TokenAccount,
    TransactionRecord,
)
from solana_snapshot.rpc.pipeline import AggregationPipeline
from solana_snapshot.rpc.signatures import DEFAULT_PAGE_LIMIT, SignaturePaginator
from solana_snapshot.rpc.transactions import TransactionFetcher
from solana_snapshot.rpc.transport import RpcTransport


class SolanaTransactionService:
    def __init__(
        self,
        config: SolanaConfig | None = None,
        transport: RpcTransport | None = None,
    ) -> None:
        self.config = config or get_solana_config()
        self.transport = transport or RpcTransport(self.config)
        self.accounts = AccountQuery(self.transport, self.config)
        self.signatures = SignaturePaginator(self.transport)
        self.transactions = TransactionFetcher(self.transport)
        self.pipeline = AggregationPipeline(
            self.accounts, self.signatures, self.transactions, self.config
        )

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> "SolanaTransactionService":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def get_token_holdings(self, wallet: str, mint: str | None = None) -> TokenAccount | None:
        return self.accounts.get_token_holdings(wallet, mint)

    def get_largest_token_accounts(
        self, mint: str, commitment: str | None = None
    ) -> list[LargestTokenAccount]:
        return self.accounts.get_largest_token_accounts(mint, commitment)

    def get_largest_accounts(self, filter: str | None = None) -> list[LargestAccount]:
        return self.accounts.get_largest_accounts(filter)

    def get_signatures(
        self,
        address: str,
        limit: int = DEFAULT_PAGE_LIMIT,
        before: str | None = None,
        until: str | None = None,
    ) -> list[SignatureEntry]:
        return self.signatures.get_signatures(address, limit, before, until)

    def iter_signature_pages(
        self,
        address: str,
        limit: int = DEFAULT_PAGE_LIMIT,
        before: str | None = None,
        until: str | None = None,
        max_pages: int | None = None,
    ) -> Iterator[list[SignatureEntry]]:
        return self.signatures.iter_signature_pages(address, limit, before, until, max_pages)

    def get_transaction(self, signature: str) -> TransactionRecord | None:
        return self.transactions.get_transaction(signature)

    def get_transactions_for_token(
        self,
        token_hash: str,
        limit: int = DEFAULT_PAGE_LIMIT,
        before: str | None = None,
        until: str | None = None,
    ) -> list[TransactionRecord]:
        return self.pipeline.get_transactions_for_token(token_hash, limit, before, until)
