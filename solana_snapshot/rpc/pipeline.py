"""
Aggregation pipeline: token hash -> program accounts -> signatures -> transactions.

Output order is account-major (accounts as returned by getProgramAccounts),
then signature order within each account as returned upstream. Nothing is
sorted or deduplicated. Missing transactions are dropped. The first
RetrievalFailure aborts the whole batch; no partial result is returned.

With max_workers > 1 the signature pages and transaction fetches run on a
bounded thread pool. Every task is tagged with its position and results are
put back in place, so the output is identical to the sequential run.
"""

from __future__ import annotations

from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Any, Callable, Sequence, TypeVar

from solana_snapshot.config.env import SolanaConfig
from solana_snapshot.core.exceptions import RetrievalFailure
from solana_snapshot.rpc.accounts import AccountQuery, mint_filters
from solana_snapshot.rpc.models import SignatureEntry, TokenAccount, TransactionRecord
from solana_snapshot.rpc.signatures import DEFAULT_PAGE_LIMIT, SignaturePaginator
from solana_snapshot.rpc.transactions import TransactionFetcher
from solana_snapshot.snapshot_logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def _ordered_map(
    fn: Callable[[T], R],
    items: Sequence[T],
    max_workers: int,
) -> list[R]:
    """
    Run fn over items on a pool; results come back in input order.

    The first exception cancels the tasks that have not started and is
    re-raised.
    """
    if not items:
        return []
    results: list[Any] = [None] * len(items)
    executor = ThreadPoolExecutor(max_workers=min(max_workers, len(items)))
    try:
        futures = {executor.submit(fn, item): idx for idx, item in enumerate(items)}
        done, _ = wait(futures, return_when=FIRST_EXCEPTION)
        for fut in done:
            exc = fut.exception()
            if exc is not None:
                raise exc
        for fut, idx in futures.items():
            results[idx] = fut.result()
    finally:
        executor.shutdown(wait=True, cancel_futures=True)
    return results


class AggregationPipeline:
    def __init__(
        self,
        accounts: AccountQuery,
        signatures: SignaturePaginator,
        transactions: TransactionFetcher,
        config: SolanaConfig,
    ) -> None:
        self._accounts = accounts
        self._signatures = signatures
        self._transactions = transactions
        self._config = config

    def get_transactions_for_token(
        self,
        token_hash: str,
        limit: int = DEFAULT_PAGE_LIMIT,
        before: str | None = None,
        until: str | None = None,
    ) -> list[TransactionRecord]:
        """
        All retrievable transactions touching accounts that match `token_hash`.

        One signature page (limit/before/until) per account; one
        getTransaction per signature.
        """
        try:
            accounts = self._accounts.get_program_accounts(
                self._config.slp_program_id,
                mint_filters(token_hash),
            )
            if self._config.max_workers > 1:
                records = self._collect_parallel(accounts, limit, before, until)
            else:
                records = self._collect_sequential(accounts, limit, before, until)
        except RetrievalFailure as e:
            logger.error("token_transactions_failed", token_hash=token_hash, error=str(e))
            raise RetrievalFailure(f"Failed to retrieve Solana transactions: {e}") from None

        logger.info(
            "token_transactions_retrieved",
            token_hash=token_hash,
            account_count=len(accounts),
            transaction_count=len(records),
        )
        return records

    def _collect_sequential(
        self,
        accounts: list[TokenAccount],
        limit: int,
        before: str | None,
        until: str | None,
    ) -> list[TransactionRecord]:
        records: list[TransactionRecord] = []
        for account in accounts:
            page = self._signatures.get_signatures(account.pubkey, limit, before, until)
            for entry in page:
                record = self._transactions.get_transaction(entry.signature)
                if record is not None:
                    records.append(record)
        return records

    def _collect_parallel(
        self,
        accounts: list[TokenAccount],
        limit: int,
        before: str | None,
        until: str | None,
    ) -> list[TransactionRecord]:
        workers = self._config.max_workers

        def page_for(account: TokenAccount) -> list[SignatureEntry]:
            return self._signatures.get_signatures(account.pubkey, limit, before, until)

        pages = _ordered_map(page_for, accounts, workers)
        signatures = [entry.signature for page in pages for entry in page]
        fetched = _ordered_map(self._transactions.get_transaction, signatures, workers)
        return [record for record in fetched if record is not None]
