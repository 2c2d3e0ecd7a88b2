"""
Key-value transaction store: SQLAlchemy table keyed by transaction id.

Uses DATABASE_URL for PostgreSQL when set; otherwise a local SQLite file.
Records carry {transaction_id, blockchain, from_address, to_address, amount,
timestamp}. put() is an upsert; get() returns None for unknown ids; scan()
ANDs equality filters over the known columns.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

from sqlalchemy import Column, Float, Integer, String, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from solana_snapshot.core.exceptions import StorageError
from solana_snapshot.rpc.models import TransactionRecord
from solana_snapshot.snapshot_logging import get_logger

logger = get_logger(__name__)

Base = declarative_base()

DEFAULT_BLOCKCHAIN = "solana"


class StoredTransaction(Base):
    """One transfer per transaction signature."""

    __tablename__ = "transactions"

    transaction_id = Column(String(128), primary_key=True)
    blockchain = Column(String(32), nullable=False, index=True)
    from_address = Column(String(64), nullable=False, index=True)
    to_address = Column(String(64), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    timestamp = Column(Integer, nullable=True, index=True)  # Unix seconds

    def to_dict(self) -> dict[str, Any]:
        return {
            "transaction_id": self.transaction_id,
            "blockchain": self.blockchain,
            "from_address": self.from_address,
            "to_address": self.to_address,
            "amount": float(self.amount),
            "timestamp": int(self.timestamp) if self.timestamp is not None else None,
        }


RECORD_FIELDS = (
    "transaction_id",
    "blockchain",
    "from_address",
    "to_address",
    "amount",
    "timestamp",
)


def record_from_transaction(
    tx: TransactionRecord,
    blockchain: str = DEFAULT_BLOCKCHAIN,
) -> dict[str, Any] | None:
    """
    Map a fetched transaction to a store record using its first parsed transfer.

    None when the transaction has no signature or no transfer instruction.
    """
    if not tx.signature:
        return None
    transfers = tx.transfers()
    if not transfers:
        return None
    first = transfers[0]
    return {
        "transaction_id": tx.signature,
        "blockchain": blockchain,
        "from_address": first.source,
        "to_address": first.destination,
        "amount": first.amount,
        "timestamp": tx.block_time,
    }


class TransactionStore:
    def __init__(self, url: str) -> None:
        connect_args: dict[str, Any] = {}
        if url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self._url = url
        self._engine = create_engine(url, connect_args=connect_args, pool_pre_ping=True)
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self._engine)

    @contextmanager
    def _session_scope(self) -> Iterator[Session]:
        """Single session. Commits on success, rolls back on error."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("transaction_store_error", error=str(e))
            raise StorageError(f"Transaction store failed: {e}") from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def init_db(self) -> None:
        """Create the transactions table if missing. Safe to call on every startup."""
        try:
            Base.metadata.create_all(bind=self._engine)
        except SQLAlchemyError as e:
            logger.exception("transaction_store_init_failed", error=str(e))
            raise StorageError(f"Failed to initialise transaction store: {e}") from e
        logger.info("transaction_store_init_db", url=self._url.split("?")[0].split("//")[-1])

    def dispose(self) -> None:
        self._engine.dispose()

    def put(self, record: dict[str, Any]) -> None:
        missing = [f for f in RECORD_FIELDS if f != "timestamp" and record.get(f) in (None, "")]
        if missing:
            raise StorageError(f"Record missing fields: {', '.join(missing)}")
        with self._session_scope() as session:
            session.merge(
                StoredTransaction(
                    transaction_id=str(record["transaction_id"]),
                    blockchain=str(record["blockchain"]),
                    from_address=str(record["from_address"]),
                    to_address=str(record["to_address"]),
                    amount=float(record["amount"]),
                    timestamp=int(record["timestamp"]) if record.get("timestamp") is not None else None,
                )
            )
        logger.debug("transaction_stored", transaction_id=record["transaction_id"])

    def get(self, transaction_id: str) -> dict[str, Any] | None:
        with self._session_scope() as session:
            row = session.get(StoredTransaction, transaction_id)
            return row.to_dict() if row else None

    def scan(self, filters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        filters = filters or {}
        unknown = [k for k in filters if k not in RECORD_FIELDS]
        if unknown:
            raise StorageError(f"Unknown filter field(s): {', '.join(sorted(unknown))}")
        with self._session_scope() as session:
            query = session.query(StoredTransaction)
            for key, value in filters.items():
                query = query.filter(getattr(StoredTransaction, key) == value)
            rows = query.order_by(StoredTransaction.transaction_id).all()
            return [row.to_dict() for row in rows]
