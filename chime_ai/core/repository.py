"""TransactionRepository: read and write access to the transactions table.

The structured reads back the API's transaction endpoints; ``execute_raw_query`` runs the SQL
the language model writes; ``transaction_exists`` and ``insert_transactions`` are used by the
ingestion pipeline.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from sqlalchemy import and_, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from chime_ai.core.db import TransactionRecord
from chime_ai.core.exceptions import QueryExecutionError
from chime_ai.core.models import DescriptionCount, DescriptionTotal, Transaction
from chime_ai.core.utils import get_logger

logger = get_logger("chime-ai.repository")

RawRow = dict[str, Any]


class TransactionRepository:
    """Repository over the transactions table of a SQLAlchemy engine."""

    def __init__(self, engine: Engine) -> None:
        """Initialize the repository with a shared engine."""
        self.engine = engine
        self.Session = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)

    def _in_range(self, start_date: datetime, end_date: datetime):
        return TransactionRecord.date.between(start_date, end_date)

    def _fetch(self, session: Session, *criteria) -> list[Transaction]:
        stmt = select(TransactionRecord).where(and_(*criteria))
        return [Transaction.model_validate(row) for row in session.scalars(stmt)]

    def get_transactions_by_date(self, start_date: datetime, end_date: datetime) -> list[Transaction]:
        """Return transactions posted between start_date and end_date, inclusive."""
        with self.Session() as session:
            return self._fetch(session, self._in_range(start_date, end_date))

    def get_transactions_by_type(
        self, start_date: datetime, end_date: datetime, transaction_type: str
    ) -> list[Transaction]:
        """Return transactions of one type posted within the date range."""
        with self.Session() as session:
            return self._fetch(
                session,
                self._in_range(start_date, end_date),
                TransactionRecord.type == str(transaction_type),
            )

    def get_transactions_by_description(
        self, start_date: datetime, end_date: datetime, description: str
    ) -> list[Transaction]:
        """Return transactions whose description contains the filter (case-insensitive).

        An empty filter matches every transaction in the range.
        """
        with self.Session() as session:
            return self._fetch(
                session,
                self._in_range(start_date, end_date),
                TransactionRecord.description.ilike(f"%{description}%"),
            )

    def get_distinct_transaction_descriptions(self, start_date: datetime, end_date: datetime) -> list[str]:
        """Return the distinct descriptions in the range, sorted ascending."""
        stmt = (
            select(TransactionRecord.description)
            .where(self._in_range(start_date, end_date))
            .distinct()
            .order_by(TransactionRecord.description.asc())
        )
        with self.Session() as session:
            return list(session.scalars(stmt))

    def get_distinct_transaction_descriptions_and_total(
        self, start_date: datetime, end_date: datetime
    ) -> list[DescriptionTotal]:
        """Return the sum of net_amount per description within the range."""
        stmt = (
            select(
                TransactionRecord.description,
                func.sum(TransactionRecord.net_amount).label("total_spent"),
            )
            .where(self._in_range(start_date, end_date))
            .group_by(TransactionRecord.description)
        )
        with self.Session() as session:
            return [
                DescriptionTotal(description=row.description, total_spent=row.total_spent or 0.0)
                for row in session.execute(stmt)
            ]

    def get_distinct_transaction_descriptions_and_count(
        self, start_date: datetime, end_date: datetime
    ) -> list[DescriptionCount]:
        """Return the number of transactions per description within the range."""
        stmt = (
            select(
                TransactionRecord.description,
                func.count(TransactionRecord.id).label("total_transactions"),
            )
            .where(self._in_range(start_date, end_date))
            .group_by(TransactionRecord.description)
        )
        with self.Session() as session:
            return [
                DescriptionCount(description=row.description, total_transactions=row.total_transactions)
                for row in session.execute(stmt)
            ]

    def execute_raw_query(self, query: str, *args: Any) -> list[RawRow]:
        """Execute a SQL statement with ``?`` placeholders and return one dict per result row.

        Column values come back as the driver produced them (None, int, float, str or bytes).
        No allow-list is applied: the statement runs with the privileges of the process.
        """
        if not query or not query.strip():
            msg = "Cannot execute an empty query"
            raise QueryExecutionError(msg)
        try:
            with self.engine.begin() as conn:
                result = conn.exec_driver_sql(query, tuple(args))
                if not result.returns_rows:
                    return []
                return [dict(row) for row in result.mappings()]
        except SQLAlchemyError as exc:
            detail = getattr(exc, "orig", None) or exc
            msg = f"Query failed: {detail}"
            logger.warning(f"{msg} (query: {query})")
            raise QueryExecutionError(msg) from exc

    def transaction_exists(self, txn: Transaction) -> bool:
        """Check whether a row with the same date, description, amounts and settle date is stored."""
        date, description, amount, net_amount, settle_date = txn.dedup_key
        stmt = (
            select(TransactionRecord.id)
            .where(
                TransactionRecord.date == date,
                TransactionRecord.description == description,
                TransactionRecord.amount == amount,
                TransactionRecord.net_amount == net_amount,
                TransactionRecord.settle_date == settle_date,
            )
            .limit(1)
        )
        with self.Session() as session:
            return session.execute(stmt).first() is not None

    def insert_transactions(self, transactions: Iterable[Transaction]) -> list[Transaction]:
        """Insert the transactions in a single database transaction and return them with their ids."""
        records = [TransactionRecord(**txn.model_dump(exclude={"id"})) for txn in transactions]
        if not records:
            return []
        with self.Session() as session, session.begin():
            session.add_all(records)
        return [Transaction.model_validate(record) for record in records]
