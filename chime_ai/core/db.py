"""DB connection and schema for chime-ai."""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import Column, DateTime, Float, Integer, Text, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.pool import StaticPool

from chime_ai.core.utils import get_logger

Base = declarative_base()

logger = get_logger("chime-ai.db")


class TransactionRecord(Base):
    """A stored transaction row."""

    __tablename__ = "transactions"
    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(DateTime, index=True)
    description = Column(Text)
    type = Column(Text)
    amount = Column(Float)
    net_amount = Column(Float)
    settle_date = Column(DateTime)


def is_memory_url(url: str) -> bool:
    """Check whether a database URL names an in-memory SQLite database."""
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


def get_engine(url: str | None = None) -> Engine:
    """Create a SQLAlchemy engine using the given or configured database URL."""
    if url is None:
        from chime_ai.core.settings import get_settings

        url = get_settings().database_url
    kwargs: dict = {}
    if url.startswith("sqlite"):
        # Ingestion workers share the engine across threads; SQLite serializes the writes.
        # In-memory databases live on one shared connection, so ingestion runs them single-threaded.
        kwargs["connect_args"] = {"check_same_thread": False}
        if is_memory_url(url):
            kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


def init_db(engine: Engine) -> None:
    """Create the transactions table and its date index if they do not exist."""
    Base.metadata.create_all(engine)


@contextmanager
def open_database(url: str | None = None) -> Iterator[Engine]:
    """Open the process-wide engine, ensure the schema, and dispose of it on exit."""
    engine = get_engine(url)
    try:
        init_db(engine)
        logger.info(f"Opened database: {engine.url}")
        yield engine
    finally:
        engine.dispose()
        logger.info(f"Closed database: {engine.url}")
