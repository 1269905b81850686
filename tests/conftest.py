"""Pytest configuration and fixtures."""

from collections.abc import Iterator
from datetime import datetime

import pytest
from sqlalchemy.engine import Engine

from chime_ai.core.db import get_engine, init_db
from chime_ai.core.repository import TransactionRepository
from chime_ai.core.settings import Settings
from tests.helpers import make_txn


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        groq_api_key="test-key",
        database_url="sqlite://",
        log_dir=str(tmp_path / "logs"),
        ingest_max_workers=4,
        ask_timeout_seconds=30.0,
        max_tool_rounds=2,
    )


@pytest.fixture
def engine() -> Iterator[Engine]:
    """In-memory database with the transactions table created."""
    engine = get_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def file_engine(tmp_path) -> Iterator[Engine]:
    """File-backed database, for tests that write from several threads."""
    engine = get_engine(f"sqlite:///{tmp_path / 'transactions.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def repository(engine) -> TransactionRepository:
    """Repository over the in-memory database."""
    return TransactionRepository(engine)


@pytest.fixture
def seeded_repository(repository) -> TransactionRepository:
    """Repository holding a few July 2024 transactions."""
    repository.insert_transactions(
        [
            make_txn(datetime(2024, 7, 19), "Islandadv.Whalewatch", -274.18, settle_date=datetime(2024, 7, 20)),
            make_txn(datetime(2024, 7, 19), "Transfer from Chime Savings Account", 275.0, txn_type="Transfer"),
            make_txn(datetime(2024, 7, 19), "Supermaven, Inc.", -10.0, settle_date=datetime(2024, 7, 20)),
            make_txn(datetime(2024, 7, 21), "Notion Labs, Inc.", -11.03, settle_date=datetime(2024, 7, 22)),
        ]
    )
    return repository
