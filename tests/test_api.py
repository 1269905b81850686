"""Tests for the HTTP API."""

from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient

from chime_ai.agents.query_agent import QueryAgent
from chime_ai.api.dependencies import get_agent, get_repository, get_settings
from chime_ai.core.repository import TransactionRepository
from chime_ai.core.settings import Settings
from chime_ai.main import app
from tests.helpers import FakeGroq, make_response, make_tool_call

STATEMENT = """\
7/19/2024 Islandadv.Whalewatch Purchase -$274.18 -$274.18 7/20/2024
7/19/2024 Transfer from Chime Savings Account Transfer $275.00 $275.00 7/19/2024
7/19/2024 Supermaven, Inc. Purchase -$10.00 -$10.00 7/20/2024
7/21/2024 Supermaven, Inc. Purchase -$10.00 -$10.00 7/22/2024
"""

JULY = {"start": "2024-07-01T00:00:00", "end": "2024-07-31T00:00:00"}


@pytest.fixture
def statements_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "statements"
    directory.mkdir()
    (directory / "july.txt").write_text(STATEMENT)
    return directory


@pytest.fixture
def client(tmp_path: Path, statements_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    """Test client over a fresh file database, with the statements directory configured."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'api.db'}")
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("STATEMENTS_DIR", str(statements_dir))
    monkeypatch.setenv("GROQ_API_KEY", "test-key")
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _use_fake_model(responses: list) -> FakeGroq:
    fake = FakeGroq(responses)

    def fake_agent(
        repository: TransactionRepository = Depends(get_repository),
        settings: Settings = Depends(get_settings),
    ) -> QueryAgent:
        return QueryAgent(fake, repository, settings)

    app.dependency_overrides[get_agent] = fake_agent
    return fake


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    if response.status_code != 200 or response.json() != {"status": "ok"}:
        msg = f"Unexpected health response: {response.status_code} {response.text}"
        raise AssertionError(msg)


def test_scalar_docs(client: TestClient) -> None:
    response = client.get("/scalar")
    if response.status_code != 200 or "openapi" not in response.text:
        msg = f"Unexpected Scalar response: {response.status_code}"
        raise AssertionError(msg)


def test_ingest_then_read(client: TestClient) -> None:
    """Ingesting the configured directory makes its transactions readable through every view."""
    report = client.post("/ingest", json={}).json()
    if report["inserted"] != 4 or report["files"][0]["status"] != "completed":
        msg = f"Unexpected ingest report: {report}"
        raise AssertionError(msg)

    rows = client.get("/transactions", params={**JULY, "description": "supermaven"}).json()
    if len(rows) != 2 or rows[0]["description"] != "Supermaven, Inc.":
        msg = f"Expected two Supermaven rows, got {rows}"
        raise AssertionError(msg)

    transfers = client.get("/transactions", params={**JULY, "type": "Transfer"}).json()
    if [row["amount"] for row in transfers] != [275.0]:
        msg = f"Expected one transfer, got {transfers}"
        raise AssertionError(msg)

    descriptions = client.get("/transactions/descriptions", params=JULY).json()
    expected = ["Islandadv.Whalewatch", "Supermaven, Inc.", "Transfer from Chime Savings Account"]
    if descriptions != expected:
        msg = f"Expected {expected}, got {descriptions}"
        raise AssertionError(msg)

    totals = {row["description"]: row["total_spent"] for row in client.get("/transactions/totals", params=JULY).json()}
    if totals["Supermaven, Inc."] != -20.0:
        msg = f"Expected Supermaven total -20.0, got {totals}"
        raise AssertionError(msg)

    counts = {
        row["description"]: row["total_transactions"]
        for row in client.get("/transactions/counts", params=JULY).json()
    }
    if counts != {"Islandadv.Whalewatch": 1, "Supermaven, Inc.": 2, "Transfer from Chime Savings Account": 1}:
        msg = f"Unexpected counts: {counts}"
        raise AssertionError(msg)


def test_ingest_is_idempotent(client: TestClient) -> None:
    client.post("/ingest", json={})
    report = client.post("/ingest", json={}).json()
    if report["inserted"] != 0 or report["duplicates"] != 4:
        msg = f"Expected only duplicates on the second run, got {report}"
        raise AssertionError(msg)


def test_ingest_missing_directory(client: TestClient, tmp_path: Path) -> None:
    response = client.post("/ingest", json={"directory": str(tmp_path / "missing")})
    if response.status_code != 404:
        msg = f"Expected 404, got {response.status_code}"
        raise AssertionError(msg)


def test_transactions_require_a_range(client: TestClient) -> None:
    response = client.get("/transactions")
    if response.status_code != 422:
        msg = f"Expected 422 without start and end, got {response.status_code}"
        raise AssertionError(msg)


def test_ask_runs_the_model_queries(client: TestClient) -> None:
    """The answer comes back with the number of rounds and the SQL that ran."""
    client.post("/ingest", json={})
    sql = "SELECT description, SUM(net_amount) AS total FROM transactions GROUP BY description ORDER BY total"
    fake = _use_fake_model(
        [
            make_response(tool_calls=[make_tool_call(sql)]),
            make_response("Most of your money went to whale watching."),
        ]
    )
    response = client.post("/ask", json={"question": "Where does my money go?"})
    body = response.json()
    if response.status_code != 200 or body["rounds"] != 1 or body["queries"] != [sql]:
        msg = f"Unexpected ask response: {response.status_code} {body}"
        raise AssertionError(msg)
    if "Islandadv.Whalewatch" not in fake.requests[1]["messages"][-1]["content"]:
        msg = "Expected the query rows to be sent back to the model"
        raise AssertionError(msg)


def test_ask_uses_default_question(client: TestClient) -> None:
    fake = _use_fake_model([make_response("Nothing yet.")])
    response = client.post("/ask", json={})
    if response.json()["question"] != get_settings().default_question:
        msg = f"Expected the default question, got {response.json()}"
        raise AssertionError(msg)
    if fake.requests[0]["messages"][1]["content"] != get_settings().default_question:
        msg = "Expected the default question to be sent to the model"
        raise AssertionError(msg)


def test_ask_query_failure_is_bad_gateway(client: TestClient) -> None:
    _use_fake_model([make_response(tool_calls=[make_tool_call("SELECT * FROM nowhere")])])
    response = client.post("/ask", json={"question": "Anything"})
    if response.status_code != 502 or "Query failed" not in response.json()["detail"]:
        msg = f"Expected 502 with the query error, got {response.status_code} {response.text}"
        raise AssertionError(msg)


def test_ask_model_failure_is_bad_gateway(client: TestClient) -> None:
    _use_fake_model([RuntimeError("upstream down")])
    response = client.post("/ask", json={"question": "Anything"})
    if response.status_code != 502:
        msg = f"Expected 502, got {response.status_code}"
        raise AssertionError(msg)


def test_ask_without_credentials(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GROQ_API_KEY", "")
    response = client.post("/ask", json={"question": "Anything"})
    if response.status_code != 503:
        msg = f"Expected 503 without an API key, got {response.status_code}"
        raise AssertionError(msg)
