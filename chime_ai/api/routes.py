"""FastAPI endpoints for the chime-ai API.

This module defines the routes for asking questions about the transaction history,
ingesting a directory of statements, reading transactions and their per-description
aggregates, and health checks. It wires together the agent, the ingest runner and the
repository.
"""

from datetime import datetime
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Query

from chime_ai.agents.query_agent import QueryAgent
from chime_ai.api.dependencies import get_agent, get_repository, get_settings
from chime_ai.core.exceptions import (
    ModelInvocationError,
    QueryExecutionError,
    QueryTimeoutError,
    ToolCallError,
)
from chime_ai.core.models import (
    AgentAnswer,
    AskRequest,
    DescriptionCount,
    DescriptionTotal,
    IngestReport,
    IngestRequest,
    Transaction,
)
from chime_ai.core.repository import TransactionRepository
from chime_ai.core.settings import Settings
from chime_ai.core.utils import get_logger
from chime_ai.workers.ingest_runner import run_ingest

router = APIRouter()
logger = get_logger("chime-ai.api")


@router.post(
    "/ask",
    response_model=AgentAnswer,
    summary="Ask a question about the transaction history",
    description=(
        "Ask a natural-language question. The model may query the transaction store with SQL "
        "before answering. When no question is given, the default question is used.\n\n"
        "**Response:**\n"
        "- 200 OK: the answer, the number of tool rounds and the SQL statements that ran.\n"
        "- 502 Bad Gateway: the model call, its tool arguments or its query failed.\n"
        "- 503 Service Unavailable: no API credential is configured.\n"
        "- 504 Gateway Timeout: the exchange exceeded its time budget."
    ),
    responses={
        502: {"description": "Model, tool call or query failure."},
        503: {"description": "API credential missing."},
        504: {"description": "Timed out."},
    },
)
def ask(
    body: AskRequest,
    agent: QueryAgent = Depends(get_agent),
    settings: Settings = Depends(get_settings),
) -> AgentAnswer:
    """Answer a question using the QueryAgent."""
    question = body.question or settings.default_question
    try:
        return agent.ask(question)
    except QueryTimeoutError as exc:
        raise HTTPException(504, str(exc)) from exc
    except (ModelInvocationError, ToolCallError, QueryExecutionError) as exc:
        logger.exception("Error in ask")
        raise HTTPException(502, str(exc)) from exc


@router.post(
    "/ingest",
    response_model=IngestReport,
    summary="Ingest a directory of statement exports",
    description=(
        "Convert PDFs (when pdftotext is installed), parse every text statement in the directory, "
        "skip transactions that are already stored and insert the rest.\n\n"
        "**Response:**\n"
        "- 200 OK: per-file counts of parsed, duplicate and inserted transactions.\n"
        "- 404 Not Found: the directory does not exist."
    ),
    responses={404: {"description": "Directory not found."}},
)
def ingest(
    body: IngestRequest,
    repository: TransactionRepository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
) -> IngestReport:
    """Ingest the given or configured statements directory."""
    directory = Path(body.directory or settings.statements_dir)
    if not directory.is_dir():
        logger.warning(f"Rejected ingest request, directory not found: {directory}")
        raise HTTPException(404, "Directory not found")
    return run_ingest(directory, repository, settings)


@router.get(
    "/transactions",
    response_model=list[Transaction],
    summary="List transactions in a date range",
    description="Optionally filter by exact type or by case-insensitive partial description.",
)
def list_transactions(
    start: datetime = Query(..., description="Start of the date range (inclusive)."),
    end: datetime = Query(..., description="End of the date range (inclusive)."),
    type: str | None = None,  # noqa: A002
    description: str | None = None,
    repository: TransactionRepository = Depends(get_repository),
) -> list[Transaction]:
    """Return transactions posted between start and end."""
    if type:
        return repository.get_transactions_by_type(start, end, type)
    if description is not None:
        return repository.get_transactions_by_description(start, end, description)
    return repository.get_transactions_by_date(start, end)


@router.get(
    "/transactions/descriptions",
    response_model=list[str],
    summary="Distinct descriptions in a date range, sorted ascending",
)
def list_descriptions(
    start: datetime = Query(..., description="Start of the date range (inclusive)."),
    end: datetime = Query(..., description="End of the date range (inclusive)."),
    repository: TransactionRepository = Depends(get_repository),
) -> list[str]:
    """Return the distinct descriptions in the range."""
    return repository.get_distinct_transaction_descriptions(start, end)


@router.get(
    "/transactions/totals",
    response_model=list[DescriptionTotal],
    summary="Net amount per description in a date range",
)
def description_totals(
    start: datetime = Query(..., description="Start of the date range (inclusive)."),
    end: datetime = Query(..., description="End of the date range (inclusive)."),
    repository: TransactionRepository = Depends(get_repository),
) -> list[DescriptionTotal]:
    """Return the sum of net_amount per description."""
    return repository.get_distinct_transaction_descriptions_and_total(start, end)


@router.get(
    "/transactions/counts",
    response_model=list[DescriptionCount],
    summary="Transaction count per description in a date range",
)
def description_counts(
    start: datetime = Query(..., description="Start of the date range (inclusive)."),
    end: datetime = Query(..., description="End of the date range (inclusive)."),
    repository: TransactionRepository = Depends(get_repository),
) -> list[DescriptionCount]:
    """Return the number of transactions per description."""
    return repository.get_distinct_transaction_descriptions_and_count(start, end)


@router.get(
    "/health",
    summary="Health check",
    description="Simple health check endpoint. Returns status ok.",
    response_description="Status ok.",
    responses={200: {"description": "API is healthy.", "content": {"application/json": {"example": {"status": "ok"}}}}},
)
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}
