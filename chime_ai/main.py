"""Main entrypoint and application factory for the chime-ai API.

This module initializes the FastAPI application, configures logging, opens the transaction
database for the lifetime of the app, and exposes the Scalar API reference endpoint for
interactive OpenAPI documentation.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from scalar_fastapi import get_scalar_api_reference

from chime_ai import __version__
from chime_ai.api.routes import router
from chime_ai.core.db import open_database
from chime_ai.core.settings import get_settings
from chime_ai.core.utils import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the transaction database for the lifetime of the application."""
    settings = get_settings()
    setup_logging(settings.log_dir, settings.log_file)
    with open_database(settings.database_url) as engine:
        app.state.engine = engine
        yield


app = FastAPI(
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    title="chime-ai API",
    description="""
    The chime-ai API ingests bank statement exports into a transaction store and answers
    natural-language questions about them with an LLM that queries the store.

    **Endpoints:**
    - `POST /ask`: Ask a question about the transaction history.
    - `POST /ingest`: Ingest a directory of statement exports.
    - `GET /transactions`: List transactions in a date range.
    - `GET /transactions/descriptions`, `/transactions/totals`, `/transactions/counts`: Per-description views.
    - `GET /health`: Health check endpoint.
    - `GET /scalar`: Interactive Scalar OpenAPI documentation.
    """,
    version=__version__,
)
app.include_router(router)


@app.get("/scalar", include_in_schema=False)
async def scalar_docs() -> HTMLResponse:
    """Return Scalar API reference."""
    return get_scalar_api_reference(openapi_url=app.openapi_url, title=app.title)


def run() -> None:
    """Run the API with Uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run("chime_ai.main:app", host=settings.server_host, port=settings.server_port)


if __name__ == "__main__":
    run()
