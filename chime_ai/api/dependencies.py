"""FastAPI dependencies for DI (settings, repository, agent).

This module provides dependency injection helpers for settings, the transaction repository,
and agent instantiation, enabling modular and testable API endpoints.
"""

from fastapi import Depends, HTTPException, Request

from chime_ai.agents.query_agent import QueryAgent, build_agent
from chime_ai.core.repository import TransactionRepository
from chime_ai.core.settings import Settings
from chime_ai.core.settings import get_settings as load_settings


def get_settings() -> Settings:
    """Provide application settings for dependency injection."""
    return load_settings()


def get_repository(request: Request) -> TransactionRepository:
    """Provide a repository over the engine opened by the application lifespan."""
    return TransactionRepository(request.app.state.engine)


def get_agent(
    repository: TransactionRepository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
) -> QueryAgent:
    """Provide a QueryAgent instance; 503 when no Groq credential is configured."""
    if not settings.groq_api_key:
        raise HTTPException(503, "GROQ_API_KEY is not configured")
    return build_agent(repository, settings)
