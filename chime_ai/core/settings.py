"""Configuration and environment settings for chime-ai."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from chime_ai.agents.prompts import DEFAULT_QUESTION


class Settings(BaseSettings):
    """Application settings for chime-ai."""

    groq_api_key: str | None = None
    query_model: str = "llama-3.3-70b-versatile"
    answer_model: str = "llama-3.3-70b-versatile"
    query_temperature: float = 0.2
    answer_temperature: float = 0.9
    max_completion_tokens: int = 4096
    max_tool_rounds: int = 2
    ask_timeout_seconds: float = 30.0
    default_question: str = DEFAULT_QUESTION
    database_url: str = "sqlite:///transactions.db"
    statements_dir: str = "./importer/files"
    ingest_max_workers: int = 6
    pdftotext_command: str = "pdftotext"
    log_dir: str = "logs"
    log_file: str = "chime_ai.log"
    server_host: str = "127.0.0.1"
    server_port: int = 8000

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


def get_settings() -> "Settings":
    """Return an instance of the application settings."""
    return Settings()
