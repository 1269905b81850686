"""chime-ai: statement ingestion and natural-language questions over bank transactions."""

__version__ = "1.0.0"
