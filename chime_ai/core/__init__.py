"""Core package: provides models, database helpers, the repository, settings, and shared utilities."""

from .db import open_database  # noqa: F401
from .models import Transaction, TransactionType  # noqa: F401
from .repository import TransactionRepository  # noqa: F401
from .settings import Settings  # noqa: F401
from .utils import get_logger  # noqa: F401
