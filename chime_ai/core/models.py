"""Pydantic models for chime-ai.

This module defines the Transaction model shared by the statement parser, the ingestion
pipeline and the repository, the aggregate projections returned by the structured reads,
and the report and answer models returned by the ingest and ask operations.
"""

from datetime import datetime
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field

DedupKey = tuple[datetime, str, float, float, datetime]


class TransactionType(StrEnum):
    """Transaction categories printed on the statements."""

    TRANSFER = "Transfer"
    PURCHASE = "Purchase"
    DIRECT_DEBIT = "Direct Debit"
    FEE = "Fee"
    ATM_WITHDRAWAL = "ATM Withdrawal"
    DEPOSIT = "Deposit"
    ROUND_UP = "Round Up"


class Transaction(BaseModel):
    """A single posted transaction.

    Attributes:
        id: Surrogate key, assigned when the row is stored.
        date: Posting date (midnight, no time-of-day).
        description: Merchant-supplied text, trimmed but otherwise untouched.
        type: Category; the parser only emits TransactionType values, storage accepts any text.
        amount: Signed gross amount.
        net_amount: Signed net amount.
        settle_date: Date the funds settled.

    """

    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    date: datetime
    description: str
    type: str
    amount: float
    net_amount: float
    settle_date: datetime

    @property
    def dedup_key(self) -> DedupKey:
        """Fields that identify the same transaction across statement files."""
        return (self.date, self.description, self.amount, self.net_amount, self.settle_date)


class DescriptionTotal(BaseModel):
    """Sum of net_amount for one description within a date range."""

    description: str
    total_spent: float


class DescriptionCount(BaseModel):
    """Number of transactions for one description within a date range."""

    description: str
    total_transactions: int


class FileIngestResult(BaseModel):
    """Outcome of ingesting one statement text file."""

    path: str
    status: Literal["completed", "error"] = "completed"
    parsed: int = 0
    duplicates: int = 0
    inserted: int = 0
    skipped_lines: int = 0
    error: str | None = None


class IngestReport(BaseModel):
    """Outcome of ingesting a directory of statements."""

    directory: str
    started_at: str
    completed_at: str | None = None
    converted: list[str] = Field(default_factory=list)
    files: list[FileIngestResult] = Field(default_factory=list)

    @computed_field
    @property
    def inserted(self) -> int:
        """Total rows written across all files."""
        return sum(f.inserted for f in self.files)

    @computed_field
    @property
    def duplicates(self) -> int:
        """Total candidates discarded as duplicates."""
        return sum(f.duplicates for f in self.files)

    @computed_field
    @property
    def failed(self) -> list[str]:
        """Paths of files whose ingestion was aborted."""
        return [f.path for f in self.files if f.status == "error"]


class ConversationMessage(BaseModel):
    """One entry in the dialogue sent to the chat model."""

    role: Literal["system", "user", "assistant"]
    content: str

    def to_payload(self) -> dict[str, str]:
        """Return the message in chat completion request form."""
        return {"role": self.role, "content": self.content}


class AgentAnswer(BaseModel):
    """Final answer to a financial question."""

    question: str
    answer: str
    rounds: int = 0
    queries: list[str] = Field(default_factory=list)


class AskRequest(BaseModel):
    """Request body for the ask endpoint."""

    question: str | None = None


class IngestRequest(BaseModel):
    """Request body for the ingest endpoint."""

    directory: str | None = None
