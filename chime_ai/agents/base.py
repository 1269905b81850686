"""Base tool abstraction for capabilities the chat model can invoke.

This module defines the abstract base class for tools exposed to the model, enforcing a
standard interface for describing the tool and running one invocation of it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ToolResult:
    """Outcome of one tool invocation: the rows it produced and the query it ran, if any."""

    rows: list[dict[str, Any]] = field(default_factory=list)
    query: str | None = None


class BaseTool(ABC):
    """Abstract base class for all model-callable tools."""

    name: str

    @abstractmethod
    def definition(self) -> dict[str, Any]:
        """Return the tool definition in chat completion ``tools`` form."""

    @abstractmethod
    def run(self, arguments: str) -> ToolResult:
        """Decode the JSON argument payload and run one invocation."""
