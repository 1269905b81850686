"""Agents package: provides the tool base class and the tool registry; the agent lives in ``query_agent``."""

from .base import BaseTool, ToolResult  # noqa: F401
from .registry import ToolRegistry  # noqa: F401
