"""TransactionsTool: lets the chat model run SQL against the transactions table."""

from typing import Any

from pydantic import BaseModel, Field, ValidationError

from chime_ai.agents.base import BaseTool, ToolResult
from chime_ai.agents.prompts import SQL_FIELD_DESCRIPTION, TRANSACTIONS_TOOL_DESCRIPTION, TRANSACTIONS_TOOL_NAME
from chime_ai.core.exceptions import ToolCallError
from chime_ai.core.repository import TransactionRepository


class TransactionsToolArguments(BaseModel):
    """Argument payload of a TransactionsTool invocation."""

    sql: str = Field(description=SQL_FIELD_DESCRIPTION)


class TransactionsTool(BaseTool):
    """Runs the model's SQL through the repository's raw execution path.

    The statement is passed through as written; the repository reports any error.
    """

    name = TRANSACTIONS_TOOL_NAME

    def __init__(self, repository: TransactionRepository) -> None:
        """Initialize the tool with the repository queries are executed against."""
        self.repository = repository

    def definition(self) -> dict[str, Any]:
        """Return the function-calling definition, with parameters taken from the argument model."""
        schema = TransactionsToolArguments.model_json_schema()
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": TRANSACTIONS_TOOL_DESCRIPTION,
                "parameters": {
                    "type": "object",
                    "properties": schema["properties"],
                    "required": schema.get("required", []),
                },
            },
        }

    def parse_arguments(self, arguments: str) -> TransactionsToolArguments:
        """Decode the JSON argument payload emitted by the model."""
        try:
            return TransactionsToolArguments.model_validate_json(arguments or "")
        except ValidationError as exc:
            msg = f"Invalid {self.name} arguments {arguments!r}: {exc}"
            raise ToolCallError(msg) from exc

    def run(self, arguments: str) -> ToolResult:
        """Decode the arguments and execute the SQL they carry."""
        sql = self.parse_arguments(arguments).sql
        return ToolResult(rows=self.repository.execute_raw_query(sql), query=sql)
