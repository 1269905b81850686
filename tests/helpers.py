"""Test doubles for the Groq client and transaction builders."""

import json
from datetime import datetime
from types import SimpleNamespace

from chime_ai.core.models import Transaction


def make_txn(
    date: datetime,
    description: str,
    net_amount: float = 0.0,
    amount: float | None = None,
    txn_type: str = "Purchase",
    settle_date: datetime | None = None,
) -> Transaction:
    """Build a Transaction with sensible defaults for the fields a test does not care about."""
    return Transaction(
        date=date,
        description=description,
        type=txn_type,
        amount=net_amount if amount is None else amount,
        net_amount=net_amount,
        settle_date=settle_date or date,
    )


def make_response(content: str | None = None, tool_calls: list | None = None) -> SimpleNamespace:
    """Build a chat completion response with a single choice."""
    message = SimpleNamespace(role="assistant", content=content, tool_calls=tool_calls)
    return SimpleNamespace(choices=[SimpleNamespace(index=0, message=message)])


def make_tool_call(
    sql: str | None = None, name: str = "TransactionsTool", arguments: str | None = None
) -> SimpleNamespace:
    """Build a tool invocation as it appears on a completion message."""
    if arguments is None:
        arguments = json.dumps({"sql": sql})
    return SimpleNamespace(
        id=f"call_{abs(hash(arguments)) % 10_000}",
        type="function",
        function=SimpleNamespace(name=name, arguments=arguments),
    )


class FakeGroq:
    """Stand-in for groq.Groq that replays canned responses and records every request."""

    def __init__(self, responses: list) -> None:
        self.requests: list[dict] = []
        self._responses = list(responses)
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs: object) -> object:
        self.requests.append(kwargs)
        if not self._responses:
            msg = "FakeGroq ran out of responses"
            raise AssertionError(msg)
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response
