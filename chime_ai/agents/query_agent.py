"""QueryAgent: answers financial questions by letting the chat model query the transaction store.

Each ``ask`` runs a bounded exchange. The model is offered TransactionsTool; every tool
invocation in its response is executed and the rows are sent back as a new user turn, after
which the model is asked again. Once ``max_tool_rounds`` rounds of tool execution have run the
tool is no longer offered, so the next response is the final answer. The whole exchange shares
one wall-clock budget.
"""

import json
import time
from base64 import b64encode
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

import groq

from chime_ai.agents.prompts import FINAL_ANSWER_PROMPT, FOLLOW_UP_PROMPT, RESULTS_HEADER, SYSTEM_PROMPT
from chime_ai.agents.registry import ToolRegistry
from chime_ai.agents.transactions_tool import TransactionsTool
from chime_ai.core.exceptions import ModelInvocationError, QueryTimeoutError
from chime_ai.core.models import AgentAnswer, ConversationMessage
from chime_ai.core.repository import TransactionRepository
from chime_ai.core.settings import Settings
from chime_ai.core.utils import get_color, get_logger

MAX_LOG_LEN = 300

logger = get_logger("chime-ai.agent")


def _json_default(value: object) -> object:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray, memoryview)):
        return b64encode(bytes(value)).decode("ascii")
    return str(value)


def serialize_rows(rows: list[dict[str, Any]]) -> str:
    """Serialize raw query rows to JSON, keeping NULLs as ``null``."""
    return json.dumps(rows, default=_json_default)


def _truncate(text: str) -> str:
    return text if len(text) <= MAX_LOG_LEN else text[: MAX_LOG_LEN - 3] + "..."


@dataclass
class Conversation:
    """Message log and bookkeeping for one question."""

    question: str
    messages: list[ConversationMessage] = field(default_factory=list)
    queries: list[str] = field(default_factory=list)
    rounds: int = 0

    @classmethod
    def start(cls, question: str, system_prompt: str = SYSTEM_PROMPT) -> "Conversation":
        """Seed a conversation with the system instruction and the user's question."""
        conversation = cls(question=question)
        conversation.add("system", system_prompt.strip())
        conversation.add("user", question)
        return conversation

    def add(self, role: str, content: str) -> None:
        """Append a message to the log."""
        self.messages.append(ConversationMessage(role=role, content=content))

    def payload(self) -> list[dict[str, str]]:
        """Return the log in chat completion request form."""
        return [message.to_payload() for message in self.messages]


class QueryAgent:
    """Agent that turns a question into SQL via tool calls and answers from the results."""

    def __init__(
        self,
        llm_client: object,
        repository: TransactionRepository,
        settings: Settings,
        tools: ToolRegistry | None = None,
    ) -> None:
        """Initialize the QueryAgent with an LLM client, the repository and settings."""
        self.llm_client = llm_client
        self.repository = repository
        self.settings = settings
        self.tools = tools or ToolRegistry([TransactionsTool(repository)])

    def ask(self, question: str) -> AgentAnswer:
        """Answer a question, running the model's queries as needed.

        Raises ToolCallError, QueryExecutionError, ModelInvocationError or QueryTimeoutError;
        none of them is retried.
        """
        deadline = time.monotonic() + self.settings.ask_timeout_seconds
        conversation = Conversation.start(question)
        logger.info(f"Question: {question}")
        while True:
            offer_tools = conversation.rounds < self.settings.max_tool_rounds
            message = self._complete(conversation, deadline, offer_tools=offer_tools)
            tool_calls = getattr(message, "tool_calls", None) or []
            if not offer_tools or not tool_calls:
                break
            results = self._execute_tool_calls(tool_calls, conversation)
            conversation.rounds += 1
            follow_up = FOLLOW_UP_PROMPT if conversation.rounds < self.settings.max_tool_rounds else FINAL_ANSWER_PROMPT
            conversation.add("user", f"{results}{follow_up}")
        answer = message.content or ""
        logger.info(f"Answered after {conversation.rounds} tool round(s)")
        return AgentAnswer(
            question=question,
            answer=answer,
            rounds=conversation.rounds,
            queries=list(conversation.queries),
        )

    def _complete(self, conversation: Conversation, deadline: float, *, offer_tools: bool) -> object:
        """Send the conversation to the model and return the first choice's message."""
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            msg = f"Question answering exceeded {self.settings.ask_timeout_seconds}s"
            logger.error(msg)
            raise QueryTimeoutError(msg)
        first_call = conversation.rounds == 0
        request: dict[str, Any] = {
            "model": self.settings.query_model if first_call else self.settings.answer_model,
            "messages": conversation.payload(),
            "temperature": self.settings.query_temperature if first_call else self.settings.answer_temperature,
            "max_completion_tokens": self.settings.max_completion_tokens,
            "timeout": remaining,
        }
        if offer_tools:
            request["tools"] = self.tools.definitions()
            request["tool_choice"] = "auto"
        yellow = get_color("yellow")
        reset = get_color("reset")
        logger.info(f"{yellow}AGENT: Calling LLM (round {conversation.rounds}, tools={offer_tools})...{reset}")
        try:
            completion = self.llm_client.chat.completions.create(**request)
        except groq.APITimeoutError as exc:
            msg = f"Groq API call timed out: {exc}"
            logger.exception(msg)
            raise QueryTimeoutError(msg) from exc
        except Exception as exc:
            msg = f"Groq API call failed: {exc}"
            logger.exception(msg)
            raise ModelInvocationError(msg) from exc
        if not completion.choices:
            msg = "Groq API returned no choices"
            raise ModelInvocationError(msg)
        return completion.choices[0].message

    def _execute_tool_calls(self, tool_calls: list, conversation: Conversation) -> str:
        """Run every tool call in order and return the accumulated results block.

        Calls naming an unregistered tool are skipped; the block is returned even if it is empty.
        """
        cyan = get_color("cyan")
        green = get_color("green")
        reset = get_color("reset")
        results = RESULTS_HEADER
        for call in tool_calls:
            name = call.function.name
            tool = self.tools.get(name)
            if tool is None:
                logger.warning(f"Model requested unknown tool '{name}', ignoring it")
                continue
            arguments = call.function.arguments
            logger.info(f"{cyan}TOOL {name}: {arguments}{reset}")
            result = tool.run(arguments)
            if result.query is not None:
                conversation.queries.append(result.query)
            output = serialize_rows(result.rows)
            logger.info(f"{green}TOOL {name}: {len(result.rows)} row(s) {_truncate(output)}{reset}")
            results += output + "\n\n"
        return results


def build_agent(repository: TransactionRepository, settings: Settings) -> QueryAgent:
    """Create a QueryAgent backed by a Groq client.

    SDK retries are disabled so a failed or timed out call ends the exchange within its budget.
    """
    client = groq.Groq(api_key=settings.groq_api_key, max_retries=0)
    return QueryAgent(client, repository, settings)
