"""Exception types raised across chime-ai."""


class ChimeAIError(Exception):
    """Base exception for chime-ai."""


class ConfigurationError(ChimeAIError):
    """Missing or invalid configuration, such as an absent API credential."""


class LineParseError(ChimeAIError):
    """A statement line matched the grammar but one of its fields could not be converted."""


class IngestionError(ChimeAIError):
    """A statement file could not be read or its transactions could not be stored."""


class QueryExecutionError(ChimeAIError):
    """A raw query could not be executed against the transaction store."""


class ToolCallError(ChimeAIError):
    """The model emitted a tool invocation whose arguments could not be decoded."""


class ModelInvocationError(ChimeAIError):
    """The chat completion request failed (network, credential, rate limit)."""


class QueryTimeoutError(ChimeAIError):
    """The question-answering exchange ran past its wall-clock budget."""
