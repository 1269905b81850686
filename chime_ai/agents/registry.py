"""Tool registry for the tools offered to the chat model."""

from chime_ai.agents.base import BaseTool


class ToolRegistry:
    """Registry of tool instances, keyed by the name the model calls them by."""

    def __init__(self, tools: list[BaseTool] | None = None) -> None:
        """Initialize the registry, optionally with an initial set of tools."""
        self._tools: dict[str, BaseTool] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: BaseTool) -> None:
        """Register a tool under its name."""
        self._tools[tool.name] = tool

    def get(self, name: str) -> BaseTool | None:
        """Retrieve a tool by name, or None if the model asked for an unknown tool."""
        return self._tools.get(name)

    def available(self) -> list[str]:
        """List all registered tool names."""
        return list(self._tools.keys())

    def definitions(self) -> list[dict]:
        """Return the definitions of every registered tool for a chat completion request."""
        return [tool.definition() for tool in self._tools.values()]
