"""ToolProvider and ProviderFactory Protocols — structural interfaces for tool sources."""

from typing import Any, Protocol

from alecto.config.domain.provider import ProviderConfig
from alecto.tools.domain.result import RawToolOutput


class ToolProvider(Protocol):
    """One connected source of tools, typically an MCP server process."""

    @property
    def name(self) -> str: ...

    async def connect(self) -> None: ...

    async def list_tools(self) -> Any:
        """Return the provider's raw tool descriptors (expected: a list of mappings)."""
        ...

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> RawToolOutput: ...

    async def close(self) -> None: ...


class ProviderFactory(Protocol):
    """Constructs an unconnected ToolProvider for one configured provider."""

    def create(self, name: str, config: ProviderConfig) -> ToolProvider: ...
