"""McpStdioProvider — ToolProvider backed by an MCP server subprocess over stdio."""

from contextlib import AsyncExitStack
from importlib.metadata import PackageNotFoundError, version
from typing import Any

from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client
from mcp.types import CallToolResult, Implementation, Tool

from alecto.config.domain.provider import ProviderConfig
from alecto.tools.domain.observer import ToolObserver
from alecto.tools.domain.provider import ToolProvider
from alecto.tools.domain.result import RawToolOutput
from alecto.tools.infrastructure.command import resolve_command
from alecto.tools.infrastructure.errors import ProviderConnectionError


def _client_version() -> str:
    try:
        return version("alecto")
    except PackageNotFoundError:
        return "0.0.0"


class McpStdioProvider:
    """Owns one MCP server process and the client session talking to it.

    The transport and session are entered on an AsyncExitStack so close()
    releases both, in reverse order, from the task that opened them.
    """

    def __init__(self, name: str, config: ProviderConfig, observer: ToolObserver) -> None:
        self._name = name
        self._config = config
        self._observer = observer
        self._stack: AsyncExitStack | None = None
        self._session: ClientSession | None = None

    @property
    def name(self) -> str:
        return self._name

    async def connect(self) -> None:
        """Start the server process and run the MCP initialize handshake.

        Raises:
            CommandNotFoundError: if the launch command cannot be resolved.
            ProviderConnectionError: if the process or handshake fails.
        """
        command = resolve_command(
            self._config.command, on_substitute=self._command_substituted
        )
        params = StdioServerParameters(
            command=command,
            args=list(self._config.args),
            env=dict(self._config.env) if self._config.env is not None else None,
            cwd=self._config.cwd,
        )

        stack = AsyncExitStack()
        try:
            read, write = await stack.enter_async_context(stdio_client(params))
            session = await stack.enter_async_context(
                ClientSession(
                    read,
                    write,
                    client_info=Implementation(
                        name=f"alecto-{self._name}", version=_client_version()
                    ),
                )
            )
            await session.initialize()
        except Exception as exc:
            await stack.aclose()
            raise ProviderConnectionError(provider=self._name, reason=str(exc)) from exc

        self._stack = stack
        self._session = session

    async def list_tools(self) -> list[dict[str, Any]]:
        result = await self._require_session().list_tools()
        return [tool_to_descriptor(tool) for tool in result.tools]

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> RawToolOutput:
        result = await self._require_session().call_tool(name, arguments)
        return result_to_output(result)

    async def close(self) -> None:
        stack, self._stack, self._session = self._stack, None, None
        if stack is not None:
            await stack.aclose()

    def _require_session(self) -> ClientSession:
        if self._session is None:
            raise ProviderConnectionError(provider=self._name, reason="not connected")
        return self._session

    def _command_substituted(self, command: str, alternative: str) -> None:
        self._observer.command_substituted(
            provider=self._name, command=command, alternative=alternative
        )


class McpStdioProviderFactory:
    """Creates McpStdioProvider instances; satisfies the ProviderFactory protocol."""

    def __init__(self, observer: ToolObserver) -> None:
        self._observer = observer

    def create(self, name: str, config: ProviderConfig) -> ToolProvider:
        return McpStdioProvider(name=name, config=config, observer=self._observer)


def tool_to_descriptor(tool: Tool) -> dict[str, Any]:
    """Dump an MCP Tool to the raw descriptor shape (``name``, ``description``, ``inputSchema``)."""
    return tool.model_dump(by_alias=True, exclude_none=True)


def result_to_output(result: CallToolResult) -> RawToolOutput:
    return RawToolOutput(
        content=[block.model_dump(by_alias=True) for block in result.content],
        is_error=bool(result.isError),
    )
