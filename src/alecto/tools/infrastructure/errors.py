"""Error types raised while connecting to providers and running tools."""

from alecto.core.errors import AlectoError


class NoProvidersAvailableError(AlectoError):
    """Raised when not a single configured tool provider could be connected."""

    def __init__(self, attempted: list[str]) -> None:
        self.attempted = attempted
        detail = ", ".join(attempted) if attempted else "none configured"
        super().__init__(f"Failed to start session: no tool providers available ({detail})")


class ProviderConnectionError(AlectoError):
    """Raised when one provider process cannot be started or initialised."""

    def __init__(self, provider: str, reason: str) -> None:
        self.provider = provider
        super().__init__(f"Failed to connect to provider '{provider}': {reason}")


class CommandNotFoundError(AlectoError):
    """Raised when a provider's launch command and all its alternatives are missing."""

    def __init__(self, command: str) -> None:
        self.command = command
        super().__init__(
            f"Failed to resolve command '{command}': ensure it is installed and on PATH"
        )


class ToolNotFoundError(AlectoError):
    """Raised when a tool name is absent from the catalog's dispatch table."""

    def __init__(self, tool_name: str) -> None:
        self.tool_name = tool_name
        super().__init__(f"Failed to find tool '{tool_name}' among available tools")


class ToolExecutionError(AlectoError):
    """Base class for a provider call that did not produce a result."""

    def __init__(self, tool_name: str, message: str) -> None:
        self.tool_name = tool_name
        super().__init__(message)


class ToolTimeoutError(ToolExecutionError):
    """Raised when a provider call does not settle before its timeout."""

    def __init__(self, tool_name: str, timeout_ms: int) -> None:
        self.timeout_ms = timeout_ms
        super().__init__(
            tool_name,
            f"Failed to call tool '{tool_name}': timed out after {timeout_ms}ms",
        )


class ToolCallFailedError(ToolExecutionError):
    """Raised when the provider call itself throws, whatever the provider's error type."""

    def __init__(self, tool_name: str, reason: str) -> None:
        self.reason = reason
        super().__init__(tool_name, f"Failed to call tool '{tool_name}': {reason}")
