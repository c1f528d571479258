"""ToolObserver port — domain events emitted while building the catalog and running tools."""

from typing import Protocol


class ToolObserver(Protocol):
    """Observer port for tool domain events.

    Implementations may log to structlog or record for tests.
    """

    def provider_connected(self, provider: str) -> None: ...

    def provider_connection_failed(self, provider: str, reason: str) -> None: ...

    def provider_tools_invalid(self, provider: str, reason: str) -> None: ...

    def provider_close_failed(self, provider: str, reason: str) -> None: ...

    def tool_missing_name(self, provider: str, descriptor: str) -> None: ...

    def tool_schema_invalid(self, provider: str, tool_name: str, reason: str) -> None: ...

    def tool_shadowed(
        self, tool_name: str, previous_provider: str, provider: str
    ) -> None: ...

    def command_substituted(
        self, provider: str, command: str, alternative: str
    ) -> None: ...

    def catalog_built(self, provider_count: int, tool_count: int) -> None: ...

    def arguments_undecodable(self, tool_name: str, raw_arguments: str) -> None: ...

    def tool_call_started(self, tool_name: str, provider: str) -> None: ...

    def tool_call_completed(
        self, tool_name: str, duration_ms: int, soft_failure: bool
    ) -> None: ...

    def tool_call_timed_out(self, tool_name: str, timeout_ms: int) -> None: ...

    def tool_call_failed(self, tool_name: str, reason: str) -> None: ...
