"""Structlog implementation of the ToolObserver port."""

import structlog


class StructlogToolObserver:
    """Delegates tool domain events to structlog.

    Satisfies the ToolObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def provider_connected(self, provider: str) -> None:
        self._log.info("tools.provider_connected", provider=provider)

    def provider_connection_failed(self, provider: str, reason: str) -> None:
        self._log.error("tools.provider_connection_failed", provider=provider, reason=reason)

    def provider_tools_invalid(self, provider: str, reason: str) -> None:
        self._log.warning("tools.provider_tools_invalid", provider=provider, reason=reason)

    def provider_close_failed(self, provider: str, reason: str) -> None:
        self._log.warning("tools.provider_close_failed", provider=provider, reason=reason)

    def tool_missing_name(self, provider: str, descriptor: str) -> None:
        self._log.warning("tools.tool_missing_name", provider=provider, descriptor=descriptor)

    def tool_schema_invalid(self, provider: str, tool_name: str, reason: str) -> None:
        self._log.warning(
            "tools.tool_schema_invalid",
            provider=provider,
            tool_name=tool_name,
            reason=reason,
        )

    def tool_shadowed(self, tool_name: str, previous_provider: str, provider: str) -> None:
        self._log.warning(
            "tools.tool_shadowed",
            tool_name=tool_name,
            previous_provider=previous_provider,
            provider=provider,
            message="Later provider replaces the earlier registration",
        )

    def command_substituted(self, provider: str, command: str, alternative: str) -> None:
        self._log.warning(
            "tools.command_substituted",
            provider=provider,
            command=command,
            alternative=alternative,
        )

    def catalog_built(self, provider_count: int, tool_count: int) -> None:
        self._log.info(
            "tools.catalog_built", provider_count=provider_count, tool_count=tool_count
        )

    def arguments_undecodable(self, tool_name: str, raw_arguments: str) -> None:
        self._log.warning(
            "tools.arguments_undecodable",
            tool_name=tool_name,
            raw_arguments=raw_arguments,
        )

    def tool_call_started(self, tool_name: str, provider: str) -> None:
        self._log.info("tools.call_started", tool_name=tool_name, provider=provider)

    def tool_call_completed(
        self, tool_name: str, duration_ms: int, soft_failure: bool
    ) -> None:
        self._log.info(
            "tools.call_completed",
            tool_name=tool_name,
            duration_ms=duration_ms,
            soft_failure=soft_failure,
        )

    def tool_call_timed_out(self, tool_name: str, timeout_ms: int) -> None:
        self._log.error("tools.call_timed_out", tool_name=tool_name, timeout_ms=timeout_ms)

    def tool_call_failed(self, tool_name: str, reason: str) -> None:
        self._log.error("tools.call_failed", tool_name=tool_name, reason=reason)
