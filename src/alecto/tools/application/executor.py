"""ToolExecutor — runs one tool call against its provider with a timeout."""

import asyncio
import time

from alecto.config.domain.session import DEFAULT_TOOL_TIMEOUT_MS
from alecto.tools.application.catalog import ToolCatalog
from alecto.tools.domain.arguments import RawArguments, decode_arguments, is_decodable
from alecto.tools.domain.content import flatten_content
from alecto.tools.domain.observer import ToolObserver
from alecto.tools.domain.result import ToolResult
from alecto.tools.infrastructure.errors import (
    ToolCallFailedError,
    ToolNotFoundError,
    ToolTimeoutError,
)


class ToolExecutor:
    """Dispatches tool calls through the catalog and normalises their results."""

    def __init__(
        self,
        catalog: ToolCatalog,
        observer: ToolObserver,
        default_timeout_ms: int = DEFAULT_TOOL_TIMEOUT_MS,
    ) -> None:
        self._catalog = catalog
        self._observer = observer
        self._default_timeout_ms = default_timeout_ms

    async def execute(
        self,
        name: str,
        raw_arguments: RawArguments,
        timeout_ms: int | None = None,
    ) -> ToolResult:
        """Call tool `name` and return its flattened result.

        The provider call races a timer; whichever settles first wins.

        Raises:
            ToolNotFoundError: if no provider serves `name`.
            ToolTimeoutError: if the call does not settle within the timeout.
            ToolCallFailedError: if the provider raises for any other reason.
        """
        provider = self._catalog.provider_for(name)
        if provider is None:
            raise ToolNotFoundError(tool_name=name)

        if not is_decodable(raw_arguments):
            self._observer.arguments_undecodable(
                tool_name=name, raw_arguments=str(raw_arguments)
            )
        arguments = decode_arguments(raw_arguments)
        timeout = timeout_ms if timeout_ms is not None else self._default_timeout_ms

        self._observer.tool_call_started(tool_name=name, provider=provider.name)
        start = time.monotonic()
        try:
            output = await asyncio.wait_for(
                provider.call_tool(name, arguments), timeout=timeout / 1000
            )
        except TimeoutError as exc:
            self._observer.tool_call_timed_out(tool_name=name, timeout_ms=timeout)
            raise ToolTimeoutError(tool_name=name, timeout_ms=timeout) from exc
        except Exception as exc:
            reason = str(exc) or type(exc).__name__
            self._observer.tool_call_failed(tool_name=name, reason=reason)
            raise ToolCallFailedError(tool_name=name, reason=reason) from exc

        result = ToolResult(
            tool_name=name,
            text=flatten_content(output.content),
            is_error=output.is_error,
        )
        self._observer.tool_call_completed(
            tool_name=name,
            duration_ms=int((time.monotonic() - start) * 1000),
            soft_failure=result.is_soft_failure,
        )
        return result
