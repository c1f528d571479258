"""Structlog implementation of the ConfigObserver port."""

import structlog


class StructlogConfigObserver:
    """Delegates config domain events to structlog.

    Satisfies the ConfigObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def config_loaded(self, path: str, provider_count: int, model: str) -> None:
        self._log.info(
            "config.loaded", path=path, provider_count=provider_count, model=model
        )

    def config_no_providers_warning(self, path: str) -> None:
        self._log.warning(
            "config.no_providers",
            path=path,
            message="No mcpServers configured; the session cannot start without a tool provider",
        )
