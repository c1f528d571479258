"""Observer port for the config domain — defines events in domain language."""

from typing import Protocol


class ConfigObserver(Protocol):
    def config_loaded(self, path: str, provider_count: int, model: str) -> None: ...

    def config_no_providers_warning(self, path: str) -> None: ...
