"""ToolCatalogBuilder — connects tool providers and compiles their tools into one catalog."""

from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any, Self

from pydantic import ValidationError

from alecto.config.domain.provider import ProviderConfig
from alecto.tools.domain.observer import ToolObserver
from alecto.tools.domain.provider import ProviderFactory, ToolProvider
from alecto.tools.domain.schema import ToolSchema
from alecto.tools.infrastructure.errors import NoProvidersAvailableError


class ToolCatalog:
    """Read-only view of every available tool and the provider that serves it."""

    def __init__(
        self,
        schemas: Mapping[str, ToolSchema],
        dispatch: Mapping[str, ToolProvider],
    ) -> None:
        self._schemas = MappingProxyType(dict(schemas))
        self._dispatch = MappingProxyType(dict(dispatch))

    @property
    def schemas(self) -> tuple[ToolSchema, ...]:
        return tuple(self._schemas.values())

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._schemas)

    def get(self, name: str) -> ToolSchema | None:
        return self._schemas.get(name)

    def provider_for(self, name: str) -> ToolProvider | None:
        return self._dispatch.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)


class ToolCatalogBuilder:
    """Owns the provider connections for one session.

    Use as an async context manager so every connected provider is closed on
    the way out, whichever way the session ends.
    """

    def __init__(
        self,
        providers: Mapping[str, ProviderConfig],
        factory: ProviderFactory,
        observer: ToolObserver,
    ) -> None:
        self._providers = providers
        self._factory = factory
        self._observer = observer
        self._connected: list[ToolProvider] = []
        self._catalog: ToolCatalog | None = None

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @property
    def catalog(self) -> ToolCatalog:
        if self._catalog is None:
            raise RuntimeError("ToolCatalogBuilder.initialize() has not been awaited")
        return self._catalog

    async def initialize(self) -> list[ToolSchema]:
        """Connect every provider in declaration order and build the catalog.

        Providers that fail to connect, or that return a malformed tool list,
        are logged and skipped.

        Raises:
            NoProvidersAvailableError: if no provider could be connected.
        """
        for name, config in self._providers.items():
            provider = self._factory.create(name=name, config=config)
            try:
                await provider.connect()
            except Exception as exc:
                self._observer.provider_connection_failed(provider=name, reason=str(exc))
                continue
            self._connected.append(provider)
            self._observer.provider_connected(provider=name)

        if not self._connected:
            raise NoProvidersAvailableError(attempted=list(self._providers))

        schemas: dict[str, ToolSchema] = {}
        dispatch: dict[str, ToolProvider] = {}
        for provider in self._connected:
            for schema in await self._fetch_schemas(provider):
                previous = dispatch.get(schema.name)
                if previous is not None:
                    self._observer.tool_shadowed(
                        tool_name=schema.name,
                        previous_provider=previous.name,
                        provider=provider.name,
                    )
                schemas[schema.name] = schema
                dispatch[schema.name] = provider

        self._catalog = ToolCatalog(schemas=schemas, dispatch=dispatch)
        self._observer.catalog_built(
            provider_count=len(self._connected), tool_count=len(self._catalog)
        )
        return list(self._catalog.schemas)

    async def close(self) -> None:
        """Close every connected provider; a failing close does not stop the others."""
        connected, self._connected = self._connected, []
        for provider in reversed(connected):
            try:
                await provider.close()
            except Exception as exc:
                self._observer.provider_close_failed(provider=provider.name, reason=str(exc))

    async def _fetch_schemas(self, provider: ToolProvider) -> list[ToolSchema]:
        try:
            raw_tools = await provider.list_tools()
        except Exception as exc:
            self._observer.provider_tools_invalid(provider=provider.name, reason=str(exc))
            return []

        if not _is_descriptor_list(raw_tools):
            self._observer.provider_tools_invalid(
                provider=provider.name,
                reason=f"expected a list of tool objects, got {type(raw_tools).__name__}",
            )
            return []

        schemas: list[ToolSchema] = []
        for descriptor in raw_tools:
            name = descriptor.get("name")
            if not isinstance(name, str) or not name:
                self._observer.tool_missing_name(
                    provider=provider.name, descriptor=repr(descriptor)
                )
                continue
            try:
                schemas.append(ToolSchema.from_descriptor(descriptor))
            except ValidationError as exc:
                self._observer.tool_schema_invalid(
                    provider=provider.name, tool_name=name, reason=str(exc)
                )
        return schemas


def _is_descriptor_list(raw: Any) -> bool:
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
        return False
    return all(isinstance(item, Mapping) for item in raw)
