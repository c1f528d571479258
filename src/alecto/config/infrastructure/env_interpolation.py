"""${ENV_VAR} references in raw config values, resolved in a single walk."""

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field

# ${NAME} or ${NAME:-fallback}; the fallback may be empty but cannot contain "}".
_REFERENCE = re.compile(r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::-(?P<fallback>[^}]*))?\}")

type RawValue = (
    str | int | float | bool | None | list["RawValue"] | dict[str, "RawValue"]
)


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one config tree.

    ``value`` is only meaningful when ``missing`` is empty: unresolved
    references are left in place as written.
    """

    value: RawValue
    missing: tuple[str, ...] = field(default=())


def resolve_env_refs(data: RawValue, environ: Mapping[str, str] | None = None) -> Resolution:
    """Substitute every ${ENV_VAR} in data's values from environ (os.environ by default).

    A reference with a ``:-`` fallback never counts as missing. Mapping keys
    are left untouched. Unset variables without a fallback are reported once
    each, in the order they are first met.
    """
    resolver = _Resolver(os.environ if environ is None else environ)
    value = resolver.walk(data)
    return Resolution(value=value, missing=tuple(resolver.missing))


class _Resolver:
    def __init__(self, environ: Mapping[str, str]) -> None:
        self._environ = environ
        self.missing: list[str] = []

    def walk(self, data: RawValue) -> RawValue:
        match data:
            case str():
                return _REFERENCE.sub(self._substitute, data)
            case list():
                return [self.walk(item) for item in data]
            case dict():
                return {key: self.walk(value) for key, value in data.items()}
            case _:
                return data

    def _substitute(self, reference: re.Match[str]) -> str:
        name, fallback = reference.group("name"), reference.group("fallback")
        if name in self._environ:
            return self._environ[name]
        if fallback is not None:
            return fallback
        if name not in self.missing:
            self.missing.append(name)
        return reference.group(0)
