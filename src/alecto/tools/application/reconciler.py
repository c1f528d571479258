"""ParameterReconciler — proposes renamings for misnamed tool-call arguments."""

from collections.abc import Iterable, Mapping
from typing import Any

from alecto.tools.application.catalog import ToolCatalog


class ParameterReconciler:
    """Suggests declared parameter names for provided argument names that miss.

    A heuristic: it lets a subtly misnamed call (``qry`` for ``query``) be
    retried without another round-trip through the model.
    """

    def __init__(self, catalog: ToolCatalog) -> None:
        self._catalog = catalog

    def suggest(self, tool_name: str, provided_args: Mapping[str, Any]) -> dict[str, str]:
        """Map each unrecognised provided key to its best declared parameter name.

        Keys that already match, or for which nothing is similar, are omitted.
        """
        schema = self._catalog.get(tool_name)
        if schema is None:
            return {}

        declared = schema.parameters.names
        mapping: dict[str, str] = {}
        for provided in provided_args:
            if provided in declared:
                continue
            similar = find_similar_parameter(provided, declared)
            if similar is not None:
                mapping[provided] = similar
        return mapping


def find_similar_parameter(provided: str, declared: Iterable[str]) -> str | None:
    """Return the declared name most plausibly meant by provided.

    Both sides are compared lower-cased with underscores and hyphens removed.
    The first declared name that contains, or is contained by, provided wins;
    failing that, the first declared name provided abbreviates (``qry`` for
    ``query``).
    """
    needle = _normalize(provided)
    if not needle:
        return None
    candidates = [(name, _normalize(name)) for name in declared]
    for name, candidate in candidates:
        if candidate and (candidate in needle or needle in candidate):
            return name
    for name, candidate in candidates:
        if _is_abbreviation(needle, candidate):
            return name
    return None


def apply_parameter_mapping(
    arguments: Mapping[str, Any], mapping: Mapping[str, str]
) -> dict[str, Any]:
    """Rename argument keys per mapping; unmapped keys pass through unchanged."""
    return {mapping.get(key, key): value for key, value in arguments.items()}


def _normalize(name: str) -> str:
    return name.lower().replace("_", "").replace("-", "")


def _is_abbreviation(short: str, full: str) -> bool:
    """True when short's characters appear in full in order, starting with full's first."""
    if len(short) < 2 or not full or short[0] != full[0]:
        return False
    remaining = iter(full)
    return all(char in remaining for char in short)
