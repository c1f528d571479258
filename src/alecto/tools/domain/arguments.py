"""Tool-call argument decoding."""

import json
from collections.abc import Mapping
from typing import Any

type RawArguments = str | Mapping[str, Any] | None

FALLBACK_KEY = "value"


def decode_arguments(raw: RawArguments) -> dict[str, Any]:
    """Normalise a tool call's arguments to a mapping.

    A JSON string is decoded; a string that is not a JSON object is wrapped as
    ``{"value": raw}`` so the provider can reject it with a readable error.
    """
    if raw is None:
        return {}
    if isinstance(raw, Mapping):
        return dict(raw)
    try:
        decoded = json.loads(raw)
    except ValueError:
        return {FALLBACK_KEY: raw}
    if not isinstance(decoded, dict):
        return {FALLBACK_KEY: raw}
    return decoded


def is_decodable(raw: RawArguments) -> bool:
    """True when raw is a mapping, None, or a string holding a JSON object."""
    if raw is None or isinstance(raw, Mapping):
        return True
    try:
        return isinstance(json.loads(raw), dict)
    except ValueError:
        return False
