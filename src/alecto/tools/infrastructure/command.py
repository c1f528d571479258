"""Launch command resolution for provider processes."""

import shutil
from collections.abc import Callable

from alecto.tools.infrastructure.errors import CommandNotFoundError

# Commands that can stand in for one another when the configured one is missing.
_RUNTIME_FAMILIES: dict[str, tuple[str, ...]] = {
    "node": ("node", "npx", "npm"),
    "python": ("python", "python3", "uvx", "uv", "pip"),
}

type Which = Callable[[str], str | None]


def resolve_command(
    command: str,
    which: Which = shutil.which,
    on_substitute: Callable[[str, str], None] | None = None,
) -> str:
    """Return command if it is on PATH, else the first available family alternative.

    Raises:
        CommandNotFoundError: if neither the command nor an alternative is found.
    """
    if which(command) is not None:
        return command

    for alternative in _alternatives(command):
        if which(alternative) is not None:
            if on_substitute is not None:
                on_substitute(command, alternative)
            return alternative

    raise CommandNotFoundError(command=command)


def _alternatives(command: str) -> list[str]:
    for members in _RUNTIME_FAMILIES.values():
        if command in members:
            return [member for member in members if member != command]
    return []
