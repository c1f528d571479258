"""Tests for provider launch command resolution."""

import pytest

from alecto.tools.infrastructure.command import resolve_command
from alecto.tools.infrastructure.errors import CommandNotFoundError


def _which_for(*available: str):
    def which(command: str) -> str | None:
        return f"/usr/bin/{command}" if command in available else None

    return which


class TestResolveCommand:
    def test_available_command_returned_unchanged(self) -> None:
        assert resolve_command("npx", which=_which_for("npx", "node")) == "npx"

    def test_missing_command_falls_back_within_family(self) -> None:
        substitutions: list[tuple[str, str]] = []

        resolved = resolve_command(
            "python",
            which=_which_for("python3"),
            on_substitute=lambda command, alt: substitutions.append((command, alt)),
        )

        assert resolved == "python3"
        assert substitutions == [("python", "python3")]

    def test_fallback_follows_family_order(self) -> None:
        assert resolve_command("npx", which=_which_for("npm", "node")) == "node"

    def test_never_crosses_families(self) -> None:
        with pytest.raises(CommandNotFoundError) as exc_info:
            resolve_command("npx", which=_which_for("python3", "uvx"))

        assert exc_info.value.command == "npx"

    def test_unknown_command_without_family_raises(self) -> None:
        with pytest.raises(CommandNotFoundError):
            resolve_command("docker", which=_which_for("npx"))
