"""Tool provider configuration — one MCP server launched as a subprocess via stdio."""

from pathlib import Path

from pydantic import BaseModel, Field


class ProviderConfig(BaseModel, frozen=True):
    """Launch settings for one tool provider process.

    When ``env`` is None the provider inherits the MCP SDK's default safe
    environment; otherwise the given variables are layered on top of it.
    """

    command: str = Field(min_length=1)
    args: list[str] = Field(default_factory=list)
    env: dict[str, str] | None = None
    cwd: Path | None = None
