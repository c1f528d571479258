"""Top-level AppConfig aggregate — the root configuration object."""

from pydantic import BaseModel, ConfigDict, Field

from alecto.config.domain.model import ModelConfig
from alecto.config.domain.provider import ProviderConfig
from alecto.config.domain.session import SessionConfig

type ProviderName = str


class AppConfig(BaseModel):
    """Root configuration aggregate, read once at startup.

    Accepts the ``mcpServers`` / ``ollama`` keys of the on-disk format as well
    as the Python field names.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    providers: dict[ProviderName, ProviderConfig] = Field(
        default_factory=dict, alias="mcpServers"
    )
    model: ModelConfig = Field(default_factory=ModelConfig, alias="ollama")
    session: SessionConfig = Field(default_factory=SessionConfig)
