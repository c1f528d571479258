"""Model oracle configuration models."""

from pydantic import BaseModel, Field

DEFAULT_MODEL = "ministral-3:14b"


class SamplingParameters(BaseModel, frozen=True):
    temperature: float | None = Field(default=None, ge=0.0)
    top_p: float | None = Field(default=None, ge=0.0, le=1.0)
    top_k: int | None = Field(default=None, ge=1)
    num_predict: int | None = None
    stop: list[str] | None = None


class ModelConfig(BaseModel, frozen=True):
    """Where the model is served and how it samples."""

    host: str | None = None
    model: str = Field(default=DEFAULT_MODEL, min_length=1)
    parameters: SamplingParameters = Field(default_factory=SamplingParameters)
