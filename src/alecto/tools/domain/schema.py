"""ToolSchema value objects — the normalised description of one tool capability."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ParameterSchema(BaseModel):
    """JSON-schema-like shape of one tool parameter.

    Keys this model does not name (``enum``, ``default``, ...) are preserved
    so the model sees the provider's schema unchanged.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    type: str | list[str] | None = None
    description: str | None = None
    items: "ParameterSchema | None" = None
    properties: "dict[str, ParameterSchema] | None" = None
    required: list[str] | None = None
    minimum: float | None = None
    maximum: float | None = None
    pattern: str | None = None


class ToolParameters(BaseModel, frozen=True):
    properties: dict[str, ParameterSchema] = Field(default_factory=dict)
    required: tuple[str, ...] = ()

    @property
    def names(self) -> list[str]:
        return list(self.properties)


class ToolSchema(BaseModel, frozen=True):
    """One tool as presented to the model."""

    name: str = Field(min_length=1)
    description: str = ""
    parameters: ToolParameters = Field(default_factory=ToolParameters)

    @classmethod
    def from_descriptor(cls, descriptor: Mapping[str, Any]) -> "ToolSchema":
        """Build a ToolSchema from a raw MCP tool descriptor.

        Raises:
            pydantic.ValidationError: if the descriptor's input schema is malformed.
        """
        input_schema = descriptor.get("inputSchema") or {}
        parameters = (
            {
                "properties": input_schema.get("properties") or {},
                "required": input_schema.get("required") or [],
            }
            if isinstance(input_schema, Mapping)
            else input_schema
        )
        return cls.model_validate(
            {
                "name": descriptor.get("name"),
                "description": descriptor.get("description") or "",
                "parameters": parameters,
            }
        )

    def to_function_tool(self) -> dict[str, Any]:
        """Render in the OpenAI function-tool shape understood by chat models."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": {
                    "type": "object",
                    "properties": {
                        name: param.model_dump(exclude_none=True)
                        for name, param in self.parameters.properties.items()
                    },
                    "required": list(self.parameters.required),
                },
            },
        }
