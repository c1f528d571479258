"""Tool result content blocks — discriminated union on `type`, and text flattening."""

from collections.abc import Sequence
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

NO_CONTENT = "No content"


class _Block(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class TextBlock(_Block):
    type: Literal["text"]
    text: str | None = None


class ImageBlock(_Block):
    type: Literal["image"]
    data: str | None = None
    mime_type: str | None = Field(default=None, alias="mimeType")


class AudioBlock(_Block):
    type: Literal["audio"]
    data: str | None = None
    mime_type: str | None = Field(default=None, alias="mimeType")


class ResourceLinkBlock(_Block):
    type: Literal["resource_link"]
    uri: str | None = None


class EmbeddedResourceBlock(_Block):
    type: Literal["resource"]
    resource: dict[str, Any] | None = None


type ContentBlock = Annotated[
    TextBlock | ImageBlock | AudioBlock | ResourceLinkBlock | EmbeddedResourceBlock,
    Field(discriminator="type"),
]

_BLOCK_ADAPTER: TypeAdapter[ContentBlock] = TypeAdapter(ContentBlock)


def parse_blocks(items: Sequence[Any]) -> list[ContentBlock]:
    """Validate raw content items, ignoring any that are not a known block."""
    blocks: list[ContentBlock] = []
    for item in items:
        try:
            blocks.append(_BLOCK_ADAPTER.validate_python(item))
        except ValidationError:
            continue
    return blocks


def flatten_content(payload: Any) -> str:
    """Flatten a provider's result payload to plain text.

    A sequence keeps only its text blocks (empty text becomes "No content"),
    joined with newlines. Any other payload is stringified as-is.
    """
    if isinstance(payload, (str, bytes)) or not isinstance(payload, Sequence):
        return str(payload)

    parts: list[str] = []
    for block in parse_blocks(payload):
        match block:
            case TextBlock(text=text):
                parts.append(text or NO_CONTENT)
            case ImageBlock() | AudioBlock() | ResourceLinkBlock() | EmbeddedResourceBlock():
                continue
    return "\n".join(parts)
