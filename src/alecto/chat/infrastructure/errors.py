"""Error types raised by the model oracle adapter."""

from alecto.core.errors import AlectoError


class ModelError(AlectoError):
    """Base class for a model request that produced no message."""

    def __init__(self, message: str, reason: str) -> None:
        self.reason = reason
        super().__init__(message)


class ModelConnectionRefusedError(ModelError):
    """Raised when the model server refuses the connection (is Ollama running?)."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to reach model server: {reason}", reason=reason)


class ModelRequestFailedError(ModelError):
    """Raised for every other failed model request."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to get model response: {reason}", reason=reason)
