"""Base exception class for all alecto-specific errors."""


class AlectoError(Exception):
    """Base class for all alecto errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
