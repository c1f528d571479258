"""Transcript — the ordered, append-only conversation history of one session."""

from collections.abc import Iterator

from alecto.chat.domain.message import Message


class Transcript:
    """Messages are only ever appended, or popped from the end to undo a failed turn."""

    def __init__(self, messages: list[Message] | None = None) -> None:
        self._messages: list[Message] = list(messages) if messages is not None else []

    def append(self, message: Message) -> None:
        self._messages.append(message)

    def rollback(self, length: int) -> int:
        """Pop messages until the transcript is `length` long; return how many were removed."""
        if length < 0:
            raise ValueError(f"rollback length must be >= 0, got {length}")
        removed = 0
        while len(self._messages) > length:
            self._messages.pop()
            removed += 1
        return removed

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    @property
    def last(self) -> Message | None:
        return self._messages[-1] if self._messages else None

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))
