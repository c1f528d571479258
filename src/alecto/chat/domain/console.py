"""ChatConsole Protocol — the user-facing input and output surface of a session."""

from typing import Protocol

EXIT_COMMAND = "exit"


class ChatConsole(Protocol):
    async def prompt(self) -> str:
        """Read one line from the user; a cancelled prompt returns "exit"."""
        ...

    def show_answer(self, text: str) -> None: ...

    def show_tool_use(self, tool_name: str) -> None: ...

    def show_notice(self, text: str) -> None: ...

    def show_warning(self, text: str) -> None: ...

    def show_error(self, text: str) -> None: ...
