"""RichChatConsole — terminal input and output for an interactive session."""

import asyncio
import threading

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

from alecto.chat.domain.console import EXIT_COMMAND


class RichChatConsole:
    """Satisfies the ChatConsole protocol using Rich.

    The blocking prompt runs in a daemon thread so the event loop stays free
    for provider transports between turns, and so an unanswered prompt never
    holds up interpreter shutdown.
    """

    def __init__(self, console: Console | None = None) -> None:
        self._console = console if console is not None else Console()

    async def prompt(self) -> str:
        loop = asyncio.get_running_loop()
        answer: asyncio.Future[str] = loop.create_future()
        threading.Thread(
            target=self._ask, args=(loop, answer), name="alecto-prompt", daemon=True
        ).start()
        try:
            return await answer
        except (EOFError, KeyboardInterrupt):
            self._console.print()
            return EXIT_COMMAND
        except asyncio.CancelledError:
            # Under asyncio.run, Ctrl-C cancels the main task instead of raising
            # KeyboardInterrupt; treat it as a request to leave.
            task = asyncio.current_task()
            if task is not None:
                task.uncancel()
            self._console.print()
            return EXIT_COMMAND

    def _ask(self, loop: asyncio.AbstractEventLoop, answer: asyncio.Future[str]) -> None:
        try:
            line = Prompt.ask("[bold cyan]You[/bold cyan]", console=self._console)
        except BaseException as exc:
            _settle(loop, answer, exc=exc)
        else:
            _settle(loop, answer, line=line)

    def show_answer(self, text: str) -> None:
        self._console.print(f"[bold magenta]Assistant:[/bold magenta] {escape(text)}")

    def show_tool_use(self, tool_name: str) -> None:
        self._console.print(f"[dim]Using tool: {escape(tool_name)}[/dim]")

    def show_notice(self, text: str) -> None:
        self._console.print(f"[dim]{escape(text)}[/dim]")

    def show_warning(self, text: str) -> None:
        self._console.print(f"[yellow]{escape(text)}[/yellow]")

    def show_error(self, text: str) -> None:
        self._console.print(f"[bold red]Error:[/bold red] {escape(text)}")


def _settle(
    loop: asyncio.AbstractEventLoop,
    answer: asyncio.Future[str],
    line: str = "",
    exc: BaseException | None = None,
) -> None:
    """Hand the prompt's outcome to the loop; a prompt abandoned by shutdown is dropped."""

    def deliver() -> None:
        if answer.done():
            return
        if exc is not None:
            answer.set_exception(exc)
        else:
            answer.set_result(line)

    try:
        loop.call_soon_threadsafe(deliver)
    except RuntimeError:
        return
