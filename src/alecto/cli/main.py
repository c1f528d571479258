"""CLI entrypoint for alecto — typer app with `chat` and `tools` commands."""

import asyncio
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

import structlog
import typer
from rich.console import Console
from rich.table import Table

from alecto.chat.application.session import ChatSession
from alecto.chat.infrastructure.console import RichChatConsole
from alecto.chat.infrastructure.litellm_model import LiteLLMChatModel
from alecto.chat.infrastructure.observer import StructlogSessionObserver
from alecto.config.domain.config import AppConfig
from alecto.config.infrastructure.loader import DEFAULT_CONFIG_PATH, ConfigLoader
from alecto.config.infrastructure.observer import StructlogConfigObserver
from alecto.core.errors import AlectoError
from alecto.tools.application.catalog import ToolCatalog, ToolCatalogBuilder
from alecto.tools.application.executor import ToolExecutor
from alecto.tools.application.reconciler import ParameterReconciler
from alecto.tools.infrastructure.mcp_stdio import McpStdioProviderFactory
from alecto.tools.infrastructure.observer import StructlogToolObserver

app = typer.Typer(add_completion=False, help="Chat with a local model that can call MCP tools.")

_LOG_LEVELS = {"debug": 10, "info": 20, "warning": 30, "error": 40}

_CONFIG_OPTION = typer.Option(
    DEFAULT_CONFIG_PATH,
    "--config",
    "-c",
    envvar="ALECTO_CONFIG",
    help="Path to the YAML or JSON config file.",
)
_LOG_FORMAT_OPTION = typer.Option("console", "--log-format", help="console or json")
_LOG_LEVEL_OPTION = typer.Option("warning", "--log-level", help="debug, info, warning or error")


def _configure_structlog(log_format: str, log_level: str) -> None:
    """Configure structlog to render to stderr, keeping stdout for the conversation."""
    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    elif log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        typer.echo(f"Invalid log format: {log_format!r}. Must be 'console' or 'json'.")
        raise typer.Exit(code=1)

    level = _LOG_LEVELS.get(log_level.lower())
    if level is None:
        typer.echo(
            f"Invalid log level: {log_level!r}. Must be one of {', '.join(_LOG_LEVELS)}."
        )
        raise typer.Exit(code=1)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _app_version() -> str:
    try:
        return version("alecto")
    except PackageNotFoundError:
        return "0.0.0"


def _load_config(path: Path) -> AppConfig:
    try:
        return ConfigLoader(observer=StructlogConfigObserver()).load(path=path)
    except AlectoError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc


def _print_banner(console: Console) -> None:
    console.rule(style="red")
    console.print(f"[bold white]   Welcome to ALECTO CLI v{_app_version()}[/bold white]")
    console.rule(style="magenta")


def _catalog_builder(config: AppConfig) -> ToolCatalogBuilder:
    observer = StructlogToolObserver()
    return ToolCatalogBuilder(
        providers=config.providers,
        factory=McpStdioProviderFactory(observer=observer),
        observer=observer,
    )


async def _chat(config: AppConfig, console: Console) -> None:
    async with _catalog_builder(config) as builder:
        await builder.initialize()
        catalog = builder.catalog
        session = ChatSession(
            model=LiteLLMChatModel(config=config.model),
            catalog=catalog,
            executor=ToolExecutor(
                catalog=catalog,
                observer=StructlogToolObserver(),
                default_timeout_ms=config.session.tool_timeout_ms,
            ),
            reconciler=ParameterReconciler(catalog=catalog),
            console=RichChatConsole(console=console),
            config=config.session,
            observer=StructlogSessionObserver(),
        )
        console.print(f"[dim]Model is {config.model.model} · {len(catalog)} tools available[/dim]")
        await session.probe_model()
        await session.run()


async def _list_tools(config: AppConfig) -> ToolCatalog:
    async with _catalog_builder(config) as builder:
        await builder.initialize()
        return builder.catalog


def _render_catalog(console: Console, catalog: ToolCatalog) -> None:
    table = Table(title=f"{len(catalog)} tools")
    table.add_column("Tool", style="cyan", no_wrap=True)
    table.add_column("Required")
    table.add_column("Description", overflow="fold")
    for schema in catalog.schemas:
        table.add_row(
            schema.name,
            ", ".join(schema.parameters.required) or "-",
            schema.description,
        )
    console.print(table)


@app.command()
def chat(
    config_path: Path = _CONFIG_OPTION,
    model: str | None = typer.Option(None, "--model", "-m", help="Override ollama.model."),
    host: str | None = typer.Option(None, "--host", help="Override ollama.host."),
    log_format: str = _LOG_FORMAT_OPTION,
    log_level: str = _LOG_LEVEL_OPTION,
) -> None:
    """Start an interactive chat session."""
    _configure_structlog(log_format=log_format, log_level=log_level)
    config = _load_config(path=config_path)

    overrides = {
        key: value for key, value in {"model": model, "host": host}.items() if value
    }
    if overrides:
        config = config.model_copy(update={"model": config.model.model_copy(update=overrides)})

    console = Console()
    _print_banner(console)
    try:
        asyncio.run(_chat(config=config, console=console))
    except AlectoError as exc:
        typer.echo(f"Failed to start chat: {exc}", err=True)
        raise typer.Exit(code=1) from exc


@app.command()
def tools(
    config_path: Path = _CONFIG_OPTION,
    log_format: str = _LOG_FORMAT_OPTION,
    log_level: str = _LOG_LEVEL_OPTION,
) -> None:
    """Connect to every configured provider and list the tools they offer."""
    _configure_structlog(log_format=log_format, log_level=log_level)
    config = _load_config(path=config_path)
    try:
        catalog = asyncio.run(_list_tools(config=config))
    except AlectoError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    _render_catalog(Console(), catalog)


if __name__ == "__main__":
    app()
