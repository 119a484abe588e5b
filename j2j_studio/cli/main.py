"""Main CLI entry point for j2j-studio."""

import asyncio
import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from j2j_studio import __version__
from j2j_studio.client.client import StudioClient
from j2j_studio.config.settings import USER_CONFIG_FILE, Settings, get_settings, init_user_config
from j2j_studio.core.exceptions import TransportError
from j2j_studio.core.store import DocumentStore
from j2j_studio.core.types import BufferKind, BufferStatus, StatusLevel
from j2j_studio.render.tree import render_output
from j2j_studio.session.studio import StudioSession

app = typer.Typer(
    name="j2j-studio",
    help="Client for a JSON-to-JSON transformation service.",
    add_completion=False,
)
config_app = typer.Typer(help="Manage user configuration.")
app.add_typer(config_app, name="config")

console = Console()

_LEVEL_STYLES = {
    StatusLevel.VALID: "green",
    StatusLevel.WARNING: "yellow",
    StatusLevel.ERROR: "red",
    StatusLevel.PENDING: "dim",
}


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"j2j-studio version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = False,
) -> None:
    """J2J Studio: edit, validate and run JSON transformation chains."""
    pass


def _settings_for(base_url: Optional[str]) -> Settings:
    settings = get_settings()
    if base_url:
        service = settings.service.model_copy(update={"base_url": base_url.rstrip("/")})
        settings = settings.model_copy(update={"service": service})
    return settings


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        console.print(f"[red]Cannot read {path}: {e.strerror}[/red]")
        raise typer.Exit(code=2)


def _status_markup(status: BufferStatus) -> str:
    style = _LEVEL_STYLES[status.level]
    line = f"[{style}]{status.label}[/{style}]"
    if status.detail:
        line += f" [dim]{status.detail}[/dim]"
    return line


def _display_statuses(store: DocumentStore) -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Buffer")
    table.add_column("Status")
    table.add_row("input", _status_markup(store.input_status))
    table.add_row("spec", _status_markup(store.spec_status))
    table.add_row("output", _status_markup(store.output_status))
    console.print(table)


# =============================================================================
# Transform Command
# =============================================================================


@app.command()
def transform(
    input_file: Annotated[Path, typer.Argument(help="Input JSON document")],
    spec_file: Annotated[Path, typer.Argument(help="Chain specification")],
    tree: Annotated[bool, typer.Option("--tree", help="Show the result as a tree")] = False,
    output: Annotated[
        Optional[Path], typer.Option("--output", "-o", help="Write the result to a file")
    ] = None,
    base_url: Annotated[
        Optional[str], typer.Option("--base-url", help="Transform service URL")
    ] = None,
) -> None:
    """Validate both documents and run the transformation chain."""
    input_text = _read(input_file)
    spec_text = _read(spec_file)
    settings = _settings_for(base_url)

    with console.status("[bold green]Transforming..."):
        store, warning = asyncio.run(_transform_async(input_text, spec_text, settings))

    if warning:
        console.print(f"[yellow]{warning}[/yellow]")
        raise typer.Exit(code=1)

    if store.output_status.level is not StatusLevel.VALID:
        _display_statuses(store)
        raise typer.Exit(code=1)

    if tree:
        console.print(render_output(
            store.output_text,
            indent=settings.render_indent,
            max_depth=settings.render_max_depth,
        ))
    else:
        if _is_json(store.output_text):
            console.print_json(store.output_text)
        else:
            console.print(store.output_text)

    complexity = store.complexity.value if store.complexity else "Unknown"
    console.print(
        f"[dim]Execution time: {store.execution_time_ms}ms | Complexity: {complexity}[/dim]"
    )

    if output:
        output.write_text(store.output_text, encoding="utf-8")
        console.print(f"[green]Saved result to {output}[/green]")


async def _transform_async(
    input_text: str,
    spec_text: str,
    settings: Settings,
) -> tuple[DocumentStore, Optional[str]]:
    """Drive a session through edit, validation and transform."""
    async with StudioSession(settings=settings, debounce_s=0) as session:
        await session.set_input(input_text)
        await session.set_spec(spec_text)
        await session.settle()
        await session.request_transform()
        return session.store, session.last_warning


def _is_json(text: str) -> bool:
    try:
        json.loads(text)
    except (ValueError, RecursionError):
        return False
    return True


# =============================================================================
# Validate Command
# =============================================================================


@app.command()
def validate(
    input_file: Annotated[
        Optional[Path], typer.Option("--input", "-i", help="Input JSON document")
    ] = None,
    spec_file: Annotated[
        Optional[Path], typer.Option("--spec", "-s", help="Chain specification")
    ] = None,
    base_url: Annotated[
        Optional[str], typer.Option("--base-url", help="Transform service URL")
    ] = None,
) -> None:
    """Ask the service to validate an input document and/or a specification."""
    if input_file is None and spec_file is None:
        console.print("[yellow]Nothing to validate: pass --input and/or --spec[/yellow]")
        raise typer.Exit(code=2)

    input_text = _read(input_file) if input_file else None
    spec_text = _read(spec_file) if spec_file else None
    settings = _settings_for(base_url)

    store = asyncio.run(_validate_async(input_text, spec_text, settings))

    table = Table(show_header=True, header_style="bold")
    table.add_column("Document")
    table.add_column("Status")
    failed = False
    if input_text is not None:
        table.add_row(input_file.name, _status_markup(store.input_status))
        failed |= store.last_valid_input is None and bool(input_text.strip())
    if spec_text is not None:
        table.add_row(spec_file.name, _status_markup(store.spec_status))
        failed |= store.last_valid_spec is None
    console.print(table)

    if failed:
        raise typer.Exit(code=1)


async def _validate_async(
    input_text: Optional[str],
    spec_text: Optional[str],
    settings: Settings,
) -> DocumentStore:
    async with StudioSession(settings=settings, debounce_s=0) as session:
        if input_text is not None:
            await session.edit(BufferKind.INPUT, input_text)
        if spec_text is not None:
            await session.edit(BufferKind.SPEC, spec_text)
        await session.settle()
        return session.store


# =============================================================================
# Tree / Operations / TUI Commands
# =============================================================================


@app.command()
def tree(
    json_file: Annotated[Path, typer.Argument(help="JSON document to display")],
    max_depth: Annotated[
        Optional[int], typer.Option("--max-depth", help="Refuse deeper nesting")
    ] = None,
) -> None:
    """Render a JSON document as an indented tree (no service call)."""
    settings = get_settings()
    console.print(Panel(
        render_output(
            _read(json_file),
            indent=settings.render_indent,
            max_depth=max_depth if max_depth is not None else settings.render_max_depth,
        ),
        title=str(json_file),
    ))


@app.command()
def operations(
    base_url: Annotated[
        Optional[str], typer.Option("--base-url", help="Transform service URL")
    ] = None,
) -> None:
    """List the operations the transform service supports."""
    settings = _settings_for(base_url)
    try:
        names = asyncio.run(_operations_async(settings))
    except TransportError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)

    for name in names:
        console.print(f"- {name}")


async def _operations_async(settings: Settings) -> list[str]:
    async with StudioClient(settings.service) as client:
        return await client.list_operations()


@app.command()
def tui(
    auto_transform: Annotated[
        Optional[bool], typer.Option("--auto/--no-auto", help="Start with auto-transform armed")
    ] = None,
    base_url: Annotated[
        Optional[str], typer.Option("--base-url", help="Transform service URL")
    ] = None,
) -> None:
    """Open the interactive terminal studio."""
    from j2j_studio.tui.app import StudioApp

    settings = _settings_for(base_url)
    session = StudioSession(settings=settings, auto_transform=auto_transform)
    StudioApp(session).run()


# =============================================================================
# Config Commands
# =============================================================================


@config_app.command("init")
def config_init() -> None:
    """Create the user configuration file if it does not exist."""
    path = init_user_config()
    console.print(f"[green]Config file: {path}[/green]")


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration."""
    settings = get_settings()
    table = Table(show_header=True, header_style="bold")
    table.add_column("Setting")
    table.add_column("Value")
    table.add_row("service.base_url", settings.service.base_url)
    table.add_row("service.timeout_s", str(settings.service.timeout_s))
    table.add_row("debounce_ms", str(settings.debounce_ms))
    table.add_row("render_indent", str(settings.render_indent))
    table.add_row("render_max_depth", str(settings.render_max_depth))
    table.add_row("auto_transform_default", str(settings.auto_transform_default))
    console.print(table)
    console.print(f"[dim]User config: {USER_CONFIG_FILE}[/dim]")


if __name__ == "__main__":
    app()
