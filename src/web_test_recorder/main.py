"""
Web Test Recorder - CLI Entry Point.

Configuration Priority:
    1. CLI arguments (--port, --visible, etc.)
    2. Environment variables (WEB_TEST_RECORDER__AI__ENDPOINT, etc.)
    3. Config file (config.yaml)

Usage:
    web-test-recorder serve --port 3000
    web-test-recorder record https://example.com --name "checkout"
    web-test-recorder replay steps.json --url https://example.com
    web-test-recorder generate recording.spec.ts --output checkout.spec.ts
"""

import asyncio
import json
from pathlib import Path
from typing import Any, List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from web_test_recorder import __version__
from web_test_recorder.actions.models import parse_steps
from web_test_recorder.config import Settings, get_settings, load_config
from web_test_recorder.context import AppContext, create_context
from web_test_recorder.engine.models import ReplayRequest, ReplayResult
from web_test_recorder.exceptions import WebTestRecorderError
from web_test_recorder.llm.models import AIRequest
from web_test_recorder.utils.logging import setup_logging

# Create the CLI app
app = typer.Typer(
    name="web-test-recorder",
    help="Record, replay and AI-generate browser end-to-end tests",
    add_completion=False,
)

console = Console()

RECORD_POLL_SECONDS = 1.0


def _load_settings(config: Optional[str], verbose: bool = False) -> Settings:
    try:
        settings = load_config(config) if config else get_settings()
    except WebTestRecorderError as e:
        console.print(f"[red]✗ {e.message}[/red]")
        raise typer.Exit(1)
    setup_logging(
        "DEBUG" if verbose else settings.logging.level,
        log_file=settings.logging.file,
        json_format=settings.logging.json_format,
    )
    return settings


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Host to bind to (default: from config)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port (default: from config)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug mode"),
):
    """
    Start the HTTP API and serve the frontend.

    Examples:
        web-test-recorder serve
        web-test-recorder serve --host 0.0.0.0 --port 8080
    """
    from web_test_recorder.server.app import run_server

    settings = _load_settings(config, debug)
    host = host or settings.server.host
    port = port or settings.server.port

    console.print(Panel.fit(
        f"[bold blue]Web Test Recorder[/bold blue] v{__version__}\n"
        f"[dim]API:[/dim] http://{host}:{port}/api\n"
        f"[dim]Tests stored in:[/dim] {settings.storage.path}",
        border_style="blue",
    ))

    try:
        run_server(create_context(settings), host=host, port=port, debug=debug)
    except KeyboardInterrupt:
        console.print("\n[dim]Shutting down...[/dim]")


@app.command()
def replay(
    file_path: str = typer.Argument(..., help="JSON file with a list of steps or {url, steps}"),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Start URL (overrides the file)"),
    visible: bool = typer.Option(False, "--visible", "-v", help="Run with visible browser"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose output"),
):
    """
    Replay a stored action sequence.

    Examples:
        web-test-recorder replay steps.json --url https://example.com
        web-test-recorder replay login.json --visible
    """
    settings = _load_settings(config, verbose)
    settings = settings.merge_with({"browser": {"headless": not visible}})

    path = Path(file_path)
    if not path.exists():
        console.print(f"[red]✗ File not found: {file_path}[/red]")
        raise typer.Exit(1)

    try:
        data: Any = json.loads(path.read_text())
    except ValueError as e:
        console.print(f"[red]✗ Invalid JSON in {file_path}: {e}[/red]")
        raise typer.Exit(1)

    raw_steps: List[Any] = data if isinstance(data, list) else data.get("steps", [])
    target_url = url or (data.get("url") if isinstance(data, dict) else None)
    if not target_url:
        console.print("[red]✗ No start URL. Pass --url or put \"url\" in the file.[/red]")
        raise typer.Exit(1)

    try:
        steps = parse_steps(raw_steps)
    except ValidationError as e:
        console.print(f"[red]✗ Invalid steps in {file_path}:[/red]\n{e}")
        raise typer.Exit(1)

    console.print(Panel.fit(
        f"[bold blue]Replay[/bold blue]\n"
        f"[dim]Script:[/dim] {path.name}\n"
        f"[dim]URL:[/dim] {target_url}\n"
        f"[dim]Steps:[/dim] {len(steps)}",
        border_style="blue",
    ))

    context = create_context(settings)
    result = asyncio.run(context.runner.replay(ReplayRequest(target_url=target_url, steps=steps)))
    _print_replay(result, len(steps))

    if not result.passed:
        raise typer.Exit(1)


def _print_replay(result: ReplayResult, total: int) -> None:
    table = Table(show_header=True, header_style="bold cyan", box=None)
    table.add_column("#", width=3)
    table.add_column("Action", width=10)
    table.add_column("Status", width=10)
    table.add_column("Time", justify="right", width=8)
    table.add_column("Error", style="dim")

    for step in result.step_results:
        status = "[green]passed[/green]" if step.passed else "[red]failed[/red]"
        table.add_row(
            str(step.index + 1),
            step.action,
            status,
            f"{step.duration_ms:.0f}ms",
            step.error or "",
        )
    for index in range(len(result.step_results), total):
        table.add_row(str(index + 1), "", "[dim]skipped[/dim]", "", "")

    console.print(table)
    console.print()
    if result.passed:
        console.print(f"[green]✓ Passed in {result.duration_ms / 1000:.1f}s[/green]")
    else:
        console.print(f"[red]✗ Failed: {result.failure_reason}[/red]")


@app.command()
def record(
    url: str = typer.Argument(..., help="URL to start recording on"),
    name: str = typer.Option("", "--name", "-n", help="Test case name"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose output"),
):
    """
    Record a test with Playwright codegen and save it when the browser closes.

    Examples:
        web-test-recorder record https://example.com --name "search works"
    """
    settings = _load_settings(config, verbose)

    console.print(Panel.fit(
        f"[bold blue]Recording[/bold blue]\n"
        f"[dim]URL:[/dim] {url}\n"
        f"[dim]Name:[/dim] {name or '(unnamed)'}\n"
        f"[dim]Close the browser window to finish.[/dim]",
        border_style="blue",
    ))

    try:
        asyncio.run(_record_async(create_context(settings), url, name))
    except WebTestRecorderError as e:
        console.print(f"[red]✗ {e.message}[/red]")
        raise typer.Exit(1)


async def _record_async(context: AppContext, url: str, name: str) -> None:
    supervisor = context.supervisor
    session_id = await supervisor.start(url, name)
    try:
        while (await supervisor.status(session_id)).running:
            await asyncio.sleep(RECORD_POLL_SECONDS)
        artifact = await supervisor.save(session_id, name or None)
    finally:
        # Kills the recorder if we were interrupted before save
        await context.aclose()

    if not artifact.code:
        console.print("[yellow]⚠ Nothing was recorded; saved an empty test case.[/yellow]")
    console.print(f"[green]✓ Saved test case {artifact.id}[/green] [dim]({context.store.path})[/dim]")


@app.command()
def generate(
    file_path: str = typer.Argument(..., help="Recorded code file to turn into a test"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write generated code here"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose output"),
):
    """
    Analyze a recording with the AI endpoint and generate a cleaned-up test.

    Examples:
        web-test-recorder generate .codegen-123.spec.ts -o checkout.spec.ts
    """
    settings = _load_settings(config, verbose)

    path = Path(file_path)
    if not path.exists():
        console.print(f"[red]✗ File not found: {file_path}[/red]")
        raise typer.Exit(1)

    try:
        code = asyncio.run(_generate_async(create_context(settings), path.read_text()))
    except WebTestRecorderError as e:
        console.print(f"[red]✗ {e.message}[/red]")
        raise typer.Exit(1)

    if output:
        Path(output).write_text(code)
        console.print(f"[green]✓ Wrote {output}[/green]")
    else:
        console.print(Syntax(code or "// (empty)", "typescript"))


async def _generate_async(context: AppContext, recorded: str) -> str:
    gateway = context.gateway
    try:
        intent = await gateway.call(AIRequest.analyze(code=recorded))
        console.print(Panel.fit(
            f"[bold]Intent:[/bold] {getattr(intent, 'intent', '') or '(none)'}\n"
            f"[dim]Confidence:[/dim] {getattr(intent, 'confidence', 0.0):.0%}",
            border_style="cyan",
        ))
        result = await gateway.call(AIRequest.generate(intent=intent.model_dump(), code=recorded))
        return getattr(result, "code", "")
    finally:
        await gateway.close()


@app.command()
def version():
    """Show version information."""
    console.print(f"[bold]Web Test Recorder[/bold] v{__version__}")


if __name__ == "__main__":
    app()
