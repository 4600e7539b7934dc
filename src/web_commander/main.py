"""
Web Commander - CLI Entry Point.

Configuration Priority:
    1. CLI arguments (--model, --headless, etc.)
    2. Environment variables (WEB_COMMANDER__LLM__MODEL, OPENAI_API_KEY, etc.)
    3. Config file (web-commander.yaml / config.yaml)

Usage:
    web-commander run "what is the best omakase sushi experience in NYC?"
    web-commander run --headless --model gpt-4o
    web-commander templates
    web-commander simplify page.html --url https://example.com --title Example
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from web_commander import __version__
from web_commander.browsers.playwright_browser import PlaywrightBrowser
from web_commander.commands.parser import Command
from web_commander.config import load_config, require_api_key
from web_commander.config.settings import Settings
from web_commander.core.session import DEFAULT_GOAL, CommanderSession, format_session_history
from web_commander.dom.chunker import Chunker
from web_commander.dom.simplifier import HtmlSimplifier
from web_commander.exceptions import CommanderError
from web_commander.interfaces.browser import BrowserType
from web_commander.llm.openai_provider import OpenAIProvider
from web_commander.prompts.service import PromptService
from web_commander.prompts.template import TemplateStore
from web_commander.utils.logging import setup_logging_from_settings

logger = logging.getLogger(__name__)

# Create the CLI app
app = typer.Typer(
    name="web-commander",
    help="Drive a web browser with natural-language goals",
    add_completion=False,
)

console = Console()


def _print_error(error: CommanderError) -> None:
    console.print(Panel(str(error), title="Error", border_style="red"))


def _load_settings(config: Optional[Path], overrides: Dict[str, Any]) -> Settings:
    return load_config(config_path=config, **overrides)


@app.command()
def run(
    goal: Optional[str] = typer.Argument(None, help="What you want done (prompted when omitted)"),
    headless: bool = typer.Option(False, "--headless", help="Run without a visible browser"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Completion model (default: from config)"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to a YAML config file"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose output"),
):
    """
    Plan a goal into browser commands, run them and summarize the session.

    Examples:
        web-commander run "find the top story on news.ycombinator.com"
        web-commander run --headless
    """
    overrides: Dict[str, Any] = {}
    if headless:
        overrides["browser"] = {"headless": True}
    if model:
        overrides["llm"] = {"model": model}

    try:
        settings = _load_settings(config, overrides)
        setup_logging_from_settings(settings.logging, verbose)
        api_key = require_api_key(settings)

        if not goal:
            goal = typer.prompt("What do you want to do?", default=DEFAULT_GOAL)

        console.print(Panel.fit(
            f"[bold blue]Web Commander[/bold blue] [dim]v{__version__}[/dim]\n"
            f"[dim]Model:[/dim] {settings.llm.model}\n"
            f"[dim]Goal:[/dim] {escape(goal)}",
            border_style="blue",
        ))

        asyncio.run(_run_async(goal, settings, api_key))
    except CommanderError as e:
        _print_error(e)
        raise typer.Exit(1)


async def _run_async(goal: str, settings: Settings, api_key: str) -> None:
    """Run one goal with proper cleanup."""
    browser = PlaywrightBrowser()
    llm = OpenAIProvider(
        base_url=settings.llm.base_url,
        model=settings.llm.model,
        api_key=api_key,
        timeout=settings.llm.timeout,
    )

    try:
        prompts = PromptService(llm, TemplateStore(settings.templates.directory))
        prompts.templates.validate_all()

        await browser.launch(
            headless=settings.browser.headless,
            browser_type=BrowserType(settings.browser.browser_type),
        )
        page = await browser.new_page(
            viewport={
                "width": settings.browser.viewport_width,
                "height": settings.browser.viewport_height,
            },
            user_agent=settings.browser.user_agent,
        )

        session = CommanderSession(page, prompts, settings)
        result = await session.run(goal, on_plan=_print_plan, on_step=_print_step)

        console.print("[dim]Summarizing...[/dim]")
        summary = await session.summarize([goal], result.history)

        console.print(Panel(
            f"[bold]Original goal:[/bold]\n[yellow]{escape(goal)}[/yellow]\n\n"
            f"[bold]Summary:[/bold]\n[green]{escape(summary)}[/green]\n\n"
            f"[bold]Steps taken:[/bold]\n[yellow]{escape(format_session_history(result.history))}[/yellow]",
            title="Summary of Session",
            border_style="white",
        ))
        stats = prompts.get_stats()
        console.print(
            f"[dim]{result.steps_executed} commands in {result.duration_seconds:.1f}s, "
            f"{stats['total_calls']} completions, {stats['total_tokens']} tokens[/dim]"
        )
    finally:
        await browser.close()
        await llm.close()


def _print_plan(commands: List[Command]) -> None:
    console.print(Panel(
        escape("\n".join(str(command) for command in commands)) or "[dim](no commands)[/dim]",
        title="Plan",
        border_style="yellow",
    ))


def _print_step(number: int, command: Command, result: str) -> None:
    console.print(f"[bold cyan]Step {number}:[/bold cyan] [yellow]{escape(str(command))}[/yellow]")
    console.print(f"  [white]{escape(result)}[/white]")


@app.command()
def templates(
    directory: Optional[Path] = typer.Option(None, "--dir", "-d", help="Template directory (default: bundled)"),
):
    """Validate and list the prompt templates."""
    try:
        store = TemplateStore(directory)
        loaded = store.validate_all()
    except CommanderError as e:
        _print_error(e)
        raise typer.Exit(1)

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Token")
    table.add_column("Variables")
    table.add_column("Description", style="dim")
    for template in loaded:
        table.add_row(template.token, ", ".join(template.variables), template.description)

    console.print(table)
    console.print(f"[green]✓ {len(loaded)} templates valid[/green] [dim]({store.directory})[/dim]")


@app.command()
def simplify(
    file_path: Path = typer.Argument(..., help="Saved HTML page"),
    url: Optional[str] = typer.Option(None, "--url", help="Page URL for the metadata header"),
    title: Optional[str] = typer.Option(None, "--title", help="Page title for the metadata header"),
    overhead: int = typer.Option(0, "--overhead", help="Prompt characters to reserve per fragment"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to a YAML config file"),
):
    """
    Show what the model sees of a page: the simplified markup, chunked.

    Examples:
        web-commander simplify page.html
        web-commander simplify page.html --url https://example.com --title Example
    """
    if not file_path.is_file():
        console.print(f"[red]✗ File not found: {file_path}[/red]")
        raise typer.Exit(1)

    try:
        settings = _load_settings(config, {})
    except CommanderError as e:
        _print_error(e)
        raise typer.Exit(1)

    markup = file_path.read_text(encoding="utf-8", errors="replace")
    simplifier = HtmlSimplifier(
        max_ancestor_depth=settings.chunking.max_ancestor_depth,
        ascii_only=settings.chunking.ascii_only,
    )
    simplified = simplifier.simplify_html(markup, page_title=title, page_url=url)
    fragments = Chunker.from_settings(settings.chunking).chunk(simplified, overhead)

    for fragment in fragments:
        console.print(Panel(
            Text(fragment.text),
            title=f"Fragment {fragment.page_number} of {fragment.total_count}",
            border_style="blue",
        ))
    console.print(
        f"[dim]{len(markup)} chars of HTML -> {len(simplified)} chars in "
        f"{len(fragments)} fragment(s)[/dim]"
    )


@app.command()
def version():
    """Show version information."""
    console.print(f"Web Commander v{__version__}")


if __name__ == "__main__":
    app()
