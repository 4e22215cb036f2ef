"""
Main CLI application for menota-helper.

Provides a Typer-based command-line interface that runs the editor commands
against transcription files on disk.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from .. import api
from ..config import get_config_manager, load_config
from ..version.diff_engine import DiffEngine
from ..core.milestones import MilestoneKind
from ..editor.buffer import TextBuffer
from ..editor.commands import CommandCategory, CommandContext, CommandRegistry, CommandResult

# Initialize Typer app
app = typer.Typer(
    name="menota-helper",
    help="Numbering and word-wrapping helpers for TEI manuscript transcriptions",
    add_completion=False,
    rich_markup_mode="rich",
)

# Global console for rich output
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Configure logging for every command."""
    level = "DEBUG" if verbose else load_config().log_level
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _context() -> CommandContext:
    config = load_config()
    return CommandContext(
        settings=config.tags,
        paragraph_scoped_line_breaks=config.paragraph_scoped_line_breaks,
    )


def _load_buffer(file_path: Path, cursor: Optional[int] = None) -> TextBuffer:
    if not file_path.exists():
        console.print(f"[red]Error: File not found: {escape(str(file_path))}[/red]")
        raise typer.Exit(1)
    try:
        return TextBuffer.from_file(file_path, cursor=cursor)
    except ValueError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)


def _check(result: CommandResult) -> None:
    if not result.success:
        console.print(f"[red]Error: {escape(result.error or '')}[/red]")
        raise typer.Exit(1)


def _output_path(file_path: Path, output: Optional[Path]) -> Path:
    if output is not None:
        return output
    default_dir = load_config().default_output_dir
    if default_dir is not None:
        default_dir.mkdir(parents=True, exist_ok=True)
        return default_dir / file_path.name
    return file_path


@app.command()
def status(
    file_path: Path = typer.Argument(..., help="TEI transcription to inspect"),
    as_json: bool = typer.Option(False, "--json", help="Print the preview as JSON"),
) -> None:
    """
    Show the latest page and line break and the values that follow them.
    """
    buffer = _load_buffer(file_path)
    result = CommandRegistry().run("show_status", buffer, context=_context())
    _check(result)

    if as_json:
        console.print_json(json.dumps(result.data))
        return

    table = Table(title=f"TEI Status: {file_path.name}")
    table.add_column("Element", style="cyan")
    table.add_column("Current", style="yellow")
    table.add_column("Next", style="green")

    for kind in MilestoneKind:
        info = result.data.get("page_break" if kind is MilestoneKind.PAGE_BREAK else "line_break")
        if info:
            table.add_row(f"<{kind.value}>", info["current_value"] or "-", info["next_value"])
        else:
            table.add_row(f"<{kind.value}>", "[dim]none[/dim]", "1")

    console.print(table)


@app.command("next")
def next_value(
    value: str = typer.Argument("", help="Current numbering value, e.g. 12v or iv"),
) -> None:
    """
    Print the numbering value that follows VALUE.
    """
    console.print(api.compute_next_value(value), markup=False, highlight=False)


@app.command()
def insert(
    file_path: Path = typer.Argument(..., help="TEI transcription to edit"),
    kind: str = typer.Option("lb", "--kind", "-k", help="pb, lb or any other element name"),
    value: Optional[str] = typer.Option(None, "--value", help="Numbering value (default: next value)"),
    offset: Optional[int] = typer.Option(None, "--offset", help="Character offset to insert at (default: end)"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output path (default: overwrite)"),
) -> None:
    """
    Insert a milestone element at a character offset.
    """
    buffer = _load_buffer(file_path, cursor=offset)
    registry = CommandRegistry()
    context = _context()

    if kind in (k.value for k in MilestoneKind):
        result = registry.run("insert_element", buffer, {"kind": kind, "value": value}, context)
    else:
        result = registry.run("insert_custom_element", buffer, {"element": kind, "value": value or "1"}, context)
    _check(result)

    target = buffer.save(_output_path(file_path, output))
    console.print(f"[green]{result.message}[/green] → {target}")


@app.command()
def wrap(
    file_path: Path = typer.Argument(..., help="TEI transcription to transform"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output path (default: overwrite)"),
    show_diff: bool = typer.Option(False, "--diff", help="Show a diff of the changes"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Do not write the result"),
) -> None:
    """
    Wrap words in <w> and punctuation in <pc> within the document's paragraphs.
    """
    buffer = _load_buffer(file_path)
    original = buffer.get_document_text()

    result = CommandRegistry().run("wrap_words", buffer, context=_context())
    _check(result)

    if not result.document_modified:
        console.print(f"[yellow]{result.message}[/yellow]")
        return

    engine = DiffEngine(load_config().tags)
    wrapped = buffer.get_document_text()

    if show_diff:
        diff_text = engine.generate_text_diff(original, wrapped, file_path.name)
        console.print(Panel(
            Syntax(diff_text, "diff", theme="monokai"),
            title=f"Diff: {file_path.name}",
            border_style="blue",
        ))

    summary = engine.summarize(original, wrapped)
    console.print(
        f"Added {summary.words_added} <w> and {summary.punctuation_added} <pc> elements "
        f"({summary.lines_changed} lines changed)"
    )

    if dry_run:
        console.print("[yellow]Dry run, nothing written[/yellow]")
        return

    target = buffer.save(_output_path(file_path, output))
    console.print(f"[green]{result.message}[/green] → {target}")


@app.command()
def config(
    show: bool = typer.Option(False, "--show", help="Show current configuration"),
    create_default: bool = typer.Option(False, "--create-default", help="Create default config file"),
) -> None:
    """
    Manage menota-helper configuration.
    """
    config_manager = get_config_manager()

    if create_default:
        path = config_manager.create_default_config()
        console.print(f"[green]Created default configuration at {path}[/green]")
        return

    if show:
        info = config_manager.get_config_info()
        current = load_config()

        table = Table(title="menota-helper Configuration", show_header=False)
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="green")
        table.add_row("Config File", info["config_file"])
        table.add_row("Exists", "Yes" if info["config_exists"] else "No")
        table.add_row("Log Level", info["log_level"])
        table.add_row("Paragraph-scoped <lb>", "Yes" if info["paragraph_scoped_line_breaks"] else "No")
        table.add_row("Body / Paragraph / Note", f"{current.tags.body} / {current.tags.paragraph} / {current.tags.note}")
        table.add_row("Word / Punctuation", f"{current.tags.word} / {current.tags.punctuation}")
        table.add_row("Inline Tags", ", ".join(info["inline_tags"]))
        table.add_row("Skip Tags", ", ".join(info["skip_tags"]))
        console.print(table)
        return

    console.print("Use [cyan]menota-helper config --show[/cyan] to see full configuration")
    console.print("Use [cyan]menota-helper config --create-default[/cyan] to create a default config file")


@app.command()
def info() -> None:
    """
    Show information about menota-helper.
    """
    registry = CommandRegistry()
    commands = "\n".join(
        f"• {category.value.capitalize()}: {', '.join(registry.list_commands(category))}"
        for category in CommandCategory
    )
    info_text = f"""[bold cyan]menota-helper - TEI transcription helpers[/bold cyan]

[bold]Numbering:[/bold]
• Plain numbers: 12 → 13
• Foliation: 12r → 12v → 13r
• Roman numerals i-x: iv → v, IX → X

[bold]Word wrapping:[/bold]
• Words → <w>, punctuation → <pc>
• Entity references stay inside words
• <note> content is never changed

[bold]Editor commands:[/bold]
{commands}"""
    console.print(Panel(info_text, border_style="blue"))


if __name__ == "__main__":
    app()
