"""Commands for parsing, inspecting, and downloading USFM translations."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from bible_import.core.config import settings
from bible_import.core.exceptions import UnknownCanonModeError
from bible_import.core.models import CanonMode
from bible_import.services.canon import coerce_canon_mode, get_registry
from bible_import.services.pipeline import import_translation
from bible_import.services.sources import SOURCES, download_all, find_source, get_source
from bible_import.services.text_cleaner import clean

console = Console()


def _canon_option(value: Optional[str], default: CanonMode | str | None = None) -> CanonMode:
    try:
        return coerce_canon_mode(value or default or settings.CANON_MODE)
    except UnknownCanonModeError as e:
        raise typer.BadParameter(str(e)) from e


def parse_command(
    version: Optional[str] = typer.Argument(
        None,
        help="Translation tag or source code, e.g. KJV or douay_rheims (default: DEFAULT_VERSION)",
    ),
    input_dir: Optional[Path] = typer.Argument(
        None, help="Directory of .usfm/.SFM files (default: DOWNLOADS_DIR/<source code>)"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="JSONL output file (default: OUTPUT_DIR/<version>.jsonl)"
    ),
    canon: Optional[str] = typer.Option(
        None, "--canon", "-c", help="protestant66 or catholic73 (default: the source's canon)"
    ),
    workers: Optional[int] = typer.Option(
        None, "--workers", "-w", min=1, help="Files parsed in parallel"
    ),
) -> None:
    """Parse a directory of USFM files into a JSONL verse file."""
    requested = version or settings.DEFAULT_VERSION
    source = find_source(requested)
    if source is not None:
        tag, code = source.version, source.code
        mode = _canon_option(canon, source.canon_mode)
    else:
        tag, code = requested, requested.lower()
        mode = _canon_option(canon)
    source_dir = input_dir or Path(settings.DOWNLOADS_DIR) / code

    try:
        summary = import_translation(tag, source_dir, output, mode, workers)
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    table = Table(title=f"{summary.version} ({mode.value})")
    table.add_column("File", style="cyan")
    table.add_column("Books")
    table.add_column("Verses", justify="right")
    table.add_column("Dropped", justify="right")
    table.add_column("Malformed", justify="right")
    for stats in summary.files:
        name = Path(stats.source).name
        table.add_row(
            f"[red]{name} (unreadable)[/red]" if stats.failed else name,
            ", ".join(stats.book_ids) or "-",
            str(stats.verses_emitted),
            str(stats.empty_verses_dropped),
            str(stats.malformed_directives),
        )
    console.print(table)

    for failed in summary.failed_files:
        console.print(f"[red]Unreadable:[/red] {failed}")
    console.print(
        f"\n[green]Done.[/green] {summary.total_verses} verses written to {summary.output_file}"
    )


def books_command(
    canon: Optional[str] = typer.Option(None, "--canon", "-c", help="protestant66 or catholic73"),
) -> None:
    """List the books of a canon in order."""
    mode = _canon_option(canon)
    table = Table(title=f"Canon: {mode.value}")
    table.add_column("#", justify="right")
    table.add_column("Id", style="cyan")
    table.add_column("Name")
    table.add_column("Testament")
    table.add_column("Aliases")
    for position, book in enumerate(get_registry().get_canon(mode), start=1):
        table.add_row(
            str(position), book.id, book.name, book.testament.value, ", ".join(book.aliases)
        )
    console.print(table)


def lookup_command(
    token: str = typer.Argument(..., help="Book id, name, or alias in any case"),
) -> None:
    """Resolve a book spelling to its canonical entry."""
    book = get_registry().lookup(token)
    if book is None:
        console.print(f"[red]Not found:[/red] {token}")
        raise typer.Exit(1)
    console.print(f"[bold]{book.id}[/bold] {book.name} ({book.testament.value})")


def clean_command(
    text: str = typer.Argument(..., help="Raw USFM verse fragment"),
) -> None:
    """Print the cleaned form of a USFM fragment."""
    typer.echo(clean(text))


def download_command(
    codes: Optional[List[str]] = typer.Argument(
        None, help="Source codes to fetch (default: all)"
    ),
) -> None:
    """Download translation archives and write their source metadata."""
    try:
        sources = [get_source(code) for code in codes] if codes else list(SOURCES)
    except KeyError as e:
        console.print(f"[red]Error:[/red] {e.args[0]}")
        raise typer.Exit(1) from e

    written = download_all(sources)
    for meta in written:
        console.print(
            f"[green]{meta['version']}[/green] {len(meta['downloaded_files'])} USFM files"
        )
    if len(written) < len(sources):
        console.print(f"[yellow]{len(sources) - len(written)} source(s) failed[/yellow]")
        raise typer.Exit(1)


def register(app: typer.Typer) -> None:
    """Attach every command to ``app``."""
    app.command("parse")(parse_command)
    app.command("books")(books_command)
    app.command("lookup")(lookup_command)
    app.command("clean")(clean_command)
    app.command("download")(download_command)


__all__ = ["console", "register"]
