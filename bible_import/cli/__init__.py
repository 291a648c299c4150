"""CLI commands for bible-import."""

import typer

from bible_import.cli.commands import register

main_app = typer.Typer(
    name="bible-import",
    help="USFM scripture import tools",
    no_args_is_help=True,
)
register(main_app)


def main() -> None:
    """Entry point for the CLI."""
    main_app()


__all__ = ["main", "main_app"]
