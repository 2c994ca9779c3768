"""
Syncs flashcards written in Markdown into Anki through AnkiConnect.
Each file is parsed completely before any of its notes are sent.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
from .config import ConfigError, build_config, load_file_list
from .filesystem import normalize_filepath
from .parser import ParseFileError, parse_file
from .sync import AnkiSync

__all__ = ["cli"]


def configure_logging(debug: bool) -> None:
    """Send log records to stderr at INFO, or DEBUG when requested."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@click.command()
@click.version_option()
@click.option(
    "-f",
    "--file",
    "extra_files",
    multiple=True,
    type=click.Path(dir_okay=False),
    help="Markdown file to sync; may be repeated",
)
@click.option(
    "--files-from",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="File listing Markdown files to sync, one per line",
)
@click.option("-d", "--debug", is_flag=True, help="Enables debug logging")
@click.option("--question-prefix", help="Token that starts a question line")
@click.option("--answer-prefix", help="Token that starts an answer line")
@click.option("--endpoint", help="AnkiConnect URL")
@click.option("--dry-run", is_flag=True, help="Parse files without contacting Anki")
@click.argument("files", nargs=-1, type=click.Path(dir_okay=False))
def cli(
    files: tuple[str, ...],
    extra_files: tuple[str, ...] = (),
    files_from: Path | None = None,
    debug: bool = False,
    question_prefix: str | None = None,
    answer_prefix: str | None = None,
    endpoint: str | None = None,
    dry_run: bool = False,
):
    """
    Entry point for syncing Markdown flashcard files into Anki.

    Args:
        files: Markdown files to parse and sync.
        extra_files: Markdown files given with ``-f``/``--file``.
        files_from: Optional file listing more Markdown files.
        debug: Whether to log at DEBUG level.
        question_prefix: Override for the question token.
        answer_prefix: Override for the answer token.
        endpoint: Override for the AnkiConnect URL.
        dry_run: Parse and report without submitting anything.

    Raises:
        click.BadParameter: If a path or configuration value is invalid.
        click.UsageError: If no files were given.

    Examples:
        anki-md-sync spanish.md -f german.md --debug
    """
    configure_logging(debug)

    try:
        config = build_config(
            Path.cwd(),
            question_prefix=question_prefix,
            answer_prefix=answer_prefix,
            endpoint=endpoint,
        )
        raw_paths = [
            *files,
            *extra_files,
            *(load_file_list(files_from) if files_from else []),
        ]
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    if not raw_paths:
        raise click.UsageError("No files to sync.")

    try:
        filepaths = [normalize_filepath(raw_path) for raw_path in raw_paths]
        # A file named twice is synced once, at its first position
        filepaths = list(dict.fromkeys(filepaths))
    except ValueError as error:
        raise click.BadParameter(str(error)) from error

    if dry_run:
        failures = 0
        for filepath in filepaths:
            try:
                notes = parse_file(filepath, config)
            except ParseFileError as error:
                click.echo(f"Error: {error}", err=True)
                failures += 1
                continue
            decks = sorted({note.deck for note in notes})
            click.echo(f"{filepath}: {len(notes)} notes ({', '.join(decks)})")
    else:
        outcomes = AnkiSync(config).sync_files(filepaths)
        failures = 0
        for filepath, error in outcomes.items():
            if error is not None:
                click.echo(f"Error: {filepath}: {error}", err=True)
                failures += 1
        click.echo(f"Synced {len(filepaths) - failures} of {len(filepaths)} files.")

    if failures:
        click.get_current_context().exit(1)


if __name__ == "__main__":
    cli()
