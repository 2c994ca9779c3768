"""Filesystem helpers for anki-md-sync."""

from __future__ import annotations

from pathlib import Path

from .constants import MARKDOWN_EXTENSIONS
from .events import split_lines


def normalize_filepath(raw_path: str | Path) -> Path:
    """Resolve and validate the path of a flashcard document.

    Args:
        raw_path: User-supplied path to a Markdown file (absolute or relative).

    Returns:
        Path: Absolute path to the Markdown file.

    Raises:
        ValueError: If the path does not exist, is not a regular file, or uses
            an unsupported extension.

    Examples:
        normalize_filepath("decks/spanish.md")
        normalize_filepath("~/notes.md")
    """
    path = Path(raw_path).expanduser()

    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError as error:
        raise ValueError(f"{path} does not exist.") from error
    except OSError as error:
        raise ValueError(f"Error resolving {path}: {error}") from error

    if not resolved.is_file():
        raise ValueError(f"{resolved} is not a regular file.")

    if resolved.suffix.lower() not in MARKDOWN_EXTENSIONS:
        raise ValueError(
            f"{resolved} is not a Markdown file.\n"
            f"Supported extensions are: {', '.join(MARKDOWN_EXTENSIONS)}"
        )

    return resolved


def read_document(filepath: Path) -> list[str]:
    """Read a UTF-8 flashcard document as the lines the parser consumes.

    Newlines are not translated on read, so line numbers match the file as
    written whatever its line endings.

    Raises:
        IOError: If the file is missing or cannot be read.
        UnicodeDecodeError: If the file is not valid UTF-8.

    Examples:
        read_document(Path("spanish.md"))  # ["---", "deck: Spanish", "---", ...]
    """
    try:
        with open(filepath, "r", encoding="UTF-8", newline="") as file:
            content = file.read()
    except OSError as error:
        raise IOError(f"Error reading {filepath}: {error}") from error
    return split_lines(content)
