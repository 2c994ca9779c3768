"""
anki-md-sync: sync Markdown flashcards into Anki.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    anki-md-sync spanish.md

Library Usage:
    from pathlib import Path
    from anki_md_sync import parse_markdown

    notes = parse_markdown(Path("spanish.md").read_text())
    for note in notes:
        print(note.deck, note.question, note.answer)

Document format:
    ---
    deck: Spanish
    ---
    Q: hola
    A: hello
"""

from .client import AnkiConnectClient
from .config import ConfigError, SyncConfig
from .events import classify_line
from .exceptions import (
    AnkiConnectError,
    InvalidMetadataError,
    InvalidStateChangeError,
    MissingDeckError,
    ParseError,
    SyncError,
    UnexpectedParsingEndError,
)
from .models import EventKind, NoteModel, ParsedNote, ParseEvent, ParseState
from .parser import ParseFileError, Parser, parse_file, parse_lines, parse_markdown
from .renderer import render_markdown
from .sync import AnkiSync

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "Parser",
    "parse_lines",
    "parse_markdown",
    "parse_file",
    "classify_line",
    "render_markdown",
    # Syncing
    "AnkiConnectClient",
    "AnkiSync",
    "SyncConfig",
    # Data models
    "EventKind",
    "NoteModel",
    "ParseEvent",
    "ParsedNote",
    "ParseState",
    # Exceptions
    "AnkiConnectError",
    "ConfigError",
    "InvalidMetadataError",
    "InvalidStateChangeError",
    "MissingDeckError",
    "ParseError",
    "ParseFileError",
    "SyncError",
    "UnexpectedParsingEndError",
    # Version
    "__version__",
]
