"""Package-specific exception types."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ParseState


class ParseError(ValueError):
    """Base class for parsing-related errors.

    Every parse error aborts the whole document.

    Args:
        message: Human readable description.
        line_number: Zero-based index of the line being parsed, if known.
    """

    def __init__(self, message: str, line_number: int | None = None):
        self.line_number = line_number
        super().__init__(message)


class InvalidStateChangeError(ParseError):
    """Raised when a line arrives in a state with no transition for it.

    Args:
        line_number: Zero-based index of the offending line.
        state: Parser state the line arrived in.
        line: Text of the offending line.
    """

    def __init__(self, line_number: int, state: ParseState, line: str):
        self.state = state
        self.line = line
        super().__init__(
            f"Invalid state change on line {line_number}: "
            f"unexpected {line!r} while {state.label}",
            line_number,
        )


class InvalidMetadataError(ParseError):
    """Raised when a metadata line is not a supported ``key: value`` pair.

    Args:
        detail: Description of the problem, including the offending line.
        line_number: Zero-based index of the offending line.
    """

    def __init__(self, detail: str, line_number: int | None = None):
        self.detail = detail
        if line_number is None:
            message = f"Invalid metadata: {detail}"
        else:
            message = f"Invalid metadata on line {line_number}: {detail}"
        super().__init__(message, line_number)


class MissingDeckError(ParseError):
    """Raised when a note is assembled before any deck was declared."""

    def __init__(self, line_number: int | None = None):
        super().__init__("Unable to determine which deck card belongs to", line_number)


class UnexpectedParsingEndError(ParseError):
    """Raised when input ends anywhere but inside an answer.

    Args:
        state: Parser state at the end of input.
        line_number: Number of lines consumed when the input ended.
    """

    def __init__(self, state: ParseState, line_number: int | None = None):
        self.state = state
        super().__init__(
            f"Unexpected end of document while {state.label}; documents must end inside an answer",
            line_number,
        )


class AnkiConnectError(Exception):
    """Raised when AnkiConnect rejects a request or cannot be reached."""


class SyncError(Exception):
    """Raised when a file cannot be parsed or submitted to Anki."""
