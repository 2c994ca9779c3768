"""Data models for anki-md-sync."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from .exceptions import UnexpectedParsingEndError


class ParseState(Enum):
    """Parser states used while scanning a flashcard document.

    Attributes:
        START: Nothing consumed yet; expecting the opening metadata fence.
        IN_METADATA: Between the two metadata fences.
        EXPECTING_QUESTION: Metadata closed, no question seen yet.
        IN_QUESTION: Accumulating question text.
        IN_ANSWER: Accumulating answer text.
    """

    START = auto()
    IN_METADATA = auto()
    EXPECTING_QUESTION = auto()
    IN_QUESTION = auto()
    IN_ANSWER = auto()

    @property
    def label(self) -> str:
        """CamelCase name used in diagnostics, e.g. ``InAnswer``."""
        return "".join(part.capitalize() for part in self.name.split("_"))

    def next(self) -> ParseState:
        """Return the state reached by advancing from this one.

        Answers loop back to questions, so the function is total.

        Examples:
            ParseState.IN_ANSWER.next()  # ParseState.IN_QUESTION
        """
        return _NEXT_STATE[self]

    def reset(self) -> ParseState:
        """Return the initial state once a document has ended.

        Raises:
            UnexpectedParsingEndError: If the document did not end inside an answer.
        """
        if self is not ParseState.IN_ANSWER:
            raise UnexpectedParsingEndError(self)
        return ParseState.START


_NEXT_STATE = {
    ParseState.START: ParseState.IN_METADATA,
    ParseState.IN_METADATA: ParseState.EXPECTING_QUESTION,
    ParseState.EXPECTING_QUESTION: ParseState.IN_QUESTION,
    ParseState.IN_QUESTION: ParseState.IN_ANSWER,
    ParseState.IN_ANSWER: ParseState.IN_QUESTION,
}


class EventKind(Enum):
    """Kinds of line recognised by the classifier."""

    METADATA_DELIMITER = auto()
    QUESTION_START = auto()
    ANSWER_START = auto()
    EMPTY = auto()
    TEXT = auto()


@dataclass(frozen=True)
class ParseEvent:
    """A classified input line.

    Attributes:
        kind: What the line represents.
        text: Remainder after the prefix for question/answer starts, the full
            line for plain text, and an empty string otherwise.
    """

    kind: EventKind
    text: str = ""


class NoteModel(Enum):
    """Anki note types the parser can produce."""

    BASIC = "Basic"


@dataclass(frozen=True)
class ParsedNote:
    """A finished flashcard, ready for the note sink.

    Attributes:
        deck: Destination deck name.
        question: Rendered question body.
        answer: Rendered answer body.
        model: Anki note type.
    """

    deck: str
    question: str
    answer: str
    model: NoteModel = NoteModel.BASIC


@dataclass
class ParserContext:
    """Mutable scratch state for one document.

    Attributes:
        state: Current parser state.
        question: Plain-text question accumulated so far.
        answer: Plain-text answer accumulated so far.
        deck: Deck declared in the metadata block, if any.
        line_number: Zero-based index of the next line to consume.
        parsed: Notes assembled so far.
    """

    state: ParseState = ParseState.START
    question: str = ""
    answer: str = ""
    deck: str | None = None
    line_number: int = 0
    parsed: list[ParsedNote] = field(default_factory=list)
