"""Flashcard document parsing."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from .config import SyncConfig, validate_config
from .constants import (
    DECK_KEY,
    DEFAULT_ANSWER_PREFIX,
    DEFAULT_QUESTION_PREFIX,
    METADATA_KEY_VALUE_DELIMITER,
)
from .events import classify_line, split_lines
from .exceptions import (
    InvalidMetadataError,
    InvalidStateChangeError,
    MissingDeckError,
    ParseError,
    UnexpectedParsingEndError,
)
from .filesystem import read_document
from .models import EventKind, ParsedNote, ParserContext, ParseState
from .renderer import Renderer, render_markdown

logger = logging.getLogger(__name__)

_METADATA_STATES = (ParseState.START, ParseState.IN_METADATA)


class Parser:
    """Line-by-line state machine turning a flashcard document into notes.

    Feed lines in order with `handle_line`, then call `finalize` once the input
    is exhausted. The first error aborts the document; the parser does not
    resynchronise.

    Args:
        question_prefix: Token that opens a question line.
        answer_prefix: Token that opens an answer line.
        renderer: Converts accumulated plain text into note markup. Defaults
            to `render_markdown`.

    Examples:
        parser = Parser()
        for line in ["---", "deck: Spanish", "---", "Q: hola", "A: hello"]:
            parser.handle_line(line)
        notes = parser.finalize()
    """

    def __init__(
        self,
        question_prefix: str = DEFAULT_QUESTION_PREFIX,
        answer_prefix: str = DEFAULT_ANSWER_PREFIX,
        renderer: Renderer | None = None,
    ):
        self.question_prefix = question_prefix
        self.answer_prefix = answer_prefix
        self.renderer = renderer or render_markdown
        self.ctx = ParserContext()

    @classmethod
    def from_config(cls, config: SyncConfig, renderer: Renderer | None = None) -> Parser:
        return cls(config.question_prefix, config.answer_prefix, renderer)

    def handle_line(self, line: str) -> None:
        """Classify one line and apply the matching transition.

        The line counter advances even when the line is rejected.

        Raises:
            InvalidStateChangeError: If the line is not allowed in the current state.
            InvalidMetadataError: If a metadata line is malformed.
            MissingDeckError: If a note boundary is reached without a deck.
        """
        logger.debug("Parsing line %d: %s", self.ctx.line_number, line)
        event = classify_line(line, self.question_prefix, self.answer_prefix)
        try:
            if event.kind is EventKind.METADATA_DELIMITER:
                self._handle_metadata_delimiter(line)
            elif event.kind is EventKind.QUESTION_START:
                self._handle_question_start(event.text, line)
            elif event.kind is EventKind.ANSWER_START:
                self._handle_answer_start(event.text, line)
            elif event.kind is EventKind.TEXT:
                self._handle_text(event.text)
            else:
                self._handle_empty()
        finally:
            self.ctx.line_number += 1

    def finalize_note(self) -> ParsedNote:
        """Assemble the buffered question and answer into a note.

        Keeps the deck for the notes that follow and clears both buffers.

        Raises:
            MissingDeckError: If no deck has been declared.
        """
        ctx = self.ctx
        if ctx.deck is None:
            raise MissingDeckError(ctx.line_number)

        note = ParsedNote(
            deck=ctx.deck,
            question=self.renderer(ctx.question),
            answer=self.renderer(ctx.answer),
        )
        ctx.parsed.append(note)
        ctx.question = ""
        ctx.answer = ""
        return note

    def finalize(self) -> list[ParsedNote]:
        """Close the document and return its notes.

        Resets the parser so the instance can start another document.

        Raises:
            UnexpectedParsingEndError: If the document does not end inside an answer.
            MissingDeckError: If the last note has no deck.
        """
        ctx = self.ctx
        if ctx.state is not ParseState.IN_ANSWER:
            raise UnexpectedParsingEndError(ctx.state, ctx.line_number)

        self.finalize_note()
        ctx.state = ctx.state.reset()
        ctx.deck = None
        ctx.line_number = 0

        results = ctx.parsed
        ctx.parsed = []
        logger.debug("Found notes: %s", results)
        return results

    def _invalid_state_change(self, line: str) -> InvalidStateChangeError:
        return InvalidStateChangeError(self.ctx.line_number, self.ctx.state, line)

    def _handle_metadata_delimiter(self, line: str) -> None:
        if self.ctx.state not in _METADATA_STATES:
            raise self._invalid_state_change(line)
        self.ctx.state = self.ctx.state.next()

    def _handle_question_start(self, text: str, line: str) -> None:
        ctx = self.ctx
        if ctx.state is ParseState.IN_ANSWER:
            # A new question closes the previous note
            self.finalize_note()
        elif ctx.state is not ParseState.EXPECTING_QUESTION:
            raise self._invalid_state_change(line)

        ctx.question += f"{text}\n"
        ctx.state = ctx.state.next()

    def _handle_answer_start(self, text: str, line: str) -> None:
        ctx = self.ctx
        if ctx.state is not ParseState.IN_QUESTION:
            raise self._invalid_state_change(line)

        ctx.answer += f"{text}\n"
        ctx.state = ctx.state.next()

    def _handle_text(self, line: str) -> None:
        ctx = self.ctx
        if ctx.state is ParseState.IN_QUESTION:
            ctx.question += f"{line}\n"
        elif ctx.state is ParseState.IN_ANSWER:
            ctx.answer += f"{line}\n"
        elif ctx.state is ParseState.IN_METADATA:
            self._handle_metadata(line)
        else:
            raise self._invalid_state_change(line)

    def _handle_metadata(self, line: str) -> None:
        key, delimiter, value = line.partition(METADATA_KEY_VALUE_DELIMITER)
        line_number = self.ctx.line_number
        if not delimiter:
            raise InvalidMetadataError(f"Unable to parse line: {line}", line_number)
        if key != DECK_KEY:
            raise InvalidMetadataError(f"Expecting '{DECK_KEY}' keyword, found: {line}", line_number)

        deck = value.strip()
        if not deck:
            raise InvalidMetadataError(f"Deck name must not be empty: {line}", line_number)
        if self.ctx.deck is not None:
            raise InvalidMetadataError(f"Deck already set to {self.ctx.deck!r}: {line}", line_number)
        self.ctx.deck = deck

    def _handle_empty(self) -> None:
        ctx = self.ctx
        if ctx.state is ParseState.IN_QUESTION:
            ctx.question += "\n"
        elif ctx.state is ParseState.IN_ANSWER:
            ctx.answer += "\n"


def parse_lines(
    lines: Iterable[str],
    config: SyncConfig | None = None,
    renderer: Renderer | None = None,
) -> list[ParsedNote]:
    """Parse a sequence of lines into notes with a fresh parser.

    Args:
        lines: Document lines without trailing newlines.
        config: Configuration providing the question/answer prefixes. Defaults
            to a new `SyncConfig` when omitted.
        renderer: Optional replacement for `render_markdown`.

    Returns:
        list[ParsedNote]: Notes in document order.

    Raises:
        ParseError: On the first malformed line or an invalid document end.

    Examples:
        parse_lines(["---", "deck: Spanish", "---", "Q: hola", "A: hello"])
    """
    parser = Parser.from_config(config or SyncConfig(), renderer)
    for line in lines:
        parser.handle_line(line)
    return parser.finalize()


def parse_markdown(
    content: str, config: SyncConfig | None = None, renderer: Renderer | None = None
) -> list[ParsedNote]:
    """Parse a whole flashcard document held in memory.

    Lines end at ``\\n`` (a preceding ``\\r`` is dropped); no other character
    starts a new line, so reported line numbers match the text as written.

    Raises:
        ParseError: On the first malformed line or an invalid document end.

    Examples:
        parse_markdown("---\\ndeck: Spanish\\n---\\nQ: hola\\nA: hello\\n")
    """
    return parse_lines(split_lines(content), config, renderer)


class ParseFileError(Exception):
    """Raised when parsing a flashcard file fails."""


def parse_file(
    filepath: Path,
    config: SyncConfig | None = None,
    renderer: Renderer | None = None,
) -> list[ParsedNote]:
    """Read and parse a flashcard file.

    Args:
        filepath: Path to the Markdown file to parse.
        config: Configuration controlling parsing; defaults to
            a new `SyncConfig` when omitted.
        renderer: Optional replacement for `render_markdown`.

    Returns:
        list[ParsedNote]: Notes in document order.

    Raises:
        ParseFileError: If configuration is invalid, the file
            cannot be read or decoded, or its content is malformed.

    Examples:
        notes = parse_file(Path("spanish.md"), config)
    """
    config = config or SyncConfig()
    try:
        validate_config(config)
    except ValueError as error:
        raise ParseFileError(str(error)) from error

    try:
        lines = read_document(filepath)
    except UnicodeDecodeError as error:
        error_message = f"Invalid UTF-8 sequence in {filepath}: {error}"
        raise ParseFileError(error_message) from error
    except IOError as error:
        raise ParseFileError(str(error)) from error

    try:
        return parse_lines(lines, config, renderer)
    except ParseError as error:
        error_message = f"{filepath}: {error}"
        raise ParseFileError(error_message) from error
