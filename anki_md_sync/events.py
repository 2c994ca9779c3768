"""Line classification for the flashcard dialect."""

from __future__ import annotations

from .constants import DEFAULT_ANSWER_PREFIX, DEFAULT_QUESTION_PREFIX, METADATA_DELIMITER
from .models import EventKind, ParseEvent


def strip_prefix(line: str, prefix: str) -> str:
    """Remove `prefix` from the start of `line`.

    Lengths are counted in code points, the same unit used for slicing, so
    multi-byte prefixes such as ``"問: "`` strip cleanly.

    Args:
        line: Line known to start with `prefix`.
        prefix: Token to remove.

    Returns:
        str: The remainder of the line.

    Examples:
        strip_prefix("問: 猫", "問: ")  # "猫"
    """
    return line[len(prefix) :]


def classify_line(
    line: str,
    question_prefix: str = DEFAULT_QUESTION_PREFIX,
    answer_prefix: str = DEFAULT_ANSWER_PREFIX,
    metadata_delimiter: str = METADATA_DELIMITER,
) -> ParseEvent:
    """Map a raw line to a parse event.

    Checks run in a fixed order: metadata fence, question prefix, answer
    prefix, empty line, then plain text. The fence must match the whole line,
    so it is recognised even inside a question or answer body.

    Args:
        line: Line without its trailing newline.
        question_prefix: Token opening a question.
        answer_prefix: Token opening an answer.
        metadata_delimiter: Line fencing the metadata block.

    Returns:
        ParseEvent: The classified event.

    Examples:
        classify_line("Q: hola")  # ParseEvent(EventKind.QUESTION_START, "hola")
        classify_line("---")  # ParseEvent(EventKind.METADATA_DELIMITER)
    """
    if line == metadata_delimiter:
        return ParseEvent(EventKind.METADATA_DELIMITER)
    if line.startswith(question_prefix):
        return ParseEvent(EventKind.QUESTION_START, strip_prefix(line, question_prefix))
    if line.startswith(answer_prefix):
        return ParseEvent(EventKind.ANSWER_START, strip_prefix(line, answer_prefix))
    if not line:
        return ParseEvent(EventKind.EMPTY)
    return ParseEvent(EventKind.TEXT, line)


def split_lines(content: str) -> list[str]:
    """Split a document into lines on ``\\n`` only.

    A trailing ``\\r`` is dropped from each line, and the empty piece left by a
    final newline is discarded. Other Unicode line boundaries (form feed,
    ``U+2028`` and friends) stay inside their line.

    Examples:
        split_lines("Q: a\\r\\nA: b\\n")  # ["Q: a", "A: b"]
    """
    lines = [line.removesuffix("\r") for line in content.split("\n")]
    if lines[-1] == "":
        lines.pop()
    return lines
