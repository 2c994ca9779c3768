import dataclasses

import pytest

from anki_md_sync.exceptions import UnexpectedParsingEndError
from anki_md_sync.models import NoteModel, ParsedNote, ParserContext, ParseState


def test_parse_state_members():
    assert list(ParseState) == [
        ParseState.START,
        ParseState.IN_METADATA,
        ParseState.EXPECTING_QUESTION,
        ParseState.IN_QUESTION,
        ParseState.IN_ANSWER,
    ]


@pytest.mark.parametrize(
    ("state", "expected"),
    [
        (ParseState.START, ParseState.IN_METADATA),
        (ParseState.IN_METADATA, ParseState.EXPECTING_QUESTION),
        (ParseState.EXPECTING_QUESTION, ParseState.IN_QUESTION),
        (ParseState.IN_QUESTION, ParseState.IN_ANSWER),
        (ParseState.IN_ANSWER, ParseState.IN_QUESTION),
    ],
)
def test_next_state(state, expected):
    assert state.next() is expected


def test_reset_only_from_answer():
    assert ParseState.IN_ANSWER.reset() is ParseState.START

    for state in ParseState:
        if state is ParseState.IN_ANSWER:
            continue
        with pytest.raises(UnexpectedParsingEndError) as excinfo:
            state.reset()
        assert excinfo.value.state is state


def test_state_labels():
    assert ParseState.START.label == "Start"
    assert ParseState.EXPECTING_QUESTION.label == "ExpectingQuestion"
    assert ParseState.IN_ANSWER.label == "InAnswer"


def test_parsed_note_is_immutable():
    note = ParsedNote(deck="Spanish", question="<p>hola</p>\n", answer="<p>hello</p>\n")

    assert note.model is NoteModel.BASIC
    with pytest.raises(dataclasses.FrozenInstanceError):
        note.deck = "German"


def test_parser_context_defaults():
    ctx = ParserContext()

    assert ctx.state is ParseState.START
    assert ctx.question == ""
    assert ctx.answer == ""
    assert ctx.deck is None
    assert ctx.line_number == 0
    assert ctx.parsed == []


def test_parser_contexts_do_not_share_results():
    first = ParserContext()
    second = ParserContext()

    first.parsed.append(ParsedNote("Spanish", "q", "a"))

    assert second.parsed == []
