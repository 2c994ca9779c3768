"""Minimal AnkiConnect client used as the note sink."""

from __future__ import annotations

import logging

import requests

from .constants import ANKI_CONNECT_API_VERSION, DEFAULT_ANKI_CONNECT_ENDPOINT, DEFAULT_TIMEOUT
from .exceptions import AnkiConnectError
from .models import ParsedNote

logger = logging.getLogger(__name__)


def build_note_payload(
    note: ParsedNote,
    allow_duplicate: bool = False,
    duplicate_scope: str = "deck",
    tags: list[str] | None = None,
) -> dict:
    """Convert a note into the structure expected by ``addNotes``.

    Examples:
        build_note_payload(ParsedNote("Spanish", "<p>hola</p>", "<p>hello</p>"))
    """
    return {
        "deckName": note.deck,
        "modelName": note.model.value,
        "fields": {
            "Front": note.question,
            "Back": note.answer,
        },
        "tags": list(tags or []),
        "options": {
            "allowDuplicate": allow_duplicate,
            "duplicateScope": duplicate_scope,
        },
    }


class AnkiConnectClient:
    """Small client for the AnkiConnect JSON API.

    Args:
        endpoint: URL of the AnkiConnect server.
        timeout: Seconds to wait for a response.
        session: Optional `requests.Session` to reuse connections.
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_ANKI_CONNECT_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self.endpoint = endpoint
        self.timeout = timeout
        self.session = session or requests.Session()

    def invoke(self, action: str, **params: object) -> object:
        """Call an AnkiConnect action and return its ``result``.

        Raises:
            AnkiConnectError: If the server cannot be reached, answers with
                something other than an AnkiConnect envelope, or reports an error.
        """
        body = {"action": action, "version": ANKI_CONNECT_API_VERSION, "params": params}
        logger.debug("Sending post with body: %s", body)
        try:
            response = self.session.post(self.endpoint, json=body, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as error:
            raise AnkiConnectError(f"Request to {self.endpoint} failed: {error}") from error
        except ValueError as error:
            raise AnkiConnectError(f"Invalid JSON response from {self.endpoint}") from error
        logger.debug("Received response: %s", data)

        if not isinstance(data, dict) or "result" not in data or "error" not in data:
            raise AnkiConnectError(f"Unexpected response from {self.endpoint}: {data!r}")
        if data["error"] is not None:
            raise AnkiConnectError(str(data["error"]))
        return data["result"]

    def add_notes(
        self,
        notes: list[ParsedNote],
        allow_duplicate: bool = False,
        duplicate_scope: str = "deck",
        tags: list[str] | None = None,
    ) -> list[int | None]:
        """Create notes in Anki.

        Returns:
            list[int | None]: Ids of the created notes, None where Anki refused one.

        Raises:
            AnkiConnectError: If the request fails or Anki reports an error.
        """
        payload = [
            build_note_payload(note, allow_duplicate, duplicate_scope, tags) for note in notes
        ]
        result = self.invoke("addNotes", notes=payload)
        if not isinstance(result, list):
            raise AnkiConnectError(f"Unexpected addNotes result: {result!r}")

        rejected = sum(1 for note_id in result if note_id is None)
        if rejected:
            logger.warning("Anki rejected %d of %d notes", rejected, len(result))
        return result
