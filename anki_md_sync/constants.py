"""Constants used across the anki-md-sync package."""

from __future__ import annotations

# Markdown dialect
METADATA_DELIMITER = "---"
METADATA_KEY_VALUE_DELIMITER = ":"
DECK_KEY = "deck"
DEFAULT_QUESTION_PREFIX = "Q: "
DEFAULT_ANSWER_PREFIX = "A: "

# AnkiConnect
ANKI_CONNECT_API_VERSION = 6
DEFAULT_ANKI_CONNECT_ENDPOINT = "http://localhost:8765"
DEFAULT_TIMEOUT = 30.0
DUPLICATE_SCOPES = ("deck", "collection")

# Input files
MARKDOWN_EXTENSIONS = (".md", ".markdown")
