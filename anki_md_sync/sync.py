"""Parse flashcard files and push their notes to Anki."""

from __future__ import annotations

import logging
from pathlib import Path

from .client import AnkiConnectClient
from .config import SyncConfig
from .exceptions import AnkiConnectError, SyncError
from .parser import ParseFileError, parse_file
from .renderer import Renderer

logger = logging.getLogger(__name__)


class AnkiSync:
    """Sync flashcard files into Anki, one file at a time.

    A file's notes are submitted only after the whole file parsed; a parse
    failure submits nothing.

    Args:
        config: Settings for parsing and for the AnkiConnect client.
        client: Optional client, mostly useful for tests.
        renderer: Optional replacement for the Markdown renderer.
    """

    def __init__(
        self,
        config: SyncConfig | None = None,
        client: AnkiConnectClient | None = None,
        renderer: Renderer | None = None,
    ):
        self.config = config or SyncConfig()
        self.client = client or AnkiConnectClient(self.config.endpoint, self.config.timeout)
        self.renderer = renderer

    def sync_file(self, filepath: Path) -> int:
        """Parse `filepath` and add its notes to Anki.

        Returns:
            int: Number of notes Anki accepted.

        Raises:
            SyncError: If the file cannot be parsed or AnkiConnect fails.
        """
        try:
            notes = parse_file(filepath, self.config, self.renderer)
        except ParseFileError as error:
            raise SyncError(f"Received parsing error: {error}") from error

        try:
            note_ids = self.client.add_notes(
                notes,
                allow_duplicate=self.config.allow_duplicate,
                duplicate_scope=self.config.duplicate_scope,
                tags=self.config.tags,
            )
        except AnkiConnectError as error:
            raise SyncError(f"Received API error: {error}") from error

        return sum(1 for note_id in note_ids if note_id is not None)

    def sync_files(self, filepaths: list[Path]) -> dict[Path, SyncError | None]:
        """Sync each file in turn, continuing past failures.

        Returns:
            dict[Path, SyncError | None]: Outcome per file, None on success.
        """
        outcomes: dict[Path, SyncError | None] = {}
        for filepath in filepaths:
            logger.info("Syncing file %s...", filepath)
            try:
                added = self.sync_file(filepath)
            except SyncError as error:
                logger.error("Error while syncing %s: %s", filepath, error)
                outcomes[filepath] = error
                continue
            logger.info("Done syncing file %s! (%d notes added)", filepath, added)
            outcomes[filepath] = None
        return outcomes
