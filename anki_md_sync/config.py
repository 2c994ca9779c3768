"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
import tomllib

from .constants import (
    DEFAULT_ANKI_CONNECT_ENDPOINT,
    DEFAULT_ANSWER_PREFIX,
    DEFAULT_QUESTION_PREFIX,
    DEFAULT_TIMEOUT,
    DUPLICATE_SCOPES,
    METADATA_DELIMITER,
)


@dataclass
class SyncConfig:
    """Configuration for parsing flashcard files and submitting them to Anki.

    Attributes:
        question_prefix: Token that opens a question line.
        answer_prefix: Token that opens an answer line.
        endpoint: URL of the AnkiConnect server.
        timeout: Seconds to wait for AnkiConnect before giving up.
        allow_duplicate: Whether Anki may create notes with a duplicate front.
        duplicate_scope: Where Anki looks for duplicates (``"deck"`` or
            ``"collection"``).
        tags: Tags attached to every created note.

    Examples:
        SyncConfig(question_prefix="F: ", answer_prefix="B: ")
    """

    # Dialect
    question_prefix: str = DEFAULT_QUESTION_PREFIX
    answer_prefix: str = DEFAULT_ANSWER_PREFIX

    # AnkiConnect
    endpoint: str = DEFAULT_ANKI_CONNECT_ENDPOINT
    timeout: float = DEFAULT_TIMEOUT
    allow_duplicate: bool = False
    duplicate_scope: str = "deck"
    tags: list[str] = field(default_factory=list)


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`question_prefix` must not be empty")
    """


def load_config(search_path: Path) -> SyncConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.anki-md-sync]`` table from `pyproject.toml` and the
    ``[anki-md-sync]`` or ``[tool.anki-md-sync]`` table from
    `.anki-md-sync.toml` when present. Returns default values when no
    configuration is found. TOML files that cannot be read or decoded are
    skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        SyncConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If the table is present but is not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("notes"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "anki-md-sync")]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_file(
            current / ".anki-md-sync.toml",
            table_paths=[("anki-md-sync",), ("tool", "anki-md-sync")],
        )
        if dotfile_config is not None:
            return dotfile_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return SyncConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> SyncConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> SyncConfig:
    table_display = ".".join(table_path)

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return SyncConfig()

    # TOML keys use dashes, dataclass fields use underscores
    normalized = {key.replace("-", "_"): value for key, value in raw_config.items()}
    try:
        return SyncConfig(**normalized)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def validate_config(config: SyncConfig) -> None:
    """Validate a `SyncConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If prefixes are empty, identical, or collide with the
            metadata fence, the endpoint is not an HTTP URL, the duplicate scope
            is unknown, or the timeout is not a positive number.

    Examples:
        validate_config(SyncConfig(question_prefix="F: ", answer_prefix="B: "))
    """
    for key in ("question_prefix", "answer_prefix"):
        value = getattr(config, key)
        if not isinstance(value, str) or not value:
            raise ConfigError(f"`{key}` must be a non-empty string")
        if value == METADATA_DELIMITER:
            raise ConfigError(f"`{key}` must differ from the metadata delimiter")
    if config.question_prefix == config.answer_prefix:
        raise ConfigError("`question_prefix` and `answer_prefix` must differ")

    if not isinstance(config.endpoint, str) or not config.endpoint.startswith(
        ("http://", "https://")
    ):
        raise ConfigError("`endpoint` must be an http:// or https:// URL")

    if config.duplicate_scope not in DUPLICATE_SCOPES:
        raise ConfigError(f"`duplicate_scope` must be one of: {', '.join(DUPLICATE_SCOPES)}")
    if not isinstance(config.allow_duplicate, bool):
        raise ConfigError("`allow_duplicate` must be a boolean")
    if not isinstance(config.tags, list) or not all(isinstance(tag, str) for tag in config.tags):
        raise ConfigError("`tags` must be a list of strings")

    if isinstance(config.timeout, bool) or not isinstance(config.timeout, (int, float)):
        raise ConfigError("`timeout` must be a number")
    _ensure_positive({"timeout": config.timeout})


def apply_overrides(config: SyncConfig, **overrides: object) -> SyncConfig:
    """Apply override values to a `SyncConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        SyncConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `SyncConfig`.

    Examples:
        updated = apply_overrides(config, endpoint="http://127.0.0.1:8765")
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> SyncConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        SyncConfig: Validated configuration ready for parsing and syncing.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), question_prefix="F: ")
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    validate_config(config)
    return config


def load_file_list(list_path: Path) -> list[Path]:
    """Read a newline-separated list of Markdown files to sync.

    Relative entries are resolved against the list file's directory; blank
    lines are skipped.

    Args:
        list_path: Path to the list file.

    Returns:
        list[Path]: Paths in the order they appear.

    Raises:
        ConfigError: If the list file cannot be read.

    Examples:
        load_file_list(Path("decks.txt"))
    """
    try:
        content = list_path.read_text(encoding="UTF-8")
    except (OSError, UnicodeDecodeError) as error:
        raise ConfigError(f"Error reading file list {list_path}: {error}") from error

    paths = []
    for entry in content.splitlines():
        entry = entry.strip()
        if not entry:
            continue
        path = Path(entry).expanduser()
        if not path.is_absolute():
            path = list_path.parent / path
        paths.append(path)
    return paths


def _ensure_positive(values: dict[str, float]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be positive")

