from __future__ import annotations

import textwrap
from pathlib import Path

import anki_md_sync.sync as sync_module
from anki_md_sync.cli import cli

SPANISH = """
---
deck: Spanish
---
Q: hola
A: hello
Q: adios
A: goodbye
"""


def _write(tmp_path: Path, filename: str, content: str) -> Path:
    path = tmp_path / filename
    path.write_text(textwrap.dedent(content).lstrip(), encoding="utf-8")
    return path


class FakeClient:
    instances: list[FakeClient] = []

    def __init__(self, endpoint, timeout):
        self.endpoint = endpoint
        self.timeout = timeout
        self.batches = []
        FakeClient.instances.append(self)

    def add_notes(self, notes, allow_duplicate=False, duplicate_scope="deck", tags=None):
        self.batches.append(notes)
        return [1] * len(notes)


def _install_fake_client(monkeypatch):
    FakeClient.instances = []
    monkeypatch.setattr(sync_module, "AnkiConnectClient", FakeClient)


def test_cli_syncs_files(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _install_fake_client(monkeypatch)
    target = _write(tmp_path, "spanish.md", SPANISH)

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0, result.output
    assert "Synced 1 of 1 files." in result.output
    (client,) = FakeClient.instances
    assert client.endpoint == "http://localhost:8765"
    assert [note.deck for note in client.batches[0]] == ["Spanish", "Spanish"]
    assert client.batches[0][0].question == "<p>hola</p>\n"


def test_cli_reports_failures_and_continues(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _install_fake_client(monkeypatch)
    broken = _write(tmp_path, "broken.md", "---\ndeck\n---\n")
    good = _write(tmp_path, "good.md", SPANISH)

    result = cli_runner.invoke(cli, [str(broken), str(good)])

    assert result.exit_code == 1
    assert "Synced 1 of 2 files." in result.output
    (client,) = FakeClient.instances
    assert len(client.batches) == 1


def test_cli_reads_files_from_list(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _install_fake_client(monkeypatch)
    _write(tmp_path, "spanish.md", SPANISH)
    _write(tmp_path, "german.md", "---\ndeck: German\n---\nQ: hallo\nA: hello\n")
    list_file = tmp_path / "decks.txt"
    list_file.write_text("spanish.md\ngerman.md\n", encoding="utf-8")

    result = cli_runner.invoke(cli, ["--files-from", str(list_file)])

    assert result.exit_code == 0, result.output
    assert "Synced 2 of 2 files." in result.output


def test_cli_accepts_files_with_short_option(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _install_fake_client(monkeypatch)
    target = _write(tmp_path, "spanish.md", SPANISH)
    other = _write(tmp_path, "german.md", "---\ndeck: German\n---\nQ: hallo\nA: hello\n")

    result = cli_runner.invoke(cli, ["--dry-run", "-f", str(target), "--file", str(other)])

    assert result.exit_code == 0, result.output
    assert "2 notes (Spanish)" in result.output
    assert "1 notes (German)" in result.output


def test_cli_syncs_repeated_file_once(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _install_fake_client(monkeypatch)
    target = _write(tmp_path, "spanish.md", SPANISH)
    list_file = tmp_path / "decks.txt"
    list_file.write_text("spanish.md\n", encoding="utf-8")

    result = cli_runner.invoke(
        cli, [str(target), "-f", "spanish.md", "--files-from", str(list_file)]
    )

    assert result.exit_code == 0, result.output
    assert "Synced 1 of 1 files." in result.output
    (client,) = FakeClient.instances
    assert len(client.batches) == 1


def test_cli_applies_prefix_and_endpoint_overrides(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _install_fake_client(monkeypatch)
    target = _write(tmp_path, "cards.md", "---\ndeck: Japanese\n---\nF: 猫\nB: cat\n")

    result = cli_runner.invoke(
        cli,
        [
            "--question-prefix",
            "F: ",
            "--answer-prefix",
            "B: ",
            "--endpoint",
            "http://anki.test:8765",
            str(target),
        ],
    )

    assert result.exit_code == 0, result.output
    (client,) = FakeClient.instances
    assert client.endpoint == "http://anki.test:8765"
    assert client.batches[0][0].answer == "<p>cat</p>\n"


def test_cli_uses_project_config(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _install_fake_client(monkeypatch)
    (tmp_path / ".anki-md-sync.toml").write_text(
        '[anki-md-sync]\nendpoint = "http://configured:8765"\n', encoding="utf-8"
    )
    target = _write(tmp_path, "spanish.md", SPANISH)

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0, result.output
    assert FakeClient.instances[0].endpoint == "http://configured:8765"


def test_cli_dry_run_does_not_contact_anki(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _install_fake_client(monkeypatch)
    target = _write(tmp_path, "spanish.md", SPANISH)

    result = cli_runner.invoke(cli, ["--dry-run", str(target)])

    assert result.exit_code == 0, result.output
    assert "2 notes (Spanish)" in result.output
    assert FakeClient.instances == []


def test_cli_dry_run_reports_parse_errors(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "early.md", "---\ndeck: Spanish\n---\nA: too soon\n")

    result = cli_runner.invoke(cli, ["--dry-run", str(target)])

    assert result.exit_code == 1


def test_cli_rejects_non_markdown_files(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "notes.txt", SPANISH)

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code != 0
    assert "not a Markdown file" in result.output


def test_cli_rejects_invalid_overrides(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "spanish.md", SPANISH)

    result = cli_runner.invoke(cli, ["--endpoint", "localhost", str(target)])

    assert result.exit_code != 0
    assert "endpoint" in result.output


def test_cli_requires_files(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(cli, [])

    assert result.exit_code == 2
    assert "No files to sync" in result.output
