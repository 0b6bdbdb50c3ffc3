"""Tests for the Typer CLI (notes.cli)."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from notes.cli import app

NEOVIM = "20230504T162825--configuring-neovim__editor_tools.md"
SHELL = "20230601T080000--shell-tricks__unix.md"

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.delenv("NOTES_DIR", raising=False)
    monkeypatch.delenv("NOTES_CONFIG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))


@pytest.fixture()
def notes_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "notes"
    directory.mkdir()
    (directory / NEOVIM).write_text("# Neovim\nTelescope setup.\n", encoding="utf-8")
    (directory / SHELL).write_text("ctrl-r\n", encoding="utf-8")
    return directory


class TestCli:
    def test_missing_configuration(self):
        result = runner.invoke(app, ["search"])
        assert result.exit_code == 1
        assert "No notes directory configured" in result.output

    def test_search(self, notes_dir: Path):
        result = runner.invoke(app, ["--dir", str(notes_dir), "search"], input="telescope\n")
        assert result.exit_code == 0
        assert "1 match" in result.output
        assert "Telescope" in result.output

    def test_search_from_environment(self, monkeypatch: pytest.MonkeyPatch, notes_dir: Path):
        monkeypatch.setenv("NOTES_DIR", str(notes_dir))
        result = runner.invoke(app, ["search"], input="ctrl\n")
        assert result.exit_code == 0
        assert "1 match" in result.output

    def test_retitle(self, notes_dir: Path):
        result = runner.invoke(app, ["-d", str(notes_dir), "retitle", NEOVIM], input="NeoVim Setup\n")
        assert result.exit_code == 0, result.output
        assert (notes_dir / "20230504T162825--neovim-setup__editor_tools.md").exists()
        assert not (notes_dir / NEOVIM).exists()

    def test_retitle_non_note(self, notes_dir: Path):
        (notes_dir / "README.md").write_text("", encoding="utf-8")
        result = runner.invoke(app, ["-d", str(notes_dir), "retitle", "README.md"], input="x\n")
        assert result.exit_code == 1
        assert "Not in a note file" in result.output

    def test_toggle_tag_by_number(self, notes_dir: Path):
        # Choices are listed descending: 1 unix, 2 tools, 3 editor
        result = runner.invoke(app, ["-d", str(notes_dir), "toggle-tag", NEOVIM], input="1\n")
        assert result.exit_code == 0, result.output
        assert (notes_dir / "20230504T162825--configuring-neovim__editor_tools_unix.md").exists()

    def test_toggle_tag_new_tag(self, notes_dir: Path):
        result = runner.invoke(app, ["-d", str(notes_dir), "toggle-tag", SHELL], input="bash\n")
        assert result.exit_code == 0, result.output
        assert (notes_dir / "20230601T080000--shell-tricks__bash_unix.md").exists()

    def test_toggle_tag_cancel(self, notes_dir: Path):
        result = runner.invoke(app, ["-d", str(notes_dir), "toggle-tag", NEOVIM], input="\n")
        assert result.exit_code == 0
        assert (notes_dir / NEOVIM).exists()

    def test_link_to_note_appends_to_file(self, notes_dir: Path):
        # Notes are listed newest first: 1 shell-tricks, 2 configuring-neovim
        result = runner.invoke(app, ["-d", str(notes_dir), "link-to-note", SHELL], input="2\n")
        assert result.exit_code == 0, result.output
        text = (notes_dir / SHELL).read_text(encoding="utf-8")
        assert text == "ctrl-r\n[configuring neovim](20230504T162825.id)"

    def test_find_creates_note(self, notes_dir: Path):
        result = runner.invoke(app, ["-d", str(notes_dir), "find"], input="Fresh Idea, draft\n")
        assert result.exit_code == 0, result.output
        created = [p.name for p in notes_dir.glob("*--fresh-idea__draft.md")]
        assert len(created) == 1

    def test_find_rejects_number_outside_list(self, notes_dir: Path):
        result = runner.invoke(app, ["-d", str(notes_dir), "find"], input="7\n1\n")
        assert result.exit_code == 0, result.output
        assert "No item numbered 7" in result.output
        assert sorted(p.name for p in notes_dir.glob("*.md")) == [NEOVIM, SHELL]


class TestCliOpenNote:
    def test_retitle_without_configuration(self):
        result = runner.invoke(app, ["retitle", NEOVIM], input="x\n")
        assert result.exit_code == 1
        assert "No notes directory configured" in result.output

    def test_retitle_note_that_is_not_utf8(self, notes_dir: Path):
        (notes_dir / "20230801T090000--latin.md").write_bytes(b"caf\xe9 notes\n")
        result = runner.invoke(app, ["-d", str(notes_dir), "retitle", "20230801T090000--latin.md"], input="x\n")
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Cannot read note as UTF-8 text" in result.output

    def test_retitle_directory(self, notes_dir: Path):
        (notes_dir / "20230801T090000--folder.md").mkdir()
        result = runner.invoke(app, ["-d", str(notes_dir), "retitle", "20230801T090000--folder.md"], input="x\n")
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)


class TestCliListings:
    def test_list(self, notes_dir: Path):
        result = runner.invoke(app, ["-d", str(notes_dir), "list"])
        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == [SHELL, NEOVIM]

    def test_list_by_tag(self, notes_dir: Path):
        result = runner.invoke(app, ["-d", str(notes_dir), "list", "--tag", "editor"])
        assert result.output.splitlines() == [NEOVIM]

    def test_list_without_configuration(self):
        result = runner.invoke(app, ["list"])
        assert result.exit_code == 1

    def test_tags(self, notes_dir: Path):
        result = runner.invoke(app, ["-d", str(notes_dir), "tags"])
        assert result.exit_code == 0, result.output
        assert "note_count" in result.output
        assert "editor" in result.output

    def test_query(self, notes_dir: Path):
        result = runner.invoke(app, ["-d", str(notes_dir), "query", "SELECT title FROM notes ORDER BY id"])
        assert result.exit_code == 0, result.output
        assert "shell tricks" in result.output

    def test_bad_query(self, notes_dir: Path):
        result = runner.invoke(app, ["-d", str(notes_dir), "query", "SELECT * FROM missing"])
        assert result.exit_code == 1
        assert "Query failed" in result.output
