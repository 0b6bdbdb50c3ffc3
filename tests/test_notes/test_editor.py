"""Unit tests for notes.editor."""

from pathlib import Path

import pytest

from notes.editor import MemoryEditor, NoteBuffer


class TestNoteBuffer:
    def test_load_existing(self, tmp_path: Path):
        path = tmp_path / "a.md"
        path.write_text("hello", encoding="utf-8")
        buffer = NoteBuffer.load(path)
        assert buffer.text == "hello"
        assert not buffer.modified

    def test_load_missing_is_empty(self, tmp_path: Path):
        assert NoteBuffer.load(tmp_path / "new.md").text == ""

    def test_set_text_marks_modified(self, tmp_path: Path):
        buffer = NoteBuffer(tmp_path / "a.md")
        buffer.set_text("x")
        assert buffer.modified

    def test_write(self, tmp_path: Path):
        buffer = NoteBuffer(tmp_path / "a.md")
        buffer.set_text("saved")
        buffer.write()
        assert (tmp_path / "a.md").read_text(encoding="utf-8") == "saved"
        assert not buffer.modified


class TestMemoryEditor:
    def test_open_reuses_buffer(self, tmp_path: Path):
        editor = MemoryEditor()
        first = editor.open(tmp_path / "a.md")
        first.set_text("unsaved")
        assert editor.open(tmp_path / "a.md") is first

    def test_open_sets_current(self, tmp_path: Path):
        editor = MemoryEditor()
        buffer = editor.open(tmp_path / "a.md")
        assert editor.current is buffer

    def test_buffer_for(self, tmp_path: Path):
        editor = MemoryEditor()
        buffer = editor.open(tmp_path / "a.md")
        assert editor.buffer_for(tmp_path / "a.md") is buffer
        assert editor.buffer_for(tmp_path / "b.md") is None

    def test_close(self, tmp_path: Path):
        editor = MemoryEditor()
        buffer = editor.open(tmp_path / "a.md")
        editor.close(buffer)
        assert editor.current is None
        assert editor.buffer_for(tmp_path / "a.md") is None

    def test_insert_appends(self, tmp_path: Path):
        editor = MemoryEditor()
        editor.open(tmp_path / "a.md")
        editor.insert("[link](x.id)")
        assert editor.current is not None
        assert editor.current.text == "[link](x.id)"

    def test_insert_without_buffer(self):
        with pytest.raises(RuntimeError):
            MemoryEditor().insert("x")
