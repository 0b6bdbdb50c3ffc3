"""Unit tests for notes.slug."""

from notes.slug import normalize_tag, normalize_tags, normalize_title

# ---------------------------------------------------------------------------
# normalize_title
# ---------------------------------------------------------------------------


class TestNormalizeTitle:
    def test_lowercases_and_hyphenates(self):
        assert normalize_title("Configuring Neovim") == "configuring-neovim"

    def test_collapses_spaces_and_strips_punctuation(self):
        assert normalize_title("  Configuring  Neovim!!  ") == "configuring-neovim"

    def test_keeps_existing_hyphens(self):
        assert normalize_title("Well-known Facts") == "well-known-facts"

    def test_collapses_hyphen_runs(self):
        assert normalize_title("a --- b") == "a-b"

    def test_collapses_hyphens_left_by_punctuation(self):
        assert normalize_title("Q & A") == "q-a"
        assert normalize_title("a ! b") == "a-b"

    def test_keeps_norwegian_letters(self):
        assert normalize_title("Blåbær Øl") == "blåbær-øl"

    def test_drops_underscores(self):
        # Titles must never contain the tag separator
        assert normalize_title("snake_case title") == "snakecase-title"

    def test_digits_kept(self):
        assert normalize_title("Top 10 Tips") == "top-10-tips"

    def test_empty_input(self):
        assert normalize_title("") == ""

    def test_only_punctuation_is_empty(self):
        assert normalize_title("?!") == ""


# ---------------------------------------------------------------------------
# normalize_tag
# ---------------------------------------------------------------------------


class TestNormalizeTag:
    def test_simple(self):
        assert normalize_tag("Editor") == "editor"

    def test_multi_word_loses_separator(self):
        # space -> hyphen happens before the strip, so the hyphen is removed too
        assert normalize_tag("Editor Tools") == "editortools"

    def test_hyphen_removed(self):
        assert normalize_tag("open-source") == "opensource"

    def test_underscores_removed(self):
        assert normalize_tag("a__b") == "ab"

    def test_keeps_norwegian_letters(self):
        assert normalize_tag("Æøå") == "æøå"

    def test_empty_input(self):
        assert normalize_tag("") == ""


class TestNormalizeTags:
    def test_sorted_and_deduplicated(self):
        assert normalize_tags(["tools", "Editor", "editor"]) == ["editor", "tools"]

    def test_drops_empty(self):
        assert normalize_tags(["", "!!", "unix"]) == ["unix"]

    def test_empty(self):
        assert normalize_tags([]) == []
