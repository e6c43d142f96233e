"""Tests for title cleaning used to build search queries."""
import pytest

from bookshelf.core.titles import clean_title, first_two_words


class TestCleanTitle:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Ruin (Villain #2)", "Ruin"),
            ("Dark Vow Book 3", "Dark Vow"),
            ("  Multiple   Spaces  ", "Multiple Spaces"),
            ("Haunting Adeline (Cat and Mouse Duet #1)", "Haunting Adeline"),
            ("Twisted Lies Vol. 4", "Twisted Lies"),
            ("The Ritual bk #2", "The Ritual"),
            ("Kingdom of the Wicked #1", "Kingdom of the Wicked"),
            ("Scarred Part 2: Aftermath", "Scarred : Aftermath"),
        ],
    )
    def test_strips_series_markers(self, raw, expected):
        assert clean_title(raw) == expected

    def test_normalizes_curly_punctuation(self):
        assert clean_title("Don’t Let Go — “Again”") == "Don't Let Go - \"Again\""

    def test_leaves_plain_title_alone(self):
        assert clean_title("Credence") == "Credence"

    def test_series_word_without_number_is_kept(self):
        assert clean_title("The Book Thief") == "The Book Thief"

    @pytest.mark.parametrize("raw", ["", None, "   "])
    def test_empty_input(self, raw):
        assert clean_title(raw) == ""


class TestFirstTwoWords:
    def test_truncates(self):
        assert first_two_words("A Court of Thorns and Roses") == "A Court"

    def test_short_input(self):
        assert first_two_words("  Credence ") == "Credence"

    def test_collapses_whitespace(self):
        assert first_two_words("Dark   Vow  Three") == "Dark Vow"

    def test_empty(self):
        assert first_two_words("") == ""
        assert first_two_words(None) == ""
