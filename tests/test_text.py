"""
Tests for text normalization helpers.
"""

import pytest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


class TestNormalizeWhitespace:
    """Test whitespace collapsing."""

    def test_collapses_runs(self):
        from utils.text import normalize_whitespace

        assert normalize_whitespace("a \n\t b") == "a b"
        assert normalize_whitespace("line one\n\nline two\n") == "line one line two "

    def test_keeps_edges(self):
        """Edges are collapsed, not stripped."""
        from utils.text import normalize_whitespace

        assert normalize_whitespace("  a  ") == " a "

    def test_idempotent(self):
        from utils.text import normalize_whitespace

        for text in ["", " ", "a  b\tc\n", "Kapitel 1\r\n\r\nEinleitung"]:
            once = normalize_whitespace(text)
            assert normalize_whitespace(once) == once

    def test_rejects_none(self):
        from utils.text import normalize_whitespace

        with pytest.raises(TypeError):
            normalize_whitespace(None)

    def test_normalize_titles(self):
        from utils.text import normalize_titles

        assert normalize_titles(["1.  Intro", "2.\nMethods"]) == ["1. Intro", "2. Methods"]


class TestRoundToBoundary:
    """Test rounding offsets down to text-unit boundaries."""

    def test_plain_text_unchanged(self):
        from utils.text import round_to_boundary

        text = "plain text"
        for offset in range(len(text) + 1):
            assert round_to_boundary(text, offset) == offset

    def test_combining_mark(self):
        """An offset on a combining mark moves to its base character."""
        from utils.text import round_to_boundary

        text = "e\u0301x"
        assert round_to_boundary(text, 1) == 0
        assert round_to_boundary(text, 2) == 2

    def test_zero_width_joiner_sequence(self):
        """Offsets inside a joiner sequence move to its first character."""
        from utils.text import round_to_boundary

        text = "a\U0001F468\u200d\U0001F469b"
        assert round_to_boundary(text, 2) == 1
        assert round_to_boundary(text, 3) == 1
        assert round_to_boundary(text, 4) == 4

    def test_edges(self):
        from utils.text import round_to_boundary

        text = "\u0301abc"
        assert round_to_boundary(text, 0) == 0
        assert round_to_boundary(text, len(text)) == len(text)


class TestRoundUpToBoundary:
    """Test rounding end offsets up to text-unit boundaries."""

    def test_plain_text_unchanged(self):
        from utils.text import round_up_to_boundary

        text = "plain text"
        for offset in range(len(text) + 1):
            assert round_up_to_boundary(text, offset) == offset

    def test_combining_marks(self):
        """An offset on a combining mark moves past the whole cluster."""
        from utils.text import round_up_to_boundary

        text = "e\u0301\u0308x"
        assert round_up_to_boundary(text, 1) == 3
        assert round_up_to_boundary(text, 2) == 3
        assert round_up_to_boundary(text, 3) == 3

    def test_zero_width_joiner_sequence(self):
        from utils.text import round_up_to_boundary

        text = "a\U0001F468\u200d\U0001F469b"
        assert round_up_to_boundary(text, 2) == 4
        assert round_up_to_boundary(text, 3) == 4
        assert round_up_to_boundary(text, 1) == 1

    def test_edges(self):
        from utils.text import round_up_to_boundary

        text = "ab\u0301"
        assert round_up_to_boundary(text, 0) == 0
        assert round_up_to_boundary(text, 2) == 3
        assert round_up_to_boundary(text, len(text)) == len(text)
