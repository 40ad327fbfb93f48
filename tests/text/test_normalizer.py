"""Tests for the text normalizer module."""

import pytest

from rsvp_reader.services.text import normalize_text


class TestBasicNormalization:
    """Test basic whitespace and text normalization."""

    def test_empty_text(self):
        assert normalize_text("") == ""

    def test_none_is_empty(self):
        assert normalize_text(None) == ""

    def test_whitespace_only(self):
        assert normalize_text(" \t\n\r ") == ""

    def test_basic_whitespace(self):
        """Multiple spaces should be collapsed to single space."""
        assert normalize_text("Hello    world") == "Hello world"

    def test_leading_trailing_whitespace(self):
        assert normalize_text("   Hello world   ") == "Hello world"

    def test_line_breaks_become_spaces(self):
        assert normalize_text("Hello\r\nworld\rtest\n\nagain") == "Hello world test again"


class TestWhitespaceVariants:
    """Non-breaking and thin spaces fold into plain spaces."""

    @pytest.mark.parametrize(
        "variant",
        [
            "\u00a0",  # no-break space
            "\u2009",  # thin space
            "\u202f",  # narrow no-break space
            "\ufeff",  # BOM
        ],
    )
    def test_variant_becomes_space(self, variant):
        assert normalize_text(f"12.7{variant}mg") == "12.7 mg"

    def test_mixed_run_collapses(self):
        assert normalize_text("a\u00a0 \u2009\tb") == "a b"

    def test_leading_bom_is_trimmed(self):
        assert normalize_text("\ufeffTitle") == "Title"


class TestUnicodeComposition:
    """Canonical composition without compatibility folding."""

    def test_combining_accent_is_composed(self):
        assert normalize_text("cafe\u0301") == "café"

    @pytest.mark.parametrize(
        "text",
        [
            "CO₂",  # subscript two
            "x²",  # superscript two
            "ﬁle",  # fi ligature
            "µg",  # micro sign
        ],
    )
    def test_scientific_glyphs_are_preserved(self, text):
        assert normalize_text(text) == text


class TestIdempotence:

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "  spaced   out  ",
            "cafe\u0301\u00a0au\u2009lait",
            "p < 0.05 (n = 1,048)\n\nNext paragraph.",
        ],
    )
    def test_normalize_twice_is_stable(self, text):
        once = normalize_text(text)
        assert normalize_text(once) == once
