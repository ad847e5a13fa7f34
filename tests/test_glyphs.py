"""
Tests for the glyph tables, the literal encoder and completion helpers.
"""

import pytest
from fysh import glyphs
from fysh.glyphs import encode_number, keyword_glyph, suggest_glyph, is_digit_glyph
from fysh.lexer import scan


class TestEncodeNumber:
    """Integer to fysh literal."""

    @pytest.mark.parametrize("value,expected", [
        (0, "><(>"),
        (1, "><{>"),
        (5, "><{({>"),
        (379, "><{({{{{({{>"),
        (-1, "<}><"),
        (-5, "<})}><"),
        (-7, "<}}}><"),
    ])
    def test_encode(self, value, expected):
        assert encode_number(value) == expected

    def test_eye(self):
        assert encode_number(5, eye=True) == "><{({°>"
        assert encode_number(-5, eye=True) == "<°})}><"

    @pytest.mark.parametrize("value", [0, 2, 50, -37, 1024])
    def test_scanner_decodes_encoded_value(self, value):
        token = scan(encode_number(value))[0]
        assert token.value == value


class TestDigitGlyphs:
    """Digit alphabet."""

    def test_digit_glyphs(self):
        assert all(is_digit_glyph(g) for g in "(){}")

    def test_non_digits(self):
        assert not is_digit_glyph("")
        assert not is_digit_glyph("o")
        assert not is_digit_glyph("<")

    def test_eyes(self):
        assert glyphs.EYES == "o°"


class TestCompletion:
    """Editor completion helpers."""

    @pytest.mark.parametrize("marker,glyph", [
        ("^", "><(((^>"),
        ("*", "><(((*>"),
        ("@", "><(((@>"),
    ])
    def test_keyword_glyph(self, marker, glyph):
        assert keyword_glyph(marker) == glyph

    def test_unknown_marker(self):
        assert keyword_glyph("#") is None

    def test_suggest_keyword(self):
        assert suggest_glyph("@") == "><(((@>"

    def test_suggest_number(self):
        assert suggest_glyph("12") == "><{{((>"
        assert suggest_glyph("-7") == "<}}}><"

    @pytest.mark.parametrize("text", ["fysh", "", "1.5", "--1", "7a"])
    def test_no_suggestion(self, text):
        assert suggest_glyph(text) is None
