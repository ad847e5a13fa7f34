"""
Fysh Glyph Tables
=================

Fysh source is written in ASCII fish. This module holds the fixed glyph
vocabulary shared by the scanner and by editor tooling, plus the encoder
that turns an integer back into a fysh literal.

Literals
--------
A fysh literal is a binary number written as scales:

| Glyph      | Meaning  |
|------------|----------|
| ( or )     | binary 0 |
| { or }     | binary 1 |
| o or °     | eye (ignored) |

    ><{({o>      right-facing, +5 (header '><', trailer '>')
    <})}><       left-facing,  -5 (header '<',  trailer '><')

The digit run is read most-significant bit first. Right-facing fysh
canonically use '(' and '{'; left-facing fysh use ')' and '}'. The scanner
accepts either pair in either facing.

Keywords
--------
| Glyph      | Meaning      |
|------------|--------------|
| ><>        | block open   |
| <><        | block close  |
| ><(((^>    | if           |
| ><(((*>    | else         |
| ><(((@>    | while        |
| ><\\/>      | break        |
| <\\/><      | break        |
| <~         | return       |
"""

import re
from typing import Optional


# =============================================================================
# Digit Alphabet
# =============================================================================

DIGIT_VALUES: dict[str, str] = {
    "(": "0",
    ")": "0",
    "{": "1",
    "}": "1",
}

EYES = "o°"

# Canonical (zero, one) glyphs per facing
RIGHT_DIGITS = ("(", "{")
LEFT_DIGITS = (")", "}")

CANONICAL_EYE = "°"


# =============================================================================
# Fysh Delimiters and Keywords
# =============================================================================

RIGHT_HEADER = "><"
RIGHT_TRAILER = ">"
LEFT_HEADER = "<"
LEFT_TRAILER = "><"

BLOCK_OPEN = "><>"
BLOCK_CLOSE = "<><"

IF_GLYPH = "><(((^>"
ELSE_GLYPH = "><(((*>"
WHILE_GLYPH = "><(((@>"

BREAK_RIGHT = "><\\/>"
BREAK_LEFT = "<\\/><"

RETURN_GLYPH = "<~"

LINE_COMMENT = "><//>"
BLOCK_COMMENT_OPEN = "></*>"
BLOCK_COMMENT_CLOSE = "<*/><"

# Editor shorthand: typing the marker completes to the keyword fysh
KEYWORD_MARKERS: dict[str, str] = {
    "^": IF_GLYPH,
    "*": ELSE_GLYPH,
    "@": WHILE_GLYPH,
}

# Compound glyphs kept verbatim in the tree
OPAQUE_PREFIX = "(+o"
OPAQUE_SUFFIX = "o+)"

_DECIMAL = re.compile(r"-?[0-9]+")


# =============================================================================
# Encoding
# =============================================================================

def is_digit_glyph(char: str) -> bool:
    """Return True if char is one of the four binary scale glyphs."""
    return char != "" and char in DIGIT_VALUES


def encode_number(value: int, eye: bool = False) -> str:
    """
    Render an integer as a fysh literal.

    Non-negative values swim right, negative values swim left:

        >>> encode_number(5)
        '><{({>'
        >>> encode_number(-5)
        '<})}><'
        >>> encode_number(1, eye=True)
        '><{°>'

    Args:
        value: The integer to encode
        eye: Add the (purely decorative) eye glyph

    Returns:
        The fysh literal text
    """
    if value < 0:
        zero, one = LEFT_DIGITS
        scales = format(-value, "b").replace("0", zero).replace("1", one)
        head = LEFT_HEADER + (CANONICAL_EYE if eye else "")
        return f"{head}{scales}{LEFT_TRAILER}"

    zero, one = RIGHT_DIGITS
    scales = format(value, "b").replace("0", zero).replace("1", one)
    tail = (CANONICAL_EYE if eye else "") + RIGHT_TRAILER
    return f"{RIGHT_HEADER}{scales}{tail}"


def keyword_glyph(marker: str) -> Optional[str]:
    """Return the keyword fysh for an editor marker ('^', '*', '@')."""
    return KEYWORD_MARKERS.get(marker)


def suggest_glyph(text: str) -> Optional[str]:
    """
    Decide what glyph, if any, an editor word should complete to.

    Keyword markers complete to their keyword fysh and decimal integers
    (optionally negative) complete to the equivalent fysh literal.
    Anything else yields None.

        >>> suggest_glyph("@")
        '><(((@>'
        >>> suggest_glyph("-7")
        '<}}}><'
        >>> suggest_glyph("fysh") is None
        True
    """
    glyph = keyword_glyph(text)
    if glyph is not None:
        return glyph

    if _DECIMAL.fullmatch(text):
        return encode_number(int(text))

    return None
