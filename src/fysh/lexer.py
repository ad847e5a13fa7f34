"""
Fysh Lexer (Scanner)
====================

This module converts Fysh source text into a stream of tokens for the
parser. Fysh has almost no conventional punctuation: literals, names and
most keywords are fish whose facing direction matters.

Token Categories
----------------
- Fysh: literals (><{({o>), names (><fysh>), negated forms (<fysh><)
- Steps: increment (>><fysh>) and decrement (<fysh><<)
- Keywords: block open/close (><> <><), if/else/while (><(((^> ...),
  break (><\\/> or <\\/><), return (<~), subroutine header (>(name))
- Operators: <3 ♡ </3 💔 | ^ o~ ~o o~≈ ~o≈ ≈≈ ~≈ ! = ~
- Delimiters: ( ) [ ] -
- Opaque glyphs: (+o o+) and fysh whose scales are neither digits nor a
  name (><###>), kept verbatim

Disambiguation
--------------
Everything starting with '>' or '<' is routed through a single fysh
scanner. Fixed keyword fish are tried first, so an empty fysh is always
a keyword and never an empty literal. Otherwise the first scale decides:

| First scale      | Result          |
|------------------|-----------------|
| ( ) { }          | integer literal |
| letter or _      | name            |
| anything else    | opaque literal  |

A run of '!' is split greedily into pairs: each '!!' becomes a logical
not, a leftover single '!' becomes a bitwise not. The parser never sees
the run itself.

Comments
--------
- Line: ><//> to end of line
- Block: ></*> ... <*/><

Example Usage
-------------
>>> from fysh.lexer import FyshLexer
>>> for token in FyshLexer("><fysh> <3 ><{({o> ~").tokenize():
...     print(token)
Token(IDENTIFIER, 'fysh', 1:1)
Token(MULTIPLY, '<3', 1:9)
Token(NUMBER, 5, 1:12)
Token(TERMINATOR, '~', 1:20)
Token(EOF, 1:21)
"""

import logging
import string
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional

from fysh import glyphs
from fysh.errors import (
    SourceLocation,
    InvalidGlyphError,
    MalformedDigitRunError,
    UnterminatedFyshError,
    UnterminatedCommentError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Token Type Enumeration
# =============================================================================

class FyshTokenType(Enum):
    """Token types for the Fysh language."""

    # === Structural ===
    EOF = auto()

    # === Fysh ===
    NUMBER = auto()           # ><{({o>  <{{{><
    IDENTIFIER = auto()       # ><fysh>  <fysh><
    OPAQUE_LITERAL = auto()   # ><###>
    INCREMENT = auto()        # >><fysh>
    DECREMENT = auto()        # <fysh><<
    SUB = auto()              # >(name)  (name)<

    # === Keywords ===
    BLOCK_OPEN = auto()       # ><>
    BLOCK_CLOSE = auto()      # <><
    IF = auto()               # ><(((^>
    ELSE = auto()             # ><(((*>
    WHILE = auto()            # ><(((@>
    BREAK = auto()            # ><\/>  <\/><
    RETURN = auto()           # <~

    # === Operators ===
    MULTIPLY = auto()         # <3 ♡
    DIVIDE = auto()           # </3 💔
    PIPE = auto()             # |
    CARET = auto()            # ^
    GT = auto()               # o~
    LT = auto()               # ~o
    GE = auto()               # o~≈
    LE = auto()               # ~o≈
    EQ = auto()               # ≈≈
    NE = auto()               # ~≈
    LOGICAL_NOT = auto()      # !!
    BITWISE_NOT = auto()      # !
    OPAQUE_OPERATOR = auto()  # (+o  o+)
    ASSIGN = auto()           # =
    TERMINATOR = auto()       # ~

    # === Delimiters ===
    LPAREN = auto()           # (
    RPAREN = auto()           # )
    LBRACKET = auto()         # [
    RBRACKET = auto()         # ]
    SEPARATOR = auto()        # -


class Facing(Enum):
    """Swimming direction of a fysh-shaped token."""
    RIGHT = auto()
    LEFT = auto()


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class FyshToken:
    """
    Represents a single token from Fysh source.

    Attributes:
        type: The FyshTokenType classification
        value: Decoded value: signed int for literals, the name for
            names/steps/subroutine headers, glyph text for opaque forms
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
        text: The raw source text of the token
        facing: Swimming direction, for fysh-shaped tokens only
    """
    type: FyshTokenType
    value: str | int | None
    line: int
    column: int
    filename: str
    text: str = ""
    facing: Optional[Facing] = None

    def __repr__(self) -> str:
        """Format token for debugging output."""
        if self.value is not None:
            if isinstance(self.value, int):
                return f"Token({self.type.name}, {self.value}, {self.line}:{self.column})"
            return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    @property
    def is_left_facing(self) -> bool:
        """True for fysh swimming left (negation where it has meaning)."""
        return self.facing is Facing.LEFT

    def describe(self) -> str:
        """Short human-readable form for error messages."""
        if self.type == FyshTokenType.EOF:
            return "end of input"
        return self.text or self.type.name.lower()


# =============================================================================
# Lexer Implementation
# =============================================================================

class FyshLexer:
    """
    Tokenizes Fysh source code.

    Scanning is maximal munch: the longest glyph cluster that matches a
    rule wins. The first unrecognised sequence raises a LexicalError
    carrying its exact location; there is no recovery.

    Usage:
        lexer = FyshLexer(source_text, filename)
        tokens = list(lexer.tokenize())

    The token stream is lazy. A lexer holds only its cursor, so scanning
    again means constructing a new lexer over the same text.

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    NAME_START = string.ascii_letters + "_"
    NAME_CHARS = string.ascii_letters + string.digits + "_"

    WHITESPACE = " \t\r\n\f\v"

    # Fysh recognised before the digit/name/opaque split.
    RIGHT_KEYWORDS = (
        (glyphs.IF_GLYPH, FyshTokenType.IF),
        (glyphs.ELSE_GLYPH, FyshTokenType.ELSE),
        (glyphs.WHILE_GLYPH, FyshTokenType.WHILE),
        (glyphs.BREAK_RIGHT, FyshTokenType.BREAK),
        (glyphs.BLOCK_OPEN, FyshTokenType.BLOCK_OPEN),
    )

    LEFT_KEYWORDS = (
        ("</3", FyshTokenType.DIVIDE),
        ("<3", FyshTokenType.MULTIPLY),
        (glyphs.RETURN_GLYPH, FyshTokenType.RETURN),
        (glyphs.BREAK_LEFT, FyshTokenType.BREAK),
        (glyphs.BLOCK_CLOSE, FyshTokenType.BLOCK_CLOSE),
    )

    # Longest first so that maximal munch falls out of a linear scan.
    GLYPHS = (
        ("o~≈", FyshTokenType.GE),
        ("~o≈", FyshTokenType.LE),
        (glyphs.OPAQUE_SUFFIX, FyshTokenType.OPAQUE_OPERATOR),
        ("o~", FyshTokenType.GT),
        ("~o", FyshTokenType.LT),
        ("~≈", FyshTokenType.NE),
        ("≈≈", FyshTokenType.EQ),
        ("~", FyshTokenType.TERMINATOR),
        ("=", FyshTokenType.ASSIGN),
        ("|", FyshTokenType.PIPE),
        ("^", FyshTokenType.CARET),
        ("-", FyshTokenType.SEPARATOR),
        (")", FyshTokenType.RPAREN),
        ("[", FyshTokenType.LBRACKET),
        ("]", FyshTokenType.RBRACKET),
        ("♡", FyshTokenType.MULTIPLY),
        ("💔", FyshTokenType.DIVIDE),
    )

    def __init__(
        self,
        source: str,
        filename: str = "<input>",
        line_number: int = 1,
    ):
        """
        Initialize the lexer with source code.

        Args:
            source: The Fysh source code to tokenize
            filename: Name of the source file (for error messages)
            line_number: Starting line number
        """
        self.source = source
        self.filename = filename

        self._pos = 0
        self._line = line_number
        self._column = 1
        self._line_start_pos = 0

        # Start of the token being scanned
        self._start_pos = 0
        self._start_line = line_number
        self._start_column = 1

    def tokenize(self) -> Iterator[FyshToken]:
        """
        Generate tokens from the source code.

        Yields:
            FyshToken objects, always ending with an EOF token

        Raises:
            LexicalError: If an unrecognised glyph sequence is encountered
        """
        count = 0
        while not self._at_end():
            self._skip_whitespace_and_comments()

            if self._at_end():
                break

            if self._peek() == "!":
                for token in self._scan_bang_run():
                    count += 1
                    yield token
                continue

            count += 1
            yield self._scan_token()

        self._mark_start()
        logger.debug(f"Scanned {count} tokens from {self.filename}")
        yield self._make_token(FyshTokenType.EOF, None)

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        """Check if we've reached the end of source."""
        return self._pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """
        Look at character at current position + offset without advancing.

        Returns empty string if past end of source.
        """
        pos = self._pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """
        Consume and return the current character, advancing position.

        Updates line and column tracking for error reporting.
        """
        if self._at_end():
            return ""
        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
            self._line_start_pos = self._pos
        else:
            self._column += 1

        return char

    def _match(self, expected: str) -> bool:
        """Consume next character if it matches expected."""
        if self._peek() == expected:
            self._advance()
            return True
        return False

    def _starts_with(self, text: str) -> bool:
        """Check whether the source continues with text at the cursor."""
        return self.source.startswith(text, self._pos)

    def _consume(self, text: str) -> None:
        """Advance past text, which the caller has already matched."""
        for _ in text:
            self._advance()

    def _at_whitespace(self) -> bool:
        char = self._peek()
        return char == "" or char in self.WHITESPACE

    # =========================================================================
    # Token Creation
    # =========================================================================

    def _mark_start(self) -> None:
        """Remember where the token about to be scanned begins."""
        self._start_pos = self._pos
        self._start_line = self._line
        self._start_column = self._column

    def _make_token(
        self,
        token_type: FyshTokenType,
        value: str | int | None,
        facing: Optional[Facing] = None,
    ) -> FyshToken:
        """Create a token spanning from the marked start to the cursor."""
        return FyshToken(
            type=token_type,
            value=value,
            line=self._start_line,
            column=self._start_column,
            filename=self.filename,
            text=self.source[self._start_pos:self._pos],
            facing=facing,
        )

    def _start_location(self) -> SourceLocation:
        return SourceLocation(self.filename, self._start_line, self._start_column)

    def _current_location(self) -> SourceLocation:
        return SourceLocation(self.filename, self._line, self._column)

    def _get_current_line(self) -> str:
        """Get the current line of source text for error reporting."""
        line_end = self.source.find("\n", self._line_start_pos)
        if line_end == -1:
            line_end = len(self.source)
        return self.source[self._line_start_pos:line_end]

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def _skip_whitespace_and_comments(self) -> None:
        """Skip all whitespace and comments."""
        while not self._at_end():
            if self._peek() in self.WHITESPACE:
                self._advance()
                continue

            if self._starts_with(glyphs.LINE_COMMENT):
                while not self._at_end() and self._peek() != "\n":
                    self._advance()
                continue

            if self._starts_with(glyphs.BLOCK_COMMENT_OPEN):
                self._skip_block_comment()
                continue

            break

    def _skip_block_comment(self) -> None:
        """
        Skip a block comment (></*> ... <*/><).

        Raises:
            UnterminatedCommentError: If the closer never appears
        """
        self._mark_start()
        source_line = self._get_current_line()
        self._consume(glyphs.BLOCK_COMMENT_OPEN)

        while not self._at_end():
            if self._starts_with(glyphs.BLOCK_COMMENT_CLOSE):
                self._consume(glyphs.BLOCK_COMMENT_CLOSE)
                return
            self._advance()

        raise UnterminatedCommentError(self._start_location(), source_line)

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> FyshToken:
        """Scan the next (non-'!') token from source."""
        self._mark_start()
        char = self._peek()

        if char == ">":
            return self._scan_right_angle()

        if char == "<":
            return self._scan_left_angle()

        if char == "(":
            return self._scan_open_paren()

        for glyph, token_type in self.GLYPHS:
            if self._starts_with(glyph):
                self._consume(glyph)
                return self._make_token(token_type, glyph)

        raise InvalidGlyphError(
            char,
            self._start_location(),
            self._get_current_line(),
        )

    def _scan_bang_run(self) -> Iterator[FyshToken]:
        """
        Split a run of '!' into toggle operators.

        Pairs are taken greedily from the left, so '!!!' becomes a logical
        not followed by a bitwise not; applied innermost-first that reads
        !(~x).
        """
        while self._peek() == "!":
            self._mark_start()
            self._advance()
            if self._match("!"):
                yield self._make_token(FyshTokenType.LOGICAL_NOT, "!!")
            else:
                yield self._make_token(FyshTokenType.BITWISE_NOT, "!")

    def _scan_open_paren(self) -> FyshToken:
        """
        Scan '(' which opens a group, a left-facing callee or '(+o'.

            (+o            opaque operator
            (name)<        left-facing callee
            (              anything else
        """
        if self._starts_with(glyphs.OPAQUE_PREFIX):
            self._consume(glyphs.OPAQUE_PREFIX)
            return self._make_token(FyshTokenType.OPAQUE_OPERATOR, glyphs.OPAQUE_PREFIX)

        name_end = self._name_end(self._pos + 1)
        if name_end > self._pos + 1 and self.source.startswith(")<", name_end):
            self._advance()
            name = self._scan_name()
            self._consume(")<")
            return self._make_token(FyshTokenType.SUB, name, Facing.LEFT)

        self._advance()
        return self._make_token(FyshTokenType.LPAREN, "(")

    def _scan_right_angle(self) -> FyshToken:
        """Scan a token starting with '>'."""
        if self._starts_with(">><"):
            self._advance()
            inner = self._scan_right_fysh()
            if inner.type != FyshTokenType.IDENTIFIER:
                raise InvalidGlyphError(
                    ">>",
                    self._start_location(),
                    self._get_current_line(),
                    hint="only a named fysh can be incremented, e.g. >><fysh>",
                )
            return self._make_token(FyshTokenType.INCREMENT, inner.value, Facing.RIGHT)

        if self._starts_with(glyphs.RIGHT_HEADER):
            return self._scan_right_fysh()

        if self._starts_with(">("):
            self._consume(">(")
            name = self._scan_required_name()
            if not self._match(")"):
                self._raise_unterminated(")")
            return self._make_token(FyshTokenType.SUB, name, Facing.RIGHT)

        raise InvalidGlyphError(
            ">",
            self._start_location(),
            self._get_current_line(),
        )

    def _scan_left_angle(self) -> FyshToken:
        """Scan a token starting with '<'."""
        for glyph, token_type in self.LEFT_KEYWORDS:
            if self._starts_with(glyph):
                self._consume(glyph)
                facing = Facing.LEFT if token_type == FyshTokenType.BREAK else None
                return self._make_token(token_type, glyph, facing)

        return self._scan_left_fysh()

    # =========================================================================
    # Fysh Scanning
    # =========================================================================

    def _scan_right_fysh(self) -> FyshToken:
        """
        Scan a right-facing fysh: '><' scales '>'.

        Keyword fysh are matched whole before the scales are inspected.
        """
        for glyph, token_type in self.RIGHT_KEYWORDS:
            if self._starts_with(glyph):
                self._consume(glyph)
                return self._make_token(token_type, glyph, Facing.RIGHT)

        self._consume(glyphs.RIGHT_HEADER)
        char = self._peek()

        if glyphs.is_digit_glyph(char):
            bits = self._scan_digit_run()
            if self._peek() and self._peek() in glyphs.EYES:
                self._advance()
            self._expect_digit_trailer(glyphs.RIGHT_TRAILER)
            return self._make_token(FyshTokenType.NUMBER, int(bits, 2), Facing.RIGHT)

        if char and char in self.NAME_START:
            name = self._scan_name()
            self._expect_trailer(glyphs.RIGHT_TRAILER)
            return self._make_token(FyshTokenType.IDENTIFIER, name, Facing.RIGHT)

        return self._scan_opaque(glyphs.RIGHT_TRAILER, Facing.RIGHT)

    def _scan_left_fysh(self) -> FyshToken:
        """
        Scan a left-facing fysh: '<' scales '><'.

        A left-facing literal is negative. A left-facing name followed
        directly by another '<' is a decrement.
        """
        self._consume(glyphs.LEFT_HEADER)
        char = self._peek()

        if char and char in glyphs.EYES and glyphs.is_digit_glyph(self._peek(1)):
            self._advance()
            char = self._peek()

        if glyphs.is_digit_glyph(char):
            bits = self._scan_digit_run()
            self._expect_digit_trailer(glyphs.LEFT_TRAILER)
            return self._make_token(FyshTokenType.NUMBER, -int(bits, 2), Facing.LEFT)

        if char and char in self.NAME_START:
            name = self._scan_name()
            self._expect_trailer(glyphs.LEFT_TRAILER)
            if self._match("<"):
                return self._make_token(FyshTokenType.DECREMENT, name, Facing.LEFT)
            return self._make_token(FyshTokenType.IDENTIFIER, name, Facing.LEFT)

        return self._scan_opaque(glyphs.LEFT_TRAILER, Facing.LEFT)

    def _scan_digit_run(self) -> str:
        """Consume scales while they are digit glyphs; return the bit string."""
        bits = []
        while glyphs.is_digit_glyph(self._peek()):
            bits.append(glyphs.DIGIT_VALUES[self._advance()])
        return "".join(bits)

    def _expect_digit_trailer(self, trailer: str) -> None:
        """Close a literal; any other scale inside the run is malformed."""
        if self._starts_with(trailer):
            self._consume(trailer)
            return

        if self._at_whitespace():
            self._raise_unterminated(trailer)

        raise MalformedDigitRunError(
            self._peek(),
            self._current_location(),
            self._get_current_line(),
        )

    def _scan_opaque(self, trailer: str, facing: Facing) -> FyshToken:
        """
        Scan a fysh whose scales are neither a digit run nor a name.

        The whole fysh is kept verbatim as the token value.
        """
        content_start = self._pos
        while not self._at_whitespace() and self._peek() not in "<>":
            self._advance()

        if self._pos == content_start:
            if self._at_whitespace():
                self._raise_unterminated(trailer)
            raise InvalidGlyphError(
                self.source[self._start_pos:self._pos + 1],
                self._start_location(),
                self._get_current_line(),
            )

        self._expect_trailer(trailer)
        text = self.source[self._start_pos:self._pos]
        return self._make_token(FyshTokenType.OPAQUE_LITERAL, text, facing)

    def _expect_trailer(self, trailer: str) -> None:
        if self._starts_with(trailer):
            self._consume(trailer)
            return

        if self._at_whitespace():
            self._raise_unterminated(trailer)

        raise InvalidGlyphError(
            self._peek(),
            self._current_location(),
            self._get_current_line(),
            hint="fysh names use letters, digits and '_'",
        )

    def _raise_unterminated(self, trailer: str) -> None:
        raise UnterminatedFyshError(
            trailer,
            self._start_location(),
            self._get_current_line(),
        )

    # =========================================================================
    # Names
    # =========================================================================

    def _name_end(self, pos: int) -> int:
        """Index just past the name starting at pos (pos if there is none)."""
        if pos >= len(self.source) or self.source[pos] not in self.NAME_START:
            return pos
        end = pos + 1
        while end < len(self.source) and self.source[end] in self.NAME_CHARS:
            end += 1
        return end

    def _scan_name(self) -> str:
        """Scan a name; the caller has checked the first character."""
        chars = []
        while self._peek() and self._peek() in self.NAME_CHARS:
            chars.append(self._advance())
        return "".join(chars)

    def _scan_required_name(self) -> str:
        char = self._peek()
        if not char or char not in self.NAME_START:
            if self._at_whitespace():
                self._raise_unterminated(")")
            raise InvalidGlyphError(
                char,
                self._current_location(),
                self._get_current_line(),
                hint="subroutine names start with a letter or '_'",
            )
        return self._scan_name()


# =============================================================================
# Convenience Functions
# =============================================================================

def scan(source: str, filename: str = "<input>") -> list[FyshToken]:
    """
    Tokenize Fysh source into a list ending with an EOF token.

    Raises:
        LexicalError: At the first unrecognised glyph sequence
    """
    return list(FyshLexer(source, filename).tokenize())
