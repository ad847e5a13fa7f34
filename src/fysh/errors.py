"""
Fysh Error Hierarchy
====================

This module defines the exception hierarchy for the Fysh front end.
All exceptions inherit from FyshError, allowing callers to catch every
front-end failure with a single except clause if desired.

Exception Hierarchy
-------------------
FyshError (base)
├── LexicalError - the scanner could not form a token
│   ├── InvalidGlyphError - character sequence matching no glyph rule
│   ├── MalformedDigitRunError - bad glyph inside a fysh literal
│   ├── UnterminatedFyshError - fysh header without its trailer
│   └── UnterminatedCommentError - block comment without its closer
└── FyshSyntaxError - the parser met a token it could not use
    ├── UnexpectedTokenError - token cannot start/continue the construct
    └── MissingTokenError - required token (terminator, bracket) absent

A failed parse raises exactly one of these, for the earliest point of
failure. There is no recovery and no error collection.

Error Message Format
--------------------
    filename:line:column: error: description
        source_line_text
            ^
    hint: suggestion for fixing (when available)

Example:
    blink.fysh:3:12: error: unexpected token '<3'
        ><fysh> = <3 ><{> ~
                  ^
    hint: expected expression
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in Fysh source for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Base Exception Class
# =============================================================================

class FyshError(Exception):
    """
    Base exception for all Fysh front-end errors.

    Provides the common message layout: location prefix, the offending
    source line with a caret under the column, and an optional hint.

        try:
            program = parse(source)
        except FyshError as e:
            print(e)

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

            abs.fysh:4:2: error: expected '~'
                <~ ><num>
                         ^
            hint: every statement ends with the '~' terminator
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


# =============================================================================
# Lexical Errors (Scanner)
# =============================================================================

class LexicalError(FyshError):
    """
    The scanner met a character sequence it cannot turn into a token.

    Scanning stops at the first such sequence; there is no recovery.
    """
    pass


class InvalidGlyphError(LexicalError):
    """
    A character (or glyph cluster) that matches no scanning rule.

    Example:
        ><fysh> % ><{> ~     # '%' is not a Fysh glyph
    """

    def __init__(
        self,
        glyph: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        self.glyph = glyph
        super().__init__(
            f"unrecognized glyph '{glyph}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class MalformedDigitRunError(LexicalError):
    """
    A fysh literal whose scales are not all binary digit glyphs.

    The digit run between header and trailer may only contain '(' / ')'
    (zero) and '{' / '}' (one), optionally followed (right-facing) or
    preceded (left-facing) by an eye.

    Example:
        ><{(x{>              # 'x' inside a digit run
    """

    def __init__(
        self,
        glyph: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.glyph = glyph
        super().__init__(
            f"invalid glyph '{glyph}' in fysh digit run",
            location=location,
            hint="digit runs use '(' or ')' for 0 and '{' or '}' for 1",
            source_line=source_line,
        )


class UnterminatedFyshError(LexicalError):
    """
    A fysh header ('><' or '<') that never reaches its trailer.

    Example:
        ><fysh ~             # missing '>'
    """

    def __init__(
        self,
        trailer: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.trailer = trailer
        super().__init__(
            "unterminated fysh",
            location=location,
            hint=f"close the fysh with '{trailer}'",
            source_line=source_line,
        )


class UnterminatedCommentError(LexicalError):
    """Block comment opened with '></*>' but never closed with '<*/><'."""

    def __init__(
        self,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            "unterminated block comment",
            location=location,
            hint="add '<*/><' to close the comment",
            source_line=source_line,
        )


# =============================================================================
# Syntax Errors (Parser)
# =============================================================================

class FyshSyntaxError(FyshError):
    """
    The parser met a token where a specific construct was expected.

    Covers unterminated statements and blocks, unmatched brackets and
    tokens that cannot start the construct being parsed.
    """
    pass


class UnexpectedTokenError(FyshSyntaxError):
    """
    Unexpected token during parsing.

    Raised when the parser encounters a token that doesn't match
    the expected grammar rule.
    """

    def __init__(
        self,
        found: str,
        expected: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.found = found
        self.expected = expected

        hint = None
        if expected:
            hint = f"expected {expected}"

        super().__init__(
            f"unexpected token '{found}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class MissingTokenError(FyshSyntaxError):
    """
    Required token is missing.

    Raised when a required token (the '~' terminator, a closing bracket,
    a block closer) is not found where expected.
    """

    def __init__(
        self,
        expected: str,
        found: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        self.expected = expected
        self.found = found

        message = f"expected {expected}"
        if found:
            message = f"{message} before {found}"

        super().__init__(
            message,
            location=location,
            hint=hint,
            source_line=source_line,
        )


class NestingTooDeepError(FyshSyntaxError):
    """
    Brackets or groups nested deeper than the parser can follow.

    Flat operator chains of any length are fine; only nesting depth is
    bounded, by the interpreter's recursion limit.
    """

    def __init__(
        self,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            "expression nested too deeply",
            location=location,
            source_line=source_line,
        )
