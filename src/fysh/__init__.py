"""
Fysh - Scanner, Parser and Canonical Printer for the Fysh Language
=================================================================

Fysh programs are written in ASCII fish. Literals are binary numbers
drawn as scales, the direction a fysh swims decides its sign, and
keywords are fish of their own:

    >(abs) ><num>
    ><>
        ><(((^> [><num> o~ ><)))>]
        ><>
            <~ ><num> ~
        <><
        ><(((*>
        ><>
            <~ <num>< ~
        <><
    <><

This package turns such text into an abstract syntax tree and renders
the tree back as normalized, C-like text:

    sub abs(num) {
    if ((num > 0)) {
    return num;
    } else {
    return (-num);
    }
    }

Main Components
---------------
- **lexer**: glyph scanner (FyshLexer)
- **parser**: recursive descent parser (FyshParser)
- **ast**: tree node dataclasses and ASTVisitor
- **printer**: canonical renderer and debug tree printer
- **glyphs**: glyph tables and the integer-to-fysh encoder
- **frontend**: the whole pipeline behind FyshFrontend

Quick Start
-----------
    >>> from fysh import parse, render
    >>> render(parse("<fysh>< = ><(({o> ~"))
    'fysh = (-1);'

Or use the command-line tool:
    $ fyshc abs.fysh
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from fysh.errors import (
    SourceLocation,
    FyshError,
    LexicalError,
    InvalidGlyphError,
    MalformedDigitRunError,
    UnterminatedFyshError,
    UnterminatedCommentError,
    FyshSyntaxError,
    UnexpectedTokenError,
    MissingTokenError,
    NestingTooDeepError,
)
from fysh.lexer import FyshLexer, FyshToken, FyshTokenType, Facing, scan
from fysh.parser import FyshParser, parse_source
from fysh.printer import CanonicalPrinter, TreePrinter, render
from fysh.glyphs import encode_number, keyword_glyph, suggest_glyph
from fysh.frontend import FrontendOptions, FrontendResult, FyshFrontend, parse

__all__ = [
    # Version
    "__version__",
    # Entry points
    "parse",
    "render",
    "scan",
    "parse_source",
    # Pipeline
    "FyshFrontend",
    "FrontendOptions",
    "FrontendResult",
    "FyshLexer",
    "FyshToken",
    "FyshTokenType",
    "Facing",
    "FyshParser",
    "CanonicalPrinter",
    "TreePrinter",
    # Glyphs
    "encode_number",
    "keyword_glyph",
    "suggest_glyph",
    # Errors
    "SourceLocation",
    "FyshError",
    "LexicalError",
    "InvalidGlyphError",
    "MalformedDigitRunError",
    "UnterminatedFyshError",
    "UnterminatedCommentError",
    "FyshSyntaxError",
    "UnexpectedTokenError",
    "MissingTokenError",
    "NestingTooDeepError",
]
