"""
Fysh Front End
==============

This module provides the main programmatic interface to the Fysh front
end. It runs the whole pipeline in one call:

    Source → Lex → Parse → Render → Canonical text

Usage
-----
Command line:
    $ fyshc blink.fysh

Programmatic:
    >>> from fysh import parse, render
    >>> render(parse("><fysh> <3 ><{({o> ~"))
    '(fysh * 5);'

The front end is all-or-nothing: a failed run raises exactly one
FyshError for the earliest problem in the source and produces no result.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from fysh.ast import ProgramNode
from fysh.lexer import FyshLexer, FyshToken
from fysh.parser import FyshParser, parse_source
from fysh.printer import render

logger = logging.getLogger(__name__)


@dataclass
class FrontendOptions:
    """
    Front-end configuration options.

    Attributes:
        filename: Name used in error locations for source given as text
        keep_tokens: Keep the scanned token list on the result
    """
    filename: str = "<input>"
    keep_tokens: bool = False


class FyshFrontend:
    """
    Scanner, parser and canonical printer behind one interface.

    Example:
        frontend = FyshFrontend()
        result = frontend.process_file("abs.fysh")
        print(result.canonical)

    Attributes:
        options: Front-end configuration options
    """

    def __init__(self, options: Optional[FrontendOptions] = None):
        """
        Initialize the front end.

        Args:
            options: Configuration (uses defaults if None)
        """
        self.options = options or FrontendOptions()

    def process_source(self, source: str, filename: Optional[str] = None) -> "FrontendResult":
        """
        Scan, parse and render Fysh source text.

        Args:
            source: Fysh source code string
            filename: Name for error messages (defaults to options.filename)

        Returns:
            FrontendResult with the tree and its canonical rendering

        Raises:
            LexicalError: At the first unrecognised glyph sequence
            FyshSyntaxError: At the first structural violation
        """
        filename = filename or self.options.filename

        program, tokens = self._parse(source, filename)
        canonical = render(program)

        logger.debug(
            f"{filename}: {len(tokens)} tokens, {len(program.body)} top-level items"
        )

        return FrontendResult(
            filename=filename,
            program=program,
            canonical=canonical,
            token_count=len(tokens),
            tokens=tokens if self.options.keep_tokens else [],
        )

    def process_file(self, filepath: str) -> "FrontendResult":
        """
        Process a Fysh source file.

        Args:
            filepath: Path to the source file (read as UTF-8)

        Raises:
            FileNotFoundError: If the source file does not exist
            FyshError: If the source does not parse
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        source = path.read_text(encoding="utf-8")
        return self.process_source(source, str(filepath))

    def _parse(self, source: str, filename: str) -> tuple[ProgramNode, list[FyshToken]]:
        """Scan and parse source; return the tree and every token scanned."""
        lexer = FyshLexer(source, filename)
        parser = FyshParser(lexer.tokenize(), filename, source.splitlines())
        program = parser.parse()
        return program, parser.tokens


@dataclass
class FrontendResult:
    """
    Result of a front-end run.

    Attributes:
        filename: Source filename
        program: The parsed tree
        canonical: Canonical rendering of the tree
        token_count: Number of tokens scanned, including EOF
        tokens: The scanned tokens (empty unless keep_tokens was set)
    """
    filename: str
    program: ProgramNode
    canonical: str
    token_count: int = 0
    tokens: list[FyshToken] = field(default_factory=list)


# =============================================================================
# Convenience Functions
# =============================================================================

def parse(source: str, filename: str = "<input>") -> ProgramNode:
    """
    Parse Fysh source into a ProgramNode.

    Raises:
        LexicalError: At the first unrecognised glyph sequence
        FyshSyntaxError: At the first structural violation
    """
    return parse_source(source, filename)
