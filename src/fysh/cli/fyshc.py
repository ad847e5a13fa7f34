"""
fyshc - Fysh Front-End Command-Line Interface
=============================================

This module implements the command-line interface for the Fysh front
end. It reads a Fysh program, parses it and prints the canonical
rendering of its syntax tree.

Usage Examples
--------------
Canonical rendering:
    $ fyshc abs.fysh

From standard input:
    $ cat abs.fysh | fyshc

Debug views:
    $ fyshc --tree abs.fysh
    $ fyshc --tokens abs.fysh

Write to a file:
    $ fyshc abs.fysh -o abs.txt
"""

import logging
from pathlib import Path
from typing import Optional, TextIO

import click

from fysh import __version__
from fysh.cli.errors import handle_cli_exception
from fysh.frontend import FyshFrontend, FrontendOptions
from fysh.printer import TreePrinter

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.File("r", encoding="utf-8"),
    default="-",
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write output to a file instead of standard output",
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print the token stream, one token per line",
)
@click.option(
    "--tree",
    is_flag=True,
    help="Print the indented syntax tree (for debugging)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="fyshc")
def main(
    input_file: TextIO,
    output: Optional[Path],
    tokens: bool,
    tree: bool,
    verbose: bool,
) -> None:
    """
    Parse a Fysh program and print its canonical form.

    INPUT_FILE is the Fysh source file; omit it or pass '-' to read
    standard input.

    \b
    Examples:
        fyshc blink.fysh              # Canonical rendering
        fyshc --tree blink.fysh       # Indented syntax tree
        fyshc --tokens blink.fysh     # Token stream
        fyshc blink.fysh -o out.txt   # Write to file
    """
    setup_logging(verbose)

    try:
        source = input_file.read()
        filename = getattr(input_file, "name", "<stdin>")

        frontend = FyshFrontend(FrontendOptions(filename=filename, keep_tokens=tokens))
        result = frontend.process_source(source)

        logger.info(
            f"Parsed {len(result.program.body)} top-level items "
            f"({result.token_count} tokens) from {filename}"
        )

        if tokens:
            text = "\n".join(repr(token) for token in result.tokens)
        elif tree:
            text = TreePrinter().print(result.program)
        else:
            text = result.canonical

        if output is not None:
            output.write_text(text + "\n", encoding="utf-8")
            logger.info(f"Wrote {output}")
        else:
            click.echo(text)

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
