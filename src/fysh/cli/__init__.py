"""
Fysh Command-Line Interface
===========================

This package provides the command-line tool for the Fysh front end:

- **fyshc**: scan, parse and render Fysh source

The tool is a Click application; exit codes are shared through
fysh.cli.errors.
"""

__all__ = ["fyshc"]
