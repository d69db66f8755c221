"""
minic Command-Line Interface
============================

This package provides the ``minic`` command-line tool:

- **minic tokens**: list the token stream of a source file
- **minic ast**: print the syntax tree (text or JSON)
- **minic check**: report diagnostics, non-zero exit on errors

The tool is implemented as a Click group with shared options and
common error reporting.
"""

__all__ = ["minic"]
