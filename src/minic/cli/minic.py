"""
minic - Front End Command-Line Interface
========================================

This module implements the command-line interface for the minic front
end. It exposes the lexer and parser for inspection from the terminal.

Usage Examples
--------------
List tokens:
    $ minic tokens hello.c

Tokens as JSON, block comments in source order:
    $ minic tokens --format json --source-order-comments hello.c

Print the syntax tree:
    $ minic ast hello.c
    $ minic ast --format json hello.c

Check for syntax errors (exit code 1 if any):
    $ minic check hello.c

Read from stdin:
    $ echo 'int main() { return 0; }' | minic ast -

Exit Codes
----------
0 - Success
1 - Source has syntax errors
2 - Invalid arguments or missing file
3 - Internal error
"""

import json
import logging
import sys
from typing import IO

import click

from minic import __version__
from minic.ast import format_ast, to_dict
from minic.cli.errors import ExitCode, handle_cli_exception
from minic.frontend import FrontEnd, FrontEndOptions, FrontEndResult

logger = logging.getLogger(__name__)


# =============================================================================
# CLI Context and Utilities
# =============================================================================

class Context:
    """
    Shared context for CLI commands.

    Stores options common to every subcommand.
    """

    def __init__(self) -> None:
        self.verbose: bool = False

    def setup_logging(self) -> None:
        """Configure logging based on verbosity."""
        level = logging.DEBUG if self.verbose else logging.WARNING
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(name)s: %(message)s" if self.verbose else "%(message)s",
        )


pass_context = click.make_pass_decorator(Context, ensure=True)

source_argument = click.argument("source", type=click.File("r", encoding="utf-8"))

source_order_option = click.option(
    "--source-order-comments",
    is_flag=True,
    help="Emit block comments in source order instead of ahead of all tokens",
)


def run_front_end(source: IO[str], source_order_comments: bool = False) -> FrontEndResult:
    """Read an opened source file and run the lexer and parser over it."""
    options = FrontEndOptions(
        hoist_block_comments=not source_order_comments,
        filename=source.name,
    )
    return FrontEnd(options).run(source.read())


def format_token_table(result: FrontEndResult) -> str:
    """Format tokens as an aligned LINE:COL KIND LEXEME table."""
    lines = [f"{'POS':<10} {'KIND':<15} LEXEME"]
    for token in result.tokens:
        position = f"{token.line}:{token.column}"
        lines.append(f"{position:<10} {token.kind.value:<15} {token.lexeme}")
    return "\n".join(lines)


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable debug logging",
)
@click.version_option(version=__version__, prog_name="minic")
@pass_context
def main(ctx: Context, verbose: bool) -> None:
    """
    Inspect minic source: tokens, syntax tree and diagnostics.

    SOURCE is a source file path, or - for stdin.
    """
    ctx.verbose = verbose
    ctx.setup_logging()


# =============================================================================
# Tokens Command
# =============================================================================

@main.command()
@source_argument
@click.option(
    "-f", "--format", "output_format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format (default: table)",
)
@source_order_option
@pass_context
def tokens(ctx: Context, source: IO[str], output_format: str, source_order_comments: bool) -> None:
    """
    List the tokens of SOURCE.

    \b
    Example:
        minic tokens hello.c
        minic tokens -f json hello.c
    """
    try:
        result = run_front_end(source, source_order_comments)
        if output_format.lower() == "json":
            payload = [
                {
                    "type": token.kind.value,
                    "value": token.lexeme,
                    "line": token.line,
                    "column": token.column,
                }
                for token in result.tokens
            ]
            click.echo(json.dumps(payload, indent=2))
        else:
            click.echo(format_token_table(result))
    except Exception as e:
        handle_cli_exception(e, ctx.verbose)


# =============================================================================
# AST Command
# =============================================================================

@main.command()
@source_argument
@click.option(
    "-f", "--format", "output_format",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    help="Output format (default: text)",
)
@source_order_option
@pass_context
def ast(ctx: Context, source: IO[str], output_format: str, source_order_comments: bool) -> None:
    """
    Print the syntax tree of SOURCE.

    The tree is printed even when it contains errors; error nodes show
    up in place of the constructs that could not be parsed.

    \b
    Example:
        minic ast hello.c
        minic ast -f json hello.c
    """
    try:
        result = run_front_end(source, source_order_comments)
        if output_format.lower() == "json":
            click.echo(json.dumps(to_dict(result.ast), indent=2))
        else:
            click.echo(format_ast(result.ast))
    except Exception as e:
        handle_cli_exception(e, ctx.verbose)


# =============================================================================
# Check Command
# =============================================================================

@main.command()
@source_argument
@source_order_option
@pass_context
def check(ctx: Context, source: IO[str], source_order_comments: bool) -> None:
    """
    Report syntax errors and undefined tokens in SOURCE.

    Exits with status 1 if the syntax tree contains errors. Undefined
    tokens are reported as warnings and do not fail the check.
    """
    try:
        result = run_front_end(source, source_order_comments)
    except Exception as e:
        handle_cli_exception(e, ctx.verbose)

    for warning in result.warnings:
        click.echo(warning, err=True)
    for error in result.errors:
        click.echo(str(error), err=True)

    if not result.success:
        error_word = "error" if len(result.errors) == 1 else "errors"
        click.echo(f"{result.filename}: {len(result.errors)} {error_word}", err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    click.echo(f"{result.filename}: OK ({result.token_count} tokens)")


if __name__ == "__main__":
    main()
