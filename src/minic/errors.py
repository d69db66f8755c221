"""
minic Error Hierarchy
=====================

This module defines the exception hierarchy for the minic front end.
All exceptions inherit from MiniCError, allowing callers to catch all
front-end errors with a single except clause if desired.

Exception Hierarchy
-------------------
MiniCError (base)
├── FrontEndError - errors tied to a location in the source text
│   └── ParseError - grammar violation found by the parser
├── StageError - a downstream stage failed while consuming the AST
└── CompilationError - aggregate report raised in strict mode

The lexer and parser never let these escape: the lexer turns bad input
into UNDEFINED tokens, and the parser turns every ParseError into an
ErrorNode in the tree. The exceptions exist so that diagnostics can be
collected, formatted and, when a caller asks for it, raised.

Error Message Format
--------------------
    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import List, Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class MiniCError(Exception):
    """
    Base exception for all minic errors.

        try:
            result = analyze(source, strict=True)
        except MiniCError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A location in source code for error reporting.

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
# Located Errors
# =============================================================================

class FrontEndError(MiniCError):
    """
    Error anchored to a place in the source text.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        hint: A suggestion for fixing the error
        source_line: The actual source text at the error location
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

            prog.c:1:10: error: Expected '(' after function name
                int main {
                         ^
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


class ParseError(FrontEndError):
    """
    Grammar violation detected by the parser.

    Raised by the parser's token-expectation helpers and caught by the
    grammar rule that owns the construct; the rule then hands back an
    ErrorNode carrying the same message. The message text is part of
    the output contract, so it is kept free of location prefixes.
    """
    pass


# =============================================================================
# Pipeline Errors
# =============================================================================

class StageError(MiniCError):
    """
    A downstream stage raised while consuming the AST.

    Attributes:
        stage: Name the stage was registered under
        cause: The original exception
    """

    def __init__(self, stage: str, cause: Exception):
        self.stage = stage
        self.cause = cause
        super().__init__(f"stage '{stage}' failed: {cause}")


class CompilationError(MiniCError):
    """
    Aggregate error containing a pre-formatted diagnostic report.

    Raised by the front end in strict mode when the tree contains
    ErrorNodes. The message is already a report from
    DiagnosticCollector and is passed through unchanged.
    """

    def __init__(self, report: str, errors: Optional[List[ParseError]] = None):
        self.errors = list(errors or [])
        super().__init__(report)


# =============================================================================
# Diagnostic Collection
# =============================================================================

class DiagnosticCollector:
    """
    Collects errors and warnings for batch reporting.

    Example:
        collector = DiagnosticCollector(max_errors=100)
        collector.add(ParseError("Expected function name", location))
        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self, max_errors: int = 100):
        self.errors: List[FrontEndError] = []
        self.warnings: List[str] = []
        self.max_errors = max_errors

    def add(self, error: FrontEndError) -> None:
        """Add an error to the collection (ignored once max_errors is hit)."""
        if not self.should_stop():
            self.errors.append(error)

    def add_warning(self, message: str, location: Optional[SourceLocation] = None) -> None:
        """Add a warning message."""
        if location:
            self.warnings.append(f"{location}: warning: {message}")
        else:
            self.warnings.append(f"warning: {message}")

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def should_stop(self) -> bool:
        """Return True if max_errors has been reached."""
        return len(self.errors) >= self.max_errors

    def error_count(self) -> int:
        return len(self.errors)

    def warning_count(self) -> int:
        return len(self.warnings)

    def report(self) -> str:
        """Format all errors and warnings for display."""
        lines = []

        for error in self.errors:
            lines.append(str(error))
            lines.append("")

        for warning in self.warnings:
            lines.append(warning)

        error_word = "error" if len(self.errors) == 1 else "errors"
        warning_word = "warning" if len(self.warnings) == 1 else "warnings"
        lines.append(
            f"\n{len(self.errors)} {error_word}, {len(self.warnings)} {warning_word}"
        )

        return "\n".join(lines)

    def clear(self) -> None:
        self.errors.clear()
        self.warnings.clear()
