"""
minic Front End Driver
======================

This module ties the lexer and parser together and hands the result to
downstream stages:

    Source → Lexer → Tokens → Parser → AST → (registered stages)

Downstream stages (semantic analysis, intermediate code, optimizer,
code generator) live outside this package. Each is a callable taking
the Program and returning whatever it produces. They run in the order
they were registered, and only when the tree contains no ErrorNode.

Usage
-----
Programmatic:
    >>> from minic.frontend import analyze
    >>> result = analyze('int main() { return 0; }')
    >>> result.success
    True

With a stage:
    >>> from minic.frontend import FrontEnd
    >>> front_end = FrontEnd()
    >>> front_end.add_stage("count", lambda program: len(program.body))
    >>> front_end.run('int main() { }').stage_results["count"]
    1

Error Handling
--------------
Lexing and parsing never raise. UNDEFINED tokens are reported as
warnings and ErrorNodes as errors on the result. With
``FrontEndOptions(strict=True)`` a tree containing errors raises
CompilationError carrying the formatted report instead.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

from minic.ast import Program, find_errors
from minic.errors import (
    CompilationError,
    DiagnosticCollector,
    ParseError,
    StageError,
)
from minic.lexer import Lexer, Token, TokenKind
from minic.parser import Parser

logger = logging.getLogger(__name__)

Stage = Callable[[Program], Any]


@dataclass
class FrontEndOptions:
    """
    Front end configuration options.

    Attributes:
        hoist_block_comments: Emit block comments ahead of all other
            tokens (the historical behaviour) instead of in source order
        max_errors: Maximum number of diagnostics to record
        strict: Raise CompilationError when the tree contains errors
        filename: Name used in diagnostics when none is given to run()
    """
    hoist_block_comments: bool = True
    max_errors: int = 100
    strict: bool = False
    filename: str = "<input>"


@dataclass
class FrontEndResult:
    """
    Result of running the front end over one source text.

    Attributes:
        filename: Source filename
        success: True if the tree has no ErrorNode
        tokens: Tokens produced by the lexer
        ast: Program produced by the parser
        errors: ParseErrors recorded by the parser
        warnings: Formatted warnings (undefined tokens)
        stage_results: Output of each downstream stage, by name
    """
    filename: str = ""
    success: bool = False
    tokens: list[Token] = field(default_factory=list)
    ast: Optional[Program] = None
    errors: list[ParseError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    stage_results: dict[str, Any] = field(default_factory=dict)

    @property
    def token_count(self) -> int:
        return len(self.tokens)


class FrontEnd:
    """
    Lexer + parser pipeline with optional downstream stages.

    Example:
        front_end = FrontEnd(FrontEndOptions(hoist_block_comments=False))
        result = front_end.run_file("prog.c")
        print(result.ast)

    Attributes:
        options: Front end configuration options
    """

    def __init__(self, options: Optional[FrontEndOptions] = None):
        self.options = options or FrontEndOptions()
        self._stages: list[tuple[str, Stage]] = []

    def add_stage(self, name: str, stage: Stage) -> None:
        """
        Register a downstream stage.

        Raises:
            ValueError: If a stage with this name is already registered
        """
        if any(existing == name for existing, _ in self._stages):
            raise ValueError(f"stage '{name}' is already registered")
        self._stages.append((name, stage))

    @property
    def stage_names(self) -> list[str]:
        return [name for name, _ in self._stages]

    def run(self, source: str, filename: Optional[str] = None) -> FrontEndResult:
        """
        Tokenize and parse source, then run the registered stages.

        Args:
            source: minic source text
            filename: Name for diagnostics (defaults to options.filename)

        Returns:
            FrontEndResult with tokens, tree and diagnostics

        Raises:
            CompilationError: In strict mode, if the tree has errors
            StageError: If a downstream stage raises
        """
        filename = filename or self.options.filename
        collector = DiagnosticCollector(self.options.max_errors)
        result = FrontEndResult(filename=filename)

        # Stage 1: Lexical analysis
        lexer = Lexer(source, filename, self.options.hoist_block_comments)
        result.tokens = lexer.tokenize()
        for token in result.tokens:
            if token.kind == TokenKind.UNDEFINED:
                collector.add_warning(f"undefined token {token.lexeme!r}", token.location(filename))

        # Stage 2: Parsing
        parser = Parser(result.tokens, filename, source.splitlines(), self.options.max_errors)
        result.ast = parser.parse()
        for error in parser.diagnostics.errors:
            collector.add(error)

        result.errors = list(collector.errors)
        result.warnings = list(collector.warnings)
        result.success = not find_errors(result.ast)

        for warning in result.warnings:
            logger.debug(warning)
        logger.info(
            f"{filename}: {result.token_count} tokens, "
            f"{len(result.ast.body)} top-level items, "
            f"{collector.error_count()} errors, {collector.warning_count()} warnings"
        )

        if not result.success:
            if self.options.strict:
                raise CompilationError(collector.report(), result.errors)
            if self._stages:
                logger.info(f"{filename}: skipping {len(self._stages)} stages, tree has errors")
            return result

        # Stage 3: Downstream collaborators
        for name, stage in self._stages:
            logger.debug(f"running stage '{name}'")
            try:
                result.stage_results[name] = stage(result.ast)
            except Exception as e:
                raise StageError(name, e) from e

        return result

    def run_file(self, filepath: str) -> FrontEndResult:
        """
        Run the front end over a source file.

        Raises:
            FileNotFoundError: If source file not found
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")
        return self.run(path.read_text(encoding="utf-8"), str(filepath))


# =============================================================================
# Convenience Functions
# =============================================================================

def analyze(source: str, filename: str = "<input>", **options: Any) -> FrontEndResult:
    """
    Run the front end over source with FrontEndOptions built from options.

    Example:
        result = analyze(source, hoist_block_comments=False, strict=True)
    """
    return FrontEnd(FrontEndOptions(filename=filename, **options)).run(source)
