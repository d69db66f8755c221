"""
minic Lexer (Tokenizer)
=======================

This module implements the lexer for the minic language, a small
C-like teaching language. It converts source text into a flat list of
tokens for the parser and for anything that wants to list them.

Token Categories
----------------
- Preprocessor: a whole ``#...`` line, captured as literal text
- Keywords: int, char, float, double, if, else, for, while, return,
  void, include, define
- Identifiers: variable and function names
- Numbers: decimal, fractional, exponent and 0x hexadecimal forms
- String literals: "double quoted" with backslash escapes
- Operators: ==, !=, <=, >=, ++, --, ->, &&, ||, + - * / % = < > & ^ | ! ~
- Separators: ; , . :
- Brackets: ( ) { }
- Comments: // line and /* block */
- Undefined: any single character nothing else accepts

Scanning Strategy
-----------------
Block comments are removed in a pre-pass over the whole text and
replaced by spaces of the same length, so every later offset still
points at the same character of the original source. The blanked text
is then scanned line by line.

Because the two passes run one after the other, block comments are by
default emitted ahead of every other token. Pass
``hoist_block_comments=False`` to get them back in source order.

The lexer never raises. Characters it cannot place become UNDEFINED
tokens, so no input character is silently dropped.

Example Usage
-------------
>>> from minic.lexer import tokenize
>>> for token in tokenize('int main() { return 0; }'):
...     print(token)
Token(KEYWORD, 'int', 1:1)
Token(IDENTIFIER, 'main', 1:5)
Token(OPEN_PAREN, '(', 1:9)
Token(CLOSE_PAREN, ')', 1:10)
Token(OPEN_BRACE, '{', 1:12)
Token(KEYWORD, 'return', 1:14)
Token(NUMBER, '0', 1:21)
Token(SEPARATOR, ';', 1:22)
Token(CLOSE_BRACE, '}', 1:24)
"""

import bisect
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Pattern

from minic.errors import SourceLocation

logger = logging.getLogger(__name__)


# =============================================================================
# Token Kind Enumeration
# =============================================================================

class TokenKind(Enum):
    """
    Token kinds for the minic language.

    The values are the names used when tokens are exported, so they
    double as the wire names for token listings.
    """

    PREPROCESSOR = "PREPROCESSOR"
    KEYWORD = "KEYWORD"
    IDENTIFIER = "IDENTIFIER"
    NUMBER = "NUMBER"
    STRING_LITERAL = "STRING_LITERAL"
    OPERATOR = "OPERATOR"
    SEPARATOR = "SEPARATOR"
    OPEN_PAREN = "OPEN_PAREN"
    CLOSE_PAREN = "CLOSE_PAREN"
    OPEN_BRACE = "OPEN_BRACE"
    CLOSE_BRACE = "CLOSE_BRACE"
    COMMENT = "COMMENT"
    UNDEFINED = "UNDEFINED"


# =============================================================================
# Vocabulary
# =============================================================================

KEYWORDS: tuple[str, ...] = (
    "int", "char", "float", "double",
    "if", "else", "for", "while", "return",
    "void", "include", "define",
)

# Keywords that name a primitive type and so start a declaration
TYPE_SPECIFIERS: frozenset[str] = frozenset({"int", "char", "float", "double", "void"})

TWO_CHAR_OPERATORS: frozenset[str] = frozenset({
    "==", "!=", "<=", ">=", "++", "--", "->", "&&", "||",
})

ONE_CHAR_OPERATORS: frozenset[str] = frozenset("-+*/%=<>&^|!~")

SEPARATORS: frozenset[str] = frozenset(";,.:")

BRACKETS: dict[str, TokenKind] = {
    "(": TokenKind.OPEN_PAREN,
    ")": TokenKind.CLOSE_PAREN,
    "{": TokenKind.OPEN_BRACE,
    "}": TokenKind.CLOSE_BRACE,
}

BLOCK_COMMENT_PATTERN = re.compile(r"/\*[\s\S]*?\*/")
STRING_PATTERN = re.compile(r'"(?:[^"\\]|\\.)*"')
WORD_PATTERN = re.compile(r"[A-Za-z0-9_]+")


# =============================================================================
# Lexeme Classification
# =============================================================================

# Ordered (kind, pattern) pairs; classify_lexeme returns the first kind
# whose pattern matches the whole lexeme. KEYWORD must stay ahead of
# IDENTIFIER: every reserved word also matches the identifier pattern.
LEXEME_CLASSES: list[tuple[TokenKind, Pattern[str]]] = [
    (TokenKind.PREPROCESSOR, re.compile(r'#\s*\w+\s*(?:<[^>]+>|"[^"]+")', re.ASCII)),
    (TokenKind.KEYWORD, re.compile("|".join(KEYWORDS))),
    (TokenKind.IDENTIFIER, re.compile(r"[A-Za-z_][A-Za-z0-9_]*")),
    (TokenKind.NUMBER, re.compile(r"0x[0-9A-Fa-f]+|[0-9]+(?:\.[0-9]+)?(?:[eE][-+]?[0-9]+)?")),
    (TokenKind.STRING_LITERAL, STRING_PATTERN),
    (TokenKind.OPERATOR, re.compile(r"==|!=|<=|>=|\+\+|--|->|&&|\|\||[-+*/%=<>&^|!~]")),
    (TokenKind.SEPARATOR, re.compile(r"[;,.:]")),
    (TokenKind.OPEN_PAREN, re.compile(r"\(")),
    (TokenKind.CLOSE_PAREN, re.compile(r"\)")),
    (TokenKind.OPEN_BRACE, re.compile(r"\{")),
    (TokenKind.CLOSE_BRACE, re.compile(r"\}")),
    (TokenKind.COMMENT, re.compile(r"//[^\n]*|/\*[\s\S]*?\*/")),
]


def classify_lexeme(lexeme: str) -> TokenKind:
    """
    Classify a lexeme by the first category in LEXEME_CLASSES it matches.

    >>> classify_lexeme("while")
    <TokenKind.KEYWORD: 'KEYWORD'>
    >>> classify_lexeme("while_")
    <TokenKind.IDENTIFIER: 'IDENTIFIER'>
    >>> classify_lexeme("9lives")
    <TokenKind.UNDEFINED: 'UNDEFINED'>
    """
    for kind, pattern in LEXEME_CLASSES:
        if pattern.fullmatch(lexeme):
            return kind
    return TokenKind.UNDEFINED


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token from minic source.

    Two tokens are equal when their kind and lexeme are equal; the
    position is informational and does not take part in comparison.

    Attributes:
        kind: The TokenKind classification
        lexeme: The exact source text matched
        line: Line number in source (1-indexed, 0 if unknown)
        column: Column number in source (1-indexed, 0 if unknown)
    """
    kind: TokenKind
    lexeme: str
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.lexeme!r}, {self.line}:{self.column})"

    def location(self, filename: str = "<input>") -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(filename, self.line, self.column)

    def is_type_specifier(self) -> bool:
        """Return True if this token is a keyword naming a primitive type."""
        return self.kind == TokenKind.KEYWORD and self.lexeme in TYPE_SPECIFIERS

    def is_separator(self, value: str) -> bool:
        return self.kind == TokenKind.SEPARATOR and self.lexeme == value


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes minic source code.

    Usage:
        lexer = Lexer(source_text, "prog.c")
        tokens = lexer.tokenize()

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for diagnostics)
        hoist_block_comments: Emit block comments ahead of all other
            tokens (True) or in source order (False)
    """

    def __init__(
        self,
        source: str,
        filename: str = "<input>",
        hoist_block_comments: bool = True,
    ):
        self.source = source
        self.filename = filename
        self.hoist_block_comments = hoist_block_comments

        # Offsets at which each source line starts, for offset -> line:col
        self._line_starts = [0] + [m.end() for m in re.finditer("\n", source)]

        self._tokens: list[Token] = []
        # Block comments waiting to be placed in source order
        self._pending: list[tuple[int, Token]] = []

    def tokenize(self) -> list[Token]:
        """
        Convert the whole source into tokens.

        Returns:
            List of Token objects in output order
        """
        self._tokens = []
        blanked, comments = self._extract_block_comments()

        if self.hoist_block_comments:
            self._tokens.extend(token for _, token in comments)
            self._pending = []
        else:
            self._pending = list(reversed(comments))

        offset = 0
        for line in blanked.split("\n"):
            self._scan_line(line, offset)
            offset += len(line) + 1

        self._flush_comments(None)

        logger.debug(
            f"{self.filename}: {len(self._tokens)} tokens "
            f"({len(comments)} block comments)"
        )
        return self._tokens

    # =========================================================================
    # Block Comment Pre-pass
    # =========================================================================

    def _extract_block_comments(self) -> tuple[str, list[tuple[int, Token]]]:
        """
        Pull every /* ... */ out of the source.

        Returns:
            The source with each comment replaced by equal-length spaces,
            and the (start offset, token) pairs in source order
        """
        comments: list[tuple[int, Token]] = []

        def blank(match: re.Match) -> str:
            start = match.start()
            comments.append((start, self._make_token(TokenKind.COMMENT, match.group(), start)))
            return " " * len(match.group())

        blanked = BLOCK_COMMENT_PATTERN.sub(blank, self.source)
        return blanked, comments

    # =========================================================================
    # Line Scanner
    # =========================================================================

    def _scan_line(self, line: str, base: int) -> None:
        """Scan one line of comment-blanked text starting at offset base."""
        stripped = line.lstrip()
        if stripped.startswith("#"):
            self._emit(TokenKind.PREPROCESSOR, line.strip(), base + len(line) - len(stripped))
            return

        i = 0
        length = len(line)
        while i < length:
            ch = line[i]
            if ch.isspace():
                i += 1
                continue

            pos = base + i

            # Line comment swallows the rest of the line
            if line.startswith("//", i):
                self._emit(TokenKind.COMMENT, line[i:], pos)
                break

            if ch == '"':
                match = STRING_PATTERN.match(line, i)
                if match:
                    self._emit(TokenKind.STRING_LITERAL, match.group(), pos)
                    i = match.end()
                else:
                    self._emit(TokenKind.UNDEFINED, ch, pos)
                    i += 1
                continue

            two = line[i:i + 2]
            if two in TWO_CHAR_OPERATORS:
                self._emit(TokenKind.OPERATOR, two, pos)
                i += 2
                continue

            if ch in ONE_CHAR_OPERATORS:
                self._emit(TokenKind.OPERATOR, ch, pos)
                i += 1
                continue

            if ch in SEPARATORS:
                self._emit(TokenKind.SEPARATOR, ch, pos)
                i += 1
                continue

            bracket = BRACKETS.get(ch)
            if bracket is not None:
                self._emit(bracket, ch, pos)
                i += 1
                continue

            match = WORD_PATTERN.match(line, i)
            if match:
                lexeme = match.group()
                self._emit(classify_lexeme(lexeme), lexeme, pos)
                i = match.end()
            else:
                self._emit(TokenKind.UNDEFINED, ch, pos)
                i += 1

    # =========================================================================
    # Token Construction
    # =========================================================================

    def _emit(self, kind: TokenKind, lexeme: str, offset: int) -> None:
        """Append a token, first placing any block comments that precede it."""
        self._flush_comments(offset)
        token = self._make_token(kind, lexeme, offset)
        if kind == TokenKind.UNDEFINED:
            logger.debug(f"{self.filename}:{token.line}:{token.column}: undefined token {lexeme!r}")
        self._tokens.append(token)

    def _flush_comments(self, before: Optional[int]) -> None:
        """Emit pending block comments starting before offset (all if None)."""
        while self._pending and (before is None or self._pending[-1][0] < before):
            self._tokens.append(self._pending.pop()[1])

    def _make_token(self, kind: TokenKind, lexeme: str, offset: int) -> Token:
        line_index = bisect.bisect_right(self._line_starts, offset) - 1
        column = offset - self._line_starts[line_index] + 1
        return Token(kind, lexeme, line_index + 1, column)


# =============================================================================
# Convenience Functions
# =============================================================================

def tokenize(
    source: str,
    filename: str = "<input>",
    hoist_block_comments: bool = True,
) -> list[Token]:
    """
    Tokenize minic source code.

    Args:
        source: The source text
        filename: Source filename for diagnostics
        hoist_block_comments: See Lexer

    Returns:
        List of tokens; never raises
    """
    return Lexer(source, filename, hoist_block_comments).tokenize()
