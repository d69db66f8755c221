"""
minic Recursive Descent Parser
==============================

This module implements a recursive descent parser for minic. It takes
the token list from the lexer and builds an Abstract Syntax Tree (AST).

The parser never raises. When a construct does not have the expected
shape the rule that owns it returns an ErrorNode in its place and
parsing carries on from wherever the cursor stopped; there is no
resynchronization. Each ErrorNode is also recorded as a ParseError on
the parser's diagnostics collector.

Grammar (Simplified EBNF)
-------------------------
program         ::= (COMMENT | PREPROCESSOR | function_def)*
function_def    ::= type_spec IDENTIFIER '(' params ')' block
params          ::= (type_spec IDENTIFIER ','?)*
block           ::= '{' statement* '}'
statement       ::= return_stmt | if_stmt | for_stmt | declaration
                  | block | expr_stmt
return_stmt     ::= 'return' expr? ';'?
if_stmt         ::= 'if' '(' expr ')' statement ('else' statement)?
for_stmt        ::= 'for' '(' (declaration | expr)? ';' expr? ';' expr? ')'
                    statement
declaration     ::= type_spec (IDENTIFIER ('=' expr)? ','?)* ';'?
expr_stmt       ::= expr ';'?
type_spec       ::= 'int' | 'char' | 'float' | 'double' | 'void'

Tokens at top level that start none of the above are skipped.

Expression Precedence (lowest to highest)
-----------------------------------------
1. assignment     =           (right-associative)
2. equality       == !=
3. relational     < > <= >=
4. additive       + -
5. multiplicative * / %
6. unary          prefix ++ --
7. postfix        postfix ++ --
8. primary        NUMBER, STRING_LITERAL, IDENTIFIER, call, '(' expr ')'

Example Usage
-------------
>>> from minic.parser import parse_source
>>> program = parse_source('int main() { return 0; }')
>>> program.body[0].name
'main'
"""

import logging
from typing import Callable, Optional

from minic.ast import (
    AssignmentExpression,
    BinaryExpression,
    CompoundStatement,
    DeclarationStatement,
    ErrorNode,
    ExpressionStatement,
    ForStatement,
    FunctionCall,
    FunctionDeclaration,
    Identifier,
    IfStatement,
    Literal,
    Node,
    Parameter,
    PostfixExpression,
    PrefixExpression,
    PreprocessorDirective,
    Program,
    ReturnStatement,
    Unknown,
    VariableDeclarator,
)
from minic.errors import DiagnosticCollector, ParseError, SourceLocation
from minic.lexer import Token, TokenKind, tokenize

logger = logging.getLogger(__name__)

# Substituted for a parameter whose name is missing
MISSING_IDENTIFIER = "<missing id>"

EQUALITY_OPERATORS = frozenset({"==", "!="})
RELATIONAL_OPERATORS = frozenset({"<", ">", "<=", ">="})
ADDITIVE_OPERATORS = frozenset({"+", "-"})
MULTIPLICATIVE_OPERATORS = frozenset({"*", "/", "%"})
INCREMENT_OPERATORS = frozenset({"++", "--"})


class Parser:
    """
    Recursive descent parser for minic.

    A Parser holds the cursor for one parse; create a new one for every
    token list. The cursor only moves forward and never passes the end
    of the token list, so every parse terminates.

    Attributes:
        tokens: List of tokens to parse
        filename: Source filename for diagnostics
        diagnostics: ParseErrors recorded for every ErrorNode produced
    """

    def __init__(
        self,
        tokens: list[Token],
        filename: str = "<input>",
        source_lines: Optional[list[str]] = None,
        max_errors: int = 100,
    ):
        """
        Initialize the parser.

        Args:
            tokens: List of tokens from the lexer
            filename: Source filename for diagnostics
            source_lines: Original source lines for error context
            max_errors: Cap on recorded diagnostics (the tree keeps all
                ErrorNodes regardless)
        """
        self.tokens = list(tokens)
        self.filename = filename
        self.source_lines = source_lines or []
        self.diagnostics = DiagnosticCollector(max_errors)

        self._pos = 0

    @property
    def position(self) -> int:
        """Index of the next unconsumed token."""
        return self._pos

    def parse(self) -> Program:
        """
        Parse the token list into an AST.

        Returns:
            Program whose body holds directives, functions and any
            ErrorNodes produced for malformed functions
        """
        body: list[Node] = []

        while not self._at_end():
            token = self._peek()

            if token.kind == TokenKind.COMMENT:
                self._advance()
            elif token.kind == TokenKind.PREPROCESSOR:
                self._advance()
                body.append(PreprocessorDirective(token.lexeme.strip()))
            elif token.is_type_specifier():
                body.append(self._parse_function_definition())
            else:
                logger.debug(f"skipping top-level token {token!r}")
                self._advance()

        logger.debug(
            f"{self.filename}: parsed {len(body)} top-level items, "
            f"{self.diagnostics.error_count()} errors"
        )
        return Program(tuple(body))

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.tokens)

    def _peek(self, offset: int = 0) -> Optional[Token]:
        """Look at token at current position + offset (None past the end)."""
        pos = self._pos + offset
        if pos >= len(self.tokens):
            return None
        return self.tokens[pos]

    def _advance(self) -> Optional[Token]:
        """Consume and return the current token."""
        if self._at_end():
            return None
        token = self.tokens[self._pos]
        self._pos += 1
        return token

    def _check(self, kind: TokenKind, lexeme: Optional[str] = None) -> bool:
        """Check the current token's kind (and lexeme, if given)."""
        token = self._peek()
        if token is None or token.kind != kind:
            return False
        return lexeme is None or token.lexeme == lexeme

    def _check_lexeme(self, *lexemes: str) -> bool:
        """Check the current token's text, whatever its kind."""
        token = self._peek()
        return token is not None and token.lexeme in lexemes

    def _check_keyword(self, word: str) -> bool:
        return self._check(TokenKind.KEYWORD, word)

    def _match_separator(self, value: str) -> bool:
        """Consume the current token if it is the given separator."""
        if self._check(TokenKind.SEPARATOR, value):
            self._advance()
            return True
        return False

    def _expect(self, kind: TokenKind, message: str, hint: Optional[str] = None) -> Token:
        """
        Expect and consume a token of the given kind.

        Raises:
            ParseError: If the current token is missing or of another kind
        """
        if self._check(kind):
            return self._advance()
        raise self._error_at_current(message, hint)

    def _error_at_current(self, message: str, hint: Optional[str] = None) -> ParseError:
        """Build a ParseError located at the current (or last) token."""
        token = self._peek()
        if token is None and self.tokens:
            token = self.tokens[-1]
        if token is None:
            return ParseError(message, hint=hint)
        return ParseError(
            message,
            SourceLocation(self.filename, token.line, token.column),
            hint=hint,
            source_line=self._get_source_line(token.line),
        )

    def _get_source_line(self, line: int) -> Optional[str]:
        if 0 < line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None

    def _error_node(self, error: ParseError) -> ErrorNode:
        """Record a ParseError and return the ErrorNode standing in for it."""
        self.diagnostics.add(error)
        logger.debug(f"parse error: {error.message} at token {self._pos}")
        return ErrorNode(error.message)

    # =========================================================================
    # Function Definitions
    # =========================================================================

    def _parse_function_definition(self) -> Node:
        """
        Parse a function definition starting at its return type.

        A body nested deeper than the interpreter stack allows is replaced
        by a single ErrorNode and the cursor moves past its closing brace.
        """
        try:
            return_type = self._advance().lexeme
            name = self._expect(
                TokenKind.IDENTIFIER, "Expected function name",
                hint="a function definition is '<type> <name>(<parameters>) { ... }'",
            ).lexeme
            self._expect(
                TokenKind.OPEN_PAREN, "Expected '(' after function name",
                hint=f"write '{name}()' for a function without parameters",
            )
            parameters = self._parse_parameter_list()
            if not self._check(TokenKind.OPEN_BRACE):
                raise self._error_at_current(
                    "Expected '{' at beginning of function body",
                    hint="function declarations without a body are not supported",
                )
        except ParseError as e:
            return self._error_node(e)

        body_start = self._pos
        try:
            body = self._parse_compound_statement()
        except RecursionError:
            error = self._error_at_current(
                "Expression nested too deeply",
                hint="split the expression using intermediate variables",
            )
            self._skip_block(body_start)
            return self._error_node(error)
        return FunctionDeclaration(return_type, name, tuple(parameters), body)

    def _skip_block(self, start: int) -> None:
        """Move the cursor past the brace block opening at start (or to the end)."""
        depth = 0
        for index in range(start, len(self.tokens)):
            kind = self.tokens[index].kind
            if kind == TokenKind.OPEN_BRACE:
                depth += 1
            elif kind == TokenKind.CLOSE_BRACE:
                depth -= 1
                if depth == 0:
                    self._pos = max(self._pos, index + 1)
                    return
        self._pos = len(self.tokens)

    def _parse_parameter_list(self) -> list[Parameter]:
        """
        Parse parameters up to and including the closing ')'.

        Commas are optional and tokens that cannot start a parameter are
        skipped. A type with no following identifier gets the
        MISSING_IDENTIFIER placeholder.
        """
        parameters = []
        while not self._at_end() and not self._check_lexeme(")"):
            token = self._peek()
            if token.is_separator(","):
                self._advance()
            elif token.is_type_specifier():
                self._advance()
                if self._check(TokenKind.IDENTIFIER):
                    param_name = self._advance().lexeme
                else:
                    param_name = MISSING_IDENTIFIER
                parameters.append(Parameter(token.lexeme, param_name))
            else:
                self._advance()

        if self._at_end():
            raise self._error_at_current(
                "Unexpected end of input while parsing function parameters"
            )
        self._advance()
        return parameters

    # =========================================================================
    # Statement Parsing
    # =========================================================================

    def _parse_compound_statement(self) -> Node:
        """Parse a block statement { ... }."""
        try:
            self._expect(TokenKind.OPEN_BRACE, "Expected '{' at beginning of compound statement")
            body = []
            while not self._at_end() and not self._check(TokenKind.CLOSE_BRACE):
                start = self._pos
                stmt = self._parse_statement()
                if self._pos == start:
                    # Nothing consumed: a token no statement can start with
                    body.append(self._error_node(self._error_at_current(
                        f"Unexpected token '{self._peek().lexeme}' in statement position"
                    )))
                    self._advance()
                elif stmt is not None:
                    body.append(stmt)
            self._expect(
                TokenKind.CLOSE_BRACE, "Expected '}' at end of compound statement",
                hint="every '{' needs a matching '}'",
            )
        except ParseError as e:
            return self._error_node(e)

        return CompoundStatement(tuple(body))

    def _parse_statement(self) -> Optional[Node]:
        """Parse any statement; comments yield None."""
        token = self._peek()
        if token is None:
            return None

        if token.kind == TokenKind.COMMENT:
            self._advance()
            return None
        if self._check_keyword("return"):
            return self._parse_return_statement()
        if self._check_keyword("if"):
            return self._parse_if_statement()
        if self._check_keyword("for"):
            return self._parse_for_statement()
        if token.is_type_specifier():
            return self._parse_declaration(expect_semicolon=True)
        if token.kind == TokenKind.OPEN_BRACE:
            return self._parse_compound_statement()
        return self._parse_expression_statement()

    def _parse_return_statement(self) -> ReturnStatement:
        """Parse return statement; the semicolon is optional."""
        self._advance()
        expression = self._parse_expression()
        self._match_separator(";")
        return ReturnStatement(expression)

    def _parse_if_statement(self) -> Node:
        """Parse if statement."""
        try:
            self._advance()
            self._expect(TokenKind.OPEN_PAREN, "Expected '(' after if")
            condition = self._parse_expression()
            self._expect(TokenKind.CLOSE_PAREN, "Expected ')' after if condition")
        except ParseError as e:
            return self._error_node(e)

        then_branch = self._parse_statement()

        else_branch = None
        if self._check_keyword("else"):
            self._advance()
            else_branch = self._parse_statement()

        return IfStatement(condition, then_branch, else_branch)

    def _parse_for_statement(self) -> Node:
        """
        Parse for statement.

        The initializer may be a declaration; it is parsed without
        consuming the ';' that ends the clause.
        """
        try:
            self._advance()
            self._expect(TokenKind.OPEN_PAREN, "Expected '(' after for")

            token = self._peek()
            if token is not None and token.is_type_specifier():
                initialization = self._parse_declaration(expect_semicolon=False)
            else:
                initialization = self._parse_expression()
            self._match_separator(";")

            condition = self._parse_expression()
            self._match_separator(";")

            increment = self._parse_expression()
            self._expect(TokenKind.CLOSE_PAREN, "Expected ')' after for increment")
        except ParseError as e:
            return self._error_node(e)

        body = self._parse_statement()
        return ForStatement(initialization, condition, increment, body)

    def _parse_declaration(self, expect_semicolon: bool) -> DeclarationStatement:
        """
        Parse a variable declaration.

        Supports multi-variable declarations like:
            int a, b, c;
            int x = 1, y = 2;

        Args:
            expect_semicolon: Consume a trailing ';' (False inside a
                for-initializer, where ';' separates the clauses)
        """
        var_type = self._advance().lexeme
        variables = []

        while self._check(TokenKind.IDENTIFIER):
            name = self._advance().lexeme
            initializer = None
            if self._check_lexeme("="):
                self._advance()
                initializer = self._parse_expression()
            variables.append(VariableDeclarator(name, initializer))

            if self._at_end():
                break
            if self._check_lexeme(","):
                self._advance()
                continue
            if expect_semicolon:
                self._match_separator(";")
            break

        return DeclarationStatement(var_type, tuple(variables))

    def _parse_expression_statement(self) -> ExpressionStatement:
        expression = self._parse_expression()
        self._match_separator(";")
        return ExpressionStatement(expression)

    # =========================================================================
    # Expression Parsing (Operator Precedence)
    # =========================================================================

    def _parse_expression(self) -> Optional[Node]:
        """Parse expression (top-level, handles assignment)."""
        return self._parse_assignment()

    def _parse_assignment(self) -> Optional[Node]:
        """Parse assignment expression (right-associative)."""
        left = self._parse_equality()
        if self._check_lexeme("="):
            operator = self._advance().lexeme
            right = self._parse_assignment()
            return AssignmentExpression(operator, left, right)
        return left

    def _parse_equality(self) -> Optional[Node]:
        """Parse equality expression (== !=)."""
        return self._parse_binary(self._parse_relational, EQUALITY_OPERATORS)

    def _parse_relational(self) -> Optional[Node]:
        """Parse relational expression (< > <= >=)."""
        return self._parse_binary(self._parse_additive, RELATIONAL_OPERATORS)

    def _parse_additive(self) -> Optional[Node]:
        """Parse additive expression (+ -)."""
        return self._parse_binary(self._parse_multiplicative, ADDITIVE_OPERATORS)

    def _parse_multiplicative(self) -> Optional[Node]:
        """Parse multiplicative expression (* / %)."""
        return self._parse_binary(self._parse_unary, MULTIPLICATIVE_OPERATORS)

    def _parse_binary(
        self,
        operand_parser: Callable[[], Optional[Node]],
        operators: frozenset[str],
    ) -> Optional[Node]:
        """
        Generic left-associative binary expression parser.

        Args:
            operand_parser: Function to parse operands
            operators: Operator lexemes accepted at this level
        """
        left = operand_parser()
        while self._check_lexeme(*operators):
            operator = self._advance().lexeme
            right = operand_parser()
            left = BinaryExpression(operator, left, right)
        return left

    def _parse_unary(self) -> Optional[Node]:
        """Parse prefix ++/-- (right-associative)."""
        if self._check_lexeme(*INCREMENT_OPERATORS):
            operator = self._advance().lexeme
            return PrefixExpression(operator, self._parse_unary())
        return self._parse_postfix()

    def _parse_postfix(self) -> Optional[Node]:
        """Parse postfix ++/--."""
        node = self._parse_primary()
        while self._check_lexeme(*INCREMENT_OPERATORS):
            operator = self._advance().lexeme
            node = PostfixExpression(operator, node)
        return node

    def _parse_primary(self) -> Optional[Node]:
        """
        Parse primary expression.

        Returns None without consuming anything at ';' or ')', so that
        empty expressions (``return;``, ``for (;;)``) fall through.
        Keywords other than type specifiers are read as identifiers.
        """
        token = self._peek()
        if token is None:
            return None

        if token.is_separator(";") or token.kind == TokenKind.CLOSE_PAREN:
            return None

        if token.kind in (TokenKind.NUMBER, TokenKind.STRING_LITERAL):
            self._advance()
            return Literal(token.lexeme)

        if token.kind == TokenKind.IDENTIFIER or (
            token.kind == TokenKind.KEYWORD and not token.is_type_specifier()
        ):
            self._advance()
            if self._check(TokenKind.OPEN_PAREN):
                self._advance()
                return FunctionCall(token.lexeme, tuple(self._parse_arguments()))
            return Identifier(token.lexeme)

        if token.kind == TokenKind.OPEN_PAREN:
            self._advance()
            expression = self._parse_expression()
            if self._check(TokenKind.CLOSE_PAREN):
                self._advance()
            return expression

        self._advance()
        return Unknown(token.lexeme)

    def _parse_arguments(self) -> list[Node]:
        """
        Parse call arguments after '(' up to and including ')'.

        The list also closes when an argument consumes nothing (for
        example at a ';'), which keeps unterminated calls from stalling.
        """
        arguments = []
        while not self._at_end() and not self._check(TokenKind.CLOSE_PAREN):
            start = self._pos
            argument = self._parse_expression()
            if argument is not None:
                arguments.append(argument)
            if self._check_lexeme(","):
                self._advance()
            elif self._pos == start:
                break

        if self._check(TokenKind.CLOSE_PAREN):
            self._advance()
        return arguments


# =============================================================================
# Convenience Functions
# =============================================================================

def parse(tokens: list[Token], filename: str = "<input>") -> Program:
    """Parse a token list into a Program; never raises."""
    return Parser(tokens, filename).parse()


def parse_source(
    source: str,
    filename: str = "<input>",
    hoist_block_comments: bool = True,
) -> Program:
    """
    Parse minic source code into an AST.

    This is a convenience function that combines lexing and parsing.

    Args:
        source: The minic source code
        filename: Source filename for diagnostics
        hoist_block_comments: Passed to the lexer

    Returns:
        The root Program node
    """
    tokens = tokenize(source, filename, hoist_block_comments)
    parser = Parser(tokens, filename, source.splitlines())
    return parser.parse()
