"""
minic - Lexer and Parser for a Small C-like Teaching Language
=============================================================

This package implements the front end of a didactic compiler. It turns
source text of a restricted C-like language into a flat token list and
an abstract syntax tree, which later stages (semantic analysis,
intermediate code, optimization, code generation) consume.

Pipeline
--------
    Source → Lexer → Tokens → Parser → AST → (downstream stages)

Neither the lexer nor the parser raises on bad input. Unrecognized
characters become UNDEFINED tokens; grammar violations become ErrorNode
entries in the tree, next to whatever parsed correctly.

Usage
-----
>>> from minic import tokenize, parse
>>> program = parse(tokenize('int main() { return 0; }'))
>>> program.body[0].name
'main'

Language Subset
---------------
Supported:
- Types: int, char, float, double, void
- Functions with typed parameters
- Statements: blocks, declarations, if/else, for, return, expressions
- Operators: = == != < > <= >= + - * / % and prefix/postfix ++ --
- Preprocessor lines, kept as literal text

Not supported:
- struct, arrays, pointers, typedef
- while loops as statements (``while`` lexes as a keyword only)
- macro expansion, multiple translation units
"""

# =============================================================================
# Version Information
# =============================================================================

__version__ = "1.0.0"

# =============================================================================
# Public API Imports
# =============================================================================

from minic.errors import (
    MiniCError,
    FrontEndError,
    ParseError,
    StageError,
    CompilationError,
    SourceLocation,
    DiagnosticCollector,
)
from minic.lexer import (
    Lexer,
    Token,
    TokenKind,
    KEYWORDS,
    TYPE_SPECIFIERS,
    classify_lexeme,
    tokenize,
)
from minic.parser import Parser, parse, parse_source
from minic.frontend import FrontEnd, FrontEndOptions, FrontEndResult, analyze
from minic.ast import (
    ASTNode,
    ASTVisitor,
    ASTPrinter,
    Program,
    PreprocessorDirective,
    FunctionDeclaration,
    Parameter,
    CompoundStatement,
    IfStatement,
    ForStatement,
    DeclarationStatement,
    VariableDeclarator,
    ReturnStatement,
    ExpressionStatement,
    AssignmentExpression,
    BinaryExpression,
    PrefixExpression,
    PostfixExpression,
    Literal,
    Identifier,
    FunctionCall,
    Unknown,
    ErrorNode,
    find_errors,
    format_ast,
    to_dict,
)

__all__ = [
    "__version__",
    # Errors
    "MiniCError",
    "FrontEndError",
    "ParseError",
    "StageError",
    "CompilationError",
    "SourceLocation",
    "DiagnosticCollector",
    # Lexer
    "Lexer",
    "Token",
    "TokenKind",
    "KEYWORDS",
    "TYPE_SPECIFIERS",
    "classify_lexeme",
    "tokenize",
    # Parser
    "Parser",
    "parse",
    "parse_source",
    # Driver
    "FrontEnd",
    "FrontEndOptions",
    "FrontEndResult",
    "analyze",
    # AST
    "ASTNode",
    "ASTVisitor",
    "ASTPrinter",
    "Program",
    "PreprocessorDirective",
    "FunctionDeclaration",
    "Parameter",
    "CompoundStatement",
    "IfStatement",
    "ForStatement",
    "DeclarationStatement",
    "VariableDeclarator",
    "ReturnStatement",
    "ExpressionStatement",
    "AssignmentExpression",
    "BinaryExpression",
    "PrefixExpression",
    "PostfixExpression",
    "Literal",
    "Identifier",
    "FunctionCall",
    "Unknown",
    "ErrorNode",
    "find_errors",
    "format_ast",
    "to_dict",
]
