"""
minic Abstract Syntax Tree (AST) Definitions
============================================

This module defines the AST node types built by the minic parser.
The node class names are the node-kind names downstream consumers
(semantic analysis, IR generation, optimizer, code generator) key on,
so renaming a class or a field is a breaking change for them.

Node Hierarchy
--------------
ASTNode (base)
├── Program - root node, top-level items in ``body``
├── PreprocessorDirective - a ``#`` line kept as literal text
├── Declarations
│   ├── FunctionDeclaration - function definition with body
│   ├── Parameter - one function parameter
│   ├── DeclarationStatement - ``int a, b = 1;``
│   └── VariableDeclarator - one name in a declaration
├── Statements
│   ├── CompoundStatement - ``{ ... }``
│   ├── IfStatement - if/else
│   ├── ForStatement - for loop
│   ├── ReturnStatement - return
│   └── ExpressionStatement - expression followed by ``;``
├── Expressions
│   ├── AssignmentExpression - ``=``
│   ├── BinaryExpression - == != < > <= >= + - * / %
│   ├── PrefixExpression - ``++x`` / ``--x``
│   ├── PostfixExpression - ``x++`` / ``x--``
│   ├── FunctionCall - ``name(args)``
│   ├── Identifier - variable reference
│   └── Literal - number or string, raw text
└── Diagnostics
    ├── Unknown - token that cannot start an expression
    └── ErrorNode - grammar violation, kept in the tree

Design Notes
------------
- All nodes are frozen dataclasses; sequences are tuples, so a tree
  cannot change once the parser hands it over
- Optional children are ``None`` when absent
- ErrorNode and Unknown are ordinary nodes: a tree may hold valid and
  error nodes side by side, and consumers must report ErrorNodes
  rather than interpret them
"""

from dataclasses import dataclass, fields
from typing import Any, Optional, Union


# =============================================================================
# AST Node Base Class
# =============================================================================

@dataclass(frozen=True)
class ASTNode:
    """
    Base class for all AST nodes.

    The ``kind`` of a node is its class name, which is also the
    ``type`` tag used by to_dict().
    """

    @property
    def kind(self) -> str:
        return self.__class__.__name__


# =============================================================================
# Program Root and Top-Level Nodes
# =============================================================================

@dataclass(frozen=True)
class Program(ASTNode):
    """
    Root node of the AST.

    Attributes:
        body: Preprocessor directives, functions and any error nodes,
            in source order
    """
    body: tuple["Node", ...] = ()


@dataclass(frozen=True)
class PreprocessorDirective(ASTNode):
    """
    A preprocessor line, stored verbatim (trimmed). Nothing is expanded.

    Attributes:
        text: The directive text, e.g. ``#include <stdio.h>``
    """
    text: str = ""


@dataclass(frozen=True)
class Parameter(ASTNode):
    """
    Function parameter.

    Attributes:
        param_type: Type keyword, e.g. ``int``
        param_name: Parameter name, or ``<missing id>`` when absent
    """
    param_type: str = ""
    param_name: str = ""


@dataclass(frozen=True)
class FunctionDeclaration(ASTNode):
    """
    Function definition.

    Attributes:
        return_type: Return type keyword
        name: Function name
        parameters: Parameter nodes in declaration order
        body: The function body; an ErrorNode if the body is malformed
    """
    return_type: str = ""
    name: str = ""
    parameters: tuple[Parameter, ...] = ()
    body: Optional["Node"] = None


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass(frozen=True)
class CompoundStatement(ASTNode):
    """
    Block enclosed in braces.

    Attributes:
        body: Statements in the block
    """
    body: tuple["Node", ...] = ()


@dataclass(frozen=True)
class IfStatement(ASTNode):
    """
    If statement with optional else clause.

    Attributes:
        condition: The condition expression
        then_branch: Statement executed if condition is true
        else_branch: Optional statement executed otherwise
    """
    condition: Optional["Node"] = None
    then_branch: Optional["Node"] = None
    else_branch: Optional["Node"] = None


@dataclass(frozen=True)
class ForStatement(ASTNode):
    """
    For loop. Each clause is optional.

    Attributes:
        initialization: DeclarationStatement or expression, or None
        condition: Loop condition, or None
        increment: Update expression, or None
        body: Loop body statement
    """
    initialization: Optional["Node"] = None
    condition: Optional["Node"] = None
    increment: Optional["Node"] = None
    body: Optional["Node"] = None


@dataclass(frozen=True)
class VariableDeclarator(ASTNode):
    """
    One variable in a declaration.

    Attributes:
        name: Variable name
        initializer: Optional initial value expression
    """
    name: str = ""
    initializer: Optional["Node"] = None


@dataclass(frozen=True)
class DeclarationStatement(ASTNode):
    """
    Variable declaration such as ``int a, b = 2;``.

    Attributes:
        var_type: Type keyword shared by all declarators
        variables: The declared variables, in order
    """
    var_type: str = ""
    variables: tuple[VariableDeclarator, ...] = ()


@dataclass(frozen=True)
class ReturnStatement(ASTNode):
    expression: Optional["Node"] = None


@dataclass(frozen=True)
class ExpressionStatement(ASTNode):
    expression: Optional["Node"] = None


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class AssignmentExpression(ASTNode):
    """
    Assignment (right-associative).

    Attributes:
        operator: Always ``=`` in this language
        left: Assignment target
        right: Assigned value
    """
    operator: str = "="
    left: Optional["Node"] = None
    right: Optional["Node"] = None


@dataclass(frozen=True)
class BinaryExpression(ASTNode):
    """
    Binary operation (left-associative).

    Attributes:
        operator: Operator text, e.g. ``+`` or ``<=``
        left: Left operand
        right: Right operand
    """
    operator: str = ""
    left: Optional["Node"] = None
    right: Optional["Node"] = None


@dataclass(frozen=True)
class PrefixExpression(ASTNode):
    """Prefix ``++``/``--`` applied to argument."""
    operator: str = ""
    argument: Optional["Node"] = None


@dataclass(frozen=True)
class PostfixExpression(ASTNode):
    """Postfix ``++``/``--`` applied to argument."""
    operator: str = ""
    argument: Optional["Node"] = None


@dataclass(frozen=True)
class Literal(ASTNode):
    """
    Number or string literal, stored as its raw source text
    (string literals keep their quotes and escapes).
    """
    value: str = ""


@dataclass(frozen=True)
class Identifier(ASTNode):
    name: str = ""


@dataclass(frozen=True)
class FunctionCall(ASTNode):
    """
    Call of a named function.

    Attributes:
        name: Callee name
        arguments: Argument expressions, in order
    """
    name: str = ""
    arguments: tuple["Node", ...] = ()


# =============================================================================
# Diagnostic Nodes
# =============================================================================

@dataclass(frozen=True)
class Unknown(ASTNode):
    """A token that cannot start an expression, kept as raw text."""
    value: str = ""


@dataclass(frozen=True)
class ErrorNode(ASTNode):
    """
    Placeholder for a construct the grammar could not build.

    Attributes:
        message: What the parser expected, e.g. ``Expected function name``
    """
    message: str = ""


Node = Union[
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
]


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Subclasses override visit_* methods for the node kinds they care
    about; everything else falls through to generic_visit, which walks
    into child nodes.

    Usage:
        class CallCounter(ASTVisitor):
            def __init__(self):
                self.calls = 0

            def visit_FunctionCall(self, node):
                self.calls += 1
                self.generic_visit(node)
    """

    def visit(self, node: ASTNode) -> Any:
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: ASTNode) -> None:
        """Visit every child node, in field order."""
        for child in iter_child_nodes(node):
            self.visit(child)


def iter_child_nodes(node: ASTNode):
    """Yield the direct child nodes of node, in field order."""
    for f in fields(node):
        value = getattr(node, f.name)
        if isinstance(value, ASTNode):
            yield value
        elif isinstance(value, tuple):
            for item in value:
                if isinstance(item, ASTNode):
                    yield item


# =============================================================================
# Error Collection
# =============================================================================

def find_errors(node: ASTNode) -> list[ErrorNode]:
    """
    Return every ErrorNode in the tree, in document order.

    Walks with an explicit stack rather than recursion; tree depth is
    bounded by memory, not by the interpreter stack.
    """
    errors: list[ErrorNode] = []
    stack = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, ErrorNode):
            errors.append(current)
        else:
            stack.extend(reversed(list(iter_child_nodes(current))))
    return errors


def is_valid(node: ASTNode) -> bool:
    """True when the tree holds no ErrorNode and can go to later stages."""
    return not find_errors(node)


# =============================================================================
# Exchange Format
# =============================================================================

# Field names as consumers of the dict form expect them
_EXPORT_NAMES = {
    "return_type": "returnType",
    "param_type": "paramType",
    "param_name": "paramName",
    "var_type": "varType",
    "then_branch": "then",
    "else_branch": "else",
}


def to_dict(node: Optional[ASTNode]) -> Optional[dict]:
    """
    Convert a tree into plain dicts and lists (JSON-ready).

    Each node becomes ``{"type": <kind>, <field>: <value>, ...}``.

    >>> to_dict(BinaryExpression("+", Literal("1"), Identifier("x")))
    {'type': 'BinaryExpression', 'operator': '+', 'left': {'type': 'Literal', 'value': '1'}, 'right': {'type': 'Identifier', 'name': 'x'}}
    """
    if node is None:
        return None

    result: dict[str, Any] = {"type": node.kind}
    for f in fields(node):
        value = getattr(node, f.name)
        key = _EXPORT_NAMES.get(f.name, f.name)
        if isinstance(value, ASTNode):
            result[key] = to_dict(value)
        elif isinstance(value, tuple):
            result[key] = [to_dict(item) for item in value]
        else:
            result[key] = value
    return result


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Statements are printed one per line with indentation; expressions
    are printed inline, fully parenthesized.

    Usage:
        printer = ASTPrinter()
        print(printer.print(program))
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: ASTNode) -> str:
        """Print the AST and return as string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def _indent(self) -> None:
        self.indent_level += 1

    def _dedent(self) -> None:
        self.indent_level = max(0, self.indent_level - 1)

    def _visit_child(self, node: Optional[ASTNode]) -> None:
        if node is None:
            self._emit("<empty>")
        else:
            self.visit(node)

    def visit_Program(self, node: Program):
        self._emit("Program")
        self._indent()
        for item in node.body:
            self.visit(item)
        self._dedent()

    def visit_PreprocessorDirective(self, node: PreprocessorDirective):
        self._emit(f"Directive: {node.text}")

    def visit_FunctionDeclaration(self, node: FunctionDeclaration):
        params = ", ".join(f"{p.param_type} {p.param_name}" for p in node.parameters)
        self._emit(f"Function: {node.return_type} {node.name}({params})")
        self._indent()
        self._visit_child(node.body)
        self._dedent()

    def visit_CompoundStatement(self, node: CompoundStatement):
        self._emit("Block")
        self._indent()
        for stmt in node.body:
            self.visit(stmt)
        self._dedent()

    def visit_IfStatement(self, node: IfStatement):
        self._emit(f"If ({self._expr_str(node.condition)})")
        self._indent()
        self._emit("Then:")
        self._indent()
        self._visit_child(node.then_branch)
        self._dedent()
        if node.else_branch is not None:
            self._emit("Else:")
            self._indent()
            self.visit(node.else_branch)
            self._dedent()
        self._dedent()

    def visit_ForStatement(self, node: ForStatement):
        init = self._expr_str(node.initialization)
        cond = self._expr_str(node.condition)
        update = self._expr_str(node.increment)
        self._emit(f"For ({init}; {cond}; {update})")
        self._indent()
        self._visit_child(node.body)
        self._dedent()

    def visit_DeclarationStatement(self, node: DeclarationStatement):
        self._emit(f"Declare: {self._expr_str(node)}")

    def visit_ReturnStatement(self, node: ReturnStatement):
        if node.expression is not None:
            self._emit(f"Return {self._expr_str(node.expression)}")
        else:
            self._emit("Return")

    def visit_ExpressionStatement(self, node: ExpressionStatement):
        self._emit(f"Expr: {self._expr_str(node.expression)}")

    def visit_ErrorNode(self, node: ErrorNode):
        self._emit(f"Error: {node.message}")

    def generic_visit(self, node: ASTNode) -> None:
        # Expressions showing up in statement position
        self._emit(f"Expr: {self._expr_str(node)}")

    def _expr_str(self, expr: Optional[ASTNode]) -> str:
        """Convert expression to string representation."""
        if expr is None:
            return ""
        if isinstance(expr, Literal):
            return expr.value
        if isinstance(expr, Identifier):
            return expr.name
        if isinstance(expr, BinaryExpression):
            return f"({self._expr_str(expr.left)} {expr.operator} {self._expr_str(expr.right)})"
        if isinstance(expr, AssignmentExpression):
            return f"({self._expr_str(expr.left)} {expr.operator} {self._expr_str(expr.right)})"
        if isinstance(expr, PrefixExpression):
            return f"({expr.operator}{self._expr_str(expr.argument)})"
        if isinstance(expr, PostfixExpression):
            return f"({self._expr_str(expr.argument)}{expr.operator})"
        if isinstance(expr, FunctionCall):
            args = ", ".join(self._expr_str(a) for a in expr.arguments)
            return f"{expr.name}({args})"
        if isinstance(expr, DeclarationStatement):
            declarators = ", ".join(
                f"{v.name} = {self._expr_str(v.initializer)}" if v.initializer is not None else v.name
                for v in expr.variables
            )
            return f"{expr.var_type} {declarators}"
        if isinstance(expr, Unknown):
            return f"<unknown {expr.value}>"
        if isinstance(expr, ErrorNode):
            return f"<error: {expr.message}>"
        return f"<{expr.kind}>"


def format_ast(node: ASTNode) -> str:
    """Render a tree with ASTPrinter."""
    return ASTPrinter().print(node)
