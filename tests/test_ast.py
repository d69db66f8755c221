"""
minic AST Test Suite
====================

Tests for the node classes, the visitor, error collection, the dict
exchange format and the pretty printer.
"""

import dataclasses
import json

import pytest
from minic.ast import (
    ASTPrinter,
    ASTVisitor,
    BinaryExpression,
    ErrorNode,
    FunctionCall,
    Identifier,
    IfStatement,
    Literal,
    PrefixExpression,
    Program,
    ReturnStatement,
    find_errors,
    format_ast,
    is_valid,
    iter_child_nodes,
    to_dict,
)
from minic.parser import parse_source


# =============================================================================
# Node Tests
# =============================================================================

class TestNodes:
    """Tests for the node dataclasses."""

    def test_kind_is_class_name(self):
        """A node's kind is its class name."""
        assert Literal("1").kind == "Literal"
        assert Program().kind == "Program"

    def test_nodes_are_frozen(self):
        """Nodes cannot be modified after construction."""
        node = Identifier("x")
        with pytest.raises(dataclasses.FrozenInstanceError):
            node.name = "y"

    def test_structural_equality(self):
        """Nodes with equal fields are equal."""
        assert BinaryExpression("+", Literal("1"), Identifier("x")) == BinaryExpression(
            "+", Literal("1"), Identifier("x")
        )

    def test_iter_child_nodes(self):
        """Children come back in field order, tuples flattened."""
        call = FunctionCall("f", (Identifier("a"), Literal("1")))
        assert list(iter_child_nodes(call)) == [Identifier("a"), Literal("1")]
        assert list(iter_child_nodes(IfStatement(Identifier("c")))) == [Identifier("c")]


# =============================================================================
# Visitor Tests
# =============================================================================

class TestVisitor:
    """Tests for ASTVisitor dispatch."""

    def test_custom_visitor(self):
        """visit_* methods are found by class name."""

        class CallCounter(ASTVisitor):
            def __init__(self):
                self.calls = []

            def visit_FunctionCall(self, node):
                self.calls.append(node.name)
                self.generic_visit(node)

        program = parse_source("int main() { f(g(1)); return h(); }")
        counter = CallCounter()
        counter.visit(program)
        assert counter.calls == ["f", "g", "h"]

    def test_find_errors_in_order(self):
        """find_errors returns ErrorNodes in document order."""
        program = Program((
            ErrorNode("first"),
            IfStatement(Identifier("c"), ErrorNode("second"), ErrorNode("third")),
        ))
        assert [e.message for e in find_errors(program)] == ["first", "second", "third"]

    def test_is_valid(self):
        """A tree is valid when it holds no ErrorNode."""
        assert is_valid(parse_source("int main() { return 0; }"))
        assert not is_valid(parse_source("int main {}"))

    def test_unknown_is_not_an_error(self):
        """Unknown nodes do not make a tree invalid."""
        assert is_valid(parse_source("int main() { x = @; }"))

    def test_find_errors_deep_tree(self):
        """find_errors handles trees deeper than the recursion limit."""
        node = ErrorNode("bottom")
        for _ in range(5000):
            node = PrefixExpression("++", node)
        assert find_errors(Program((node,))) == [ErrorNode("bottom")]


# =============================================================================
# Exchange Format Tests
# =============================================================================

class TestToDict:
    """Tests for the dict exchange format."""

    def test_expression(self):
        """Nodes become dicts tagged with their type."""
        assert to_dict(BinaryExpression("+", Literal("1"), Identifier("x"))) == {
            "type": "BinaryExpression",
            "operator": "+",
            "left": {"type": "Literal", "value": "1"},
            "right": {"type": "Identifier", "name": "x"},
        }

    def test_function_keys(self):
        """Function and parameter fields use the exchange names."""
        data = to_dict(parse_source("int add(int a) { return a; }"))
        function = data["body"][0]
        assert function["type"] == "FunctionDeclaration"
        assert function["returnType"] == "int"
        assert function["name"] == "add"
        assert function["parameters"] == [
            {"type": "Parameter", "paramType": "int", "paramName": "a"}
        ]
        assert function["body"]["type"] == "CompoundStatement"

    def test_if_keys(self):
        """If branches are exported as then/else."""
        data = to_dict(IfStatement(Identifier("c"), ReturnStatement(None)))
        assert data == {
            "type": "IfStatement",
            "condition": {"type": "Identifier", "name": "c"},
            "then": {"type": "ReturnStatement", "expression": None},
            "else": None,
        }

    def test_declaration_keys(self):
        """Declarations export varType and a list of variables."""
        data = to_dict(parse_source("void f() { int x = 1; }"))
        declaration = data["body"][0]["body"]["body"][0]
        assert declaration["varType"] == "int"
        assert declaration["variables"] == [{
            "type": "VariableDeclarator",
            "name": "x",
            "initializer": {"type": "Literal", "value": "1"},
        }]

    def test_json_serializable(self):
        """The dict form goes through json unchanged."""
        data = to_dict(parse_source("#include <a.h>\nint main() { for (;;) if (x) y++; }"))
        assert json.loads(json.dumps(data)) == data

    def test_none(self):
        """A missing child converts to None."""
        assert to_dict(None) is None


# =============================================================================
# Printer Tests
# =============================================================================

class TestPrinter:
    """Tests for the ASTPrinter text form."""

    def test_simple_program(self):
        """Statements print one per line, indented."""
        program = parse_source("int main() { return 0; }")
        assert format_ast(program) == (
            "Program\n"
            "  Function: int main()\n"
            "    Block\n"
            "      Return 0"
        )

    def test_expressions_parenthesized(self):
        """Expressions are printed fully parenthesized."""
        program = parse_source("void f(int a) { x = a + b * 2; g(x, 1); }")
        assert format_ast(program).splitlines()[1:] == [
            "  Function: void f(int a)",
            "    Block",
            "      Expr: (x = (a + (b * 2)))",
            "      Expr: g(x, 1)",
        ]

    def test_if_else(self):
        """If statements show Then and Else sections."""
        program = parse_source("void f() { if (a == 1) return; else i++; }")
        assert format_ast(program).splitlines()[3:] == [
            "      If ((a == 1))",
            "        Then:",
            "          Return",
            "        Else:",
            "          Expr: (i++)",
        ]

    def test_for_and_declaration(self):
        """For headers and declarations print inline."""
        program = parse_source("void f() { int a, b = 2; for (int i = 0; i < a; ++i) ; }")
        assert format_ast(program).splitlines()[3:] == [
            "      Declare: int a, b = 2",
            "      For (int i = 0; (i < a); (++i))",
            "        Expr: ",
        ]

    def test_directive_and_error(self):
        """Directives and ErrorNodes have their own lines."""
        program = parse_source("#define N 3\nint main {}")
        assert format_ast(program) == (
            "Program\n"
            "  Directive: #define N 3\n"
            "  Error: Expected '(' after function name"
        )

    def test_unknown(self):
        """Unknown tokens are marked in expressions."""
        program = parse_source("void f() { x = @; }")
        assert format_ast(program).splitlines()[-1] == "      Expr: (x = <unknown @>)"

    def test_printer_reusable(self):
        """One printer can print several trees."""
        printer = ASTPrinter()
        first = printer.print(parse_source("int a() {}"))
        second = printer.print(parse_source("int a() {}"))
        assert first == second
