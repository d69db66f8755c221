# =============================================================================
# test_lexer.py - Lexer Unit Tests
# =============================================================================
# Tests for the minic lexer/tokenizer.
#
# Test coverage includes:
#   - Keyword, identifier and number classification
#   - String literals with escapes, unterminated quotes
#   - Operators (one and two character), separators and brackets
#   - Preprocessor lines
#   - Line and block comments, hoisted and in source order
#   - Undefined characters
#   - Token positions
# =============================================================================

import pytest
from minic.lexer import (
    KEYWORDS,
    Lexer,
    Token,
    TokenKind,
    classify_lexeme,
    tokenize,
)


# =============================================================================
# Helper Functions
# =============================================================================

def kinds(source: str, **options) -> list:
    """Tokenize source and return just the token kinds."""
    return [t.kind for t in tokenize(source, **options)]


def lexemes(source: str, **options) -> list:
    """Tokenize source and return just the lexemes."""
    return [t.lexeme for t in tokenize(source, **options)]


# =============================================================================
# Basic Token Recognition Tests
# =============================================================================

class TestBasicTokens:
    """Test basic token recognition for simple inputs."""

    def test_empty_source(self):
        """Empty source produces no tokens."""
        assert tokenize("") == []

    def test_whitespace_only(self):
        """Whitespace-only source produces no tokens."""
        assert tokenize("   \n\t  \n  ") == []

    @pytest.mark.parametrize("word", KEYWORDS)
    def test_keywords(self, word):
        """Every reserved word lexes as a KEYWORD."""
        assert tokenize(word) == [Token(TokenKind.KEYWORD, word)]

    def test_identifiers(self):
        """Names that are not reserved words are identifiers."""
        tokens = tokenize("main _x x1 while_ Int")
        assert all(t.kind == TokenKind.IDENTIFIER for t in tokens)
        assert [t.lexeme for t in tokens] == ["main", "_x", "x1", "while_", "Int"]

    def test_keyword_prefix_is_identifier(self):
        """A keyword followed by more word characters is one identifier."""
        assert tokenize("integer") == [Token(TokenKind.IDENTIFIER, "integer")]

    def test_simple_declaration(self):
        """Test a complete declaration statement."""
        assert kinds("int x = 10;") == [
            TokenKind.KEYWORD,
            TokenKind.IDENTIFIER,
            TokenKind.OPERATOR,
            TokenKind.NUMBER,
            TokenKind.SEPARATOR,
        ]


# =============================================================================
# Number Tests
# =============================================================================

class TestNumbers:
    """Test numeric literal recognition."""

    @pytest.mark.parametrize("text", ["0", "42", "0x1F", "0xff", "12e5", "7E3"])
    def test_number_forms(self, text):
        """Decimal, hex and exponent forms are single NUMBER tokens."""
        assert tokenize(text) == [Token(TokenKind.NUMBER, text)]

    def test_fraction_splits_at_dot(self):
        """A dot always lexes as a separator, so 3.14 is three tokens."""
        assert tokenize("3.14") == [
            Token(TokenKind.NUMBER, "3"),
            Token(TokenKind.SEPARATOR, "."),
            Token(TokenKind.NUMBER, "14"),
        ]

    def test_digit_led_word_is_undefined(self):
        """A run starting with a digit that is not a number is UNDEFINED."""
        assert tokenize("1abc") == [Token(TokenKind.UNDEFINED, "1abc")]


# =============================================================================
# String Literal Tests
# =============================================================================

class TestStrings:
    """Test string literal recognition."""

    def test_simple_string(self):
        """A double-quoted string is one token including its quotes."""
        assert tokenize('"hello world"') == [Token(TokenKind.STRING_LITERAL, '"hello world"')]

    def test_escaped_quote(self):
        """A backslash-escaped quote does not end the string."""
        tokens = tokenize('x = "a\\"b";')
        assert tokens[2] == Token(TokenKind.STRING_LITERAL, '"a\\"b"')
        assert tokens[3] == Token(TokenKind.SEPARATOR, ";")

    def test_comment_markers_inside_string(self):
        """// inside a string does not start a comment."""
        assert kinds('"a // b"') == [TokenKind.STRING_LITERAL]

    def test_unterminated_string(self):
        """A lone quote is UNDEFINED and the rest lexes normally."""
        assert tokenize('"abc') == [
            Token(TokenKind.UNDEFINED, '"'),
            Token(TokenKind.IDENTIFIER, "abc"),
        ]


# =============================================================================
# Operator, Separator and Bracket Tests
# =============================================================================

class TestOperators:
    """Test operator, separator and bracket recognition."""

    @pytest.mark.parametrize("op", ["==", "!=", "<=", ">=", "++", "--", "->", "&&", "||"])
    def test_two_char_operators(self, op):
        """Two-character operators are a single token."""
        assert tokenize(f"a{op}b") == [
            Token(TokenKind.IDENTIFIER, "a"),
            Token(TokenKind.OPERATOR, op),
            Token(TokenKind.IDENTIFIER, "b"),
        ]

    @pytest.mark.parametrize("op", list("-+*/%=<>&^|!~"))
    def test_one_char_operators(self, op):
        """Single-character operators."""
        assert tokenize(op) == [Token(TokenKind.OPERATOR, op)]

    def test_operator_does_not_absorb_operand(self):
        """'+' followed by a digit stays a one-character operator."""
        assert lexemes("a+2") == ["a", "+", "2"]

    def test_unknown_pair_splits(self):
        """A pair that is not a two-character operator lexes as two tokens."""
        assert lexemes("x=-1") == ["x", "=", "-", "1"]

    def test_separators(self):
        """; , . and : are separators."""
        tokens = tokenize("; , . :")
        assert all(t.kind == TokenKind.SEPARATOR for t in tokens)
        assert [t.lexeme for t in tokens] == [";", ",", ".", ":"]

    def test_brackets(self):
        """Parentheses and braces have their own kinds."""
        assert kinds("(){}") == [
            TokenKind.OPEN_PAREN,
            TokenKind.CLOSE_PAREN,
            TokenKind.OPEN_BRACE,
            TokenKind.CLOSE_BRACE,
        ]

    def test_square_brackets_undefined(self):
        """Square brackets are not part of the language."""
        assert tokenize("a[0]") == [
            Token(TokenKind.IDENTIFIER, "a"),
            Token(TokenKind.UNDEFINED, "["),
            Token(TokenKind.NUMBER, "0"),
            Token(TokenKind.UNDEFINED, "]"),
        ]


# =============================================================================
# Preprocessor Tests
# =============================================================================

class TestPreprocessor:
    """Test preprocessor line capture."""

    def test_include(self):
        """An include line is one PREPROCESSOR token."""
        assert tokenize("#include <stdio.h>") == [
            Token(TokenKind.PREPROCESSOR, "#include <stdio.h>")
        ]

    def test_define_is_trimmed(self):
        """Surrounding whitespace is trimmed from the directive."""
        tokens = tokenize("   #define X 1  ")
        assert tokens == [Token(TokenKind.PREPROCESSOR, "#define X 1")]
        assert tokens[0].column == 4

    def test_directive_then_code(self):
        """Only the # line is captured; later lines lex normally."""
        assert kinds("#include \"a.h\"\nint x;") == [
            TokenKind.PREPROCESSOR,
            TokenKind.KEYWORD,
            TokenKind.IDENTIFIER,
            TokenKind.SEPARATOR,
        ]


# =============================================================================
# Comment Tests
# =============================================================================

class TestComments:
    """Test line and block comments."""

    def test_line_comment(self):
        """A line comment runs to the end of the line."""
        assert tokenize("x; // hi there\ny") == [
            Token(TokenKind.IDENTIFIER, "x"),
            Token(TokenKind.SEPARATOR, ";"),
            Token(TokenKind.COMMENT, "// hi there"),
            Token(TokenKind.IDENTIFIER, "y"),
        ]

    def test_block_comment_hoisted(self):
        """By default block comments come before every other token."""
        assert lexemes("int x; /* c */ int y;") == [
            "/* c */", "int", "x", ";", "int", "y", ";",
        ]

    def test_block_comment_source_order(self):
        """With hoisting off, block comments stay where they were."""
        assert lexemes("int x; /* c */ int y;", hoist_block_comments=False) == [
            "int", "x", ";", "/* c */", "int", "y", ";",
        ]

    def test_trailing_block_comment_source_order(self):
        """A block comment after the last token is emitted last."""
        tokens = tokenize("int a; /* end */", hoist_block_comments=False)
        assert tokens[-1] == Token(TokenKind.COMMENT, "/* end */")

    def test_multiline_block_comment(self):
        """A block comment may span lines; positions after it stay exact."""
        tokens = tokenize("int a;\n/* one\ntwo */ int b;")
        assert tokens[0] == Token(TokenKind.COMMENT, "/* one\ntwo */")
        assert (tokens[0].line, tokens[0].column) == (2, 1)
        second_int = tokens[4]
        assert second_int == Token(TokenKind.KEYWORD, "int")
        assert (second_int.line, second_int.column) == (3, 8)

    def test_block_comment_hides_code(self):
        """Code inside a block comment produces no tokens of its own."""
        assert kinds("/* int x; */") == [TokenKind.COMMENT]

    def test_block_comment_hides_directive(self):
        """A # line inside a block comment is not a directive."""
        assert kinds("/*\n#define X\n*/") == [TokenKind.COMMENT]


# =============================================================================
# Undefined Token Tests
# =============================================================================

class TestUndefined:
    """Characters outside the language become UNDEFINED tokens."""

    def test_at_sign(self):
        """'@' is kept as an UNDEFINED token."""
        assert tokenize("x = @;") == [
            Token(TokenKind.IDENTIFIER, "x"),
            Token(TokenKind.OPERATOR, "="),
            Token(TokenKind.UNDEFINED, "@"),
            Token(TokenKind.SEPARATOR, ";"),
        ]

    def test_nothing_dropped(self):
        """Every non-whitespace character ends up in some token."""
        source = "int main(){ return a+b*2; } $ ` ?"
        assert "".join(lexemes(source)) == "".join(source.split())


# =============================================================================
# Position Tests
# =============================================================================

class TestPositions:
    """Test line and column tracking."""

    def test_columns(self):
        """Columns are 1-indexed."""
        tokens = tokenize("int main")
        assert (tokens[0].line, tokens[0].column) == (1, 1)
        assert (tokens[1].line, tokens[1].column) == (1, 5)

    def test_lines(self):
        """Line numbers advance on newlines."""
        tokens = tokenize("int\n  x")
        assert (tokens[1].line, tokens[1].column) == (2, 3)

    def test_location(self):
        """Token.location carries the filename."""
        token = tokenize("\n  y", filename="prog.c")[0]
        assert str(token.location("prog.c")) == "prog.c:2:3"

    def test_equality_ignores_position(self):
        """Tokens compare by kind and lexeme only."""
        assert Token(TokenKind.KEYWORD, "int", 1, 1) == Token(TokenKind.KEYWORD, "int", 5, 9)
        assert Token(TokenKind.KEYWORD, "int") != Token(TokenKind.IDENTIFIER, "int")


# =============================================================================
# Classification Tests
# =============================================================================

class TestClassifyLexeme:
    """Test classify_lexeme and its agreement with the lexer."""

    @pytest.mark.parametrize("text,kind", [
        ("while", TokenKind.KEYWORD),
        ("while_", TokenKind.IDENTIFIER),
        ("0x10", TokenKind.NUMBER),
        ("1.5", TokenKind.NUMBER),
        ('"s"', TokenKind.STRING_LITERAL),
        ("<=", TokenKind.OPERATOR),
        (";", TokenKind.SEPARATOR),
        ("{", TokenKind.OPEN_BRACE),
        ("// note", TokenKind.COMMENT),
        ("#include <stdio.h>", TokenKind.PREPROCESSOR),
        ("9lives", TokenKind.UNDEFINED),
        ("@", TokenKind.UNDEFINED),
    ])
    def test_classify(self, text, kind):
        """Lexemes are classified by the first matching category."""
        assert classify_lexeme(text) == kind

    def test_relex_lexemes(self):
        """Re-lexing the space-joined lexemes reproduces the kinds."""
        source = 'int f(int a) { if (a >= 1) return a * 2; return "no"; }'
        tokens = tokenize(source)
        relexed = tokenize(" ".join(t.lexeme for t in tokens))
        assert relexed == tokens

    def test_is_type_specifier(self):
        """Only primitive type keywords are type specifiers."""
        int_token, return_token = Lexer("int return").tokenize()
        assert int_token.is_type_specifier()
        assert not return_token.is_type_specifier()
