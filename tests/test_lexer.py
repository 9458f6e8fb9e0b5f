"""
Unit tests for the Lexer module
"""

import pytest
from pycmm.lexer import Lexer, Token, TokenType, LexerError, MAX_INT


def _types(code):
    return [t.type for t in Lexer(code).tokenize()]


class TestLexerBasics:
    """Test basic lexer functionality"""

    def test_empty_input(self):
        lexer = Lexer("")
        tokens = lexer.tokenize()
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF
        assert tokens[0].value is None
        assert (tokens[0].line, tokens[0].column) == (1, 1)

    def test_single_identifier(self):
        tokens = Lexer("hello").tokenize()
        assert len(tokens) == 2
        assert tokens[0].type == TokenType.ID
        assert tokens[0].value == "hello"
        assert tokens[1].type == TokenType.EOF

    def test_identifier_with_underscores_and_digits(self):
        tokens = Lexer("_tmp1 x_2").tokenize()
        assert [t.value for t in tokens[:2]] == ["_tmp1", "x_2"]

    def test_positions(self):
        tokens = Lexer("x = 3;").tokenize()
        assert [(t.line, t.column) for t in tokens] == [(1, 1), (1, 3), (1, 5), (1, 6), (1, 7)]

    def test_positions_across_lines(self):
        tokens = Lexer("a\n  b").tokenize()
        assert (tokens[1].line, tokens[1].column) == (2, 3)
        assert (tokens[2].line, tokens[2].column) == (2, 4)

    def test_token_repr(self):
        assert repr(Token(TokenType.ID, "x", 2, 5)) == "Token(ID, 'x', 2:5)"

    def test_constructor_takes_only_source(self):
        lexer = Lexer("x")
        assert lexer.source == "x"
        assert not hasattr(lexer, "filename")
        with pytest.raises(TypeError):
            Lexer("x", "prog.cmm")


class TestKeywords:
    """Test reserved word recognition"""

    def test_all_reserved_words(self):
        code = "int bool void true false struct cin cout if else while repeat return"
        assert _types(code)[:-1] == [
            TokenType.INT,
            TokenType.BOOL,
            TokenType.VOID,
            TokenType.TRUE,
            TokenType.FALSE,
            TokenType.STRUCT,
            TokenType.CIN,
            TokenType.COUT,
            TokenType.IF,
            TokenType.ELSE,
            TokenType.WHILE,
            TokenType.REPEAT,
            TokenType.RETURN,
        ]

    def test_keyword_vs_identifier(self):
        tokens = Lexer("int integer").tokenize()
        assert tokens[0].type == TokenType.INT
        assert tokens[1].type == TokenType.ID
        assert tokens[1].value == "integer"

    def test_keywords_are_case_sensitive(self):
        assert _types("If WHILE")[:-1] == [TokenType.ID, TokenType.ID]


class TestLiterals:
    """Test integer and string literals"""

    def test_integer(self):
        tokens = Lexer("42 0").tokenize()
        assert tokens[0].type == TokenType.INTLITERAL
        assert tokens[0].value == 42
        assert tokens[1].value == 0

    def test_integer_at_limit(self):
        lexer = Lexer("2147483647")
        tokens = lexer.tokenize()
        assert tokens[0].value == MAX_INT
        assert lexer.warnings == []

    def test_integer_too_large_is_clamped(self):
        lexer = Lexer("x = 99999999999;")
        tokens = lexer.tokenize()
        assert tokens[2].type == TokenType.INTLITERAL
        assert tokens[2].value == MAX_INT
        assert lexer.warnings == ["Integer literal too large; using max value at 1:5"]
        assert not lexer.has_errors()

    def test_string_keeps_raw_text(self):
        tokens = Lexer('"hi\\n"').tokenize()
        assert tokens[0].type == TokenType.STRINGLITERAL
        assert tokens[0].value == '"hi\\n"'

    def test_string_with_all_escapes(self):
        lexer = Lexer(r'"\n\t\'\"\\"')
        tokens = lexer.tokenize()
        assert not lexer.has_errors()
        assert tokens[0].value == r'"\n\t\'\"\\"'

    def test_empty_string(self):
        tokens = Lexer('""').tokenize()
        assert tokens[0].value == '""'


class TestOperators:
    """Test operator and delimiter recognition"""

    def test_arithmetic(self):
        assert _types("+ - * /")[:-1] == [TokenType.PLUS, TokenType.MINUS, TokenType.TIMES, TokenType.DIVIDE]

    def test_two_character_symbols(self):
        assert _types("++ -- << >> <= >= == != && ||")[:-1] == [
            TokenType.PLUSPLUS,
            TokenType.MINUSMINUS,
            TokenType.WRITE,
            TokenType.READ,
            TokenType.LESSEQ,
            TokenType.GREATEREQ,
            TokenType.EQUALS,
            TokenType.NOTEQUALS,
            TokenType.AND,
            TokenType.OR,
        ]

    def test_single_character_symbols(self):
        assert _types("! < > = . ( ) { } ; ,")[:-1] == [
            TokenType.NOT,
            TokenType.LESS,
            TokenType.GREATER,
            TokenType.ASSIGN,
            TokenType.DOT,
            TokenType.LPAREN,
            TokenType.RPAREN,
            TokenType.LCURLY,
            TokenType.RCURLY,
            TokenType.SEMICOLON,
            TokenType.COMMA,
        ]

    def test_longest_match(self):
        assert _types("a--b")[:-1] == [TokenType.ID, TokenType.MINUSMINUS, TokenType.ID]
        assert _types("a- -b")[:-1] == [TokenType.ID, TokenType.MINUS, TokenType.MINUS, TokenType.ID]

    def test_dot_access(self):
        assert _types("p.x")[:-1] == [TokenType.ID, TokenType.DOT, TokenType.ID]


class TestComments:
    """Test comment skipping"""

    def test_hash_and_slash_comments(self):
        tokens = Lexer("x # comment\ny // another\n").tokenize()
        assert [t.value for t in tokens[:-1]] == ["x", "y"]
        assert (tokens[1].line, tokens[1].column) == (2, 1)

    def test_comment_at_end_of_input(self):
        assert _types("x // no newline") == [TokenType.ID, TokenType.EOF]

    def test_single_slash_is_divide(self):
        assert _types("a / b")[1] == TokenType.DIVIDE


class TestLexerErrors:
    """Test error collection"""

    def test_illegal_character(self):
        lexer = Lexer("a @ b")
        tokens = lexer.tokenize()
        assert lexer.has_errors()
        err = lexer.get_errors()[0]
        assert isinstance(err, LexerError)
        assert err.message == "Illegal character ignored: '@'"
        assert (err.line, err.column) == (1, 3)
        assert str(err) == "Illegal character ignored: '@' at 1:3"
        # Scanning continues after the bad character.
        assert [t.value for t in tokens[:-1]] == ["a", "b"]

    def test_single_ampersand_is_illegal(self):
        lexer = Lexer("a & b")
        lexer.tokenize()
        assert lexer.get_errors()[0].message == "Illegal character ignored: '&'"

    def test_unterminated_string(self):
        lexer = Lexer('x "abc\ny')
        tokens = lexer.tokenize()
        err = lexer.get_errors()[0]
        assert err.message == "Unterminated string literal ignored"
        assert (err.line, err.column) == (1, 3)
        assert [t.value for t in tokens[:-1]] == ["x", "y"]

    def test_unterminated_string_at_end_of_input(self):
        lexer = Lexer('"abc')
        tokens = lexer.tokenize()
        assert lexer.get_errors()[0].message == "Unterminated string literal ignored"
        assert tokens[0].type == TokenType.EOF

    def test_bad_escape(self):
        lexer = Lexer('"a\\qb" x')
        tokens = lexer.tokenize()
        assert lexer.get_errors()[0].message == "String literal with bad escaped character ignored"
        assert tokens[0].type == TokenType.ID

    def test_unterminated_with_bad_escape(self):
        lexer = Lexer('"a\\qb')
        lexer.tokenize()
        assert lexer.get_errors()[0].message == "Unterminated string literal with bad escaped character ignored"

    def test_multiple_errors_are_collected(self):
        lexer = Lexer("@ $")
        lexer.tokenize()
        assert len(lexer.get_errors()) == 2

    def test_tokenize_resets_state(self):
        lexer = Lexer("@")
        lexer.tokenize()
        lexer.tokenize()
        assert len(lexer.get_errors()) == 1


@pytest.mark.parametrize("code", ["int", "x1", "12", "<=", '"s"'])
def test_single_token_then_eof(code):
    tokens = Lexer(code).tokenize()
    assert len(tokens) == 2
    assert tokens[-1].type == TokenType.EOF
