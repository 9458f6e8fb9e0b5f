"""
Lexical Analyzer (Lexer) for the C-- front end

Converts source code into a stream of tokens for the parser.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, List, Optional, Union


class TokenType(Enum):
    """Token types for the C-- lexer"""
    # Literals
    INTLITERAL = auto()
    STRINGLITERAL = auto()

    # Identifiers
    ID = auto()

    # Reserved words
    INT = auto()
    BOOL = auto()
    VOID = auto()
    TRUE = auto()
    FALSE = auto()
    STRUCT = auto()
    CIN = auto()
    COUT = auto()
    IF = auto()
    ELSE = auto()
    WHILE = auto()
    REPEAT = auto()
    RETURN = auto()

    # Operators
    PLUS = auto()                # +
    MINUS = auto()               # -
    TIMES = auto()               # *
    DIVIDE = auto()              # /
    NOT = auto()                 # !
    AND = auto()                 # &&
    OR = auto()                  # ||
    EQUALS = auto()              # ==
    NOTEQUALS = auto()           # !=
    LESS = auto()                # <
    GREATER = auto()             # >
    LESSEQ = auto()              # <=
    GREATEREQ = auto()           # >=
    ASSIGN = auto()              # =
    PLUSPLUS = auto()            # ++
    MINUSMINUS = auto()          # --
    READ = auto()                # >>
    WRITE = auto()               # <<
    DOT = auto()                 # .

    # Delimiters
    LPAREN = auto()              # (
    RPAREN = auto()              # )
    LCURLY = auto()              # {
    RCURLY = auto()              # }
    SEMICOLON = auto()           # ;
    COMMA = auto()               # ,

    # Special
    EOF = auto()


@dataclass(frozen=True)
class Token:
    """Represents a lexical token.

    ``value`` is the payload: the integer for INTLITERAL, the raw literal
    text (quotes included) for STRINGLITERAL, the name for ID and the
    spelling for everything else.
    """
    type: TokenType
    value: Optional[Union[int, str]]
    line: int
    column: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {repr(self.value)}, {self.line}:{self.column})"


class LexerError(Exception):
    """Lexer error with line and column information"""
    def __init__(self, message: str, line: int, column: int):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(f"{message} at {line}:{column}")


MAX_INT = 2147483647

KEYWORDS: Dict[str, TokenType] = {
    'int': TokenType.INT,
    'bool': TokenType.BOOL,
    'void': TokenType.VOID,
    'true': TokenType.TRUE,
    'false': TokenType.FALSE,
    'struct': TokenType.STRUCT,
    'cin': TokenType.CIN,
    'cout': TokenType.COUT,
    'if': TokenType.IF,
    'else': TokenType.ELSE,
    'while': TokenType.WHILE,
    'repeat': TokenType.REPEAT,
    'return': TokenType.RETURN,
}

# Two-character symbols are tried before the single-character ones.
DOUBLE_SYMBOLS: Dict[str, TokenType] = {
    '++': TokenType.PLUSPLUS,
    '--': TokenType.MINUSMINUS,
    '<<': TokenType.WRITE,
    '>>': TokenType.READ,
    '<=': TokenType.LESSEQ,
    '>=': TokenType.GREATEREQ,
    '==': TokenType.EQUALS,
    '!=': TokenType.NOTEQUALS,
    '&&': TokenType.AND,
    '||': TokenType.OR,
}

SINGLE_SYMBOLS: Dict[str, TokenType] = {
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '*': TokenType.TIMES,
    '/': TokenType.DIVIDE,
    '!': TokenType.NOT,
    '<': TokenType.LESS,
    '>': TokenType.GREATER,
    '=': TokenType.ASSIGN,
    '.': TokenType.DOT,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    '{': TokenType.LCURLY,
    '}': TokenType.RCURLY,
    ';': TokenType.SEMICOLON,
    ',': TokenType.COMMA,
}

ESCAPES = "nt'\"\\"
DIGITS = "0123456789"


class Lexer:
    """Lexical analyzer for C-- source code"""

    def __init__(self, source: str):
        """Initialize lexer with source code"""
        self.source = source
        self.position = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []
        self.errors: List[LexerError] = []
        self.warnings: List[str] = []

    def current_char(self) -> Optional[str]:
        """Get current character without consuming"""
        if self.position >= len(self.source):
            return None
        return self.source[self.position]

    def peek_char(self, offset: int = 1) -> Optional[str]:
        """Peek ahead at character"""
        pos = self.position + offset
        if pos >= len(self.source):
            return None
        return self.source[pos]

    def advance(self) -> Optional[str]:
        """Consume and return current character"""
        if self.position >= len(self.source):
            return None

        char = self.source[self.position]
        self.position += 1

        if char == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1

        return char

    def skip_whitespace(self) -> None:
        """Skip whitespace characters, newlines included"""
        while self.current_char() and self.current_char() in ' \t\r\n':
            self.advance()

    def skip_line_comment(self) -> None:
        """Skip a comment (// or #) up to the end of the line"""
        while self.current_char() and self.current_char() != '\n':
            self.advance()

    def read_string(self) -> Optional[str]:
        """Read string literal, returning its raw text (quotes included).

        Returns None when the literal is malformed; the problem has then
        already been recorded in ``errors``.
        """
        start_line = self.line
        start_column = self.column
        raw = self.advance()  # opening quote
        bad_escape = False

        while self.current_char() and self.current_char() not in '"\n':
            if self.current_char() == '\\':
                raw += self.advance()
                next_char = self.current_char()
                if next_char is None or next_char == '\n':
                    break
                if next_char not in ESCAPES:
                    bad_escape = True
            raw += self.advance()

        if self.current_char() != '"':
            if bad_escape:
                msg = "Unterminated string literal with bad escaped character ignored"
            else:
                msg = "Unterminated string literal ignored"
            self.errors.append(LexerError(msg, start_line, start_column))
            return None

        raw += self.advance()  # closing quote
        if bad_escape:
            self.errors.append(
                LexerError("String literal with bad escaped character ignored", start_line, start_column)
            )
            return None
        return raw

    def read_number(self, line: int, column: int) -> int:
        """Read an integer literal, clamping values that do not fit in an int"""
        num_str = ""
        while self.current_char() and self.current_char() in DIGITS:
            num_str += self.advance()

        value = int(num_str)
        if value > MAX_INT:
            self.warnings.append(f"Integer literal too large; using max value at {line}:{column}")
            value = MAX_INT
        return value

    def read_identifier(self) -> str:
        """Read identifier or keyword"""
        ident = ""
        while self.current_char() and (self.current_char().isalnum() or self.current_char() == '_'):
            ident += self.advance()
        return ident

    def tokenize(self) -> List[Token]:
        """Tokenize entire source code"""
        self.position = 0
        self.line = 1
        self.column = 1
        self.tokens = []
        self.errors = []
        self.warnings = []

        while self.position < len(self.source):
            self.skip_whitespace()

            if self.position >= len(self.source):
                break

            # Save token start position
            token_line = self.line
            token_column = self.column

            char = self.current_char()

            # Comments
            if char == '#' or (char == '/' and self.peek_char() == '/'):
                self.skip_line_comment()
                continue

            # String literal
            if char == '"':
                value = self.read_string()
                if value is not None:
                    self.tokens.append(Token(TokenType.STRINGLITERAL, value, token_line, token_column))

            # Numbers
            elif char in DIGITS:
                number = self.read_number(token_line, token_column)
                self.tokens.append(Token(TokenType.INTLITERAL, number, token_line, token_column))

            # Identifiers and reserved words
            elif char.isalpha() or char == '_':
                ident = self.read_identifier()
                token_type = KEYWORDS.get(ident, TokenType.ID)
                self.tokens.append(Token(token_type, ident, token_line, token_column))

            # Operators and delimiters
            elif self.peek_char() is not None and char + self.peek_char() in DOUBLE_SYMBOLS:
                symbol = self.advance() + self.advance()
                self.tokens.append(Token(DOUBLE_SYMBOLS[symbol], symbol, token_line, token_column))

            elif char in SINGLE_SYMBOLS:
                self.advance()
                self.tokens.append(Token(SINGLE_SYMBOLS[char], char, token_line, token_column))

            else:
                self.errors.append(LexerError(f"Illegal character ignored: '{char}'", token_line, token_column))
                self.advance()

        # Add EOF token
        self.tokens.append(Token(TokenType.EOF, None, self.line, self.column))

        return self.tokens

    def has_errors(self) -> bool:
        """Check if any lexer errors occurred"""
        return len(self.errors) > 0

    def get_errors(self) -> List[LexerError]:
        """Get all lexer errors"""
        return self.errors
