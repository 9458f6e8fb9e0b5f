"""
pycmm - C-- front end in pure Python

Scanner, recursive-descent parser, AST and a round-trippable unparser for
the C-- teaching language.
"""

__version__ = "0.1.0"
__author__ = "pycmm Contributors"
__license__ = "MIT"

from .lexer import Lexer, Token, TokenType, LexerError
from .parser import Parser, ParserError
from .unparser import Unparser, unparse
from .frontend import Frontend, UnparseResult, parse

__all__ = [
    'Lexer',
    'Token',
    'TokenType',
    'LexerError',
    'Parser',
    'ParserError',
    'Unparser',
    'unparse',
    'Frontend',
    'UnparseResult',
    'parse',
]
