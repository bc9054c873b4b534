"""Lexer package."""

from runecfg.lexer.lexer import Lexer, lex
from runecfg.lexer.tokens import KEYWORDS, Token, TokenFlags, TokenKind, eof_token

__all__ = [
    "KEYWORDS",
    "Lexer",
    "Token",
    "TokenFlags",
    "TokenKind",
    "eof_token",
    "lex",
]
