"""Lexer."""

from scsspy.lexer.lexer import Lexer, dump_tokens, token_text
from scsspy.lexer.tokens import Token, TokenFlags, TokenKind

__all__ = [
    "Lexer",
    "Token",
    "TokenFlags",
    "TokenKind",
    "dump_tokens",
    "token_text",
]
