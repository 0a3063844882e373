"""PGN Lexer - Tokenizes game records into tokens."""

from .lexer import Lexer, Token, TokenKind, tokenize

__all__ = ['Lexer', 'Token', 'TokenKind', 'tokenize']
