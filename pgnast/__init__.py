"""
PGN reader (pgnast) - Parses chess game records into a syntax tree.

This package provides a tokenizer and a recursive-descent parser for
PGN-style game records: bracketed headers, move text and a result marker.
"""

from .diagnostics import Diagnostic, Diagnostics, PGNSyntaxError
from .reader import PGNReader, ParseResult, parse

__version__ = "0.1.0"

__all__ = ['parse', 'PGNReader', 'ParseResult', 'Diagnostic', 'Diagnostics',
           'PGNSyntaxError']
