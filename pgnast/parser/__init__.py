"""PGN Parser - Builds Abstract Syntax Tree from tokens."""

from .parser import Parser
from .ast_nodes import *

__all__ = ['Parser', 'NodeType', 'ASTNode', 'Program', 'Game', 'Header',
           'Move', 'Castle', 'Square', 'Result', 'PIECES', 'RESULTS']
