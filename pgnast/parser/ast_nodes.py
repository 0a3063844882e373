"""
Abstract Syntax Tree node definitions for PGN game records.

Nodes are immutable; sequences are stored as tuples. The parser gathers a
node's parts first and constructs it once.
"""

from dataclasses import dataclass, field
from typing import ClassVar, Dict, Optional, Tuple, Union
from enum import Enum, auto


PIECES = 'KQRBN'
RESULTS = ('1-0', '0-1', '1/2-1/2', '*')


class NodeType(Enum):
    """AST node types."""
    PROGRAM = auto()
    GAME = auto()
    HEADER = auto()
    MOVE = auto()
    CASTLE = auto()
    SQUARE = auto()
    RESULT = auto()


class ASTNode:
    """Base class for all AST nodes."""
    node_type: ClassVar[NodeType]


@dataclass(frozen=True)
class Square(ASTNode):
    """Destination square: file letter and rank number."""
    node_type: ClassVar[NodeType] = NodeType.SQUARE

    file: str = ""
    rank: int = 0

    def __str__(self):
        return f"{self.file}{self.rank}"


@dataclass(frozen=True)
class Header(ASTNode):
    """Tag pair: [Key "Value"]."""
    node_type: ClassVar[NodeType] = NodeType.HEADER

    key: str
    value: str
    line: int = 0

    def __repr__(self):
        return f"Header({self.key}={self.value!r})"


@dataclass(frozen=True)
class Move(ASTNode):
    """A standard half-move.

    piece is None for pawn moves. from_file/from_rank hold the origin
    square hints written in the source (Nbd7, R1e2, exd5); they are never
    resolved against a position.
    """
    node_type: ClassVar[NodeType] = NodeType.MOVE

    to: Square = field(default_factory=Square)
    number: Optional[int] = None
    piece: Optional[str] = None
    from_file: Optional[str] = None
    from_rank: Optional[int] = None
    capture: bool = False
    promotion: Optional[str] = None
    check: bool = False
    checkmate: bool = False
    line: int = 0

    @property
    def is_pawn(self) -> bool:
        return self.piece is None

    def san(self) -> str:
        """Render the move back to short algebraic notation."""
        parts = [self.piece or '', self.from_file or '']
        if self.from_rank is not None:
            parts.append(str(self.from_rank))
        if self.capture:
            parts.append('x')
        parts.append(str(self.to))
        if self.promotion:
            parts.append(f"={self.promotion}")
        if self.check:
            parts.append('+')
        elif self.checkmate:
            parts.append('#')
        return ''.join(parts)

    def __repr__(self):
        prefix = f"{self.number}." if self.number is not None else ""
        return f"Move({prefix}{self.san()})"


@dataclass(frozen=True)
class Castle(ASTNode):
    """Castling half-move (O-O or O-O-O)."""
    node_type: ClassVar[NodeType] = NodeType.CASTLE

    long: bool = False
    number: Optional[int] = None
    check: bool = False
    checkmate: bool = False
    line: int = 0

    def san(self) -> str:
        text = 'O-O-O' if self.long else 'O-O'
        if self.check:
            text += '+'
        elif self.checkmate:
            text += '#'
        return text

    def __repr__(self):
        return f"Castle({self.san()})"


HalfMove = Union[Move, Castle]


@dataclass(frozen=True)
class Result(ASTNode):
    """Game termination marker; value is "" when none was written."""
    node_type: ClassVar[NodeType] = NodeType.RESULT

    value: str = ""
    line: int = 0

    @property
    def present(self) -> bool:
        return self.value != ""

    def __repr__(self):
        return f"Result({self.value!r})"


@dataclass(frozen=True)
class Game(ASTNode):
    """One game record: headers, then moves, then the result."""
    node_type: ClassVar[NodeType] = NodeType.GAME

    headers: Tuple[Header, ...] = ()
    moves: Tuple[HalfMove, ...] = ()
    result: Result = field(default_factory=Result)
    line: int = 0

    def header(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Value of the first header with this key."""
        for h in self.headers:
            if h.key == key:
                return h.value
        return default

    @property
    def tags(self) -> Dict[str, str]:
        # Duplicate keys are allowed; the last one wins here
        return {h.key: h.value for h in self.headers}

    def __repr__(self):
        return (f"Game({len(self.headers)} headers, {len(self.moves)} moves, "
                f"result={self.result.value!r})")


@dataclass(frozen=True)
class Program(ASTNode):
    """Root node: every game in the source, in order."""
    node_type: ClassVar[NodeType] = NodeType.PROGRAM

    games: Tuple[Game, ...] = ()

    def __iter__(self):
        return iter(self.games)

    def __len__(self):
        return len(self.games)

    def __repr__(self):
        return f"Program({len(self.games)} games)"
