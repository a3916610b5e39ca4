"""
Byte Token Definitions

Defines all token kinds and the Token span view produced by the scanner.
"""

from enum import Enum, auto
from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .errors import Diagnostic


class TokenType(Enum):
    """All token kinds in Byte."""

    # Delimiters
    LEFT_PAREN = auto()        # (
    RIGHT_PAREN = auto()       # )
    LEFT_BRACKET = auto()      # [
    RIGHT_BRACKET = auto()     # ]
    LEFT_BRACE = auto()        # {
    RIGHT_BRACE = auto()       # }
    COMMA = auto()             # ,
    COLON = auto()             # :
    SEMICOLON = auto()         # ;
    HASH = auto()              # #
    DOT = auto()               # .
    DOT_DOT = auto()           # ..

    # Operators
    PLUS = auto()              # +
    MINUS = auto()             # -
    STAR = auto()              # *
    SLASH = auto()             # /
    PERCENT = auto()           # %
    STAR_STAR = auto()         # **
    SLASH_SLASH = auto()       # //
    EQUAL = auto()             # =
    GREATER_THAN = auto()      # >
    LESS_THAN = auto()         # <
    BANG = auto()              # !

    # Bitwise
    TILDE = auto()             # ~
    PIPE = auto()              # |
    AMP = auto()               # &
    CARET = auto()             # ^

    # Compound assignment and comparison
    PLUS_EQUAL = auto()        # +=
    MINUS_EQUAL = auto()       # -=
    STAR_EQUAL = auto()        # *=
    SLASH_EQUAL = auto()       # /=
    PERCENT_EQUAL = auto()     # %=
    STAR_STAR_EQUAL = auto()   # **=
    SLASH_SLASH_EQUAL = auto() # //=
    EQUAL_EQUAL = auto()       # ==
    GREATER_EQUAL = auto()     # >=
    LESS_EQUAL = auto()        # <=
    BANG_EQUAL = auto()        # !=

    TILDE_EQUAL = auto()       # ~=
    PIPE_EQUAL = auto()        # |=
    AMP_EQUAL = auto()         # &=
    CARET_EQUAL = auto()       # ^=

    # Literals
    IDENTIFIER = auto()
    STRING = auto()
    # Portion of a string literal preceding an embedded ${...} expression:
    #   "a ${b} c ${d} e"
    # scans as INTERPOLATION "a ", IDENTIFIER b, INTERPOLATION " c ",
    # IDENTIFIER d, STRING " e".
    INTERPOLATION = auto()
    NUMBER = auto()

    # Keywords
    AND = auto()
    OR = auto()
    NOT = auto()
    NIL = auto()
    IN = auto()
    IMPORT = auto()
    CLASS = auto()
    IS = auto()
    SUPER = auto()
    IF = auto()
    ELSE = auto()
    TRUE = auto()
    FALSE = auto()
    FN = auto()
    FOR = auto()
    PRINT = auto()
    RETURN = auto()
    THIS = auto()
    LET = auto()
    WHILE = auto()

    # Special
    NEWLINE = auto()
    EOF = auto()
    ERROR = auto()


# Reserved words
KEYWORDS = {
    'and': TokenType.AND,
    'or': TokenType.OR,
    'not': TokenType.NOT,
    'nil': TokenType.NIL,
    'in': TokenType.IN,
    'is': TokenType.IS,
    'import': TokenType.IMPORT,
    'class': TokenType.CLASS,
    'if': TokenType.IF,
    'else': TokenType.ELSE,
    'true': TokenType.TRUE,
    'false': TokenType.FALSE,
    'fn': TokenType.FN,
    'for': TokenType.FOR,
    'print': TokenType.PRINT,
    'return': TokenType.RETURN,
    'super': TokenType.SUPER,
    'this': TokenType.THIS,
    'let': TokenType.LET,
    'while': TokenType.WHILE,
}


@dataclass(frozen=True)
class Token:
    """
    A single token: a read-only view into the source it was scanned from.

    The token never copies source text; ``lexeme`` and ``text`` slice the
    referenced source on demand. ERROR tokens carry a diagnostic instead of
    a meaningful span.
    """

    type: TokenType
    start: int
    length: int
    line: int
    source: str = field(repr=False, compare=False)
    diagnostic: Optional['Diagnostic'] = None

    def __repr__(self) -> str:
        if self.type == TokenType.ERROR:
            return f"Token(ERROR, {self.diagnostic!r}, line={self.line})"
        return f"Token({self.type.name}, {self.lexeme!r}, line={self.line})"

    @property
    def end(self) -> int:
        return self.start + self.length

    @property
    def lexeme(self) -> str:
        """The exact source text this token spans."""
        return self.source[self.start:self.end]

    @property
    def text(self) -> str:
        """
        The literal content of the token.

        For STRING and INTERPOLATION tokens this drops the opening delimiter
        (a quote, or the ``}`` closing an embedded expression) and the closing
        one (a quote, or ``${``). Every other kind yields its lexeme.
        """
        if self.type == TokenType.STRING:
            return self.source[self.start + 1:self.end - 1]
        if self.type == TokenType.INTERPOLATION:
            return self.source[self.start + 1:self.end - 2]
        return self.lexeme
