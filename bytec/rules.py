"""
Byte Operator Rules

Precedence tiers and the static table telling the compiler, for each token
kind, how it starts an expression, how it continues one, and how tightly it
binds. The table is data only: handlers are named by enum variants, and the
compiler dispatches on them.
"""

from enum import Enum, IntEnum, auto
from typing import Dict, NamedTuple
from .tokens import TokenType


class Precedence(IntEnum):
    """Binding tiers, loosest first."""

    NONE = 0
    ASSIGNMENT = 1   # =, &=, |=, *=, +=, -=, /=, **=, %=, ^=, //=, ~=
    OR = 2           # or
    AND = 3          # and
    EQUALITY = 4     # ==, !=
    COMPARISON = 5   # <, >, <=, >=
    BIT_OR = 6       # |
    BIT_XOR = 7      # ^
    BIT_AND = 8      # &
    RANGE = 9        # ..
    TERM = 10        # +, -
    FACTOR = 11      # *, /, %, **, //
    UNARY = 12       # !, -, ~
    CALL = 13        # ., ()
    PRIMARY = 14

    def next(self) -> 'Precedence':
        """The tier one step tighter than this one."""
        return Precedence(min(self + 1, Precedence.PRIMARY))


class PrefixRule(Enum):
    """How a token begins an expression."""

    NONE = auto()
    GROUPING = auto()
    UNARY = auto()
    NUMBER = auto()


class InfixRule(Enum):
    """How a token continues an expression after its left operand."""

    NONE = auto()
    BINARY = auto()


class ParseRule(NamedTuple):
    prefix: PrefixRule
    infix: InfixRule
    precedence: Precedence


_NO_RULE = ParseRule(PrefixRule.NONE, InfixRule.NONE, Precedence.NONE)

RULES: Dict[TokenType, ParseRule] = {
    TokenType.LEFT_PAREN: ParseRule(PrefixRule.GROUPING, InfixRule.NONE, Precedence.NONE),
    TokenType.PLUS: ParseRule(PrefixRule.NONE, InfixRule.BINARY, Precedence.TERM),
    TokenType.MINUS: ParseRule(PrefixRule.UNARY, InfixRule.BINARY, Precedence.TERM),
    TokenType.STAR: ParseRule(PrefixRule.NONE, InfixRule.BINARY, Precedence.FACTOR),
    TokenType.SLASH: ParseRule(PrefixRule.NONE, InfixRule.BINARY, Precedence.FACTOR),
    TokenType.NUMBER: ParseRule(PrefixRule.NUMBER, InfixRule.NONE, Precedence.NONE),
}

# Every other kind takes no part in expressions yet
for _type in TokenType:
    RULES.setdefault(_type, _NO_RULE)
del _type


def get_rule(type: TokenType) -> ParseRule:
    """Look up the parse rule for a token kind."""
    return RULES[type]
