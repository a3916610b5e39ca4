"""
Byte Rule Table Tests
"""

import pytest
from bytec.rules import Precedence, PrefixRule, InfixRule, ParseRule, RULES, get_rule
from bytec.tokens import TokenType


class TestPrecedence:
    """Precedence tier ordering tests."""

    def test_tiers_are_strictly_ordered(self):
        order = [
            Precedence.NONE, Precedence.ASSIGNMENT, Precedence.OR, Precedence.AND,
            Precedence.EQUALITY, Precedence.COMPARISON, Precedence.BIT_OR,
            Precedence.BIT_XOR, Precedence.BIT_AND, Precedence.RANGE,
            Precedence.TERM, Precedence.FACTOR, Precedence.UNARY,
            Precedence.CALL, Precedence.PRIMARY,
        ]
        assert order == sorted(order)
        assert len(set(order)) == len(order)

    def test_next_is_one_tier_tighter(self):
        assert Precedence.TERM.next() == Precedence.FACTOR
        assert Precedence.FACTOR.next() == Precedence.UNARY
        assert Precedence.PRIMARY.next() == Precedence.PRIMARY


class TestRuleTable:
    """The table is total and self-consistent."""

    def test_every_token_kind_has_a_rule(self):
        assert set(RULES) == set(TokenType)

    @pytest.mark.parametrize("type", list(TokenType))
    def test_binding_tokens_have_infix_handlers(self, type):
        rule = get_rule(type)
        if rule.precedence > Precedence.NONE:
            assert rule.infix != InfixRule.NONE
        if rule.infix != InfixRule.NONE:
            assert rule.precedence > Precedence.NONE

    @pytest.mark.parametrize("type,expected", [
        (TokenType.LEFT_PAREN, ParseRule(PrefixRule.GROUPING, InfixRule.NONE, Precedence.NONE)),
        (TokenType.MINUS, ParseRule(PrefixRule.UNARY, InfixRule.BINARY, Precedence.TERM)),
        (TokenType.PLUS, ParseRule(PrefixRule.NONE, InfixRule.BINARY, Precedence.TERM)),
        (TokenType.STAR, ParseRule(PrefixRule.NONE, InfixRule.BINARY, Precedence.FACTOR)),
        (TokenType.SLASH, ParseRule(PrefixRule.NONE, InfixRule.BINARY, Precedence.FACTOR)),
        (TokenType.NUMBER, ParseRule(PrefixRule.NUMBER, InfixRule.NONE, Precedence.NONE)),
        (TokenType.RIGHT_PAREN, ParseRule(PrefixRule.NONE, InfixRule.NONE, Precedence.NONE)),
        (TokenType.EOF, ParseRule(PrefixRule.NONE, InfixRule.NONE, Precedence.NONE)),
    ])
    def test_rules(self, type, expected):
        assert get_rule(type) == expected
