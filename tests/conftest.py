"""Shared fixtures and expression-tree helpers."""
from typing import Dict, List

import pytest

from shunting_yard.common.converter import ShuntingYard
from shunting_yard.common.grammar import (
    CONFIG,
    PRECEDENCES,
    RULES,
    TYPE_CLOSE_BRACKET,
    TYPE_FUNCTION,
    TYPE_OPEN_BRACKET,
    TYPE_OPERATOR,
    TYPE_PARAM_SEPARATOR,
    build_converter,
)
from shunting_yard.common.lexer import Lexer
from shunting_yard.common.models import Token


# Number of arguments of the functions used in the tests
ARITIES: Dict[str, int] = {"sin": 1, "cos": 1, "max": 2, "f": 2, "g": 1, "clamp": 3}

RIGHT_ASSOCIATIVE = {"~", "%", "^"}


@pytest.fixture
def converter() -> ShuntingYard:
    """Converter wired with the reference grammar."""
    return build_converter()


@pytest.fixture
def lexer() -> Lexer:
    """Lexer wired with the reference grammar rules."""
    return Lexer(RULES)


def rpn_to_tree(rpn: List[Token]):
    """
    Build an expression tree from RPN with a postfix stack machine.

    Operators become ``(op, left, right)``, calls ``(name, arg1, ...)``, values stay as strings.
    """
    stack = []
    for token in rpn:
        if token.type == TYPE_OPERATOR:
            right = stack.pop()
            left = stack.pop()
            stack.append((token.value, left, right))
        elif token.type == TYPE_FUNCTION:
            arity = ARITIES[token.value]
            args = stack[len(stack) - arity:]
            del stack[len(stack) - arity:]
            stack.append((token.value, *args))
        else:
            stack.append(token.value)
    assert len(stack) == 1
    return stack[0]


class RecursiveDescentParser:
    """Independent precedence-climbing parser of the reference grammar."""

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    def peek(self):
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def next(self) -> Token:
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def expect(self, type_: str) -> Token:
        token = self.next()
        assert token.type == type_, f"expected {type_}, got {token}"
        return token

    def parse(self):
        tree = self.expression(1)
        assert self.peek() is None
        return tree

    def expression(self, min_precedence: int):
        left = self.primary()
        while True:
            token = self.peek()
            if token is None or token.type != TYPE_OPERATOR or PRECEDENCES[token.value] < min_precedence:
                return left
            self.next()
            precedence = PRECEDENCES[token.value]
            next_min = precedence if token.value in RIGHT_ASSOCIATIVE else precedence + 1
            right = self.expression(next_min)
            left = (token.value, left, right)

    def primary(self):
        token = self.next()
        if token.type == TYPE_OPEN_BRACKET:
            tree = self.expression(1)
            self.expect(TYPE_CLOSE_BRACKET)
            return tree
        if token.type == TYPE_FUNCTION:
            self.expect(TYPE_OPEN_BRACKET)
            args = [self.expression(1)]
            while self.peek() is not None and self.peek().type == TYPE_PARAM_SEPARATOR:
                self.next()
                args.append(self.expression(1))
            self.expect(TYPE_CLOSE_BRACKET)
            return (token.value, *args)
        assert CONFIG.kind_of(token) is not None
        return token.value


def parse_tree(tokens: List[Token]):
    """Parse infix tokens of the reference grammar into an expression tree."""
    return RecursiveDescentParser(tokens).parse()
