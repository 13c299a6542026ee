"""Errors raised while tokenizing or converting an expression."""
from typing import Optional


class ShuntingYardError(ValueError):
    """
    Base class for every error raised on a malformed expression.

    :param str message: Human readable description of the problem
    :param str expression: The expression text, or an identifier of the token sequence
    """

    def __init__(self, message: str, expression: str):
        self.message = message
        self.expression = expression
        super().__init__(f"{message}: {expression}")


class LexError(ShuntingYardError):
    """No token rule recognizes the input at a given position."""

    def __init__(self, expression: str, position: int):
        self.position = position
        super().__init__(f"No token rule matches at position {position}", expression)


class ConversionError(ShuntingYardError):
    """The token sequence cannot be converted into RPN."""


class UnmatchedBracketError(ConversionError):
    """A parameter separator or a closing bracket has no opening bracket."""

    def __init__(self, expression: str, message: Optional[str] = None):
        super().__init__(message or "Could not find opening bracket in expression", expression)


class MismatchedBracketsError(ConversionError):
    """An opening bracket is still on the operator stack once the input is consumed."""

    def __init__(self, expression: str):
        super().__init__("Brackets are not balanced in expression", expression)


class UnknownOperatorError(ConversionError):
    """An operator token has no entry in the precedence table."""

    def __init__(self, expression: str, operator: str):
        self.operator = operator
        super().__init__(f"No precedence defined for operator {operator!r} in expression", expression)
