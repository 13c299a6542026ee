"""Pydantic models shared by the lexer, the converter and the batch tools."""
from enum import Enum
from functools import cached_property
import re
from typing import Callable, Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# A transform receives the raw match and returns the token value, or None to drop the token
TransformFn = Callable[[re.Match], Optional[str]]


class Token(BaseModel):
    """A typed piece of an expression, e.g. ``Token(value="V1", type="VARIABLE")``."""

    model_config = ConfigDict(frozen=True)

    value: str = Field(..., description="Text of the token")
    type: str = Field(..., description="Type tag assigned by the matching rule")

    def __str__(self) -> str:
        return f"{self.type} {self.value}"


class TokenRule(BaseModel):
    """
    Associate a regular expression with a token type.

    Rules are tried in declaration order by the lexer, the first one matching
    at the cursor wins.
    """

    model_config = ConfigDict(frozen=True)

    pattern: re.Pattern = Field(..., description="Regular expression (string or compiled)")
    type: str = Field(..., description="Type tag of the produced tokens")
    transform: Optional[TransformFn] = Field(default=None, description="Optional match transform")

    @field_validator("pattern")
    def pattern_must_consume_input(cls, v: re.Pattern) -> re.Pattern:
        """Reject patterns that accept the empty string, they would never advance the cursor."""
        if v.match("") is not None:
            raise ValueError(f"Pattern {v.pattern!r} matches the empty string")
        return v


def discard(match: re.Match) -> Optional[str]:
    """Transform that drops the matched text (whitespace, comments)."""
    return None


class Associativity(str, Enum):
    """Grouping of operators sharing the same precedence."""

    LEFT = "left"
    RIGHT = "right"


class TokenKind(Enum):
    """Role of a token type in the shunting-yard algorithm."""

    VALUE = "value"
    FUNCTION = "function"
    OPERATOR = "operator"
    PARAM_SEPARATOR = "param_separator"
    OPEN_BRACKET = "open_bracket"
    CLOSE_BRACKET = "close_bracket"


class ConverterConfig(BaseModel):
    """
    Operator tables and token type classification used by the converter.

    Precedences and associativities are keyed by operator literal (``"+"``)
    or by token type. A higher precedence binds tighter.

    Example:
        ConverterConfig(
            precedences={"+": 1, "*": 2},
            associativities={"+": "left", "*": "left"},
            value_types={"NUMERIC"},
            function_types={"FUNCTION"},
            operator_types={"OPERATOR"},
            param_separator_type="COMMA",
            open_bracket_type="LPAREN",
            close_bracket_type="RPAREN",
        )
    """

    model_config = ConfigDict(frozen=True)

    precedences: Dict[str, int] = Field(..., description="Operator literal or type -> precedence")
    associativities: Dict[str, Associativity] = Field(default_factory=dict, description="Operator literal or type -> associativity")
    value_types: FrozenSet[str] = Field(..., description="Types treated as operands")
    function_types: FrozenSet[str] = Field(default_factory=frozenset, description="Types treated as function names")
    operator_types: FrozenSet[str] = Field(..., description="Types treated as operators")
    param_separator_type: str = Field(..., description="Type of the parameters' separator")
    open_bracket_type: str = Field(..., description="Type of the opening bracket")
    close_bracket_type: str = Field(..., description="Type of the closing bracket")

    @model_validator(mode="after")
    def classifications_must_be_disjoint(self) -> "ConverterConfig":
        """Ensure that a type tag plays one role only."""
        seen: Dict[str, str] = {}
        for role, types in self._classifications():
            for tag in types:
                if tag in seen:
                    raise ValueError(f"Type {tag!r} is classified both as {seen[tag]} and {role}")
                seen[tag] = role
        return self

    def _classifications(self):
        return [
            ("value", self.value_types),
            ("function", self.function_types),
            ("operator", self.operator_types),
            ("param_separator", {self.param_separator_type}),
            ("open_bracket", {self.open_bracket_type}),
            ("close_bracket", {self.close_bracket_type}),
        ]

    @cached_property
    def kinds(self) -> Dict[str, TokenKind]:
        """Dispatch table: token type -> TokenKind."""
        return {tag: TokenKind(role) for role, types in self._classifications() for tag in types}

    def kind_of(self, token: Token) -> Optional[TokenKind]:
        """Return the role of a token, or None for an unclassified type."""
        return self.kinds.get(token.type)

    def precedence_of(self, token: Token) -> Optional[int]:
        if token.value in self.precedences:
            return self.precedences[token.value]
        return self.precedences.get(token.type)

    def associativity_of(self, token: Token) -> Associativity:
        if token.value in self.associativities:
            return self.associativities[token.value]
        return self.associativities.get(token.type, Associativity.LEFT)


class ConversionResult(BaseModel):
    """Outcome of converting one expression: either the RPN or an error message."""

    expression: str = Field(..., description="Original infix expression")
    rpn: Optional[List[Token]] = Field(default=None, description="RPN tokens on success")
    error: Optional[str] = Field(default=None, description="Error message on failure")

    @property
    def ok(self) -> bool:
        return self.error is None
