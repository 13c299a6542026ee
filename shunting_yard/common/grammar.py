"""
Reference grammar: strings, variables, functions, numbers and comparison/arithmetic operators.

Example: "azerty" / V1 + V2 * sin(10) >= 3
"""
from typing import Dict, List, Optional

from shunting_yard.common.converter import ShuntingYard, TraceFn
from shunting_yard.common.models import Associativity, ConverterConfig, TokenRule, discard

TYPE_STRING = "STRING"
TYPE_VARIABLE = "VARIABLE"
TYPE_FUNCTION = "FUNCTION"
TYPE_NUMERIC = "NUMERIC"
TYPE_PARAM_SEPARATOR = "PARAM_SEPARATOR"
TYPE_OPEN_BRACKET = "OPEN_BRACKET"
TYPE_CLOSE_BRACKET = "CLOSE_BRACKET"
TYPE_OPERATOR = "OPERATOR"
TYPE_SPACE = "SPACE"

# Order matters: the first matching rule wins
RULES: List[TokenRule] = [
    TokenRule(pattern=r'"(?:[^"\\]|\\["\\])+"', type=TYPE_STRING),
    TokenRule(pattern=r"V\d+", type=TYPE_VARIABLE),
    TokenRule(pattern=r"[a-z_]+[0-9]*", type=TYPE_FUNCTION),
    TokenRule(pattern=r"\d+", type=TYPE_NUMERIC),
    TokenRule(pattern=r",", type=TYPE_PARAM_SEPARATOR),
    TokenRule(pattern=r"\(", type=TYPE_OPEN_BRACKET),
    TokenRule(pattern=r"\)", type=TYPE_CLOSE_BRACKET),
    TokenRule(pattern=r"(<>|~|%|\+|\-|\*|/|\^|>=|<=|>|<|=|&)", type=TYPE_OPERATOR),
    TokenRule(pattern=r"\s+", type=TYPE_SPACE, transform=discard),
]

PRECEDENCES: Dict[str, int] = {
    "%": 4,
    "~": 4,
    "^": 4,
    "&": 3,
    "*": 3,
    "/": 3,
    "+": 2,
    "-": 2,
    ">": 1,
    "<": 1,
    ">=": 1,
    "<=": 1,
    "=": 1,
    "<>": 1,
}

ASSOCIATIVITIES: Dict[str, Associativity] = {
    op: Associativity.RIGHT if op in ("~", "%", "^") else Associativity.LEFT
    for op in PRECEDENCES
}

CONFIG = ConverterConfig(
    precedences=PRECEDENCES,
    associativities=ASSOCIATIVITIES,
    value_types={TYPE_VARIABLE, TYPE_STRING, TYPE_NUMERIC},
    function_types={TYPE_FUNCTION},
    operator_types={TYPE_OPERATOR},
    param_separator_type=TYPE_PARAM_SEPARATOR,
    open_bracket_type=TYPE_OPEN_BRACKET,
    close_bracket_type=TYPE_CLOSE_BRACKET,
)


def build_converter(trace: Optional[TraceFn] = None) -> ShuntingYard:
    """Return a converter wired with the reference grammar."""
    return ShuntingYard(CONFIG, RULES, trace=trace)
