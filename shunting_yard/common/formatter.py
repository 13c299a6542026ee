"""Render token sequences for humans."""
from typing import Iterable, List

from shunting_yard.common.models import Token


def dump_rpn(tokens: Iterable[Token]) -> str:
    """
    Render tokens as ``TYPE VALUE`` lines, types right-aligned.

    :param tokens: Tokens to render, usually an RPN sequence

    :return: One line per token
    :rtype: str
    """
    tokens = list(tokens)
    width = max((len(token.type) for token in tokens), default=0)
    lines: List[str] = [f"{token.type:>{width}} {token.value}" for token in tokens]
    return "\n".join(lines)


def join_rpn(tokens: Iterable[Token]) -> str:
    """Render token values on a single line, separated by spaces."""
    return " ".join(token.value for token in tokens)
