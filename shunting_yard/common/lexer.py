"""Split an expression into typed tokens using an ordered list of rules."""
import re
from typing import Iterable, List, Optional, Tuple

from shunting_yard.common.errors import LexError
from shunting_yard.common.logger import logger
from shunting_yard.common.models import Token, TokenRule


class Lexer:
    """
    Pattern-based tokenizer.

    Algorithm:
        1. Start with the cursor at position 0
        2. Try each rule, in declaration order, at the cursor
        3. The first rule matching at least one character wins (not the longest match)
        4. Apply the rule's transform, if any; a None result drops the token
        5. Advance the cursor by the length of the match

    Examples:
        - Rules: [(r"\\d+", NUMERIC), (r"\\+", OPERATOR), (r"\\s+", SPACE, discard)]
        - Input: "1 + 2"
        - Tokens: [NUMERIC 1, OPERATOR +, NUMERIC 2]
    """

    def __init__(self, rules: Iterable[TokenRule]):
        self.rules: List[TokenRule] = list(rules)

    def _match(self, text: str, position: int) -> Optional[Tuple[TokenRule, re.Match]]:
        """
        Find the first rule matching at a position.

        :param str text: Input expression
        :param int position: Cursor position

        :return: (rule, match) or None when no rule matches
        """
        for rule in self.rules:
            match = rule.pattern.match(text, position)
            # Zero-length matches would never move the cursor
            if match is not None and match.end() > position:
                return rule, match
        return None

    def scan(self, text: str) -> List[Token]:
        """
        Tokenize an expression.

        :param str text: Input expression

        :return: List of tokens, without the discarded ones
        :rtype: List[Token]
        :raises LexError: If no rule matches at some position
        """
        tokens: List[Token] = []
        position = 0

        while position < len(text):
            found = self._match(text, position)
            if found is None:
                raise LexError(text, position)

            rule, match = found
            position = match.end()

            if rule.transform is None:
                value: Optional[str] = match.group(0)
            else:
                value = rule.transform(match)
                if value is None:
                    continue

            token = Token(value=value, type=rule.type)
            logger.debug("Token %s", token)
            tokens.append(token)

        return tokens
