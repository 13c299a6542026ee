"""Convert infix expressions into Reverse Polish Notation (RPN)."""
from typing import Callable, Dict, Iterable, List, Optional

from shunting_yard.common.errors import (
    MismatchedBracketsError,
    ShuntingYardError,
    UnknownOperatorError,
    UnmatchedBracketError,
)
from shunting_yard.common.lexer import Lexer
from shunting_yard.common.models import (
    Associativity,
    ConversionResult,
    ConverterConfig,
    Token,
    TokenKind,
    TokenRule,
)

# Identifier used in errors when the caller supplies the tokens directly
TOKENS_GIVEN = "Tokens given"

TraceFn = Callable[[str], None]


def _no_trace(message: str) -> None:
    pass


class _Conversion:
    """Operator stack and output queue of a single conversion."""

    def __init__(self, config: ConverterConfig, source: str, trace: TraceFn):
        self.config = config
        self.source = source
        self.trace = trace
        self.stack: List[Token] = []
        self.output: List[Token] = []
        self.handlers: Dict[TokenKind, Callable[[Token], None]] = {
            TokenKind.VALUE: self.on_value,
            TokenKind.FUNCTION: self.on_function,
            TokenKind.OPERATOR: self.on_operator,
            TokenKind.PARAM_SEPARATOR: self.on_param_separator,
            TokenKind.OPEN_BRACKET: self.on_open_bracket,
            TokenKind.CLOSE_BRACKET: self.on_close_bracket,
        }

    def push(self, token: Token) -> None:
        self.trace(f"Push {token.value} into the operator stack.")
        self.stack.append(token)

    def pop(self) -> Optional[Token]:
        if not self.stack:
            self.trace("Pop NULL from the operator stack.")
            return None
        token = self.stack.pop()
        self.trace(f"Pop {token.value} from the operator stack.")
        return token

    def peek(self) -> Optional[Token]:
        return self.stack[-1] if self.stack else None

    def emit(self, token: Token) -> None:
        self.trace(f"Push {token.value} to the output queue.")
        self.output.append(token)

    def kind_of_top(self) -> Optional[TokenKind]:
        top = self.peek()
        return None if top is None else self.config.kind_of(top)

    def _precedence(self, token: Token) -> int:
        precedence = self.config.precedence_of(token)
        if precedence is None:
            raise UnknownOperatorError(self.source, token.value)
        return precedence

    def on_value(self, token: Token) -> None:
        self.emit(token)

    def on_function(self, token: Token) -> None:
        self.push(token)

    def on_operator(self, token: Token) -> None:
        precedence = self._precedence(token)
        associativity = self.config.associativity_of(token)

        while self.kind_of_top() is TokenKind.OPERATOR:
            top_precedence = self._precedence(self.peek())
            if associativity is Associativity.LEFT:
                should_pop = precedence <= top_precedence
            else:
                should_pop = precedence < top_precedence
            if not should_pop:
                break
            self.emit(self.pop())

        self.push(token)

    def on_param_separator(self, token: Token) -> None:
        while True:
            kind = self.kind_of_top()
            if kind is None:
                raise UnmatchedBracketError(
                    self.source, "Could not find opening bracket for parameter separator in expression"
                )
            if kind is TokenKind.OPEN_BRACKET:
                break
            self.emit(self.pop())

    def on_open_bracket(self, token: Token) -> None:
        self.push(token)

    def on_close_bracket(self, token: Token) -> None:
        while True:
            top = self.pop()
            if top is None:
                raise UnmatchedBracketError(self.source)
            if self.config.kind_of(top) is TokenKind.OPEN_BRACKET:
                break
            self.emit(top)

        # The function name follows its arguments
        if self.kind_of_top() is TokenKind.FUNCTION:
            self.emit(self.pop())

    def run(self, tokens: Iterable[Token]) -> List[Token]:
        for token in tokens:
            kind = self.config.kind_of(token)
            if kind is None:
                self.trace(f"Ignore {token.value} of unclassified type {token.type}.")
                continue
            self.handlers[kind](token)

        while self.stack:
            top = self.pop()
            if self.config.kind_of(top) in (TokenKind.OPEN_BRACKET, TokenKind.CLOSE_BRACKET):
                raise MismatchedBracketsError(self.source)
            self.emit(top)

        return self.output


class ShuntingYard:
    """
    Convert infix expressions into Reverse Polish Notation (RPN).

    Design constraints:
        - The grammar (token rules), precedences and associativities are supplied by the caller
        - No evaluation: the output is a list of tokens ready for a stack machine
        - Each conversion works on its own stack and output queue

    Algorithm:
        1. Tokenize the expression with the configured rules
        2. Dispatch each token on its kind (value, function, operator, separator, brackets)
        3. Drain the operator stack once the input is consumed

    Examples:
        - Infix expression: "azerty" / V1 + V2 * sin(10)
        - RPN: "azerty" V1 / V2 10 sin * +
    """

    def __init__(
        self,
        config: ConverterConfig,
        rules: Optional[Iterable[TokenRule]] = None,
        trace: Optional[TraceFn] = None,
    ):
        """
        :param ConverterConfig config: Precedences, associativities and token classification
        :param rules: Token rules used by ``convert``; optional when only ``convert_tokens`` is used
        :param trace: Sink receiving one message per stack or queue move, defaults to a no-op
        """
        self.config = config
        self.lexer: Optional[Lexer] = Lexer(rules) if rules is not None else None
        self.trace: TraceFn = trace or _no_trace
        self._rpn: Optional[List[Token]] = None

    @property
    def rpn(self) -> Optional[List[Token]]:
        """RPN of the last successful conversion, None before the first one."""
        return None if self._rpn is None else list(self._rpn)

    def convert(self, expression: str) -> List[Token]:
        """
        Tokenize and convert an infix expression.

        :param str expression: Infix expression

        :return: Tokens in RPN order
        :rtype: List[Token]
        :raises LexError: If the expression cannot be tokenized
        :raises ConversionError: If brackets are unbalanced or an operator is unknown
        :raises ValueError: If the converter has no token rules
        """
        if self.lexer is None:
            raise ValueError("No token rules configured, use convert_tokens()")
        tokens = self.lexer.scan(expression)
        return self._convert(tokens, expression)

    def convert_tokens(self, tokens: Iterable[Token], source: str = TOKENS_GIVEN) -> List[Token]:
        """
        Convert a token sequence produced by another lexer.

        :param tokens: Tokens in infix order
        :param str source: Name of the sequence used in error messages

        :return: Tokens in RPN order
        :rtype: List[Token]
        :raises ConversionError: If brackets are unbalanced or an operator is unknown
        """
        return self._convert(tokens, source)

    def try_convert(self, expression: str) -> ConversionResult:
        """
        Convert an expression, reporting failures as a value instead of raising.

        :param str expression: Infix expression

        :return: Result holding either the RPN or the error message
        :rtype: ConversionResult
        """
        try:
            return ConversionResult(expression=expression, rpn=self.convert(expression))
        except ShuntingYardError as exc:
            return ConversionResult(expression=expression, error=str(exc))

    def _convert(self, tokens: Iterable[Token], source: str) -> List[Token]:
        output = _Conversion(self.config, source, self.trace).run(tokens)
        self._rpn = output
        return list(output)
