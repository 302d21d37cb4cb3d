"""Recursive-descent parser for formula text.

Precedence, lowest first:

    test ? a : b
    ||
    &&
    ==  !=
    <  <=  >  >=
    +  -
    *  /  %
    unary -  +  !
    **          (right associative, binds tighter than unary minus)
    number, name, call, (expression)
"""

from typing import List

from .errors import CompileError
from .lexer import Token, TokenKind, tokenize
from .nodes import Binary, Call, Conditional, Name, Node, Number, Unary

COMPARISON_OPS = ("<", "<=", ">", ">=")
EQUALITY_OPS = ("==", "!=")
ADDITIVE_OPS = ("+", "-")
MULTIPLICATIVE_OPS = ("*", "/", "%")
UNARY_OPS = ("-", "+", "!")


def preprocess(text: str) -> str:
    """Rewrite caret exponentiation to '**'. No other rewriting happens."""
    return text.replace("^", "**")


class Parser:
    """Parses one formula into a tree of nodes."""

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.index = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def _advance(self) -> Token:
        token = self.tokens[self.index]
        if token.kind is not TokenKind.END:
            self.index += 1
        return token

    def _at_operator(self, ops) -> bool:
        token = self.current
        return token.kind is TokenKind.OPERATOR and token.text in ops

    def _expect(self, kind: TokenKind, what: str) -> Token:
        token = self.current
        if token.kind is not kind:
            raise CompileError(f"Expected {what} but found {_describe(token)}", token.position)
        return self._advance()

    def parse(self) -> Node:
        """Parse the whole token stream as a single expression."""
        if self.current.kind is TokenKind.END:
            raise CompileError("Formula is empty", 0)
        node = self._conditional()
        if self.current.kind is not TokenKind.END:
            raise CompileError(f"Unexpected {_describe(self.current)}", self.current.position)
        return node

    def _conditional(self) -> Node:
        test = self._logical_or()
        if self.current.kind is TokenKind.QUESTION:
            position = self._advance().position
            if_true = self._conditional()
            self._expect(TokenKind.COLON, "':'")
            if_false = self._conditional()
            return Conditional(test, if_true, if_false, position)
        return test

    def _binary_level(self, ops, operand) -> Node:
        node = operand()
        while self._at_operator(ops):
            token = self._advance()
            node = Binary(token.text, node, operand(), token.position)
        return node

    def _logical_or(self) -> Node:
        return self._binary_level(("||",), self._logical_and)

    def _logical_and(self) -> Node:
        return self._binary_level(("&&",), self._equality)

    def _equality(self) -> Node:
        return self._binary_level(EQUALITY_OPS, self._comparison)

    def _comparison(self) -> Node:
        return self._binary_level(COMPARISON_OPS, self._additive)

    def _additive(self) -> Node:
        return self._binary_level(ADDITIVE_OPS, self._multiplicative)

    def _multiplicative(self) -> Node:
        return self._binary_level(MULTIPLICATIVE_OPS, self._unary)

    def _unary(self) -> Node:
        if self._at_operator(UNARY_OPS):
            token = self._advance()
            return Unary(token.text, self._unary(), token.position)
        return self._power()

    def _power(self) -> Node:
        base = self._primary()
        if self._at_operator(("**",)):
            token = self._advance()
            # Right operand may carry its own sign: 2 ** -1
            return Binary("**", base, self._unary(), token.position)
        return base

    def _primary(self) -> Node:
        token = self.current

        if token.kind is TokenKind.NUMBER:
            self._advance()
            return Number(float(token.text), token.position)

        if token.kind is TokenKind.NAME:
            self._advance()
            if self.current.kind is TokenKind.LPAREN:
                return Call(token.text, tuple(self._arguments()), token.position)
            return Name(token.text, token.position)

        if token.kind is TokenKind.LPAREN:
            self._advance()
            node = self._conditional()
            self._expect(TokenKind.RPAREN, "')'")
            return node

        raise CompileError(f"Unexpected {_describe(token)}", token.position)

    def _arguments(self) -> List[Node]:
        self._expect(TokenKind.LPAREN, "'('")
        args: List[Node] = []
        if self.current.kind is TokenKind.RPAREN:
            self._advance()
            return args
        args.append(self._conditional())
        while self.current.kind is TokenKind.COMMA:
            self._advance()
            args.append(self._conditional())
        self._expect(TokenKind.RPAREN, "')' or ','")
        return args


def _describe(token: Token) -> str:
    if token.kind is TokenKind.END:
        return "end of formula"
    return f"'{token.text}'"


def parse(text: str) -> Node:
    """Preprocess, tokenize and parse formula text.

    Raises:
        CompileError: If the text is not a well-formed formula
    """
    return Parser(tokenize(preprocess(text))).parse()
