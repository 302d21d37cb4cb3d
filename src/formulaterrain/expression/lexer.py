"""Tokenizer for formula text."""

from dataclasses import dataclass
from enum import Enum, auto
from typing import List

from .errors import CompileError


class TokenKind(Enum):
    """Token categories produced by the lexer."""
    NUMBER = auto()
    NAME = auto()
    OPERATOR = auto()
    LPAREN = auto()
    RPAREN = auto()
    COMMA = auto()
    QUESTION = auto()
    COLON = auto()
    END = auto()


@dataclass(frozen=True)
class Token:
    """A lexical token and its offset in the source text."""
    kind: TokenKind
    text: str
    position: int


# Longest operators first so "**" wins over "*"
OPERATORS = (
    "**", "&&", "||", "==", "!=", "<=", ">=",
    "+", "-", "*", "/", "%", "<", ">", "!",
)

PUNCTUATION = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ",": TokenKind.COMMA,
    "?": TokenKind.QUESTION,
    ":": TokenKind.COLON,
}


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _is_name_start(ch: str) -> bool:
    return ch.isalpha() or ch == "_"


def _is_name_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def _scan_number(text: str, start: int) -> int:
    """Return the end offset of the number literal starting at `start`."""
    i = start
    n = len(text)
    while i < n and _is_digit(text[i]):
        i += 1
    if i < n and text[i] == ".":
        i += 1
        while i < n and _is_digit(text[i]):
            i += 1
    # Optional exponent, only consumed when followed by digits
    if i < n and text[i] in "eE":
        j = i + 1
        if j < n and text[j] in "+-":
            j += 1
        if j < n and _is_digit(text[j]):
            while j < n and _is_digit(text[j]):
                j += 1
            i = j
    return i


def tokenize(text: str) -> List[Token]:
    """Split formula text into tokens.

    Args:
        text: Formula text, already preprocessed

    Returns:
        Token list terminated by an END token

    Raises:
        CompileError: On a character that starts no token
    """
    tokens: List[Token] = []
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]

        if ch.isspace():
            i += 1
            continue

        if _is_digit(ch) or (ch == "." and i + 1 < n and _is_digit(text[i + 1])):
            end = _scan_number(text, i)
            tokens.append(Token(TokenKind.NUMBER, text[i:end], i))
            i = end
            continue

        if _is_name_start(ch):
            end = i + 1
            while end < n and _is_name_char(text[end]):
                end += 1
            tokens.append(Token(TokenKind.NAME, text[i:end], i))
            i = end
            continue

        if ch in PUNCTUATION:
            tokens.append(Token(PUNCTUATION[ch], ch, i))
            i += 1
            continue

        for op in OPERATORS:
            if text.startswith(op, i):
                tokens.append(Token(TokenKind.OPERATOR, op, i))
                i += len(op)
                break
        else:
            raise CompileError(f"Unexpected character {ch!r}", i)

    tokens.append(Token(TokenKind.END, "", n))
    return tokens
