"""Splitting a command line into words and operators."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

_SPACES = " \n\t\v\f\r"
_QUOTES = "'\""


class TokenType(IntEnum):
    """Kinds of tokens and tree nodes."""

    WORD = 0
    CMD = 1
    EXIT_STATUS = 2
    PIPE = 3
    INPUT = 4
    OUTPUT = 5
    OUTPUT_APPEND = 6
    HEREDOC = 7

    @property
    def is_redirection(self) -> bool:
        """True for the four redirection operators."""
        return TokenType.INPUT <= self <= TokenType.HEREDOC


@dataclass
class Token:
    """One word or operator of a command line."""

    value: str
    type: TokenType = TokenType.WORD


def is_space(char: str) -> bool:
    """True if ``char`` is a single whitespace character."""
    return len(char) == 1 and char in _SPACES


def is_quote(char: str) -> bool:
    """True if ``char`` is a single or double quote."""
    return len(char) == 1 and char in _QUOTES


def redirector_at(text: str, index: int) -> TokenType | None:
    """Return the operator starting at ``index`` in ``text``, if any."""
    if index < 0 or index >= len(text):
        return None
    if text.startswith("|", index):
        return TokenType.PIPE
    if text.startswith(">>", index):
        return TokenType.OUTPUT_APPEND
    if text.startswith("<<", index):
        return TokenType.HEREDOC
    if text.startswith("<", index):
        return TokenType.INPUT
    if text.startswith(">", index):
        return TokenType.OUTPUT
    return None


def _char_at(text: str, index: int) -> str:
    return text[index] if 0 <= index < len(text) else ""


def _scan_quoted(text: str, index: int, quote: str) -> int:
    """Advance past a quoted stretch whose opening quote precedes ``index``.

    Returns the index of the character that ends the word (the closing
    quote or the last character before a space, operator or the end),
    or ``len(text)`` when the text runs out first.
    """
    count = 1
    while index < len(text):
        if text[index] == quote:
            count += 1
        if count % 2 == 0:
            following = _char_at(text, index + 1)
            if (
                following == ""
                or is_space(following)
                or redirector_at(text, index + 1) is not None
            ):
                break
        index += 1
        if count % 2 == 0 and is_quote(_char_at(text, index)):
            quote = text[index]
            count = 1
            index += 1
    return index


def _read_word(text: str, index: int) -> tuple[Token, int]:
    start = index
    while (
        index < len(text)
        and not is_space(text[index])
        and redirector_at(text, index) is None
    ):
        if is_quote(text[index]):
            index = _scan_quoted(text, index + 1, text[index])
        index += 1
    index = min(index, len(text))
    return Token(text[start:index]), index


def _read_operator(text: str, index: int) -> tuple[Token, int]:
    kind = redirector_at(text, index)
    width = 2 if kind in (TokenType.OUTPUT_APPEND, TokenType.HEREDOC) else 1
    return Token(text[index:index + width], kind), index + width - 1


def _read_quoted(text: str, index: int) -> tuple[Token, int]:
    start = index
    index = _scan_quoted(text, index + 1, text[index])
    return Token(text[start:index + 1]), min(index, len(text))


def tokenize(line: str) -> list[Token]:
    """Split ``line`` into words and operators.

    Quotes are kept in the word values; operators get their own type.
    """
    tokens: list[Token] = []
    index = 0
    length = len(line)
    while index < length:
        char = line[index]
        if (
            not is_space(char)
            and redirector_at(line, index) is None
            and not is_quote(char)
        ):
            token, index = _read_word(line, index)
            tokens.append(token)
        if index < length and redirector_at(line, index) is not None:
            token, index = _read_operator(line, index)
            tokens.append(token)
        if index < length and is_quote(line[index]):
            token, index = _read_quoted(line, index)
            tokens.append(token)
        if index < length:
            index += 1
    return tokens