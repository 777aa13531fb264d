"""Checks on a token list before it is turned into a tree."""

from __future__ import annotations

from collections.abc import Sequence

from minishell.tokens import Token, TokenType, redirector_at

_SYNTAX_PREFIX = "Minishell: syntax error near unexpected token `"


class ShellSyntaxError(Exception):
    """A command line that cannot be run as written."""

    def __init__(self, message: str, token: str | None = None) -> None:
        super().__init__(message)
        self.token = token


def quotes_balanced(text: str | None) -> bool:
    """True if every quote opened in ``text`` is closed again."""
    if text is None:
        return True
    open_quote = ""
    for char in text:
        if open_quote:
            if char == open_quote:
                open_quote = ""
        elif char in "'\"":
            open_quote = char
    return not open_quote


def _unexpected(kind: int, text: str | None = None) -> ShellSyntaxError:
    if TokenType.INPUT <= kind <= TokenType.HEREDOC:
        shown = "newline"
    elif kind == TokenType.PIPE:
        shown = "|"
    else:
        shown = text or ""
    return ShellSyntaxError(f"{_SYNTAX_PREFIX}{shown}'", shown)


def _kind(token: Token) -> int:
    found = redirector_at(token.value, 0) if token.value is not None else None
    return int(found) if found is not None else 0


def _is_redirection(kind: int) -> bool:
    return TokenType.INPUT <= kind <= TokenType.HEREDOC


def check_syntax(tokens: Sequence[Token]) -> None:
    """Raise ShellSyntaxError if ``tokens`` hold open quotes or misplaced operators."""
    if not tokens:
        return
    if not all(quotes_balanced(token.value) for token in tokens):
        raise ShellSyntaxError("open quotes")
    if tokens[0].type == TokenType.PIPE:
        raise _unexpected(TokenType.PIPE)
    index = 0
    count = len(tokens)
    while index < count:
        first = _kind(tokens[index])
        has_next = index + 1 < count
        second = _kind(tokens[index + 1]) if has_next else 0
        has_after_next = index + 2 < count
        if first and not has_next:
            raise _unexpected(first)
        if first == TokenType.PIPE and _is_redirection(second) and has_after_next:
            index += 1
        elif first == TokenType.PIPE and second == TokenType.PIPE:
            raise _unexpected(first, tokens[index + 1].value)
        elif first and second and not has_after_next:
            raise _unexpected(first, tokens[index + 1].value)
        elif _is_redirection(first) and _is_redirection(second):
            raise _unexpected(0, tokens[index + 1].value)
        index += 1