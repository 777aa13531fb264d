"""Variable expansion and quote removal for command-line words."""

from __future__ import annotations

from collections.abc import Iterable

from minishell.env import Environment
from minishell.tokens import Token, is_quote, is_space

_TRIGGERS = ("'", '"', "$")


def _is_digit(char: str) -> bool:
    return len(char) == 1 and "0" <= char <= "9"


def _is_name_char(char: str) -> bool:
    return char == "_" or (char.isascii() and char.isalnum())


class _WordExpander:
    """Walks one word, removing quotes and replacing ``$`` references."""

    def __init__(self, text: str, env: Environment, exit_status: int) -> None:
        self.text = text
        self.env = env
        self.exit_status = exit_status
        self.index = 0
        self.quote = ""
        self.parts: list[str] = []
        self.produced = False

    def _char(self, offset: int = 0) -> str:
        position = self.index + offset
        if 0 <= position < len(self.text):
            return self.text[position]
        return ""

    def _emit(self, piece: str) -> None:
        self.parts.append(piece)
        self.produced = True

    def _toggle_quotes(self) -> None:
        if self._char() == "'" and self.quote != '"':
            if not self.quote:
                self.quote = "'"
                self.index += 1
            if self._char() == "'" and self.quote == "'":
                self.quote = ""
                self.index += 1
        if self._char() == '"' and self.quote != "'":
            if not self.quote:
                self.quote = '"'
                self.index += 1
            if self._char() == '"' and self.quote == '"':
                self.quote = ""
                self.index += 1

    def _variable(self) -> None:
        following = self._char(1)
        if following and not is_space(following):
            self.index += 1
            current = self._char()
            if _is_digit(current) or is_quote(current):
                if current != "'":
                    self.index += 1
                return
        else:
            # A lone "$" at the end or before a space stays literal.
            self._emit("$")
            self.index += 1
            return
        start = self.index
        while self.index < len(self.text) and _is_name_char(self.text[self.index]):
            self.index += 1
        value = self.env.get(self.text[start:self.index])
        if value is None:
            return
        if value.startswith("="):
            value = value[1:]
        self._emit(value)

    def _special(self) -> None:
        if self._char(1) == "\\":
            self._emit("$")
            self.index += 2
        self._emit(self._char())
        self.index += 1

    def _step(self) -> None:
        char = self._char()
        following = self._char(1)
        if char == "$" and self.quote != "'":
            if following == "?":
                self._emit(str(self.exit_status))
                self.index += 2
                return
            if following in ("\\", "%"):
                self._special()
                return
            if following == "!":
                self.index += 2
                return
            if following != "'":
                self._variable()
                return
        self._emit(char)
        self.index += 1

    def run(self) -> str | None:
        while self.index < len(self.text):
            self._toggle_quotes()
            char = self._char()
            if not char:
                break
            if not self.quote:
                if char == " ":
                    return self.text
                if is_quote(char):
                    continue
                self._step()
            elif char != self.quote:
                self._step()
        return "".join(self.parts) if self.produced else None


def expand_word(value: str | None, env: Environment, exit_status: int = 0) -> str | None:
    """Expand variables and remove quotes in one word.

    Words without quotes or ``$`` are returned as they are. None is
    returned when the expansion produces nothing at all, for example an
    unset variable on its own or an empty pair of quotes.
    """
    if value is None:
        return None
    if not any(char in _TRIGGERS for char in value):
        return value
    return _WordExpander(value, env, exit_status).run()


def expand_tokens(
    tokens: Iterable[Token], env: Environment, exit_status: int = 0
) -> list[Token]:
    """Return new tokens with every value expanded; types are kept."""
    return [
        Token(expand_word(token.value, env, exit_status), token.type)
        for token in tokens
    ]