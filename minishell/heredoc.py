"""Reading here-document bodies into their temporary files."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Iterable
from typing import Optional

from minishell.tokens import TokenType
from minishell.tree import Node, Redirection, iter_commands

ReadLine = Callable[[str], Optional[str]]

_PROMPT = "> "
_INPUTS = (TokenType.INPUT, TokenType.HEREDOC)
_OUTPUTS = (TokenType.OUTPUT, TokenType.OUTPUT_APPEND)


class HeredocInterrupted(Exception):
    """The user interrupted a here-document; the command line is dropped."""

    exit_status = 1


def mark_last(redirections: Iterable[Redirection]) -> None:
    """Flag the last input and the last output redirection as the ones in effect."""
    last_input: Optional[Redirection] = None
    last_output: Optional[Redirection] = None
    for redirection in redirections:
        if redirection.type in _INPUTS:
            last_input = redirection
        if redirection.type in _OUTPUTS:
            last_output = redirection
    if last_input is not None:
        last_input.last = True
    if last_output is not None:
        last_output.last = True


def contains_heredoc(redirections: Iterable[Redirection]) -> bool:
    """True if any of ``redirections`` is a here-document."""
    return any(r.type == TokenType.HEREDOC for r in redirections)


def _next_line(read_line: ReadLine) -> Optional[str]:
    try:
        return read_line(_PROMPT)
    except EOFError:
        return None


def write_heredoc(redirection: Redirection, read_line: ReadLine) -> None:
    """Read lines until the delimiter or end of input and store them.

    Raises HeredocInterrupted when reading is interrupted.
    """
    with open(redirection.file_name, "w", encoding="utf-8") as body:
        try:
            line = _next_line(read_line)
            while line is not None and line != redirection.key:
                body.write(line + "\n")
                line = _next_line(read_line)
        except KeyboardInterrupt as exc:
            sys.stdout.write("\n")
            raise HeredocInterrupted() from exc


def collect_heredocs(tree: Optional[Node], read_line: ReadLine) -> list[str]:
    """Read every here-document of ``tree`` in order.

    Only the last input of each command keeps its file; the others are
    read and then removed. Returns the names of the files kept.
    """
    kept: list[str] = []
    for command in iter_commands(tree):
        mark_last(command.redirections)
        if not contains_heredoc(command.redirections):
            continue
        for redirection in command.redirections:
            if redirection.type != TokenType.HEREDOC:
                continue
            write_heredoc(redirection, read_line)
            if redirection.last:
                kept.append(redirection.file_name)
            else:
                os.unlink(redirection.file_name)
    return kept