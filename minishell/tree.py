"""Building the command tree from a token list."""

from __future__ import annotations

import itertools
import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Optional, Union

from minishell.syntax import ShellSyntaxError
from minishell.tokens import Token, TokenType


@dataclass
class Redirection:
    """One redirection of a command.

    For a here-document ``key`` holds the delimiter and ``file_name``
    the temporary file the body is written to.
    """

    type: TokenType
    file_name: str
    key: Optional[str] = None
    last: bool = False


@dataclass
class Command:
    """A simple command: its name, its arguments and its redirections."""

    cmd: Optional[str] = None
    args: list[str] = field(default_factory=list)
    redirections: list[Redirection] = field(default_factory=list)


@dataclass
class Pipe:
    """Two commands, or a pipeline and a command, joined by ``|``."""

    left: Optional["Node"] = None
    right: Optional["Node"] = None


Node = Union[Command, Pipe]


class TreeBuilder:
    """Turns tokens into a left-leaning tree of pipes and commands.

    Every redirection gets a sequence number from the builder; a
    here-document's file is named after its delimiter followed by that
    number.
    """

    def __init__(self) -> None:
        self._counter = itertools.count(1)

    def _redirection(self, kind: TokenType, target: Optional[Token]) -> Redirection:
        number = next(self._counter)
        if target is None:
            raise ShellSyntaxError(
                "Minishell: syntax error near unexpected token `newline'", "newline"
            )
        if target.value is None:
            raise ShellSyntaxError("Minishell: ambiguous redirect")
        if kind == TokenType.HEREDOC:
            return Redirection(kind, f"{target.value}{number}", key=target.value)
        return Redirection(kind, target.value)

    @staticmethod
    def _add_word(command: Command, value: Optional[str]) -> None:
        # Words that expanded to nothing take no place in the command.
        if value is None:
            return
        if command.cmd is None:
            command.cmd = value
        command.args.append(value)

    def build(self, tokens: Iterable[Token]) -> Optional[Node]:
        """Return the tree for ``tokens``, or None when there are none."""
        tree: Optional[Node] = None
        current: Optional[Command] = None
        stream = iter(tokens)
        for token in stream:
            kind = TokenType(token.type)
            if kind == TokenType.PIPE:
                tree = Pipe(left=tree)
                current = None
                continue
            if current is None:
                current = Command()
                if isinstance(tree, Pipe) and tree.left is not None and tree.right is None:
                    tree.right = current
                else:
                    tree = current
            if kind.is_redirection:
                current.redirections.append(self._redirection(kind, next(stream, None)))
            else:
                self._add_word(current, token.value)
        return tree


_default_builder = TreeBuilder()


def build_tree(tokens: Iterable[Token]) -> Optional[Node]:
    """Build a tree with the shared builder, so here-document names stay unique."""
    return _default_builder.build(tokens)


def iter_commands(tree: Optional[Node]) -> Iterator[Command]:
    """Yield the commands of ``tree`` from left to right."""
    if tree is None:
        return
    if isinstance(tree, Command):
        yield tree
        return
    yield from iter_commands(tree.left)
    yield from iter_commands(tree.right)


def remove_heredoc_files(tree: Optional[Node]) -> None:
    """Delete the temporary files of every here-document in ``tree``."""
    for command in iter_commands(tree):
        for redirection in command.redirections:
            if redirection.type == TokenType.HEREDOC:
                try:
                    os.unlink(redirection.file_name)
                except FileNotFoundError:
                    pass