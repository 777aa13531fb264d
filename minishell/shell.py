"""The interactive loop: read a line, check it, expand it and run it."""

from __future__ import annotations

import os
import signal
import sys
from collections.abc import Callable, Iterable, Mapping
from typing import Optional

from minishell.env import Environment
from minishell.executor import Executor
from minishell.expand import expand_tokens
from minishell.heredoc import HeredocInterrupted, collect_heredocs
from minishell.syntax import ShellSyntaxError, check_syntax
from minishell.tokens import tokenize
from minishell.tree import build_tree, remove_heredoc_files

try:
    import termios
except ImportError:  # pragma: no cover - platforms without termios
    termios = None  # type: ignore[assignment]

try:
    import readline
except ImportError:  # pragma: no cover - platforms without readline
    readline = None  # type: ignore[assignment]

ReadLine = Callable[[str], Optional[str]]

PROMPT = "Minishell>"
SYNTAX_ERROR_STATUS = 258
TREE_ERROR_STATUS = 1


def _set_echoctl(enabled: bool) -> None:
    """Show or hide control characters such as ``^C`` typed at the terminal."""
    if termios is None or not hasattr(termios, "ECHOCTL"):
        return
    try:
        fd = sys.stdin.fileno()
        if not os.isatty(fd):
            return
        attrs = termios.tcgetattr(fd)
    except (OSError, ValueError, termios.error):
        return
    if enabled:
        attrs[3] |= termios.ECHOCTL
    else:
        attrs[3] &= ~termios.ECHOCTL
    try:
        termios.tcsetattr(fd, termios.TCSANOW, attrs)
    except termios.error:
        pass


def _interactive_read(prompt: str) -> Optional[str]:
    """Read one line from the terminal with control-character echo hidden."""
    _set_echoctl(False)
    try:
        return input(prompt)
    except EOFError:
        return None
    finally:
        _set_echoctl(True)


class Shell:
    """A shell session: its environment, its executor and the last exit status."""

    def __init__(self, envp: Optional[Iterable[str] | Mapping[str, str]] = None) -> None:
        self.env = Environment.from_envp(os.environ if envp is None else envp)
        self.executor = Executor(self.env)
        self.read_line: ReadLine = _interactive_read

    @property
    def exit_status(self) -> int:
        """Status of the last command line."""
        return self.executor.exit_status

    @exit_status.setter
    def exit_status(self, status: int) -> None:
        self.executor.exit_status = status

    def process_line(self, line: Optional[str]) -> int:
        """Run one command line and return the resulting exit status.

        Here-document bodies are read with ``self.read_line``.
        """
        if not line:
            return self.exit_status
        tokens = tokenize(line)
        if not tokens:
            return self.exit_status
        try:
            check_syntax(tokens)
        except ShellSyntaxError as exc:
            sys.stderr.write(f"{exc}\n")
            self.exit_status = SYNTAX_ERROR_STATUS
            return self.exit_status
        lone_variable = len(tokens) == 1 and tokens[0].value.startswith("$")
        tokens = expand_tokens(tokens, self.env, self.exit_status)
        if lone_variable and tokens[0].value is None:
            self.exit_status = 0
            return 0
        try:
            tree = build_tree(tokens)
        except ShellSyntaxError as exc:
            sys.stderr.write(f"{exc}\n")
            self.exit_status = TREE_ERROR_STATUS
            return self.exit_status
        try:
            try:
                collect_heredocs(tree, self.read_line)
            except HeredocInterrupted as exc:
                self.exit_status = exc.exit_status
                return self.exit_status
            except OSError as exc:
                sys.stderr.write(f"open: {exc.strerror}\n")
                self.exit_status = 1
                return self.exit_status
            return self.executor.run(tree)
        finally:
            remove_heredoc_files(tree)

    def run(self, read_line: ReadLine) -> int:
        """Read and run lines until end of input; return the last exit status."""
        self.read_line = read_line
        while True:
            try:
                line = read_line(PROMPT)
            except KeyboardInterrupt:
                sys.stderr.write("\n")
                continue
            except EOFError:
                line = None
            if line is None:
                sys.stderr.write("exit\n")
                sys.stderr.flush()
                return self.exit_status
            self.process_line(line)


def main(argv: Optional[list[str]] = None) -> int:
    """Start an interactive session on the terminal."""
    if readline is not None and hasattr(readline, "set_auto_history"):
        readline.set_auto_history(True)
    if hasattr(signal, "SIGQUIT"):
        signal.signal(signal.SIGQUIT, signal.SIG_IGN)
    shell = Shell()
    return shell.run(_interactive_read)


if __name__ == "__main__":
    sys.exit(main())