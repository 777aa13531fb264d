"""Running a command tree: redirections, pipelines and external programs."""

from __future__ import annotations

import os
import signal
import subprocess
import sys
import threading
from collections.abc import Iterator, Sequence
from contextlib import ExitStack, contextmanager
from typing import IO, Optional, Union

from minishell.env import Environment
from minishell.heredoc import mark_last
from minishell.tokens import TokenType
from minishell.tree import Command, Node, iter_commands

Outcome = Union[subprocess.Popen, int]

_FILE_MODE = 0o644


class RedirectionError(Exception):
    """A redirection target that cannot be opened."""

    exit_status = 1


def check_file_access(file_name: str) -> None:
    """Raise RedirectionError if ``file_name`` is missing or not fully accessible."""
    if not os.access(file_name, os.F_OK):
        raise RedirectionError(f"minishell: {file_name}: No such file or directory")
    if not all(os.access(file_name, mode) for mode in (os.W_OK, os.R_OK, os.X_OK)):
        raise RedirectionError(f"minishell: {file_name}: Permission denied")


def resolve_command(paths: Sequence[str], cmd: Optional[str]) -> Optional[str]:
    """Return the first ``dir/cmd`` in ``paths`` that is executable, else ``cmd``."""
    if cmd is None:
        return None
    for directory in paths:
        candidate = f"{directory}/{cmd}"
        if os.access(candidate, os.X_OK):
            return candidate
    return cmd


def status_from_returncode(returncode: int) -> int:
    """Turn a child's return code into the shell's exit status.

    Signal deaths are reported the way the shell reports them; only an
    interrupt or a quit yields 128 plus the signal number.
    """
    if returncode >= 0:
        return returncode
    sig = -returncode
    status = 0
    if sig == signal.SIGINT:
        sys.stdout.write("\n")
        sys.stdout.flush()
        status = 128 + sig
    if sig == signal.SIGQUIT:
        sys.stderr.write("Quit: 3\n")
        status = 128 + sig
    elif sig == signal.SIGSEGV:
        sys.stderr.write("Segmentation fault: 11\n")
    elif sig == signal.SIGBUS:
        sys.stderr.write("Bus error: 10\n")
    return status


@contextmanager
def _interrupts_ignored() -> Iterator[None]:
    """Ignore SIGINT in the shell while its children run."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return
    previous = signal.signal(signal.SIGINT, signal.SIG_IGN)
    try:
        yield
    finally:
        if previous is not None:
            signal.signal(signal.SIGINT, previous)


def _default_signals() -> None:
    signal.signal(signal.SIGINT, signal.SIG_DFL)
    signal.signal(signal.SIGQUIT, signal.SIG_DFL)


def _output_opener(path: str, flags: int) -> int:
    return os.open(path, flags, _FILE_MODE)


def _open_checked(file_name: str, mode: str) -> Optional[IO[bytes]]:
    """Open a redirection target; a failure that passes the access check is ignored."""
    try:
        if mode == "rb":
            return open(file_name, mode)
        return open(file_name, mode, opener=_output_opener)
    except OSError:
        check_file_access(file_name)
        return None


def _open_redirections(
    command: Command, stack: ExitStack
) -> tuple[Optional[IO[bytes]], Optional[IO[bytes]]]:
    """Open every redirection in order and return the streams in effect."""
    mark_last(command.redirections)
    stdin: Optional[IO[bytes]] = None
    stdout: Optional[IO[bytes]] = None
    for redirection in command.redirections:
        kind = redirection.type
        if kind == TokenType.INPUT:
            handle = _open_checked(redirection.file_name, "rb")
        elif kind in (TokenType.OUTPUT, TokenType.OUTPUT_APPEND):
            mode = "wb" if kind == TokenType.OUTPUT else "ab"
            handle = _open_checked(redirection.file_name, mode)
        elif kind == TokenType.HEREDOC and redirection.last:
            try:
                handle = open(redirection.file_name, "rb")
            except OSError as exc:
                sys.stderr.write(f"open: {exc.strerror}\n")
                continue
        else:
            continue
        if handle is None:
            continue
        if not redirection.last:
            handle.close()
            continue
        stack.enter_context(handle)
        if kind == TokenType.OUTPUT or kind == TokenType.OUTPUT_APPEND:
            stdout = handle
        else:
            stdin = handle
    return stdin, stdout


def _exec_failure(program: str) -> tuple[str, int]:
    if "/" in program and os.access(program, os.F_OK):
        return f"minishell: {program}: is a directory\n", 126
    if "/" in program:
        return f"minishell: {program}: No such file or directory\n", 127
    return f"minishell: {program}: command not found\n", 127


class Executor:
    """Runs command trees against an environment and keeps the last status."""

    def __init__(self, env: Environment) -> None:
        self.env = env
        self.exit_status = 0

    def _locate(self, cmd: str) -> str:
        if os.access(cmd, os.F_OK) and os.access(cmd, os.X_OK):
            return cmd
        path = self.env.get("PATH")
        if path is None:
            return cmd
        return resolve_command([part for part in path.split(":") if part], cmd) or cmd

    def _child_env(self) -> dict[str, str]:
        return dict(
            entry.split("=", 1) for entry in self.env.to_envp() if "=" in entry
        )

    def _launch(self, command: Command, stdin, stdout) -> Outcome:
        with ExitStack() as files:
            try:
                redirected_in, redirected_out = _open_redirections(command, files)
            except RedirectionError as exc:
                sys.stderr.write(f"{exc}\n")
                return exc.exit_status
            if command.cmd is None:
                return 0
            program = self._locate(command.cmd)
            executable = program if "/" in program else os.path.join(".", program)
            try:
                return subprocess.Popen(
                    command.args or [command.cmd],
                    executable=executable,
                    stdin=redirected_in if redirected_in is not None else stdin,
                    stdout=redirected_out if redirected_out is not None else stdout,
                    env=self._child_env(),
                    preexec_fn=_default_signals,
                )
            except OSError:
                message, status = _exec_failure(program)
                sys.stderr.write(message)
                return status

    def _launch_all(self, commands: Sequence[Command]) -> list[Outcome]:
        outcomes: list[Outcome] = []
        previous: Optional[IO[bytes]] = None
        for position, command in enumerate(commands):
            is_first = position == 0
            is_last = position == len(commands) - 1
            if is_first:
                stdin = None
            else:
                stdin = previous if previous is not None else subprocess.DEVNULL
            stdout = None if is_last else subprocess.PIPE
            outcome = self._launch(command, stdin, stdout)
            if previous is not None:
                previous.close()
            previous = outcome.stdout if isinstance(outcome, subprocess.Popen) else None
            outcomes.append(outcome)
        if previous is not None:
            previous.close()
        return outcomes

    @staticmethod
    def _wait_all(outcomes: Sequence[Outcome], piped: bool) -> int:
        for outcome in outcomes:
            if isinstance(outcome, subprocess.Popen):
                outcome.wait()
                if piped and outcome.returncode == -signal.SIGPIPE:
                    sys.stdout.write("\n")
                    sys.stdout.flush()
        last = outcomes[-1]
        if isinstance(last, subprocess.Popen):
            return status_from_returncode(last.returncode)
        return last

    def run(self, tree: Optional[Node]) -> int:
        """Run ``tree`` and return its exit status; an empty tree keeps the old one."""
        if tree is None:
            return self.exit_status
        commands = list(iter_commands(tree))
        if not commands:
            return self.exit_status
        sys.stdout.flush()
        sys.stderr.flush()
        with _interrupts_ignored():
            outcomes = self._launch_all(commands)
            status = self._wait_all(outcomes, piped=len(commands) > 1)
        self.exit_status = status
        return status