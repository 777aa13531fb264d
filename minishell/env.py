"""The shell's environment: an ordered set of variables."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from minishell.strutil import atoll


def shlvl_value(value: str | None) -> str | None:
    """Return the next shell level for a ``SHLVL`` value."""
    if value is None:
        return None
    return str(atoll(value) + 1)


def parse_entry(line: str) -> tuple[str, str | None]:
    """Split an ``envp`` entry into key and value.

    The entry is split on ``=`` with empty pieces dropped; the first
    piece is the key and the second the value. ``SHLVL`` is incremented
    and ``OLDPWD`` is always cleared.
    """
    pieces = [piece for piece in line.split("=") if piece]
    if not pieces:
        raise ValueError(f"environment entry without a name: {line!r}")
    key = pieces[0]
    if len(pieces) < 2:
        return key, None
    if key == "SHLVL":
        return key, shlvl_value(pieces[1])
    if key.startswith("OLDPWD"):
        return key, None
    return key, pieces[1]


class Environment:
    """Ordered environment variables; a value of None means 'declared only'."""

    def __init__(self, entries: Iterable[tuple[str, str | None]] | None = None) -> None:
        self._vars: dict[str, str | None] = {}
        for key, value in entries or ():
            self._vars[key] = value

    @classmethod
    def from_envp(cls, envp: Iterable[str] | Mapping[str, str]) -> "Environment":
        """Build an environment from ``KEY=VALUE`` strings, skipping ``_``."""
        if isinstance(envp, Mapping):
            envp = [f"{key}={value}" for key, value in envp.items()]
        env = cls()
        for line in envp:
            key, value = parse_entry(line)
            if key == "_":
                continue
            env._vars[key] = value
        return env

    def get(self, key: str) -> str | None:
        """Return the value of ``key``, or None if unset or valueless."""
        return self._vars.get(key)

    def set(self, key: str, value: str | None) -> None:
        """Set ``key``; new keys go to the end, existing keys keep their place."""
        self._vars[key] = value

    def unset(self, key: str) -> None:
        """Remove ``key`` if present."""
        self._vars.pop(key, None)

    def keys(self) -> list[str]:
        """Return the variable names in order."""
        return list(self._vars)

    def to_envp(self) -> list[str]:
        """Return ``KEY=VALUE`` strings, or bare ``KEY`` for valueless entries."""
        return [
            key if value is None else f"{key}={value}"
            for key, value in self._vars.items()
        ]

    def __len__(self) -> int:
        return len(self._vars)

    def __contains__(self, key: object) -> bool:
        return key in self._vars

    def __iter__(self) -> Iterator[str]:
        return iter(self._vars)