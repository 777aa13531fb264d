"""A small interactive shell with pipes, redirections, heredocs and variable expansion."""

__version__ = "0.1.0"