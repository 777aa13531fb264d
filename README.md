# minishell

A small interactive shell. It reads a line at a time, splits it into words
and operators, checks the syntax, expands variables and quotes, builds a
command tree and runs the external programs it names.

## Features

- Commands found through `PATH`, or given by a path
- Pipes: `ls | grep py | wc -l`
- Redirections: `<`, `>`, `>>`, and here-documents with `<<`
- Single and double quotes; `$NAME` and `$?` expansion
- `SHLVL` is incremented at start-up, `OLDPWD` starts out without a value,
  and the `_` variable is dropped
- Ctrl-C at the prompt gives a fresh prompt; Ctrl-D prints `exit` and leaves
  the shell with the last exit status

## Installation

```
pip install .
```

## Usage

Start the shell:

```
minishell
```

At the `Minishell>` prompt:

```
Minishell>echo "hello $USER"
Minishell>cat << EOF > notes.txt
> first line
> EOF
Minishell>cat notes.txt | wc -l
Minishell>echo $?
```

A syntax error, such as an unclosed quote or a pipe with nothing after it,
prints a message and sets the exit status to 258. A command that is not
found exits with status 127; a path to a directory gives 126. A process
killed by Ctrl-C or Ctrl-\ gives 128 plus the signal number.

## Using it from Python

```python
from minishell.shell import Shell

shell = Shell({"PATH": "/usr/bin:/bin", "HOME": "/tmp"})
status = shell.process_line("echo hello | tr a-z A-Z")
```

`Shell.process_line` returns the exit status of the line; `Shell.run` takes a
function that reads a line for a given prompt and loops until it returns
`None`. The stages are available on their own as well:

- `minishell.tokens.tokenize` splits a line into `Token` objects
- `minishell.syntax.check_syntax` raises `ShellSyntaxError` for bad input
- `minishell.expand.expand_word` and `expand_tokens` expand variables and
  remove quotes, using an `minishell.env.Environment`
- `minishell.tree.build_tree` builds a tree of `Pipe` and `Command` nodes
- `minishell.heredoc.collect_heredocs` reads here-document bodies
- `minishell.executor.Executor.run` runs a tree and returns its status

## What it does not do

- There are no built-in commands. `cd`, `export`, `unset` and `exit` are
  not available, and `echo`, `pwd` and `env` run as the external programs
  found on `PATH`, so nothing a command does changes the shell's own
  directory or environment.
- There are no `;`, `&&`, `||`, subshells, globbing or job control.

## Running the tests

```
pip install ".[test]"
pytest
```