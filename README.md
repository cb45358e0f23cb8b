# minishellpy

The core of a small POSIX-style shell, usable as a library. It has no
third-party dependencies.

- `minishellpy.environment`: `ShellEnv` keeps the shell's environment in
  order and applies the rules of `export` and `unset`. These rules cover
  identifier checks, `NAME+=value` appends and names declared without a
  value. `is_valid_identifier` tells whether a word is an acceptable
  `export` argument.
- `minishellpy.builtins`: `echo`, `pwd`, `cd`, `env_builtin`,
  `export_builtin`, `unset_builtin` and `exit_builtin`. Each returns the
  exit status a shell would report. `exit_builtin` raises `ShellExit`,
  whose `status` attribute holds the status to leave with, and returns 1
  when it is given too many arguments.
- `minishellpy.heredoc`: `expand_heredoc` expands `$NAME` and `$?` in a
  here-document line. `collect_heredoc` gathers lines up to a delimiter.
  `next_heredoc_path` finds a free `here_doc-NNN…` file name in a
  directory.
- `minishellpy.nodes`: `Node`, `NodeKind` and `Redirect` describe a
  command line as a tree of commands joined by `|`, `&&`, `||` and
  subshells. `command()` and `operator()` build such trees.
- `minishellpy.pathsearch`: `resolve_command` and `find_in_path` resolve
  a command name through `PATH`. When `PATH` is unset, they look in the
  current directory. `check_executable` vets a path. Failures raise
  `CommandLookupError`, with `status` 127 for "command not found" and 126
  for "is a directory" or "permission denied".
- `minishellpy.redirections`: `open_input` and `open_output` open a
  command's redirections. Here-documents go to temporary files. An
  unopenable file raises `RedirectionError` (status 1). An interrupted
  here-document raises `HeredocInterrupted` (status 130).
- `minishellpy.executor`: `Executor` runs a command tree.
  `status_from_returncode` turns a child's return code into a shell
  status.
- `minishellpy.textutils`: small string helpers, namely `atoi`,
  `atoi_base`, `split`, `strtrim` and `substr`.

## Environment

```python
import sys
from minishellpy.environment import ShellEnv, is_valid_identifier

env = ShellEnv(["HOME=/home/user", "PATH=/usr/bin:/bin"])
env.export(["GREETING=hello"], sys.stderr)
env.export(["GREETING+=_world"], sys.stderr)
print(env.get("GREETING"))          # hello_world

env.unset(["GREETING"])
print(env.get("GREETING"))          # None

print(is_valid_identifier("1ABC"))  # False
```

`export` reports an invalid identifier on the error stream and returns 1.

Two methods give the listing forms:

- `ShellEnv.declarations()` returns the `declare -x …` lines that a bare
  `export` prints. The `_` variable is left out.
- `ShellEnv.printable()` returns the entries that `env` prints, which are
  those with a value.

## Builtins

```python
import sys
from minishellpy.builtins import echo, exit_builtin, ShellExit

echo(["echo", "-n", "no", "newline"], sys.stdout, sys.stderr)

try:
    exit_builtin(["exit", "42"], 0, sys.stderr)
except ShellExit as done:
    print(done.status)              # 42
```

`exit` keeps the low eight bits of its argument. An argument that is not
a number, or that does not fit in 64 bits, gives status 2.

## Here-documents

```python
from minishellpy.environment import ShellEnv
from minishellpy.heredoc import expand_heredoc

env = ShellEnv(["USER=alice"])
print(expand_heredoc("hi $USER, last status $?", env, 1))
# hi alice, last status 1
```

Pass `quoted=True` to `collect_heredoc` for a delimiter that was quoted on
the command line, and the lines are kept as they are. When the lines run
out before the delimiter, a warning is written to the error stream.

## Running commands

```python
import sys
from minishellpy.environment import ShellEnv
from minishellpy.executor import Executor
from minishellpy.nodes import command, operator, NodeKind

env = ShellEnv(["PATH=/usr/bin:/bin"])
executor = Executor(env, sys.stdout, sys.stderr, [])
executor.run(command(["echo", "hello"], [], [], []))
print(executor.last_status())       # 0

tree = operator(NodeKind.OR, command(["false"]), command(["echo", "fallback"]))
executor.run(tree)
```

### Where commands run

- **Builtins** run inside the shell. `export`, `unset` and `cd` therefore
  change the executor's environment and working directory.
- **Other programs** are started as child processes. They receive the
  entries of the environment that have a value.
- **Pipeline stages** are connected by pipes. The status of the last
  stage is the pipeline's status.
- **Builtins in a pipeline, and subshells,** work on a copy of the
  environment, and the working directory is restored afterwards.

### Evaluation and here-document input

- `&&` runs its right side only after a status of 0.
- `||` skips its right side after a status of 0, 130 or 131.
- Before each command, `_` is set to the command's last argument.
- Here-document lines come from the `heredoc_lines` iterable. When it is
  `None`, they are read interactively with a `heredoc > ` prompt.
- `run` returns the status. A `ShellExit` raised by `exit` outside a
  pipeline or subshell is left to the caller.

### Exit statuses

| Outcome | Status |
| --- | --- |
| Command that cannot be found | 127 |
| Command that cannot be run | 126 |
| Child killed by SIGINT, or interrupted here-document | 130 |
| Child killed by SIGQUIT (reports "Quit (core dumped)") | 131 |
| Child killed by any other signal | 128 plus the signal number |

## What the package does not do

The package is not an interactive shell on its own. It provides:

- no command to start;
- no prompt or read-eval loop;
- no line history;
- no tokenizer or parser that turns text into a `Node` tree;
- no expansion of variables, wildcards or quotes in command words (only
  here-document lines are expanded);
- no installation of signal handlers.

Trees must be built with `command()` and `operator()`.

## Tests

The test suite uses pytest, which is listed in the `test` extra.