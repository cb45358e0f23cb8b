"""Finding the program a command name refers to."""

from __future__ import annotations

import os

from minishellpy.environment import ShellEnv
from minishellpy.textutils import split


class CommandLookupError(Exception):
    """A command could not be run; ``status`` is the exit status to report."""

    NOT_FOUND = "command not found"
    IS_DIRECTORY = "is a directory"
    PERMISSION_DENIED = "permission denied"

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"{name}: {reason}")
        self.name = name
        self.reason = reason

    @property
    def status(self) -> int:
        """127 when nothing was found, 126 when something unrunnable was."""
        return 127 if self.reason == self.NOT_FOUND else 126


def check_executable(path: str) -> str:
    """Return ``path`` if it names a runnable file, else raise CommandLookupError."""
    if not path or not os.path.exists(path):
        raise CommandLookupError(path, CommandLookupError.NOT_FOUND)
    if os.path.isdir(path):
        raise CommandLookupError(path, CommandLookupError.IS_DIRECTORY)
    if not os.access(path, os.X_OK):
        raise CommandLookupError(path, CommandLookupError.PERMISSION_DENIED)
    return path


def find_in_path(cmd: str, shell_env: ShellEnv) -> str:
    """Search the directories of PATH for ``cmd``.

    Without a PATH variable the command is looked for in the current
    directory and the result is not checked. When no directory holds a
    runnable file, the error reports a directory or permission problem
    met on the way in preference to a plain miss.
    """
    path_var = shell_env.get("PATH")
    if path_var is None:
        return "./" + cmd
    failure: str | None = None
    for directory in split(path_var, ":"):
        candidate = f"{directory}/{cmd}"
        try:
            return check_executable(candidate)
        except CommandLookupError as exc:
            if failure is None or exc.reason != CommandLookupError.NOT_FOUND:
                failure = exc.reason
    raise CommandLookupError(cmd, failure or CommandLookupError.NOT_FOUND)


def resolve_command(name: str, shell_env: ShellEnv) -> str:
    """Return the path of the program to run for the command ``name``."""
    if not name:
        raise CommandLookupError(name, CommandLookupError.NOT_FOUND)
    if "/" in name:
        candidate = name
    elif shell_env.get("PATH") is not None:
        try:
            return find_in_path(name, shell_env)
        except CommandLookupError as exc:
            raise CommandLookupError(name, exc.reason) from exc
    else:
        candidate = find_in_path(name, shell_env)
    try:
        return check_executable(candidate)
    except CommandLookupError as exc:
        raise CommandLookupError(name, exc.reason) from exc