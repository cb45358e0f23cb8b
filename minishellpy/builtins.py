"""Commands the shell runs itself: echo, pwd, cd, env, export, unset and exit."""

from __future__ import annotations

import os
from typing import TextIO

from minishellpy.environment import ShellEnv
from minishellpy.textutils import atoi

_LONG_MAX = "9223372036854775807"
_LONG_MIN_ABS = "9223372036854775808"


class ShellExit(Exception):
    """Raised by ``exit`` to end the shell with ``status``."""

    def __init__(self, status: int) -> None:
        super().__init__(status)
        self.status = status


def _is_echo_option(word: str) -> bool:
    return word.startswith("-") and all(char == "n" for char in word[1:])


def echo(argv: list[str], out: TextIO, err: TextIO) -> int:
    """Print the arguments separated by blanks; ``-n`` drops the newline."""
    words = argv[1:]
    newline = True
    while words and _is_echo_option(words[0]):
        newline = False
        words = words[1:]
    status = 0
    try:
        out.write(" ".join(words))
        if newline:
            out.write("\n")
    except OSError as exc:
        err.write(f"echo: {exc.strerror}\n")
        status = 125
    return status


def pwd(argv: list[str], out: TextIO, err: TextIO) -> int:
    """Print the current working directory."""
    if len(argv) > 1 and argv[1].startswith("-") and len(argv[1]) > 1:
        err.write("pwd: no options allowed\n")
        return 2
    try:
        out.write(os.getcwd() + "\n")
    except OSError as exc:
        err.write(f"pwd: {exc.strerror}\n")
        return 125
    return 0


def _update_pwd(shell_env: ShellEnv, old_pwd: str | None, err: TextIO) -> int:
    if old_pwd is None:
        err.write("cd: cannot update OLDPWD var\n")
    try:
        current = os.getcwd()
    except OSError as exc:
        if old_pwd is None:
            err.write(f"cd: cannot update PWD var: {exc.strerror}\n")
        return 0
    if old_pwd is not None and shell_env.get("OLDPWD") is not None:
        shell_env.export([f"OLDPWD={old_pwd}"], err)
    shell_env.export([f"PWD={current}"], err)
    return 0


def cd(argv: list[str], shell_env: ShellEnv, err: TextIO) -> int:
    """Change directory and keep PWD and OLDPWD up to date."""
    try:
        old_pwd: str | None = os.getcwd()
    except OSError:
        old_pwd = None
    if len(argv) < 2:
        home = shell_env.get("HOME")
        try:
            if home is None:
                raise FileNotFoundError
            os.chdir(home)
        except OSError:
            err.write("cd: HOME not set\n")
            return 1
    elif len(argv) > 2:
        err.write("cd: too many arguments\n")
        return 1
    else:
        try:
            os.chdir(argv[1])
        except OSError as exc:
            err.write(f"cd: {argv[1]}: {exc.strerror}\n")
            return 1
    return _update_pwd(shell_env, old_pwd, err)


def env_builtin(argv: list[str], shell_env: ShellEnv, out: TextIO) -> int:
    """Print every variable that has a value."""
    status = 0
    for entry in shell_env.printable():
        try:
            out.write(entry + "\n")
        except OSError:
            status = 125
    return status


def export_builtin(
    argv: list[str], shell_env: ShellEnv, out: TextIO, err: TextIO
) -> int:
    """Define variables, or list them when called without arguments."""
    if len(argv) < 2:
        for line in shell_env.declarations():
            out.write(line + "\n")
        return 0
    return shell_env.export(argv[1:], err)


def unset_builtin(argv: list[str], shell_env: ShellEnv) -> int:
    """Remove the named variables."""
    return shell_env.unset(argv[1:])


def is_numeric_exit_argument(text: str) -> bool:
    """True when ``text`` is a decimal number that fits a signed 64-bit integer."""
    sign = 1 if text[:1] in ("-", "+") else 0
    digits = text[sign:]
    if not all("0" <= char <= "9" for char in digits):
        return False
    if len(digits) > len(_LONG_MAX):
        return False
    if len(digits) == len(_LONG_MAX):
        limit = _LONG_MIN_ABS if text.startswith("-") else _LONG_MAX
        return digits <= limit
    return True


def exit_builtin(argv: list[str], last_status: int, err: TextIO) -> int:
    """Raise ShellExit; return 1 instead when given too many arguments."""
    status = last_status
    if len(argv) > 1:
        if is_numeric_exit_argument(argv[1]):
            status = atoi(argv[1]) & 0xFF
            if len(argv) > 2:
                err.write("exit: too many arguments\n")
                return 1
        else:
            err.write(f"exit: {argv[1]}: numeric argument required\n")
            status = 2
    raise ShellExit(status)