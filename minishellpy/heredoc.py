"""Here-document collection and variable expansion inside it."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import TextIO

from minishellpy.environment import ShellEnv

_COUNTER_DIGITS = 17


def _is_name_char(char: str) -> bool:
    return char.isascii() and (char.isalnum() or char == "_")


def expand_name(text: str, start: int) -> tuple[str, int]:
    """Read a variable name at ``start``; return it and the index after it.

    A name cannot begin with a digit, so the name is empty in that case.
    """
    if start < len(text) and text[start].isdigit():
        return "", start
    end = start
    while end < len(text) and _is_name_char(text[end]):
        end += 1
    return text[start:end], end


def expand_heredoc(text: str, shell_env: ShellEnv, last_status: int) -> str:
    """Replace ``$NAME`` and ``$?`` in one here-document line."""
    parts: list[str] = []
    index = 0
    while index < len(text):
        char = text[index]
        if char != "$":
            parts.append(char)
            index += 1
            continue
        name, end = expand_name(text, index + 1)
        is_status = not name and text[end:end + 1] == "?"
        if not name and not is_status:
            parts.append("$")
            index += 1
            continue
        value = shell_env.get(name) if name else None
        if value is not None:
            parts.append(value)
        elif is_status:
            parts.append(str(last_status))
            end += 1
        index = end
    return "".join(parts)


def collect_heredoc(
    delimiter: str,
    quoted: bool,
    lines: Iterable[str],
    shell_env: ShellEnv,
    last_status: int,
    err: TextIO | None = None,
) -> str:
    """Gather lines up to ``delimiter``, expanding them unless ``quoted``."""
    stream = err if err is not None else sys.stderr
    collected: list[str] = []
    for line in lines:
        if line == delimiter:
            break
        if not quoted:
            line = expand_heredoc(line, shell_env, last_status)
        collected.append(line + "\n")
    else:
        stream.write(f"Warning: got end-of-file, expected: {delimiter}\n")
    return "".join(collected)


def next_heredoc_path(directory: str | os.PathLike[str] = "/tmp") -> str:
    """Return the first free ``here_doc-NNN...`` path in ``directory``."""
    base = Path(directory)
    for counter in range(10 ** _COUNTER_DIGITS):
        candidate = base / f"here_doc-{counter:0{_COUNTER_DIGITS}d}"
        if not candidate.exists():
            return str(candidate)
    raise OSError("Not enough space for heredoc file")