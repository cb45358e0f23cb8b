"""The shell's environment list and the export, unset and env operations on it."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import TextIO


def _identifier_length(word: str) -> int:
    """Length of the leading identifier in ``word``; 0 if it starts with a digit."""
    if not word or word[0].isdigit():
        return 0
    length = 0
    for char in word:
        if not (char.isascii() and (char.isalnum() or char == "_")):
            break
        length += 1
    return length


def _name_matches(entry: str, name: str) -> bool:
    """True when ``entry`` defines exactly ``name``, with or without a value."""
    size = len(name)
    if entry[:size] != name:
        return False
    return len(entry) == size or entry[size] == "="


def is_valid_identifier(word: str) -> bool:
    """True when ``word`` is an acceptable export argument.

    That is ``NAME``, ``NAME=value`` or ``NAME+=value``.
    """
    length = _identifier_length(word)
    if length == 0:
        return False
    rest = word[length:]
    return rest == "" or rest.startswith("=") or rest.startswith("+=")


class ShellEnv:
    """An ordered list of ``NAME=value`` and bare ``NAME`` entries."""

    def __init__(self, entries: Iterable[str] = ()) -> None:
        self._entries: list[str] = list(entries)

    def get(self, name: str) -> str | None:
        """Return the value of ``name``, or None if it is unset or has no value."""
        for entry in self._entries:
            if entry.startswith(name + "="):
                return entry[len(name) + 1:]
        return None

    def entries(self) -> list[str]:
        """Return a copy of the entries, in order."""
        return list(self._entries)

    def _find(self, name: str) -> int | None:
        for position, entry in enumerate(self._entries):
            if _name_matches(entry, name):
                return position
        return None

    def export(self, args: Iterable[str], err: TextIO | None = None) -> int:
        """Define or update variables; return 1 if any argument was invalid."""
        stream = err if err is not None else sys.stderr
        status = 0
        for word in args:
            if not is_valid_identifier(word):
                stream.write(f"minishell: export: {word}: not a valid identifier\n")
                status = 1
                continue
            length = _identifier_length(word)
            name = word[:length]
            concatenate = word[length:].startswith("+=")
            position = self._find(name)
            if position is None:
                if concatenate:
                    word = name + word[length + 1:]
                self._entries.append(word)
                continue
            current = self._entries[position]
            if concatenate:
                if len(current) == length:
                    self._entries[position] = current + word[length + 1:]
                else:
                    self._entries[position] = current + word[length + 2:]
            elif len(word) > length:
                self._entries[position] = word
        return status

    def unset(self, names: Iterable[str]) -> int:
        """Remove every entry whose name is among ``names``."""
        targets = list(names)
        self._entries = [
            entry
            for entry in self._entries
            if not any(_name_matches(entry, name) for name in targets)
        ]
        return 0

    def declarations(self) -> list[str]:
        """Lines listing the entries the way a bare ``export`` prints them."""
        lines = []
        for entry in self._entries:
            name, equals, value = entry.partition("=")
            if not equals:
                lines.append(f"declare -x {entry}")
            elif name != "_":
                lines.append(f'declare -x {name}="{value}"')
        return lines

    def printable(self) -> list[str]:
        """Entries that ``env`` prints: those with a value."""
        result = []
        for entry in self._entries:
            length = _identifier_length(entry)
            if entry[length:length + 1] == "=":
                result.append(entry)
        return result