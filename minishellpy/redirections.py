"""Opening the files a command's redirections name."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Callable, Sequence
from typing import BinaryIO

from minishellpy.nodes import Redirect


class RedirectionError(Exception):
    """A redirection target could not be opened."""

    status = 1

    def __init__(self, filename: str, reason: str) -> None:
        super().__init__(f"{filename}: {reason}")
        self.filename = filename
        self.reason = reason


class HeredocInterrupted(Exception):
    """Reading a here-document was cancelled by the user."""

    status = 130


def _close(handle: BinaryIO | None) -> None:
    if handle is not None:
        handle.close()


def _heredoc_file(redirect: Redirect, read_heredoc: Callable[[Redirect], str]) -> BinaryIO:
    try:
        content = read_heredoc(redirect)
    except KeyboardInterrupt as exc:
        raise HeredocInterrupted() from exc
    try:
        handle = tempfile.TemporaryFile("w+b")
    except OSError as exc:
        raise RedirectionError("here-document", exc.strerror or str(exc)) from exc
    handle.write(content.encode())
    handle.seek(0)
    return handle


def _open_read(filename: str) -> BinaryIO:
    try:
        return open(filename, "rb")
    except OSError as exc:
        raise RedirectionError(filename, exc.strerror or str(exc)) from exc


def _open_write(redirect: Redirect) -> BinaryIO:
    flags = os.O_WRONLY | os.O_CREAT
    flags |= os.O_APPEND if redirect.append else os.O_TRUNC
    try:
        descriptor = os.open(redirect.filename, flags, 0o777)
    except OSError as exc:
        raise RedirectionError(redirect.filename, exc.strerror or str(exc)) from exc
    return os.fdopen(descriptor, "ab" if redirect.append else "wb")


def open_input(
    file_in: Sequence[Redirect],
    heredoc: Sequence[Redirect],
    read_heredoc: Callable[[Redirect], str],
) -> BinaryIO | None:
    """Open a command's input; None when it has no input redirection.

    Every here-document is read first, then every input file is opened in
    turn; the last one opened is the one returned and the others are closed.
    """
    current: BinaryIO | None = None
    try:
        for redirect in heredoc:
            _close(current)
            current = None
            current = _heredoc_file(redirect, read_heredoc)
        for redirect in file_in:
            _close(current)
            current = None
            current = _open_read(redirect.filename)
    except BaseException:
        _close(current)
        raise
    return current


def open_output(file_out: Sequence[Redirect]) -> BinaryIO | None:
    """Create or open each output file in turn and return the last one."""
    current: BinaryIO | None = None
    for redirect in file_out:
        _close(current)
        current = None
        current = _open_write(redirect)
    return current