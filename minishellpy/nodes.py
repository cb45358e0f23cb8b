"""The command tree produced by the parser and walked by the executor."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum


class NodeKind(Enum):
    """What a tree node stands for."""

    COMMAND = "command"
    PIPE = "|"
    AND = "&&"
    OR = "||"
    SUBSHELL = "()"


@dataclass
class Redirect:
    """One redirection; for a here-document ``filename`` is the delimiter."""

    filename: str
    append: bool = False
    quoted: bool = False


@dataclass
class Node:
    """A simple command or an operator joining subtrees."""

    kind: NodeKind
    argv: list[str] = field(default_factory=list)
    file_in: list[Redirect] = field(default_factory=list)
    heredoc: list[Redirect] = field(default_factory=list)
    file_out: list[Redirect] = field(default_factory=list)
    left: Node | None = None
    right: Node | None = None

    def is_operator(self) -> bool:
        """True for pipes, ``&&``, ``||`` and subshells."""
        return self.kind is not NodeKind.COMMAND

    def walk(self) -> Iterator[Node]:
        """Yield this node, then its left subtree, then its right subtree."""
        yield self
        if self.left is not None:
            yield from self.left.walk()
        if self.right is not None:
            yield from self.right.walk()


def command(
    argv: Iterable[str],
    file_in: Iterable[Redirect] = (),
    heredoc: Iterable[Redirect] = (),
    file_out: Iterable[Redirect] = (),
) -> Node:
    """Build a simple command node."""
    return Node(
        NodeKind.COMMAND,
        argv=list(argv),
        file_in=list(file_in),
        heredoc=list(heredoc),
        file_out=list(file_out),
    )


def operator(kind: NodeKind, left: Node, right: Node | None = None) -> Node:
    """Build an operator node; a subshell takes only ``left``."""
    if kind is NodeKind.COMMAND:
        raise ValueError("an operator node needs an operator kind")
    if kind is NodeKind.SUBSHELL:
        if right is not None:
            raise ValueError("a subshell has a single child")
    elif right is None:
        raise ValueError(f"operator {kind.value} needs two operands")
    return Node(kind, left=left, right=right)