"""Core of a small POSIX-style shell: environment, builtins, here-documents, redirections and execution of command trees."""

__version__ = "0.1.0"

__all__ = [
    "builtins",
    "environment",
    "executor",
    "heredoc",
    "nodes",
    "pathsearch",
    "redirections",
    "textutils",
]