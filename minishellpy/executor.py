"""Running a command tree: builtins, programs, pipelines, subshells, && and ||."""

from __future__ import annotations

import os
import signal
import subprocess
import sys
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import BinaryIO, TextIO

from minishellpy.builtins import (
    ShellExit,
    cd,
    echo,
    env_builtin,
    exit_builtin,
    export_builtin,
    pwd,
    unset_builtin,
)
from minishellpy.environment import ShellEnv
from minishellpy.heredoc import collect_heredoc
from minishellpy.nodes import Node, NodeKind, Redirect
from minishellpy.pathsearch import CommandLookupError, resolve_command
from minishellpy.redirections import (
    HeredocInterrupted,
    RedirectionError,
    open_input,
    open_output,
)

_SIGQUIT = getattr(signal, "SIGQUIT", 3)
_BUILTINS = frozenset({"echo", "pwd", "env", "export", "unset", "cd", "exit"})
# Statuses after which the right side of || is skipped.
_OR_STOPS = frozenset({0, 130, 131})


def status_from_returncode(returncode: int, err: TextIO | None = None) -> int:
    """Turn a child's return code into the shell's exit status.

    A child killed by SIGINT gives 130; one killed by SIGQUIT gives 131
    after "Quit (core dumped)" is reported; other signals give 128 plus
    the signal number.
    """
    if returncode >= 0:
        return returncode
    signum = -returncode
    if signum == signal.SIGINT:
        return 130
    if signum == _SIGQUIT:
        (err if err is not None else sys.stderr).write("Quit (core dumped)\n")
        return 131
    return 128 + signum


def _prompt_lines() -> Iterator[str]:
    while True:
        try:
            yield input("heredoc > ")
        except EOFError:
            return


def _fileno(stream: TextIO) -> int | None:
    try:
        return stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None


def _flush(stream: TextIO) -> None:
    try:
        stream.flush()
    except (AttributeError, OSError, ValueError):
        pass


def _close(handle: BinaryIO | None) -> None:
    if handle is not None:
        handle.close()


def _close_fd(fd: int | None) -> None:
    if fd is not None:
        try:
            os.close(fd)
        except OSError:
            pass


def _current_dir() -> str | None:
    try:
        return os.getcwd()
    except OSError:
        return None


def _pipeline_stages(node: Node) -> Iterator[Node]:
    if node.kind is NodeKind.PIPE:
        if node.left is not None:
            yield from _pipeline_stages(node.left)
        if node.right is not None:
            yield from _pipeline_stages(node.right)
    else:
        yield node


@dataclass
class _Finished:
    status: int

    def wait(self) -> int:
        return self.status


@dataclass
class _Running:
    proc: subprocess.Popen
    stdout: TextIO
    stderr: TextIO

    def wait(self) -> int:
        while True:
            try:
                out, errors = self.proc.communicate()
                break
            except KeyboardInterrupt:
                continue
        if out:
            self.stdout.write(out.decode(errors="replace"))
        if errors:
            self.stderr.write(errors.decode(errors="replace"))
        return status_from_returncode(self.proc.returncode, self.stderr)


@dataclass
class _Threaded:
    thread: threading.Thread
    result: list[int] = field(default_factory=list)

    def wait(self) -> int:
        self.thread.join()
        return self.result[0] if self.result else 1


class Executor:
    """Runs command trees against one shell environment."""

    def __init__(
        self,
        shell_env: ShellEnv,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
        heredoc_lines: Iterable[str] | None = None,
    ) -> None:
        self.shell_env = shell_env
        self._stdout = stdout if stdout is not None else sys.stdout
        self._stderr = stderr if stderr is not None else sys.stderr
        self._heredoc_source: Iterator[str] | None = (
            iter(heredoc_lines) if heredoc_lines is not None else None
        )
        self._stdin_fd: int | None = None
        self._status = 0

    def last_status(self) -> int:
        """The exit status of the last command run."""
        return self._status

    def run(self, tree: Node | None) -> int:
        """Run ``tree`` and return its exit status.

        ShellExit raised by the ``exit`` builtin is left to the caller.
        """
        if tree is None:
            return self._status
        try:
            status = self._run(tree)
        except HeredocInterrupted:
            status = 130
        self._status = status
        return status

    def _run(self, node: Node, in_pipe: bool = False) -> int:
        if node.kind is NodeKind.COMMAND:
            status = self._launch(node, None, None, in_pipe).wait()
        elif node.kind is NodeKind.PIPE:
            status = self._run_pipeline(node)
        elif node.kind is NodeKind.SUBSHELL:
            status = self._run_subshell(node)
        else:
            return self._run_logical(node)
        self._status = status
        return status

    def _run_logical(self, node: Node) -> int:
        left = self._run(node.left) if node.left is not None else self._status
        if node.kind is NodeKind.OR and left in _OR_STOPS:
            return left
        if node.kind is NodeKind.AND and left != 0:
            return left
        if node.right is None:
            return left
        return self._run(node.right)

    def _run_pipeline(self, node: Node) -> int:
        stages = list(_pipeline_stages(node))
        handles: list = []
        read_fd: int | None = None
        try:
            for position, stage in enumerate(stages):
                next_read: int | None = None
                write_fd: int | None = None
                if position < len(stages) - 1:
                    next_read, write_fd = os.pipe()
                try:
                    handles.append(self._start_stage(stage, read_fd, write_fd))
                except BaseException:
                    _close_fd(next_read)
                    raise
                read_fd = next_read
        finally:
            statuses = [handle.wait() for handle in reversed(handles)]
        return statuses[0]

    def _start_stage(self, stage: Node, stdin_fd: int | None, stdout_fd: int | None):
        """Start one pipeline stage; the stage takes over both descriptors."""
        if stage.kind is NodeKind.COMMAND and (
            not stage.argv or stage.argv[0] not in _BUILTINS
        ):
            try:
                return self._launch(stage, stdin_fd, stdout_fd, True)
            finally:
                _close_fd(stdin_fd)
                _close_fd(stdout_fd)
        result: list[int] = []

        def body() -> None:
            try:
                result.append(self._run_in_child(stage, stdin_fd, stdout_fd, True))
            except Exception as exc:
                self._stderr.write(f"minishell: {exc}\n")
                result.append(1)
            finally:
                _close_fd(stdin_fd)
                _close_fd(stdout_fd)

        thread = threading.Thread(target=body, daemon=True)
        try:
            thread.start()
        except BaseException:
            _close_fd(stdin_fd)
            _close_fd(stdout_fd)
            raise
        return _Threaded(thread, result)

    def _run_subshell(self, node: Node) -> int:
        try:
            infile, outfile = self._open_redirections(node)
        except RedirectionError:
            return 1
        try:
            in_fd = infile.fileno() if infile is not None else None
            out_fd = outfile.fileno() if outfile is not None else None
            if node.left is None:
                return 0
            return self._run_in_child(node.left, in_fd, out_fd, False)
        finally:
            _close(infile)
            _close(outfile)

    def _run_in_child(
        self, node: Node, stdin_fd: int | None, stdout_fd: int | None, in_pipe: bool
    ) -> int:
        """Run ``node`` as a forked shell would: on a copy of the environment,
        with the working directory put back afterwards."""
        saved_dir = _current_dir()
        stream = (
            open(stdout_fd, "w", encoding="utf-8", closefd=False)
            if stdout_fd is not None
            else None
        )
        child = Executor(
            ShellEnv(self.shell_env.entries()),
            stream if stream is not None else self._stdout,
            self._stderr,
        )
        child._heredoc_source = self._heredoc_source
        child._stdin_fd = stdin_fd if stdin_fd is not None else self._stdin_fd
        child._status = self._status
        try:
            return child._run(node, in_pipe)
        except ShellExit as exc:
            return exc.status
        except HeredocInterrupted:
            return 130
        finally:
            if stream is not None:
                try:
                    stream.close()
                except OSError:
                    pass
            if saved_dir is not None:
                try:
                    os.chdir(saved_dir)
                except OSError:
                    pass

    def _launch(
        self, node: Node, stdin_fd: int | None, stdout_fd: int | None, in_pipe: bool
    ):
        self._note_last_argument(node.argv)
        try:
            infile, outfile = self._open_redirections(node)
        except RedirectionError:
            return _Finished(1)
        try:
            if not node.argv:
                return _Finished(0)
            in_fd = infile.fileno() if infile is not None else stdin_fd
            out_fd = outfile.fileno() if outfile is not None else stdout_fd
            if node.argv[0] in _BUILTINS:
                return _Finished(self._run_builtin(node.argv, out_fd, in_pipe))
            return self._spawn(node.argv, in_fd, out_fd)
        finally:
            _close(infile)
            _close(outfile)

    def _note_last_argument(self, argv: list[str]) -> None:
        value = argv[-1] if argv else ""
        self.shell_env.export([f"_={value}"], self._stderr)

    def _read_heredoc(self, redirect: Redirect) -> str:
        lines = self._heredoc_source if self._heredoc_source is not None else _prompt_lines()
        return collect_heredoc(
            redirect.filename, redirect.quoted, lines, self.shell_env, self._status, self._stderr
        )

    def _open_redirections(self, node: Node) -> tuple[BinaryIO | None, BinaryIO | None]:
        infile: BinaryIO | None = None
        outfile: BinaryIO | None = None
        failures: list[RedirectionError] = []
        interrupted: HeredocInterrupted | None = None
        try:
            infile = open_input(node.file_in, node.heredoc, self._read_heredoc)
        except RedirectionError as exc:
            failures.append(exc)
        except HeredocInterrupted as exc:
            interrupted = exc
        try:
            outfile = open_output(node.file_out)
        except RedirectionError as exc:
            failures.append(exc)
        if interrupted is not None or failures:
            _close(infile)
            _close(outfile)
        if interrupted is not None:
            raise interrupted
        if failures:
            for failure in failures:
                self._stderr.write(f"{failure}\n")
            raise failures[0]
        return infile, outfile

    @contextmanager
    def _output(self, out_fd: int | None) -> Iterator[TextIO]:
        if out_fd is None:
            try:
                yield self._stdout
            finally:
                _flush(self._stdout)
            return
        stream = open(out_fd, "w", encoding="utf-8", closefd=False)
        try:
            yield stream
        finally:
            try:
                stream.close()
            except OSError:
                pass

    def _run_builtin(self, argv: list[str], out_fd: int | None, in_pipe: bool) -> int:
        name = argv[0]
        with self._output(out_fd) as out:
            if name == "echo":
                return echo(argv, out, self._stderr)
            if name == "pwd":
                return pwd(argv, out, self._stderr)
            if name == "env":
                return env_builtin(argv, self.shell_env, out)
            if name == "export":
                return export_builtin(argv, self.shell_env, out, self._stderr)
            if name == "unset":
                return unset_builtin(argv, self.shell_env)
            if name == "cd":
                return cd(argv, self.shell_env, self._stderr)
            if not in_pipe:
                self._stderr.write("exit\n")
            return exit_builtin(argv, self._status, self._stderr)

    def _process_env(self) -> dict[str, str]:
        return dict(entry.split("=", 1) for entry in self.shell_env.printable())

    def _spawn(self, argv: list[str], stdin_fd: int | None, stdout_fd: int | None):
        try:
            path = resolve_command(argv[0], self.shell_env)
        except CommandLookupError as exc:
            self._stderr.write(f"{exc}\n")
            return _Finished(exc.status)
        stdin = stdin_fd if stdin_fd is not None else self._stdin_fd
        stdout = stdout_fd if stdout_fd is not None else _fileno(self._stdout)
        stderr = _fileno(self._stderr)
        _flush(self._stdout)
        _flush(self._stderr)
        try:
            proc = subprocess.Popen(
                argv,
                executable=path,
                stdin=stdin,
                stdout=subprocess.PIPE if stdout is None else stdout,
                stderr=subprocess.PIPE if stderr is None else stderr,
                env=self._process_env(),
            )
        except OSError as exc:
            self._stderr.write(f"{argv[0]}: {exc.strerror or exc}\n")
            return _Finished(2)
        return _Running(proc, self._stdout, self._stderr)