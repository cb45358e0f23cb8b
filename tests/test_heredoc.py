import io
from pathlib import Path

from minishellpy.environment import ShellEnv
from minishellpy.heredoc import (
    collect_heredoc,
    expand_heredoc,
    expand_name,
    next_heredoc_path,
)


def test_expand_name_reads_identifier():
    text = "$HOME rest"
    name, end = expand_name(text, 1)
    assert name == "HOME"
    assert text[end:] == " rest"


def test_expand_name_digit_gives_empty():
    assert expand_name("$1abc", 1) == ("", 1)


def test_expand_known_variable():
    shell_env = ShellEnv(["USER=alice"])
    assert expand_heredoc("hi $USER!", shell_env, 0) == "hi alice!"


def test_expand_unknown_variable_vanishes():
    assert expand_heredoc("a$NOPE b", ShellEnv([]), 0) == "a b"


def test_expand_status():
    assert expand_heredoc("code $?", ShellEnv([]), 42) == "code 42"


def test_lone_dollar_and_digit_kept():
    shell_env = ShellEnv([])
    assert expand_heredoc("cost $", shell_env, 0) == "cost $"
    assert expand_heredoc("$1abc", shell_env, 0) == "$1abc"


def test_expand_without_dollar_is_identity():
    text = "plain text, no vars"
    assert expand_heredoc(text, ShellEnv(["A=1"]), 3) == text


def test_collect_stops_at_delimiter():
    shell_env = ShellEnv(["X=v"])
    err = io.StringIO()
    body = collect_heredoc("EOF", False, ["hello $X", "EOF", "after"], shell_env, 0, err)
    assert body == "hello v\n"
    assert err.getvalue() == ""


def test_collect_quoted_does_not_expand():
    shell_env = ShellEnv(["X=v"])
    body = collect_heredoc("EOF", True, ["$X", "EOF"], shell_env, 0, io.StringIO())
    assert body == "$X\n"


def test_collect_warns_on_end_of_input():
    err = io.StringIO()
    body = collect_heredoc("END", True, ["a", "b"], ShellEnv([]), 0, err)
    assert body == "a\nb\n"
    assert err.getvalue() == "Warning: got end-of-file, expected: END\n"


def test_next_heredoc_path_skips_existing(tmp_path):
    first = next_heredoc_path(tmp_path)
    assert Path(first).name == "here_doc-" + "0" * 17
    Path(first).write_text("")
    second = next_heredoc_path(tmp_path)
    assert second != first
    assert not Path(second).exists()
    assert Path(second).parent == tmp_path