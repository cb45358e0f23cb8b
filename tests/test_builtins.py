import io
import os

import pytest

from minishellpy.builtins import (
    ShellExit,
    cd,
    echo,
    env_builtin,
    exit_builtin,
    export_builtin,
    is_numeric_exit_argument,
    pwd,
    unset_builtin,
)
from minishellpy.environment import ShellEnv


def _streams():
    return io.StringIO(), io.StringIO()


def test_echo_joins_with_newline():
    out, err = _streams()
    assert echo(["echo", "a", "b"], out, err) == 0
    assert out.getvalue() == "a b\n"


def test_echo_options_suppress_newline():
    out, err = _streams()
    echo(["echo", "-n", "-nnn", "hi", "-n"], out, err)
    assert out.getvalue() == "hi -n"


def test_echo_lone_dash_counts_as_option():
    out, err = _streams()
    echo(["echo", "-", "x"], out, err)
    assert out.getvalue() == "x"


def test_echo_invalid_option_is_text():
    out, err = _streams()
    echo(["echo", "-nx"], out, err)
    assert out.getvalue() == "-nx\n"


def test_pwd_prints_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    out, err = _streams()
    assert pwd(["pwd"], out, err) == 0
    assert out.getvalue() == os.getcwd() + "\n"


def test_pwd_rejects_options():
    out, err = _streams()
    assert pwd(["pwd", "-L"], out, err) == 2
    assert err.getvalue() == "pwd: no options allowed\n"
    assert out.getvalue() == ""


def test_cd_updates_pwd_and_oldpwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    start = os.getcwd()
    target = tmp_path / "sub"
    target.mkdir()
    shell_env = ShellEnv(["PWD=x", "OLDPWD=y"])
    err = io.StringIO()
    assert cd(["cd", str(target)], shell_env, err) == 0
    assert shell_env.get("PWD") == os.getcwd()
    assert shell_env.get("OLDPWD") == start


def test_cd_does_not_create_oldpwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    shell_env = ShellEnv([])
    cd(["cd", str(tmp_path)], shell_env, io.StringIO())
    assert shell_env.get("OLDPWD") is None
    assert shell_env.get("PWD") == os.getcwd()


def test_cd_home(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    home = tmp_path / "home"
    home.mkdir()
    shell_env = ShellEnv([f"HOME={home}"])
    assert cd(["cd"], shell_env, io.StringIO()) == 0
    assert os.path.samefile(os.getcwd(), home)


def test_cd_without_home():
    err = io.StringIO()
    assert cd(["cd"], ShellEnv([]), err) == 1
    assert err.getvalue() == "cd: HOME not set\n"


def test_cd_too_many_arguments():
    err = io.StringIO()
    assert cd(["cd", "a", "b"], ShellEnv([]), err) == 1
    assert err.getvalue() == "cd: too many arguments\n"


def test_cd_missing_directory(tmp_path):
    missing = str(tmp_path / "missing")
    err = io.StringIO()
    assert cd(["cd", missing], ShellEnv([]), err) == 1
    assert err.getvalue().startswith(f"cd: {missing}: ")


def test_env_prints_only_valued_entries():
    out = io.StringIO()
    shell_env = ShellEnv(["A=1", "B", "C="])
    assert env_builtin(["env"], shell_env, out) == 0
    assert out.getvalue() == "A=1\nC=\n"


def test_export_without_arguments_lists(monkeypatch):
    out, err = _streams()
    shell_env = ShellEnv(["A=1", "B"])
    export_builtin(["export"], shell_env, out, err)
    assert out.getvalue().splitlines() == shell_env.declarations()


def test_export_with_arguments_defines():
    out, err = _streams()
    shell_env = ShellEnv([])
    assert export_builtin(["export", "K=v"], shell_env, out, err) == 0
    assert shell_env.get("K") == "v"


def test_export_invalid_returns_one():
    out, err = _streams()
    assert export_builtin(["export", "1x"], ShellEnv([]), out, err) == 1


def test_unset_removes():
    shell_env = ShellEnv(["A=1", "B=2"])
    assert unset_builtin(["unset", "A"], shell_env) == 0
    assert shell_env.entries() == ["B=2"]


def test_exit_without_argument_uses_last_status():
    with pytest.raises(ShellExit) as info:
        exit_builtin(["exit"], 7, io.StringIO())
    assert info.value.status == 7


def test_exit_with_number():
    with pytest.raises(ShellExit) as info:
        exit_builtin(["exit", "42"], 0, io.StringIO())
    assert info.value.status == 42


def test_exit_wraps_negative():
    with pytest.raises(ShellExit) as info:
        exit_builtin(["exit", "-1"], 0, io.StringIO())
    assert info.value.status == 255


def test_exit_non_numeric():
    err = io.StringIO()
    with pytest.raises(ShellExit) as info:
        exit_builtin(["exit", "abc"], 0, err)
    assert info.value.status == 2
    assert "numeric argument required" in err.getvalue()


def test_exit_too_many_arguments_does_not_exit():
    err = io.StringIO()
    assert exit_builtin(["exit", "1", "2"], 0, err) == 1
    assert err.getvalue() == "exit: too many arguments\n"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("9223372036854775807", True),
        ("9223372036854775808", False),
        ("-9223372036854775808", True),
        ("+12", True),
        ("12a", False),
        ("99999999999999999999", False),
    ],
)
def test_is_numeric_exit_argument(text, expected):
    assert is_numeric_exit_argument(text) is expected