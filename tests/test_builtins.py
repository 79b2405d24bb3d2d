import io
import os

import pytest

from pipeshell.builtins import (
    ShellExit,
    cd,
    echo,
    env_command,
    exit_builtin,
    export,
    is_builtin,
    is_n_flag,
    pwd,
    unset,
)
from pipeshell.command import SimpleCommand
from pipeshell.environment import Environment


def run(func, argv, env=None):
    out, err = io.StringIO(), io.StringIO()
    status = func(SimpleCommand(argv=argv), env or Environment([]), out, err)
    return status, out.getvalue(), err.getvalue()


@pytest.mark.parametrize("word", ["-n", "-nnnn"])
def test_n_flag_accepted(word):
    assert is_n_flag(word) is True


@pytest.mark.parametrize("word", ["-na", "-", "n", "", "--n"])
def test_n_flag_rejected(word):
    assert is_n_flag(word) is False


def test_echo_joins_with_spaces():
    assert run(echo, ["echo", "hello", "world"]) == (0, "hello world\n", "")


def test_echo_n_suppresses_newline():
    assert run(echo, ["echo", "-n", "hello"]) == (0, "hello", "")


def test_echo_only_first_n_flag_consumed():
    status, out, _ = run(echo, ["echo", "-n", "-n", "x"])
    assert out == "-n x"


def test_echo_without_arguments_prints_newline():
    assert run(echo, ["echo"])[1] == "\n"


def test_cd_changes_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "sub"
    target.mkdir()
    status, _, err = run(cd, ["cd", str(target)])
    assert status == 0
    assert os.path.samefile(os.getcwd(), target)


def test_cd_uses_home(tmp_path, monkeypatch):
    monkeypatch.chdir("/")
    status, _, _ = run(cd, ["cd"], Environment([f"HOME={tmp_path}"]))
    assert status == 0
    assert os.path.samefile(os.getcwd(), tmp_path)


def test_cd_home_not_set():
    assert run(cd, ["cd"]) == (1, "", "minishell: cd: HOME not set\n")


def test_cd_too_many_arguments():
    status, _, err = run(cd, ["cd", "a", "b"])
    assert status == 1
    assert err == "minishell: cd: too many arguments\n"


def test_cd_missing_directory(tmp_path):
    missing = str(tmp_path / "nope")
    status, _, err = run(cd, ["cd", missing])
    assert status == 1
    assert err.startswith(f"minishell: cd: {missing}: ")


def test_pwd_prints_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    status, out, _ = run(pwd, ["pwd"])
    assert status == 0
    assert out == os.getcwd() + "\n"


def test_env_prints_entries_with_values():
    status, out, _ = run(env_command, ["env"], Environment(["A=1", "B", "C=x"]))
    assert (status, out) == (0, "A=1\nC=x\n")


def test_env_refuses_flags():
    status, out, _ = run(env_command, ["env", "-i"], Environment(["A=1"]))
    assert status == 1
    assert out == "This command only works without the flag.\n"


def test_export_sets_variable():
    env = Environment(["A=1"])
    status, _, _ = run(export, ["export", "X=hello"], env)
    assert status == 0
    assert env.get("X") == "hello"


def test_export_without_arguments_lists_declarations():
    env = Environment(["B=2", "A=1"])
    status, out, _ = run(export, ["export"], env)
    assert status == 0
    assert out == "".join(line + "\n" for line in env.declarations())


def test_export_refuses_flags():
    status, _, err = run(export, ["export", "-p"])
    assert status == 1
    assert err == "This command only works without the flag.\n"


def test_unset_removes_variables():
    env = Environment(["A=1", "B=2", "C=3"])
    status, _, _ = run(unset, ["unset", "A", "C"], env)
    assert status == 0
    assert env.entries == ("B=2",)


def test_unset_refuses_flags():
    env = Environment(["A=1"])
    status, _, _ = run(unset, ["unset", "-v", "A"], env)
    assert status == 1
    assert env.entries == ("A=1",)


def test_exit_without_argument():
    out, err = io.StringIO(), io.StringIO()
    with pytest.raises(ShellExit) as info:
        exit_builtin(SimpleCommand(argv=["exit"]), Environment([]), out, err)
    assert info.value.code == 0
    assert out.getvalue() == "exit\n"


def test_exit_with_status():
    with pytest.raises(ShellExit) as info:
        run(exit_builtin, ["exit", "42"])
    assert info.value.code == 42


def test_exit_negative_wraps():
    with pytest.raises(ShellExit) as info:
        run(exit_builtin, ["exit", "-1"])
    assert info.value.code == 255


@pytest.mark.parametrize("arg", ["abc", "99999999999999999999"])
def test_exit_numeric_argument_required(arg):
    out, err = io.StringIO(), io.StringIO()
    with pytest.raises(ShellExit) as info:
        exit_builtin(SimpleCommand(argv=["exit", arg]), Environment([]), out, err)
    assert info.value.code == 2
    assert err.getvalue() == "minishell: exit: numeric argument required\n"


def test_exit_too_many_arguments():
    out, err = io.StringIO(), io.StringIO()
    with pytest.raises(ShellExit) as info:
        exit_builtin(SimpleCommand(argv=["exit", "1", "2"]), Environment([]), out, err)
    assert info.value.code == 1
    assert err.getvalue() == "minishell: exit: too many arguments\n"


@pytest.mark.parametrize(
    "name, expected",
    [("echo", True), ("cd", True), ("exit", True), ("ls", False), (None, False)],
)
def test_is_builtin(name, expected):
    assert is_builtin(name) is expected