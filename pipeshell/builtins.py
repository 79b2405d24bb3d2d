"""Commands the shell runs itself rather than as separate programs."""

from __future__ import annotations

import os
from typing import TextIO

from .command import SimpleCommand
from .environment import Environment, is_valid_identifier
from .numeric import is_numeric, parse_exit_status

_FLAG_REFUSED = "This command only works without the flag.\n"
_BUILTINS = frozenset({"echo", "cd", "pwd", "export", "unset", "env", "exit"})


class ShellExit(Exception):
    """Raised by ``exit``: the shell should stop with ``code``."""

    def __init__(self, code: int) -> None:
        super().__init__(code)
        self.code = code


def is_n_flag(word: str) -> bool:
    """True for ``-n``, ``-nn``, ``-nnn`` and so on."""
    return len(word) >= 2 and word[0] == "-" and set(word[1:]) == {"n"}


def is_builtin(name: str | None) -> bool:
    """True if ``name`` is one of the shell's own commands."""
    return name in _BUILTINS


def echo(command: SimpleCommand, env: Environment, stdout: TextIO, stderr: TextIO) -> int:
    """Print the arguments separated by spaces; a leading ``-n`` drops the newline."""
    args = command.content()[1:]
    newline = True
    if args and is_n_flag(args[0]):
        newline = False
        args = args[1:]
    stdout.write(" ".join(args))
    if newline:
        stdout.write("\n")
    return 0


def cd(command: SimpleCommand, env: Environment, stdout: TextIO, stderr: TextIO) -> int:
    """Change the working directory, to HOME when no directory is given."""
    words = command.words
    if len(words) < 2:
        path = env.home()
        if path is None:
            stderr.write("minishell: cd: HOME not set\n")
            return 1
    elif len(command.content()) > 2:
        stderr.write("minishell: cd: too many arguments\n")
        return 1
    else:
        path = words[1]
    try:
        os.chdir(path)
    except OSError as exc:
        stderr.write(f"minishell: cd: {path}: {exc.strerror}\n")
        return 1
    return 0


def pwd(command: SimpleCommand, env: Environment, stdout: TextIO, stderr: TextIO) -> int:
    """Print the current working directory."""
    try:
        cwd = os.getcwd()
    except OSError as exc:
        stderr.write(f"getcwd: {exc.strerror}\n")
        return 1
    stdout.write(cwd + "\n")
    return 0


def env_command(command: SimpleCommand, env: Environment, stdout: TextIO, stderr: TextIO) -> int:
    """Print every environment entry that has a value."""
    if command.flags:
        stdout.write(_FLAG_REFUSED)
        return 1
    for entry in env.visible():
        stdout.write(entry + "\n")
    return 0


def export(command: SimpleCommand, env: Environment, stdout: TextIO, stderr: TextIO) -> int:
    """Set variables, or list them sorted when no names are given."""
    if command.flags:
        stderr.write(_FLAG_REFUSED)
        return 1
    names = command.words[1:]
    if not names:
        for line in env.declarations():
            stdout.write(line + "\n")
        return 0
    status = 0
    for name in names:
        if not is_valid_identifier(name):
            stderr.write(f"minishell: export: `{name}': not a valid identifier\n")
            status = 1
            continue
        env.export(name)
    return status


def unset(command: SimpleCommand, env: Environment, stdout: TextIO, stderr: TextIO) -> int:
    """Remove the named variables from the environment."""
    if command.flags:
        stdout.write(_FLAG_REFUSED)
        return 1
    env.unset(command.words[1:])
    return 0


def _exit_code(command: SimpleCommand, stderr: TextIO) -> int:
    args = command.content()[1:]
    if len(args) >= 2:
        stderr.write("minishell: exit: too many arguments\n")
        return 1
    if not args:
        return 0
    if not is_numeric(args[0]):
        return 2
    try:
        return parse_exit_status(args[0])
    except ValueError:
        return 2


def exit_builtin(command: SimpleCommand, env: Environment, stdout: TextIO, stderr: TextIO) -> int:
    """Leave the shell by raising ShellExit with the requested status."""
    code = _exit_code(command, stderr)
    if code == 2:
        stderr.write("minishell: exit: numeric argument required\n")
    stdout.write("exit\n")
    raise ShellExit(code % 256)