"""Finding the program a command names."""

from __future__ import annotations

import os

from .command import SimpleCommand
from .environment import Environment


class CommandError(Exception):
    """A command cannot be run; ``status`` is the shell's exit status for it."""

    def __init__(self, name: str, message: str, status: int) -> None:
        super().__init__(f"{name}: {message}")
        self.name = name
        self.message = message
        self.status = status


def is_direct_path(word: str) -> bool:
    """True if ``word`` names a file by path rather than by PATH lookup."""
    return word.startswith(("/", "./", "../"))


def is_directory(path: str) -> bool:
    """True if ``path`` exists and is a directory."""
    return os.path.isdir(path)


def check_executable(name: str, path: str) -> str:
    """Return ``path`` if it can be run, else raise CommandError."""
    if not os.access(path, os.F_OK):
        raise CommandError(name, "No such file or directory", 127)
    if is_directory(path):
        raise CommandError(name, "Is a directory", 126)
    if not os.access(path, os.X_OK):
        raise CommandError(name, "Permission denied", 126)
    return path


def resolve_command(command: SimpleCommand, env: Environment) -> str:
    """Path of the program to run for ``command``.

    Raises ValueError for a command with no usable name and CommandError
    when the program is missing or cannot be run.
    """
    name = command.name
    if command.is_invalid() or name is None:
        raise ValueError("command has no name")
    if is_direct_path(name):
        if not os.access(name, os.F_OK):
            raise CommandError(name, "No such file or directory", 127)
        path = name
    else:
        found = env.find_executable(name)
        if found is None:
            raise CommandError(name, "command not found", 127)
        path = found
    return check_executable(name, path)