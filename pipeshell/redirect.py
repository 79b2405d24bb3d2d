"""Opening the files named by a command's redirections."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import IO, Any

from .command import RedirectKind, SimpleCommand, unquote_filename


class RedirectionError(Exception):
    """A redirection target could not be opened."""

    def __init__(self, filename: str, message: str) -> None:
        super().__init__(f"{filename}: {message}")
        self.filename = filename
        self.message = message
        self.status = 1


@dataclass
class Streams:
    """The input and output a command runs with, and the files it owns."""

    stdin: Any = None
    stdout: Any = None
    owned: list[IO[Any]] = field(default_factory=list, repr=False)

    def close(self) -> None:
        """Close every file opened for the redirections."""
        while self.owned:
            self.owned.pop().close()

    def __enter__(self) -> Streams:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


def _open_output(filename: str, append: bool) -> IO[str]:
    flags = os.O_WRONLY | os.O_CREAT | (os.O_APPEND if append else os.O_TRUNC)
    try:
        fd = os.open(filename, flags, 0o644)
    except OSError:
        raise RedirectionError(filename, "Permission denied") from None
    return os.fdopen(fd, "a" if append else "w", encoding="utf-8")


def _open_input(filename: str, missing: str, denied: str, label: str) -> IO[str]:
    if not os.access(filename, os.F_OK):
        raise RedirectionError(label, missing)
    try:
        return open(filename, encoding="utf-8")
    except OSError:
        raise RedirectionError(label, denied) from None


def open_streams(command: SimpleCommand, stdin: Any = None, stdout: Any = None) -> Streams:
    """Apply the command's redirections on top of the given streams.

    Output redirections are opened first, in order, then the heredoc file
    and input redirections. Raises RedirectionError on the first failure,
    after closing whatever was already opened.
    """
    streams = Streams(stdin=stdin, stdout=stdout)
    try:
        for redirection in command.redirections:
            if redirection.kind in (RedirectKind.OUT, RedirectKind.APPEND):
                handle = _open_output(
                    unquote_filename(redirection.target),
                    redirection.kind is RedirectKind.APPEND,
                )
                streams.owned.append(handle)
                streams.stdout = handle
        if command.heredoc_file is not None:
            try:
                handle = open(command.heredoc_file, encoding="utf-8")
            except OSError:
                raise RedirectionError("heredoc", "Cannot open temporary file") from None
            streams.owned.append(handle)
            streams.stdin = handle
        for redirection in command.redirections:
            if redirection.kind is RedirectKind.IN:
                filename = unquote_filename(redirection.target)
                handle = _open_input(
                    filename, "No such file or directory", "Permission denied", filename
                )
                streams.owned.append(handle)
                streams.stdin = handle
    except BaseException:
        streams.close()
        raise
    return streams