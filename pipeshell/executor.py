"""Running parsed commands and pipelines."""

from __future__ import annotations

import io
import os
import signal
import subprocess
import sys
import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Callable, TextIO

from .builtins import cd, echo, env_command, exit_builtin, export, pwd, unset
from .command import SimpleCommand
from .environment import Environment
from .redirect import RedirectionError, open_streams
from .resolve import CommandError, resolve_command

_Builtin = Callable[[SimpleCommand, Environment, TextIO, TextIO], int]

# Builtins that change the shell itself run in the shell when alone.
_PARENT_BUILTINS: dict[str, _Builtin] = {
    "export": export,
    "unset": unset,
    "cd": cd,
    "exit": exit_builtin,
}
# Builtins that run as a separate stage, with their redirections applied.
_CHILD_BUILTINS: dict[str, _Builtin] = {
    "echo": echo,
    "export": export,
    "env": env_command,
    "pwd": pwd,
}
# Inside a pipeline these are not run at all.
_SKIPPED_IN_PIPELINE = frozenset({"unset", "cd", "exit"})


class _NextStage:
    """Marker for output that goes down the pipe to the next stage."""


_NEXT = _NextStage()


def _fileno(stream: Any) -> int | None:
    try:
        return stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None


def _isatty(fd: int) -> bool:
    try:
        return os.isatty(fd)
    except OSError:
        return False


def _close(source: Any) -> None:
    if source is not None and not isinstance(source, bytes):
        source.close()


def _feed(pipe: Any, data: bytes) -> None:
    try:
        pipe.write(data)
    except (BrokenPipeError, OSError):
        pass
    finally:
        try:
            pipe.close()
        except OSError:
            pass


def _pump(pipe: Any, stream: Any) -> None:
    data = pipe.read()
    pipe.close()
    if data:
        stream.write(data.decode("utf-8", "replace"))


@dataclass
class _Running:
    process: subprocess.Popen
    forwards: bool
    threads: list[threading.Thread] = field(default_factory=list)


class Executor:
    """Runs commands against an environment, writing to the given streams."""

    def __init__(
        self,
        env: Environment,
        stdout: Any = None,
        stderr: Any = None,
    ) -> None:
        self.env = env
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stderr = stderr if stderr is not None else sys.stderr

    def run(self, pipeline: Iterable[SimpleCommand]) -> int:
        """Run a pipeline and return the status of its last command.

        A lone ``exit`` raises ShellExit.
        """
        commands = list(pipeline)
        if not commands:
            return 0
        if len(commands) == 1:
            return self.run_single(commands[0])
        return self._run_pipeline(commands)

    def run_single(self, command: SimpleCommand) -> int:
        """Run one command that is not part of a pipeline."""
        name = command.name
        if name in _PARENT_BUILTINS:
            return _PARENT_BUILTINS[name](command, self.env, self.stdout, self.stderr)
        if name in _CHILD_BUILTINS:
            return self._run_child_builtin(command, None, self.stdout)
        return self.run_external(command, None, self.stdout)

    def run_external(self, command: SimpleCommand, stdin: Any = None, stdout: Any = None) -> int:
        """Run a program and wait for it; ``stdin`` may be a stream or bytes."""
        target = stdout if stdout is not None else self.stdout
        outcome = self._start(command, stdin, target)
        if isinstance(outcome, _Running):
            return self._finish(outcome, tty_fd=0)
        return outcome

    def _report(self, name: str, message: str) -> None:
        self.stderr.write(f"minishell: {name}: {message}\n")

    def _run_child_builtin(self, command: SimpleCommand, source: Any, out: Any) -> int:
        try:
            streams = open_streams(command, stdin=source, stdout=out)
        except RedirectionError as exc:
            self._report(exc.filename, exc.message)
            return exc.status
        with streams:
            name = command.name
            # Inside a pipeline, export with names changes nothing.
            if name == "export" and command.words[1:] and not command.flags:
                return 0
            handler = _CHILD_BUILTINS[name]
            return handler(command, Environment(self.env.entries), streams.stdout, self.stderr)

    def _start(self, command: SimpleCommand, stdin: Any, stdout: Any) -> _Running | int:
        try:
            streams = open_streams(command, stdin=stdin, stdout=stdout)
        except RedirectionError as exc:
            self._report(exc.filename, exc.message)
            return exc.status
        with streams:
            if command.is_invalid():
                return 0
            try:
                path = resolve_command(command, self.env)
            except CommandError as exc:
                self._report(exc.name, exc.message)
                return exc.status
            return self._spawn(command, path, streams.stdin, streams.stdout)

    def _target(self, stream: Any) -> tuple[Any, Any]:
        """Popen argument for an output stream, and a text stream to copy into."""
        if stream is _NEXT:
            return subprocess.PIPE, None
        if stream is None:
            return None, None
        if _fileno(stream) is not None:
            stream.flush()
            return stream, None
        return subprocess.PIPE, stream

    def _spawn(self, command: SimpleCommand, path: str, stdin: Any, stdout: Any) -> _Running | int:
        feed: bytes | None = None
        if stdin is None:
            stdin_arg: Any = None
        elif isinstance(stdin, bytes):
            stdin_arg, feed = subprocess.PIPE, stdin
        elif _fileno(stdin) is None:
            data = stdin.read()
            stdin_arg = subprocess.PIPE
            feed = data.encode("utf-8") if isinstance(data, str) else data
        else:
            stdin_arg = stdin
        stdout_arg, stdout_copy = self._target(stdout)
        stderr_arg, stderr_copy = self._target(self.stderr)
        try:
            process = subprocess.Popen(
                command.exec_argv(),
                executable=path,
                env=self.env.as_dict(),
                stdin=stdin_arg,
                stdout=stdout_arg,
                stderr=stderr_arg,
            )
        except OSError as exc:
            self.stderr.write(f"execve: {exc.strerror}\n")
            return 1
        running = _Running(process, forwards=stdout is _NEXT)
        jobs: list[tuple[Callable[..., None], tuple[Any, ...]]] = []
        if feed is not None:
            jobs.append((_feed, (process.stdin, feed)))
        if stdout_copy is not None:
            jobs.append((_pump, (process.stdout, stdout_copy)))
        if stderr_copy is not None:
            jobs.append((_pump, (process.stderr, stderr_copy)))
        for target, args in jobs:
            thread = threading.Thread(target=target, args=args, daemon=True)
            thread.start()
            running.threads.append(thread)
        return running

    def _finish(self, running: _Running, tty_fd: int) -> int:
        returncode = running.process.wait()
        for thread in running.threads:
            thread.join()
        if returncode < 0:
            sig = -returncode
            if sig == signal.SIGQUIT:
                self.stderr.write("Quit (core dumped)\n")
            elif sig == signal.SIGINT and _isatty(tty_fd):
                self.stdout.write("\n")
            return 128 + sig
        return returncode

    def _run_pipeline(self, commands: list[SimpleCommand]) -> int:
        source: Any = None
        running: list[_Running] = []
        final: _Running | int = 0
        last_index = len(commands) - 1
        for index, command in enumerate(commands):
            last = index == last_index
            target = self.stdout if last else _NEXT
            name = command.name
            next_source: Any = None
            try:
                if name in _SKIPPED_IN_PIPELINE:
                    outcome: _Running | int = 0
                elif name in _CHILD_BUILTINS:
                    buffer = self.stdout if last else io.StringIO()
                    outcome = self._run_child_builtin(command, source, buffer)
                    if not last:
                        next_source = buffer.getvalue().encode("utf-8")
                else:
                    outcome = self._start(command, source, target)
                    if isinstance(outcome, _Running):
                        running.append(outcome)
                        if outcome.forwards:
                            next_source = outcome.process.stdout
                    if not last and next_source is None:
                        next_source = b""
            finally:
                _close(source)
            source = next_source
            if last:
                final = outcome
        _close(source)
        statuses = [(stage, self._finish(stage, tty_fd=1)) for stage in running]
        if isinstance(final, _Running):
            for stage, status in statuses:
                if stage is final:
                    return status
        return final if isinstance(final, int) else 0


def execute(pipeline: Iterable[SimpleCommand], env: Environment) -> int:
    """Run ``pipeline`` with the process's own stdout and stderr."""
    return Executor(env).run(pipeline)