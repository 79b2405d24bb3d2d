"""The parsed form of one command in a pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class RedirectKind(Enum):
    IN = "<"
    OUT = ">"
    APPEND = ">>"
    HEREDOC = "<<"


@dataclass(frozen=True)
class Redirection:
    kind: RedirectKind
    target: str


def unquote_filename(text: str) -> str:
    """Drop every single and double quote character from ``text``."""
    return text.replace('"', "").replace("'", "")


def _is_flag(word: str) -> bool:
    return len(word) > 1 and word.startswith("-")


@dataclass
class SimpleCommand:
    """One command: its words in order, redirections and heredoc file."""

    argv: list[str] = field(default_factory=list)
    redirections: list[Redirection] = field(default_factory=list)
    heredoc_file: str | None = None

    @property
    def name(self) -> str | None:
        return self.argv[0] if self.argv else None

    @property
    def words(self) -> list[str]:
        """The command name followed by its non-flag arguments."""
        return self.argv[:1] + [word for word in self.argv[1:] if not _is_flag(word)]

    @property
    def flags(self) -> list[str]:
        """Arguments that start with ``-``."""
        return [word for word in self.argv[1:] if _is_flag(word)]

    def content(self) -> list[str]:
        """All words as typed, in their original order."""
        return list(self.argv)

    def is_invalid(self) -> bool:
        """True for an empty command or one whose name is empty or has ``=``."""
        name = self.name
        return name is None or name == "" or "=" in name

    def exec_argv(self) -> list[str]:
        """Argument vector for a program: plain words first, then flags."""
        return self.words + self.flags