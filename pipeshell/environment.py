"""The shell's own copy of the environment, kept as ``KEY=value`` entries."""

from __future__ import annotations

import os
import string
from collections.abc import Iterable, Iterator, Mapping

_IDENT_START = set(string.ascii_letters + "_")
_IDENT_CHARS = set(string.ascii_letters + string.digits + "_")


def is_valid_identifier(name: str) -> bool:
    """True if the part of ``name`` before ``=`` is a valid variable name."""
    if not name or name[0] == "=" or name[0] not in _IDENT_START:
        return False
    key = name.split("=", 1)[0]
    return all(ch in _IDENT_CHARS for ch in key)


def env_key(entry: str) -> str:
    """Return the key of an entry: everything before the first ``=``."""
    return entry.split("=", 1)[0]


class Environment:
    """An ordered list of environment entries.

    Entries normally look like ``KEY=value``; an exported name without a
    value is stored as a bare ``KEY``.
    """

    def __init__(self, entries: Iterable[str] | Mapping[str, str] = ()) -> None:
        if isinstance(entries, Mapping):
            self._entries = [f"{key}={value}" for key, value in entries.items()]
        else:
            self._entries = list(entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> tuple[str, ...]:
        return tuple(self._entries)

    def find(self, key: str) -> int | None:
        """Index of the entry named ``key`` (with or without a value), or None."""
        size = len(key)
        for index, entry in enumerate(self._entries):
            if entry.startswith(key) and entry[size:size + 1] in ("=", ""):
                return index
        return None

    def get(self, key: str) -> str | None:
        """Value of ``key``, or None if it is unset or has no value."""
        prefix = key + "="
        for entry in self._entries:
            if entry.startswith(prefix):
                return entry[len(prefix):]
        return None

    def export(self, entry: str) -> None:
        """Add ``entry`` or replace the entry with the same key.

        Raises ValueError if the key is not a valid identifier.
        """
        if not is_valid_identifier(entry):
            raise ValueError(f"`{entry}': not a valid identifier")
        index = self.find(env_key(entry))
        if index is None:
            self._entries.append(entry)
        else:
            self._entries[index] = entry

    def unset(self, names: Iterable[str]) -> None:
        """Remove every ``NAME=value`` entry whose name is in ``names``."""
        if isinstance(names, str):
            names = [names]
        prefixes = tuple(name + "=" for name in names)
        if not prefixes:
            return
        self._entries = [e for e in self._entries if not e.startswith(prefixes)]

    def home(self) -> str | None:
        """The value of HOME, or None when it is not set."""
        return self.get("HOME")

    def search_paths(self) -> list[str]:
        """Directories listed in PATH, empty components dropped."""
        for entry in self._entries:
            if entry.startswith("PATH="):
                return [part for part in entry[5:].split(":") if part]
        return []

    def find_executable(self, command: str) -> str | None:
        """First ``dir/command`` along PATH that exists, or None."""
        for directory in self.search_paths():
            candidate = f"{directory}/{command}"
            if os.access(candidate, os.F_OK):
                return candidate
        return None

    def declarations(self) -> list[str]:
        """Lines printed by ``export`` without arguments, sorted by entry."""
        lines = []
        for entry in sorted(self._entries):
            key, sep, value = entry.partition("=")
            if sep:
                lines.append(f'declare -x {key}="{value}"')
            else:
                lines.append(f"declare -x {entry}")
        return lines

    def visible(self) -> list[str]:
        """Entries that carry a value, in order, as ``env`` prints them."""
        return [entry for entry in self._entries if "=" in entry]

    def as_dict(self) -> dict[str, str]:
        """Entries with values as a mapping suitable for child processes."""
        result: dict[str, str] = {}
        for entry in self._entries:
            key, sep, value = entry.partition("=")
            if sep:
                result[key] = value
        return result