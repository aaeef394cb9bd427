"""The shell's environment list and the export and unset builtins."""

from __future__ import annotations

import sys
from collections.abc import Iterable, Iterator, Mapping
from typing import TextIO

from minishell.quoting import is_quoted


def _is_ascii_alpha(ch: str) -> bool:
    return ch.isascii() and ch.isalpha()


def _is_ascii_alnum(ch: str) -> bool:
    return ch.isascii() and ch.isalnum()


def is_valid_identifier(text: str) -> bool:
    """Return True if the name part of ``text`` is a letter followed by letters or digits."""
    if not text or not _is_ascii_alpha(text[0]):
        return False
    name = text.split("=", 1)[0]
    return all(_is_ascii_alnum(ch) for ch in name)


def entry_name(text: str) -> str:
    """Return the part of ``text`` before its first unquoted ``=``."""
    for pos, ch in enumerate(text):
        if ch == "=" and not is_quoted(text, pos):
            return text[:pos]
    return text


class Environment:
    """An ordered list of ``NAME=value`` entries; bare ``NAME`` entries are exported but unset.

    Lookups match the first entry that starts with the given name.
    """

    def __init__(self, entries: Iterable[str] = ()) -> None:
        self._entries = list(entries)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> "Environment":
        """Build an environment from a mapping such as ``os.environ``."""
        return cls(f"{name}={value}" for name, value in mapping.items())

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Environment({self._entries!r})"

    def _find(self, name: str) -> int | None:
        return next(
            (index for index, entry in enumerate(self._entries) if entry.startswith(name)),
            None,
        )

    def get(self, name: str) -> str | None:
        """Return the value of the first entry starting with ``name``, or None."""
        index = self._find(name)
        if index is None:
            return None
        _, sep, value = self._entries[index].partition("=")
        return value if sep else None

    def visible(self) -> list[str]:
        """Return the entries that carry a value."""
        return [entry for entry in self._entries if "=" in entry]

    def as_dict(self) -> dict[str, str]:
        """Return the entries with values as a name-to-value mapping."""
        result: dict[str, str] = {}
        for entry in self.visible():
            name, _, value = entry.partition("=")
            result.setdefault(name, value)
        return result

    def set_entry(self, entry: str) -> None:
        """Replace the entry with the same name as ``entry``, or append it."""
        index = self._find(entry_name(entry))
        if index is None:
            self._entries.append(entry)
        else:
            self._entries[index] = entry

    def _export_one(self, arg: str) -> None:
        index = self._find(entry_name(arg))
        if index is None:
            self._entries.append(arg)
        elif "=" in arg:
            self._entries[index] = arg

    def export(self, args: Iterable[str], out: TextIO | None = None) -> int:
        """Run ``export`` with ``args``; return the exit status."""
        out = sys.stdout if out is None else out
        args = list(args)
        if not args:
            for entry in self._entries:
                print(entry, file=out)
            return 0
        status = 0
        for arg in args:
            if not is_valid_identifier(arg):
                print(f"minishell: export '{arg}': not a valid identifier", file=out)
                status = 1
        for arg in args:
            if is_valid_identifier(arg):
                self._export_one(arg)
        return status

    def unset(self, names: Iterable[str]) -> int:
        """Remove the first entry matching each name; return the exit status."""
        for name in names:
            index = self._find(name)
            if index is not None:
                del self._entries[index]
        return 0