"""Expansion of ``$NAME`` and ``$?`` in a command line."""

from __future__ import annotations

from typing import Protocol

_NAME_STOP = frozenset(" <>\"'$")


class _Lookup(Protocol):
    def get(self, name: str) -> str | None: ...


def variable_length(text: str) -> int:
    """Return how many leading characters of ``text`` form a variable name."""
    for count, ch in enumerate(text):
        if ch in _NAME_STOP:
            return count
    return len(text)


def _starts_name(ch: str) -> bool:
    return ch.isascii() and ch.isalnum()


def expand(text: str, env: _Lookup, exit_status: int) -> str:
    """Replace ``$?`` and ``$NAME`` outside single quotes.

    Only single quotes suppress expansion. Unknown variables vanish, and
    an expanded value is scanned again for further variables.
    """
    in_single = False
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "'":
            in_single = not in_single
        if ch == "$" and not in_single:
            following = text[i + 1 : i + 2]
            if following == "?":
                text = text[:i] + str(exit_status) + text[i + 2 :]
            elif following and _starts_name(following):
                length = variable_length(text[i + 1 :])
                name = text[i + 1 : i + 1 + length]
                text = text[:i] + (env.get(name) or "") + text[i + 1 + length :]
                continue
        i += 1
    return text