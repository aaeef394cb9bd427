"""Extraction of ``<``, ``>``, ``<<`` and ``>>`` redirections from a command."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from minishell.quoting import DOUBLE_QUOTE, SINGLE_QUOTE, is_quoted

_TARGET_STOPS = " \t<>"


class RedirectKind(Enum):
    """The four redirection operators the shell understands."""

    TRUNCATE = ">"
    APPEND = ">>"
    INPUT = "<"
    HEREDOC = "<<"


@dataclass(frozen=True)
class Redirection:
    """One redirection: its operator and the file name or heredoc delimiter."""

    kind: RedirectKind
    target: str


def redirect_kind(text: str) -> RedirectKind | None:
    """Return the operator that ``text`` starts with, or None."""
    if text.startswith(">>"):
        return RedirectKind.APPEND
    if text.startswith(">"):
        return RedirectKind.TRUNCATE
    if text.startswith("<<"):
        return RedirectKind.HEREDOC
    if text.startswith("<"):
        return RedirectKind.INPUT
    return None


def _target_end(text: str, start: int) -> int:
    """Index just past the word starting at ``start``.

    The word ends at an unquoted blank or operator; an unquoted last
    character always belongs to it.
    """
    in_single = in_double = False
    last = len(text) - 1
    for pos in range(start, len(text)):
        ch = text[pos]
        if ch == SINGLE_QUOTE and not in_double:
            in_single = not in_single
        elif ch == DOUBLE_QUOTE and not in_single:
            in_double = not in_double
        if in_single or in_double:
            continue
        if pos == last:
            return len(text)
        if ch in _TARGET_STOPS:
            return pos
    return len(text)


def read_target(text: str, start: int) -> str:
    """Return the redirection target that begins at ``start``, quotes kept."""
    return text[start:_target_end(text, start)]


def _skip_operator(text: str, pos: int) -> int:
    """Skip the run of operator characters at ``pos`` and the spaces after it."""
    op = text[pos]
    end = pos
    while end < len(text) and text[end] == op:
        end += 1
    while end < len(text) and text[end] == " ":
        end += 1
    return end


def extract_redirections(text: str) -> tuple[str, list[Redirection]]:
    """Remove every unquoted redirection from ``text``.

    Returns the remaining command text and the redirections in the order
    they appeared.
    """
    redirections: list[Redirection] = []
    i = 0
    while i < len(text):
        if text[i] in "<>" and not is_quoted(text, i):
            kind = redirect_kind(text[i:])
            start = _skip_operator(text, i)
            end = _target_end(text, start)
            redirections.append(Redirection(kind, text[start:end]))
            text = text[:i] + text[end:]
            if i and text[i:i + 1] == " " and text[i - 1] == " ":
                text = text[:i] + text[i + 1:]
            continue
        i += 1
    return text, redirections