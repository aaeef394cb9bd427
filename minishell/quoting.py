"""Quote-aware scanning helpers shared by the checks, expander and parser."""

from __future__ import annotations

SINGLE_QUOTE = "'"
DOUBLE_QUOTE = '"'
_BLANKS = " \t"


class _QuoteTracker:
    """Follows which kind of quote is open while a line is read left to right."""

    __slots__ = ("single", "double")

    def __init__(self) -> None:
        self.single = False
        self.double = False

    @property
    def quoted(self) -> bool:
        return self.single or self.double

    def feed(self, ch: str) -> bool:
        """Account for ``ch``; return True if it opened or closed a quote."""
        if ch == SINGLE_QUOTE and not self.double:
            self.single = not self.single
            return True
        if ch == DOUBLE_QUOTE and not self.single:
            self.double = not self.double
            return True
        return False


def _quoted_flags(text: str) -> list[bool]:
    """For every character, whether a quote opened before it is still open."""
    tracker = _QuoteTracker()
    flags = []
    for ch in text:
        flags.append(tracker.quoted)
        tracker.feed(ch)
    return flags


def is_quoted(text: str, index: int) -> bool:
    """Return True if position ``index`` of ``text`` lies inside quotes."""
    tracker = _QuoteTracker()
    for ch in text[:index]:
        tracker.feed(ch)
    return tracker.quoted


def remove_quotes(text: str) -> str:
    """Drop the quote characters that delimit quoted sections."""
    tracker = _QuoteTracker()
    return "".join(ch for ch in text if not tracker.feed(ch))


def count_segments(text: str | None, separator: str) -> int:
    """Count the pieces ``text`` falls into at unquoted ``separator`` characters."""
    if text is None:
        return 0
    tracker = _QuoteTracker()
    count = 1
    for ch in text:
        tracker.feed(ch)
        if ch == separator and not tracker.quoted:
            count += 1
    return count


def split_unquoted(text: str, separator: str) -> list[str]:
    """Split ``text`` at unquoted separators, folding runs of separators.

    A trailing space is never kept as a piece of its own, while a trailing
    separator of another kind leaves an empty last piece.
    """
    flags = _quoted_flags(text)
    parts: list[str] = []
    length = len(text)
    start = 0
    i = 0
    while i < length:
        if text[i] == separator and not flags[i]:
            parts.append(text[start:i])
            while i + 1 < length and text[i + 1] == separator:
                i += 1
            start = i + 1
        if i + 1 == length and text[i] != " ":
            parts.append(text[start:])
        i += 1
    return parts


def needs_redirect(text: str) -> bool:
    """Return True if ``text`` holds an unquoted ``<`` or ``>``."""
    tracker = _QuoteTracker()
    for ch in text:
        tracker.feed(ch)
        if ch in "<>" and not tracker.quoted:
            return True
    return False


def first_non_space(text: str) -> str:
    """Return the first character that is neither space nor tab, or ''."""
    return text.lstrip(_BLANKS)[:1]