"""Syntax checks run on a command line before it is parsed."""

from __future__ import annotations

from minishell.quoting import DOUBLE_QUOTE, SINGLE_QUOTE, is_quoted

_BLANKS = " \t"


class SyntaxCheckError(ValueError):
    """A command line that the shell refuses to run."""

    def __init__(self, message: str, position: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.position = position


def is_blank(line: str) -> bool:
    """Return True if ``line`` holds nothing but spaces and tabs."""
    return line.strip(_BLANKS) == ""


def has_empty_pipe(line: str) -> bool:
    """Return True if two unquoted pipes have only blanks or quotes between them."""
    length = len(line)
    i = 0
    while i < length:
        if line[i] == "|" and not is_quoted(line, i):
            i += 1
            while i < length and line[i] in " \t'\"":
                i += 1
            if i == length:
                return False
            if line[i] == "|" and not is_quoted(line, i):
                return True
        i += 1
    return False


def unclosed_quote_position(line: str) -> int | None:
    """Return the index of the last quote if quotes are unbalanced.

    A quote left open at the very first column is not reported.
    """
    in_single = in_double = False
    last = 0
    for pos, ch in enumerate(line):
        if ch == DOUBLE_QUOTE and not in_single:
            last = pos
            in_double = not in_double
        elif ch == SINGLE_QUOTE and not in_double:
            last = pos
            in_single = not in_single
    if (in_single or in_double) and last:
        return last
    return None


def bad_redirection_position(line: str) -> int | None:
    """Return where a run of more than two ``<`` or ``>`` starts.

    Scanning stops at the first such run; one at the very first column
    is not reported.
    """
    for pos, ch in enumerate(line):
        if ch in "<>" and not is_quoted(line, pos):
            rest = line[pos:]
            if len(rest) - len(rest.lstrip(ch)) > 2:
                return pos or None
    return None


def check_command(line: str) -> bool:
    """Validate ``line``; return False if it is blank, True if it may run.

    Raises SyntaxCheckError for an empty pipe, unclosed quotes or a bad
    redirection.
    """
    if has_empty_pipe(line):
        raise SyntaxCheckError("parse error near '|'")
    if is_blank(line):
        return False
    pos = unclosed_quote_position(line)
    if pos is not None:
        raise SyntaxCheckError(
            f"error at '{line[pos]}'(col:{pos + 1}) unclosed quotes", pos
        )
    pos = bad_redirection_position(line)
    if pos is not None:
        raise SyntaxCheckError(
            f"error at '{line[pos]}'(col:{pos + 1}), wrong redirection", pos
        )
    return True