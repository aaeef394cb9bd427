"""Turning an expanded command line into commands with arguments and redirections."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from minishell.expander import expand
from minishell.quoting import first_non_space, remove_quotes, split_unquoted
from minishell.redirections import Redirection, extract_redirections


@dataclass
class Command:
    """One pipeline stage: its argument words and its redirections."""

    args: list[str] = field(default_factory=list)
    redirections: list[Redirection] = field(default_factory=list)

    @property
    def name(self) -> str | None:
        return self.args[0] if self.args else None


def _wrap_echo_argument(segment: str) -> tuple[str, bool]:
    """Quote everything after an ``echo`` whose argument does not start with a quote."""
    if segment.startswith("echo ") and first_non_space(segment[5:]) not in ('"', "'"):
        return f'{segment[:5]}"{segment[5:]}"', True
    return segment, False


def _unquote_words(words: Iterable[str]) -> list[str]:
    """Remove quotes from every word; an empty last word is dropped."""
    cleaned = [remove_quotes(word) for word in words]
    if cleaned and not cleaned[-1]:
        cleaned.pop()
    return cleaned


def parse_segment(segment: str) -> Command:
    """Parse one pipeline segment into a Command."""
    remaining, redirections = extract_redirections(segment.strip(" "))
    redirections = [Redirection(r.kind, remove_quotes(r.target)) for r in redirections]
    remaining, wrapped = _wrap_echo_argument(remaining.strip(" "))
    if not remaining:
        return Command([], redirections)
    words = split_unquoted(remaining, " ")
    if wrapped and words[0] == "echo" and len(words) > 1:
        words[1] = words[1][1:-1]
    return Command(_unquote_words(words), redirections)


def parse_line(line: str, env, exit_status: int) -> list[Command]:
    """Expand ``line`` and split it into one Command per pipeline stage."""
    text = expand(line.strip(" "), env, exit_status)
    if not text:
        return []
    return [parse_segment(segment) for segment in split_unquoted(text, "|")]