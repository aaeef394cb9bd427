"""The interactive read-and-run loop."""

from __future__ import annotations

import os
import signal
import sys
from collections.abc import Callable, Mapping, Sequence
from typing import Optional

from minishell.builtins import ShellExit, ShellState, run_builtin
from minishell.checks import SyntaxCheckError, check_command
from minishell.environment import Environment
from minishell.executor import run_pipeline, run_single
from minishell.parser import parse_line

PROMPT = "$> "


class Shell:
    """A shell session: its environment and the status of the last command."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None) -> None:
        source = os.environ if environ is None else environ
        self.state = ShellState(env=Environment.from_mapping(source))

    def execute_line(self, line: str) -> int:
        """Check, parse and run one command line; return the resulting status.

        An empty line changes nothing. ``exit`` raises ShellExit.
        """
        state = self.state
        if line == "":
            return state.exit_status
        try:
            runnable = check_command(line)
        except SyntaxCheckError as exc:
            print(f"minishell: {exc.message}")
            runnable = False
        if not runnable:
            state.exit_status = 1
            return 1
        commands = parse_line(line, state.env, state.exit_status)
        if len(commands) > 1:
            return run_pipeline(commands, state)
        state.pipe_count = 0
        command = commands[0] if commands else None
        status = run_builtin(command, state)
        if status is None:
            return run_single(command, state)
        state.exit_status = status
        return status

    def run(self, read_line: Callable[[], Optional[str]]) -> int:
        """Read lines until end of input or ``exit``; return the final status."""
        while True:
            try:
                line = read_line()
            except KeyboardInterrupt:
                print()
                self.state.exit_status = 130
                continue
            if line is None:
                print("exit")
                return 0
            try:
                self.execute_line(line)
            except ShellExit as exc:
                return exc.code
            except KeyboardInterrupt:
                print()
                self.state.exit_status = 130


def _prompt() -> Optional[str]:
    try:
        return input(PROMPT)
    except EOFError:
        return None


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Start an interactive session; any argument makes the shell do nothing."""
    argv = sys.argv[1:] if argv is None else argv
    if argv:
        return 0
    try:
        import readline  # noqa: F401  (line editing and history for input())
    except ImportError:
        pass
    if hasattr(signal, "SIGQUIT"):
        signal.signal(signal.SIGQUIT, signal.SIG_IGN)
    return Shell().run(_prompt)


if __name__ == "__main__":
    raise SystemExit(main())