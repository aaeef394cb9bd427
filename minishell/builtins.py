"""Commands the shell runs itself: echo, env, exit, cd, pwd, export and unset."""

from __future__ import annotations

import os
import re
import sys
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TextIO

from minishell.environment import Environment

_LEADING_INT = re.compile(r"[ \f\n\r\t\v]*([+-]?)([0-9]*)")
_NUMERIC_CHARS = frozenset("0123456789+- ")


class ShellExit(Exception):
    """Raised by ``exit``; carries the status the shell ends with."""

    def __init__(self, code: int) -> None:
        super().__init__(code)
        self.code = code


@dataclass
class ShellState:
    """What the shell keeps between command lines."""

    env: Environment = field(default_factory=Environment)
    exit_status: int = 0
    pipe_count: int = 0


def _stream(out: TextIO | None) -> TextIO:
    return sys.stdout if out is None else out


def ascii_to_int(text: str) -> int:
    """Read a leading decimal integer; a sign not followed by a digit gives 0."""
    match = _LEADING_INT.match(text)
    sign, digits = match.groups()
    value = int(digits or "0")
    return -value if sign == "-" else value


def is_numeric(text: str) -> bool:
    """Return True if ``text`` holds only digits, signs and spaces."""
    return all(ch in _NUMERIC_CHARS for ch in text)


def echo(args: Sequence[str], out: TextIO | None = None) -> int:
    """Write the arguments back to back.

    A first argument of exactly ``-n`` is written too, and the newline
    is then left off.
    """
    out = _stream(out)
    out.write("".join(args))
    if not (args and args[0] == "-n"):
        out.write("\n")
    return 0


def env_command(env: Environment, args: Sequence[str], out: TextIO | None = None) -> int:
    """List the variables that have a value; any argument is an error."""
    out = _stream(out)
    if args:
        print("env: 'env' no such file or directory", file=out)
        return 127
    for entry in env.visible():
        print(entry, file=out)
    return 0


def exit_code(args: Sequence[str], out: TextIO | None = None) -> int:
    """Work out the status ``exit`` ends with from its arguments."""
    if len(args) == 1:
        return ascii_to_int(args[0])
    if len(args) > 1:
        print("too many arguments", file=_stream(out))
    return 1


def exit_shell(state: ShellState, args: Sequence[str], out: TextIO | None = None) -> None:
    """Run ``exit``: always raises ShellExit."""
    out = _stream(out)
    print("exit", file=out)
    if not args:
        raise ShellExit(0)
    if is_numeric(args[0]):
        code = exit_code(args, out)
    else:
        print("numeric argument required", file=out)
        code = 2
    code &= 0xFF
    state.exit_status = code
    raise ShellExit(code)


def change_directory(args: Sequence[str], env: Environment, out: TextIO | None = None) -> int:
    """Run ``cd``; update PWD and OLDPWD on success and return the status."""
    out = _stream(out)
    if len(args) > 1:
        print("too many arguments", file=out)
        return 1
    target = args[0] if args else None
    if target is None or target == "~":
        target = env.get("HOME")
        if target is None:
            print("Home is not set", file=out)
            return 1
    elif target == "-":
        target = env.get("OLDPWD")
        if target is None:
            print("OLDPWD is not set", file=out)
            return 1
    try:
        os.chdir(target)
    except OSError as exc:
        print(f"chdir: {exc.strerror}", file=sys.stderr)
        return 1
    old_pwd = env.get("PWD")
    env.set_entry(f"PWD={os.getcwd()}")
    env.set_entry(f"OLDPWD={old_pwd or ''}")
    return 0


def print_working_directory(out: TextIO | None = None) -> int:
    """Run ``pwd``."""
    print(os.getcwd(), file=_stream(out))
    return 0


def run_builtin(command, state: ShellState, out: TextIO | None = None) -> int | None:
    """Run ``command`` if it is a builtin and return its status.

    Returns None when the command must be run as an external program.
    ``echo`` counts as a builtin only inside a pipeline.
    """
    if command is None:
        return 0
    if not command.args:
        return None
    name, args = command.args[0], command.args[1:]
    if state.pipe_count > 0 and name == "echo":
        return echo(args, out)
    if name == "unset":
        return state.env.unset(args)
    if name == "export":
        return state.env.export(args, _stream(out))
    if name == "env":
        return env_command(state.env, args, out)
    if name.startswith("exit"):
        exit_shell(state, args, out)
    if name == "pwd":
        return print_working_directory(out)
    if name == "cd":
        return change_directory(args, state.env, out)
    return None