"""Running parsed commands as child processes, alone or joined by pipes."""

from __future__ import annotations

import io
import os
import subprocess
import sys
import tempfile
from collections.abc import Callable, Iterable, Sequence
from contextlib import ExitStack
from typing import BinaryIO, Optional, Union

from minishell.builtins import ShellExit, ShellState, echo, run_builtin
from minishell.environment import Environment
from minishell.parser import Command
from minishell.redirections import RedirectKind, Redirection

_Stage = Union[int, subprocess.Popen]


class ExecutionError(Exception):
    """A command that cannot be started; carries the status it ends with."""

    def __init__(self, message: str, status: int) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


def collect_heredoc(delimiters: Iterable[str], read_line: Callable[[], Optional[str]]) -> str:
    """Read heredoc bodies for each delimiter in turn and return them joined.

    Each body ends at a line equal to its delimiter or when ``read_line``
    returns None.
    """
    lines: list[str] = []
    for delimiter in delimiters:
        while (line := read_line()) is not None and line != delimiter:
            lines.append(line + "\n")
    return "".join(lines)


def _read_heredoc_line() -> Optional[str]:
    try:
        return input("> ")
    except EOFError:
        return None


def resolve_command(name: str, env: Environment) -> str:
    """Find the program ``name`` refers to.

    A name holding ``/`` is used as it is; any other is looked up in PATH.
    Raises ExecutionError when nothing is found or the result is a directory.
    """
    path: Optional[str] = None
    if "/" in name:
        if os.path.exists(name):
            path = name
    else:
        search = env.get("PATH")
        if search is not None:
            candidates = (f"{directory}/{name}" for directory in search.split(":") if directory)
            path = next((c for c in candidates if os.path.exists(c)), None)
    if path is None:
        raise ExecutionError(f"{name}: No Such Command.", 127)
    if os.path.isdir(path):
        raise ExecutionError(f"{path}:Is a directory", 126)
    return path


def _exit_status(returncode: int) -> int:
    return 128 - returncode if returncode < 0 else returncode


def _buffer(data: bytes, stack: ExitStack) -> BinaryIO:
    handle = stack.enter_context(tempfile.TemporaryFile())
    handle.write(data)
    handle.seek(0)
    return handle


def _release(handle: Optional[BinaryIO]) -> None:
    if handle is not None:
        handle.close()


def _open_streams(
    redirections: Sequence[Redirection], stack: ExitStack
) -> tuple[Optional[BinaryIO], Optional[BinaryIO]]:
    """Open the files a command's redirections name; return its stdin and stdout.

    When a command has any redirection its input starts out as the text of
    its heredocs, which is empty if it has none.
    """
    stdin: Optional[BinaryIO] = None
    stdout: Optional[BinaryIO] = None
    if redirections:
        delimiters = [r.target for r in redirections if r.kind is RedirectKind.HEREDOC]
        stdin = _buffer(collect_heredoc(delimiters, _read_heredoc_line).encode(), stack)
    modes = {RedirectKind.INPUT: "rb", RedirectKind.TRUNCATE: "wb", RedirectKind.APPEND: "ab"}
    for redirection in redirections:
        mode = modes.get(redirection.kind)
        if mode is None:
            continue
        try:
            handle = stack.enter_context(open(redirection.target, mode))
        except OSError:
            raise ExecutionError(
                f"{redirection.target} :No such file /wrong permission", 1
            ) from None
        if redirection.kind is RedirectKind.INPUT:
            stdin = handle
        else:
            stdout = handle
    return stdin, stdout


def _write_text(text: str, target: Optional[BinaryIO]) -> None:
    if target is None:
        sys.stdout.write(text)
        sys.stdout.flush()
    else:
        target.write(text.encode())
        target.flush()


def _spawn(args: Sequence[str], env: Environment, stdin, stdout) -> _Stage:
    """Start an external program; return the process or the status of a failure."""
    try:
        path = resolve_command(args[0], env)
    except ExecutionError as exc:
        sys.stderr.write(exc.message + "\n")
        sys.stderr.flush()
        return exc.status
    sys.stdout.flush()
    sys.stderr.flush()
    try:
        return subprocess.Popen(
            list(args), executable=path, stdin=stdin, stdout=stdout, env=env.as_dict()
        )
    except OSError as exc:
        print(f"execve failed: {exc.strerror}", file=sys.stderr)
        return 1


def _run_alone(command: Command, env: Environment, stdin, stdout) -> int:
    if not command.args:
        return 0
    if command.args[0] == "echo":
        buffer = io.StringIO()
        status = echo(command.args[1:], buffer)
        _write_text(buffer.getvalue(), stdout)
        return status
    child = _spawn(command.args, env, stdin, stdout)
    if isinstance(child, int):
        return child
    return _exit_status(child.wait())


def run_single(command: Command, state: ShellState) -> int:
    """Run one command that is not a shell builtin; return and record its status."""
    state.pipe_count = 0
    with ExitStack() as stack:
        try:
            stdin, stdout = _open_streams(command.redirections, stack)
        except ExecutionError as exc:
            print(exc.message)
            status = exc.status
        else:
            status = _run_alone(command, state.env, stdin, stdout)
    state.exit_status = status
    return status


def _run_stage(
    command: Command,
    state: ShellState,
    stdin,
    stdout: Optional[BinaryIO],
    piped: bool,
    stack: ExitStack,
) -> tuple[_Stage, Optional[BinaryIO]]:
    """Run one pipeline stage; return its result and what the next stage reads."""
    if not command.args:
        return 0, (_buffer(b"", stack) if piped else None)
    stage_state = ShellState(Environment(state.env), state.exit_status, state.pipe_count)
    buffer = io.StringIO()
    try:
        code = run_builtin(command, stage_state, buffer)
    except ShellExit as exc:
        code = exc.code
    if code is not None:
        if piped:
            return code, _buffer(buffer.getvalue().encode(), stack)
        _write_text(buffer.getvalue(), stdout)
        return code, None
    child = _spawn(command.args, state.env, stdin, subprocess.PIPE if piped else stdout)
    if isinstance(child, int):
        return child, (_buffer(b"", stack) if piped else None)
    return child, (child.stdout if piped else None)


def run_pipeline(commands: Iterable[Command], state: ShellState) -> int:
    """Run commands joined by pipes; the status is that of the last one.

    Builtins run on a copy of the state, so they do not change the shell.
    """
    commands = list(commands)
    state.pipe_count = len(commands) - 1
    status = 0
    result: _Stage = 0
    children: list[subprocess.Popen] = []
    with ExitStack() as stack:
        previous: Optional[BinaryIO] = None
        for index, command in enumerate(commands):
            last = index == len(commands) - 1
            try:
                stdin, stdout = _open_streams(command.redirections, stack)
            except ExecutionError as exc:
                print(exc.message)
                sys.stdout.flush()
                _release(previous)
                previous = None if last else _buffer(b"", stack)
                result = exc.status
                continue
            if stdin is None:
                stdin = previous
            else:
                _release(previous)
            piped = stdout is None and not last
            result, previous = _run_stage(command, state, stdin, stdout, piped, stack)
            _release(stdin)
            if isinstance(result, subprocess.Popen):
                children.append(result)
            if stdout is not None and not last:
                previous = _buffer(b"", stack)
        for child in children:
            child.wait()
        _release(previous)
    if isinstance(result, subprocess.Popen):
        status = _exit_status(result.returncode)
    else:
        status = result
    state.exit_status = status
    return status