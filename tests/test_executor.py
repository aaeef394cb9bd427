import os
import sys
from unittest import mock

import pytest

from minishell.builtins import ShellState
from minishell.environment import Environment
from minishell.executor import (
    ExecutionError,
    collect_heredoc,
    resolve_command,
    run_pipeline,
    run_single,
)
from minishell.parser import Command
from minishell.redirections import RedirectKind, Redirection

PY = sys.executable


def _state():
    return ShellState(env=Environment.from_mapping(os.environ))


def _reader(lines):
    items = iter(lines)
    return lambda: next(items, None)


def test_collect_heredoc_stops_at_delimiter():
    assert collect_heredoc(["EOF"], _reader(["a", "b", "EOF", "c"])) == "a\nb\n"


def test_collect_heredoc_several_delimiters_in_turn():
    text = collect_heredoc(["ONE", "TWO"], _reader(["x", "ONE", "y", "TWO"]))
    assert text == "x\ny\n"


def test_collect_heredoc_end_of_input():
    assert collect_heredoc(["EOF"], _reader(["only"])) == "only\n"


def test_collect_heredoc_without_delimiters_reads_nothing():
    assert collect_heredoc([], _reader(["never"])) == ""


def test_resolve_command_searches_path(tmp_path):
    program = tmp_path / "tool"
    program.write_text("")
    env = Environment([f"PATH=/nonexistent:{tmp_path}"])
    assert resolve_command("tool", env) == f"{tmp_path}/tool"


def test_resolve_command_missing_is_127(tmp_path):
    env = Environment([f"PATH={tmp_path}"])
    with pytest.raises(ExecutionError) as info:
        resolve_command("absent", env)
    assert info.value.status == 127
    assert info.value.message == "absent: No Such Command."


def test_resolve_command_without_path():
    with pytest.raises(ExecutionError) as info:
        resolve_command("anything", Environment())
    assert info.value.status == 127


def test_resolve_command_with_slash_used_directly(tmp_path):
    program = tmp_path / "prog"
    program.write_text("")
    assert resolve_command(str(program), Environment()) == str(program)


def test_resolve_command_directory_is_126(tmp_path):
    with pytest.raises(ExecutionError) as info:
        resolve_command(str(tmp_path), Environment())
    assert info.value.status == 126
    assert "Is a directory" in info.value.message


def test_run_single_echo_to_file(tmp_path):
    out = tmp_path / "out.txt"
    state = _state()
    command = Command(["echo", "hi", "there"], [Redirection(RedirectKind.TRUNCATE, str(out))])
    assert run_single(command, state) == 0
    assert out.read_text() == "hithere\n"
    assert state.exit_status == 0


def test_run_single_echo_to_stdout(capsys):
    assert run_single(Command(["echo", "-n", "a"]), _state()) == 0
    assert capsys.readouterr().out == "-na"


def test_run_single_exit_status_of_program():
    state = _state()
    assert run_single(Command([PY, "-c", "import sys; sys.exit(3)"]), state) == 3
    assert state.exit_status == 3


def test_run_single_external_output_truncates_and_appends(tmp_path):
    out = tmp_path / "out.txt"
    out.write_text("old\n")
    state = _state()
    write = Command([PY, "-c", "print('x')"], [Redirection(RedirectKind.TRUNCATE, str(out))])
    run_single(write, state)
    assert out.read_text() == "x\n"
    append = Command([PY, "-c", "print('y')"], [Redirection(RedirectKind.APPEND, str(out))])
    run_single(append, state)
    assert out.read_text() == "x\ny\n"


def test_run_single_input_redirection(tmp_path):
    source = tmp_path / "in.txt"
    source.write_text("content")
    out = tmp_path / "out.txt"
    command = Command(
        [PY, "-c", "import sys; sys.stdout.write(sys.stdin.read())"],
        [
            Redirection(RedirectKind.INPUT, str(source)),
            Redirection(RedirectKind.TRUNCATE, str(out)),
        ],
    )
    assert run_single(command, _state()) == 0
    assert out.read_text() == "content"


def test_run_single_missing_input_file(tmp_path, capsys):
    command = Command(
        [PY, "-c", "pass"], [Redirection(RedirectKind.INPUT, str(tmp_path / "missing"))]
    )
    state = _state()
    assert run_single(command, state) == 1
    assert ":No such file /wrong permission" in capsys.readouterr().out
    assert state.exit_status == 1


def test_run_single_unknown_command(capsys):
    state = _state()
    assert run_single(Command(["no-such-program-here"]), state) == 127
    assert "No Such Command." in capsys.readouterr().err


def test_run_single_heredoc(tmp_path):
    out = tmp_path / "out.txt"
    command = Command(
        [PY, "-c", "import sys; sys.stdout.write(sys.stdin.read())"],
        [
            Redirection(RedirectKind.HEREDOC, "EOF"),
            Redirection(RedirectKind.TRUNCATE, str(out)),
        ],
    )
    with mock.patch("builtins.input", side_effect=["hello", "EOF"]):
        assert run_single(command, _state()) == 0
    assert out.read_text() == "hello\n"


def test_run_single_without_words_still_creates_file(tmp_path):
    out = tmp_path / "made.txt"
    assert run_single(Command([], [Redirection(RedirectKind.TRUNCATE, str(out))]), _state()) == 0
    assert out.read_text() == ""


def test_pipeline_status_is_last_stage():
    commands = [
        Command([PY, "-c", "import sys; sys.exit(0)"]),
        Command([PY, "-c", "import sys; sys.exit(4)"]),
    ]
    state = _state()
    assert run_pipeline(commands, state) == 4
    assert state.exit_status == 4


def test_pipeline_builtins_do_not_change_shell(capsys):
    state = _state()
    status = run_pipeline([Command(["export", "PIPEVAR=1"]), Command(["echo", "a"])], state)
    assert status == 0
    assert state.env.get("PIPEVAR") is None
    assert capsys.readouterr().out == "a\n"


def test_pipeline_exit_stage_gives_its_code():
    state = _state()
    assert run_pipeline([Command(["echo", "a"]), Command(["exit", "9"])], state) == 9