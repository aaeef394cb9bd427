import io

import pytest

from minishell.environment import Environment, entry_name, is_valid_identifier


@pytest.fixture
def env():
    return Environment(
        ["HOME=/home/user", "PATH=/usr/bin:/bin", "PWD=/tmp", "EMPTYVAR"]
    )


def test_iteration_and_length(env):
    assert list(env) == ["HOME=/home/user", "PATH=/usr/bin:/bin", "PWD=/tmp", "EMPTYVAR"]
    assert len(env) == 4


def test_get_value(env):
    assert env.get("HOME") == "/home/user"


def test_get_missing_or_valueless(env):
    assert env.get("NOPE") is None
    assert env.get("EMPTYVAR") is None


def test_get_matches_by_prefix(env):
    assert env.get("PA") == env.get("PATH")


def test_visible_excludes_valueless(env):
    assert env.visible() == ["HOME=/home/user", "PATH=/usr/bin:/bin", "PWD=/tmp"]


def test_mapping_round_trip():
    mapping = {"A": "1", "B": "two=2"}
    assert Environment.from_mapping(mapping).as_dict() == mapping


def test_is_valid_identifier():
    assert is_valid_identifier("NAME=value") is True
    assert is_valid_identifier("abc1") is True
    assert is_valid_identifier("1ABC") is False
    assert is_valid_identifier("A-B=1") is False
    assert is_valid_identifier("_X=1") is False
    assert is_valid_identifier("") is False


def test_entry_name():
    assert entry_name("A=b=c") == "A"
    assert entry_name("NAME") == "NAME"
    assert entry_name("'A=b'") == "'A=b'"


def test_export_without_args_lists_everything(env):
    out = io.StringIO()
    assert env.export([], out) == 0
    assert out.getvalue().splitlines() == list(env)


def test_export_new_variable(env):
    assert env.export(["NEWVAR=3"], io.StringIO()) == 0
    assert env.get("NEWVAR") == "3"
    assert len(env) == 5


def test_export_replaces_existing_value(env):
    env.export(["HOME=/root"], io.StringIO())
    assert env.get("HOME") == "/root"
    assert len(env) == 4


def test_export_name_only_keeps_value(env):
    env.export(["HOME"], io.StringIO())
    assert env.get("HOME") == "/home/user"


def test_export_invalid_identifier(env):
    out = io.StringIO()
    before = list(env)
    assert env.export(["1X=5"], out) == 1
    assert out.getvalue() == "minishell: export '1X=5': not a valid identifier\n"
    assert list(env) == before


def test_export_mixed_arguments(env):
    out = io.StringIO()
    assert env.export(["9bad", "GOOD=yes"], out) == 1
    assert env.get("GOOD") == "yes"


def test_unset_removes_entry(env):
    assert env.unset(["PATH"]) == 0
    assert env.get("PATH") is None
    assert len(env) == 3


def test_unset_missing_is_harmless(env):
    before = list(env)
    assert env.unset(["NOPE"]) == 0
    assert list(env) == before


def test_set_entry_replaces(env):
    env.set_entry("PWD=/var")
    assert env.get("PWD") == "/var"
    assert len(env) == 4


def test_set_entry_appends(env):
    env.set_entry("OLDPWD=/tmp")
    assert env.get("OLDPWD") == "/tmp"
    assert list(env)[-1] == "OLDPWD=/tmp"