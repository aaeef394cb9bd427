# minishell

A small interactive command shell. It reads a line at a `$> ` prompt, checks
it for syntax errors, expands variables, splits it into a pipeline and runs
each stage, either as a builtin or as an external program found on `PATH`.

## Installing

```
pip install .
```

## Running

```
minishell
```

Type commands at the prompt. The session ends with `exit` or end-of-file
(Ctrl-D). Ctrl-C abandons the current line and sets the exit status to 130;
Ctrl-\ is ignored. If the command is given any argument it returns at once
without starting a session.

## What the shell understands

- **Quoting**: single quotes keep their contents literal; double quotes group
  words but still allow `$NAME` expansion. The delimiting quotes are removed
  from each word.
- **Variables**: `$NAME` is replaced from the shell's environment (an unknown
  name becomes empty), `$?` by the exit status of the last command.
- **Pipes**: `cmd1 | cmd2 | cmd3` connects each stage's output to the next
  stage's input. The status is that of the last stage. An empty stage such as
  `ls | | wc` is a parse error.
- **Redirections**:
  - `< file` reads input from a file
  - `> file` writes output to a file, truncating it
  - `>> file` appends output to a file
  - `<< WORD` reads a here-document at a `> ` prompt until a line equal to
    `WORD` or end-of-file
  - a run of three or more `<` or `>` is rejected.
- **Builtins**: `echo`, `cd` (with `~` and `-`, updating `PWD` and `OLDPWD`),
  `pwd`, `env`, `export`, `unset` and `exit`. `echo` prints the rest of its
  line. `export` with no arguments lists every entry, including names exported
  without a value; `env` lists only those with a value. Builtins that run
  inside a pipeline work on a copy of the environment, so `cd` or `export`
  there does not change the shell.

Lines with unclosed quotes or bad redirections are reported with the column of
the offending character; these, an empty pipe stage and a line of only blanks
set the exit status to 1. An unknown command sets it to 127, a directory given
as a command to 126, a redirection file that cannot be opened to 1.

## Using it from Python

```python
from minishell.shell import Shell

shell = Shell({"PATH": "/usr/bin:/bin", "HOME": "/tmp"})
shell.execute_line("export GREETING=hello")
shell.execute_line("echo $GREETING | tr a-z A-Z")
```

`Shell.execute_line` returns the status of the line and raises
`minishell.builtins.ShellExit` on `exit`; `Shell.run` takes a function that
returns the next line (or `None` at end of input) and loops until the session
ends.

The lower-level pieces can be used on their own:

- `minishell.checks.check_command` validates a line, raising
  `SyntaxCheckError`;
- `minishell.expander.expand` performs variable expansion;
- `minishell.parser.parse_line` turns a line into `Command` objects, each with
  `args` and `redirections`;
- `minishell.redirections.extract_redirections` pulls `Redirection` objects
  out of a command's text;
- `minishell.environment.Environment` is an ordered `NAME=value` store whose
  lookups match the first entry that starts with the given name;
- `minishell.executor.run_single` and `run_pipeline` run parsed commands.

## What it does not do

There is no filename globbing, no `;`, `&&` or `||` command lists, no
subshells, no background jobs or job control, and no history saved between
sessions.