[build-system]
requires = ["setuptools>=61.0"]
build-backend = "setuptools.build_meta"

[project]
name = "minishell"
version = "0.1.0"
description = "A small interactive command shell with pipes, redirections, here-documents and builtins"
requires-python = ">=3.10"
dependencies = []
keywords = ["shell", "command-line", "pipes", "redirection", "builtins", "heredoc"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Shells",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
minishell = "minishell.shell:main"

[tool.setuptools.packages.find]
include = ["minishell*"]

[tool.pytest.ini_options]
addopts = "-ra"
