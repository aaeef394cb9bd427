"""An interactive command shell with quoting, variable expansion, pipes, redirections and builtins."""

__version__ = "0.1.0"