"""Execution core of a small POSIX-style shell: builtins, redirections, environment and pipelines."""

__version__ = "0.1.0"

__all__ = ["__version__"]