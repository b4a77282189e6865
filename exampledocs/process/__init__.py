"""External command execution with captured output."""

from .runner import ProcessRunner

__all__ = ["ProcessRunner"]
