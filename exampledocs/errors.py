"""
Error types raised by the exampledocs build.

Every fatal condition unwinds to the CLI, which prints it and exits non-zero.
Errors raised inside category processing functions are not wrapped.
"""

from typing import List, Optional


class ExampleDocsError(Exception):
    """Base class for all exampledocs errors."""


class ConfigurationError(ExampleDocsError):
    """Settings are missing or invalid."""


class ProcessFailure(ExampleDocsError):
    """An external command could not start or exited with a nonzero code."""

    def __init__(
        self,
        command: List[str],
        stdout: str = "",
        stderr: str = "",
        code: Optional[int] = None,
    ):
        self.command = list(command)
        self.stdout = stdout
        self.stderr = stderr
        self.code = code

        if code is None:
            message = f"Command could not be started: {' '.join(self.command)}"
        else:
            message = f"Command exited with code {code}: {' '.join(self.command)}"
        super().__init__(message)

    @property
    def result(self):
        """The captured output in ProcessResult shape."""
        from exampledocs.schemas import ProcessResult

        return ProcessResult(stdout=self.stdout, stderr=self.stderr, code=self.code)


class SeedFetchError(ExampleDocsError):
    """A remote seed payload could not be downloaded."""


class SchemaBuildError(ExampleDocsError):
    """The schema factory failed against the provisioned database."""


class CategoryError(ExampleDocsError):
    """A category descriptor or plugin is unusable."""
