"""
exampledocs - regenerate the documentation example corpus.

Provisions a disposable PostgreSQL database, builds a schema handle over it,
renders every example file through its category plugin, and writes the
ordered result to a single JSON artifact.
"""

from .config import BuildSettings
from .errors import (
    CategoryError,
    ConfigurationError,
    ExampleDocsError,
    ProcessFailure,
    SchemaBuildError,
    SeedFetchError,
)
from .schemas import CorpusDocument, CorpusSection, ExampleEntry, ProcessResult, ProcessedExample

__all__ = [
    "BuildSettings",
    "CategoryError",
    "ConfigurationError",
    "CorpusDocument",
    "CorpusSection",
    "ExampleDocsError",
    "ExampleEntry",
    "ProcessFailure",
    "ProcessResult",
    "ProcessedExample",
    "SchemaBuildError",
    "SeedFetchError",
]

__version__ = "0.1.0"
