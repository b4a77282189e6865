"""
Centralized Pydantic schemas for the example corpus build.

This module is the single source of truth for the data models shared by the
process runner, the category plugins and the document assembler. Output models
serialize with the camelCase keys of the published ``examples.json`` artifact.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


# ============================================================================
# PROCESS SCHEMAS
# ============================================================================

class ProcessResult(BaseModel):
    """Captured output of an external command."""
    model_config = ConfigDict(frozen=True)

    stdout: str = Field(default="", description="Everything written to standard output")
    stderr: str = Field(default="", description="Everything written to standard error")
    code: Optional[int] = Field(default=0, description="Exit code (None when the process never started)")


# ============================================================================
# SEED SCHEMAS
# ============================================================================

class SeedPayloads(BaseModel):
    """Baseline SQL fetched once at the start of a build."""
    model_config = ConfigDict(frozen=True)

    schema_sql: str = Field(description="Baseline schema DDL")
    data_sql: str = Field(description="Baseline seed data")


# ============================================================================
# EXAMPLE SCHEMAS
# ============================================================================

class ProcessedExample(BaseModel):
    """What a category processing function returns for one example file."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    example: str = Field(description="Rendered example text")
    example_language: str = Field(alias="exampleLanguage", description="Language tag of the example")
    result: str = Field(description="Rendered result text")
    result_language: str = Field(alias="resultLanguage", description="Language tag of the result")
    title: Optional[str] = Field(None, description="Explicit title overriding the derived one")


class ExampleEntry(BaseModel):
    """One example as it appears in the corpus document."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str
    example: str
    example_language: str = Field(alias="exampleLanguage")
    result: str
    result_language: str = Field(alias="resultLanguage")


class CorpusSection(BaseModel):
    """One (category, section directory) pair with its ordered examples."""
    model_config = ConfigDict(frozen=True)

    category: str = Field(description="Category directory name")
    title: str = Field(description="Derived section title")
    examples: List[ExampleEntry] = Field(default_factory=list)


class CorpusDocument(BaseModel):
    """The full, ordered corpus written to the artifact file."""
    sections: List[CorpusSection] = Field(default_factory=list)

    @property
    def example_count(self) -> int:
        return sum(len(section.examples) for section in self.sections)

    def to_json_data(self) -> List[dict]:
        """Artifact shape: a bare array of section objects."""
        return [section.model_dump(by_alias=True) for section in self.sections]
