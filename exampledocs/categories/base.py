"""
Category plugin interface and the context handed to processing functions.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, ClassVar, Dict, Optional, Sequence

from exampledocs.formatting import CodeFormatter
from exampledocs.schemas import ProcessedExample
from exampledocs.titles import filename_to_title

SchemaRebuilder = Callable[..., Awaitable[Any]]


@dataclass(frozen=True)
class ExampleContext:
    """Everything a category may use while rendering an example."""

    pool: Any
    schema: Any
    formatter: CodeFormatter
    engine: Any
    build_schema: SchemaRebuilder

    async def build_variant(
        self,
        exposed_schemas: Optional[Sequence[str]] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Build a schema variant, defaulting to the shared handle's schemas."""
        schemas = exposed_schemas or getattr(self.schema, "exposed_schemas", None)
        return await self.build_schema(schemas, options)


class CategoryPlugin(ABC):
    """
    Behaviour of one example category.

    Subclasses decide which files in a section are examples and how each one
    is rendered. Title derivation can be overridden per category.
    """

    name: ClassVar[str] = ""

    def __init__(self, options: Optional[Dict[str, Any]] = None):
        self.options = dict(options or {})

    @abstractmethod
    def file_filter(self, filename: str) -> bool:
        """Whether a file in a section directory is an example."""

    @abstractmethod
    async def process_file(self, path: Path, context: ExampleContext) -> ProcessedExample:
        """Render one example file."""

    def section_title(self, name: str) -> str:
        return filename_to_title(name)

    def example_title(self, name: str) -> str:
        return filename_to_title(name)

    def example_stem(self, filename: str) -> str:
        """Filename with its example-file extension removed."""
        return Path(filename).stem
