"""Built-in ``sql`` category: run each .sql example and publish the rows."""

import asyncio
import json
from pathlib import Path

from exampledocs.categories.base import CategoryPlugin, ExampleContext
from exampledocs.categories.registry import register_category
from exampledocs.schemas import ProcessedExample


@register_category("sql")
class SqlCategory(CategoryPlugin):
    """Examples are SQL files executed against the examples database."""

    def file_filter(self, filename: str) -> bool:
        return filename.endswith(".sql")

    async def process_file(self, path: Path, context: ExampleContext) -> ProcessedExample:
        source = await asyncio.to_thread(path.read_text, encoding="utf-8")
        example = await context.formatter.format(source, "sql")
        result = await context.engine.execute(context.schema, source)

        return ProcessedExample(
            example=example,
            example_language="sql",
            result=json.dumps(result, indent=2, default=str),
            result_language="json",
        )
