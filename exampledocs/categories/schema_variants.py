"""
Built-in ``schema`` category: publish the schema produced by a set of options.

Each example is a JSON file such as::

    {"title": "Without dynamic JSON", "options": {"dynamic_json": false}}

An optional ``schemas`` list selects the exposed schemas for the variant.
"""

import asyncio
import json
from pathlib import Path

from exampledocs.categories.base import CategoryPlugin, ExampleContext
from exampledocs.categories.registry import register_category
from exampledocs.errors import CategoryError
from exampledocs.schemas import ProcessedExample


@register_category("schema")
class SchemaVariantCategory(CategoryPlugin):
    """Examples are option sets rendered as schema descriptions."""

    def file_filter(self, filename: str) -> bool:
        return filename.endswith(".json")

    async def process_file(self, path: Path, context: ExampleContext) -> ProcessedExample:
        source = await asyncio.to_thread(path.read_text, encoding="utf-8")
        try:
            definition = json.loads(source)
        except json.JSONDecodeError as e:
            raise CategoryError(f"Invalid schema example {path}: {e}") from e
        if not isinstance(definition, dict):
            raise CategoryError(f"Schema example must be a JSON object: {path}")

        variant = await context.build_variant(definition.get("schemas"), definition.get("options") or {})
        described = variant.describe() if hasattr(variant, "describe") else str(variant)

        return ProcessedExample(
            example=await context.formatter.format(json.dumps(definition.get("options") or {}), "json"),
            example_language="json",
            result=described,
            result_language="graphql",
            title=definition.get("title"),
        )
