"""
Dispatch of example files to category plugins and assembly of the corpus.

Examples are processed strictly one after another, in plan order, so the
document order is the processing order. Any error raised by a plugin aborts
the whole build and nothing is written.
"""

import json
import logging
from pathlib import Path
from typing import Sequence

from pydantic import ValidationError

from exampledocs.categories import CategoryPlugin, ExampleContext
from exampledocs.discovery import CategoryPlan
from exampledocs.errors import CategoryError
from exampledocs.schemas import CorpusDocument, CorpusSection, ExampleEntry, ProcessedExample

logger = logging.getLogger(__name__)


class DocumentAssembler:
    """Fold the discovery plan and plugin output into a CorpusDocument."""

    async def process_example(
        self,
        plugin: CategoryPlugin,
        path: Path,
        context: ExampleContext,
    ) -> ExampleEntry:
        """
        Render one example file and resolve its title.

        The explicit title returned by the plugin wins; otherwise the
        category's example-title function is applied to the file stem.
        """
        processed = await plugin.process_file(path, context)

        if isinstance(processed, dict):
            try:
                processed = ProcessedExample.model_validate(processed)
            except ValidationError as e:
                raise CategoryError(f"Invalid result from {plugin.name} for {path}: {e}") from e
        elif not isinstance(processed, ProcessedExample):
            raise CategoryError(f"Invalid result from {plugin.name} for {path}: {type(processed).__name__}")

        title = processed.title or plugin.example_title(plugin.example_stem(path.name))
        return ExampleEntry(
            title=title,
            example=processed.example,
            example_language=processed.example_language,
            result=processed.result,
            result_language=processed.result_language,
        )

    async def assemble(self, plan: Sequence[CategoryPlan], context: ExampleContext) -> CorpusDocument:
        """Process every example in plan order."""
        sections = []
        for category in plan:
            for section in category.sections:
                examples = []
                for path in section.example_files:
                    logger.info(f"Processing {category.name}/{section.name}/{path.name}")
                    examples.append(await self.process_example(category.plugin, path, context))
                sections.append(CorpusSection(
                    category=category.name,
                    title=section.title,
                    examples=examples,
                ))
        return CorpusDocument(sections=sections)

    def write(self, document: CorpusDocument, output_path: Path) -> Path:
        """Replace the artifact with the document as 2-space indented JSON."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        tmp_path = output_path.with_name(output_path.name + ".tmp")
        try:
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(document.to_json_data(), f, indent=2, ensure_ascii=False)
                f.write("\n")
            tmp_path.replace(output_path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise

        logger.info(f"Wrote {document.example_count} examples to {output_path}")
        return output_path
