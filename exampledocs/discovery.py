"""
Discovery of example categories, sections and files.

Layout::

    examples/
        <category>/
            category.json
            <section>/
                <example file>

Every level is sorted by name, so the resulting plan does not depend on the
order the file system lists entries in. Directories without a descriptor are
not categories and are skipped.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from exampledocs.categories import CategoryPlugin, CategoryRegistry, default_registry
from exampledocs.errors import CategoryError, ConfigurationError

logger = logging.getLogger(__name__)

DESCRIPTOR_FILENAME = "category.json"


@dataclass(frozen=True)
class SectionPlan:
    """A section directory and its ordered example files."""

    category: str
    name: str
    path: Path
    title: str
    example_files: Tuple[Path, ...]


@dataclass(frozen=True)
class CategoryPlan:
    """A category directory with its resolved plugin and ordered sections."""

    name: str
    path: Path
    plugin: CategoryPlugin
    sections: Tuple[SectionPlan, ...]


def _sorted_entries(directory: Path) -> List[Path]:
    return sorted(directory.iterdir(), key=lambda entry: entry.name)


class CorpusDiscovery:
    """Walk the examples tree and resolve one plugin per category."""

    def __init__(self, registry: Optional[CategoryRegistry] = None):
        self.registry = registry or default_registry

    def discover(self, root: Path) -> List[CategoryPlan]:
        """
        Build the ordered processing plan.

        Args:
            root: Examples directory

        Returns:
            Categories in name order, each with sections and files in name order

        Raises:
            ConfigurationError: If root is not a directory
            CategoryError: If a descriptor is malformed or names an unknown plugin
        """
        root = Path(root)
        if not root.is_dir():
            raise ConfigurationError(f"Examples directory not found: {root}")

        logger.info(f"Discovering examples in {root}")
        categories = []

        for category_dir in _sorted_entries(root):
            if not category_dir.is_dir() or not (category_dir / DESCRIPTOR_FILENAME).is_file():
                continue

            plugin = self.load_descriptor(category_dir)
            sections = tuple(
                self._discover_section(category_dir.name, section_dir, plugin)
                for section_dir in _sorted_entries(category_dir)
                if section_dir.is_dir()
            )
            categories.append(CategoryPlan(
                name=category_dir.name,
                path=category_dir,
                plugin=plugin,
                sections=sections,
            ))
            logger.debug(
                f"Category {category_dir.name}: {len(sections)} sections, "
                f"{sum(len(s.example_files) for s in sections)} examples"
            )

        logger.info(f"Found {len(categories)} categories")
        return categories

    def load_descriptor(self, category_dir: Path) -> CategoryPlugin:
        """Read ``category.json`` and resolve the plugin it names."""
        descriptor_path = category_dir / DESCRIPTOR_FILENAME
        try:
            descriptor = json.loads(descriptor_path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as e:
            raise CategoryError(f"Invalid descriptor {descriptor_path}: {e}") from e

        if not isinstance(descriptor, dict):
            raise CategoryError(f"Descriptor must be a JSON object: {descriptor_path}")

        ref = descriptor.get("plugin") or category_dir.name
        options = descriptor.get("options") or {}
        return self.registry.resolve(ref, options)

    def _discover_section(self, category: str, section_dir: Path, plugin: CategoryPlugin) -> SectionPlan:
        example_files = tuple(
            entry for entry in _sorted_entries(section_dir)
            if entry.is_file() and plugin.file_filter(entry.name)
        )
        return SectionPlan(
            category=category,
            name=section_dir.name,
            path=section_dir,
            title=plugin.section_title(section_dir.name),
            example_files=example_files,
        )
