"""
Example category plugins.

Importing this package registers the built-in ``sql`` and ``schema``
categories with the default registry.
"""

from .base import CategoryPlugin, ExampleContext
from .registry import CategoryRegistry, default_registry, import_plugin, register_category
from . import schema_variants, sql  # noqa: F401  (registration side effect)

__all__ = [
    "CategoryPlugin",
    "CategoryRegistry",
    "ExampleContext",
    "default_registry",
    "import_plugin",
    "register_category",
]
