"""Schema construction over the examples database."""

from .builder import SchemaBuilder, SchemaFactory
from .catalog import (
    CatalogColumn,
    CatalogSchema,
    CatalogTable,
    SchemaPlugin,
    catalog_from_rows,
    reflect_catalog,
    simplify_inflection,
)

__all__ = [
    "SchemaBuilder",
    "SchemaFactory",
    "SchemaPlugin",
    "CatalogColumn",
    "CatalogSchema",
    "CatalogTable",
    "catalog_from_rows",
    "reflect_catalog",
    "simplify_inflection",
]
