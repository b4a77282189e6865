"""
Default schema factory: a reflected catalog of the exposed PostgreSQL schemas.

The catalog is the schema handle shared by the query engine and the category
plugins. It can render itself as SDL-style type definitions, which is what the
``schema`` category publishes for each schema variant.
"""

import logging
import re
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


# PostgreSQL udt_name -> scalar type name
UDT_SCALARS = {
    "int2": "Int",
    "int4": "Int",
    "int8": "BigInt",
    "numeric": "BigFloat",
    "float4": "Float",
    "float8": "Float",
    "bool": "Boolean",
    "text": "String",
    "varchar": "String",
    "bpchar": "String",
    "citext": "String",
    "uuid": "UUID",
    "date": "Date",
    "time": "Time",
    "timestamp": "Datetime",
    "timestamptz": "Datetime",
    "interval": "Interval",
}

JSON_UDTS = {"json", "jsonb"}

COLUMNS_QUERY = """
select c.table_schema, c.table_name, c.column_name, c.udt_name,
       c.is_nullable = 'YES' as nullable
from information_schema.columns c
join information_schema.tables t
  on t.table_schema = c.table_schema and t.table_name = c.table_name
where c.table_schema = any(%s)
  and t.table_type in ('BASE TABLE', 'VIEW')
order by c.table_schema, c.table_name, c.ordinal_position
"""


class CatalogColumn(BaseModel):
    """A reflected column."""
    name: str
    udt_name: str
    nullable: bool = True
    field_name: Optional[str] = Field(None, description="Published field name (default: column name)")

    @property
    def published_name(self) -> str:
        return self.field_name or self.name


class CatalogTable(BaseModel):
    """A reflected table or view."""
    schema_name: str
    name: str
    columns: List[CatalogColumn] = Field(default_factory=list)
    type_name: Optional[str] = Field(None, description="Published type name (default: table name)")

    @property
    def published_name(self) -> str:
        return self.type_name or self.name


class CatalogSchema(BaseModel):
    """Schema handle built over the examples database."""
    exposed_schemas: List[str]
    options: Dict[str, Any] = Field(default_factory=dict)
    plugins: List[str] = Field(default_factory=list, description="Names of applied schema plugins")
    tables: List[CatalogTable] = Field(default_factory=list)

    def scalar_for(self, column: CatalogColumn) -> str:
        """Scalar type of a column, honouring the dynamic_json option."""
        udt = column.udt_name
        if udt.startswith("_"):
            inner = self.scalar_for(column.model_copy(update={"udt_name": udt[1:], "nullable": True}))
            scalar = f"[{inner}]"
        elif udt in JSON_UDTS:
            scalar = "JSON" if self.options.get("dynamic_json") else "String"
        else:
            scalar = UDT_SCALARS.get(udt, "String")
        return scalar if column.nullable else f"{scalar}!"

    def table(self, name: str) -> Optional[CatalogTable]:
        for table in self.tables:
            if table.name == name or table.published_name == name:
                return table
        return None

    def describe(self) -> str:
        """Render SDL-style type definitions for every table."""
        blocks = []
        for table in self.tables:
            lines = [f"type {table.published_name} {{"]
            for column in table.columns:
                lines.append(f"  {column.published_name}: {self.scalar_for(column)}")
            lines.append("}")
            blocks.append("\n".join(lines))
        return "\n\n".join(blocks) + "\n"


SchemaPlugin = Callable[[CatalogSchema], CatalogSchema]


# ============================================================================
# PLUGINS
# ============================================================================

def _singularize(word: str) -> str:
    if word.endswith("ies"):
        return word[:-3] + "y"
    if word.endswith(("ses", "xes")):
        return word[:-2]
    if word.endswith("s") and not word.endswith("ss"):
        return word[:-1]
    return word


def _words(name: str) -> List[str]:
    return [part for part in re.split(r"[_\W]+", name) if part]


def simplify_inflection(catalog: CatalogSchema) -> CatalogSchema:
    """Publish singular PascalCase type names and camelCase field names."""
    tables = []
    for table in catalog.tables:
        words = _words(table.name)
        if words:
            words[-1] = _singularize(words[-1])
        columns = []
        for column in table.columns:
            parts = _words(column.name) or [column.name]
            field_name = parts[0] + "".join(part[:1].upper() + part[1:] for part in parts[1:])
            columns.append(column.model_copy(update={"field_name": field_name}))
        tables.append(table.model_copy(update={
            "type_name": "".join(word[:1].upper() + word[1:] for word in words) or table.name,
            "columns": columns,
        }))
    return catalog.model_copy(update={"tables": tables})


def plugin_name(plugin: SchemaPlugin) -> str:
    return getattr(plugin, "__name__", type(plugin).__name__)


# ============================================================================
# FACTORY
# ============================================================================

def catalog_from_rows(
    rows: Iterable[Dict[str, Any]],
    exposed_schemas: Sequence[str],
    options: Dict[str, Any],
) -> CatalogSchema:
    """
    Group information_schema rows into a catalog.

    Args:
        rows: Rows with table_schema, table_name, column_name, udt_name, nullable
        exposed_schemas: Schemas the rows were reflected from
        options: Build options; ``exclude_tables`` drops tables by name

    Returns:
        CatalogSchema without plugins applied
    """
    excluded = set(options.get("exclude_tables") or [])
    tables: Dict[tuple, CatalogTable] = {}

    for row in rows:
        if row["table_name"] in excluded:
            continue
        key = (row["table_schema"], row["table_name"])
        if key not in tables:
            tables[key] = CatalogTable(schema_name=row["table_schema"], name=row["table_name"])
        tables[key].columns.append(CatalogColumn(
            name=row["column_name"],
            udt_name=row["udt_name"],
            nullable=bool(row["nullable"]),
        ))

    return CatalogSchema(
        exposed_schemas=list(exposed_schemas),
        options=dict(options),
        tables=list(tables.values()),
    )


async def reflect_catalog(
    pool,
    exposed_schemas: Sequence[str],
    options: Dict[str, Any],
    plugins: Sequence[SchemaPlugin],
) -> CatalogSchema:
    """
    Reflect the exposed schemas and apply schema plugins in order.

    Raises:
        ValueError: If the exposed schemas contain no tables
    """
    async with pool.connection() as conn:
        cursor = await conn.execute(COLUMNS_QUERY, (list(exposed_schemas),))
        rows = await cursor.fetchall()

    catalog = catalog_from_rows(rows, exposed_schemas, options)
    if not catalog.tables:
        raise ValueError(f"No tables found in schemas: {', '.join(exposed_schemas)}")

    for plugin in plugins:
        catalog = plugin(catalog)
        catalog = catalog.model_copy(update={"plugins": [*catalog.plugins, plugin_name(plugin)]})

    logger.debug(f"Reflected {len(catalog.tables)} tables from {', '.join(exposed_schemas)}")
    return catalog
