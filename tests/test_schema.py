import pytest

from exampledocs.errors import SchemaBuildError
from exampledocs.schema import (
    CatalogSchema,
    SchemaBuilder,
    catalog_from_rows,
    reflect_catalog,
    simplify_inflection,
)

from conftest import FakePool

ROWS = [
    {"table_schema": "app_public", "table_name": "user_accounts", "column_name": "id", "udt_name": "int4", "nullable": False},
    {"table_schema": "app_public", "table_name": "user_accounts", "column_name": "display_name", "udt_name": "text", "nullable": True},
    {"table_schema": "app_public", "table_name": "user_accounts", "column_name": "settings", "udt_name": "jsonb", "nullable": False},
    {"table_schema": "app_public", "table_name": "categories", "column_name": "id", "udt_name": "int4", "nullable": False},
    {"table_schema": "app_public", "table_name": "categories", "column_name": "tag_ids", "udt_name": "_int4", "nullable": True},
]


# -----------------------------
# SchemaBuilder
# -----------------------------
class RecordingFactory:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    async def __call__(self, connection, exposed_schemas, options, plugins):
        self.calls.append((connection, exposed_schemas, options, plugins))
        if self.error:
            raise self.error
        return {"schemas": exposed_schemas, "options": options}


def extra_plugin(catalog):
    return catalog


async def test_build_injects_fixed_options_and_plugins():
    factory = RecordingFactory()
    builder = SchemaBuilder(factory=factory, base_options={"exclude_tables": ["secrets"]})

    handle = await builder.build("pool", ["app_public"])

    connection, schemas, options, plugins = factory.calls[0]
    assert connection == "pool"
    assert schemas == ["app_public"]
    assert options == {"exclude_tables": ["secrets"], "dynamic_json": True}
    assert plugins == [simplify_inflection]
    assert handle == {"schemas": ["app_public"], "options": options}


async def test_call_options_override_and_plugins_append():
    factory = RecordingFactory()
    builder = SchemaBuilder(factory=factory, base_options={"a": 1}, base_plugins=[extra_plugin])

    await builder.build("pool", ("app_public", "app_private"), {"a": 2, "dynamic_json": False}, [reflect_catalog])

    _, schemas, options, plugins = factory.calls[0]
    assert schemas == ["app_public", "app_private"]
    assert options == {"a": 2, "dynamic_json": False}
    assert plugins == [simplify_inflection, extra_plugin, reflect_catalog]


async def test_each_build_calls_the_factory():
    factory = RecordingFactory()
    builder = SchemaBuilder(factory=factory)

    await builder.build("pool", ["app_public"])
    await builder.build("pool", ["app_public"])

    assert len(factory.calls) == 2


async def test_factory_failure_becomes_schema_build_error():
    builder = SchemaBuilder(factory=RecordingFactory(error=ConnectionError("server closed the connection")))

    with pytest.raises(SchemaBuildError, match="server closed the connection") as excinfo:
        await builder.build("pool", ["app_public"])

    assert isinstance(excinfo.value.__cause__, ConnectionError)


# -----------------------------
# Catalog
# -----------------------------
def test_catalog_from_rows_groups_columns_in_order():
    catalog = catalog_from_rows(ROWS, ["app_public"], {})

    assert [table.name for table in catalog.tables] == ["user_accounts", "categories"]
    assert [column.name for column in catalog.tables[0].columns] == ["id", "display_name", "settings"]
    assert catalog.tables[0].columns[0].nullable is False


def test_exclude_tables_option():
    catalog = catalog_from_rows(ROWS, ["app_public"], {"exclude_tables": ["categories"]})

    assert [table.name for table in catalog.tables] == ["user_accounts"]


def test_describe_without_plugins_uses_raw_names():
    catalog = catalog_from_rows(ROWS, ["app_public"], {})

    assert catalog.describe() == (
        "type user_accounts {\n"
        "  id: Int!\n"
        "  display_name: String\n"
        "  settings: String!\n"
        "}\n"
        "\n"
        "type categories {\n"
        "  id: Int!\n"
        "  tag_ids: [Int]\n"
        "}\n"
    )


def test_dynamic_json_and_inflection():
    catalog = simplify_inflection(catalog_from_rows(ROWS, ["app_public"], {"dynamic_json": True}))

    described = catalog.describe()
    assert "type UserAccount {" in described
    assert "type Category {" in described
    assert "  displayName: String\n" in described
    assert "  settings: JSON!\n" in described
    assert "  tagIds: [Int]\n" in described
    assert catalog.table("UserAccount").name == "user_accounts"


async def test_reflect_catalog_queries_exposed_schemas_and_applies_plugins():
    pool = FakePool(rows=ROWS)

    catalog = await reflect_catalog(pool, ["app_public"], {"dynamic_json": True}, [simplify_inflection])

    query, params = pool.conn.executed[0]
    assert "information_schema.columns" in query
    assert params == (["app_public"],)
    assert isinstance(catalog, CatalogSchema)
    assert catalog.plugins == ["simplify_inflection"]
    assert catalog.tables[0].published_name == "UserAccount"


async def test_reflect_catalog_rejects_empty_schema():
    with pytest.raises(ValueError, match="No tables found"):
        await reflect_catalog(FakePool(rows=[]), ["app_missing"], {}, [])
