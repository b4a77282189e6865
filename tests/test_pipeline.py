import json

import pytest

from exampledocs.categories import CategoryPlugin, CategoryRegistry, default_registry
from exampledocs.config import BuildSettings
from exampledocs.errors import ConfigurationError, SchemaBuildError
from exampledocs.pipeline import CorpusBuildPipeline
from exampledocs.schema import CatalogSchema, SchemaBuilder
from exampledocs.schemas import SeedPayloads

from conftest import FakeRunner, PoolFactory, write_tree


class GraphqlCategory(CategoryPlugin):
    """Reads the query, runs it against the schema, publishes the JSON result."""

    def file_filter(self, filename):
        return filename.endswith(".graphql")

    async def process_file(self, path, context):
        source = path.read_text()
        result = await context.engine.execute(context.schema, source)
        if "explode" in source:
            raise RuntimeError(f"query failed: {path.name}")
        return {
            "example": source,
            "exampleLanguage": "graphql",
            "result": json.dumps(result),
            "resultLanguage": "json",
        }


class FakeEngine:
    def __init__(self, pool):
        self.pool = pool
        self.queries = []

    async def execute(self, schema, source, variables=None):
        self.queries.append(source)
        return {"data": {"schemas": schema.exposed_schemas, "query": source.strip()}}


class FakeProvisioner:
    def __init__(self):
        self.payloads = []

    async def provision(self, payloads):
        self.payloads.append(payloads)


async def fake_fetcher(schema_url, data_url):
    return SeedPayloads(schema_sql=f"-- {schema_url}", data_sql=f"-- {data_url}")


async def fake_factory(pool, exposed_schemas, options, plugins):
    return CatalogSchema(exposed_schemas=exposed_schemas, options=options)


def make_settings(tmp_path, **overrides):
    values = dict(
        examples_dir=tmp_path / "examples",
        output_path=tmp_path / "examples.json",
        schema_url="https://seed.example.test/schema.sql",
        data_url="https://seed.example.test/data.sql",
    )
    values.update(overrides)
    return BuildSettings(**values)


def make_pipeline(settings, pool_factory=None, factory=fake_factory):
    registry = default_registry.copy()
    registry.register("graphql", GraphqlCategory)
    pipeline = CorpusBuildPipeline(
        settings,
        runner=FakeRunner(),
        provisioner=FakeProvisioner(),
        seed_fetcher=fake_fetcher,
        pool_factory=pool_factory or PoolFactory(),
        schema_builder=SchemaBuilder(factory=factory),
        engine_factory=FakeEngine,
        registry=registry,
    )
    return pipeline


async def test_single_graphql_example_end_to_end(tmp_path):
    write_tree(tmp_path / "examples", {
        "graphql/category.json": {},
        "graphql/01_basic/01_basic.graphql": "{ allUsers { nodes { id } } }\n",
    })
    settings = make_settings(tmp_path)
    pool_factory = PoolFactory()
    pipeline = make_pipeline(settings, pool_factory)

    document = await pipeline.run()

    assert len(document.sections) == 1
    section = document.sections[0]
    assert section.category == "graphql"
    assert section.title == "Basic"
    assert [example.title for example in section.examples] == ["Basic"]
    example = section.examples[0]
    assert example.example == "{ allUsers { nodes { id } } }\n"
    assert json.loads(example.result) == {
        "data": {"schemas": ["app_public"], "query": "{ allUsers { nodes { id } } }"},
    }

    written = json.loads(settings.output_path.read_text())
    assert written == document.to_json_data()
    assert pipeline.provisioner.payloads[0].schema_sql == "-- https://seed.example.test/schema.sql"
    assert pool_factory.opened_with == "postgres:///exampledocs"
    assert pool_factory.pool.closed is True
    assert pipeline.duration_seconds is not None


async def test_sections_follow_discovery_order_across_categories(tmp_path):
    write_tree(tmp_path / "examples", {
        "b_graphql/category.json": {"plugin": "graphql"},
        "b_graphql/02_second/a.graphql": "{ second }",
        "b_graphql/01_first/b.graphql": "{ first_b }",
        "b_graphql/01_first/a.graphql": "{ first_a }",
        "a_schema/category.json": {"plugin": "schema"},
        "a_schema/variants/01_default.json": {"options": {}},
    })
    pipeline = make_pipeline(make_settings(tmp_path))

    document = await pipeline.run()

    assert [(s.category, s.title) for s in document.sections] == [
        ("a_schema", "Variants"),
        ("b_graphql", "First"),
        ("b_graphql", "Second"),
    ]
    assert [e.title for e in document.sections[1].examples] == ["A", "B"]


async def test_failing_example_aborts_without_writing(tmp_path):
    write_tree(tmp_path / "examples", {
        "graphql/category.json": {},
        "graphql/queries/01_one.graphql": "{ one }",
        "graphql/queries/02_two.graphql": "{ explode }",
        "graphql/queries/03_three.graphql": "{ three }",
    })
    settings = make_settings(tmp_path)
    settings.output_path.write_text("previous artifact")
    pool_factory = PoolFactory()
    pipeline = make_pipeline(settings, pool_factory)

    with pytest.raises(RuntimeError, match="02_two.graphql"):
        await pipeline.run()

    assert settings.output_path.read_text() == "previous artifact"
    assert pool_factory.pool.closed is True


async def test_schema_failure_releases_pool(tmp_path):
    write_tree(tmp_path / "examples", {"graphql/category.json": {}})

    async def broken_factory(pool, exposed_schemas, options, plugins):
        raise ValueError("No tables found in schemas: app_public")

    settings = make_settings(tmp_path)
    pool_factory = PoolFactory()
    pipeline = make_pipeline(settings, pool_factory, factory=broken_factory)

    with pytest.raises(SchemaBuildError):
        await pipeline.run()

    assert pool_factory.pool.closed is True
    assert not settings.output_path.exists()


async def test_missing_seed_urls_fail_before_provisioning(tmp_path):
    pipeline = make_pipeline(make_settings(tmp_path, schema_url=None))

    with pytest.raises(ConfigurationError):
        await pipeline.run()

    assert pipeline.provisioner.payloads == []


async def test_default_registry_includes_configured_plugins(tmp_path):
    settings = make_settings(tmp_path, category_plugins={"queries": "exampledocs.categories.sql:SqlCategory"})

    pipeline = CorpusBuildPipeline(settings)

    assert {"queries", "sql", "schema"} <= set(pipeline.discovery.registry.names())
    assert "queries" not in default_registry
    assert isinstance(pipeline.discovery.registry, CategoryRegistry)
