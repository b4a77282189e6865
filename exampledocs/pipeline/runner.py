"""
Pipeline runner that orchestrates a complete corpus build.

This module coordinates:
1. Fetching the baseline seed SQL
2. Provisioning the disposable database
3. Building the shared schema handle
4. Discovering categories, sections and examples
5. Rendering every example and writing the artifact
"""

import logging
from datetime import datetime
from functools import partial
from typing import Any, Callable, Optional

from exampledocs.assembler import DocumentAssembler
from exampledocs.categories import CategoryRegistry, ExampleContext, default_registry
from exampledocs.config import BuildSettings
from exampledocs.database import DatabaseProvisioner, fetch_seed_payloads, open_pool
from exampledocs.discovery import CorpusDiscovery
from exampledocs.execution import SqlQueryEngine
from exampledocs.formatting import CodeFormatter
from exampledocs.process import ProcessRunner
from exampledocs.schema import SchemaBuilder
from exampledocs.schemas import CorpusDocument

logger = logging.getLogger(__name__)


class CorpusBuildPipeline:
    """Regenerates the example corpus from scratch."""

    def __init__(
        self,
        settings: BuildSettings,
        runner: Optional[ProcessRunner] = None,
        provisioner: Optional[DatabaseProvisioner] = None,
        seed_fetcher: Optional[Callable] = None,
        pool_factory: Optional[Callable] = None,
        schema_builder: Optional[SchemaBuilder] = None,
        engine_factory: Optional[Callable[[Any], Any]] = None,
        formatter: Optional[CodeFormatter] = None,
        registry: Optional[CategoryRegistry] = None,
        assembler: Optional[DocumentAssembler] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            settings: Build settings
            runner: Process runner shared by provisioning and formatting
            provisioner: Database provisioner (default: built from settings)
            seed_fetcher: Async ``(schema_url, data_url) -> SeedPayloads``
            pool_factory: Async context manager factory ``(conninfo) -> pool``
            schema_builder: Builder for the shared schema handle and variants
            engine_factory: ``pool -> query engine`` (default: SqlQueryEngine)
            formatter: Code formatter handed to categories
            registry: Category registry (default: built-ins, entry points and
                plugins named in settings)
            assembler: Document assembler
        """
        self.settings = settings
        self.runner = runner or ProcessRunner()
        self.provisioner = provisioner or DatabaseProvisioner(
            self.runner,
            database_name=settings.database_name,
            owner_role=settings.owner_role,
            authenticator_role=settings.authenticator_role,
            visitor_role=settings.visitor_role,
            maintenance_database=settings.maintenance_database,
        )
        self.seed_fetcher = seed_fetcher or fetch_seed_payloads
        self.pool_factory = pool_factory or open_pool
        self.schema_builder = schema_builder or SchemaBuilder()
        self.engine_factory = engine_factory or SqlQueryEngine
        self.formatter = formatter or CodeFormatter(self.runner, settings.formatter_commands)

        if registry is None:
            registry = default_registry.copy()
            registry.load_entry_points()
            registry.register_paths(settings.category_plugins)
        self.discovery = CorpusDiscovery(registry)
        self.assembler = assembler or DocumentAssembler()

        # Set during run()
        self.duration_seconds: Optional[float] = None

    async def run(self) -> CorpusDocument:
        """
        Run every stage and write the artifact.

        The artifact is written only after every example has been processed;
        any error propagates and leaves the previous artifact untouched. The
        connection pool is released whether the build succeeds or not.

        Returns:
            The CorpusDocument that was written
        """
        start_time = datetime.now()
        self.settings.require_seed_urls()

        logger.info("[1/5] Fetching seed payloads")
        payloads = await self.seed_fetcher(self.settings.schema_url, self.settings.data_url)

        logger.info("[2/5] Provisioning database")
        await self.provisioner.provision(payloads)

        async with self.pool_factory(self.settings.conninfo) as pool:
            logger.info("[3/5] Building schema")
            schema = await self.schema_builder.build(pool, self.settings.exposed_schemas)

            logger.info("[4/5] Discovering examples")
            plan = self.discovery.discover(self.settings.examples_dir)

            logger.info("[5/5] Processing examples")
            context = ExampleContext(
                pool=pool,
                schema=schema,
                formatter=self.formatter,
                engine=self.engine_factory(pool),
                build_schema=partial(self.schema_builder.build, pool),
            )
            document = await self.assembler.assemble(plan, context)

        self.assembler.write(document, self.settings.output_path)

        self.duration_seconds = (datetime.now() - start_time).total_seconds()
        logger.info(
            f"Built {len(document.sections)} sections, {document.example_count} examples "
            f"in {self.duration_seconds:.1f}s"
        )
        return document
