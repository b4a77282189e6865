"""
Schema construction over the provisioned database.

SchemaBuilder merges a base options map with the options every build needs,
prepends the fixed schema plugins, and delegates to a schema factory. The
pipeline builds one handle and shares it with every category; categories call
``build`` again through their context when they need a variant.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from exampledocs.errors import SchemaBuildError
from exampledocs.schema.catalog import SchemaPlugin, reflect_catalog, simplify_inflection

logger = logging.getLogger(__name__)

SchemaFactory = Callable[[Any, Sequence[str], Dict[str, Any], Sequence[SchemaPlugin]], Awaitable[Any]]


class SchemaBuilder:
    """Build schema handles with fixed options and plugins injected."""

    FIXED_OPTIONS: Dict[str, Any] = {"dynamic_json": True}
    FIXED_PLUGINS: Sequence[SchemaPlugin] = (simplify_inflection,)

    def __init__(
        self,
        factory: Optional[SchemaFactory] = None,
        base_options: Optional[Dict[str, Any]] = None,
        base_plugins: Optional[Sequence[SchemaPlugin]] = None,
    ):
        """
        Initialize the builder.

        Args:
            factory: Async callable producing a handle (default: reflect_catalog)
            base_options: Options applied to every build
            base_plugins: Plugins appended after the fixed plugins on every build
        """
        self.factory = factory or reflect_catalog
        self.base_options = dict(base_options or {})
        self.base_plugins = list(base_plugins or [])

    def merge_options(self, options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Base options, then fixed options, then per-call overrides."""
        return {**self.base_options, **self.FIXED_OPTIONS, **(options or {})}

    def merge_plugins(self, plugins: Optional[Sequence[SchemaPlugin]] = None) -> List[SchemaPlugin]:
        """Fixed plugins, then base plugins, then per-call additions."""
        return [*self.FIXED_PLUGINS, *self.base_plugins, *(plugins or [])]

    async def build(
        self,
        connection: Any,
        exposed_schemas: Sequence[str],
        options: Optional[Dict[str, Any]] = None,
        plugins: Optional[Sequence[SchemaPlugin]] = None,
    ) -> Any:
        """
        Build a schema handle.

        Args:
            connection: Connection pool for the examples database
            exposed_schemas: PostgreSQL schemas to expose
            options: Per-call option overrides
            plugins: Per-call plugins appended to the merged plugin list

        Returns:
            The handle produced by the factory

        Raises:
            SchemaBuildError: If the factory fails for any reason
        """
        exposed = list(exposed_schemas)
        merged_options = self.merge_options(options)
        merged_plugins = self.merge_plugins(plugins)

        logger.info(f"Building schema for {', '.join(exposed)}")
        try:
            return await self.factory(connection, exposed, merged_options, merged_plugins)
        except Exception as e:
            raise SchemaBuildError(f"Failed to build schema for {', '.join(exposed)}: {e}") from e
