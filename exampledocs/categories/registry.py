"""
Registry mapping category names to plugin implementations.

Built-in categories register themselves with ``@register_category``. Third
party packages can expose plugins through the ``exampledocs.categories``
entry-point group, and a descriptor may also name a plugin by dotted path.
"""

import importlib
import logging
from importlib.metadata import entry_points
from typing import Any, Callable, Dict, List, Optional

from exampledocs.categories.base import CategoryPlugin
from exampledocs.errors import CategoryError

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "exampledocs.categories"

PluginFactory = Callable[[Dict[str, Any]], CategoryPlugin]


class CategoryRegistry:
    """Name -> plugin factory mapping resolved at startup."""

    def __init__(self):
        self._factories: Dict[str, PluginFactory] = {}

    def register(self, name: str, factory: PluginFactory) -> None:
        if name in self._factories:
            raise CategoryError(f"Category plugin already registered: {name}")
        self._factories[name] = factory

    def names(self) -> List[str]:
        return sorted(self._factories)

    def __contains__(self, name: str) -> bool:
        return name in self._factories

    def copy(self) -> "CategoryRegistry":
        registry = CategoryRegistry()
        registry._factories = dict(self._factories)
        return registry

    def load_entry_points(self) -> int:
        """Register plugins advertised by installed packages."""
        loaded = 0
        for entry_point in entry_points(group=ENTRY_POINT_GROUP):
            if entry_point.name in self._factories:
                continue
            self.register(entry_point.name, entry_point.load())
            loaded += 1
        if loaded:
            logger.debug(f"Loaded {loaded} category plugins from entry points")
        return loaded

    def register_paths(self, paths: Dict[str, str]) -> None:
        """Register ``name -> "module:attr"`` plugins from configuration."""
        for name, path in paths.items():
            self.register(name, import_plugin(path))

    def resolve(self, ref: str, options: Optional[Dict[str, Any]] = None) -> CategoryPlugin:
        """
        Instantiate a plugin.

        Args:
            ref: Registered name or ``module:attr`` dotted path
            options: Options passed to the plugin constructor

        Raises:
            CategoryError: If the plugin cannot be found or constructed
        """
        factory = self._factories.get(ref)
        if factory is None:
            if ":" not in ref:
                known = ", ".join(self.names()) or "none"
                raise CategoryError(f"Unknown category plugin '{ref}' (registered: {known})")
            factory = import_plugin(ref)

        plugin = factory(dict(options or {}))
        if not isinstance(plugin, CategoryPlugin):
            raise CategoryError(f"Category plugin '{ref}' did not produce a CategoryPlugin")
        return plugin


def import_plugin(path: str) -> PluginFactory:
    """Import ``module:attr`` and return the attribute."""
    module_name, _, attr = path.partition(":")
    if not module_name or not attr:
        raise CategoryError(f"Plugin path must look like 'module:attr': {path}")
    try:
        module = importlib.import_module(module_name)
        return getattr(module, attr)
    except (ImportError, AttributeError) as e:
        raise CategoryError(f"Cannot import category plugin {path}: {e}") from e


default_registry = CategoryRegistry()


def register_category(name: str, registry: CategoryRegistry = default_registry):
    """Class decorator registering a CategoryPlugin subclass under ``name``."""
    def decorator(cls):
        cls.name = name
        registry.register(name, cls)
        return cls
    return decorator
