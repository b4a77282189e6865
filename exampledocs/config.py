"""
Build settings.

Settings come from ``EXAMPLEDOCS_*`` environment variables, with a ``.env``
file picked up automatically. CLI flags override individual fields.
List and mapping fields take JSON values, e.g.
``EXAMPLEDOCS_EXPOSED_SCHEMAS='["app_public", "app_hidden"]'``.
"""

from pathlib import Path
from typing import Dict, List, Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict, SettingsError

from exampledocs.errors import ConfigurationError

ENV_PREFIX = "EXAMPLEDOCS_"


class BuildSettings(BaseSettings):
    """Configuration for one corpus build."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    examples_dir: Path = Field(default=Path("examples"), description="Root of the examples tree")
    output_path: Path = Field(default=Path("examples.json"), description="Artifact written on success")

    database_name: str = Field(default="exampledocs", description="Disposable database name")
    database_url: Optional[str] = Field(None, description="Connection URL (default: postgres:///<database_name>)")
    maintenance_database: str = Field(default="template1", description="Database used for role setup")
    owner_role: str = "exampledocs_owner"
    authenticator_role: str = "exampledocs_authenticator"
    visitor_role: str = "exampledocs_visitor"
    exposed_schemas: List[str] = Field(default_factory=lambda: ["app_public"])

    schema_url: Optional[str] = Field(None, description="URL of the baseline schema SQL")
    data_url: Optional[str] = Field(None, description="URL of the baseline seed data SQL")

    formatter_commands: Dict[str, List[str]] = Field(
        default_factory=dict,
        description="Language -> formatter argv reading stdin, e.g. {'sql': ['pg_format']}",
    )
    category_plugins: Dict[str, str] = Field(
        default_factory=dict,
        description="Extra category plugins as name -> 'module:attr'",
    )

    @property
    def conninfo(self) -> str:
        return self.database_url or f"postgres:///{self.database_name}"

    def require_seed_urls(self) -> None:
        """Raise if the baseline payload URLs are not configured."""
        missing = [
            ENV_PREFIX + name.upper()
            for name in ("schema_url", "data_url")
            if not getattr(self, name)
        ]
        if missing:
            raise ConfigurationError(f"Missing required setting(s): {', '.join(missing)}")

    @classmethod
    def from_env(cls, **overrides) -> "BuildSettings":
        """
        Load settings from the environment and ``.env``.

        Args:
            **overrides: Field values that take precedence (None is ignored)

        Raises:
            ConfigurationError: If a value cannot be parsed
        """
        values = {key: value for key, value in overrides.items() if value is not None}
        try:
            return cls(**values)
        except (SettingsError, ValidationError) as e:
            raise ConfigurationError(f"Invalid settings: {e}") from e
