"""
Configuration system for schemalog using Pydantic.
"""

import logging
import logging.handlers
import os
from pathlib import Path
from typing import Any, Literal, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .database import Database, DatabaseProfile
from .exceptions import ConfigurationError


class DiffOutputSettings(BaseModel):
    """Name qualification switches applied to every generated change."""

    include_catalog: bool = Field(
        False, description="Always qualify names with the catalog"
    )
    include_schema: bool = Field(
        False, description="Always qualify names with the schema"
    )
    consider_catalogs_as_schemas: bool = Field(
        False, description="Treat catalogs as schemas when qualifying names"
    )


class DatabaseSettings(BaseModel):
    """Dialect and default names of one side of the comparison."""

    dialect: str = Field("generic", description="Built-in dialect name")
    profile: Optional[DatabaseProfile] = Field(
        None, description="Explicit capability profile, overrides dialect"
    )
    default_catalog_name: Optional[str] = Field(
        None, description="Default catalog, overrides the profile default"
    )
    default_schema_name: Optional[str] = Field(
        None, description="Default schema, overrides the profile default"
    )

    def to_database(self) -> Database:
        """Build the capability object for this side."""
        return Database.for_dialect(
            self.profile or self.dialect,
            default_catalog_name=self.default_catalog_name,
            default_schema_name=self.default_schema_name,
        )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO", description="Log level"
    )
    format: str = Field(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )
    file: Optional[str] = Field(None, description="Log file path")
    max_size: int = Field(10485760, description="Max log file size in bytes")  # 10MB
    backup_count: int = Field(5, description="Number of backup log files")


class SchemalogConfig(BaseSettings):
    """Main schemalog configuration."""

    output: DiffOutputSettings = Field(
        default_factory=DiffOutputSettings, description="Name qualification"
    )
    reference: DatabaseSettings = Field(
        default_factory=DatabaseSettings, description="Reference database"
    )
    comparison: DatabaseSettings = Field(
        default_factory=DatabaseSettings, description="Comparison database"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SCHEMALOG_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "SchemalogConfig":
        """Load configuration from a YAML file."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}

            # Expand environment variables in the data
            data = cls._expand_env_vars(data)

            return cls(**data)
        except FileNotFoundError:
            raise ConfigurationError(f"Configuration file not found: {path}")
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}")
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}")

    @classmethod
    def _expand_env_vars(cls, data: Any) -> Any:
        """Recursively expand environment variables in configuration data."""
        if isinstance(data, dict):
            return {k: cls._expand_env_vars(v) for k, v in data.items()}
        elif isinstance(data, list):
            return [cls._expand_env_vars(item) for item in data]
        elif isinstance(data, str):
            return os.path.expandvars(data)
        else:
            return data

    def validate_config(self) -> None:
        """Validate that both sides resolve to a known dialect."""
        for side in ("reference", "comparison"):
            try:
                getattr(self, side).to_database()
            except ConfigurationError as e:
                raise ConfigurationError(f"Invalid {side} database: {e.message}") from e

    def to_yaml(self, path: Union[str, Path]) -> None:
        """Save configuration to a YAML file."""
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(
                self.model_dump(exclude_none=True),
                f,
                default_flow_style=False,
                indent=2,
            )


def configure_logging(config: LoggingConfig) -> None:
    """Configure the root logger from a LoggingConfig section."""
    handlers: list = [logging.StreamHandler()]
    if config.file:
        handlers.append(
            logging.handlers.RotatingFileHandler(
                config.file,
                maxBytes=config.max_size,
                backupCount=config.backup_count,
                encoding="utf-8",
            )
        )
    logging.basicConfig(
        level=getattr(logging, config.level),
        format=config.format,
        handlers=handlers,
        force=True,
    )
