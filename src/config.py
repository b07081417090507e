"""Configuration for the application."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConditionEditorConfig(BaseSettings):
    """Configuration for the condition editor policies."""

    model_config = SettingsConfigDict(env_prefix="CONDITIONS_", env_file=".env", extra="ignore")

    default_between_group_operator: Literal["and", "or"] = Field(
        default="and", description="Join operator given to a newly added second group"
    )
    reset_value_on_operator_change: bool = Field(
        default=False, description="Clear a condition's value whenever its operator changes"
    )
    id_prefix_group: str = Field(default="group", description="Prefix for generated group ids")
    id_prefix_condition: str = Field(default="condition", description="Prefix for generated condition ids")


class SensorCatalogConfig(BaseSettings):
    """Configuration for the sensor catalog source."""

    model_config = SettingsConfigDict(env_prefix="SENSOR_CATALOG_", env_file=".env", extra="ignore")

    path: str | None = Field(default=None, description="CSV file with sensor descriptors")


class LoggingConfig(BaseSettings):
    """Configuration for logging."""

    model_config = SettingsConfigDict(env_prefix="LOG_", env_file=".env", extra="ignore")

    level: str = Field(default="INFO", description="Minimum level for the console handler")
    file: str | None = Field(default=None, description="Optional log file path")
    rotation: str = Field(default="100 MB", description="Log file rotation threshold")
    retention: str = Field(default="30 days", description="Log file retention")


class AppConfig(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    editor: ConditionEditorConfig = Field(default_factory=ConditionEditorConfig)
    sensor_catalog: SensorCatalogConfig = Field(default_factory=SensorCatalogConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


@lru_cache(maxsize=1)
def default_editor_config() -> ConditionEditorConfig:
    """Editor configuration read once from the environment."""
    return ConditionEditorConfig()
