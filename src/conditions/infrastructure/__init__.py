"""Infrastructure layer for the condition engine."""

from src.conditions.infrastructure.logging import RuleLogContext, configure_structured_logging
from src.conditions.infrastructure.sensor_catalog import InMemorySensorCatalog, load_catalog_from_csv

__all__ = [
    "RuleLogContext",
    "configure_structured_logging",
    "InMemorySensorCatalog",
    "load_catalog_from_csv",
]
