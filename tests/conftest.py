"""Shared fixtures for the condition engine tests."""

from pathlib import Path

import pytest

from src.config import ConditionEditorConfig
from src.conditions.infrastructure.sensor_catalog import InMemorySensorCatalog
from tests.helpers import TELEMETRY_SENSORS

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def catalog() -> InMemorySensorCatalog:
    """Telemetry catalog with numeric, boolean, string and datetime sensors."""
    return InMemorySensorCatalog(TELEMETRY_SENSORS)


@pytest.fixture
def settings() -> ConditionEditorConfig:
    """Editor settings pinned to the defaults, independent of the environment."""
    return ConditionEditorConfig(
        default_between_group_operator="and",
        reset_value_on_operator_change=False,
        id_prefix_group="group",
        id_prefix_condition="condition",
    )


@pytest.fixture
def sensors_csv() -> Path:
    return FIXTURES / "sensors.csv"
