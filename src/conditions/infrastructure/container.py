"""Dependency injection container for the condition engine."""

from dependency_injector import containers, providers

from src.config import AppConfig, ConditionEditorConfig
from src.conditions.application.store import ExpressionStore
from src.conditions.infrastructure.sensor_catalog import InMemorySensorCatalog, load_catalog_from_csv


def _build_editor_settings(values: dict | None) -> ConditionEditorConfig:
    return ConditionEditorConfig(**{k: v for k, v in (values or {}).items() if v is not None})


def _build_catalog(path: str | None, sensors: list | None = None) -> InMemorySensorCatalog:
    if path:
        return load_catalog_from_csv(path)
    return InMemorySensorCatalog(sensors or [])


class EngineContainer(containers.DeclarativeContainer):
    """Dependency injection container for the condition engine."""

    config = providers.Configuration()

    # Editor policies
    editor_settings = providers.Singleton(_build_editor_settings, config.editor)

    # Sensor catalog, read once
    sensor_catalog = providers.Singleton(
        _build_catalog,
        path=config.sensor_catalog.path,
        sensors=config.sensor_catalog.sensors,
    )

    # One store per wizard session
    expression_store = providers.Factory(
        ExpressionStore,
        catalog=sensor_catalog,
        settings=editor_settings,
    )


# Global container instance
_container: EngineContainer | None = None


def init_container(config: AppConfig | dict) -> EngineContainer:
    """Initialize the global container."""
    global _container
    _container = EngineContainer()
    _container.config.from_dict(config.model_dump() if isinstance(config, AppConfig) else config)
    return _container


def get_container() -> EngineContainer:
    """Get the global container instance."""
    if _container is None:
        raise RuntimeError("Container not initialized. Call init_container() first.")
    return _container
