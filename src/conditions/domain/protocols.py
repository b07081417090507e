"""Protocols (interfaces) for condition engine collaborators."""

from typing import Iterator, Protocol, runtime_checkable

from src.conditions.domain.models import SensorDescriptor


@runtime_checkable
class SensorCatalog(Protocol):
    """Read-only registry of sensor descriptors supplied by the host."""

    def get(self, sensor_id: str) -> SensorDescriptor | None:
        """
        Look up a sensor.

        Args:
            sensor_id: Sensor identifier (e.g., "speed")

        Returns:
            The descriptor, or None if the catalog does not know the id
        """
        ...

    def __iter__(self) -> Iterator[SensorDescriptor]:
        """Iterate descriptors in catalog order."""
        ...

    def __len__(self) -> int:
        ...
