"""Sensor catalog implementations and loaders."""

import csv
import io
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, Mapping

from loguru import logger
from pydantic import ValidationError

from src.conditions.domain.exceptions import DuplicateSensorError, SensorCatalogError
from src.conditions.domain.models import SensorCategory, SensorDescriptor, SensorOption
from src.conditions.domain.protocols import SensorCatalog


class InMemorySensorCatalog(SensorCatalog):
    """Catalog backed by a dict, preserving the order sensors were given in."""

    def __init__(self, sensors: Iterable[SensorDescriptor | Mapping]):
        """
        Initialize catalog.

        Args:
            sensors: Descriptors, or dicts with id (or value), label, unit,
                dataType, options and category keys

        Raises:
            DuplicateSensorError: If two entries share an id
            SensorCatalogError: If an entry is not a valid descriptor
        """
        self._sensors: dict[str, SensorDescriptor] = {}
        for entry in sensors:
            try:
                sensor = entry if isinstance(entry, SensorDescriptor) else SensorDescriptor.model_validate(entry)
            except ValidationError as e:
                raise SensorCatalogError(
                    f"Invalid sensor definition: {e.error_count()} error(s)",
                    details={"entry": dict(entry), "errors": [err["msg"] for err in e.errors()]},
                ) from e
            if sensor.id in self._sensors:
                raise DuplicateSensorError(sensor.id)
            self._sensors[sensor.id] = sensor

        logger.debug(f"Sensor catalog ready with {len(self._sensors)} sensors")

    def get(self, sensor_id: str) -> SensorDescriptor | None:
        return self._sensors.get(sensor_id)

    def __iter__(self) -> Iterator[SensorDescriptor]:
        return iter(self._sensors.values())

    def __len__(self) -> int:
        return len(self._sensors)

    def __contains__(self, sensor_id: object) -> bool:
        return sensor_id in self._sensors

    def by_category(self, category: SensorCategory | str) -> list[SensorDescriptor]:
        category = SensorCategory(category)
        return [s for s in self._sensors.values() if s.category == category]

    def search(self, term: str, category: SensorCategory | str | None = None) -> list[SensorDescriptor]:
        """Sensors whose label contains `term` (case-insensitive), optionally within a category."""
        needle = term.strip().lower()
        candidates = self.by_category(category) if category is not None else list(self._sensors.values())
        return [s for s in candidates if needle in s.label.lower()]


def parse_options(raw: str) -> tuple[SensorOption, ...]:
    """
    Parse an options cell such as "true=Encendido|false=Apagado".

    Entries without '=' use the same text as value and label.
    """
    options = []
    for chunk in raw.split("|"):
        chunk = chunk.strip()
        if not chunk:
            continue
        value, _, label = chunk.partition("=")
        options.append(SensorOption(value=value.strip(), label=(label or value).strip()))
    return tuple(options)


def load_catalog_from_csv(source: str | Path | BinaryIO) -> InMemorySensorCatalog:
    """
    Build a catalog from a CSV file.

    Expected CSV format:
    id,label,unit,dataType,category,options
    speed,Velocidad,km/h,numeric,system,
    ignition,Ignición,,boolean,system,true=Encendido|false=Apagado

    Rows without id or label are skipped.

    Args:
        source: Path to the CSV file, or a binary file object

    Returns:
        Catalog with one sensor per valid row

    Raises:
        SensorCatalogError: If the file cannot be read or has no valid rows
    """
    try:
        if isinstance(source, (str, Path)):
            content = Path(source).read_text(encoding="utf-8")
        else:
            content = source.read().decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read sensor catalog: {e}")
        raise SensorCatalogError(f"Cannot read sensor catalog: {e}", details={"source": str(source)}) from e

    records = []
    for row in csv.DictReader(io.StringIO(content)):
        sensor_id = (row.get("id") or "").strip()
        label = (row.get("label") or "").strip()
        if not sensor_id or not label:
            logger.warning(f"Skipping invalid sensor row: {row}")
            continue

        records.append(
            {
                "id": sensor_id,
                "label": label,
                "unit": (row.get("unit") or "").strip(),
                "dataType": (row.get("dataType") or "numeric").strip(),
                "category": (row.get("category") or "system").strip(),
                "options": parse_options(row.get("options") or ""),
            }
        )

    if not records:
        raise SensorCatalogError("No valid sensors found in CSV file", details={"source": str(source)})

    logger.info(f"📄 Parsed {len(records)} sensors from CSV")
    return InMemorySensorCatalog(records)
