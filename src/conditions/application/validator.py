"""Completeness checks that gate the rule wizard steps."""

import math
from typing import Any

from src.conditions.domain.models import (
    ClosePolicy,
    DataType,
    EventTiming,
    ExpressionModel,
    FrozenModel,
    TargetMode,
    TargetSelection,
)
from src.conditions.domain.operators import is_operator_allowed
from src.conditions.domain.protocols import SensorCatalog

FIELD_ERROR_MESSAGES: dict[str, str] = {
    "conditions": "Se requiere al menos una condición válida",
    "targets": "Debe seleccionar al menos una unidad o etiqueta",
    "duration": "La duración debe ser un número mayor que cero",
    "shortName": "El nombre corto del evento es obligatorio",
    "closureTime": "El tiempo de cierre debe ser un número mayor que cero",
}


class ValidationResult(FrozenModel):
    """Aggregate verdict plus one flag per checked field (True = error)."""

    is_valid: bool
    field_errors: dict[str, bool]

    @property
    def failed_fields(self) -> list[str]:
        return [name for name, failed in self.field_errors.items() if failed]

    def messages(self) -> dict[str, str]:
        """Inline messages for the fields that failed."""
        return {name: FIELD_ERROR_MESSAGES.get(name, name) for name in self.failed_fields}


class ConditionIssues(FrozenModel):
    """Inline diagnostics for one condition against the sensor catalog."""

    unknown_sensor: bool = False
    operator_not_allowed: bool = False
    value_not_in_options: bool = False
    value_not_numeric: bool = False

    @property
    def has_issues(self) -> bool:
        return any(self.model_dump().values())


def _as_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError:
        return None


def is_positive_number(value: Any) -> bool:
    """True for finite numbers (or numeric strings) greater than zero."""
    number = _as_number(value)
    return number is not None and math.isfinite(number) and number > 0


def _result(field_errors: dict[str, bool]) -> ValidationResult:
    return ValidationResult(is_valid=not any(field_errors.values()), field_errors=field_errors)


def validate_parameters(
    model: ExpressionModel,
    applies_to: TargetSelection,
    event_timing: EventTiming | str,
    duration_value: Any,
) -> ValidationResult:
    """
    Check the Parameters step.

    Passes when at least one condition anywhere is complete, custom targeting
    has at least one unit or tag selected, and a "after a duration" timing has
    a positive duration. Incomplete conditions elsewhere do not block. Timing
    tokens other than "despues-tiempo" (including blanks) need no duration.
    """
    custom_targets = applies_to.mode == TargetMode.CUSTOM
    after_duration = event_timing == EventTiming.AFTER_DURATION
    return _result(
        {
            "conditions": not model.has_complete_condition(),
            "targets": custom_targets and not applies_to.has_selection,
            "duration": after_duration and not is_positive_number(duration_value),
        }
    )


def validate_actions(
    short_name: str | None,
    close_policy: ClosePolicy | str,
    closure_time_value: Any,
) -> ValidationResult:
    """
    Check the Actions step: event short name and automatic closure time.

    Only the "auto-time" policy needs a closure time; unset or unrecognised
    policies are not checked for one.
    """
    auto_time = close_policy == ClosePolicy.AUTO_TIME
    return _result(
        {
            "shortName": not (short_name or "").strip(),
            "closureTime": auto_time and not is_positive_number(closure_time_value),
        }
    )


def inspect_conditions(model: ExpressionModel, catalog: SensorCatalog) -> dict[str, ConditionIssues]:
    """
    Per-condition diagnostics for inline rendering.

    Only conditions with a sensor selected are inspected. The result never
    affects step validity; incomplete or odd conditions are dropped on save.
    """
    issues: dict[str, ConditionIssues] = {}
    for group in model.groups:
        for condition in group.conditions:
            if not condition.sensor_id:
                continue

            sensor = catalog.get(condition.sensor_id)
            if sensor is None:
                issues[condition.id] = ConditionIssues(unknown_sensor=True)
                continue

            value = condition.value.strip()
            issues[condition.id] = ConditionIssues(
                operator_not_allowed=bool(condition.operator)
                and not is_operator_allowed(sensor.data_type, condition.operator),
                value_not_in_options=bool(value)
                and sensor.data_type.is_enumerated
                and bool(sensor.options)
                and sensor.find_option(value) is None,
                value_not_numeric=bool(value)
                and sensor.data_type == DataType.NUMERIC
                and _as_number(value) is None,
            )
    return issues
