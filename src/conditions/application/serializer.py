"""Conversion between the expression model and the persisted rule payload."""

from typing import Any, Mapping

from loguru import logger
from pydantic import ValidationError, field_validator

from src.config import ConditionEditorConfig, default_editor_config
from src.conditions.application.factories import initial_model, new_id
from src.conditions.domain.exceptions import InvalidPayloadError
from src.conditions.domain.models import (
    Condition,
    ConditionGroup,
    ExpressionModel,
    FrozenModel,
    LogicOperator,
    SensorDescriptor,
)
from src.conditions.domain.operators import is_operator_allowed
from src.conditions.domain.protocols import SensorCatalog


class PersistedConditions(FrozenModel):
    """
    Condition part of the payload handed to the save callback.

    `condition_groups` is the canonical nested form. `conditions` is the flat
    list kept for consumers that predate groups.
    """

    conditions: tuple[Condition, ...] = ()
    condition_groups: tuple[ConditionGroup, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.condition_groups

    def to_dict(self) -> dict[str, Any]:
        """camelCase dict, without unset join operators."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class _StoredConditions(FrozenModel):
    """Loose view of a stored rule; groups are validated one by one."""

    conditions: tuple[dict[str, Any], ...] = ()
    condition_groups: tuple[dict[str, Any], ...] = ()

    @field_validator("conditions", "condition_groups", mode="before")
    @classmethod
    def _missing_as_empty(cls, value: Any) -> Any:
        return () if value is None else value


def to_persisted_payload(model: ExpressionModel) -> PersistedConditions:
    """
    Flatten the model for saving.

    Incomplete conditions are dropped, then groups left empty are dropped. The
    first surviving group never carries a join operator. An empty result is
    valid and means "no conditions configured".
    """
    groups = []
    for group in model.groups:
        complete = group.complete_conditions()
        if not complete:
            continue
        update: dict[str, Any] = {"conditions": complete}
        if not groups:
            update["between_group_operator"] = None
        groups.append(group.model_copy(update=update))

    flattened = tuple(condition for group in groups for condition in group.conditions)
    dropped = sum(len(g.conditions) for g in model.groups) - len(flattened)
    if dropped:
        logger.debug(f"Dropped {dropped} incomplete condition(s) from payload")

    return PersistedConditions(conditions=flattened, condition_groups=tuple(groups))


def _reconcile_with_catalog(condition: Condition, sensor: SensorDescriptor) -> Condition:
    """Re-apply the sensor's data type, clearing an operator or option value it no longer allows."""
    update: dict[str, Any] = {}
    if sensor.data_type != condition.data_type:
        update["data_type"] = sensor.data_type
    if condition.operator and not is_operator_allowed(sensor.data_type, condition.operator):
        update["operator"] = ""
    value = condition.value.strip()
    if value and sensor.data_type.is_enumerated and sensor.options and sensor.find_option(value) is None:
        update["value"] = ""
    if not update:
        return condition

    logger.debug(f"Condition {condition.id} reconciled with sensor '{sensor.id}': {sorted(update)}")
    return condition.model_copy(update=update)


def _refresh_data_types(group: ConditionGroup, catalog: SensorCatalog) -> ConditionGroup:
    conditions = []
    for condition in group.conditions:
        sensor = catalog.get(condition.sensor_id)
        if sensor is not None:
            condition = _reconcile_with_catalog(condition, sensor)
        conditions.append(condition)
    return group.model_copy(update={"conditions": tuple(conditions)})


def from_persisted_payload(
    payload: Mapping[str, Any] | PersistedConditions,
    catalog: SensorCatalog | None = None,
    settings: ConditionEditorConfig | None = None,
) -> ExpressionModel:
    """
    Rehydrate the model when editing an existing rule.

    Nested `conditionGroups` are used directly. Otherwise a legacy flat
    `conditions` list is wrapped into a single 'and' group. With neither, a
    fresh model is returned.

    Args:
        payload: Stored rule (extra keys are ignored)
        catalog: When given, cached data types are refreshed from it and any
            operator or option value the sensor does not allow is cleared
        settings: Supplies the join operator for a second group stored without one

    Returns:
        Expression model satisfying the group/condition limits

    Raises:
        InvalidPayloadError: If the payload does not describe a valid expression
    """
    settings = settings or default_editor_config()
    if isinstance(payload, PersistedConditions):
        payload = payload.to_dict()

    try:
        stored = _StoredConditions.model_validate(payload)
        groups = [
            ConditionGroup.model_validate({"id": new_id(settings.id_prefix_group), **data})
            for data in stored.condition_groups
            if data.get("conditions")
        ]
        if not groups and stored.conditions:
            groups = [
                ConditionGroup(
                    id=new_id(settings.id_prefix_group),
                    conditions=tuple(Condition.model_validate(c) for c in stored.conditions),
                    group_logic_operator=LogicOperator.AND,
                )
            ]
        if not groups:
            return initial_model(settings.id_prefix_group, settings.id_prefix_condition)

        default_join = LogicOperator(settings.default_between_group_operator)
        joined = [
            group.model_copy(
                update={"between_group_operator": None if index == 0 else (group.between_group_operator or default_join)}
            )
            for index, group in enumerate(groups)
        ]
        if catalog is not None:
            joined = [_refresh_data_types(group, catalog) for group in joined]
        model = ExpressionModel(groups=tuple(joined))
    except ValidationError as e:
        logger.warning(f"Rejected stored rule payload: {e.error_count()} validation error(s)")
        raise InvalidPayloadError.from_validation_error(
            "Stored rule conditions are not a valid expression", e
        ) from e

    logger.debug(f"Rehydrated expression with {len(model.groups)} group(s)")
    return model
