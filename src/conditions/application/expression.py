"""
State transitions for the condition expression model.

Every operation takes an ExpressionModel and returns a new one; nothing is
mutated in place. Operations that would break a structural limit (two groups,
three conditions per group, at least one of each) or that point at an unknown
group or condition return the input model itself, so callers can tell a
rejected action from an applied one by comparing the two values.
"""

from dataclasses import dataclass
from typing import Any, Union

from loguru import logger

from src.config import ConditionEditorConfig, default_editor_config
from src.conditions.application.factories import initial_model, new_condition, new_group
from src.conditions.domain.exceptions import UnsupportedFieldError
from src.conditions.domain.models import (
    Condition,
    ConditionGroup,
    DataType,
    ExpressionModel,
    LogicOperator,
    Operator,
    to_text,
)
from src.conditions.domain.operators import is_operator_allowed
from src.conditions.domain.protocols import SensorCatalog

GROUP_FIELDS = ("group_logic_operator", "between_group_operator")
CONDITION_FIELDS = ("sensor_id", "operator", "value")

# Wire names accepted alongside the attribute names
_FIELD_ALIASES = {
    "groupLogicOperator": "group_logic_operator",
    "betweenGroupOperator": "between_group_operator",
    "sensorId": "sensor_id",
    "sensor": "sensor_id",
}


def _field_name(field: str) -> str:
    return _FIELD_ALIASES.get(field, field)


def _rejected(model: ExpressionModel, reason: str) -> ExpressionModel:
    logger.debug(f"Expression unchanged: {reason}")
    return model


def _with_groups(model: ExpressionModel, groups: list[ConditionGroup]) -> ExpressionModel:
    return model.model_copy(update={"groups": tuple(groups)})


def _with_conditions(group: ConditionGroup, conditions: list[Condition]) -> ConditionGroup:
    return group.model_copy(update={"conditions": tuple(conditions)})


def _rejoin(groups: list[ConditionGroup], join: LogicOperator | None) -> list[ConditionGroup]:
    """First group never carries a join operator; later ones carry `join`."""
    result = []
    for index, group in enumerate(groups):
        wanted = None if index == 0 else (join or group.between_group_operator)
        if group.between_group_operator != wanted:
            group = group.model_copy(update={"between_group_operator": wanted})
        result.append(group)
    return result


def _replace_group(model: ExpressionModel, index: int, group: ConditionGroup) -> ExpressionModel:
    groups = list(model.groups)
    groups[index] = group
    return _with_groups(model, groups)


def _valid_move(count: int, from_index: int, to_index: int) -> bool:
    return from_index != to_index and 0 <= from_index < count and 0 <= to_index < count


def _splice(items: tuple, from_index: int, to_index: int) -> list:
    moved = list(items)
    item = moved.pop(from_index)
    moved.insert(to_index, item)
    return moved


# Group operations


def add_group(model: ExpressionModel, settings: ConditionEditorConfig | None = None) -> ExpressionModel:
    """Append a group with one empty condition, up to two groups."""
    if model.is_full:
        return _rejected(model, "group limit reached")

    settings = settings or default_editor_config()
    group = new_group(
        LogicOperator(settings.default_between_group_operator),
        settings.id_prefix_group,
        settings.id_prefix_condition,
    )
    return _with_groups(model, [*model.groups, group])


def remove_group(model: ExpressionModel, group_id: str) -> ExpressionModel:
    """Remove a group, never the last one."""
    if model.index_of(group_id) is None:
        return _rejected(model, f"unknown group {group_id}")
    if len(model.groups) <= 1:
        return _rejected(model, "cannot remove the only group")

    remaining = [g for g in model.groups if g.id != group_id]
    return _with_groups(model, _rejoin(remaining, None))


def update_group(model: ExpressionModel, group_id: str, field: str, value: Any) -> ExpressionModel:
    """Set a group's intra-group operator or its join operator."""
    name = _field_name(field)
    if name not in GROUP_FIELDS:
        raise UnsupportedFieldError("group", field, GROUP_FIELDS)

    index = model.index_of(group_id)
    if index is None:
        return _rejected(model, f"unknown group {group_id}")

    try:
        operator = LogicOperator(to_text(value))
    except ValueError:
        return _rejected(model, f"'{value}' is not a logic operator")

    if name == "between_group_operator" and index == 0:
        return _rejected(model, "the first group has no predecessor to join")

    group = model.groups[index]
    if getattr(group, name) == operator:
        return model
    return _replace_group(model, index, group.model_copy(update={name: operator}))


def move_group(model: ExpressionModel, from_index: int, to_index: int) -> ExpressionModel:
    """Reposition a group; the join operator stays with the pair."""
    if not _valid_move(len(model.groups), from_index, to_index):
        return _rejected(model, f"cannot move group {from_index} -> {to_index}")

    join = next((g.between_group_operator for g in model.groups[1:]), None)
    return _with_groups(model, _rejoin(_splice(model.groups, from_index, to_index), join))


# Condition operations


def add_condition_to_group(
    model: ExpressionModel, group_id: str, settings: ConditionEditorConfig | None = None
) -> ExpressionModel:
    """Append an empty condition, up to three per group."""
    index = model.index_of(group_id)
    if index is None:
        return _rejected(model, f"unknown group {group_id}")

    group = model.groups[index]
    if group.is_full:
        return _rejected(model, f"group {group_id} already holds {len(group.conditions)} conditions")

    settings = settings or default_editor_config()
    condition = new_condition(settings.id_prefix_condition)
    return _replace_group(model, index, _with_conditions(group, [*group.conditions, condition]))


def remove_condition_from_group(model: ExpressionModel, group_id: str, condition_id: str) -> ExpressionModel:
    """Remove a condition, never the last one of its group."""
    index = model.index_of(group_id)
    if index is None:
        return _rejected(model, f"unknown group {group_id}")

    group = model.groups[index]
    if group.index_of(condition_id) is None:
        return _rejected(model, f"unknown condition {condition_id}")
    if len(group.conditions) <= 1:
        return _rejected(model, f"cannot remove the only condition of group {group_id}")

    remaining = [c for c in group.conditions if c.id != condition_id]
    return _replace_group(model, index, _with_conditions(group, remaining))


def _apply_condition_field(
    condition: Condition,
    name: str,
    text: str,
    catalog: SensorCatalog | None,
    settings: ConditionEditorConfig,
) -> Condition | None:
    """Updated condition, or None when the new value is not acceptable."""
    if name == "sensor_id":
        if catalog is None:
            raise ValueError("A sensor catalog is required to select a sensor")
        # A new sensor invalidates whatever operator and value were chosen
        sensor = catalog.get(text) if text else None
        return condition.model_copy(
            update={
                "sensor_id": text,
                "operator": "",
                "value": "",
                "data_type": sensor.data_type if sensor else DataType.NUMERIC,
            }
        )

    if name == "operator":
        if text and text not in Operator._value2member_map_:
            return None
        if text and not is_operator_allowed(condition.data_type, text):
            return None
        update = {"operator": text}
        if settings.reset_value_on_operator_change and text != condition.operator:
            update["value"] = ""
        return condition.model_copy(update=update)

    if text and condition.data_type.is_enumerated and catalog is not None:
        sensor = catalog.get(condition.sensor_id)
        if sensor is not None and sensor.options and sensor.find_option(text) is None:
            return None
    return condition.model_copy(update={"value": text})


def update_condition_in_group(
    model: ExpressionModel,
    group_id: str,
    condition_id: str,
    field: str,
    value: Any,
    catalog: SensorCatalog | None = None,
    settings: ConditionEditorConfig | None = None,
) -> ExpressionModel:
    """
    Set sensor, operator or value on one condition.

    Selecting a sensor always clears the operator and value and refreshes the
    cached data type from the catalog. An operator outside the sensor's allowed
    set, or a value that is not one of an enumerated sensor's options, leaves
    the model unchanged. Empty strings are always accepted.

    Args:
        model: Current expression
        group_id: Group holding the condition
        condition_id: Condition to edit
        field: "sensor_id", "operator" or "value" (wire names also accepted)
        value: New value; numbers are stored in their string form
        catalog: Sensor catalog used to resolve data types and options;
            required when `field` selects the sensor
        settings: Editor policies (operator-change behavior)

    Returns:
        The updated model, or `model` itself when nothing changed

    Raises:
        UnsupportedFieldError: If `field` is not an editable condition field
        ValueError: If a sensor is selected without a catalog
    """
    name = _field_name(field)
    if name not in CONDITION_FIELDS:
        raise UnsupportedFieldError("condition", field, CONDITION_FIELDS)

    index = model.index_of(group_id)
    if index is None:
        return _rejected(model, f"unknown group {group_id}")
    group = model.groups[index]
    position = group.index_of(condition_id)
    if position is None:
        return _rejected(model, f"unknown condition {condition_id}")

    condition = group.conditions[position]
    updated = _apply_condition_field(
        condition, name, to_text(value), catalog, settings or default_editor_config()
    )
    if updated is None:
        return _rejected(model, f"{name}='{value}' not valid for sensor '{condition.sensor_id}'")
    if updated == condition:
        return model

    conditions = list(group.conditions)
    conditions[position] = updated
    return _replace_group(model, index, _with_conditions(group, conditions))


def move_condition_within_group(
    model: ExpressionModel, group_id: str, from_index: int, to_index: int
) -> ExpressionModel:
    """Reposition a condition inside its group."""
    index = model.index_of(group_id)
    if index is None:
        return _rejected(model, f"unknown group {group_id}")

    group = model.groups[index]
    if not _valid_move(len(group.conditions), from_index, to_index):
        return _rejected(model, f"cannot move condition {from_index} -> {to_index}")

    return _replace_group(model, index, _with_conditions(group, _splice(group.conditions, from_index, to_index)))


def clear_all(settings: ConditionEditorConfig | None = None) -> ExpressionModel:
    """Fresh single-group model, discarding every condition."""
    settings = settings or default_editor_config()
    return initial_model(settings.id_prefix_group, settings.id_prefix_condition)


# Actions


@dataclass(frozen=True)
class AddGroup:
    pass


@dataclass(frozen=True)
class RemoveGroup:
    group_id: str


@dataclass(frozen=True)
class UpdateGroup:
    group_id: str
    field: str
    value: Any


@dataclass(frozen=True)
class MoveGroup:
    from_index: int
    to_index: int


@dataclass(frozen=True)
class AddCondition:
    group_id: str


@dataclass(frozen=True)
class RemoveCondition:
    group_id: str
    condition_id: str


@dataclass(frozen=True)
class UpdateCondition:
    group_id: str
    condition_id: str
    field: str
    value: Any


@dataclass(frozen=True)
class MoveCondition:
    group_id: str
    from_index: int
    to_index: int


@dataclass(frozen=True)
class ClearAll:
    pass


Action = Union[
    AddGroup,
    RemoveGroup,
    UpdateGroup,
    MoveGroup,
    AddCondition,
    RemoveCondition,
    UpdateCondition,
    MoveCondition,
    ClearAll,
]


def apply_action(
    model: ExpressionModel,
    action: Action,
    catalog: SensorCatalog | None = None,
    settings: ConditionEditorConfig | None = None,
) -> ExpressionModel:
    """Reduce one action over the model: (model, action) -> model."""
    if isinstance(action, AddGroup):
        return add_group(model, settings)
    if isinstance(action, RemoveGroup):
        return remove_group(model, action.group_id)
    if isinstance(action, UpdateGroup):
        return update_group(model, action.group_id, action.field, action.value)
    if isinstance(action, MoveGroup):
        return move_group(model, action.from_index, action.to_index)
    if isinstance(action, AddCondition):
        return add_condition_to_group(model, action.group_id, settings)
    if isinstance(action, RemoveCondition):
        return remove_condition_from_group(model, action.group_id, action.condition_id)
    if isinstance(action, UpdateCondition):
        return update_condition_in_group(
            model, action.group_id, action.condition_id, action.field, action.value, catalog, settings
        )
    if isinstance(action, MoveCondition):
        return move_condition_within_group(model, action.group_id, action.from_index, action.to_index)
    if isinstance(action, ClearAll):
        return clear_all(settings)
    raise TypeError(f"Unsupported action: {type(action).__name__}")
