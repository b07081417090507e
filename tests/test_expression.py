"""Tests for expression state transitions."""

import pytest

from src.config import ConditionEditorConfig
from src.conditions.application.expression import (
    AddCondition,
    AddGroup,
    ClearAll,
    MoveCondition,
    MoveGroup,
    RemoveCondition,
    RemoveGroup,
    UpdateCondition,
    UpdateGroup,
    add_condition_to_group,
    add_group,
    apply_action,
    clear_all,
    move_condition_within_group,
    move_group,
    remove_condition_from_group,
    remove_group,
    update_condition_in_group,
    update_group,
)
from src.conditions.application.factories import initial_model
from src.conditions.domain.exceptions import UnsupportedFieldError
from src.conditions.domain.models import DataType, LogicOperator
from tests.helpers import build_condition, build_group, build_model


@pytest.fixture
def two_groups():
    return build_model(
        build_group(
            "g1",
            build_condition("c1", "speed", "gt", "100"),
            build_condition("c2", "battery", "lt", "20"),
        ),
        build_group(
            "g2",
            build_condition("c3", "ignition", "eq", "true", DataType.BOOLEAN),
            logic=LogicOperator.OR,
            join=LogicOperator.OR,
        ),
    )


class TestInitialModel:
    """Tests for the starting model."""

    def test_one_group_one_empty_condition(self):
        model = initial_model()
        assert len(model.groups) == 1
        group = model.groups[0]
        assert group.group_logic_operator == LogicOperator.AND
        assert group.between_group_operator is None
        assert len(group.conditions) == 1
        condition = group.conditions[0]
        assert (condition.sensor_id, condition.operator, condition.value) == ("", "", "")

    def test_ids_are_unique(self):
        first, second = initial_model(), initial_model()
        assert first.groups[0].id != second.groups[0].id
        assert first.groups[0].conditions[0].id != second.groups[0].conditions[0].id

    def test_clear_all_uses_configured_prefixes(self):
        settings = ConditionEditorConfig(id_prefix_group="grp", id_prefix_condition="cond")
        model = clear_all(settings)
        assert model.groups[0].id.startswith("grp-")
        assert model.groups[0].conditions[0].id.startswith("cond-")


class TestGroupOperations:
    """Tests for adding, removing, updating and moving groups."""

    def test_add_group_appends_with_default_join(self, settings):
        model = add_group(initial_model(), settings)
        assert len(model.groups) == 2
        assert model.groups[0].between_group_operator is None
        assert model.groups[1].between_group_operator == LogicOperator.AND
        assert len(model.groups[1].conditions) == 1

    def test_add_group_honors_configured_join(self):
        settings = ConditionEditorConfig(default_between_group_operator="or")
        model = add_group(initial_model(), settings)
        assert model.groups[1].between_group_operator == LogicOperator.OR

    def test_add_group_capped_at_two(self, two_groups, settings):
        assert add_group(two_groups, settings) is two_groups

    def test_remove_group_clears_join_of_new_first(self, two_groups):
        model = remove_group(two_groups, "g1")
        assert [g.id for g in model.groups] == ["g2"]
        assert model.groups[0].between_group_operator is None

    def test_remove_only_group_is_noop(self):
        model = initial_model()
        assert remove_group(model, model.groups[0].id) is model

    def test_remove_unknown_group_is_noop(self, two_groups):
        assert remove_group(two_groups, "missing") is two_groups

    def test_update_group_logic(self, two_groups):
        model = update_group(two_groups, "g1", "group_logic_operator", "or")
        assert model.groups[0].group_logic_operator == LogicOperator.OR
        assert two_groups.groups[0].group_logic_operator == LogicOperator.AND

    def test_update_group_accepts_wire_field_name(self, two_groups):
        model = update_group(two_groups, "g2", "betweenGroupOperator", "and")
        assert model.groups[1].between_group_operator == LogicOperator.AND

    def test_update_group_same_value_is_noop(self, two_groups):
        assert update_group(two_groups, "g2", "group_logic_operator", "or") is two_groups

    def test_update_group_rejects_invalid_token(self, two_groups):
        assert update_group(two_groups, "g1", "group_logic_operator", "xor") is two_groups

    def test_first_group_cannot_get_join(self, two_groups):
        assert update_group(two_groups, "g1", "between_group_operator", "or") is two_groups

    def test_update_group_unknown_field_raises(self, two_groups):
        with pytest.raises(UnsupportedFieldError) as exc_info:
            update_group(two_groups, "g1", "name", "x")
        assert exc_info.value.details["field"] == "name"

    def test_move_group_swaps_order(self, two_groups):
        """Moving groups reorders them without touching their conditions."""
        model = move_group(two_groups, 0, 1)
        assert [g.id for g in model.groups] == ["g2", "g1"]
        assert model.groups[0].conditions == two_groups.groups[1].conditions
        assert model.groups[1].conditions == two_groups.groups[0].conditions

    def test_move_group_keeps_join_on_second(self, two_groups):
        model = move_group(two_groups, 1, 0)
        assert model.groups[0].between_group_operator is None
        assert model.groups[1].between_group_operator == LogicOperator.OR

    @pytest.mark.parametrize("from_index,to_index", [(0, 0), (0, 2), (-1, 0), (3, 1)])
    def test_invalid_group_move_is_noop(self, two_groups, from_index, to_index):
        assert move_group(two_groups, from_index, to_index) is two_groups


class TestConditionOperations:
    """Tests for adding, removing and moving conditions."""

    def test_add_condition(self, two_groups, settings):
        model = add_condition_to_group(two_groups, "g2", settings)
        assert len(model.groups[1].conditions) == 2
        added = model.groups[1].conditions[-1]
        assert added.id.startswith("condition-")
        assert not added.is_complete

    def test_add_condition_capped_at_three(self, two_groups, settings):
        model = add_condition_to_group(two_groups, "g1", settings)
        assert len(model.groups[0].conditions) == 3
        assert add_condition_to_group(model, "g1", settings) is model

    def test_add_condition_unknown_group_is_noop(self, two_groups, settings):
        assert add_condition_to_group(two_groups, "missing", settings) is two_groups

    def test_remove_condition(self, two_groups):
        model = remove_condition_from_group(two_groups, "g1", "c1")
        assert [c.id for c in model.groups[0].conditions] == ["c2"]

    def test_remove_last_condition_is_noop(self, two_groups):
        assert remove_condition_from_group(two_groups, "g2", "c3") is two_groups

    def test_remove_condition_from_wrong_group_is_noop(self, two_groups):
        assert remove_condition_from_group(two_groups, "g2", "c1") is two_groups

    def test_move_condition(self, two_groups):
        model = move_condition_within_group(two_groups, "g1", 1, 0)
        assert [c.id for c in model.groups[0].conditions] == ["c2", "c1"]

    def test_move_condition_out_of_range_is_noop(self, two_groups):
        assert move_condition_within_group(two_groups, "g1", 0, 5) is two_groups


class TestUpdateCondition:
    """Tests for editing sensor, operator and value."""

    def test_sensor_change_clears_operator_and_value(self, two_groups, catalog, settings):
        model = update_condition_in_group(two_groups, "g1", "c1", "sensor_id", "ignition", catalog, settings)
        condition = model.groups[0].conditions[0]
        assert condition.sensor_id == "ignition"
        assert condition.operator == ""
        assert condition.value == ""
        assert condition.data_type == DataType.BOOLEAN

    def test_unknown_sensor_defaults_to_numeric(self, two_groups, catalog, settings):
        model = update_condition_in_group(two_groups, "g2", "c3", "sensorId", "odometer", catalog, settings)
        assert model.groups[1].conditions[0].data_type == DataType.NUMERIC

    def test_reselecting_same_sensor_still_clears(self, two_groups, catalog, settings):
        model = update_condition_in_group(two_groups, "g1", "c1", "sensor", "speed", catalog, settings)
        condition = model.groups[0].conditions[0]
        assert (condition.operator, condition.value) == ("", "")

    def test_operator_outside_allowed_set_is_noop(self, two_groups, catalog, settings):
        assert update_condition_in_group(two_groups, "g2", "c3", "operator", "gt", catalog, settings) is two_groups

    def test_unknown_operator_token_is_noop(self, two_groups, catalog, settings):
        assert update_condition_in_group(two_groups, "g1", "c1", "operator", "between", catalog, settings) is two_groups

    def test_operator_change_keeps_value_by_default(self, two_groups, catalog, settings):
        model = update_condition_in_group(two_groups, "g1", "c1", "operator", "gte", catalog, settings)
        condition = model.groups[0].conditions[0]
        assert (condition.operator, condition.value) == ("gte", "100")

    def test_operator_change_can_reset_value(self, two_groups, catalog):
        settings = ConditionEditorConfig(reset_value_on_operator_change=True)
        model = update_condition_in_group(two_groups, "g1", "c1", "operator", "gte", catalog, settings)
        assert model.groups[0].conditions[0].value == ""

    def test_operator_can_be_cleared(self, two_groups, catalog, settings):
        model = update_condition_in_group(two_groups, "g1", "c1", "operator", "", catalog, settings)
        assert model.groups[0].conditions[0].operator == ""

    def test_numeric_value_stored_as_text(self, two_groups, catalog, settings):
        model = update_condition_in_group(two_groups, "g1", "c1", "value", 80, catalog, settings)
        assert model.groups[0].conditions[0].value == "80"

    def test_boolean_value_must_be_an_option(self, two_groups, catalog, settings):
        assert update_condition_in_group(two_groups, "g2", "c3", "value", "maybe", catalog, settings) is two_groups
        model = update_condition_in_group(two_groups, "g2", "c3", "value", False, catalog, settings)
        assert model.groups[1].conditions[0].value == "false"

    def test_same_value_is_noop(self, two_groups, catalog, settings):
        assert update_condition_in_group(two_groups, "g1", "c1", "value", "100", catalog, settings) is two_groups

    def test_unknown_field_raises(self, two_groups, catalog, settings):
        with pytest.raises(UnsupportedFieldError):
            update_condition_in_group(two_groups, "g1", "c1", "unit", "km/h", catalog, settings)

    def test_unknown_condition_is_noop(self, two_groups, catalog, settings):
        assert update_condition_in_group(two_groups, "g1", "c9", "value", "1", catalog, settings) is two_groups

    def test_input_model_is_not_mutated(self, two_groups, catalog, settings):
        update_condition_in_group(two_groups, "g1", "c1", "value", "55", catalog, settings)
        assert two_groups.groups[0].conditions[0].value == "100"


class TestApplyAction:
    """Tests for the action reducer."""

    def test_builds_scenario_by_actions(self, catalog, settings):
        model = initial_model()
        group_id = model.groups[0].id
        condition_id = model.groups[0].conditions[0].id
        for action in (
            UpdateCondition(group_id, condition_id, "sensor_id", "speed"),
            UpdateCondition(group_id, condition_id, "operator", "gt"),
            UpdateCondition(group_id, condition_id, "value", "100"),
        ):
            model = apply_action(model, action, catalog, settings)

        condition = model.groups[0].conditions[0]
        assert (condition.sensor_id, condition.operator, condition.value) == ("speed", "gt", "100")
        assert condition.is_complete

    def test_dispatches_every_action(self, two_groups, catalog, settings):
        assert len(apply_action(two_groups, RemoveGroup("g2")).groups) == 1
        assert len(apply_action(build_model(build_group("g1")), AddGroup(), settings=settings).groups) == 2
        assert apply_action(two_groups, UpdateGroup("g1", "group_logic_operator", "or")).groups[0].group_logic_operator == "or"
        assert apply_action(two_groups, MoveGroup(0, 1)).groups[0].id == "g2"
        assert len(apply_action(two_groups, AddCondition("g2"), settings=settings).groups[1].conditions) == 2
        assert len(apply_action(two_groups, RemoveCondition("g1", "c2")).groups[0].conditions) == 1
        assert apply_action(two_groups, MoveCondition("g1", 0, 1)).groups[0].conditions[0].id == "c2"
        cleared = apply_action(two_groups, ClearAll(), settings=settings)
        assert len(cleared.groups) == 1
        assert not cleared.has_complete_condition()

    def test_rejected_action_returns_same_model(self, two_groups):
        assert apply_action(two_groups, AddGroup()) is two_groups

    def test_unknown_action_raises(self, two_groups):
        with pytest.raises(TypeError):
            apply_action(two_groups, object())


class TestSensorSelectionNeedsCatalog:
    def test_selecting_sensor_without_catalog_raises(self, two_groups, settings):
        """Without a catalog the sensor's data type cannot be resolved."""
        with pytest.raises(ValueError):
            update_condition_in_group(two_groups, "g1", "c1", "sensor_id", "ignition", None, settings)

    def test_reducer_without_catalog_raises(self, two_groups):
        with pytest.raises(ValueError):
            apply_action(two_groups, UpdateCondition("g2", "c3", "sensorId", "speed"))

    def test_other_fields_work_without_catalog(self, two_groups, settings):
        model = update_condition_in_group(two_groups, "g1", "c1", "value", "90", None, settings)
        assert model.groups[0].conditions[0].value == "90"
