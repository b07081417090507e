"""Tests for the natural-language rule summary."""

from src.conditions.application.summary import (
    SUMMARY_PLACEHOLDER,
    describe,
    describe_condition,
    summarize,
)
from src.conditions.domain.models import DataType, LogicOperator
from tests.helpers import build_condition, build_group, build_model


class TestDescribe:
    """Tests for the plain-text summary."""

    def test_single_numeric_condition(self, catalog):
        model = build_model(build_group("g1", build_condition("c1", "speed", "gt", "100")))
        assert describe(model, catalog) == "Grupo 1: Todas deben cumplirse\n- Velocidad > 100 km/h"

    def test_two_groups_joined_by_or(self, catalog):
        model = build_model(
            build_group("g1", build_condition("c1", "speed", "gt", "100")),
            build_group(
                "g2",
                build_condition("c2", "battery", "lt", "20"),
                build_condition("c3", "ignition", "eq", "true", DataType.BOOLEAN),
                logic=LogicOperator.OR,
                join=LogicOperator.OR,
            ),
        )
        assert describe(model, catalog) == (
            "Grupo 1: Todas deben cumplirse\n"
            "- Velocidad > 100 km/h\n\n"
            "Grupo 2: Cualquiera puede cumplirse\n"
            "- Batería < 20 %\n"
            "- Ignición = Encendido\n\n"
            "La regla se activará cuando se cumplan las condiciones de Grupo 1 o Grupo 2."
        )

    def test_and_join_uses_y(self, catalog):
        model = build_model(
            build_group("g1", build_condition("c1", "speed", "gt", "100")),
            build_group("g2", build_condition("c2", "battery", "lte", "5"), join=LogicOperator.AND),
        )
        assert describe(model, catalog).endswith("de Grupo 1 y Grupo 2.")

    def test_empty_model_shows_placeholder(self, catalog):
        model = build_model(build_group("g1", build_condition("c1", "speed", "gt", "")))
        assert describe(model, catalog) == SUMMARY_PLACEHOLDER

    def test_incomplete_group_is_omitted_and_renumbered(self, catalog):
        model = build_model(
            build_group("g1", build_condition("c1", "speed", "", "")),
            build_group("g2", build_condition("c2", "battery", "lt", "20"), join=LogicOperator.OR),
        )
        text = describe(model, catalog)
        assert text == "Grupo 1: Todas deben cumplirse\n- Batería < 20 %"
        assert "La regla" not in text

    def test_incomplete_conditions_are_skipped(self, catalog):
        model = build_model(
            build_group(
                "g1",
                build_condition("c1", "speed", "gt", "100"),
                build_condition("c2", "battery", "lt", ""),
            )
        )
        assert "Batería" not in describe(model, catalog)


class TestDescribeCondition:
    """Tests for single-condition rendering."""

    def test_option_label_for_enumerated_sensor(self, catalog):
        condition = build_condition("c1", "connection_status", "neq", "more_24h", DataType.STRING)
        assert describe_condition(condition, catalog) == "Estado de conexión ≠ Mayor a 24 hrs"

    def test_raw_value_when_no_option_matches(self, catalog):
        condition = build_condition("c1", "custom_driver_id", "eq", "ID999", DataType.STRING)
        assert describe_condition(condition, catalog) == "ID Chofer Personalizado = ID999"

    def test_no_unit_suffix_when_sensor_has_none(self, catalog):
        condition = build_condition("c1", "satellites_count", "gte", "4")
        assert describe_condition(condition, catalog) == "Número de Satélites ≥ 4"

    def test_unknown_sensor_is_skipped(self, catalog):
        assert describe_condition(build_condition("c1", "odometer", "gt", "1"), catalog) is None


class TestSummarize:
    def test_structured_blocks(self, catalog):
        model = build_model(
            build_group("g1", build_condition("c1", "speed", "gt", "100"), logic=LogicOperator.OR),
        )
        summary = summarize(model, catalog)

        assert not summary.is_empty
        assert summary.closing is None
        block = summary.groups[0]
        assert block.number == 1
        assert block.logic == LogicOperator.OR
        assert block.title == "Grupo 1: Cualquiera puede cumplirse"
        assert block.lines == ("Velocidad > 100 km/h",)
