"""Builders shared by the condition engine tests."""

from src.conditions.domain.models import (
    Condition,
    ConditionGroup,
    DataType,
    ExpressionModel,
    LogicOperator,
)

TELEMETRY_SENSORS = [
    {"id": "speed", "label": "Velocidad", "unit": "km/h", "dataType": "numeric"},
    {"id": "battery", "label": "Batería", "unit": "%", "dataType": "numeric"},
    {"id": "satellites_count", "label": "Número de Satélites", "unit": "", "dataType": "numeric"},
    {
        "id": "ignition",
        "label": "Ignición",
        "dataType": "boolean",
        "options": [{"value": "true", "label": "Encendido"}, {"value": "false", "label": "Apagado"}],
    },
    {
        "id": "connection_status",
        "label": "Estado de conexión",
        "dataType": "string",
        "options": [
            {"value": "no_connection", "label": "Sin conexión"},
            {"value": "more_24h", "label": "Mayor a 24 hrs"},
        ],
    },
    {"id": "server_date", "label": "Fecha del servidor", "dataType": "datetime"},
    {
        "id": "custom_driver_id",
        "label": "ID Chofer Personalizado",
        "dataType": "string",
        "category": "custom",
        "options": [{"value": "ID001", "label": "Juan Pérez (ID001)"}],
    },
]


def build_condition(
    condition_id: str,
    sensor_id: str = "",
    operator: str = "",
    value: str = "",
    data_type: DataType = DataType.NUMERIC,
) -> Condition:
    return Condition(id=condition_id, sensor_id=sensor_id, operator=operator, value=value, data_type=data_type)


def build_group(
    group_id: str,
    *conditions: Condition,
    logic: LogicOperator = LogicOperator.AND,
    join: LogicOperator | None = None,
) -> ConditionGroup:
    return ConditionGroup(
        id=group_id,
        conditions=conditions or (build_condition(f"{group_id}-c1"),),
        group_logic_operator=logic,
        between_group_operator=join,
    )


def build_model(*groups: ConditionGroup) -> ExpressionModel:
    return ExpressionModel(groups=groups)
