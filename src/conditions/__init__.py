"""Rule condition expression engine."""

from src.conditions.application import (
    ExpressionStore,
    RuleDraft,
    apply_action,
    build_rule_payload,
    describe,
    from_persisted_payload,
    initial_model,
    to_persisted_payload,
    validate_actions,
    validate_parameters,
)
from src.conditions.domain import (
    Condition,
    ConditionGroup,
    DataType,
    ExpressionModel,
    LogicOperator,
    SensorCatalog,
    SensorDescriptor,
    allowed_operators,
)
from src.conditions.infrastructure import InMemorySensorCatalog, load_catalog_from_csv

__all__ = [
    "ExpressionStore",
    "RuleDraft",
    "apply_action",
    "build_rule_payload",
    "describe",
    "from_persisted_payload",
    "initial_model",
    "to_persisted_payload",
    "validate_actions",
    "validate_parameters",
    "Condition",
    "ConditionGroup",
    "DataType",
    "ExpressionModel",
    "LogicOperator",
    "SensorCatalog",
    "SensorDescriptor",
    "allowed_operators",
    "InMemorySensorCatalog",
    "load_catalog_from_csv",
]
