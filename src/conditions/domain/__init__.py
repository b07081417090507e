"""Domain layer for the rule condition engine."""

from src.conditions.domain.exceptions import (
    ConditionEngineException,
    DuplicateSensorError,
    InvalidPayloadError,
    SensorCatalogError,
    UnsupportedFieldError,
)
from src.conditions.domain.models import (
    MAX_CONDITIONS_PER_GROUP,
    MAX_GROUPS,
    ClosePolicy,
    Condition,
    ConditionGroup,
    DataType,
    EventTiming,
    ExpressionModel,
    LogicOperator,
    Operator,
    SensorCategory,
    SensorDescriptor,
    SensorOption,
    TargetMode,
    TargetSelection,
    TimeUnit,
)
from src.conditions.domain.operators import allowed_operators, is_operator_allowed
from src.conditions.domain.protocols import SensorCatalog

__all__ = [
    "MAX_CONDITIONS_PER_GROUP",
    "MAX_GROUPS",
    "ClosePolicy",
    "Condition",
    "ConditionGroup",
    "DataType",
    "EventTiming",
    "ExpressionModel",
    "LogicOperator",
    "Operator",
    "SensorCategory",
    "SensorDescriptor",
    "SensorOption",
    "TargetMode",
    "TargetSelection",
    "TimeUnit",
    "allowed_operators",
    "is_operator_allowed",
    "SensorCatalog",
    "ConditionEngineException",
    "DuplicateSensorError",
    "InvalidPayloadError",
    "SensorCatalogError",
    "UnsupportedFieldError",
]
