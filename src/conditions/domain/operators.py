"""Operator policy: which relational operators each sensor data type allows."""

from src.conditions.domain.models import DataType, Operator

EQUALITY_OPERATORS: tuple[Operator, ...] = (Operator.EQ, Operator.NEQ)

RELATIONAL_OPERATORS: tuple[Operator, ...] = (
    Operator.EQ,
    Operator.NEQ,
    Operator.GT,
    Operator.LT,
    Operator.GTE,
    Operator.LTE,
)

OPERATOR_SYMBOLS: dict[Operator, str] = {
    Operator.EQ: "=",
    Operator.NEQ: "≠",
    Operator.GT: ">",
    Operator.LT: "<",
    Operator.GTE: "≥",
    Operator.LTE: "≤",
}

OPERATOR_LABELS: dict[Operator, str] = {
    Operator.EQ: "es igual a",
    Operator.NEQ: "es distinto de",
    Operator.GT: "es mayor que",
    Operator.LT: "es menor que",
    Operator.GTE: "es igual o mayor que",
    Operator.LTE: "es igual o menor que",
}


def allowed_operators(data_type: DataType | str | None) -> tuple[Operator, ...]:
    """
    Operators legal for a sensor data type, in display order.

    Enumerated sensors (boolean, string) only support the equality family.
    Numeric and datetime sensors support every relational operator. With no
    sensor selected yet (None) the full set is returned.
    """
    if data_type is None:
        return RELATIONAL_OPERATORS
    if DataType(data_type).is_enumerated:
        return EQUALITY_OPERATORS
    return RELATIONAL_OPERATORS


def is_operator_allowed(data_type: DataType | str | None, operator: str) -> bool:
    """Check an operator token against the allowed set."""
    return any(op.value == operator for op in allowed_operators(data_type))


def operator_options(data_type: DataType | str | None) -> list[tuple[str, str]]:
    """(token, label) pairs for an operator picker."""
    return [(op.value, OPERATOR_LABELS[op]) for op in allowed_operators(data_type)]


def operator_symbol(operator: str) -> str:
    """Symbol used in summaries; unknown tokens render as '='."""
    try:
        return OPERATOR_SYMBOLS[Operator(operator)]
    except ValueError:
        return OPERATOR_SYMBOLS[Operator.EQ]
