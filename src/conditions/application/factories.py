"""Constructors for empty conditions, groups and expression models."""

import uuid

from src.conditions.domain.models import Condition, ConditionGroup, ExpressionModel, LogicOperator


def new_id(prefix: str) -> str:
    """Opaque unique id such as 'condition-3f9c2a1b7d04'."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def new_condition(prefix: str = "condition") -> Condition:
    """Empty condition: no sensor, operator or value yet."""
    return Condition(id=new_id(prefix))


def new_group(
    between_group_operator: LogicOperator | None = None,
    group_prefix: str = "group",
    condition_prefix: str = "condition",
) -> ConditionGroup:
    """Group holding a single empty condition, combined with 'and'."""
    return ConditionGroup(
        id=new_id(group_prefix),
        conditions=(new_condition(condition_prefix),),
        group_logic_operator=LogicOperator.AND,
        between_group_operator=between_group_operator,
    )


def initial_model(group_prefix: str = "group", condition_prefix: str = "condition") -> ExpressionModel:
    """Starting point of a fresh rule: one group with one empty condition."""
    return ExpressionModel(groups=(new_group(None, group_prefix, condition_prefix),))
