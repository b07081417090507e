"""Application layer for the condition engine."""

from src.conditions.application.draft import RuleDraft, build_rule_payload, validate_draft
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
from src.conditions.application.factories import initial_model, new_condition, new_group
from src.conditions.application.serializer import (
    PersistedConditions,
    from_persisted_payload,
    to_persisted_payload,
)
from src.conditions.application.store import ExpressionStore
from src.conditions.application.summary import describe, summarize
from src.conditions.application.validator import (
    ValidationResult,
    inspect_conditions,
    validate_actions,
    validate_parameters,
)
from src.conditions.application.wizard import WizardStep, can_advance, can_save

__all__ = [
    "RuleDraft",
    "build_rule_payload",
    "validate_draft",
    "AddCondition",
    "AddGroup",
    "ClearAll",
    "MoveCondition",
    "MoveGroup",
    "RemoveCondition",
    "RemoveGroup",
    "UpdateCondition",
    "UpdateGroup",
    "add_condition_to_group",
    "add_group",
    "apply_action",
    "clear_all",
    "move_condition_within_group",
    "move_group",
    "remove_condition_from_group",
    "remove_group",
    "update_condition_in_group",
    "update_group",
    "initial_model",
    "new_condition",
    "new_group",
    "PersistedConditions",
    "from_persisted_payload",
    "to_persisted_payload",
    "ExpressionStore",
    "describe",
    "summarize",
    "ValidationResult",
    "inspect_conditions",
    "validate_actions",
    "validate_parameters",
    "WizardStep",
    "can_advance",
    "can_save",
]
