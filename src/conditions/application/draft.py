"""Rule draft: the expression plus the wizard settings that are validated with it."""

from typing import Any, Mapping

from loguru import logger
from pydantic import Field, ValidationError, field_validator

from src.config import ConditionEditorConfig
from src.conditions.application.serializer import from_persisted_payload, to_persisted_payload
from src.conditions.application.validator import ValidationResult, validate_actions, validate_parameters
from src.conditions.domain.exceptions import InvalidPayloadError
from src.conditions.domain.models import (
    ClosePolicy,
    EventTiming,
    ExpressionModel,
    FrozenModel,
    TargetMode,
    TargetSelection,
    TimeUnit,
    to_text,
)
from src.conditions.domain.protocols import SensorCatalog

DEFAULT_CLOSURE_TIME = 120


class RuleDraft(FrozenModel):
    """Everything the wizard edits that the engine validates or saves."""

    name: str = ""
    description: str = ""
    expression: ExpressionModel
    applies_to: TargetSelection = Field(default_factory=TargetSelection)
    event_timing: EventTiming = EventTiming.ON_CONDITIONS
    duration_value: str = ""
    duration_unit: TimeUnit = TimeUnit.SECONDS
    short_name: str = ""
    close_policy: ClosePolicy = ClosePolicy.MANUAL
    closure_time_value: str = str(DEFAULT_CLOSURE_TIME)
    closure_time_unit: TimeUnit = TimeUnit.MINUTES

    @field_validator("duration_value", "closure_time_value", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> str:
        return to_text(value)

    @classmethod
    def from_rule(
        cls,
        rule: Mapping[str, Any],
        catalog: SensorCatalog | None = None,
        settings: ConditionEditorConfig | None = None,
    ) -> "RuleDraft":
        """
        Rehydrate a draft from a stored rule payload.

        Raises:
            InvalidPayloadError: If the conditions or the wizard settings are not valid
        """
        applies = rule.get("appliesTo") or {}
        units = tuple(applies.get("units") or ())
        tags = tuple(applies.get("tags") or ())
        close = rule.get("closePolicy") or {}
        event = rule.get("eventSettings") or {}
        expression = from_persisted_payload(rule, catalog, settings)

        try:
            return cls(
                name=rule.get("name") or "",
                description=rule.get("description") or "",
                expression=expression,
                applies_to=TargetSelection(
                    mode=TargetMode.CUSTOM if units or tags else TargetMode.ALL_UNITS,
                    units=units,
                    tags=tags,
                ),
                event_timing=event.get("eventTiming") or EventTiming.ON_CONDITIONS,
                duration_value=event.get("durationValue") or "",
                duration_unit=event.get("durationUnit") or TimeUnit.SECONDS,
                short_name=event.get("shortName") or "",
                close_policy=close.get("type") or ClosePolicy.MANUAL,
                closure_time_value=close.get("duration") or DEFAULT_CLOSURE_TIME,
                closure_time_unit=close.get("unit") or TimeUnit.MINUTES,
            )
        except ValidationError as e:
            logger.warning(f"Rejected stored rule settings: {e.error_count()} validation error(s)")
            raise InvalidPayloadError.from_validation_error("Stored rule settings are not valid", e) from e


class DraftValidation(FrozenModel):
    """Validation of both gated steps."""

    parameters: ValidationResult
    actions: ValidationResult

    @property
    def is_valid(self) -> bool:
        return self.parameters.is_valid and self.actions.is_valid


def validate_draft(draft: RuleDraft) -> DraftValidation:
    return DraftValidation(
        parameters=validate_parameters(
            draft.expression, draft.applies_to, draft.event_timing, draft.duration_value
        ),
        actions=validate_actions(draft.short_name, draft.close_policy, draft.closure_time_value),
    )


def _applies_to_payload(selection: TargetSelection) -> dict[str, Any]:
    if selection.mode == TargetMode.ALL_UNITS:
        return {"type": "units", "units": []}
    if selection.tags and not selection.units:
        return {"type": "tags", "tags": list(selection.tags)}
    payload: dict[str, Any] = {"type": "units", "units": list(selection.units)}
    if selection.tags:
        payload["tags"] = list(selection.tags)
    return payload


def _closure_duration(value: str) -> int:
    try:
        duration = int(float(value))
    except (ValueError, OverflowError):
        return DEFAULT_CLOSURE_TIME
    return duration or DEFAULT_CLOSURE_TIME


def build_rule_payload(draft: RuleDraft) -> dict[str, Any]:
    """
    Payload handed to the save callback.

    Conditions are serialized both flat and grouped; incomplete conditions
    never reach it. Validation is the caller's job (see validate_draft).
    """
    close_policy: dict[str, Any] = {"type": draft.close_policy.value}
    if draft.close_policy == ClosePolicy.AUTO_TIME:
        close_policy["duration"] = _closure_duration(draft.closure_time_value)
        close_policy["unit"] = draft.closure_time_unit.value

    return {
        "name": draft.name,
        "description": draft.description,
        **to_persisted_payload(draft.expression).to_dict(),
        "appliesTo": _applies_to_payload(draft.applies_to),
        "closePolicy": close_policy,
        "eventSettings": {
            "shortName": draft.short_name.strip(),
            "eventTiming": draft.event_timing.value,
            "durationValue": draft.duration_value,
            "durationUnit": draft.duration_unit.value,
        },
    }
