"""Step navigation rules for the rule wizard (Parameters -> Actions -> Notifications)."""

from enum import Enum

from src.conditions.application.validator import ValidationResult


class WizardStep(str, Enum):
    """Wizard steps, in navigation order."""

    PARAMETERS = "parameters"
    ACTIONS = "actions"
    NOTIFICATIONS = "notifications"


STEP_ORDER: tuple[WizardStep, ...] = (
    WizardStep.PARAMETERS,
    WizardStep.ACTIONS,
    WizardStep.NOTIFICATIONS,
)


def next_step(step: WizardStep | str) -> WizardStep | None:
    index = STEP_ORDER.index(WizardStep(step))
    return STEP_ORDER[index + 1] if index + 1 < len(STEP_ORDER) else None


def previous_step(step: WizardStep | str) -> WizardStep | None:
    index = STEP_ORDER.index(WizardStep(step))
    return STEP_ORDER[index - 1] if index > 0 else None


def can_advance(step: WizardStep | str, parameters: ValidationResult, actions: ValidationResult) -> bool:
    """
    Whether the user may move past `step`.

    Leaving Parameters needs a valid parameters result, leaving Actions needs
    a valid actions result. Notifications is the last step.
    """
    step = WizardStep(step)
    if step == WizardStep.PARAMETERS:
        return parameters.is_valid
    if step == WizardStep.ACTIONS:
        return actions.is_valid
    return False


def can_save(parameters: ValidationResult, actions: ValidationResult) -> bool:
    return parameters.is_valid and actions.is_valid
