"""Expression store: the single owner of the model a wizard session edits."""

from typing import Any, Callable

from loguru import logger

from src.config import ConditionEditorConfig, default_editor_config
from src.conditions.application.expression import Action, apply_action, clear_all
from src.conditions.application.serializer import PersistedConditions, to_persisted_payload
from src.conditions.application.summary import describe
from src.conditions.application.validator import ValidationResult, validate_parameters
from src.conditions.domain.models import EventTiming, ExpressionModel, TargetSelection
from src.conditions.domain.protocols import SensorCatalog
from src.conditions.infrastructure.logging import RuleLogContext

Listener = Callable[[ExpressionModel, Action], None]


class ExpressionStore:
    """
    Holds the current expression and notifies subscribers on change.

    Each dispatch swaps the whole model for the reducer's output, so readers
    only ever see complete models. Rejected actions notify nobody.
    """

    def __init__(
        self,
        catalog: SensorCatalog,
        model: ExpressionModel | None = None,
        settings: ConditionEditorConfig | None = None,
        rule_id: str | None = None,
    ):
        """
        Initialize store.

        Args:
            catalog: Sensor catalog supplied by the host
            model: Starting model (defaults to one group with one empty condition)
            settings: Editor policies
            rule_id: Identifier bound to log records of this session
        """
        self.catalog = catalog
        self.settings = settings or default_editor_config()
        self.rule_id = rule_id or "new"
        self._model = model or clear_all(self.settings)
        self._baseline = self._model
        self._listeners: list[Listener] = []

    @property
    def model(self) -> ExpressionModel:
        return self._model

    @property
    def is_dirty(self) -> bool:
        """Whether the model differs from the one the session started with."""
        return self._model != self._baseline

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: Action) -> bool:
        """
        Apply an action.

        Returns:
            True if the model changed, False if the action was rejected
        """
        with RuleLogContext(self.rule_id):
            updated = apply_action(self._model, action, self.catalog, self.settings)
            if updated == self._model:
                logger.debug(f"Ignored {type(action).__name__}")
                return False

            self._model = updated
            logger.info(f"Applied {type(action).__name__}")
            for listener in list(self._listeners):
                listener(updated, action)
            return True

    def reset(self, model: ExpressionModel | None = None) -> None:
        """Replace the model and take it as the new baseline, without notifying."""
        self._model = model or clear_all(self.settings)
        self._baseline = self._model

    def mark_saved(self) -> None:
        self._baseline = self._model

    def describe(self) -> str:
        return describe(self._model, self.catalog)

    def to_payload(self) -> PersistedConditions:
        return to_persisted_payload(self._model)

    def validate(
        self,
        applies_to: TargetSelection,
        event_timing: EventTiming | str = EventTiming.ON_CONDITIONS,
        duration_value: Any = None,
    ) -> ValidationResult:
        return validate_parameters(self._model, applies_to, event_timing, duration_value)
