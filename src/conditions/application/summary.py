"""Human-readable description of a rule's trigger logic."""

from src.conditions.domain.models import Condition, ExpressionModel, FrozenModel, LogicOperator
from src.conditions.domain.operators import operator_symbol
from src.conditions.domain.protocols import SensorCatalog

SUMMARY_PLACEHOLDER = "Configura las condiciones para ver el resumen"

_GROUP_PHRASES = {
    LogicOperator.AND: ("Todas", "deben cumplirse"),
    LogicOperator.OR: ("Cualquiera", "puede cumplirse"),
}


class GroupSummary(FrozenModel):
    """One block of the summary: a header plus one line per condition."""

    number: int
    logic: LogicOperator
    title: str
    lines: tuple[str, ...] = ()


class RuleSummary(FrozenModel):
    """Structured summary, for hosts that style each part themselves."""

    groups: tuple[GroupSummary, ...] = ()
    closing: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.groups


def describe_condition(condition: Condition, catalog: SensorCatalog) -> str | None:
    """
    Render "<label> <symbol> <value>[ <unit>]".

    Enumerated sensors show the matching option label (raw value if none
    matches); other sensors append their unit. Returns None when the sensor is
    not in the catalog.
    """
    sensor = catalog.get(condition.sensor_id)
    if sensor is None:
        return None

    if sensor.data_type.is_enumerated:
        option = sensor.find_option(condition.value)
        display = option.label if option else condition.value
    elif sensor.unit:
        display = f"{condition.value} {sensor.unit}"
    else:
        display = condition.value
    return f"{sensor.label} {operator_symbol(condition.operator)} {display}"


def summarize(model: ExpressionModel, catalog: SensorCatalog) -> RuleSummary:
    """Build the summary blocks; groups without complete conditions are left out."""
    surviving = [group for group in model.groups if group.complete_conditions()]

    blocks = []
    for number, group in enumerate(surviving, start=1):
        word, suffix = _GROUP_PHRASES[group.group_logic_operator]
        lines = []
        for condition in group.complete_conditions():
            line = describe_condition(condition, catalog)
            if line is not None:
                lines.append(line)
        blocks.append(
            GroupSummary(
                number=number,
                logic=group.group_logic_operator,
                title=f"Grupo {number}: {word} {suffix}",
                lines=tuple(lines),
            )
        )

    closing = None
    if len(surviving) > 1:
        conjunction = "o" if surviving[1].between_group_operator == LogicOperator.OR else "y"
        closing = f"La regla se activará cuando se cumplan las condiciones de Grupo 1 {conjunction} Grupo 2."

    return RuleSummary(groups=tuple(blocks), closing=closing)


def describe(model: ExpressionModel, catalog: SensorCatalog) -> str:
    """Plain-text summary, cheap enough to recompute on every edit."""
    summary = summarize(model, catalog)
    if summary.is_empty:
        return SUMMARY_PLACEHOLDER

    blocks = ["\n".join([block.title, *(f"- {line}" for line in block.lines)]) for block in summary.groups]
    if summary.closing:
        blocks.append(summary.closing)
    return "\n\n".join(blocks)
