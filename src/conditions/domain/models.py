"""Domain models for the rule condition engine."""

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MAX_GROUPS = 2
MAX_CONDITIONS_PER_GROUP = 3


class DataType(str, Enum):
    """Data type of a sensor, governing operators and value shapes."""

    NUMERIC = "numeric"
    BOOLEAN = "boolean"
    STRING = "string"  # Enumerated text values (driver ids, connection states...)
    DATETIME = "datetime"

    @property
    def is_enumerated(self) -> bool:
        """Whether values must be picked from the sensor's options."""
        return self in (DataType.BOOLEAN, DataType.STRING)


class LogicOperator(str, Enum):
    """Boolean combinator used inside a group and between groups."""

    AND = "and"
    OR = "or"


class Operator(str, Enum):
    """Relational operator tokens."""

    EQ = "eq"
    NEQ = "neq"
    GT = "gt"
    LT = "lt"
    GTE = "gte"
    LTE = "lte"


class SensorCategory(str, Enum):
    """Origin of a sensor in the catalog."""

    SYSTEM = "system"
    CUSTOM = "custom"  # Defined by the account, loaded from the host


class TargetMode(str, Enum):
    """Which units a rule applies to."""

    ALL_UNITS = "all-units"
    CUSTOM = "custom"  # Explicit units and/or unit tags


class EventTiming(str, Enum):
    """When an event is generated once conditions hold."""

    ON_CONDITIONS = "cumplan-condiciones"
    AFTER_DURATION = "despues-tiempo"


class ClosePolicy(str, Enum):
    """How a generated event gets closed."""

    MANUAL = "manual"
    AUTO_CONDITION = "auto-condition"
    AUTO_TIME = "auto-time"
    IMMEDIATE = "immediate"


class TimeUnit(str, Enum):
    """Units offered for durations in the wizard."""

    SECONDS = "segundos"
    MINUTES = "minutos"
    HOURS = "horas"


class FrozenModel(BaseModel):
    """Immutable value object serialized with camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


def to_text(value: Any) -> str:
    """String form used for ids and values; None becomes empty."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


class SensorOption(FrozenModel):
    """One selectable value of an enumerated sensor."""

    value: str
    label: str

    @field_validator("value", mode="before")
    @classmethod
    def _stringify_value(cls, value: Any) -> str:
        return to_text(value)


class SensorDescriptor(FrozenModel):
    """Catalog entry describing a telemetry sensor."""

    id: str = Field(validation_alias=AliasChoices("id", "value"), serialization_alias="id")
    label: str
    unit: str = ""
    data_type: DataType = DataType.NUMERIC
    options: tuple[SensorOption, ...] = ()
    category: SensorCategory = SensorCategory.SYSTEM

    @field_validator("unit", mode="before")
    @classmethod
    def _blank_unit(cls, value: Any) -> str:
        return to_text(value)

    @field_validator("data_type", mode="before")
    @classmethod
    def _legacy_data_type(cls, value: Any) -> Any:
        return _normalize_data_type(value)

    def find_option(self, value: str) -> SensorOption | None:
        """Return the option whose value matches, if any."""
        for option in self.options:
            if option.value == value:
                return option
        return None


def _normalize_data_type(value: Any) -> Any:
    # Older payloads call enumerated text sensors "text"
    if value is None:
        return DataType.NUMERIC
    if value == "text":
        return DataType.STRING
    return value


class Condition(FrozenModel):
    """A single sensor/operator/value triple."""

    id: str
    sensor_id: str = Field(
        default="",
        validation_alias=AliasChoices("sensorId", "sensor", "sensor_id"),
        serialization_alias="sensorId",
    )
    operator: str = ""
    value: str = ""
    data_type: DataType = DataType.NUMERIC  # Cached from the selected sensor

    @field_validator("sensor_id", "value", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> str:
        return to_text(value)

    @field_validator("operator", mode="before")
    @classmethod
    def _known_operator(cls, value: Any) -> str:
        token = to_text(value)
        if token and token not in Operator._value2member_map_:
            raise ValueError(f"Unknown operator '{token}'")
        return token

    @field_validator("data_type", mode="before")
    @classmethod
    def _legacy_data_type(cls, value: Any) -> Any:
        return _normalize_data_type(value)

    @property
    def is_complete(self) -> bool:
        """Sensor, operator and value are all filled in."""
        return bool(self.sensor_id.strip() and self.operator and self.value.strip())


class ConditionGroup(FrozenModel):
    """Ordered conditions combined by one intra-group operator."""

    id: str
    conditions: tuple[Condition, ...] = Field(min_length=1, max_length=MAX_CONDITIONS_PER_GROUP)
    group_logic_operator: LogicOperator = Field(
        default=LogicOperator.AND,
        validation_alias=AliasChoices("groupLogicOperator", "logic", "group_logic_operator"),
        serialization_alias="groupLogicOperator",
    )
    # How this group joins its predecessor; only meaningful on the second group
    between_group_operator: LogicOperator | None = None

    @field_validator("group_logic_operator", mode="before")
    @classmethod
    def _default_logic(cls, value: Any) -> Any:
        return LogicOperator.AND if value in (None, "") else value

    @field_validator("between_group_operator", mode="before")
    @classmethod
    def _blank_between(cls, value: Any) -> Any:
        return None if value == "" else value

    @property
    def is_full(self) -> bool:
        return len(self.conditions) >= MAX_CONDITIONS_PER_GROUP

    def complete_conditions(self) -> tuple[Condition, ...]:
        """Conditions ready to be persisted or summarized."""
        return tuple(c for c in self.conditions if c.is_complete)

    def index_of(self, condition_id: str) -> int | None:
        for index, condition in enumerate(self.conditions):
            if condition.id == condition_id:
                return index
        return None


class ExpressionModel(FrozenModel):
    """The 1-2 group structure defining when a rule fires."""

    groups: tuple[ConditionGroup, ...] = Field(min_length=1, max_length=MAX_GROUPS)

    @property
    def is_full(self) -> bool:
        return len(self.groups) >= MAX_GROUPS

    def index_of(self, group_id: str) -> int | None:
        for index, group in enumerate(self.groups):
            if group.id == group_id:
                return index
        return None

    def has_complete_condition(self) -> bool:
        return any(group.complete_conditions() for group in self.groups)


class TargetSelection(FrozenModel):
    """Units or unit tags a rule is applied to."""

    mode: TargetMode = TargetMode.ALL_UNITS
    units: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()

    @property
    def has_selection(self) -> bool:
        return bool(self.units or self.tags)
