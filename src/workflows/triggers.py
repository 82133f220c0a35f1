"""
Workflow Triggers

A trigger says when a workflow rule is meant to fire. Each trigger type
carries its own typed condition payload:

- stage_change: a deal reaches a given stage
- field_update: a deal field satisfies an operator/value test
- time_based: a recurring schedule, optionally limited to deals stuck in
  their stage
- manual: started by a user, no conditions

Triggers are stored, not evaluated: nothing in this package runs them
against live data.
"""

import logging
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator
)

logger = logging.getLogger(__name__)


class TriggerType(str, Enum):
    """Types of workflow triggers."""
    STAGE_CHANGE = "stage_change"
    FIELD_UPDATE = "field_update"
    TIME_BASED = "time_based"
    MANUAL = "manual"


class WatchedField(str, Enum):
    """Deal fields a field_update trigger can watch."""
    DEAL_VALUE = "deal_value"
    MEDDPICC_SCORE = "meddpicc_score"
    PROBABILITY = "probability"
    CLOSE_DATE = "close_date"


class ConditionOperator(str, Enum):
    """Comparison operators for field_update triggers."""
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    IS_EMPTY = "is_empty"
    IS_NOT_EMPTY = "is_not_empty"

    @property
    def needs_value(self) -> bool:
        return self not in (ConditionOperator.IS_EMPTY, ConditionOperator.IS_NOT_EMPTY)


class Schedule(str, Enum):
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"


class _Trigger(BaseModel):
    # Keys left over from another trigger type are dropped on load
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    def conditions(self) -> dict:
        """Condition payload as stored, without the type tag."""
        return self.model_dump(mode="json", by_alias=True, exclude={"trigger_type"}, exclude_none=True)


class StageChangeTrigger(_Trigger):
    """Fires when a deal moves into the referenced stage."""
    trigger_type: Literal["stage_change"] = "stage_change"
    stage: str = Field(description="Id of the stage entered")

    @field_validator("stage")
    @classmethod
    def _stage_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Select a stage for a stage change trigger")
        return value


class FieldUpdateTrigger(_Trigger):
    """Fires when a watched field satisfies the operator test."""
    trigger_type: Literal["field_update"] = "field_update"
    field: WatchedField
    operator: ConditionOperator
    value: Optional[str] = None

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, value):
        # Values are entered as text; numbers from older records are kept as text
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @model_validator(mode="after")
    def _value_for_operator(self) -> "FieldUpdateTrigger":
        if self.operator.needs_value and not (self.value or "").strip():
            raise ValueError(f"Operator {self.operator.value} requires a value")
        return self


class TimeBasedTrigger(_Trigger):
    """Fires on a schedule."""
    trigger_type: Literal["time_based"] = "time_based"
    schedule: Schedule = Schedule.DAILY
    days_in_stage: Optional[int] = Field(
        default=None,
        ge=1,
        alias="daysInStage",
        description="Only deals that have sat in their stage this long"
    )


class ManualTrigger(_Trigger):
    """Started by a user; no conditions."""
    trigger_type: Literal["manual"] = "manual"


Trigger = Annotated[
    Union[StageChangeTrigger, FieldUpdateTrigger, TimeBasedTrigger, ManualTrigger],
    Field(discriminator="trigger_type")
]

_trigger_adapter = TypeAdapter(Trigger)


def build_trigger(trigger_type: Union[TriggerType, str], conditions: Optional[dict] = None):
    """
    Build a typed trigger from a type tag and a stored condition payload.

    Keys that do not belong to the trigger type are discarded.
    """
    payload = dict(conditions or {})
    payload["trigger_type"] = TriggerType(trigger_type).value
    return _trigger_adapter.validate_python(payload)

class UnvalidatedTrigger(BaseModel):
    """
    Stored trigger whose conditions do not fit its type, such as a
    stage_change rule saved before a stage was picked.

    The payload is kept exactly as stored so the rule can be listed, edited
    and saved back unchanged.
    """
    trigger_type: TriggerType
    payload: dict = Field(default_factory=dict)

    def conditions(self) -> dict:
        return dict(self.payload)


def _stored_trigger_tag(value) -> Optional[str]:
    if isinstance(value, dict):
        return "unvalidated" if "payload" in value else value.get("trigger_type")
    if isinstance(value, UnvalidatedTrigger):
        return "unvalidated"
    return getattr(value, "trigger_type", None)


StoredTrigger = Annotated[
    Union[
        Annotated[StageChangeTrigger, Tag("stage_change")],
        Annotated[FieldUpdateTrigger, Tag("field_update")],
        Annotated[TimeBasedTrigger, Tag("time_based")],
        Annotated[ManualTrigger, Tag("manual")],
        Annotated[UnvalidatedTrigger, Tag("unvalidated")]
    ],
    Discriminator(_stored_trigger_tag)
]


def load_trigger(trigger_type: Union[TriggerType, str], conditions: Optional[dict] = None):
    """
    Rebuild a stored trigger.

    Payloads that fit the trigger type load as typed triggers; anything else
    is kept as an UnvalidatedTrigger. Unknown trigger types still raise.
    """
    try:
        return build_trigger(trigger_type, conditions)
    except ValidationError:
        logger.warning("Stored %s trigger does not fit its type; keeping it unvalidated", trigger_type)
        return UnvalidatedTrigger(trigger_type=trigger_type, payload=dict(conditions or {}))
