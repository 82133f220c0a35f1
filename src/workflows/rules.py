"""
Workflow Rules

A workflow rule pairs one trigger with an ordered list of actions and the
same branch/role scoping as pipeline configurations.

Rules reference pipeline stages by id (stage_change triggers). The reference
is soft: nothing prevents a referenced stage from being deleted, and what
should happen to such a rule is undecided. dangling_stage_references()
reports the problem without repairing it.

On the wire a rule is stored as triggerType + triggerConditions + actions,
mirroring the in-memory shape with camelCase keys.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field

from ..core.entities import CamelModel, PipelineConfiguration
from ..core.errors import ConfigurationValidationError
from .actions import StoredAction, UnvalidatedAction, load_action
from .triggers import (
    ManualTrigger,
    StageChangeTrigger,
    StoredTrigger,
    TriggerType,
    UnvalidatedTrigger,
    build_trigger,
    load_trigger
)


class WorkflowRule(CamelModel):
    """
    Declarative trigger-and-actions record.

    Actions carry no order field; their order is their list position.
    Records whose trigger or action payloads do not fit their types still
    load, with those parts kept as stored (see is_complete).
    """
    id: str = ""
    name: str = ""
    description: Optional[str] = None

    trigger: StoredTrigger = Field(default_factory=ManualTrigger)
    actions: List[StoredAction] = Field(default_factory=list)

    is_active: bool = True
    branch_specific: bool = False
    role_specific: bool = False
    branch_name: Optional[str] = None
    role_name: Optional[str] = None

    organization_id: str = ""
    created_by: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def trigger_type(self) -> TriggerType:
        return TriggerType(self.trigger.trigger_type)

    @property
    def is_complete(self) -> bool:
        """False when the trigger or an action was loaded without fitting its type."""
        if isinstance(self.trigger, UnvalidatedTrigger):
            return False
        return not any(isinstance(action, UnvalidatedAction) for action in self.actions)

    # Wire format

    @classmethod
    def from_api(cls, data: dict) -> "WorkflowRule":
        record = dict(data)
        trigger = load_trigger(
            record.pop("triggerType", record.pop("trigger_type", TriggerType.MANUAL)),
            record.pop("triggerConditions", record.pop("trigger_conditions", None))
        )
        actions = [load_action(a) for a in record.pop("actions", None) or []]
        return cls.model_validate({**record, "trigger": trigger, "actions": actions})

    def to_api(self, exclude: Optional[set] = None) -> dict:
        data = super().to_api(exclude=(exclude or set()) | {"trigger", "actions"})
        data["triggerType"] = self.trigger_type.value
        data["triggerConditions"] = self.trigger.conditions()
        data["actions"] = [action.to_api() for action in self.actions]
        # Scope names only travel with their flag
        if not self.branch_specific and "branchName" in data:
            data["branchName"] = None
        if not self.role_specific and "roleName" in data:
            data["roleName"] = None
        return data

    # Editing

    def with_trigger(self, trigger: Any) -> "WorkflowRule":
        """
        Replace the trigger and its whole condition payload.

        Conditions entered for a previous trigger type do not carry over.
        """
        if isinstance(trigger, dict):
            trigger = build_trigger(trigger.get("trigger_type", TriggerType.MANUAL), trigger)
        return self.model_copy(update={"trigger": trigger})

    def add_action(self, action: StoredAction) -> "WorkflowRule":
        return self.model_copy(update={"actions": self.actions + [action]})

    def remove_action(self, index: int) -> "WorkflowRule":
        if index < 0 or index >= len(self.actions):
            raise IndexError(f"Action index {index} out of range for {len(self.actions)} actions")
        actions = [a for i, a in enumerate(self.actions) if i != index]
        return self.model_copy(update={"actions": actions})

    def with_updates(self, **fields: Any) -> "WorkflowRule":
        """Return a validated copy with the given fields replaced."""
        data = self.model_dump()
        data.update(fields)
        return type(self).model_validate(data)

    # Save gate

    def can_save(self) -> bool:
        return bool(self.name.strip())

    def check_saveable(self) -> None:
        if not self.can_save():
            raise ConfigurationValidationError("Workflow name is required")

    # Stage references

    def referenced_stage_ids(self) -> List[str]:
        if isinstance(self.trigger, StageChangeTrigger):
            return [self.trigger.stage]
        return []

    def dangling_stage_references(self, config: PipelineConfiguration) -> List[str]:
        """Stage ids this rule references that the configuration does not contain."""
        known = set(config.stage_ids())
        return [stage_id for stage_id in self.referenced_stage_ids() if stage_id not in known]
