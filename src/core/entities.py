"""
Pipeline Configuration Entities

This module defines the value types that builders edit and the
configuration API stores:

- Stage: one phase of a sales pipeline (name, color, win probability,
  requirements, suggested transitions, position)
- PipelineConfiguration: a named, ordered set of stages scoped to an
  organization and optionally to a branch or role

The configuration is a copy-on-write aggregate: every editing operation
returns a new instance and leaves the original untouched. On the wire both
types are JSON objects with camelCase keys mirroring the field names.
"""

from datetime import datetime
from enum import Enum
from typing import Any, List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from . import ordering
from .errors import ConfigurationValidationError


def new_stage_id() -> str:
    """Generate a client-side stage id."""
    return f"stage_{uuid4().hex[:12]}"


class StageColor(str, Enum):
    """Display palette for stages. Colors carry no meaning beyond the UI."""
    BLUE = "#3B82F6"
    PURPLE = "#8B5CF6"
    GREEN = "#10B981"
    YELLOW = "#F59E0B"
    RED = "#EF4444"
    PINK = "#EC4899"
    INDIGO = "#6366F1"
    GRAY = "#6B7280"

    @property
    def label(self) -> str:
        return self.name.title()


class CamelModel(BaseModel):
    """Base for models serialized with camelCase keys."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True
    )

    def to_api(self, exclude: Optional[set] = None) -> dict:
        """JSON-ready payload for the configuration API."""
        return self.model_dump(by_alias=True, mode="json", exclude=exclude)


class Stage(CamelModel):
    """
    A single pipeline phase.

    Requirements and transitions are free text. Transitions are meant to name
    the stages a deal may move to next, but nothing checks them against
    actual stage ids.
    """
    id: str = Field(default_factory=new_stage_id)
    name: str = Field(description="Display label")
    color: StageColor = StageColor.BLUE
    order: int = Field(default=1, ge=1, description="1-based position in the pipeline")
    probability: int = Field(default=0, ge=0, le=100, description="Win probability in percent")
    is_active: bool = True
    requirements: List[str] = Field(default_factory=list)
    transitions: List[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Stage name is required")
        return value

    @field_validator("color", mode="before")
    @classmethod
    def _normalize_color(cls, value: Any) -> Any:
        if isinstance(value, str) and not isinstance(value, StageColor):
            return value.upper()
        return value

    def add_requirement(self, requirement: str) -> "Stage":
        if not requirement.strip():
            return self
        return self.model_copy(update={"requirements": self.requirements + [requirement]})

    def remove_requirement(self, index: int) -> "Stage":
        requirements = [r for i, r in enumerate(self.requirements) if i != index]
        return self.model_copy(update={"requirements": requirements})

    def add_transition(self, transition: str) -> "Stage":
        if not transition.strip():
            return self
        return self.model_copy(update={"transitions": self.transitions + [transition]})

    def remove_transition(self, index: int) -> "Stage":
        transitions = [t for i, t in enumerate(self.transitions) if i != index]
        return self.model_copy(update={"transitions": transitions})


class PipelineConfiguration(CamelModel):
    """
    Ordered collection of stages plus scoping metadata.

    branch_name / role_name are only meaningful when the matching
    *_specific flag is set; that pairing is not enforced here. Likewise at
    most one configuration per organization is expected to be the default,
    which only the configuration API can guarantee.
    """
    id: str = ""
    name: str = ""
    description: Optional[str] = None
    stages: List[Stage] = Field(default_factory=list)

    branch_specific: bool = False
    role_specific: bool = False
    branch_name: Optional[str] = None
    role_name: Optional[str] = None
    is_default: bool = False

    organization_id: str = ""
    created_by: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: dict) -> "PipelineConfiguration":
        """
        Build a configuration from a stored record.

        Stored stages are sorted by their order and renumbered, so a record
        with gaps or duplicates in its ordering still loads contiguous.
        """
        config = cls.model_validate(data)
        stages = sorted(config.stages, key=lambda s: s.order)
        return config.model_copy(update={"stages": ordering.renumber(stages)})

    # Save gate

    def validation_errors(self) -> list[str]:
        errors = []
        if not self.name.strip():
            errors.append("Pipeline name is required")
        if not self.stages:
            errors.append("At least one stage is required")
        return errors

    def can_save(self) -> bool:
        """True iff the name is not blank and there is at least one stage."""
        return not self.validation_errors()

    def check_saveable(self) -> None:
        """Raise ConfigurationValidationError with the first failing rule."""
        errors = self.validation_errors()
        if errors:
            raise ConfigurationValidationError(errors[0])

    # Stage operations

    def add_stage(self, stage: Stage) -> "PipelineConfiguration":
        return self.model_copy(update={"stages": ordering.add_stage(self.stages, stage)})

    def update_stage(self, index: int, stage: Stage) -> "PipelineConfiguration":
        return self.model_copy(update={"stages": ordering.update_stage(self.stages, index, stage)})

    def delete_stage(self, index: int) -> "PipelineConfiguration":
        return self.model_copy(update={"stages": ordering.delete_stage(self.stages, index)})

    def reorder_stages(self, from_index: int, to_index: int) -> "PipelineConfiguration":
        return self.model_copy(
            update={"stages": ordering.reorder_stages(self.stages, from_index, to_index)}
        )

    # Field updates

    def with_updates(self, **fields: Any) -> "PipelineConfiguration":
        """Return a validated copy with the given fields replaced."""
        data = self.model_dump()
        data.update(fields)
        return type(self).model_validate(data)

    # Queries

    @property
    def active_stages(self) -> List[Stage]:
        return [stage for stage in self.stages if stage.is_active]

    def sorted_stages(self) -> List[Stage]:
        return sorted(self.stages, key=lambda s: s.order)

    def stage_ids(self) -> List[str]:
        return [stage.id for stage in self.stages]

    def find_stage(self, stage_id: str) -> Optional[Stage]:
        for stage in self.stages:
            if stage.id == stage_id:
                return stage
        return None
