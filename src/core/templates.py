"""
Starter templates for pipeline configurations.

- peak: the four PEAK stages (Prospecting, Engaging, Advancing, Key Decision)
- custom: start from scratch with no stages
"""

from enum import Enum
from typing import Union

from .entities import PipelineConfiguration, Stage, StageColor
from .errors import UnknownTemplateError


class TemplateKind(str, Enum):
    """Known starter templates."""
    PEAK = "peak"
    CUSTOM = "custom"


PEAK_NAME = "Default PEAK Pipeline"
PEAK_DESCRIPTION = "Standard PEAK methodology pipeline configuration"


def peak_stages() -> list[Stage]:
    """Fresh copy of the PEAK preset stages."""
    return [
        Stage(
            id="prospecting",
            name="Prospecting",
            color=StageColor.BLUE,
            order=1,
            probability=10,
            requirements=["Initial contact made", "Pain identified"],
            transitions=["engaging"]
        ),
        Stage(
            id="engaging",
            name="Engaging",
            color=StageColor.PURPLE,
            order=2,
            probability=25,
            requirements=["Champion identified", "Decision criteria established"],
            transitions=["advancing", "prospecting"]
        ),
        Stage(
            id="advancing",
            name="Advancing",
            color=StageColor.YELLOW,
            order=3,
            probability=50,
            requirements=["Economic buyer engaged", "Decision process mapped"],
            transitions=["key_decision", "engaging"]
        ),
        Stage(
            id="key_decision",
            name="Key Decision",
            color=StageColor.GREEN,
            order=4,
            probability=75,
            requirements=["Paper process completed", "Competition neutralized"],
            transitions=["closed_won", "closed_lost", "advancing"]
        ),
    ]


def load_template(
    config: PipelineConfiguration,
    kind: Union[TemplateKind, str]
) -> PipelineConfiguration:
    """
    Overwrite a configuration with a starter template.

    Stages, description and the scoping flags are replaced outright, never
    merged. Identity (id, name) and ownership (organization, creator) are
    kept so the result still belongs to the configuration being edited.
    """
    try:
        kind = TemplateKind(kind)
    except ValueError:
        raise UnknownTemplateError(str(kind))

    base = PipelineConfiguration(
        id=config.id,
        name=config.name,
        organization_id=config.organization_id,
        created_by=config.created_by,
        created_at=config.created_at,
        updated_at=config.updated_at
    )

    if kind == TemplateKind.PEAK:
        return base.model_copy(update={
            "description": PEAK_DESCRIPTION,
            "stages": peak_stages()
        })

    return base


def default_peak_configuration(organization_id: str, created_by: str) -> PipelineConfiguration:
    """The organization-wide default PEAK pipeline, ready to be created."""
    return PipelineConfiguration(
        name=PEAK_NAME,
        description=PEAK_DESCRIPTION,
        stages=peak_stages(),
        is_default=True,
        organization_id=organization_id,
        created_by=created_by
    )
