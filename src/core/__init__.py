"""
Core pipeline configuration model.

- Stage: one phase of a sales pipeline
- PipelineConfiguration: named, ordered set of stages scoped to an organization
- Ordering engine keeping stage order contiguous and 1-based
- Starter templates (PEAK, from scratch)
"""

from .entities import Stage, StageColor, PipelineConfiguration
from .errors import (
    PipelineConfigError,
    ConfigurationValidationError,
    UnknownTemplateError,
    PersistenceError,
    TransportError
)
from .ordering import add_stage, update_stage, delete_stage, reorder_stages
from .templates import TemplateKind, load_template, peak_stages

__all__ = [
    "Stage",
    "StageColor",
    "PipelineConfiguration",
    "PipelineConfigError",
    "ConfigurationValidationError",
    "UnknownTemplateError",
    "PersistenceError",
    "TransportError",
    "add_stage",
    "update_stage",
    "delete_stage",
    "reorder_stages",
    "TemplateKind",
    "load_template",
    "peak_stages"
]
