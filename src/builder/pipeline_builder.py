"""
Pipeline Builder Session

Holds the configuration being edited, plus the error banner and loading
flag a builder screen shows. All editing is synchronous and in memory; the
only round trip is save().

Save policy:
- validation failure: error set locally, no request issued
- persistence failure: error carries the server's message
- transport failure: error carries a generic message
In every failure case the configuration being edited is left unchanged.
"""

import logging
from typing import Any, Callable, Optional, Union

from ..core.entities import PipelineConfiguration, Stage
from ..core.errors import (
    ConfigurationValidationError,
    PersistenceError,
    TransportError,
    UnknownTemplateError
)
from ..core.templates import TemplateKind, load_template
from ..persistence.pipelines import PipelineConfigAPI

logger = logging.getLogger(__name__)

SAVE_FAILED = "Failed to save pipeline configuration"


class PipelineBuilder:
    """
    Editing session for one pipeline configuration.

    Responsibilities:
    - Apply stage add/update/delete/reorder through the ordering engine
    - Apply header field changes (name, description, scope, default flag)
    - Load starter templates
    - Gate and perform the save
    """

    def __init__(
        self,
        organization_id: str,
        user_id: str,
        api: Optional[PipelineConfigAPI] = None,
        initial_config: Optional[PipelineConfiguration] = None,
        on_save: Optional[Callable[[PipelineConfiguration], None]] = None
    ):
        self.organization_id = organization_id
        self.user_id = user_id
        self.api = api
        self.on_save = on_save
        self.config = initial_config or PipelineConfiguration(
            organization_id=organization_id,
            created_by=user_id
        )
        self.error: Optional[str] = None
        self.is_loading = False

    @property
    def is_new(self) -> bool:
        return not self.config.id

    # Stages

    def add_stage(self, stage: Stage) -> None:
        self.config = self.config.add_stage(stage)

    def add_new_stage(self, name: str, **fields: Any) -> Optional[Stage]:
        """Create a stage with a fresh id and append it. Blank names are ignored."""
        if not name.strip():
            return None
        stage = Stage(name=name, **fields)
        self.add_stage(stage)
        return self.config.stages[-1]

    def update_stage(self, index: int, stage: Stage) -> None:
        self.config = self.config.update_stage(index, stage)

    def delete_stage(self, index: int) -> None:
        self.config = self.config.delete_stage(index)

    def reorder_stages(self, from_index: int, to_index: int) -> None:
        self.config = self.config.reorder_stages(from_index, to_index)

    # Header fields

    def set_name(self, name: str) -> None:
        self.config = self.config.with_updates(name=name)

    def set_description(self, description: Optional[str]) -> None:
        self.config = self.config.with_updates(description=description)

    def set_branch(self, specific: bool, branch_name: Optional[str] = None) -> None:
        self.config = self.config.with_updates(branch_specific=specific, branch_name=branch_name)

    def set_role(self, specific: bool, role_name: Optional[str] = None) -> None:
        self.config = self.config.with_updates(role_specific=specific, role_name=role_name)

    def set_default(self, is_default: bool) -> None:
        self.config = self.config.with_updates(is_default=is_default)

    # Templates

    def load_template(self, kind: Union[TemplateKind, str]) -> bool:
        """Overwrite the configuration with a starter template."""
        try:
            self.config = load_template(self.config, kind)
        except UnknownTemplateError as e:
            self.error = e.message
            return False
        self.error = None
        return True

    # Save

    def can_save(self) -> bool:
        return not self.is_loading and self.config.can_save()

    def save(self) -> Optional[PipelineConfiguration]:
        """
        Persist the whole configuration in one round trip.

        Returns the stored configuration, or None when the save was blocked
        or failed (see self.error).
        """
        try:
            self.config.check_saveable()
        except ConfigurationValidationError as e:
            self.error = e.message
            return None

        if self.api is None:
            raise RuntimeError("No pipeline configuration API available")

        self.is_loading = True
        self.error = None
        try:
            if self.config.id:
                saved = self.api.update_configuration(self.config)
            else:
                saved = self.api.create_configuration(self.config)
        except TransportError as e:
            self.error = e.message
            return None
        except PersistenceError as e:
            self.error = e.message or SAVE_FAILED
            return None
        finally:
            self.is_loading = False

        logger.info("Saved pipeline %s with %d stages", saved.id, len(saved.stages))
        self.config = saved
        if self.on_save:
            self.on_save(saved)
        return saved
