"""
Workflow Editor Session

Keeps the list of workflow rules for an organization and applies create,
update, delete and active-toggle operations through the workflow API. Errors
are surfaced through self.error the same way the pipeline builder does.
"""

import logging
from typing import Any, List, Optional

from ..core.entities import PipelineConfiguration, Stage
from ..core.errors import ConfigurationValidationError, PersistenceError
from ..persistence.workflows import WorkflowRuleAPI
from ..workflows.rules import WorkflowRule

logger = logging.getLogger(__name__)


class WorkflowEditor:
    """Editing session for an organization's workflow rules."""

    def __init__(
        self,
        organization_id: str,
        user_id: str,
        api: WorkflowRuleAPI,
        stages: Optional[List[Stage]] = None
    ):
        self.organization_id = organization_id
        self.user_id = user_id
        self.api = api
        self.stages = list(stages or [])
        self.rules: List[WorkflowRule] = []
        self.error: Optional[str] = None
        self.is_loading = False

    def stage_options(self) -> List[tuple[str, str]]:
        """(id, name) pairs a stage_change trigger can point at."""
        return [(stage.id, stage.name) for stage in self.stages]

    def new_rule(self, **fields: Any) -> WorkflowRule:
        """Blank rule owned by this organization and user."""
        return WorkflowRule(
            organization_id=self.organization_id,
            created_by=self.user_id,
            **fields
        )

    def load(self, branch_name: Optional[str] = None, role_name: Optional[str] = None) -> bool:
        self.error = None
        self.is_loading = True
        try:
            self.rules = self.api.list_active_rules(self.organization_id, branch_name, role_name)
        except PersistenceError as e:
            self.error = e.message
            return False
        finally:
            self.is_loading = False
        return True

    def create(self, rule: WorkflowRule) -> Optional[WorkflowRule]:
        self.error = None
        try:
            rule.check_saveable()
            created = self.api.create_rule(rule)
        except (ConfigurationValidationError, PersistenceError) as e:
            self.error = e.message
            return None
        self.rules.insert(0, created)
        return created

    def update(self, rule: WorkflowRule) -> Optional[WorkflowRule]:
        self.error = None
        try:
            rule.check_saveable()
            updated = self.api.update_rule(rule)
        except (ConfigurationValidationError, PersistenceError) as e:
            self.error = e.message
            return None
        self.rules = [updated if r.id == updated.id else r for r in self.rules]
        return updated

    def delete(self, rule_id: str) -> bool:
        self.error = None
        try:
            self.api.delete_rule(rule_id)
        except PersistenceError as e:
            self.error = e.message
            return False
        self.rules = [r for r in self.rules if r.id != rule_id]
        return True

    def toggle(self, rule_id: str, is_active: bool) -> bool:
        self.error = None
        try:
            self.api.set_active(rule_id, is_active)
        except PersistenceError as e:
            self.error = e.message
            return False
        self.rules = [
            r.model_copy(update={"is_active": is_active}) if r.id == rule_id else r
            for r in self.rules
        ]
        return True

    def dangling_references(self, config: PipelineConfiguration) -> dict[str, List[str]]:
        """Rules whose stage references are missing from the configuration."""
        report = {}
        for rule in self.rules:
            missing = rule.dangling_stage_references(config)
            if missing:
                report[rule.id] = missing
        if report:
            logger.warning("%d workflow rules reference missing stages", len(report))
        return report
