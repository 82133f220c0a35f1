"""
Workflow Rule API

Read, create, update, toggle and delete workflow rules.
"""

import logging
from typing import List, Optional

from ..workflows.rules import WorkflowRule
from .client import APIClient

logger = logging.getLogger(__name__)

SERVER_FIELDS = {"id", "created_at", "updated_at"}


class WorkflowRuleAPI(APIClient):
    """Client for the workflow automation resource."""

    @property
    def _path(self) -> str:
        return self.config.workflows_path if self.config else "/workflow-automations"

    UNREADABLE = "Received an unreadable workflow automation"

    def _parse(self, body) -> WorkflowRule:
        return self._decode(WorkflowRule.from_api, body, self.UNREADABLE)

    def _parse_list(self, body) -> List[WorkflowRule]:
        return self._decode(
            lambda items: [WorkflowRule.from_api(item) for item in items or []],
            body, self.UNREADABLE
        )

    def list_rules(self, organization_id: str) -> List[WorkflowRule]:
        body = self._request(
            "GET", self._path, "Failed to fetch workflow automations",
            params={"organizationId": organization_id}
        )
        return self._parse_list(body)

    def list_active_rules(
        self,
        organization_id: str,
        branch_name: Optional[str] = None,
        role_name: Optional[str] = None
    ) -> List[WorkflowRule]:
        params = {"organizationId": organization_id, "isActive": "true"}
        if branch_name:
            params["branchName"] = branch_name
        if role_name:
            params["roleName"] = role_name
        body = self._request("GET", self._path, "Failed to fetch active workflow automations", params=params)
        return self._parse_list(body)

    def get_rule(self, rule_id: str) -> Optional[WorkflowRule]:
        body = self._request(
            "GET", f"{self._path}/{rule_id}", "Failed to fetch workflow automation",
            allow_not_found=True
        )
        if body is None:
            return None
        return self._parse(body)

    def create_rule(self, rule: WorkflowRule) -> WorkflowRule:
        body = self._request(
            "POST", self._path, "Failed to create workflow automation",
            json=rule.to_api(exclude=SERVER_FIELDS)
        )
        created = self._parse(body)
        logger.info("Created workflow automation %s (%s)", created.id, created.name)
        return created

    def update_rule(self, rule: WorkflowRule) -> WorkflowRule:
        body = self._request(
            "PUT", f"{self._path}/{rule.id}", "Failed to update workflow automation",
            json=rule.to_api(exclude={"created_at", "updated_at"})
        )
        return self._parse(body)

    def save_rule(self, rule: WorkflowRule) -> WorkflowRule:
        rule.check_saveable()
        if rule.id:
            return self.update_rule(rule)
        return self.create_rule(rule)

    def set_active(self, rule_id: str, is_active: bool) -> WorkflowRule:
        body = self._request(
            "PATCH", f"{self._path}/{rule_id}", "Failed to toggle workflow automation",
            json={"isActive": is_active}
        )
        return self._parse(body)

    def delete_rule(self, rule_id: str) -> None:
        self._request("DELETE", f"{self._path}/{rule_id}", "Failed to delete workflow automation")
        logger.info("Deleted workflow automation %s", rule_id)
