"""
Pipeline Configuration API

Read, create and update pipeline configurations. Deleting a configuration
is not offered here.
"""

import logging
from typing import List, Optional

from ..core.entities import PipelineConfiguration
from ..core.templates import default_peak_configuration
from .client import APIClient

logger = logging.getLogger(__name__)

# Fields the server owns; never sent on create
SERVER_FIELDS = {"id", "created_at", "updated_at"}


class PipelineConfigAPI(APIClient):
    """Client for the pipeline configuration resource."""

    @property
    def _path(self) -> str:
        return self.config.pipelines_path if self.config else "/pipeline-configurations"

    UNREADABLE = "Received an unreadable pipeline configuration"

    def _parse(self, body) -> PipelineConfiguration:
        return self._decode(PipelineConfiguration.from_api, body, self.UNREADABLE)

    def _parse_list(self, body) -> List[PipelineConfiguration]:
        return self._decode(
            lambda items: [PipelineConfiguration.from_api(item) for item in items or []],
            body, self.UNREADABLE
        )

    def list_configurations(self, organization_id: str) -> List[PipelineConfiguration]:
        """All configurations for an organization, newest first."""
        body = self._request(
            "GET", self._path, "Failed to fetch pipeline configurations",
            params={"organizationId": organization_id}
        )
        return self._parse_list(body)

    def list_for_context(
        self,
        organization_id: str,
        branch_name: Optional[str] = None,
        role_name: Optional[str] = None
    ) -> List[PipelineConfiguration]:
        """
        Configurations applicable to a branch and/or role.

        The API returns general configurations plus those specialized for the
        given branch or role.
        """
        params = {"organizationId": organization_id}
        if branch_name:
            params["branchName"] = branch_name
        if role_name:
            params["roleName"] = role_name
        body = self._request("GET", self._path, "Failed to fetch pipeline configurations", params=params)
        return self._parse_list(body)

    def get_configuration(self, config_id: str) -> Optional[PipelineConfiguration]:
        body = self._request(
            "GET", f"{self._path}/{config_id}", "Failed to fetch pipeline configuration",
            allow_not_found=True
        )
        if body is None:
            return None
        return self._parse(body)

    def get_default_configuration(self, organization_id: str) -> Optional[PipelineConfiguration]:
        body = self._request(
            "GET", f"{self._path}/default", "Failed to fetch default pipeline configuration",
            params={"organizationId": organization_id},
            allow_not_found=True
        )
        if body is None:
            return None
        return self._parse(body)

    def create_configuration(self, config: PipelineConfiguration) -> PipelineConfiguration:
        """Create a configuration; the server assigns id and timestamps."""
        body = self._request(
            "POST", self._path, "Failed to create pipeline configuration",
            json=config.to_api(exclude=SERVER_FIELDS)
        )
        created = self._parse(body)
        logger.info("Created pipeline configuration %s (%s)", created.id, created.name)
        return created

    def update_configuration(self, config: PipelineConfiguration) -> PipelineConfiguration:
        body = self._request(
            "PUT", f"{self._path}/{config.id}", "Failed to update pipeline configuration",
            json=config.to_api(exclude={"created_at", "updated_at"})
        )
        updated = self._parse(body)
        logger.info("Updated pipeline configuration %s", updated.id)
        return updated

    def save_configuration(self, config: PipelineConfiguration) -> PipelineConfiguration:
        """
        Validate, then create or update depending on whether the
        configuration has been saved before.
        """
        config.check_saveable()
        if config.id:
            return self.update_configuration(config)
        return self.create_configuration(config)

    def set_as_default(self, config_id: str, organization_id: str) -> None:
        """Make one configuration the organization's default."""
        self._request(
            "POST", f"{self._path}/{config_id}/default",
            "Failed to set pipeline configuration as default",
            json={"organizationId": organization_id}
        )
        logger.info("Pipeline configuration %s is now the default for %s", config_id, organization_id)

    def create_default_peak_pipeline(self, organization_id: str, created_by: str) -> PipelineConfiguration:
        return self.create_configuration(default_peak_configuration(organization_id, created_by))
