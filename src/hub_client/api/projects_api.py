from typing import Any, Dict, List, Optional

import logging

from ..exceptions import ApiError, EntityNotFound, ProjectNotFoundError
from .helpers.api_base import APIBase

logger = logging.getLogger("hub-client")

PROJECTS_PATH = "/api/projects"


class ProjectsAPI(APIBase):
    """
    Hub API Project, Project Version and Policy Status Operations.
    """

    def get_project(self, project_url: str) -> Dict[str, Any]:
        """Fetches a single project resource by URL."""
        return self._get_json(project_url)

    def get_project_version(self, project_version_url: str) -> Dict[str, Any]:
        """Fetches a single project version resource by URL."""
        return self._get_json(project_version_url)

    def get_project_by_name(self, project_name: str) -> Dict[str, Any]:
        """
        Finds a project whose name matches exactly.

        Raises:
            ProjectNotFoundError: If no project has this exact name
            ApiError: If there are API issues
            NetworkError: If there are network issues
        """
        logger.debug(f"Looking up project '{project_name}'...")
        projects = self._get_all_items(PROJECTS_PATH, params={"q": f"name:{project_name}"})
        # The name query is a substring search; only an exact match counts
        project = next((p for p in projects if p.get("name") == project_name), None)
        if project is None:
            raise ProjectNotFoundError(f"Project '{project_name}' not found", details={"project_name": project_name})
        return project

    def get_project_versions(self, project: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Retrieves all versions of a project by following its 'versions' link.

        Raises:
            LinkNotFound: If the project resource has no 'versions' link
        """
        versions_url = self.get_link(project, "versions")
        versions = self._get_all_items(versions_url)
        logger.debug(f"Found {len(versions)} versions for project '{project.get('name')}'.")
        return versions

    def find_policy_status_url(self, project_versions: List[Dict[str, Any]], version_name: str) -> Optional[str]:
        """
        Returns the 'policy-status' link of the version named *version_name*,
        or None when no version has that name.

        Raises:
            LinkNotFound: If the matching version has no 'policy-status' link
        """
        for version in project_versions:
            if version.get("versionName") == version_name:
                return self.get_link(version, "policy-status")
        return None

    def get_policy_status_for_project_and_version(self, project_name: str, version_name: str) -> Dict[str, Any]:
        """
        Retrieves the policy status of a project version.

        Returns:
            Dict[str, Any]: The policy status view (overallStatus, componentVersionStatusCounts)

        Raises:
            ProjectNotFoundError: If the project does not exist
            EntityNotFound: If the project has no version with this name
            LinkNotFound: If an expected link is missing from a resource
            ApiError: If there are API issues
            NetworkError: If there are network issues
        """
        project = self.get_project_by_name(project_name)
        versions = self.get_project_versions(project)
        policy_status_url = self.find_policy_status_url(versions, version_name)
        if policy_status_url is None:
            raise EntityNotFound(
                f"Version '{version_name}' not found in project '{project_name}'",
                code="not_found",
                details={"project_name": project_name, "version_name": version_name},
            )

        policy_status = self._get_json(policy_status_url)
        if not isinstance(policy_status, dict):
            raise ApiError(f"Unexpected policy status format: {policy_status}", details={"url": policy_status_url})
        return policy_status
