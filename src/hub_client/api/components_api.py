from typing import Any, Dict, List

import logging

from ..exceptions import EntityNotFound
from .helpers.api_base import APIBase
from .helpers.external_id import ExternalId

logger = logging.getLogger("hub-client")

COMPONENTS_PATH = "/api/components"
VULNERABILITY_MEDIA_TYPE = "application/vnd.blackducksoftware.vulnerability-4+json"


class ComponentsAPI(APIBase):
    """Hub API Component Operations."""

    def get_component(self, component_url: str) -> Dict[str, Any]:
        """Fetches a single component resource by URL."""
        return self._get_json(component_url)

    def get_component_version(self, component_version_url: str) -> Dict[str, Any]:
        """Fetches a single component version resource by URL."""
        return self._get_json(component_version_url)

    def get_all_components(self, external_id: ExternalId) -> List[Dict[str, Any]]:
        """
        Searches the component catalogue for an external id.

        Returns:
            List[Dict[str, Any]]: Component search results (may be empty)
        """
        query = f"id:{external_id.forge}|{external_id.create_hub_origin_id()}"
        logger.debug(f"Searching components with query '{query}'...")
        return self._get_all_items(COMPONENTS_PATH, params={"q": query})

    def get_exact_component_match(self, external_id: ExternalId) -> Dict[str, Any]:
        """
        Returns the search result whose originId matches the external id exactly.

        Raises:
            EntityNotFound: If no search result matches exactly
        """
        origin_id = external_id.create_hub_origin_id()
        for component in self.get_all_components(external_id):
            if component.get("originId") == origin_id:
                return component
        raise EntityNotFound(
            f"Couldn't find an exact component that matches {origin_id}",
            code="not_found",
            details={"external_id": external_id.create_external_id()},
        )

    def get_all_component_versions(self, external_id: ExternalId) -> List[Dict[str, Any]]:
        """
        Retrieves every version of the component matching the external id.

        Raises:
            EntityNotFound: If no component matches exactly
            LinkNotFound: If the component has no 'versions' link
        """
        match = self.get_exact_component_match(external_id)
        component = self.get_component(match["component"])
        versions_url = self.get_link(component, "versions")
        return self._get_all_items(versions_url)

    def get_exact_component_version(self, external_id: ExternalId) -> Dict[str, Any]:
        """
        Returns the component version whose versionName equals the external id's version.

        Raises:
            EntityNotFound: If the component or the version cannot be found
        """
        for component_version in self.get_all_component_versions(external_id):
            if component_version.get("versionName") == external_id.version:
                return component_version
        error_msg = f"Could not find version {external_id.version} of component {external_id.create_hub_origin_id()}"
        logger.error(error_msg)
        raise EntityNotFound(error_msg, code="not_found", details={"external_id": external_id.create_external_id()})

    def get_vulnerabilities_from_component_version(self, external_id: ExternalId) -> List[Dict[str, Any]]:
        """
        Retrieves the vulnerabilities of the component version matching the external id.

        Raises:
            EntityNotFound: If no exact match exists or the match carries no version URL
            LinkNotFound: If the component version has no 'vulnerabilities' link
        """
        match = self.get_exact_component_match(external_id)
        component_version_url = match.get("version")
        if not component_version_url:
            raise EntityNotFound(
                f"Couldn't get a componentVersion url from the component matching {external_id.create_external_id()}",
                code="not_found",
                details={"external_id": external_id.create_external_id()},
            )

        component_version = self.get_component_version(component_version_url)
        vulnerabilities_url = self.get_link(component_version, "vulnerabilities")
        vulnerabilities = self._get_all_items(vulnerabilities_url, media_type=VULNERABILITY_MEDIA_TYPE)
        logger.debug(f"Found {len(vulnerabilities)} vulnerabilities for {external_id.create_external_id()}")
        return vulnerabilities
