import logging
import re
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

from ..api.helpers.links import find_link, get_href, get_link, id_from_link
from ..exceptions import (
    ApiError,
    AuthenticationError,
    ConfigurationError,
    EntityNotFound,
    EntityResolutionError,
    NetworkError,
)
from .models import ComponentVersionRef, PolicyRule, ProjectVersionRef

if TYPE_CHECKING:
    from ..api import HubAPI

logger = logging.getLogger("hub-client")


class EntityResolver:
    """
    Fetches the remote entities a notification refers to and maps them to pipeline records.

    Every method performs one logical fetch and classifies failures as
    EntityNotFound (the resource is gone) or EntityResolutionError (anything
    else). LinkNotFound raised during link discovery is passed through as is.
    The resolver keeps no state of its own and can be shared across threads.
    """

    def __init__(self, api: "HubAPI"):
        self.api = api

    def _fetch(self, description: str, ref: Optional[str], fetch: Callable[[str], Any]) -> Dict[str, Any]:
        if not ref:
            raise EntityResolutionError(f"No link available to resolve {description}", code="missing_link")
        try:
            resource = fetch(ref)
        except ApiError as e:
            if e.code == "not_found":
                raise EntityNotFound(f"{description.capitalize()} not found: {ref}", code="not_found",
                                     details={"link": ref}) from e
            raise EntityResolutionError(f"Failed to resolve {description} {ref}: {e.message}", code=e.code,
                                        details={"link": ref, **e.details}) from e
        except (NetworkError, AuthenticationError, ConfigurationError) as e:
            raise EntityResolutionError(f"Failed to resolve {description} {ref}: {e.message}",
                                        code=e.code or "transport_error", details={"link": ref}) from e
        if not isinstance(resource, dict):
            raise EntityResolutionError(f"Malformed {description} received from {ref}", code="malformed_response",
                                        details={"link": ref})
        return resource

    def resolve_project_version(self, link: Optional[str], project_name: Optional[str] = None) -> ProjectVersionRef:
        """
        Resolve a project version link into a ProjectVersionRef.

        The project name is taken from *project_name* when given; otherwise it is
        read from the project behind the version's 'project' link.
        """
        version = self._fetch("project version", link, self.api.get_project_version)
        version_name = version.get("versionName")
        if not version_name:
            raise EntityResolutionError(f"Project version {link} has no versionName", code="malformed_response",
                                        details={"link": link})
        if project_name is None:
            project = self._fetch("project", get_link(version, "project"), self.api.get_project)
            project_name = project.get("name")
        logger.debug("Resolved project version %s to %s/%s", link, project_name, version_name)
        return ProjectVersionRef(project_name=project_name, version_name=version_name, version_link=link)

    def resolve_policy_rule(self, rule_id: str) -> PolicyRule:
        rule = self._fetch("policy rule", rule_id, self.api.get_policy_rule)
        name = rule.get("name")
        if not name:
            raise EntityResolutionError(f"Policy rule {rule_id} has no name", code="malformed_response",
                                        details={"link": rule_id})
        return PolicyRule(
            id=rule_id,
            name=name,
            description=rule.get("description"),
            enabled=rule.get("enabled"),
            severity=rule.get("severity"),
            expression=rule.get("expression") or {},
        )

    def resolve_component_version(self, link: Optional[str]) -> ComponentVersionRef:
        """Resolve a component version link, including the name of its parent component."""
        version = self._fetch("component version", link, self.api.get_component_version)
        version_name = version.get("versionName")
        if not version_name:
            raise EntityResolutionError(f"Component version {link} has no versionName", code="malformed_response",
                                        details={"link": link})

        href = get_href(version) or link
        component_link = find_link(version, "component") or re.sub(r"/versions/[^/?#]+.*$", "", href)
        component = self._fetch("component", component_link, self.api.get_component)

        origin_ids = tuple(o.get("originId") for o in version.get("origins") or []
                           if isinstance(o, dict) and o.get("originId"))
        return ComponentVersionRef(
            component_name=component.get("name"),
            version_name=version_name,
            component_id=id_from_link(href, "components"),
            component_version_id=id_from_link(href, "versions"),
            link=href,
            origin_ids=origin_ids,
        )
