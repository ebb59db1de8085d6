"""
Conversion of Hub notification documents into ``RawNotification`` records.

The Hub returns two structurally different views of a notification: the
system-wide NotificationView and the per-user NotificationUserView (which adds
``notificationState``). Both are converted here, once, into a single record.
Older Hub releases also spell some payload keys differently; those aliases are
mapped onto the current names before parsing.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import logging

from ..api.helpers.links import get_href, id_from_link
from ..exceptions import ValidationError
from .models import (
    AffectedProjectVersion,
    ComponentVersionStatus,
    NotificationKind,
    OpaqueNotificationContent,
    PolicyNotificationContent,
    RawNotification,
    UserRef,
    VulnerabilityNotificationContent,
    VulnerabilitySourceRef,
)

logger = logging.getLogger("hub-client")

_POLICY_KINDS = {
    NotificationKind.RULE_VIOLATION,
    NotificationKind.RULE_VIOLATION_CLEARED,
    NotificationKind.POLICY_OVERRIDE,
}

# Legacy payload keys mapped to their current names
_ALIASES = {
    "projectVersionLink": "projectVersion",
    "componentLink": "component",
    "componentVersionLink": "componentVersion",
}


def parse_hub_date(value: Any) -> datetime:
    """
    Parse a Hub timestamp (``2018-03-01T10:15:30.000Z``) into an aware datetime.

    Raises:
        ValidationError: If the value is missing or not an ISO-8601 timestamp.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError(f"Invalid notification timestamp '{value}'", details={"createdAt": value})
    else:
        raise ValidationError("Notification has no createdAt timestamp", details={"createdAt": value})
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _apply_aliases(raw: Dict[str, Any]) -> Dict[str, Any]:
    normalized = dict(raw)
    for old, new in _ALIASES.items():
        if old in normalized and new not in normalized:
            normalized[new] = normalized.pop(old)
    return normalized


def _rule_ids(raw: Dict[str, Any]) -> tuple:
    policies = raw.get("policies")
    if policies is None:
        # Some releases only send policyInfos: [{"policy": <href>, "policyName": ...}]
        infos = raw.get("policyInfos")
        if infos is not None and not isinstance(infos, list):
            raise ValidationError(f"Expected a list for 'policyInfos', got {type(infos).__name__}",
                                  details={"policyInfos": infos})
        policies = [info.get("policy") for info in infos or [] if isinstance(info, dict)]
    elif not isinstance(policies, list):
        raise ValidationError(f"Expected a list for 'policies', got {type(policies).__name__}",
                              details={"policies": policies})
    return tuple(p for p in policies if isinstance(p, str) and p)


def _component_version_status(raw: Dict[str, Any], overridden_by: Optional[UserRef] = None) -> ComponentVersionStatus:
    raw = _apply_aliases(raw)
    component_link = raw.get("component")
    component_version_link = raw.get("componentVersion")
    return ComponentVersionStatus(
        component_name=raw.get("componentName"),
        component_version_name=raw.get("componentVersionName"),
        component_id=raw.get("componentId") or id_from_link(component_link or component_version_link, "components"),
        component_version_id=raw.get("componentVersionId") or id_from_link(component_version_link, "versions"),
        component_link=component_link,
        component_version_link=component_version_link,
        policy_rule_ids=_rule_ids(raw),
        overridden_by=overridden_by,
    )


def _policy_content(content: Dict[str, Any], kind: NotificationKind) -> PolicyNotificationContent:
    content = _apply_aliases(content)
    if kind is NotificationKind.POLICY_OVERRIDE:
        # An override concerns exactly one component version; model it as a single row
        user = UserRef(first_name=content.get("firstName"), last_name=content.get("lastName"))
        rows = (_component_version_status(content, overridden_by=user),)
    else:
        statuses = content.get("componentVersionStatuses") or []
        if not isinstance(statuses, list):
            raise ValidationError("componentVersionStatuses is not a list", details={"content": content})
        rows = tuple(_component_version_status(s) for s in statuses if isinstance(s, dict))

    return PolicyNotificationContent(
        project_name=content.get("projectName"),
        project_version_link=content.get("projectVersion"),
        project_version_name=content.get("projectVersionName"),
        component_version_statuses=rows,
    )


def _vulnerability_refs(raw: Any) -> tuple:
    refs = []
    for item in raw or []:
        if isinstance(item, dict) and item.get("vulnerabilityId"):
            refs.append(VulnerabilitySourceRef(
                source=item.get("source"),
                vulnerability_id=item["vulnerabilityId"],
                link=item.get("vulnerability"),
            ))
    return tuple(refs)


def _vulnerability_content(content: Dict[str, Any]) -> VulnerabilityNotificationContent:
    content = _apply_aliases(content)
    component_version_link = content.get("componentVersion")
    affected: List[AffectedProjectVersion] = []
    for item in content.get("affectedProjectVersions") or []:
        if not isinstance(item, dict):
            continue
        item = _apply_aliases(item)
        affected.append(AffectedProjectVersion(
            project_name=item.get("projectName"),
            project_version_link=item.get("projectVersion"),
            project_version_name=item.get("projectVersionName"),
        ))

    return VulnerabilityNotificationContent(
        component_name=content.get("componentName"),
        component_version_name=content.get("versionName") or content.get("componentVersionName"),
        component_version_link=component_version_link,
        component_id=id_from_link(component_version_link, "components"),
        component_version_id=id_from_link(component_version_link, "versions"),
        new_vulnerabilities=_vulnerability_refs(content.get("newVulnerabilityIds")),
        updated_vulnerabilities=_vulnerability_refs(content.get("updatedVulnerabilityIds")),
        deleted_vulnerabilities=_vulnerability_refs(content.get("deletedVulnerabilityIds")),
        affected_project_versions=tuple(affected),
    )


def to_raw_notification(view: Dict[str, Any]) -> RawNotification:
    """
    Convert a NotificationView or NotificationUserView document into a RawNotification.

    Raises:
        ValidationError: If the document lacks a type or timestamp, or its content is malformed.
    """
    if not isinstance(view, dict):
        raise ValidationError(f"Notification is not a JSON object: {view!r}")
    if not view.get("type"):
        raise ValidationError("Notification has no type", details={"href": get_href(view)})

    kind = NotificationKind.from_wire(view["type"])
    created_at = parse_hub_date(view.get("createdAt"))
    content = view.get("content")
    if content is None:
        content = {}
    if not isinstance(content, dict):
        raise ValidationError("Notification content is not a JSON object", details={"href": get_href(view)})

    if kind in _POLICY_KINDS:
        parsed_content = _policy_content(content, kind)
    elif kind is NotificationKind.VULNERABILITY:
        parsed_content = _vulnerability_content(content)
    else:
        parsed_content = OpaqueNotificationContent(payload=content)

    return RawNotification(
        created_at=created_at,
        kind=kind,
        content=parsed_content,
        href=get_href(view),
        content_type=view.get("contentType"),
        notification_state=view.get("notificationState"),
        wire_type=view["type"],
    )
