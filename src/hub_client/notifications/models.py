"""
Typed records flowing through the notification pipeline.

A ``RawNotification`` is the ingested form of a Hub notification; its ``content``
is one of the ``*NotificationContent`` classes depending on ``kind``. Transforms
turn it into ``ContentItem`` records, the stable output contract rendered by
reports, e-mails and dashboards.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from ..exceptions import ValidationError


class NotificationKind(Enum):
    """Notification discriminator; values are the Hub's wire ``type`` strings."""
    RULE_VIOLATION = "RULE_VIOLATION"
    RULE_VIOLATION_CLEARED = "RULE_VIOLATION_CLEARED"
    POLICY_OVERRIDE = "POLICY_OVERRIDE"
    VULNERABILITY = "VULNERABILITY"
    BOM_EDIT = "BOM_EDIT"
    PROJECT_VERSION = "PROJECT_VERSION"
    LICENSE_LIMIT = "LICENSE_LIMIT"
    VERSION_BOM_CODE_LOCATION_BOM_COMPUTED = "VERSION_BOM_CODE_LOCATION_BOM_COMPUTED"
    # Any type this client does not know; the raw string is kept on RawNotification.wire_type
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_wire(cls, value: Any) -> "NotificationKind":
        if not isinstance(value, str) or not value:
            raise ValidationError(f"Invalid notification type {value!r}", code="invalid_notification_type",
                                  details={"type": value})
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class UserRef:
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)


@dataclass(frozen=True)
class ComponentVersionStatus:
    """One affected component version and the policy rules it is implicated by."""
    component_name: Optional[str]
    component_version_name: Optional[str]
    component_id: Optional[str] = None
    component_version_id: Optional[str] = None
    component_link: Optional[str] = None
    component_version_link: Optional[str] = None
    policy_rule_ids: Tuple[str, ...] = ()
    overridden_by: Optional[UserRef] = None


@dataclass(frozen=True)
class VulnerabilitySourceRef:
    source: Optional[str]
    vulnerability_id: str
    link: Optional[str] = None


@dataclass(frozen=True)
class AffectedProjectVersion:
    project_name: Optional[str]
    project_version_link: Optional[str]
    project_version_name: Optional[str] = None


@dataclass(frozen=True)
class PolicyNotificationContent:
    """Payload of the policy kinds (raised, cleared, overridden)."""
    project_name: Optional[str]
    project_version_link: Optional[str]
    project_version_name: Optional[str] = None
    component_version_statuses: Tuple[ComponentVersionStatus, ...] = ()


@dataclass(frozen=True)
class VulnerabilityNotificationContent:
    component_name: Optional[str]
    component_version_name: Optional[str]
    component_version_link: Optional[str]
    component_id: Optional[str] = None
    component_version_id: Optional[str] = None
    new_vulnerabilities: Tuple[VulnerabilitySourceRef, ...] = ()
    updated_vulnerabilities: Tuple[VulnerabilitySourceRef, ...] = ()
    deleted_vulnerabilities: Tuple[VulnerabilitySourceRef, ...] = ()
    affected_project_versions: Tuple[AffectedProjectVersion, ...] = ()


@dataclass(frozen=True)
class OpaqueNotificationContent:
    """Payload of kinds the pipeline has no transform for; kept as received."""
    payload: Dict[str, Any] = field(default_factory=dict, compare=False)


NotificationContent = Union[PolicyNotificationContent, VulnerabilityNotificationContent, OpaqueNotificationContent]


@dataclass(frozen=True)
class RawNotification:
    created_at: datetime
    kind: NotificationKind
    content: NotificationContent
    href: Optional[str] = None
    content_type: Optional[str] = None
    # Only set for notifications listed through the current user
    notification_state: Optional[str] = None
    # The type string as sent by the Hub; differs from kind.value only for UNKNOWN
    wire_type: Optional[str] = None


@dataclass(frozen=True)
class ProjectVersionRef:
    project_name: Optional[str]
    version_name: str
    version_link: Optional[str]


@dataclass(frozen=True)
class PolicyRule:
    id: str
    name: str
    description: Optional[str] = None
    enabled: Optional[bool] = None
    severity: Optional[str] = None
    expression: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class ComponentVersionRef:
    component_name: Optional[str]
    version_name: str
    component_id: Optional[str] = None
    component_version_id: Optional[str] = None
    link: Optional[str] = None
    origin_ids: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ContentItem:
    """
    Normalized, kind-tagged output record.

    Policy kinds fill ``policy_rules`` (and ``overridden_by`` for overrides);
    vulnerability notifications fill the three ``vulnerabilities_*`` tuples.
    """
    created_at: datetime
    kind: NotificationKind
    project_version: ProjectVersionRef
    component_name: Optional[str]
    component_version_name: Optional[str]
    component_id: Optional[str] = None
    component_version_id: Optional[str] = None
    policy_rules: Tuple[PolicyRule, ...] = ()
    overridden_by: Optional[UserRef] = None
    vulnerabilities_added: Tuple[VulnerabilitySourceRef, ...] = ()
    vulnerabilities_updated: Tuple[VulnerabilitySourceRef, ...] = ()
    vulnerabilities_deleted: Tuple[VulnerabilitySourceRef, ...] = ()

    def sort_key(self) -> Tuple:
        return (
            self.created_at,
            self.project_version.project_name or "",
            self.project_version.version_name or "",
            self.component_name or "",
            self.component_version_name or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation used by the CLI's result file."""
        def _vulns(refs):
            return [{"source": r.source, "id": r.vulnerability_id, "link": r.link} for r in refs]

        return {
            "created_at": self.created_at.isoformat(),
            "kind": self.kind.value,
            "project_name": self.project_version.project_name,
            "project_version_name": self.project_version.version_name,
            "project_version_link": self.project_version.version_link,
            "component_name": self.component_name,
            "component_version_name": self.component_version_name,
            "component_id": self.component_id,
            "component_version_id": self.component_version_id,
            "policy_rules": [{"id": r.id, "name": r.name, "severity": r.severity} for r in self.policy_rules],
            "overridden_by": self.overridden_by.display_name if self.overridden_by else None,
            "vulnerabilities_added": _vulns(self.vulnerabilities_added),
            "vulnerabilities_updated": _vulns(self.vulnerabilities_updated),
            "vulnerabilities_deleted": _vulns(self.vulnerabilities_deleted),
        }
