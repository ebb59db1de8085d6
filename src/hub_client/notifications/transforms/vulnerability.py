import threading
from dataclasses import replace
from typing import Optional, Sequence, Tuple

from ..models import (
    ComponentVersionStatus,
    ContentItem,
    NotificationKind,
    PolicyRule,
    ProjectVersionRef,
    RawNotification,
    VulnerabilityNotificationContent,
)
from .base import NotificationTransform, check_cancelled


class VulnerabilityTransform(NotificationTransform):
    """
    Vulnerability notifications name a single component version and fan out
    over every project version that uses it. They reference no policy rules,
    so each item carries an empty rule list.
    """

    kind = NotificationKind.VULNERABILITY
    content_type = VulnerabilityNotificationContent

    def project_versions(self, notification: RawNotification,
                         cancel_event: Optional[threading.Event]) -> Sequence[ProjectVersionRef]:
        refs = []
        for affected in self.content(notification).affected_project_versions:
            if affected.project_version_name:
                refs.append(ProjectVersionRef(
                    project_name=affected.project_name,
                    version_name=affected.project_version_name,
                    version_link=affected.project_version_link,
                ))
            else:
                check_cancelled(cancel_event)
                refs.append(self.resolver.resolve_project_version(affected.project_version_link,
                                                                  project_name=affected.project_name))
        return refs

    def rows(self, notification: RawNotification,
             cancel_event: Optional[threading.Event]) -> Sequence[ComponentVersionStatus]:
        content = self.content(notification)
        return [ComponentVersionStatus(
            component_name=content.component_name,
            component_version_name=content.component_version_name,
            component_id=content.component_id,
            component_version_id=content.component_version_id,
            component_version_link=content.component_version_link,
        )]

    def create_item(self, notification: RawNotification, project_version: ProjectVersionRef,
                    row: ComponentVersionStatus, policy_rules: Tuple[PolicyRule, ...]) -> ContentItem:
        content = self.content(notification)
        item = super().create_item(notification, project_version, row, policy_rules)
        return replace(
            item,
            vulnerabilities_added=content.new_vulnerabilities,
            vulnerabilities_updated=content.updated_vulnerabilities,
            vulnerabilities_deleted=content.deleted_vulnerabilities,
        )
