import threading
from dataclasses import replace
from typing import Optional, Sequence, Tuple

from ..models import (
    ComponentVersionStatus,
    ContentItem,
    NotificationKind,
    PolicyNotificationContent,
    PolicyRule,
    ProjectVersionRef,
    RawNotification,
)
from .base import NotificationTransform, check_cancelled


class PolicyNotificationTransform(NotificationTransform):
    """
    Common shape of the policy kinds: one project version (resolved from the
    payload link, because the payload carries no reliable version name) and one
    row per component version status.
    """

    content_type = PolicyNotificationContent

    def project_versions(self, notification: RawNotification,
                         cancel_event: Optional[threading.Event]) -> Sequence[ProjectVersionRef]:
        content = self.content(notification)
        check_cancelled(cancel_event)
        return [self.resolver.resolve_project_version(content.project_version_link,
                                                      project_name=content.project_name)]

    def rows(self, notification: RawNotification,
             cancel_event: Optional[threading.Event]) -> Sequence[ComponentVersionStatus]:
        return self.content(notification).component_version_statuses


class PolicyViolationTransform(PolicyNotificationTransform):
    kind = NotificationKind.RULE_VIOLATION


class PolicyViolationClearedTransform(PolicyNotificationTransform):
    kind = NotificationKind.RULE_VIOLATION_CLEARED


class PolicyOverrideTransform(PolicyNotificationTransform):
    kind = NotificationKind.POLICY_OVERRIDE

    def create_item(self, notification: RawNotification, project_version: ProjectVersionRef,
                    row: ComponentVersionStatus, policy_rules: Tuple[PolicyRule, ...]) -> ContentItem:
        item = super().create_item(notification, project_version, row, policy_rules)
        return replace(item, overridden_by=row.overridden_by)
