"""
Notification transformation pipeline.

Raw Hub notifications are ingested into RawNotification records, dispatched by
kind to a transform, and expanded into ContentItem records.
"""

from .models import (
    AffectedProjectVersion,
    ComponentVersionRef,
    ComponentVersionStatus,
    ContentItem,
    NotificationKind,
    PolicyNotificationContent,
    PolicyRule,
    ProjectVersionRef,
    RawNotification,
    UserRef,
    VulnerabilityNotificationContent,
    VulnerabilitySourceRef,
)
from .filters import PolicyNotificationFilter
from .ingest import to_raw_notification
from .resolver import EntityResolver
from .dispatcher import TransformDispatcher
from .data_service import NotificationDataService

__all__ = [
    'AffectedProjectVersion',
    'ComponentVersionRef',
    'ComponentVersionStatus',
    'ContentItem',
    'NotificationKind',
    'PolicyNotificationContent',
    'PolicyRule',
    'ProjectVersionRef',
    'RawNotification',
    'UserRef',
    'VulnerabilityNotificationContent',
    'VulnerabilitySourceRef',
    'PolicyNotificationFilter',
    'to_raw_notification',
    'EntityResolver',
    'TransformDispatcher',
    'NotificationDataService',
]
