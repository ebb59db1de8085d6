# hub_client/__init__.py
"""
Hub client package: REST access to the Hub and the notification transformation pipeline.
"""

from .api import HubAPI
from .notifications import (
    ContentItem,
    NotificationDataService,
    PolicyNotificationFilter,
    RawNotification,
    TransformDispatcher,
)

__all__ = [
    'HubAPI',
    'ContentItem',
    'NotificationDataService',
    'PolicyNotificationFilter',
    'RawNotification',
    'TransformDispatcher',
]
