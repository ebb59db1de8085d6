"""
One transform per notification kind, all built on NotificationTransform.
"""

from .base import NotificationTransform
from .policy import (
    PolicyNotificationTransform,
    PolicyViolationTransform,
    PolicyViolationClearedTransform,
    PolicyOverrideTransform,
)
from .vulnerability import VulnerabilityTransform

__all__ = [
    'NotificationTransform',
    'PolicyNotificationTransform',
    'PolicyViolationTransform',
    'PolicyViolationClearedTransform',
    'PolicyOverrideTransform',
    'VulnerabilityTransform',
]
