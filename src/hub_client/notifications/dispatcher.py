import logging
import threading
from typing import Dict, Iterable, List, Optional

from ..exceptions import UnsupportedNotificationKind
from .filters import PolicyNotificationFilter
from .models import ContentItem, NotificationKind, RawNotification
from .resolver import EntityResolver
from .transforms import (
    NotificationTransform,
    PolicyOverrideTransform,
    PolicyViolationClearedTransform,
    PolicyViolationTransform,
    VulnerabilityTransform,
)

logger = logging.getLogger("hub-client")


def default_transforms(resolver: EntityResolver, max_workers: int = 5) -> List[NotificationTransform]:
    return [
        PolicyViolationTransform(resolver, max_workers),
        PolicyViolationClearedTransform(resolver, max_workers),
        PolicyOverrideTransform(resolver, max_workers),
        VulnerabilityTransform(resolver, max_workers),
    ]


class TransformDispatcher:
    """
    Routes each notification to the transform registered for its kind.

    The dispatcher holds only the registry; every ``transform`` call is
    independent and may run concurrently with others.
    """

    def __init__(self, resolver: EntityResolver, max_workers: int = 5,
                 transforms: Optional[Iterable[NotificationTransform]] = None):
        self.resolver = resolver
        self._registry: Dict[NotificationKind, NotificationTransform] = {}
        if transforms is None:
            transforms = default_transforms(resolver, max_workers)
        for transform in transforms:
            self.register(transform)

    def register(self, transform: NotificationTransform, kind: Optional[NotificationKind] = None) -> None:
        """Register *transform* under *kind*, which defaults to the transform's own kind."""
        self._registry[kind or transform.kind] = transform

    def supports(self, kind: NotificationKind) -> bool:
        return kind in self._registry

    @property
    def supported_kinds(self) -> List[NotificationKind]:
        return list(self._registry)

    def transform(self, notification: RawNotification,
                  policy_filter: Optional[PolicyNotificationFilter] = None,
                  cancel_event: Optional[threading.Event] = None) -> List[ContentItem]:
        """
        Transform one notification into its content items.

        Raises:
            UnsupportedNotificationKind: If no transform is registered for the notification's kind
            TransformError: If the transform failed; the root cause is on ``.cause``
            Cancelled: If *cancel_event* was set while the call was in flight
        """
        transform = self._registry.get(notification.kind)
        if transform is None:
            wire_type = notification.wire_type or notification.kind.value
            raise UnsupportedNotificationKind(
                f"No transform registered for notification kind '{wire_type}'",
                code="unsupported_kind",
                details={"kind": wire_type, "href": notification.href},
            )
        logger.debug("Dispatching %s notification %s to %s",
                     notification.kind.value, notification.href, type(transform).__name__)
        return transform.transform(notification, policy_filter, cancel_event)
