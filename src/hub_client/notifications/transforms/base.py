import logging
import threading
from abc import ABC, abstractmethod
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Tuple, Type

from ...exceptions import Cancelled, HubClientError, TransformError, ValidationError
from ..filters import PolicyNotificationFilter
from ..models import (
    ComponentVersionRef,
    ComponentVersionStatus,
    ContentItem,
    NotificationKind,
    PolicyRule,
    ProjectVersionRef,
    RawNotification,
)
from ..resolver import EntityResolver

logger = logging.getLogger("hub-client")

# How often a thread waiting on rule fetches re-checks for cancellation (seconds)
CANCEL_POLL_INTERVAL = 0.1


def check_cancelled(cancel_event: Optional[threading.Event]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise Cancelled("Notification transform was cancelled", code="cancelled")


class NotificationTransform(ABC):
    """
    Shared resolve → filter → fetch → emit algorithm for one notification kind.

    Subclasses set ``kind`` and implement two hooks: ``project_versions`` (which
    project versions the notification affects) and ``rows`` (which component
    versions it affects). ``create_item`` may be overridden to add kind-specific
    fields to the emitted ContentItem.

    A call either returns every item for the notification or raises; items built
    for earlier rows are never returned when a later resolution fails.
    """

    kind: NotificationKind
    content_type: Type = object

    def __init__(self, resolver: EntityResolver, max_workers: int = 5):
        self.resolver = resolver
        self.max_workers = max_workers

    def content(self, notification: RawNotification):
        if not isinstance(notification.content, self.content_type):
            raise ValidationError(
                f"{type(self).__name__} cannot handle content of type {type(notification.content).__name__}",
                code="unexpected_content",
                details={"href": notification.href},
            )
        return notification.content

    @abstractmethod
    def project_versions(self, notification: RawNotification,
                         cancel_event: Optional[threading.Event]) -> Sequence[ProjectVersionRef]:
        """Resolve the project version(s) the notification applies to."""

    @abstractmethod
    def rows(self, notification: RawNotification,
             cancel_event: Optional[threading.Event]) -> Sequence[ComponentVersionStatus]:
        """The affected component-version rows, in payload order."""

    def create_item(self, notification: RawNotification, project_version: ProjectVersionRef,
                    row: ComponentVersionStatus, policy_rules: Tuple[PolicyRule, ...]) -> ContentItem:
        return ContentItem(
            created_at=notification.created_at,
            kind=self.kind,
            project_version=project_version,
            component_name=row.component_name,
            component_version_name=row.component_version_name,
            component_id=row.component_id,
            component_version_id=row.component_version_id,
            policy_rules=policy_rules,
        )

    def transform(self, notification: RawNotification,
                  policy_filter: Optional[PolicyNotificationFilter] = None,
                  cancel_event: Optional[threading.Event] = None) -> List[ContentItem]:
        """
        Expand a notification into content items.

        Raises:
            TransformError: Wrapping the resolution or validation failure that aborted the call
            Cancelled: If *cancel_event* was set while the call was in flight
        """
        policy_filter = policy_filter or PolicyNotificationFilter()
        try:
            return self._transform(notification, policy_filter, cancel_event)
        except (Cancelled, TransformError):
            raise
        except HubClientError as e:
            logger.debug("Transform of %s notification %s failed: %s", self.kind.value, notification.href, e.message)
            raise TransformError(
                f"Failed to transform {self.kind.value} notification: {e.message}",
                cause=e,
                details={"href": notification.href, "kind": self.kind.value, "cause": type(e).__name__},
            ) from e

    def _transform(self, notification: RawNotification, policy_filter: PolicyNotificationFilter,
                   cancel_event: Optional[threading.Event]) -> List[ContentItem]:
        check_cancelled(cancel_event)
        project_versions = self.project_versions(notification, cancel_event)
        if not project_versions:
            return []
        rows = self.rows(notification, cancel_event)

        # Filter before fetching so excluded rules are never resolved
        selected: List[Tuple[ComponentVersionStatus, Tuple[str, ...]]] = []
        for row in rows:
            passing = policy_filter.passing_in_order(row.policy_rule_ids)
            if row.policy_rule_ids and not passing:
                logger.debug("Skipping %s/%s: none of its policy rules pass the filter",
                             row.component_name, row.component_version_name)
                continue
            selected.append((row, passing))

        component_versions: Dict[str, ComponentVersionRef] = {}
        selected = [(self.complete_row(row, cancel_event, component_versions), passing)
                    for row, passing in selected]

        rule_ids: List[str] = []
        for _, passing in selected:
            rule_ids.extend(r for r in passing if r not in rule_ids)
        rules = self._resolve_policy_rules(rule_ids, cancel_event)

        items = []
        for project_version in project_versions:
            for row, passing in selected:
                items.append(self.create_item(notification, project_version, row,
                                              tuple(rules[r] for r in passing)))
        check_cancelled(cancel_event)
        return items

    def complete_row(self, row: ComponentVersionStatus, cancel_event: Optional[threading.Event],
                     cache: Optional[Dict[str, ComponentVersionRef]] = None) -> ComponentVersionStatus:
        """
        Fill in the component names and ids a row lacks from its component version link.

        Rows that are already complete, or that carry no link to resolve, are returned unchanged.
        """
        complete = all((row.component_name, row.component_version_name,
                        row.component_id, row.component_version_id))
        link = row.component_version_link
        if complete or not link:
            return row

        if cache is not None and link in cache:
            component_version = cache[link]
        else:
            check_cancelled(cancel_event)
            logger.debug("Row %s/%s lacks component details, resolving %s",
                         row.component_name, row.component_version_name, link)
            component_version = self.resolver.resolve_component_version(link)
            if cache is not None:
                cache[link] = component_version
        return replace(
            row,
            component_name=row.component_name or component_version.component_name,
            component_version_name=row.component_version_name or component_version.version_name,
            component_id=row.component_id or component_version.component_id,
            component_version_id=row.component_version_id or component_version.component_version_id,
        )

    def _resolve_rule(self, rule_id: str, cancel_event: Optional[threading.Event]) -> PolicyRule:
        check_cancelled(cancel_event)
        return self.resolver.resolve_policy_rule(rule_id)

    def _resolve_policy_rules(self, rule_ids: List[str],
                              cancel_event: Optional[threading.Event]) -> Dict[str, PolicyRule]:
        """Resolve the rules concurrently; the result is keyed by rule id so order is never lost."""
        if not rule_ids:
            return {}
        if self.max_workers <= 1 or (len(rule_ids) == 1 and cancel_event is None):
            return {rule_id: self._resolve_rule(rule_id, cancel_event) for rule_id in rule_ids}

        resolved: Dict[str, PolicyRule] = {}
        # No context manager: leaving early must not wait for fetches still in flight
        executor = ThreadPoolExecutor(max_workers=min(self.max_workers, len(rule_ids)))
        future_to_rule = {
            executor.submit(self._resolve_rule, rule_id, cancel_event): rule_id
            for rule_id in rule_ids
        }
        pending = set(future_to_rule)
        try:
            while pending:
                check_cancelled(cancel_event)
                done, pending = wait(pending, timeout=CANCEL_POLL_INTERVAL, return_when=FIRST_COMPLETED)
                for future in done:
                    resolved[future_to_rule[future]] = future.result()
        finally:
            for future in pending:
                future.cancel()
            executor.shutdown(wait=False)
        return resolved
