import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from ..exceptions import TransformError, UnsupportedNotificationKind
from .dispatcher import TransformDispatcher
from .filters import PolicyNotificationFilter
from .ingest import to_raw_notification
from .models import ContentItem, RawNotification
from .resolver import EntityResolver

if TYPE_CHECKING:
    from ..api import HubAPI

logger = logging.getLogger("hub-client")


class NotificationDataService:
    """
    Lists notifications for a time window and turns them into content items.

    This is the driver around the pipeline: notifications are transformed
    concurrently, kinds without a transform are skipped with a warning, and the
    combined result is returned in a stable order.
    """

    def __init__(self, api: "HubAPI", dispatcher: Optional[TransformDispatcher] = None, max_workers: int = 5):
        self.api = api
        self.max_workers = max_workers
        self.dispatcher = dispatcher or TransformDispatcher(EntityResolver(api), max_workers=max_workers)

    def get_notifications(self, start_date: datetime, end_date: datetime, user: bool = False) -> List[RawNotification]:
        if user:
            views = self.api.list_user_notifications(start_date, end_date)
        else:
            views = self.api.list_notifications(start_date, end_date)
        return [to_raw_notification(view) for view in views]

    def get_content_items(
        self,
        start_date: datetime,
        end_date: datetime,
        policy_filter: Optional[PolicyNotificationFilter] = None,
        user: bool = False,
        skip_failed: bool = False,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[ContentItem]:
        """
        Transform every notification in the window.

        Args:
            start_date: Window start
            end_date: Window end
            policy_filter: Policy rules of interest; None keeps every rule
            user: List the current user's notifications instead of all notifications
            skip_failed: Log and skip notifications whose transform fails instead of raising
            cancel_event: Set to abandon outstanding transforms

        Returns:
            List[ContentItem]: Items of all notifications, sorted by ContentItem.sort_key

        Raises:
            TransformError: For the first failed notification, unless skip_failed is set
            Cancelled: If cancel_event was set
        """
        notifications = self.get_notifications(start_date, end_date, user=user)
        if not notifications:
            return []
        logger.debug(f"Transforming {len(notifications)} notifications...")

        items: List[ContentItem] = []
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_notification = {
                executor.submit(self.dispatcher.transform, notification, policy_filter, cancel_event): notification
                for notification in notifications
            }
            try:
                for future in as_completed(future_to_notification):
                    notification = future_to_notification[future]
                    try:
                        items.extend(future.result())
                    except UnsupportedNotificationKind as e:
                        logger.warning("Skipping notification %s: %s", notification.href, e.message)
                    except TransformError as e:
                        if not skip_failed:
                            logger.error("Failed to transform notification %s: %s", notification.href, e.message)
                            raise
                        logger.warning("Skipping notification %s: %s", notification.href, e.message)
            finally:
                for future in future_to_notification:
                    future.cancel()

        items.sort(key=ContentItem.sort_key)
        logger.debug(f"Produced {len(items)} content items.")
        return items
