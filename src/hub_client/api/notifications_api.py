from datetime import datetime, timezone
from typing import Any, Dict, List

import logging

from .helpers.api_base import APIBase

logger = logging.getLogger("hub-client")

NOTIFICATIONS_PATH = "/api/notifications"
CURRENT_USER_PATH = "/api/current-user"


def format_hub_date(value: datetime) -> str:
    """Format a datetime the way the Hub expects date filters: UTC, millisecond precision, 'Z' suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


class NotificationsAPI(APIBase):
    """
    Hub API Notification Operations.
    """

    def list_notifications(self, start_date: datetime, end_date: datetime) -> List[Dict[str, Any]]:
        """
        Retrieves every notification created between the two dates.

        Returns:
            List[Dict[str, Any]]: NotificationView documents, in the order the Hub returns them

        Raises:
            ApiError: If there are API issues
            NetworkError: If there are network issues
        """
        params = {"startDate": format_hub_date(start_date), "endDate": format_hub_date(end_date)}
        logger.debug(f"Listing notifications between {params['startDate']} and {params['endDate']}...")
        notifications = self._get_all_items(NOTIFICATIONS_PATH, params=params)
        logger.debug(f"Found {len(notifications)} notifications.")
        return notifications

    def list_user_notifications(self, start_date: datetime, end_date: datetime) -> List[Dict[str, Any]]:
        """
        Retrieves the current user's notifications created between the two dates.

        Returns:
            List[Dict[str, Any]]: NotificationUserView documents (these carry a notificationState)

        Raises:
            LinkNotFound: If the current user resource has no 'notifications' link
            ApiError: If there are API issues
            NetworkError: If there are network issues
        """
        current_user = self._get_json(CURRENT_USER_PATH)
        notifications_url = self.get_link(current_user, "notifications")
        params = {"startDate": format_hub_date(start_date), "endDate": format_hub_date(end_date)}
        logger.debug(f"Listing notifications for user '{current_user.get('userName', 'unknown')}'...")
        notifications = self._get_all_items(notifications_url, params=params)
        logger.debug(f"Found {len(notifications)} user notifications.")
        return notifications
