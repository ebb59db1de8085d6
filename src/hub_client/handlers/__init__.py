# hub_client/handlers/__init__.py

import logging

# Common logger for all handlers
logger = logging.getLogger("hub-client")

# Import handlers
from .notifications import handle_notifications
from .policy_status import handle_policy_status

__all__ = [
    'handle_notifications',
    'handle_policy_status',
]
