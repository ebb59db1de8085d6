# hub_client/handlers/notifications.py

import argparse
from collections import Counter
from typing import TYPE_CHECKING

from ..notifications import NotificationDataService, PolicyNotificationFilter
from ..utilities.error_handling import handler_error_wrapper
from ..utilities.output import display_content_items, save_results_to_file
from . import logger

if TYPE_CHECKING:
    from ..api import HubAPI


@handler_error_wrapper
def handle_notifications(hub: "HubAPI", params: argparse.Namespace) -> bool:
    """
    Handler for the 'notifications' command. Transforms the notifications of a
    time window into content items, prints them and optionally saves them.

    Args:
        hub: The Hub API client
        params: Command line parameters

    Returns:
        bool: True if the operation was successful
    """
    print(f"\n--- Running {params.command.upper()} Command ---")

    policy_filter = PolicyNotificationFilter.of(params.policy_rules)
    if policy_filter.is_empty:
        print("Keeping all policy rules.")
    else:
        print(f"Keeping {len(policy_filter.rule_ids)} policy rule(s): {', '.join(sorted(policy_filter.rule_ids))}")

    print(f"Fetching notifications from {params.start.isoformat()} to {params.end.isoformat()}...")
    service = NotificationDataService(hub, max_workers=params.max_workers)
    items = service.get_content_items(
        params.start,
        params.end,
        policy_filter=policy_filter,
        user=params.user,
        skip_failed=params.skip_failed,
    )
    logger.info("Produced %d content items", len(items))

    display_content_items(items)
    if items:
        counts = Counter(item.kind.value for item in items)
        print("\nSummary:")
        for kind, count in sorted(counts.items()):
            print(f"  {kind:<24} {count}")

    if params.path_result:
        print(f"\nSaving content items to '{params.path_result}'...")
        save_results_to_file(params.path_result, [item.to_dict() for item in items])

    return True
