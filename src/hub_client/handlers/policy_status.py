# hub_client/handlers/policy_status.py

import argparse
from typing import TYPE_CHECKING

from ..utilities.error_handling import handler_error_wrapper
from . import logger

if TYPE_CHECKING:
    from ..api import HubAPI


@handler_error_wrapper
def handle_policy_status(hub: "HubAPI", params: argparse.Namespace) -> bool:
    """
    Handler for the 'policy-status' command. Prints the overall policy status of
    a project version and the number of components in each status.

    Returns:
        bool: True when the project version is not in violation
    """
    print(f"\n--- Running {params.command.upper()} Command ---")
    print(f"Fetching policy status for '{params.project_name}' version '{params.project_version}'...")

    status = hub.get_policy_status_for_project_and_version(params.project_name, params.project_version)
    overall = status.get("overallStatus", "UNKNOWN")
    logger.debug("Policy status response: %s", status)

    print(f"\nOverall status: {overall}")
    counts = status.get("componentVersionStatusCounts") or []
    if counts:
        print("Components by status:")
        for entry in counts:
            print(f"  {entry.get('name', '?'):<24} {entry.get('value', 0)}")

    return overall != "IN_VIOLATION"
