"""
Display and persistence helpers shared by the CLI handlers.
"""

import json
import os
import logging
from typing import Any, List, Optional, Union

from ..notifications.models import ContentItem

logger = logging.getLogger("hub-client")


def format_duration(duration_seconds: Optional[Union[int, float]]) -> str:
    """Formats a duration in seconds into a 'X minutes, Y seconds' string."""
    if duration_seconds is None: return "N/A"
    try:
        duration_seconds = round(float(duration_seconds))
    except (ValueError, TypeError):
        return "Invalid Duration"

    minutes, seconds = divmod(int(duration_seconds), 60)
    if minutes > 0 and seconds > 0: return f"{minutes} minutes, {seconds} seconds"
    elif minutes > 0: return f"{minutes} minutes"
    elif seconds == 1: return f"1 second"
    else: return f"{seconds} seconds"


def format_content_item(item: ContentItem) -> str:
    """One-line summary of a content item."""
    project = f"{item.project_version.project_name} {item.project_version.version_name}"
    component = f"{item.component_name or '?'} {item.component_version_name or '?'}"
    line = f"[{item.created_at.isoformat()}] {item.kind.value:<22} {project} :: {component}"
    if item.policy_rules:
        line += " | rules: " + ", ".join(rule.name for rule in item.policy_rules)
    if item.overridden_by:
        line += f" | overridden by {item.overridden_by.display_name}"
    vuln_counts = (len(item.vulnerabilities_added), len(item.vulnerabilities_updated), len(item.vulnerabilities_deleted))
    if any(vuln_counts):
        line += " | vulnerabilities +{} ~{} -{}".format(*vuln_counts)
    return line


def display_content_items(items: List[ContentItem]) -> None:
    print(f"\n--- Content Items ({len(items)}) ---")
    if not items:
        print("No content items were produced for this time window.")
        return
    for item in items:
        print(format_content_item(item))


def save_results_to_file(filepath: str, results: Any) -> None:
    """Helper to save results to a JSON file."""
    output_dir = os.path.dirname(filepath) or "."
    try:
        os.makedirs(output_dir, exist_ok=True)
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(results, f, indent=2, ensure_ascii=False)
        print(f"Saved results to: {filepath}")
    except (IOError, OSError) as e:
        logger.warning("Failed to save results to %s: %s", filepath, e)
        print(f"\nWarning: Failed to save results to {filepath}: {e}")
