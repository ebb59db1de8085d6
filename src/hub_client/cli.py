# hub_client/cli.py

import argparse
import os
from argparse import RawTextHelpFormatter
from datetime import datetime, timedelta, timezone

from .config import ProxyInfo
from .exceptions import ValidationError
from .notifications.ingest import parse_hub_date


def _parse_date(value: str, flag: str) -> datetime:
    try:
        return parse_hub_date(value)
    except ValidationError as e:
        raise ValidationError(
            f"Invalid date for {flag}: '{value}' (expected ISO-8601, e.g. 2024-05-01T00:00:00Z)",
            details={"flag": flag, "value": value},
        ) from e


# --- Helper functions for common arguments ---
def add_proxy_options(parser):
    proxy_args = parser.add_argument_group("Proxy Options")
    proxy_args.add_argument("--proxy-host", help="Proxy host. Overrides HUB_PROXY_HOST env var.",
                            default=os.getenv("HUB_PROXY_HOST"), metavar="HOST")
    proxy_args.add_argument("--proxy-port", help="Proxy port. Overrides HUB_PROXY_PORT env var.", type=int,
                            default=ProxyInfo.parse_port(os.getenv("HUB_PROXY_PORT")), metavar="PORT")
    proxy_args.add_argument("--proxy-username", help="Proxy username. Overrides HUB_PROXY_USERNAME env var.",
                            default=os.getenv("HUB_PROXY_USERNAME"), metavar="USER")
    proxy_args.add_argument("--proxy-password", help="Proxy password. Overrides HUB_PROXY_PASSWORD env var.",
                            default=os.getenv("HUB_PROXY_PASSWORD"), metavar="PASSWORD")
    proxy_args.add_argument("--proxy-ignored-hosts",
                            help="Comma-separated host patterns (regular expressions) that bypass the proxy.\n"
                                 "Overrides HUB_PROXY_IGNORED_HOSTS env var.",
                            default=os.getenv("HUB_PROXY_IGNORED_HOSTS"), metavar="PATTERNS")


# --- Main Parsing Function ---
def parse_cmdline_args(argv=None):
    """
    Parse command line arguments.

    Returns:
        argparse.Namespace: Parsed command line arguments

    Raises:
        ValidationError: If required arguments are missing or invalid
    """
    parser = argparse.ArgumentParser(
        description="Hub Client - turn Hub notifications into content items and query policy status.",
        formatter_class=RawTextHelpFormatter,
        epilog="""
Environment Variables for Credentials:
  HUB_URL        : Hub base URL (e.g., https://hub.example.com)
  HUB_API_TOKEN  : Hub API Token
  HUB_USERNAME   : Hub Username (used when no API token is given)
  HUB_PASSWORD   : Hub Password

Example Usage:
  # Content items for yesterday's notifications, restricted to two policy rules
  hub-client --hub-url <URL> --api-token <TOKEN> \\
    notifications --start 2024-05-01T00:00:00Z --end 2024-05-02T00:00:00Z --policy-rule 1234 --policy-rule 5678

  # Policy status of a project version
  hub-client --hub-url <URL> --api-token <TOKEN> \\
    policy-status --project-name MYPROJ --project-version 1.0.0
"""
    )

    # --- Global Arguments (apply to all subcommands) ---
    global_args = parser.add_argument_group("Global Arguments")
    global_args.add_argument("--hub-url", help="Hub base URL. Overrides HUB_URL env var.",
                             default=os.getenv("HUB_URL"), metavar="URL")
    global_args.add_argument("--api-token", help="Hub API Token. Overrides HUB_API_TOKEN env var.",
                             default=os.getenv("HUB_API_TOKEN"), metavar="TOKEN")
    global_args.add_argument("--username", help="Hub Username. Overrides HUB_USERNAME env var.",
                             default=os.getenv("HUB_USERNAME"), metavar="USER")
    global_args.add_argument("--password", help="Hub Password. Overrides HUB_PASSWORD env var.",
                             default=os.getenv("HUB_PASSWORD"), metavar="PASSWORD")
    global_args.add_argument("--timeout", help="Request timeout in seconds (Default: 120)", type=int, default=120)
    global_args.add_argument("--max-workers", help="Concurrent requests per run (Default: 5)", type=int, default=5)
    global_args.add_argument(
        "--log",
        help="Logging level (Default: INFO)",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
    )
    add_proxy_options(parser)

    # --- Subparsers ---
    subparsers = parser.add_subparsers(dest='command', help='Available commands', required=True, metavar='COMMAND')

    # --- 'notifications' Subcommand ---
    notifications_parser = subparsers.add_parser(
        'notifications',
        help='Transform notifications in a time window into content items.',
        description='List Hub notifications created in a time window and print one line per content item.',
        formatter_class=RawTextHelpFormatter
    )
    notifications_parser.add_argument("--start", help="Window start, ISO-8601 (Default: 24 hours ago).", metavar="DATE")
    notifications_parser.add_argument("--end", help="Window end, ISO-8601 (Default: now).", metavar="DATE")
    notifications_parser.add_argument("--user", help="Only list the current user's notifications.",
                                      action="store_true", default=False)
    notifications_parser.add_argument("--policy-rule", help="Policy rule id or URL of interest. Repeatable.\n"
                                                            "When omitted, every policy rule is kept.",
                                      action="append", dest="policy_rules", default=[], metavar="RULE")
    notifications_parser.add_argument("--skip-failed", help="Skip notifications that fail to transform.",
                                      action="store_true", default=False)
    notifications_parser.add_argument("--path-result", help="Saves the content items to this file (JSON format).",
                                      metavar="PATH")

    # --- 'policy-status' Subcommand ---
    policy_status_parser = subparsers.add_parser(
        'policy-status',
        help='Show the policy status of a project version.',
        description='Show the overall policy status and per-status component counts of a project version.',
        formatter_class=RawTextHelpFormatter
    )
    policy_status_parser.add_argument("--project-name", help="Project name.", required=True, metavar="NAME")
    policy_status_parser.add_argument("--project-version", help="Project version name.", required=True,
                                      metavar="VERSION")

    args = parser.parse_args(argv)

    # --- Validation ---
    if not args.hub_url:
        raise ValidationError("Hub URL is required (--hub-url or HUB_URL)")
    if not args.api_token and not (args.username and args.password):
        raise ValidationError("Either an API token or a username and password are required")
    if args.max_workers < 1:
        raise ValidationError("--max-workers must be at least 1")

    if args.command == 'notifications':
        now = datetime.now(timezone.utc)
        args.end = _parse_date(args.end, "--end") if args.end else now
        args.start = _parse_date(args.start, "--start") if args.start else args.end - timedelta(days=1)
        if args.start > args.end:
            raise ValidationError("--start must not be after --end")

    return args
