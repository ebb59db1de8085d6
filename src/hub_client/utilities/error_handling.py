"""
Error handling utilities for the Hub CLI.

This module contains functions for standardized error handling and formatting
across all CLI handlers.
"""

import logging
import argparse
import functools
from typing import Callable

from ..exceptions import (
    HubClientError,
    ApiError,
    NetworkError,
    ConfigurationError,
    AuthenticationError,
    ValidationError,
    ProjectNotFoundError,
    EntityNotFound,
    LinkNotFound,
    EntityResolutionError,
    TransformError,
    Cancelled,
)

logger = logging.getLogger("hub-client")


def format_and_print_error(error: Exception, handler_name: str, params: argparse.Namespace):
    """
    Formats and prints a standardized error message for CLI users.

    Args:
        error: The exception that occurred
        handler_name: Name of the handler where the error occurred
        params: Command line parameters
    """
    command = getattr(params, 'command', 'unknown')

    error_message = getattr(error, 'message', str(error))
    error_code = getattr(error, 'code', None)
    error_details = getattr(error, 'details', {})

    # Report transform failures by their root cause
    if isinstance(error, TransformError) and error.cause is not None:
        print(f"\n❌ A notification could not be transformed")
        print(f"   {error_message}")
        error = error.cause

    if isinstance(error, ProjectNotFoundError):
        print(f"\n❌ Cannot continue: The requested project does not exist")
        print(f"   Project '{getattr(params, 'project_name', 'unknown')}' was not found on the Hub.")
        print(f"\n💡 Please check:")
        print(f"   • The project name is spelled correctly")
        print(f"   • You have access to the project")

    elif isinstance(error, EntityNotFound):
        print(f"\n❌ A referenced Hub resource no longer exists")
        print(f"   {error.message}")
        print(f"\n💡 The resource may have been deleted after the notification was raised")

    elif isinstance(error, LinkNotFound):
        print(f"\n❌ Unexpected Hub response shape")
        print(f"   {error.message}")
        print(f"\n💡 This usually means the Hub version is not compatible with this client")

    elif isinstance(error, EntityResolutionError):
        print(f"\n❌ Failed to resolve a Hub resource")
        print(f"   {error.message}")
        print(f"\n💡 The request may be retried later")

    elif isinstance(error, NetworkError):
        print(f"\n❌ Network connectivity issue")
        print(f"   {error_message}")
        print(f"\n💡 Please check:")
        print(f"   • The Hub server is accessible")
        print(f"   • The Hub URL is correct: {getattr(params, 'hub_url', '<not specified>')}")
        print(f"   • The proxy settings, if any")

    elif isinstance(error, ApiError):
        print(f"\n❌ Hub API error")
        print(f"   {error_message}")
        if error_code:
            print(f"   Error code: {error_code}")
            print(f"\n💡 The Hub reported an issue with your request")

    elif isinstance(error, ValidationError):
        print(f"\n❌ Invalid input or configuration")
        print(f"   {error_message}")
        print(f"\n💡 Please check your command-line arguments")

    elif isinstance(error, ConfigurationError):
        print(f"\n❌ Configuration error")
        print(f"   {error_message}")
        print(f"\n💡 Please check your command-line arguments and configuration")

    elif isinstance(error, AuthenticationError):
        print(f"\n❌ Authentication failed")
        print(f"   {error_message}")
        print(f"\n💡 Please check:")
        print(f"   • Your API token or username/password are correct")
        print(f"   • You have the necessary permissions")

    elif isinstance(error, Cancelled):
        print(f"\n❌ Operation cancelled")

    else:
        print(f"\n❌ Error executing '{command}' command: {error_message}")

    # Show error code if available (and not already shown)
    if error_code and not isinstance(error, ApiError):
        print(f"\nError code: {error_code}")

    if getattr(params, 'log', 'INFO') == 'DEBUG' and error_details:
        print("\nDetailed error information:")
        for key, value in error_details.items():
            print(f"  • {key}: {value}")

    print(f"\nFor more details, run with --log DEBUG for verbose output")


def handler_error_wrapper(handler_func: Callable) -> Callable:
    """
    A decorator that wraps handler functions with standardized error handling.

    The wrapper catches exceptions, prints a user-friendly error message, and
    re-raises the exceptions for proper exit code handling in the main CLI.
    Unexpected exceptions are wrapped in a HubClientError.

    Example:
        @handler_error_wrapper
        def handle_policy_status(hub, params):
            ...
    """
    @functools.wraps(handler_func)
    def wrapper(hub, params):
        try:
            handler_name = handler_func.__name__
            command_name = params.command if hasattr(params, 'command') else 'unknown'
            logger.debug(f"Starting {handler_name} for command '{command_name}'")

            return handler_func(hub, params)

        except HubClientError as e:
            logger.debug(f"Expected error in {handler_func.__name__}: {type(e).__name__}: {e.message}")
            format_and_print_error(e, handler_func.__name__, params)
            raise

        except Exception as e:
            logger.error(f"Unexpected error in {handler_func.__name__}: {e}", exc_info=True)

            cli_error = HubClientError(
                f"Failed to execute {params.command if hasattr(params, 'command') else 'command'}: {str(e)}",
                details={"error": str(e), "handler": handler_func.__name__}
            )
            format_and_print_error(cli_error, handler_func.__name__, params)
            raise cli_error from e

    return wrapper
