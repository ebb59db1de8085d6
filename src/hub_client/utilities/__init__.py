"""
Utilities package for the Hub CLI.

This package contains error handling and output helpers used by the command handlers.
"""

from .error_handling import format_and_print_error, handler_error_wrapper
from .output import (
    format_duration,
    format_content_item,
    display_content_items,
    save_results_to_file,
)

__all__ = [
    # Error handling
    'format_and_print_error',
    'handler_error_wrapper',
    # Output
    'format_duration',
    'format_content_item',
    'display_content_items',
    'save_results_to_file',
]
