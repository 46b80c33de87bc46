"""Utility modules for homereap.

This module exports commonly used utility functions.
"""

from homereap.utils.formatting import (
    console,
    create_outcome_table,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from homereap.utils.shell import CommandResult, command_exists, format_command, run_command

__all__ = [
    "CommandResult",
    "command_exists",
    "console",
    "create_outcome_table",
    "err_console",
    "format_command",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
]
