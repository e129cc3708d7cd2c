"""
Module: utils
Purpose: Shared helper utilities for Simple Archiver.
"""

COLOR_RESET = "\033[0m"
COLOR_GREEN = "\033[32m"
COLOR_RED = "\033[31m"
COLOR_YELLOW = "\033[33m"
COLOR_CYAN = "\033[36m"

BOLD = "\033[1m"


def pluralize(count: int, noun: str) -> str:
    """
    Return "<count> <noun>" with a trailing "s" unless count is exactly one.
    """
    return f"{count} {noun}{'' if count == 1 else 's'}"


def log_error(message: str):
    """
    Log an error message.

    Args:
        message: Error message to log.

    Returns:
        None

    Raises:
        None
    """
    from . import reporting  # Local import to avoid circular dependency rules

    reporting.write_log([f"[ERROR] {message}"])


def log_warning(message: str):
    """
    Log a warning message.

    Args:
        message: Warning message to log.

    Returns:
        None
    """
    from . import reporting  # Local import to avoid circular dependency rules

    reporting.write_log([f"[WARNING] {message}"])


def log_info(message: str):
    """
    Log an informational message.
    """
    from . import reporting  # Local import to avoid circular dependency rules

    reporting.write_log([f"[INFO] {message}"])


def color_text(text: str, color: str, enabled: bool = True) -> str:
    """
    Wrap text with ANSI color codes.

    Args:
        text: Text to wrap.
        color: ANSI color code.
        enabled: When False the text is returned unchanged.

    Returns:
        Colored text string.

    Raises:
        None
    """
    if not enabled:
        return text
    return f"{color}{text}{COLOR_RESET}"
