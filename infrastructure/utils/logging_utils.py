"""
UTC timestamped console logging for CDK synthesis runs.
"""

from datetime import datetime, UTC
from typing import Any, Dict, Optional


def _utc_timestamp() -> str:
    """
    Generate the current UTC timestamp string.

    Returns:
        str: Timestamp formatted as YYYY-MM-DD HH:MM:SS in UTC.
    """
    return datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")


def log_section_start(section: str) -> None:
    """
    Log the start of a synthesis step.

    Args:
        section (str): Name of the step that is beginning.
    """
    print(f"[{_utc_timestamp()}] Starting: {section}")


def log_section_complete(section: str, details: Optional[str] = None) -> None:
    """
    Log the completion of a synthesis step.

    Args:
        section (str): Name of the step that finished.
        details (Optional[str]): Extra context appended after a dash.
    """
    suffix = f" - {details}" if details else ""
    print(f"[{_utc_timestamp()}] Completed: {section}{suffix}")


def log_progress(section: str, message: str) -> None:
    """Log an intermediate message for a running step."""
    print(f"[{_utc_timestamp()}] {section}: {message}")


def log_error(section: str, error: Exception | str) -> None:
    """
    Log an error raised while running a step.

    Args:
        section (str): Name of the step where the error occurred.
        error (Exception | str): Exception instance or error message.
    """
    print(f"[{_utc_timestamp()}] Error in {section}: {error}")


def describe_topology(options: Dict[str, Any]) -> str:
    """
    Render the stack variant options as a single log-friendly line.

    Args:
        options: Keyword arguments passed to SessionManagerDemoStack.

    Returns:
        str: e.g. "database=on, public instance=off, cidr=10.0.0.0/16, nat gateways=1"
    """

    def _on_off(flag: bool) -> str:
        return "on" if flag else "off"

    return (
        f"database={_on_off(options['include_database'])}, "
        f"public instance={_on_off(options['include_public_instance'])}, "
        f"cidr={options['vpc_cidr']}, "
        f"nat gateways={options['nat_gateways']}"
    )
