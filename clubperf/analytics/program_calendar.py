#!/usr/bin/env python3
"""
Program Calendar

Snapshot date parsing and the month-indexed goal checkpoints of the
program year, which runs July through June.
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)

# Minimum goals achieved by calendar month for a club to be on track
DCP_CHECKPOINTS: Dict[int, int] = {
    7: 0,
    8: 1, 9: 1,
    10: 2, 11: 2,
    12: 3, 1: 3,
    2: 4, 3: 4,
    4: 5, 5: 5, 6: 5,
}

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def parse_snapshot_date(value: Union[str, date]) -> date:
    """
    Parse a YYYY-MM-DD snapshot date.

    Raises:
        ValueError: If the value is not an ISO calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value)[:10], "%Y-%m-%d").date()
    except ValueError as e:
        raise ValueError(f"Invalid snapshot date: {value!r}") from e


def get_program_month(snapshot_date: Union[str, date]) -> int:
    """Calendar month (1-12) of a snapshot date."""
    return parse_snapshot_date(snapshot_date).month


def get_dcp_checkpoint(month: int, config: Optional[Dict[str, Any]] = None) -> int:
    """
    Minimum goals a club needs by the given calendar month.

    Args:
        month: Calendar month, 1-12
        config: Optional config with a DCP_CHECKPOINTS table

    Returns:
        Required goal count

    Raises:
        ValueError: If month is outside 1-12
    """
    if not isinstance(month, int) or month < 1 or month > 12:
        raise ValueError(f"Invalid month: {month}. Must be 1-12")

    table = DCP_CHECKPOINTS
    if config and config.get('DCP_CHECKPOINTS'):
        table = config['DCP_CHECKPOINTS']
    return table[month]


def get_month_name(month: int) -> str:
    """English month name, or 'Unknown' for an invalid month."""
    if isinstance(month, int) and 1 <= month <= 12:
        return MONTH_NAMES[month - 1]
    return "Unknown"


def previous_program_year_date(current_date: Union[str, date]) -> str:
    """
    Same month and day one year earlier, as YYYY-MM-DD.

    February 29 maps to February 28 of the previous year.
    """
    current = parse_snapshot_date(current_date)
    try:
        previous = current.replace(year=current.year - 1)
    except ValueError:
        previous = current.replace(year=current.year - 1, day=28)
    return previous.isoformat()
