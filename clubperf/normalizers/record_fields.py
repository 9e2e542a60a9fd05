#!/usr/bin/env python3
"""
Record Field Extraction

Helpers that read logical fields out of parsed export records (header -> cell
dicts) using ordered alias lists, plus the identifier and label parsing rules
shared by every consumer of the exports.
"""

import math
import numbers
import re
from typing import Any, Dict, Iterable, Optional, Tuple


_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_DIVISION_LABEL = re.compile(r"^Division\s+(.+)$", re.IGNORECASE)
_AREA_LABEL = re.compile(r"^Area\s+(.+)$", re.IGNORECASE)

CSP_TRUE_VALUES = {'yes', 'true', '1', 'submitted', 'y'}
CSP_FALSE_VALUES = {'no', 'false', '0', 'not submitted', 'n'}


def extract_string(record: Dict[str, Any], *keys: str) -> Optional[str]:
    """
    Return the first non-null cell among keys, stripped, or None.

    Example:
        >>> extract_string({'ClubId': ' 0042 '}, 'Club Number', 'ClubId')
        '0042'
    """
    for key in keys:
        value = record.get(key)
        if value is not None:
            return str(value).strip()
    return None


def parse_leading_int(value: Any) -> Optional[int]:
    """
    Parse the leading integer of a cell value.

    Returns None when the text does not start with an optional sign and
    digits, e.g. "12abc" -> 12, " 7" -> 7, "abc" -> None.
    """
    match = _LEADING_INT.match(str(value))
    if not match:
        return None
    return int(match.group(1))


def extract_number(record: Dict[str, Any], *keys: str) -> Any:
    """
    Return the first parseable numeric cell among keys, or 0.

    Numeric cells are returned as-is. String cells are parsed for a leading
    integer; a cell that does not parse falls through to the next alias.

    Args:
        record: Parsed export record
        *keys: Ordered header spellings to try

    Returns:
        Number from the first usable cell, 0 if none
    """
    for key in keys:
        value = record.get(key)
        if value is None:
            continue
        if isinstance(value, numbers.Number) and not isinstance(value, bool):
            if isinstance(value, float) and math.isnan(value):
                continue
            return value
        parsed = parse_leading_int(value)
        if parsed is not None:
            return parsed
    return 0


def normalize_club_id(club_id: str) -> str:
    """
    Strip leading zeros from a club identifier.

    An all-zero identifier keeps its original text so it never collapses to
    an empty key.

    Example:
        >>> normalize_club_id('00009905')
        '9905'
        >>> normalize_club_id('0000')
        '0000'
    """
    stripped = club_id.lstrip('0')
    return stripped if stripped else club_id


def _parse_label(value: str, pattern: re.Pattern, prefix: str) -> Tuple[str, str]:
    if not value:
        return '', ''
    match = pattern.match(value)
    if match:
        return match.group(1), value
    return value, f"{prefix} {value}"


def parse_division(value: str) -> Tuple[str, str]:
    """
    Split a division cell into (id, display name).

    Accepts a bare id ("A") or a prefixed label ("Division A"); empty input
    yields ('', '') and consumers apply their own placeholder name.
    """
    return _parse_label(value, _DIVISION_LABEL, "Division")


def parse_area(value: str) -> Tuple[str, str]:
    """Split an area cell into (id, display name), same rules as divisions."""
    return _parse_label(value, _AREA_LABEL, "Area")


def parse_csp_flag(value: Any) -> Optional[bool]:
    """
    Interpret a plan-submitted cell.

    Returns:
        True or False for recognised answers, None for blank cells so the
        caller can apply its default. Unrecognised text counts as submitted.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if not text:
        return None
    if text in CSP_FALSE_VALUES:
        return False
    if text in CSP_TRUE_VALUES:
        return True
    return True


def first_present(record: Dict[str, Any], keys: Iterable[str]) -> Any:
    """Return the raw first non-null cell among keys, or None."""
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None
