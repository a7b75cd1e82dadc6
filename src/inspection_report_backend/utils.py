"""
Utility functions for report naming and field display.

This module provides helper functions for:
- Sanitizing license plates into filename tokens
- Deriving the download filename of a report
- Substituting placeholders for missing customer fields
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Optional

# Anything that is not a letter or digit is dropped from plate tokens
NON_ALPHANUMERIC_PATTERN = re.compile(r"[^A-Za-z0-9]+")


def sanitize_plate(plate: Optional[str], fallback: str = "New") -> str:
    """
    Turn a license plate into a token that is safe inside a filename.

    Args:
        plate: The plate as typed by the customer, possibly missing
        fallback: Token to use when nothing alphanumeric remains

    Returns:
        The plate with every non-alphanumeric character removed, or the fallback

    Example:
        >>> sanitize_plate("AB-123!")
        "AB123"
        >>> sanitize_plate(None)
        "New"
    """
    cleaned = NON_ALPHANUMERIC_PATTERN.sub("", plate or "")
    return cleaned or fallback


def build_report_filename(
    plate: Optional[str],
    date: datetime,
    prefix: str = "Inspection_Report",
    fallback_plate: str = "New",
    date_format: str = "%d-%m-%Y",
) -> str:
    """
    Build the suggested download filename for an inspection report.

    Args:
        plate: The vehicle's license plate
        date: The inspection date recorded on the submission
        prefix: Leading part of the filename
        fallback_plate: Plate token used when the plate is absent
        date_format: strftime format for the date token

    Returns:
        A filename such as ``Inspection_Report_AB123_19-10-2026.pdf``
    """
    return f"{prefix}_{sanitize_plate(plate, fallback_plate)}_{date.strftime(date_format)}.pdf"


def display_value(value: Optional[str], placeholder: str) -> str:
    """Return the stripped value, or the placeholder when it is missing or blank."""
    if value is None:
        return placeholder
    stripped = value.strip()
    return stripped or placeholder
