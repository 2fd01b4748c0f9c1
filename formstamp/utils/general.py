# formstamp/utils/general.py

import math
import re
from typing import Any, Optional, Set


def to_number(value: Any) -> float:
    """
    Coerce a loosely typed value into a float.

    Anything that cannot be read as a number becomes NaN instead of raising,
    so callers can keep the value and decide later.
    """
    if value is None or isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str) and value.strip():
        try:
            return float(value.strip())
        except ValueError:
            return math.nan
    return math.nan


def finite_or(value: Any, default: float) -> float:
    """Numeric value when finite, otherwise the default."""
    number = to_number(value)
    return number if math.isfinite(number) else default


def positive_or(value: Any, default: float) -> float:
    """Numeric value when finite and above zero, otherwise the default."""
    number = to_number(value)
    return number if math.isfinite(number) and number > 0 else default


def page_number_or(value: Any, default: int = 1) -> int:
    """Page number of at least 1, otherwise the default."""
    number = to_number(value)
    if not math.isfinite(number) or number < 1:
        return default
    return int(number)


def safe_filename(
    name: Optional[str],
    company_id: int,
    used: Optional[Set[str]] = None,
    extension: str = ".pdf",
) -> str:
    """
    Filesystem-safe archive entry name for a company.

    Runs of characters other than ASCII letters, digits, "_" and "-" become a
    single "_". When the name is already in `used`, the company id is appended
    so a later company never replaces an earlier entry.
    """
    stem = re.sub(r"[^a-z0-9_\-]+", "_", name or "", flags=re.IGNORECASE)
    if not stem.strip("_"):
        stem = f"company_{company_id}"

    filename = f"{stem}{extension}"
    if used is not None:
        if filename in used:
            filename = f"{stem}_{company_id}{extension}"
        # Same company requested twice
        counter = 2
        while filename in used:
            filename = f"{stem}_{company_id}_{counter}{extension}"
            counter += 1
        used.add(filename)
    return filename
