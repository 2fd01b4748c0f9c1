# formstamp/rendering/transform.py

"""
Coordinate helpers for placing text on template pages.

Placements are authored in editor space: fractions of the page size with the
origin at the top-left and y growing downward. PDF user space has its origin
at the bottom-left and y growing upward, in points.
"""

import math
from typing import Optional, Tuple


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def to_page_coordinates(
    x: float, y: float, width: float, height: float
) -> Optional[Tuple[float, float]]:
    """
    Convert a normalized editor position into absolute page coordinates.

    Returns None when either coordinate is NaN or infinite; the caller must
    skip the placement instead of drawing it at a default position. Finite
    input outside [0, 1] is clamped to the page edge.
    """
    if not (math.isfinite(x) and math.isfinite(y)):
        return None

    abs_x = clamp(x * width, 0.0, width)
    abs_y = clamp((1.0 - y) * height, 0.0, height)
    return abs_x, abs_y


def clamp_page_index(page: int, page_count: int) -> int:
    """
    Zero-based index for a 1-based page number.

    Pages past the end land on the last page so stale placements against a
    shorter re-upload stay visible.
    """
    return int(clamp(page - 1, 0, page_count - 1))
