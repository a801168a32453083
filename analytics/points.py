"""
Point Table Module
==================

Scores a predicted grade against the actual grade and provides the canonical
grade scale used for prediction pickers and validation.

Grades are compared as integer hundredths so quarter steps never drift.
"""

import math
import re
from typing import List, Optional

from analytics.settings import GRADE_STEP_HUNDREDTHS, MAX_GRADE_HUNDREDTHS, MIN_GRADE_HUNDREDTHS

# (max difference in hundredths, points), checked in ascending order
POINT_TIERS = (
    (0, 5),
    (25, 4),
    (50, 3),
    (75, 2),
    (100, 1),
)


def to_hundredths(value: float) -> int:
    return int(round(value * 100))


def calculate_points(prediction: float, actual_grade: float) -> int:
    """
    Returns 0-5 points for a prediction.
    Exact hit: 5, then one point less per quarter grade, nothing above 1.0 off.
    Both grades must be finite; use prediction_points for values that may be missing or NaN.
    """
    difference = abs(to_hundredths(prediction) - to_hundredths(actual_grade))

    for max_difference, points in POINT_TIERS:
        if difference <= max_difference:
            return points
    return 0


def _is_missing(value) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def prediction_points(prediction: Optional[float], actual_grade: Optional[float]) -> Optional[int]:
    """
    Null-safe wrapper around calculate_points.
    Returns None (not 0) when the prediction or the actual grade is missing.
    """
    if _is_missing(prediction) or _is_missing(actual_grade):
        return None
    return calculate_points(prediction, actual_grade)


def grade_options() -> List[float]:
    """All valid grades: 1.0, 1.25, 1.5, ..., 5.75, 6.0"""
    return [
        hundredths / 100
        for hundredths in range(MIN_GRADE_HUNDREDTHS, MAX_GRADE_HUNDREDTHS + 1, GRADE_STEP_HUNDREDTHS)
    ]


def format_grade(grade: Optional[float]) -> str:
    """Formats a grade for display: 5.0 -> "5", 4.5 -> "4.5", 3.25 -> "3.25", missing -> "-" """
    if _is_missing(grade):
        return "-"
    text = f"{grade:.2f}"
    text = re.sub(r'\.00$', '', text)
    return re.sub(r'\.(\d)0$', r'.\1', text)
