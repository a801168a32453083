"""
Record Parser Module
====================

This module converts the raw records delivered by the data layer (JSON-like
dicts with numeric ids and camelCase keys) into the engine's dataclasses, and
back into the payloads the data layer expects on write.
"""

from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional, TypeVar, Union

import pandas as pd

from models.prediction_models import Exam, Prediction, User, UserRole

T = TypeVar("T")


def parse_record_date(value: Union[str, date, datetime]) -> date:
    """
    Parses an ISO date or timestamp into a calendar date.
    Example: "2025-01-14T23:30:00Z" -> date(2025, 1, 14)
    Unparsable values raise ValueError.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return pd.Timestamp(value).date()


def _optional_timestamp(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    return pd.Timestamp(value).to_pydatetime()


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def _optional_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


def _nested_id(record: Dict[str, Any], nested_key: str, flat_key: str) -> str:
    # Records carry either a nested object ({"exam": {"id": 1}}) or a flat id
    nested = record.get(nested_key)
    if isinstance(nested, dict) and nested.get("id") is not None:
        return str(nested["id"])
    return str(record[flat_key])


def parse_exam(record: Dict[str, Any]) -> Exam:
    grades = record.get("grades") or {}
    return Exam(
        id=str(record["id"]),
        title=record["title"],
        subject=record["subject"],
        description=record.get("description"),
        date=parse_record_date(record["date"]),
        is_closed=bool(record.get("isClosed") or False),
        closed_at=_optional_timestamp(record.get("closedAt")),
        grades={str(student_id): float(grade) for student_id, grade in grades.items()},
    )


def parse_prediction(record: Dict[str, Any]) -> Prediction:
    return Prediction(
        exam_id=_nested_id(record, "exam", "examId"),
        student_id=_nested_id(record, "student", "studentId"),
        prediction1=_optional_float(record.get("prediction1")),
        prediction2=_optional_float(record.get("prediction2")),
        points1=_optional_int(record.get("points1")),
        points2=_optional_int(record.get("points2")),
    )


def parse_user(record: Dict[str, Any]) -> User:
    return User(
        id=str(record["id"]),
        username=record["username"],
        role=UserRole(record["role"]),
        email=record.get("email"),
    )


def parse_records(records: List[Dict[str, Any]], parse: Callable[[Dict[str, Any]], T]) -> List[T]:
    return [parse(record) for record in records]


def _record_id(value: str) -> Union[int, str]:
    # Numeric ids go back as numbers, any other id stays a string
    return int(value) if value.isdigit() else value


def exam_to_record(exam: Exam) -> Dict[str, Any]:
    """Exam payload for the data layer, which keys grades by numeric student id."""
    return {
        "id": _record_id(exam.id) if exam.id else None,
        "title": exam.title,
        "subject": exam.subject,
        "description": exam.description,
        "date": exam.date.isoformat(),
        "isClosed": exam.is_closed,
        "grades": {_record_id(student_id): grade for student_id, grade in exam.grades.items()},
    }


def prediction_to_record(prediction: Prediction) -> Dict[str, Any]:
    # exam and student ids travel in the URL, not in the payload
    return {
        "prediction1": prediction.prediction1,
        "prediction2": prediction.prediction2,
        "points1": prediction.points1,
        "points2": prediction.points2,
    }
