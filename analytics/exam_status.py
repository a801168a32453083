"""
Exam Lifecycle Module
=====================

Derives the status of an exam from its date, the manual-close flag and the
current date, and decides whether predictions are still accepted.

Status windows (days since the exam):
- open:       exam is today or in the future
- evaluation: 1-4 days after the exam, predictions still accepted
- closed:     5+ days after the exam, or closed manually by the teacher

The current date is always passed in; nothing in here reads the clock.
"""

from datetime import date, datetime
from typing import Dict, List, Optional, Union

from analytics.settings import CLOSE_AFTER_DAYS, EVALUATION_AFTER_DAYS
from models.prediction_models import Exam, ExamStatus, Prediction


def to_calendar_date(value: Union[date, datetime]) -> date:
    """Drops the time of day."""
    if isinstance(value, datetime):
        return value.date()
    return value


def resolve_status(exam_date: Union[date, datetime], is_manually_closed: bool,
                   today: Union[date, datetime]) -> ExamStatus:
    if is_manually_closed:
        return ExamStatus.CLOSED

    days_since_exam = (to_calendar_date(today) - to_calendar_date(exam_date)).days

    if days_since_exam < EVALUATION_AFTER_DAYS:
        return ExamStatus.OPEN
    if days_since_exam < CLOSE_AFTER_DAYS:
        return ExamStatus.EVALUATION
    return ExamStatus.CLOSED


def get_exam_status(exam: Exam, today: Union[date, datetime]) -> ExamStatus:
    return resolve_status(exam.date, exam.is_closed, today)


def accepts_predictions(status: ExamStatus) -> bool:
    return status in (ExamStatus.OPEN, ExamStatus.EVALUATION)


def can_submit(exam: Exam, today: Union[date, datetime]) -> bool:
    """True while the exam is open or in evaluation."""
    return accepts_predictions(get_exam_status(exam, today))


def find_prediction(exam_id: str, student_id: str, predictions: List[Prediction]) -> Optional[Prediction]:
    return next((p for p in predictions
                 if p.exam_id == exam_id and p.student_id == student_id), None)


def has_no_tips(exam_id: str, student_id: str, predictions: List[Prediction]) -> bool:
    """
    True if the student has no record for the exam, or a record without any
    prediction. Both cases are treated the same.
    """
    prediction = find_prediction(exam_id, student_id, predictions)
    return prediction is None or (prediction.prediction1 is None and prediction.prediction2 is None)


def has_both_tips(exam_id: str, student_id: str, predictions: List[Prediction]) -> bool:
    prediction = find_prediction(exam_id, student_id, predictions)
    return (prediction is not None
            and prediction.prediction1 is not None
            and prediction.prediction2 is not None)


def sort_exams_by_status(exams: List[Exam], status: ExamStatus) -> List[Exam]:
    """
    Returns a sorted copy for display.
    Open/evaluation: soonest exam first. Closed: most recent exam first.
    """
    if accepts_predictions(status):
        return sorted(exams, key=lambda exam: to_calendar_date(exam.date))
    return sorted(exams, key=lambda exam: to_calendar_date(exam.date), reverse=True)


def group_exams_by_status(exams: List[Exam], today: Union[date, datetime]) -> Dict[ExamStatus, List[Exam]]:
    groups = {status: [] for status in ExamStatus}
    for exam in exams:
        groups[get_exam_status(exam, today)].append(exam)

    return {status: sort_exams_by_status(group, status) for status, group in groups.items()}
