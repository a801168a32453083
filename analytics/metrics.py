"""
Ranking and Metrics Calculation Module
======================================

This module turns exams, predictions and the student roster into rankings:
1. Global leaderboard over all closed, graded exams
2. Per-exam ranking and the result view of a single student
3. Grading step that fills in the points of a prediction

Rankings are always computed on copies: totals first, then a stable descending
sort, then ranks.
"""

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Callable, Iterable, List, Optional, Union

import pandas as pd

from analytics.exam_status import find_prediction, get_exam_status, to_calendar_date
from analytics.points import prediction_points
from models.prediction_models import (Exam, ExamRanking, ExamResult, ExamStatus,
                                      LeaderboardEntry, Prediction, User)

logger = logging.getLogger(__name__)


def first_defined(lookups: Iterable[Callable[[], Optional[int]]]) -> Optional[int]:
    """Evaluates the lookups in order and returns the first value that is not None."""
    for lookup in lookups:
        value = lookup()
        if value is not None:
            return value
    return None


def resolve_slot_points(stored_points: Optional[int], prediction: Optional[float],
                        grade: Optional[float]) -> int:
    """
    Points for one prediction slot on the leaderboard.
    Precedence: stored points, then points computed from the table, then 0.
    """
    return first_defined((
        lambda: stored_points,
        lambda: prediction_points(prediction, grade),
        lambda: 0,
    ))


def _students(users: List[User]) -> List[User]:
    return [user for user in users if user.is_student]


def student_exam_points(exam: Exam, student_id: str, predictions: List[Prediction]) -> int:
    """Leaderboard contribution of one closed, graded exam for one student."""
    grade = exam.grade_for(student_id)
    prediction = find_prediction(exam.id, student_id, predictions)
    if prediction is None:
        return 0

    return (resolve_slot_points(prediction.points1, prediction.prediction1, grade)
            + resolve_slot_points(prediction.points2, prediction.prediction2, grade))


def global_leaderboard(exams: List[Exam], users: List[User], predictions: List[Prediction],
                       today: Union[date, datetime]) -> List[LeaderboardEntry]:
    """
    Ranks all students by their points over every closed exam that has a grade
    for them. Students without any scored exam are listed with 0 points.
    Ties keep the roster order.
    """
    closed_exams = [exam for exam in exams if get_exam_status(exam, today) == ExamStatus.CLOSED]

    totals = []
    for student in _students(users):
        total_points = sum(
            student_exam_points(exam, student.id, predictions)
            for exam in closed_exams
            if exam.grade_for(student.id) is not None
        )
        totals.append((student, total_points))

    ranked = sorted(totals, key=lambda item: item[1], reverse=True)
    logger.debug(f"Leaderboard: {len(ranked)} students over {len(closed_exams)} closed exams.")

    return [
        LeaderboardEntry(
            student_id=student.id,
            student_name=student.username,
            total_points=total_points,
            rank=index + 1,
        )
        for index, (student, total_points) in enumerate(ranked)
    ]


def exam_ranking(exam: Exam, users: List[User], predictions: List[Prediction]) -> List[ExamRanking]:
    """
    Ranks the students on a single exam by points1 + points2.
    Only stored points count here; missing points are 0.
    """
    exam_predictions = [p for p in predictions if p.exam_id == exam.id]

    totals = []
    for student in _students(users):
        prediction = find_prediction(exam.id, student.id, exam_predictions)
        total_points = 0
        if prediction is not None:
            total_points = (prediction.points1 or 0) + (prediction.points2 or 0)
        totals.append((student.id, total_points))

    ranked = sorted(totals, key=lambda item: item[1], reverse=True)
    return [
        ExamRanking(student_id=student_id, total_points=total_points, rank=index + 1)
        for index, (student_id, total_points) in enumerate(ranked)
    ]


def exam_result(exam: Exam, student: User, users: List[User], predictions: List[Prediction]) -> ExamResult:
    """Result view of one student on one exam. rank is None if the student is not in the cohort."""
    prediction = find_prediction(exam.id, student.id, predictions)
    own_row = next((row for row in exam_ranking(exam, users, predictions)
                    if row.student_id == student.id), None)

    return ExamResult(
        exam_id=exam.id,
        exam_title=exam.title,
        exam_subject=exam.subject,
        exam_date=exam.date,
        grade=exam.grade_for(student.id),
        rank=own_row.rank if own_row else None,
        total_points=own_row.total_points if own_row else 0,
        prediction1=prediction.prediction1 if prediction else None,
        prediction2=prediction.prediction2 if prediction else None,
        points1=prediction.points1 if prediction else None,
        points2=prediction.points2 if prediction else None,
    )


def student_results(exams: List[Exam], student: User, users: List[User], predictions: List[Prediction],
                    today: Union[date, datetime]) -> List[ExamResult]:
    """Results of every closed exam with a grade for the student, most recent first."""
    graded = [
        exam for exam in exams
        if get_exam_status(exam, today) == ExamStatus.CLOSED and exam.grade_for(student.id) is not None
    ]
    results = [exam_result(exam, student, users, predictions) for exam in graded]
    return sorted(results, key=lambda result: to_calendar_date(result.exam_date), reverse=True)


def score_prediction(prediction: Prediction, exam: Exam) -> Prediction:
    """
    Grading step: returns a copy of the prediction with points1/points2 taken
    from the point table. Points stay None where a prediction or the grade is missing.
    """
    grade = exam.grade_for(prediction.student_id)
    scored = replace(
        prediction,
        points1=prediction_points(prediction.prediction1, grade),
        points2=prediction_points(prediction.prediction2, grade),
    )
    if grade is None:
        logger.info(f"No grade for student {prediction.student_id} on exam {exam.id}; points left empty.")
    return scored


def leaderboard_frame(entries: List[LeaderboardEntry]) -> pd.DataFrame:
    """Leaderboard as a DataFrame indexed by rank."""
    flat_data = [
        {"Rank": entry.rank, "Student": entry.student_name, "Total Points": entry.total_points}
        for entry in entries
    ]
    return pd.DataFrame(flat_data, columns=["Rank", "Student", "Total Points"]).set_index("Rank")


def results_frame(results: List[ExamResult]) -> pd.DataFrame:
    flat_data = []
    for result in results:
        flat_data.append({
            "Exam": result.exam_title,
            "Subject": result.exam_subject,
            "Date": pd.Timestamp(result.exam_date),
            "Grade": result.grade,
            "Rank": result.rank,
            "Total Points": result.total_points,
            "Prediction 1": result.prediction1,
            "Prediction 2": result.prediction2,
            "Points 1": result.points1,
            "Points 2": result.points2,
        })

    return pd.DataFrame(flat_data, columns=[
        "Exam", "Subject", "Date", "Grade", "Rank", "Total Points",
        "Prediction 1", "Prediction 2", "Points 1", "Points 2",
    ])
