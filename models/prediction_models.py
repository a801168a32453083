"""
Data Models for Grade Predictions
=================================

This module defines the data structures shared by the status resolver, the point
table and the ranking aggregator. All models are implemented as dataclasses.
Exams, predictions and users are supplied by an external data layer and are
treated as read-only; leaderboard and result rows are derived on demand.
"""

import enum
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Optional


class UserRole(str, enum.Enum):
    STUDENT = "student"
    TEACHER = "teacher"


class ExamStatus(str, enum.Enum):
    OPEN = "open"
    EVALUATION = "evaluation"
    CLOSED = "closed"


@dataclass
class Exam:
    id: str
    title: str
    subject: str
    date: date
    is_closed: bool = False
    description: Optional[str] = None
    closed_at: Optional[datetime] = None
    grades: Dict[str, float] = field(default_factory=dict)

    def grade_for(self, student_id: str) -> Optional[float]:
        return self.grades.get(student_id)


@dataclass
class Prediction:
    exam_id: str
    student_id: str
    prediction1: Optional[float] = None
    prediction2: Optional[float] = None
    points1: Optional[int] = None
    points2: Optional[int] = None


@dataclass
class User:
    id: str
    username: str
    role: UserRole
    email: Optional[str] = None

    @property
    def is_student(self) -> bool:
        return self.role == UserRole.STUDENT


@dataclass
class LeaderboardEntry:
    student_id: str
    student_name: str
    total_points: int
    rank: int


@dataclass
class ExamRanking:
    student_id: str
    total_points: int
    rank: int


@dataclass
class ExamResult:
    exam_id: str
    exam_title: str
    exam_subject: str
    exam_date: date
    grade: Optional[float]
    rank: Optional[int]
    total_points: int
    prediction1: Optional[float] = None
    prediction2: Optional[float] = None
    points1: Optional[int] = None
    points2: Optional[int] = None
