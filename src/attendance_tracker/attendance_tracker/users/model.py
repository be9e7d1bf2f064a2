from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Lecture:
    """Lecture a teacher has opened for attendance."""

    number: str
    date: str


@dataclass(frozen=True)
class Student:
    """Domain entity: Student.

    Note: Plain data object (no DB access code). The phone number doubles as the password.
    """

    student_id: str
    name: str
    phone: str
    email: str
    prn: str
    department: str
    class_name: str
    division: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Teacher:
    """Domain entity: Teacher, provisioned by an HOD.

    attendance_enabled and current_lecture move together: either disabled with no
    lecture, or enabled for one lecture.
    """

    teacher_id: str
    name: str
    phone: str
    email: str
    subject: str
    department: str
    assigned_classes: tuple[str, ...] = ()
    assigned_divisions: tuple[str, ...] = ()
    attendance_enabled: bool = False
    current_lecture: Optional[Lecture] = None
    added_by: Optional[str] = None
    added_at: Optional[datetime] = None


@dataclass(frozen=True)
class Hod:
    """Domain entity: Head of Department. One per department."""

    hod_id: str
    name: str
    phone: str
    email: str
    employee_id: str
    department: str
    created_at: Optional[datetime] = None
