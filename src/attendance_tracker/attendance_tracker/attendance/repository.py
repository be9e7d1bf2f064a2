from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, Location


class AttendanceRepository(Protocol):
    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create(
        self,
        *,
        student_id: str,
        student_name: str,
        student_prn: str,
        department: str,
        division: str,
        class_name: str,
        timestamp: datetime,
        location: Optional[Location],
        teacher_id: str,
        teacher_name: str,
        subject: str,
        lecture_number: str,
        lecture_date: str,
    ) -> str:
        raise NotImplementedError

    def list_for_teacher(self, teacher_id: str) -> Sequence[AttendanceRecord]:
        """All records of a teacher, unordered."""

        raise NotImplementedError

    def list_for_student(self, student_prn: str) -> Sequence[AttendanceRecord]:
        """All records of a student, unordered."""

        raise NotImplementedError

    def exists_for_lecture(
        self,
        *,
        student_prn: str,
        teacher_id: str,
        lecture_number: str,
        lecture_date: str,
    ) -> bool:
        raise NotImplementedError

    def delete_by_id(self, record_id: str) -> bool:
        raise NotImplementedError
