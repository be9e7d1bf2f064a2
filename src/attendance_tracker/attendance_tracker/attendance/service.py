from __future__ import annotations

from datetime import datetime
from typing import Mapping, Optional, Sequence

from ..common.datetime_utils import now_local, round_half_up, today_iso
from ..common.validators import require_positive_total
from ..core.constants import DEFAULT_EXPECTED_TOTAL_LECTURES, LECTURE_NUMBER_FALLBACK
from ..core.enums import CaptureState
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.model import Lecture, Teacher
from ..users.repository import TeacherRepository
from .model import AttendanceRecord, CaptureContext, Location, StudentStats
from .repository import AttendanceRepository

NO_LINK = "Please use the attendance link provided by your teacher."
TEACHER_NOT_FOUND = "Teacher information not found. Please check the link."
ATTENDANCE_DISABLED = "Attendance is currently disabled by the teacher."
NO_ACTIVE_LECTURE = "No active lecture session."


def parse_location(latitude: Optional[str], longitude: Optional[str]) -> Optional[Location]:
    """Best-effort position from the browser; anything unusable means no location."""
    try:
        lat = float(latitude)
        lng = float(longitude)
    except (TypeError, ValueError):
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
        return None
    return Location(latitude=lat, longitude=lng)


class CaptureService:
    """Use case: a student marks attendance through a teacher's link.

    Duplicate marks for the same lecture are accepted unless allow_duplicates is off;
    the page only disables its button after a successful mark.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        teachers: TeacherRepository,
        *,
        allow_duplicates: bool = True,
        expected_total: int = DEFAULT_EXPECTED_TOTAL_LECTURES,
    ):
        self._attendance = attendance
        self._teachers = teachers
        self._allow_duplicates = bool(allow_duplicates)
        self._expected_total = require_positive_total(expected_total)

    def open_link(self, teacher_id: Optional[str], division: Optional[str]) -> CaptureContext:
        if not teacher_id:
            return CaptureContext(state=CaptureState.NO_LINK, message=NO_LINK)

        teacher = self._teachers.get_by_id(teacher_id)
        if teacher is None:
            return CaptureContext(
                state=CaptureState.NOT_FOUND,
                teacher_id=teacher_id,
                division=division,
                message=TEACHER_NOT_FOUND,
            )
        if not teacher.attendance_enabled:
            return CaptureContext(
                state=CaptureState.DISABLED,
                teacher_id=teacher_id,
                division=division,
                teacher=teacher,
                message=ATTENDANCE_DISABLED,
            )
        return CaptureContext(
            state=CaptureState.READY,
            teacher_id=teacher_id,
            division=division,
            teacher=teacher,
            lecture=teacher.current_lecture,
            message="" if teacher.current_lecture else NO_ACTIVE_LECTURE,
        )

    def _require_open_teacher(self, teacher_id: Optional[str]) -> Teacher:
        if not teacher_id:
            raise ValidationError(NO_LINK)
        teacher = self._teachers.get_by_id(teacher_id)
        if teacher is None:
            raise NotFoundError(TEACHER_NOT_FOUND)
        if not teacher.attendance_enabled:
            raise ValidationError(ATTENDANCE_DISABLED)
        return teacher

    def mark(
        self,
        *,
        student: Mapping,
        teacher_id: Optional[str],
        division: Optional[str],
        location: Optional[Location] = None,
        now: Optional[datetime] = None,
    ) -> str:
        prn = student.get("prn")
        if not prn:
            raise AuthorizationError("Only students can mark attendance.")

        # Teacher fields are read at click time, not when the page was opened.
        teacher = self._require_open_teacher(teacher_id)
        now = now or now_local()

        lecture = teacher.current_lecture
        lecture_number = lecture.number if lecture else LECTURE_NUMBER_FALLBACK
        lecture_date = lecture.date if lecture else today_iso(now)

        if not self._allow_duplicates and self._attendance.exists_for_lecture(
            student_prn=prn,
            teacher_id=teacher.teacher_id,
            lecture_number=lecture_number,
            lecture_date=lecture_date,
        ):
            raise ValidationError("Attendance is already marked for this lecture.")

        return self._attendance.create(
            student_id=student.get("id") or prn,
            student_name=student.get("name") or "",
            student_prn=prn,
            department=student.get("department") or teacher.department,
            division=division or student.get("division") or "",
            class_name=student.get("class_name") or "",
            timestamp=now,
            location=location,
            teacher_id=teacher.teacher_id,
            teacher_name=teacher.name,
            subject=teacher.subject,
            lecture_number=lecture_number,
            lecture_date=lecture_date,
        )

    def history(self, prn: Optional[str]) -> list[AttendanceRecord]:
        """Newest first. Sorted here because the query carries no ordering."""
        if not prn:
            return []
        records = list(self._attendance.list_for_student(prn))
        records.sort(key=lambda r: r.timestamp, reverse=True)
        return records

    def stats(self, history: Sequence[AttendanceRecord], *, now: Optional[datetime] = None) -> StudentStats:
        now = now or now_local()
        total = len(history)
        this_month = sum(1 for r in history if (r.timestamp.year, r.timestamp.month) == (now.year, now.month))
        percentage = round_half_up(total / self._expected_total * 100) if total else 0
        return StudentStats(total=total, this_month=this_month, percentage=percentage)


class SessionControlService:
    """Use case: a teacher opens or closes attendance for a lecture."""

    def __init__(self, teachers: TeacherRepository):
        self._teachers = teachers

    def get_teacher(self, teacher_id: str) -> Teacher:
        teacher = self._teachers.get_by_id(teacher_id)
        if teacher is None:
            raise NotFoundError("Teacher record not found.")
        return teacher

    def enable(self, teacher_id: str, lecture_number: str, lecture_date: str) -> Lecture:
        lecture_number = (lecture_number or "").strip()
        lecture_date = (lecture_date or "").strip()
        if not lecture_number or not lecture_date:
            raise ValidationError("Please enter lecture number and date.")

        self.get_teacher(teacher_id)
        lecture = Lecture(number=lecture_number, date=lecture_date)
        self._teachers.set_attendance_state(teacher_id, enabled=True, lecture=lecture)
        return lecture

    def disable(self, teacher_id: str) -> None:
        self._teachers.set_attendance_state(teacher_id, enabled=False, lecture=None)
