from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Mapping, Optional

from ..core.enums import CaptureState
from ..users.model import Lecture, Teacher


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's mark for one lecture.

    Teacher name, subject and lecture fields are a historical snapshot taken when the
    mark was written, not a live reference; later teacher edits do not touch them.
    Records are never updated, only deleted by the owning teacher.
    """

    record_id: str
    student_id: str
    student_name: str
    student_prn: str
    department: str
    division: str
    class_name: str
    timestamp: datetime
    location: Optional[Location]
    teacher_id: str
    teacher_name: str
    subject: str
    lecture_number: str
    lecture_date: str


@dataclass(frozen=True)
class CaptureContext:
    """Result of opening a teacher's attendance link."""

    state: CaptureState
    teacher_id: Optional[str] = None
    division: Optional[str] = None
    teacher: Optional[Teacher] = None
    lecture: Optional[Lecture] = None
    message: str = ""

    @property
    def can_mark(self) -> bool:
        return self.state == CaptureState.READY


@dataclass(frozen=True)
class AttendanceFilters:
    search: str = ""
    division: str = ""
    class_name: str = ""
    lecture_date: str = ""
    lecture_number: str = ""

    @classmethod
    def from_mapping(cls, args: Mapping[str, str]) -> "AttendanceFilters":
        return cls(
            search=(args.get("search") or "").strip(),
            division=args.get("division") or "",
            class_name=args.get("class_name") or "",
            lecture_date=args.get("lecture_date") or "",
            lecture_number=(args.get("lecture_number") or "").strip(),
        )

    def as_dict(self) -> dict:
        return {
            "search": self.search,
            "division": self.division,
            "class_name": self.class_name,
            "lecture_date": self.lecture_date,
            "lecture_number": self.lecture_number,
        }


@dataclass(frozen=True)
class DailyCount:
    day: date
    label: str
    students: int


@dataclass(frozen=True)
class StudentProgress:
    prn: str
    name: str
    records: tuple[AttendanceRecord, ...]
    total: int
    percentage: int


@dataclass(frozen=True)
class StudentStats:
    total: int
    this_month: int
    percentage: int
