"""Teacher-side review of attendance records.

Everything here works on the records already fetched for one teacher; filtering
and aggregation happen in memory on a fresh snapshot per page load.
"""
from __future__ import annotations

import csv
import io
from collections import Counter
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import format_day, now_local, round_half_up
from ..common.validators import require_positive_total
from ..core.constants import ANALYTICS_DAYS, DEFAULT_EXPECTED_TOTAL_LECTURES
from ..core.exceptions import AuthorizationError, NotFoundError
from .model import AttendanceFilters, AttendanceRecord, DailyCount, StudentProgress
from .repository import AttendanceRepository

CSV_FIELDS = [
    "student_name",
    "student_prn",
    "class_name",
    "division",
    "subject",
    "lecture_number",
    "lecture_date",
    "timestamp",
    "latitude",
    "longitude",
]


def apply_filters(records: Iterable[AttendanceRecord], filters: AttendanceFilters) -> list[AttendanceRecord]:
    """Conjunction of the five filters; an empty filter value matches everything."""
    out = list(records)

    if filters.search:
        term = filters.search.lower()
        out = [r for r in out if term in r.student_name.lower() or term in r.student_prn.lower()]
    if filters.division:
        out = [r for r in out if r.division == filters.division]
    if filters.class_name:
        out = [r for r in out if r.class_name == filters.class_name]
    if filters.lecture_date:
        out = [r for r in out if r.lecture_date == filters.lecture_date]
    if filters.lecture_number:
        term = filters.lecture_number.lower()
        out = [r for r in out if term in r.lecture_number.lower()]

    return out


def daily_counts(records: Iterable[AttendanceRecord], *, days: int = ANALYTICS_DAYS) -> list[DailyCount]:
    """Marks per calendar day for the most recent `days` distinct days, oldest first."""
    counts = Counter(r.timestamp.date() for r in records)
    recent = sorted(counts)[-days:] if days > 0 else []
    return [DailyCount(day=d, label=format_day(d), students=counts[d]) for d in recent]


def today_count(records: Iterable[AttendanceRecord], *, today: Optional[date] = None) -> int:
    today = today or now_local().date()
    return sum(1 for r in records if r.timestamp.date() == today)


def student_progress(
    records: Iterable[AttendanceRecord],
    prn: str,
    *,
    expected_total: int = DEFAULT_EXPECTED_TOTAL_LECTURES,
) -> Optional[StudentProgress]:
    mine = tuple(r for r in records if r.student_prn == prn)
    if not mine:
        return None
    return StudentProgress(
        prn=prn,
        name=mine[0].student_name,
        records=mine,
        total=len(mine),
        percentage=round_half_up(len(mine) / expected_total * 100),
    )


def attendance_link(origin: str, teacher_id: str, division: str) -> str:
    return f"{origin.rstrip('/')}/attendance/{teacher_id}/{division}"


def _fmt_timestamp(value: datetime) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S")


def records_to_csv(records: Sequence[AttendanceRecord]) -> bytes:
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=CSV_FIELDS)
    writer.writeheader()
    for r in records:
        writer.writerow(
            {
                "student_name": r.student_name,
                "student_prn": r.student_prn,
                "class_name": r.class_name,
                "division": r.division,
                "subject": r.subject,
                "lecture_number": r.lecture_number,
                "lecture_date": r.lecture_date,
                "timestamp": _fmt_timestamp(r.timestamp),
                "latitude": r.location.latitude if r.location else "",
                "longitude": r.location.longitude if r.location else "",
            }
        )
    return out.getvalue().encode("utf-8-sig")


class ReviewService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        expected_total: int = DEFAULT_EXPECTED_TOTAL_LECTURES,
    ):
        self._attendance = attendance
        self.expected_total = require_positive_total(expected_total)

    def records_for(self, teacher_id: str) -> list[AttendanceRecord]:
        return list(self._attendance.list_for_teacher(teacher_id))

    def progress(self, records: Sequence[AttendanceRecord], prn: str) -> Optional[StudentProgress]:
        return student_progress(records, prn, expected_total=self.expected_total)

    def delete_record(self, *, teacher_id: str, record_id: str) -> None:
        record = self._attendance.get_by_id(record_id)
        if record is None:
            raise NotFoundError("Attendance record not found.")
        if record.teacher_id != teacher_id:
            raise AuthorizationError("You can only remove your own attendance records.")
        self._attendance.delete_by_id(record_id)
