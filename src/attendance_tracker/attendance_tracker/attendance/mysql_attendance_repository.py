from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_document_id
from .model import AttendanceRecord, Location
from .repository import AttendanceRepository

_COLUMNS = """
    id, student_id, student_name, student_prn, department, division, class_name,
    timestamp, latitude, longitude, teacher_id, teacher_name, subject,
    lecture_number, lecture_date
"""


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    location = None
    if r.get("latitude") is not None and r.get("longitude") is not None:
        location = Location(latitude=float(r["latitude"]), longitude=float(r["longitude"]))
    return AttendanceRecord(
        record_id=r["id"],
        student_id=r["student_id"],
        student_name=r.get("student_name") or "",
        student_prn=r["student_prn"],
        department=r.get("department") or "",
        division=r.get("division") or "",
        class_name=r.get("class_name") or "",
        timestamp=r["timestamp"],
        location=location,
        teacher_id=r["teacher_id"],
        teacher_name=r.get("teacher_name") or "",
        subject=r.get("subject") or "",
        lecture_number=r.get("lecture_number") or "",
        lecture_date=r.get("lecture_date") or "",
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE id=%s", (record_id,))
            r = fetchone(cur)
            return _to_record(r) if r else None

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
        record_id = new_document_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(
                    id, student_id, student_name, student_prn, department, division, class_name,
                    timestamp, latitude, longitude, teacher_id, teacher_name, subject,
                    lecture_number, lecture_date
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    record_id,
                    student_id,
                    student_name,
                    student_prn,
                    department,
                    division,
                    class_name,
                    timestamp,
                    location.latitude if location else None,
                    location.longitude if location else None,
                    teacher_id,
                    teacher_name,
                    subject,
                    lecture_number,
                    lecture_date,
                ),
            )
        return record_id

    def list_for_teacher(self, teacher_id: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE teacher_id=%s", (teacher_id,))
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_student(self, student_prn: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE student_prn=%s", (student_prn,))
            return [_to_record(r) for r in fetchall(cur)]

    def exists_for_lecture(
        self,
        *,
        student_prn: str,
        teacher_id: str,
        lecture_number: str,
        lecture_date: str,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id FROM attendance
                WHERE student_prn=%s AND teacher_id=%s AND lecture_number=%s AND lecture_date=%s
                LIMIT 1
                """,
                (student_prn, teacher_id, lecture_number, lecture_date),
            )
            return fetchone(cur) is not None

    def delete_by_id(self, record_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance WHERE id=%s", (record_id,))
            return cur.rowcount > 0
