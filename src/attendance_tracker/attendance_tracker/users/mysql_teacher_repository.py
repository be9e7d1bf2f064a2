from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json, new_document_id
from .model import Lecture, Teacher
from .repository import TeacherRepository

_COLUMNS = """
    id, name, phone, email, subject, department, assigned_classes, assigned_divisions,
    attendance_enabled, current_lecture, added_by, added_at
"""


def _to_teacher(row: Dict[str, Any]) -> Teacher:
    lecture = load_json(row.get("current_lecture"))
    return Teacher(
        teacher_id=row["id"],
        name=row["name"],
        phone=row["phone"],
        email=row.get("email") or "",
        subject=row.get("subject") or "",
        department=row["department"],
        assigned_classes=tuple(load_json(row.get("assigned_classes"), [])),
        assigned_divisions=tuple(load_json(row.get("assigned_divisions"), [])),
        attendance_enabled=bool(row.get("attendance_enabled")),
        current_lecture=Lecture(number=str(lecture["number"]), date=str(lecture["date"])) if lecture else None,
        added_by=row.get("added_by"),
        added_at=row.get("added_at"),
    )


class MySQLTeacherRepository(TeacherRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, teacher_id: str) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM teachers WHERE id=%s", (teacher_id,))
            row = fetchone(cur)
            return _to_teacher(row) if row else None

    def find_by_credentials(self, name: str, phone: str) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM teachers WHERE BINARY name=%s AND phone=%s LIMIT 1",
                (name, phone),
            )
            row = fetchone(cur)
            return _to_teacher(row) if row else None

    def create(
        self,
        *,
        name: str,
        phone: str,
        email: str,
        subject: str,
        department: str,
        assigned_classes: Sequence[str],
        assigned_divisions: Sequence[str],
        added_by: Optional[str],
    ) -> str:
        teacher_id = new_document_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO teachers(
                    id, name, phone, email, subject, department,
                    assigned_classes, assigned_divisions, attendance_enabled, current_lecture,
                    added_by, added_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,0,NULL,%s,NOW())
                """,
                (
                    teacher_id,
                    name,
                    phone,
                    email,
                    subject,
                    department,
                    dump_json(list(assigned_classes)),
                    dump_json(list(assigned_divisions)),
                    added_by,
                ),
            )
        return teacher_id

    def list_by_department(self, department: str) -> Sequence[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM teachers WHERE department=%s", (department,))
            return [_to_teacher(r) for r in fetchall(cur)]

    def delete_by_id(self, teacher_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM teachers WHERE id=%s", (teacher_id,))
            return cur.rowcount > 0

    def set_attendance_state(self, teacher_id: str, *, enabled: bool, lecture: Optional[Lecture]) -> None:
        lecture_json = dump_json({"number": lecture.number, "date": lecture.date}) if lecture else None
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE teachers SET attendance_enabled=%s, current_lecture=%s WHERE id=%s",
                (1 if enabled else 0, lecture_json, teacher_id),
            )
