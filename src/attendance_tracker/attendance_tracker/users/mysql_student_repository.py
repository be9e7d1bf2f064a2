from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_document_id
from .model import Student
from .repository import StudentRepository

_COLUMNS = "id, name, phone, email, prn, department, class_name, division, created_at"


def _to_student(row: Dict[str, Any]) -> Student:
    return Student(
        student_id=row["id"],
        name=row["name"],
        phone=row["phone"],
        email=row.get("email") or "",
        prn=row["prn"],
        department=row["department"],
        class_name=row["class_name"],
        division=row["division"],
        created_at=row.get("created_at"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _find_one(self, where: str, params: tuple) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE {where} LIMIT 1", params)
            row = fetchone(cur)
            return _to_student(row) if row else None

    def get_by_id(self, student_id: str) -> Optional[Student]:
        return self._find_one("id=%s", (student_id,))

    def find_by_credentials(self, name: str, phone: str) -> Optional[Student]:
        # BINARY keeps the name comparison case-sensitive under the default collation.
        return self._find_one("BINARY name=%s AND phone=%s", (name, phone))

    def find_by_prn(self, prn: str) -> Optional[Student]:
        return self._find_one("prn=%s", (prn,))

    def find_by_phone(self, phone: str) -> Optional[Student]:
        return self._find_one("phone=%s", (phone,))

    def create(
        self,
        *,
        name: str,
        phone: str,
        email: str,
        prn: str,
        department: str,
        class_name: str,
        division: str,
    ) -> str:
        student_id = new_document_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(id, name, phone, email, prn, department, class_name, division, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,NOW())
                """,
                (student_id, name, phone, email, prn, department, class_name, division),
            )
        return student_id

    def list_by_department(self, department: str) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE department=%s", (department,))
            return [_to_student(r) for r in fetchall(cur)]

    def delete_by_id(self, student_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE id=%s", (student_id,))
            return cur.rowcount > 0
