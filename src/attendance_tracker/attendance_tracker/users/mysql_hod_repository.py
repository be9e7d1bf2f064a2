from __future__ import annotations

from typing import Any, Dict, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, new_document_id
from .model import Hod
from .repository import HodRepository


class MySQLHodRepository(HodRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_hod(row: Dict[str, Any]) -> Hod:
        return Hod(
            hod_id=row["id"],
            name=row["name"],
            phone=row["phone"],
            email=row.get("email") or "",
            employee_id=row["employee_id"],
            department=row["department"],
            created_at=row.get("created_at"),
        )

    def _find_one(self, where: str, params: tuple) -> Optional[Hod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT id, name, phone, email, employee_id, department, created_at
                FROM hods
                WHERE {where}
                LIMIT 1
                """,
                params,
            )
            row = fetchone(cur)
            return self._to_hod(row) if row else None

    def get_by_id(self, hod_id: str) -> Optional[Hod]:
        return self._find_one("id=%s", (hod_id,))

    def find_by_credentials(self, name: str, phone: str) -> Optional[Hod]:
        return self._find_one("BINARY name=%s AND phone=%s", (name, phone))

    def find_by_phone(self, phone: str) -> Optional[Hod]:
        return self._find_one("phone=%s", (phone,))

    def find_by_employee_id(self, employee_id: str) -> Optional[Hod]:
        return self._find_one("employee_id=%s", (employee_id,))

    def find_by_department(self, department: str) -> Optional[Hod]:
        return self._find_one("department=%s", (department,))

    def create(self, *, name: str, phone: str, email: str, employee_id: str, department: str) -> str:
        hod_id = new_document_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO hods(id, name, phone, email, employee_id, department, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,NOW())
                """,
                (hod_id, name, phone, email, employee_id, department),
            )
        return hod_id
