from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_document_id
from .model import Department
from .repository import DepartmentRepository

# Child tables carry UNIQUE(dept_id, name) and an AUTO_INCREMENT position, so
# INSERT IGNORE is an add-to-set that keeps first-seen order.
_LIST_TABLES = {"classes": "department_classes", "divisions": "department_divisions"}


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load_lists(self, cur, dept_id: str) -> dict[str, tuple[str, ...]]:
        out: dict[str, tuple[str, ...]] = {}
        for key, table in _LIST_TABLES.items():
            cur.execute(f"SELECT name FROM {table} WHERE dept_id=%s ORDER BY position", (dept_id,))
            out[key] = tuple(r["name"] for r in fetchall(cur))
        return out

    def _to_department(self, cur, row) -> Department:
        lists = self._load_lists(cur, row["id"])
        return Department(
            dept_id=row["id"],
            name=row["name"],
            classes=lists["classes"],
            divisions=lists["divisions"],
            created_by=row.get("created_by"),
            created_at=row.get("created_at"),
        )

    def get_by_name(self, name: str) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, created_by, created_at FROM departments WHERE name=%s", (name,))
            row = fetchone(cur)
            return self._to_department(cur, row) if row else None

    def list_all(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, created_by, created_at FROM departments ORDER BY name")
            rows = fetchall(cur)
            return [self._to_department(cur, r) for r in rows]

    def get_or_create(
        self,
        name: str,
        *,
        classes: Sequence[str],
        divisions: Sequence[str],
        created_by: Optional[str] = None,
    ) -> tuple[Department, bool]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT IGNORE INTO departments(id, name, created_by, created_at) VALUES(%s,%s,%s,NOW())",
                (new_document_id(), name, created_by),
            )
            created = cur.rowcount > 0
            cur.execute("SELECT id, name, created_by, created_at FROM departments WHERE name=%s", (name,))
            row = fetchone(cur)
            if created:
                for key, values in (("classes", classes), ("divisions", divisions)):
                    for value in values:
                        cur.execute(
                            f"INSERT IGNORE INTO {_LIST_TABLES[key]}(dept_id, name) VALUES(%s,%s)",
                            (row["id"], value),
                        )
            return self._to_department(cur, row), created

    def _add_to_set(self, table: str, dept_id: str, value: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"INSERT IGNORE INTO {table}(dept_id, name) VALUES(%s,%s)", (dept_id, value))
            return cur.rowcount > 0

    def add_class(self, dept_id: str, class_name: str) -> bool:
        return self._add_to_set(_LIST_TABLES["classes"], dept_id, class_name)

    def add_division(self, dept_id: str, division: str) -> bool:
        return self._add_to_set(_LIST_TABLES["divisions"], dept_id, division)
