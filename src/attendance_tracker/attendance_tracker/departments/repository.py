from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Department


class DepartmentRepository(Protocol):
    def get_by_name(self, name: str) -> Optional[Department]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Department]:
        raise NotImplementedError

    def get_or_create(
        self,
        name: str,
        *,
        classes: Sequence[str],
        divisions: Sequence[str],
        created_by: Optional[str] = None,
    ) -> tuple[Department, bool]:
        """Return the department and whether this call created it.

        The initial lists are only applied when the department is created.
        """

        raise NotImplementedError

    def add_class(self, dept_id: str, class_name: str) -> bool:
        """Atomically append class_name unless present. False when it already existed."""

        raise NotImplementedError

    def add_division(self, dept_id: str, division: str) -> bool:
        raise NotImplementedError
