from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Department:
    """Classes and divisions offered by one department, in first-seen order."""

    dept_id: str
    name: str
    classes: tuple[str, ...] = ()
    divisions: tuple[str, ...] = ()
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
