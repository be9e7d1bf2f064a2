from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles a session can be opened with."""

    STUDENT = "student"
    TEACHER = "teacher"
    HOD = "hod"


class CaptureState(str, Enum):
    """Where a visit to a teacher's attendance link currently stands."""

    NO_LINK = "NO_LINK"
    NOT_FOUND = "NOT_FOUND"
    DISABLED = "DISABLED"
    READY = "READY"
    MARKED = "MARKED"
