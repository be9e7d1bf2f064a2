import pytest

from src.attendance_tracker.attendance_tracker.core.exceptions import NotFoundError, ValidationError
from src.attendance_tracker.attendance_tracker.users.model import Lecture


def test_enable_sets_flag_and_lecture(container, teachers, teacher):
    teachers.add(teacher)

    lecture = container.session_control_service.enable("T123", " 6 ", "2024-01-11")

    assert lecture == Lecture(number="6", date="2024-01-11")
    saved = teachers.get_by_id("T123")
    assert saved.attendance_enabled is True
    assert saved.current_lecture == lecture


@pytest.mark.parametrize("number,day", [("", "2024-01-11"), ("6", ""), ("  ", "  ")])
def test_enable_requires_number_and_date(container, teachers, teacher, number, day):
    teachers.add(teacher)

    with pytest.raises(ValidationError, match="lecture number and date"):
        container.session_control_service.enable("T123", number, day)
    assert teachers.state_writes == []
    assert teachers.get_by_id("T123") == teacher


def test_enable_unknown_teacher(container):
    with pytest.raises(NotFoundError):
        container.session_control_service.enable("missing", "1", "2024-01-11")


def test_disable_clears_lecture(container, teachers, teacher):
    teachers.add(teacher)

    container.session_control_service.disable("T123")

    saved = teachers.get_by_id("T123")
    assert saved.attendance_enabled is False
    assert saved.current_lecture is None


def test_disable_writes_even_when_already_disabled(container, teachers, teacher):
    teachers.add(teacher)
    container.session_control_service.disable("T123")
    container.session_control_service.disable("T123")

    assert len(teachers.state_writes) == 2
