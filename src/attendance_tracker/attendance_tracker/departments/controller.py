from __future__ import annotations

import traceback

from flask import Flask, flash, redirect, render_template, request, url_for

from ..core.enums import Role
from ..core.exceptions import DomainError
from ..container import Container
from ..users.session import current_context, role_required


def register(app: Flask, container: Container) -> None:
    def _hod() -> dict:
        return current_context().current()

    def _run(action: str, fn, success: str):
        """Run one HOD action; domain errors verbatim, anything else prefixed by the action."""
        try:
            fn()
            flash(success, "success")
        except DomainError as e:
            flash(str(e), "danger")
        except Exception as e:
            traceback.print_exc()
            flash(f"Failed to {action}: {e}", "danger")
        return redirect(url_for("hod_dashboard", search=request.args.get("search", "")))

    @app.route("/hod-dashboard", endpoint="hod_dashboard")
    @role_required(Role.HOD)
    def hod_dashboard():
        hod = _hod()
        search = request.args.get("search", "")
        teachers, students, departments, department = [], [], [], None
        try:
            teachers = container.staff_service.list_teachers(hod["department"])
            students = container.staff_service.list_students(hod["department"])
            departments = container.department_service.list_all()
            department = next((d for d in departments if d.name == hod["department"]), None)
        except Exception as e:
            traceback.print_exc()
            flash(f"Failed to load data: {e}", "danger")

        return render_template(
            "hod/dashboard.html",
            hod=hod,
            teachers=teachers,
            students=container.staff_service.search_students(students, search),
            total_students=len(students),
            departments=departments,
            classes=department.classes if department else (),
            divisions=department.divisions if department else (),
            search=search,
        )

    @app.route("/hod/teachers", methods=["POST"], endpoint="hod_add_teacher")
    @role_required(Role.HOD)
    def hod_add_teacher():
        name = request.form.get("name", "")
        return _run(
            "add teacher",
            lambda: container.staff_service.add_teacher(
                hod=_hod(),
                name=name,
                phone=request.form.get("phone", ""),
                email=request.form.get("email", ""),
                subject=request.form.get("subject", ""),
                assigned_classes=request.form.getlist("assigned_classes"),
                assigned_divisions=request.form.getlist("assigned_divisions"),
            ),
            f"Teacher {name.strip()} added successfully!",
        )

    @app.route("/hod/teachers/<teacher_id>/delete", methods=["POST"], endpoint="hod_delete_teacher")
    @role_required(Role.HOD)
    def hod_delete_teacher(teacher_id: str):
        return _run(
            "delete teacher",
            lambda: container.staff_service.delete_teacher(department=_hod()["department"], teacher_id=teacher_id),
            "Teacher deleted successfully!",
        )

    @app.route("/hod/students/<student_id>/delete", methods=["POST"], endpoint="hod_delete_student")
    @role_required(Role.HOD)
    def hod_delete_student(student_id: str):
        return _run(
            "remove student",
            lambda: container.staff_service.delete_student(department=_hod()["department"], student_id=student_id),
            "Student removed successfully!",
        )

    @app.route("/hod/departments", methods=["POST"], endpoint="hod_add_department")
    @role_required(Role.HOD)
    def hod_add_department():
        name = request.form.get("name", "").strip()
        return _run(
            "add department",
            lambda: container.department_service.add_department(name, created_by=_hod().get("id")),
            f'Department "{name}" added successfully!',
        )

    @app.route("/hod/classes", methods=["POST"], endpoint="hod_add_class")
    @role_required(Role.HOD)
    def hod_add_class():
        class_name = request.form.get("class_name", "").strip()
        return _run(
            "add class",
            lambda: container.department_service.add_class(_hod()["department"], class_name),
            f"Class {class_name} added successfully!",
        )

    @app.route("/hod/divisions", methods=["POST"], endpoint="hod_add_division")
    @role_required(Role.HOD)
    def hod_add_division():
        division = request.form.get("division", "").strip()
        return _run(
            "add division",
            lambda: container.department_service.add_division(_hod()["department"], division),
            f"Division {division} added successfully!",
        )
