from __future__ import annotations

import io
import traceback
from dataclasses import replace

import qrcode
from flask import Flask, flash, redirect, render_template, request, send_file, url_for

from ..common.datetime_utils import now_local, today_iso
from ..core.constants import HISTORY_LIMIT
from ..core.enums import CaptureState, Role
from ..core.exceptions import DomainError
from ..container import Container
from ..users.session import current_context, role_required
from .model import AttendanceFilters, CaptureContext
from .review import apply_filters, attendance_link, daily_counts, records_to_csv, today_count
from .service import parse_location


def register(app: Flask, container: Container) -> None:
    def _render_student(capture: CaptureContext | None):
        student = current_context().current()
        history = []
        try:
            history = container.capture_service.history(student.get("prn"))
        except Exception:
            # History is informational; the capture flow stays usable without it.
            traceback.print_exc()
        return render_template(
            "student/dashboard.html",
            student=student,
            capture=capture,
            history=history[:HISTORY_LIMIT],
            stats=container.capture_service.stats(history),
            states=CaptureState,
        )

    @app.route("/student-dashboard", endpoint="student_dashboard")
    @role_required(Role.STUDENT)
    def student_dashboard():
        return _render_student(None)

    @app.route("/attendance/<teacher_id>/<division>", methods=["GET", "POST"], endpoint="attendance_link")
    def attendance_capture(teacher_id: str, division: str):
        ctx = current_context()
        if ctx.current() is None:
            return redirect(url_for("login", role=Role.STUDENT.value))
        if ctx.role != Role.STUDENT:
            return redirect(url_for("index"))

        try:
            capture = container.capture_service.open_link(teacher_id, division)
        except Exception as e:
            traceback.print_exc()
            flash(f"Failed to load teacher details: {e}", "danger")
            return _render_student(None)

        if request.method == "GET":
            return _render_student(capture)

        location = parse_location(request.form.get("latitude"), request.form.get("longitude"))
        try:
            container.capture_service.mark(
                student=ctx.current(),
                teacher_id=teacher_id,
                division=division,
                location=location,
            )
            flash("✅ Attendance marked successfully!", "success")
            if location is None:
                flash("Location permission denied. Attendance was marked without location.", "warning")
            return _render_student(replace(capture, state=CaptureState.MARKED))
        except DomainError as e:
            flash(str(e), "danger")
        except Exception as e:
            traceback.print_exc()
            flash(f"Failed to mark attendance: {e}", "danger")
        return _render_student(capture)

    @app.route("/teacher-dashboard", endpoint="teacher_dashboard")
    @role_required(Role.TEACHER)
    def teacher_dashboard():
        teacher_id = current_context().current()["id"]
        filters = AttendanceFilters.from_mapping(request.args)
        teacher, records = None, []
        try:
            teacher = container.session_control_service.get_teacher(teacher_id)
            records = container.review_service.records_for(teacher_id)
        except DomainError as e:
            flash(str(e), "danger")
        except Exception as e:
            traceback.print_exc()
            flash(f"Failed to load data: {e}", "danger")

        selected_prn = request.args.get("student", "")
        divisions = teacher.assigned_divisions if teacher else ()
        return render_template(
            "teacher/dashboard.html",
            teacher=teacher,
            records=records,
            filtered=apply_filters(records, filters),
            filters=filters,
            analytics=daily_counts(records),
            today_total=today_count(records),
            links=[(d, attendance_link(request.host_url, teacher_id, d)) for d in divisions],
            progress=container.review_service.progress(records, selected_prn) if selected_prn else None,
            show_lecture_form=request.args.get("lecture_form") == "1",
            default_lecture_date=today_iso(),
        )

    @app.route("/teacher/attendance/enable", methods=["POST"], endpoint="teacher_enable_attendance")
    @role_required(Role.TEACHER)
    def teacher_enable_attendance():
        teacher_id = current_context().current()["id"]
        try:
            container.session_control_service.enable(
                teacher_id,
                request.form.get("lecture_number", ""),
                request.form.get("lecture_date", ""),
            )
            flash("✅ Attendance enabled successfully!", "success")
        except DomainError as e:
            flash(str(e), "danger")
            return redirect(url_for("teacher_dashboard", lecture_form="1"))
        except Exception as e:
            traceback.print_exc()
            flash(f"Failed to enable attendance: {e}", "danger")
        return redirect(url_for("teacher_dashboard"))

    @app.route("/teacher/attendance/disable", methods=["POST"], endpoint="teacher_disable_attendance")
    @role_required(Role.TEACHER)
    def teacher_disable_attendance():
        try:
            container.session_control_service.disable(current_context().current()["id"])
            flash("Attendance disabled successfully!", "success")
        except Exception as e:
            traceback.print_exc()
            flash(f"Failed to disable attendance: {e}", "danger")
        return redirect(url_for("teacher_dashboard"))

    @app.route("/teacher/attendance/<record_id>/delete", methods=["POST"], endpoint="teacher_delete_attendance")
    @role_required(Role.TEACHER)
    def teacher_delete_attendance(record_id: str):
        try:
            container.review_service.delete_record(teacher_id=current_context().current()["id"], record_id=record_id)
            flash("Attendance removed successfully!", "success")
        except DomainError as e:
            flash(str(e), "danger")
        except Exception as e:
            traceback.print_exc()
            flash(f"Failed to remove attendance: {e}", "danger")
        return redirect(url_for("teacher_dashboard"))

    @app.route("/teacher/attendance.csv", endpoint="teacher_attendance_csv")
    @role_required(Role.TEACHER)
    def teacher_attendance_csv():
        records = container.review_service.records_for(current_context().current()["id"])
        filtered = apply_filters(records, AttendanceFilters.from_mapping(request.args))
        filename = f"attendance_{now_local().strftime('%Y%m%d')}.csv"
        return app.response_class(
            records_to_csv(filtered),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/teacher/links/<division>/qr.png", endpoint="teacher_link_qr")
    @role_required(Role.TEACHER)
    def teacher_link_qr(division: str):
        link = attendance_link(request.host_url, current_context().current()["id"], division)

        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=10,
            border=2,
        )
        qr.add_data(link)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buf = io.BytesIO()
        img.save(buf, format="PNG")
        buf.seek(0)

        return send_file(buf, mimetype="image/png")
