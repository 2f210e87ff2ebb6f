from __future__ import annotations

from functools import wraps

from flask import Flask, jsonify, request

from ..common.http import employee_ref_to_json, error_response, log_row_to_json, record_to_json, server_error
from ..common.validators import optional_date, require_int
from ..core.exceptions import DomainError, ValidationError
from ..container import Container
from .model import AttendanceQuery


def register(app: Flask, container: Container) -> None:
    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            auth_header = request.headers.get("Authorization", "")
            token = auth_header.split(" ", 1)[1].strip() if " " in auth_header else None
            try:
                container.admin_auth_service.verify(token)
            except DomainError as e:
                return error_response(e)
            return view(*args, **kwargs)

        return wrapper

    def _logs_response(query: AttendanceQuery):
        rows = container.attendance_service.list_attendance(query)
        return jsonify({"success": True, "logs": [log_row_to_json(r) for r in rows]})

    @app.route("/api/attendance/recognize", methods=["POST"], endpoint="attendance_recognize")
    def recognize():
        data = request.get_json(silent=True) or {}
        try:
            result = container.attendance_service.recognize(data.get("image"))
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error(e, "Face recognition error")

        if not result.success:
            return jsonify({"success": False, "message": result.message})
        return jsonify(
            {
                "success": True,
                "user": employee_ref_to_json(result.employee),
                "confidence": result.confidence,
            }
        )

    @app.route("/api/attendance/clock", methods=["POST"], endpoint="attendance_clock")
    def clock():
        data = request.get_json(silent=True) or {}
        try:
            result = container.attendance_service.clock(data.get("userId"), data.get("action"))
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error(e, "Clock in/out error")

        body = {
            "success": result.success,
            "message": result.message,
            "attendance": record_to_json(result.record) if result.record else None,
        }
        if result.working_hours is not None:
            body["workingHours"] = result.working_hours
        return jsonify(body)

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    def list_attendance():
        try:
            user_id = request.args.get("userId")
            query = AttendanceQuery(
                user_id=require_int(user_id, "userId") if user_id else None,
                work_date=optional_date(request.args.get("date"), "date"),
                date_from=optional_date(request.args.get("from"), "from"),
                date_to=optional_date(request.args.get("to"), "to"),
            )
            return _logs_response(query)
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error(e, "Attendance listing error")

    @app.route("/api/attendance/user/<int:user_id>", methods=["GET"], endpoint="attendance_for_user")
    def attendance_for_user(user_id: int):
        try:
            return _logs_response(AttendanceQuery(user_id=user_id))
        except Exception as e:
            return server_error(e, "Attendance listing error")

    @app.route("/api/attendance/date/<date_s>", methods=["GET"], endpoint="attendance_for_date")
    def attendance_for_date(date_s: str):
        try:
            work_date = optional_date(date_s, "date")
            if work_date is None:
                raise ValidationError("date is required")
            return _logs_response(AttendanceQuery(work_date=work_date))
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error(e, "Attendance listing error")

    @app.route("/admin/attendance", methods=["GET"], endpoint="admin_attendance")
    @admin_required
    def admin_attendance():
        try:
            return _logs_response(AttendanceQuery())
        except Exception as e:
            return server_error(e, "Attendance listing error")
