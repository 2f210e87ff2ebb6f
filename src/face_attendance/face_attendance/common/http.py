from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from flask import jsonify

from ..attendance.model import AttendanceLogRow, AttendanceRecord, EmployeeRef
from ..core.exceptions import (
    AuthenticationError,
    DomainError,
    DuplicateRecord,
    NotFoundError,
    PolicyRejection,
    ResolverError,
)
from ..users.model import Employee
from .datetime_utils import format_iso_date

logger = logging.getLogger(__name__)


def status_for(error: DomainError) -> int:
    if isinstance(error, DuplicateRecord):
        return 409
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, AuthenticationError):
        return 401
    if isinstance(error, ResolverError):
        return 503
    return 400


def error_response(error: DomainError):
    """JSON body for an expected failure.

    Policy rejections are normal business outcomes and only logged at INFO.
    """

    if isinstance(error, ResolverError):
        logger.warning("Dependency failure: %s", error)
    elif isinstance(error, PolicyRejection):
        logger.info("Rejected (%s): %s", type(error).__name__, error)
    return jsonify({"success": False, "message": str(error), "error": type(error).__name__}), status_for(error)


def server_error(error: Exception, context: str):
    logger.exception("%s: %s", context, error)
    return jsonify({"success": False, "message": str(error)}), 500


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def employee_ref_to_json(ref: EmployeeRef) -> dict:
    return {
        "id": ref.user_id,
        "name": ref.name,
        "employeeId": ref.employee_id,
        "department": ref.department,
    }


def record_to_json(record: AttendanceRecord, employee: Optional[EmployeeRef] = None) -> dict:
    out = {
        "id": record.attendance_id,
        "userId": record.user_id,
        "employeeId": record.employee_code,
        "date": format_iso_date(record.work_date),
        "clockIn": _iso(record.clock_in),
        "clockOut": _iso(record.clock_out),
        "status": record.status.value,
        "workingHours": record.working_hours,
        "createdAt": _iso(record.created_at),
    }
    if employee is not None:
        out["user"] = employee_ref_to_json(employee)
    return out


def log_row_to_json(row: AttendanceLogRow) -> dict:
    return record_to_json(row.record, row.employee)


def employee_to_json(user: Employee) -> dict:
    return {
        "id": user.user_id,
        "name": user.name,
        "email": user.email,
        "employeeId": user.employee_id,
        "department": user.department,
        "role": user.role,
        "faceRegistered": user.face_registered,
        "imageUrl": user.image_url,
        "createdAt": _iso(user.created_at),
        "updatedAt": _iso(user.updated_at),
    }
