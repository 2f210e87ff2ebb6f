from __future__ import annotations

from dataclasses import dataclass

from .attendance.memory_attendance_repository import InMemoryAttendanceLedger
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceLedger
from .attendance.service import AttendanceService
from .database.connection import DatabaseConnection
from .recognition.client import HttpIdentityResolver, IdentityResolver
from .settings import AppSettings
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import EmployeeRepository
from .users.service import AdminAuthService, UserService


@dataclass(frozen=True)
class Container:
    users_repo: EmployeeRepository
    attendance_ledger: AttendanceLedger
    resolver: IdentityResolver

    user_service: UserService
    attendance_service: AttendanceService
    admin_auth_service: AdminAuthService


def build_services(
    settings: AppSettings,
    *,
    users_repo: EmployeeRepository,
    attendance_ledger: AttendanceLedger,
    resolver: IdentityResolver,
) -> Container:
    """Wire services around already-built adapters (tests pass fakes here)."""

    return Container(
        users_repo=users_repo,
        attendance_ledger=attendance_ledger,
        resolver=resolver,
        user_service=UserService(users_repo, resolver),
        attendance_service=AttendanceService(
            attendance_ledger,
            users_repo,
            resolver,
            clock_in_window=settings.clock_in_window,
            clock_out_window=settings.clock_out_window,
        ),
        admin_auth_service=AdminAuthService(
            username=settings.admin_username,
            password_hash=settings.admin_password_hash,
            secret=settings.jwt_secret,
            token_ttl=settings.admin_token_ttl,
        ),
    )


def build_container(settings: AppSettings) -> Container:
    conn = DatabaseConnection.get_instance(settings.db)

    if settings.attendance_ledger == "memory":
        ledger: AttendanceLedger = InMemoryAttendanceLedger()
    else:
        ledger = MySQLAttendanceRepository(conn)

    return build_services(
        settings,
        users_repo=MySQLUserRepository(conn),
        attendance_ledger=ledger,
        resolver=HttpIdentityResolver(settings.face_service_url, timeout=settings.face_service_timeout),
    )
