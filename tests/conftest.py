from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

import pytest

from src.face_attendance.face_attendance.attendance.memory_attendance_repository import InMemoryAttendanceLedger
from src.face_attendance.face_attendance.container import build_services
from src.face_attendance.face_attendance.core.exceptions import ResolverError, ValidationError
from src.face_attendance.face_attendance.recognition.model import EnrollAck, IdentityMatch, NoMatch
from src.face_attendance.face_attendance.settings import load_settings
from src.face_attendance.face_attendance.users.model import Employee, EmployeeDraft


class InMemoryUsers:
    def __init__(self, users=()):
        self._by_id: dict[int, Employee] = {u.user_id: u for u in users}
        self._next_id = max(self._by_id, default=0) + 1

    def get_by_id(self, user_id: int) -> Optional[Employee]:
        return self._by_id.get(int(user_id))

    def list_all(self):
        return sorted(self._by_id.values(), key=lambda u: (u.created_at or datetime.min, u.user_id), reverse=True)

    def _check_unique(self, draft: EmployeeDraft, *, skip_id: Optional[int] = None) -> None:
        for u in self._by_id.values():
            if u.user_id != skip_id and (u.email == draft.email or u.employee_id == draft.employee_id):
                raise ValidationError("Email or Employee ID already exists")

    def create(self, draft: EmployeeDraft, *, now: datetime) -> int:
        self._check_unique(draft)
        user_id = self._next_id
        self._next_id += 1
        self._by_id[user_id] = Employee(
            user_id=user_id,
            name=draft.name,
            email=draft.email,
            employee_id=draft.employee_id,
            department=draft.department,
            role=draft.role,
            created_at=now,
            updated_at=now,
        )
        return user_id

    def update(self, user_id: int, draft: EmployeeDraft, *, now: datetime) -> bool:
        current = self._by_id.get(int(user_id))
        if not current:
            return False
        self._check_unique(draft, skip_id=current.user_id)
        self._by_id[current.user_id] = replace(
            current,
            name=draft.name,
            email=draft.email,
            employee_id=draft.employee_id,
            department=draft.department,
            role=draft.role,
            updated_at=now,
        )
        return True

    def delete_by_id(self, user_id: int) -> bool:
        return self._by_id.pop(int(user_id), None) is not None

    def mark_face_registered(self, user_id: int, *, now: datetime) -> bool:
        current = self._by_id.get(int(user_id))
        if not current:
            return False
        self._by_id[current.user_id] = replace(current, face_registered=True, updated_at=now)
        return True


class FakeResolver:
    """Scripted face service: set ``outcome``/``ack`` or ``error`` per test."""

    def __init__(self):
        self.outcome = NoMatch()
        self.ack = EnrollAck(success=True, message="Face registered")
        self.error: Optional[Exception] = None
        self.health_payload = {"status": "ok"}
        self.calls: list[tuple] = []

    def enroll(self, user_id, display_name, sample):
        self.calls.append(("enroll", user_id, display_name, sample))
        if self.error:
            raise self.error
        return self.ack

    def identify(self, sample):
        self.calls.append(("identify", sample))
        if self.error:
            raise self.error
        return self.outcome

    def health(self):
        if self.error:
            raise ResolverError("Face recognition service unavailable")
        return self.health_payload

    def match(self, user_id: int, confidence: float = 0.93) -> None:
        self.outcome = IdentityMatch(user_id=user_id, confidence=confidence)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 2, 9, 40, 0)


@pytest.fixture
def employee() -> Employee:
    return Employee(
        user_id=1,
        name="Ada Lovelace",
        email="ada@example.com",
        employee_id="EMP001",
        department="R&D",
        role="Engineer",
        created_at=datetime(2026, 1, 5, 8, 0, 0),
        updated_at=datetime(2026, 1, 5, 8, 0, 0),
    )


@pytest.fixture
def users_repo(employee) -> InMemoryUsers:
    return InMemoryUsers([employee])


@pytest.fixture
def ledger() -> InMemoryAttendanceLedger:
    return InMemoryAttendanceLedger()


@pytest.fixture
def resolver() -> FakeResolver:
    return FakeResolver()


@pytest.fixture
def settings():
    return load_settings("config.testing")


@pytest.fixture
def container(settings, users_repo, ledger, resolver):
    return build_services(settings, users_repo=users_repo, attendance_ledger=ledger, resolver=resolver)
