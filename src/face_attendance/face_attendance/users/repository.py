from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Employee, EmployeeDraft


class EmployeeRepository(Protocol):
    """Repository interface for the employee directory.

    Note (DIP): services depend on this interface, never on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        """Newest first."""

        raise NotImplementedError

    def create(self, draft: EmployeeDraft, *, now: datetime) -> int:
        """Raises ValidationError when email or employee_id is taken."""

        raise NotImplementedError

    def update(self, user_id: int, draft: EmployeeDraft, *, now: datetime) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError

    def mark_face_registered(self, user_id: int, *, now: datetime) -> bool:
        raise NotImplementedError
