from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Domain entity: a directory entry the attendance engine refers to by ``user_id``.

    Note: Plain data object, no DB access here.
    """

    user_id: int
    name: str
    email: str
    employee_id: str
    department: str
    role: str
    face_registered: bool = False
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class EmployeeDraft:
    """Validated input for create/update."""

    name: str
    email: str
    employee_id: str
    department: str
    role: str
