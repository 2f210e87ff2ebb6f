from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

import jwt
from werkzeug.security import check_password_hash

from ..common.datetime_utils import now_local
from ..common.validators import require_int, require_non_empty
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from ..recognition.client import IdentityResolver
from ..recognition.model import EnrollAck
from .model import Employee, EmployeeDraft
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


class UserService:
    """Use cases for the employee directory, plus face enrolment."""

    def __init__(self, users: EmployeeRepository, resolver: IdentityResolver):
        self._users = users
        self._resolver = resolver

    def list_users(self) -> Sequence[Employee]:
        return self._users.list_all()

    def get_user(self, user_id) -> Employee:
        user = self._users.get_by_id(require_int(user_id, "User ID"))
        if not user:
            raise NotFoundError("User not found")
        return user

    def create_user(self, *, name, email, employee_id, department, role) -> Employee:
        draft = _validate_draft(name=name, email=email, employee_id=employee_id, department=department, role=role)
        user_id = self._users.create(draft, now=now_local())
        logger.info("Created employee user_id=%s employee_id=%s", user_id, draft.employee_id)
        return self.get_user(user_id)

    def update_user(self, user_id, *, name, email, employee_id, department, role) -> Employee:
        user = self.get_user(user_id)
        draft = _validate_draft(name=name, email=email, employee_id=employee_id, department=department, role=role)
        self._users.update(user.user_id, draft, now=now_local())
        return self.get_user(user.user_id)

    def delete_user(self, user_id) -> None:
        user_id = require_int(user_id, "User ID")
        if not self._users.delete_by_id(user_id):
            raise NotFoundError("User not found")
        logger.info("Deleted employee user_id=%s", user_id)

    def register_face(self, user_id, sample) -> EnrollAck:
        """Forward a face sample; flip ``face_registered`` only on success."""

        if user_id in (None, "") or not sample:
            raise ValidationError("User ID and image are required")

        user = self.get_user(user_id)
        ack = self._resolver.enroll(user.user_id, user.name, str(sample))
        if ack.success:
            self._users.mark_face_registered(user.user_id, now=now_local())
            logger.info("Face registered for user_id=%s", user.user_id)
        return ack


class AdminAuthService:
    """Admin login against configured credentials; issues HS256 bearer tokens."""

    def __init__(self, *, username: str, password_hash: str, secret: str, token_ttl: timedelta):
        self._username = username
        self._password_hash = password_hash
        self._secret = secret
        self._token_ttl = token_ttl

    def login(self, username: str, password: str, *, now: Optional[datetime] = None) -> str:
        if not username or not password:
            raise AuthenticationError("Invalid credentials")
        if not self._password_hash or not self._secret:
            # Admin login disabled until both are configured.
            raise AuthenticationError("Invalid credentials")

        try:
            ok = username == self._username and check_password_hash(self._password_hash, password)
        except ValueError:
            # e.g. a placeholder or corrupted hash in the environment
            ok = False
        if not ok:
            raise AuthenticationError("Invalid credentials")

        issued = now or datetime.now(timezone.utc)
        return jwt.encode(
            {"sub": username, "iat": issued, "exp": issued + self._token_ttl},
            self._secret,
            algorithm="HS256",
        )

    def verify(self, token: Optional[str]) -> str:
        if not token:
            raise AuthenticationError("No token provided")
        if not self._secret:
            # No signing key configured: nothing can be trusted.
            raise AuthenticationError("Invalid token")
        try:
            claims = jwt.decode(token, self._secret, algorithms=["HS256"])
        except jwt.PyJWTError:
            raise AuthenticationError("Invalid token")
        if claims.get("sub") != self._username:
            raise AuthenticationError("Invalid token")
        return claims["sub"]


def _validate_draft(*, name, email, employee_id, department, role) -> EmployeeDraft:
    values = (name, email, employee_id, department, role)
    if any(v is None or not str(v).strip() for v in values):
        raise ValidationError("All fields are required")

    email = require_non_empty(email, "Email")
    if "@" not in email:
        raise ValidationError("Email is invalid")

    return EmployeeDraft(
        name=require_non_empty(name, "Name"),
        email=email.lower(),
        employee_id=require_non_empty(employee_id, "Employee ID"),
        department=require_non_empty(department, "Department"),
        role=require_non_empty(role, "Role"),
    )
