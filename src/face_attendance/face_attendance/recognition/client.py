from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

import requests

from ..core.exceptions import ResolverError
from .model import EnrollAck, IdentifyOutcome, IdentityMatch, NoMatch

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = "Face recognition service unavailable"


class IdentityResolver(Protocol):
    """Face recognition collaborator, consumed as an enroll/identify oracle."""

    def enroll(self, user_id: int, display_name: str, sample: str) -> EnrollAck:
        raise NotImplementedError

    def identify(self, sample: str) -> IdentifyOutcome:
        raise NotImplementedError

    def health(self) -> dict:
        raise NotImplementedError


class HttpIdentityResolver(IdentityResolver):
    """JSON-over-HTTP client for the face recognition service.

    One outbound request per call, bounded by ``timeout`` seconds. No caching
    and no retry: transport failures, non-2xx answers and malformed bodies all
    surface as ResolverError.
    """

    def __init__(self, base_url: str, *, timeout: float, session: Optional[requests.Session] = None):
        self._base_url = base_url.rstrip("/")
        self._timeout = float(timeout)
        self._session = session or requests.Session()

    def _request(self, method: str, endpoint: str, payload: Optional[dict] = None) -> dict:
        url = f"{self._base_url}{endpoint}"
        try:
            response = self._session.request(method, url, json=payload, timeout=self._timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning("Face service error on %s %s: %s", method, endpoint, e)
            raise ResolverError(UNAVAILABLE_MESSAGE) from e

        try:
            body = response.json()
        except ValueError as e:
            logger.warning("Face service returned non-JSON body on %s", endpoint)
            raise ResolverError("Face recognition service returned a malformed response") from e

        if not isinstance(body, dict) or not isinstance(body.get("success"), bool):
            raise ResolverError("Face recognition service returned a malformed response")
        return body

    def enroll(self, user_id: int, display_name: str, sample: str) -> EnrollAck:
        body = self._request(
            "POST",
            "/register",
            {"user_id": str(user_id), "user_name": display_name, "image": sample},
        )
        return EnrollAck(success=body["success"], message=body.get("message"))

    def identify(self, sample: str) -> IdentifyOutcome:
        body = self._request("POST", "/recognize", {"image": sample})
        if not body["success"]:
            return NoMatch(message=body.get("message") or NoMatch.message)

        return IdentityMatch(
            user_id=_parse_user_id(body.get("user_id")),
            confidence=_parse_confidence(body.get("confidence")),
        )

    def health(self) -> dict:
        try:
            response = self._session.get(f"{self._base_url}/health", timeout=self._timeout)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as e:
            raise ResolverError(UNAVAILABLE_MESSAGE) from e


def _parse_user_id(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ResolverError(f"Face recognition service returned an invalid user_id: {value!r}")


def _parse_confidence(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ResolverError(f"Face recognition service returned an invalid confidence: {value!r}")
