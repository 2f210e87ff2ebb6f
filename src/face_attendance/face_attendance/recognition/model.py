from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class EnrollAck:
    success: bool
    message: Optional[str] = None

    def to_dict(self) -> dict:
        out: dict = {"success": self.success}
        if self.message is not None:
            out["message"] = self.message
        return out


@dataclass(frozen=True)
class IdentityMatch:
    user_id: int
    confidence: Optional[float] = None


@dataclass(frozen=True)
class NoMatch:
    message: str = "Face not recognized"


IdentifyOutcome = Union[IdentityMatch, NoMatch]
