from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Login identity with its permission role.

    Note: Plain data object (no DB access code).
    """

    user_id: int
    username: str
    password_hash: str
    role: Role
    created_at: Optional[datetime] = None

    def to_public_dict(self) -> dict:
        return {"_id": self.user_id, "username": self.username, "role": self.role.value}


@dataclass(frozen=True)
class AuthUser:
    """Identity decoded from a bearer token; what request handlers see."""

    user_id: int
    username: str
    role: Role
