from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from ..core.constants import DEFAULT_JWT_EXPIRES_HOURS
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .model import AuthUser, User


class TokenService:
    """Issues and verifies the HS256 bearer tokens used by the API and the socket channel.

    Payload: ``{_id, role, username, iat, exp}``.
    """

    def __init__(self, secret: str, *, expires_hours: int = DEFAULT_JWT_EXPIRES_HOURS, algorithm: str = "HS256"):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self._expires = timedelta(hours=int(expires_hours))
        self._algorithm = algorithm

    def issue(self, user: User, *, now: Optional[datetime] = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "_id": user.user_id,
            "role": user.role.value,
            "username": user.username,
            "iat": issued_at,
            "exp": issued_at + self._expires,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> AuthUser:
        try:
            data = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token expired")
        except jwt.InvalidTokenError:
            raise AuthenticationError("Invalid token")

        try:
            return AuthUser(user_id=int(data["_id"]), username=str(data["username"]), role=Role(data["role"]))
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("Invalid token")
