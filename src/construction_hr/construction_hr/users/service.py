from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import parse_enum, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ConflictError, NotFoundError
from .model import AuthUser, User
from .repository import UserRepository
from .tokens import TokenService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: User

    def to_dict(self) -> dict:
        return {
            "_id": self.user.user_id,
            "token": self.token,
            "role": self.user.role.value,
            "username": self.user.username,
            "user": self.user.to_public_dict(),
        }


class AuthService:
    """Use case: authenticate user (login) and verify bearer tokens."""

    def __init__(self, users: UserRepository, tokens: TokenService):
        self._users = users
        self._tokens = tokens

    def login(self, username: str, password: str, requested_role: Optional[str] = None) -> LoginResult:
        user = self._users.get_by_username((username or "").strip())
        if not user:
            logger.info("Login rejected: unknown user %s", username)
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except (ValueError, TypeError):
            # e.g. placeholder or corrupted hashes
            ok = False
        if not ok:
            logger.info("Login rejected: bad password for %s", username)
            raise AuthenticationError("Invalid credentials")

        # The admin portal only admits Admins; the employee portal admits everyone else.
        if requested_role == Role.ADMIN.value and user.role != Role.ADMIN:
            raise AuthorizationError("Access denied. Admin credentials required.")
        if requested_role == Role.WORKER.value and user.role == Role.ADMIN:
            raise AuthorizationError("Please use admin login for admin accounts.")

        logger.info("Successful login for %s with role %s", user.username, user.role.value)
        return LoginResult(token=self._tokens.issue(user), user=user)

    def decode(self, token: str) -> AuthUser:
        return self._tokens.decode(token)


class UserService:
    """Use case: manage login accounts (admin)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def register(self, *, current_role: Role, username: str, password: str, role: str) -> User:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Access forbidden: insufficient rights")

        username = require_non_empty(username, "Username")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        new_role = parse_enum(Role, role, "role")

        if self._users.get_by_username(username):
            raise ConflictError("Username already exists")

        user_id = self._users.create_user(
            username=username,
            password_hash=generate_password_hash(password),
            role=new_role,
        )
        logger.info("User %s registered with role %s", username, new_role.value)
        return self.get(user_id)

    def get(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def change_role(self, *, current_role: Role, user_id: int, role: str) -> User:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Access forbidden: insufficient rights")

        new_role = parse_enum(Role, role, "role")
        user = self.get(user_id)
        if user.role != new_role:
            self._users.update_role(user.user_id, new_role)
            logger.info("Role of %s changed %s -> %s", user.username, user.role.value, new_role.value)
        return self.get(user_id)
