from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import current_app, g, request

from ..common.http import json_error
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .model import AuthUser


def extract_token() -> Optional[str]:
    """Bearer token from the Authorization header, else the ``token`` query param."""
    header = request.headers.get("Authorization", "")
    if header:
        parts = header.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]
        return None
    return request.args.get("token") or None


def current_user() -> AuthUser:
    return g.current_user


def token_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        token = extract_token()
        if not token:
            return json_error("Access token missing", 401)
        try:
            g.current_user = current_app.extensions["container"].auth_service.decode(token)
        except AuthenticationError as e:
            return json_error(e)
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = frozenset(roles)

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if g.current_user.role not in allowed:
                return json_error("Access forbidden: insufficient rights", 403)
            return view(*args, **kwargs)

        return token_required(wrapper)

    return decorator
