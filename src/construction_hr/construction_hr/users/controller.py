from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..common.http import json_body, json_error
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import DomainError
from .auth import current_user, roles_required, token_required

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        data = json_body()
        try:
            result = container.auth_service.login(
                data.get("username", ""),
                data.get("password", ""),
                requested_role=data.get("role"),
            )
            return jsonify(result.to_dict())
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("Login error")
            return json_error("An error occurred during login", 500)

    @app.route("/api/auth/register", methods=["POST"], endpoint="auth_register")
    @roles_required(Role.ADMIN)
    def register_user():
        data = json_body()
        try:
            user = container.user_service.register(
                current_role=current_user().role,
                username=data.get("username", ""),
                password=data.get("password", ""),
                role=data.get("role", ""),
            )
            return jsonify({"message": "User registered", "user": user.to_public_dict()}), 201
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("Error registering user")
            return json_error("Failed to register user", 500)

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @token_required
    def me():
        try:
            user = container.user_service.get(current_user().user_id)
            return jsonify(user.to_public_dict())
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("Error fetching user profile")
            return json_error("Failed to fetch user", 500)

    @app.route("/api/users/<int:user_id>/role", methods=["PATCH"], endpoint="change_user_role")
    @roles_required(Role.ADMIN)
    def change_role(user_id: int):
        data = json_body()
        try:
            user = container.user_service.change_role(
                current_role=current_user().role,
                user_id=user_id,
                role=data.get("role", ""),
            )
            return jsonify(user.to_public_dict())
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("Error changing role of user %s", user_id)
            return json_error("Failed to update user role", 500)
