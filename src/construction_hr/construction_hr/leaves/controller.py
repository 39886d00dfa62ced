from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..common.http import json_body, json_error
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import DomainError
from ..users.auth import current_user, roles_required, token_required

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/leaves/apply", methods=["POST"], endpoint="leaves_apply")
    @token_required
    def apply_leave():
        data = json_body()
        try:
            leave = container.leave_service.apply(
                caller=current_user(),
                from_date=data.get("fromDate", ""),
                to_date=data.get("toDate", ""),
                reason=data.get("reason", ""),
                user_id=data.get("userId"),
            )
            return jsonify({"message": "Leave applied successfully", "leaveId": leave.leave_id}), 201
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("Error applying for leave")
            return json_error("Failed to apply for leave", 500)

    @app.route("/api/leaves/my-leaves", methods=["GET"], endpoint="leaves_mine")
    @token_required
    def my_leaves():
        try:
            return jsonify([l.to_dict() for l in container.leave_service.list_mine(current_user().user_id)])
        except Exception:
            logger.exception("Error fetching leaves for user %s", current_user().user_id)
            return json_error("Failed to fetch leaves", 500)

    @app.route("/api/leaves/admin", methods=["GET"], endpoint="leaves_admin")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def all_leaves():
        try:
            leaves = container.leave_service.list_all(current_role=current_user().role)
            return jsonify([l.to_dict() for l in leaves])
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("Error listing leaves")
            return json_error("Failed to fetch leaves", 500)

    def _update_status(leave_id: int):
        data = json_body()
        try:
            leave = container.leave_service.update_status(
                caller=current_user(),
                leave_id=leave_id,
                status=data.get("status", ""),
            )
            return jsonify(leave.to_dict())
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("Error updating leave %s", leave_id)
            return json_error("Failed to update leave status", 500)

    @app.route("/api/leaves/<int:leave_id>/status", methods=["PUT"], endpoint="leaves_update_status")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def update_status(leave_id: int):
        return _update_status(leave_id)

    # Older admin screens still PATCH this path.
    @app.route("/api/leaves/admin/<int:leave_id>", methods=["PATCH"], endpoint="leaves_admin_update")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def admin_update(leave_id: int):
        return _update_status(leave_id)
