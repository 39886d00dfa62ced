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
    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @token_required
    def list_attendance():
        try:
            return jsonify([r.to_dict() for r in container.attendance_service.list_all()])
        except Exception:
            logger.exception("Error listing attendance")
            return json_error("Failed to fetch attendance", 500)

    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_create")
    @roles_required(Role.ADMIN, Role.MANAGER, Role.SUPERVISOR)
    def create_attendance():
        data = json_body()
        try:
            record = container.attendance_service.record(
                employee_id=data.get("employeeId"),
                work_date=data.get("date", ""),
                status=data.get("status", ""),
            )
            return jsonify(record.to_dict()), 201
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("Error recording attendance")
            return json_error("Failed to record attendance", 500)

    @app.route("/api/attendance/my-attendance", methods=["GET"], endpoint="attendance_mine")
    @token_required
    def my_attendance():
        user = current_user()
        try:
            records = container.attendance_service.list_for_user(user_id=user.user_id, role=user.role)
            return jsonify([r.to_dict() for r in records])
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("Error fetching attendance for user %s", user.user_id)
            return json_error("Failed to fetch attendance", 500)

    @app.route("/api/attendance/employee/<int:employee_id>", methods=["GET"], endpoint="attendance_for_employee")
    @token_required
    def employee_attendance(employee_id: int):
        try:
            records = container.attendance_service.list_for_employee(employee_id)
            return jsonify([r.to_dict() for r in records])
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("Error fetching attendance for employee %s", employee_id)
            return json_error("Failed to fetch attendance", 500)
