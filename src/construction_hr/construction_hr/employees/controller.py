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
    @app.route("/api/employees", methods=["GET"], endpoint="employees_list")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def list_employees():
        try:
            return jsonify([e.to_dict() for e in container.employee_service.list_all()])
        except Exception:
            logger.exception("Error listing employees")
            return json_error("Failed to fetch employees", 500)

    # Registered before /<id> so "profile" is never read as an id.
    @app.route("/api/employees/profile", methods=["GET"], endpoint="employees_profile")
    @token_required
    def profile():
        try:
            return jsonify(container.employee_service.profile(current_user().user_id).to_dict())
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("Error finding employee profile for user %s", current_user().user_id)
            return json_error("Failed to fetch employee profile", 500)

    @app.route("/api/employees/<int:employee_id>", methods=["GET"], endpoint="employees_get")
    @token_required
    def get_employee(employee_id: int):
        try:
            return jsonify(container.employee_service.get(employee_id).to_dict())
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("Error finding employee %s", employee_id)
            return json_error("Failed to fetch employee", 500)

    @app.route("/api/employees", methods=["POST"], endpoint="employees_create")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def create_employee():
        data = json_body()
        try:
            employee = container.employee_service.create(
                current_role=current_user().role,
                name=data.get("name", ""),
                role=data.get("role"),
                salary=data.get("salary"),
                user_id=data.get("userId"),
            )
            return jsonify(employee.to_dict()), 201
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("Error creating employee")
            return json_error("Failed to create employee", 500)

    @app.route("/api/employees/<int:employee_id>", methods=["PATCH"], endpoint="employees_update")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def update_employee(employee_id: int):
        try:
            employee = container.employee_service.update(
                current_role=current_user().role,
                employee_id=employee_id,
                fields=json_body(),
            )
            return jsonify(employee.to_dict())
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("Error updating employee %s", employee_id)
            return json_error("Failed to update employee", 500)

    @app.route("/api/employees/<int:employee_id>", methods=["DELETE"], endpoint="employees_delete")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def delete_employee(employee_id: int):
        try:
            container.employee_service.delete(current_role=current_user().role, employee_id=employee_id)
            return jsonify({"message": "Employee deleted"})
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("Error deleting employee %s", employee_id)
            return json_error("Failed to delete employee", 500)
