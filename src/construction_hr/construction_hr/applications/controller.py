from __future__ import annotations

import logging

from flask import Flask, jsonify, request, send_file

from ..common.http import json_body, json_error
from ..container import Container
from ..core.enums import DocumentType, Role
from ..core.exceptions import DomainError
from ..users.auth import current_user, roles_required

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/applications/register", methods=["POST"], endpoint="applications_register")
    def register_worker():
        try:
            application = container.application_service.register(json_body(), request.files)
            return (
                jsonify(
                    {
                        "message": "Registration successful! Your application is under review. We will contact you soon.",
                        "applicationId": application.application_id,
                    }
                ),
                201,
            )
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("Error processing worker registration")
            return json_error("Failed to process registration. Please try again later.", 500)

    @app.route("/api/applications/apply", methods=["POST"], endpoint="applications_apply")
    def apply():
        try:
            application = container.application_service.apply(json_body(), request.files)
            return jsonify({"message": "Application submitted successfully", "applicationId": application.application_id}), 201
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("Error processing application")
            return json_error("Failed to process application. Please try again later.", 500)

    @app.route("/api/applications", methods=["GET"], endpoint="applications_list")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def list_applications():
        try:
            return jsonify([a.to_dict() for a in container.application_service.list_all()])
        except Exception:
            logger.exception("Error fetching applications")
            return json_error("Failed to fetch applications", 500)

    @app.route("/api/applications/<int:application_id>/status", methods=["PUT"], endpoint="applications_update_status")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def update_status(application_id: int):
        data = json_body()
        try:
            application = container.application_service.update_status(
                reviewer=current_user(),
                application_id=application_id,
                status=data.get("status", ""),
            )
            return jsonify({"message": "Application status updated successfully", "application": application.to_dict()})
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("Error updating application %s", application_id)
            return json_error("Failed to update application status", 500)

    @app.route("/api/applications/<int:application_id>/hire", methods=["POST"], endpoint="applications_hire")
    @roles_required(Role.ADMIN)
    def hire(application_id: int):
        data = json_body()
        try:
            outcome = container.application_service.hire(
                reviewer=current_user(),
                application_id=application_id,
                salary=data.get("salary"),
                role=data.get("role"),
            )
            return jsonify(outcome.to_dict()), 201
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("Error creating employee account from application %s", application_id)
            return json_error("Failed to create employee account", 500)

    def _send_document(application_id: int, doc_type: str):
        try:
            path, kind = container.application_service.document_path(application_id, doc_type)
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("Error downloading %s for application %s", doc_type, application_id)
            return json_error("Failed to download document", 500)
        # Photos are shown inline, other documents are downloaded.
        return send_file(path, as_attachment=kind != DocumentType.PHOTO, download_name=path.name)

    @app.route("/api/applications/<int:application_id>/resume", methods=["GET"], endpoint="applications_resume")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def resume(application_id: int):
        return _send_document(application_id, DocumentType.RESUME.value)

    @app.route(
        "/api/applications/<int:application_id>/document/<doc_type>",
        methods=["GET"],
        endpoint="applications_document",
    )
    @roles_required(Role.ADMIN, Role.MANAGER)
    def document(application_id: int, doc_type: str):
        return _send_document(application_id, doc_type)
