from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.http import json_body, json_error
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import DomainError
from ..users.auth import current_user, roles_required, token_required

logger = logging.getLogger(__name__)

_REPORTERS = (Role.ADMIN, Role.MANAGER, Role.SUPERVISOR)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/site-monitoring", methods=["GET"], endpoint="site_reports_list")
    @token_required
    def list_reports():
        try:
            return jsonify([r.to_dict() for r in container.site_monitoring_service.list_all()])
        except Exception:
            logger.exception("Error fetching site monitoring reports")
            return json_error("Error fetching site monitoring reports", 500)

    @app.route("/api/site-monitoring/<int:report_id>", methods=["GET"], endpoint="site_reports_get")
    @token_required
    def get_report(report_id: int):
        try:
            return jsonify(container.site_monitoring_service.get(report_id).to_dict())
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("Error fetching site report %s", report_id)
            return json_error("Error fetching site monitoring report", 500)

    @app.route("/api/site-monitoring", methods=["POST"], endpoint="site_reports_create")
    @roles_required(*_REPORTERS)
    def create_report():
        try:
            report = container.site_monitoring_service.create(
                caller=current_user(),
                fields=json_body(),
                photos=request.files.getlist("photos"),
            )
            return jsonify(report.to_dict()), 201
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("Error saving site report")
            return json_error("Error saving site monitoring report", 500)

    @app.route("/api/site-monitoring/<int:report_id>", methods=["PUT"], endpoint="site_reports_update")
    @roles_required(*_REPORTERS)
    def update_report(report_id: int):
        data = json_body()
        try:
            report = container.site_monitoring_service.update(
                caller=current_user(),
                report_id=report_id,
                fields=data,
                removed_photo_ids=data.get("removedPhotos"),
                photos=request.files.getlist("photos"),
            )
            return jsonify(report.to_dict())
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("Error updating site report %s", report_id)
            return json_error("Error updating site monitoring report", 500)

    @app.route("/api/site-monitoring/<int:report_id>", methods=["DELETE"], endpoint="site_reports_delete")
    @roles_required(*_REPORTERS)
    def delete_report(report_id: int):
        try:
            container.site_monitoring_service.delete(caller=current_user(), report_id=report_id)
            return jsonify({"message": "Report deleted successfully"})
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("Error deleting site report %s", report_id)
            return json_error("Error deleting site monitoring report", 500)

    @app.route("/api/site-monitoring/<int:report_id>/comments", methods=["POST"], endpoint="site_reports_comment")
    @token_required
    def add_comment(report_id: int):
        data = json_body()
        try:
            comment = container.site_monitoring_service.add_comment(
                caller=current_user(),
                report_id=report_id,
                text=data.get("text"),
            )
            return jsonify(comment.to_dict()), 201
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("Error adding comment to site report %s", report_id)
            return json_error("Error adding comment", 500)
