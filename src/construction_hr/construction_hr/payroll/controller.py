from __future__ import annotations

import logging

from flask import Flask, Response, jsonify, request

from ..common.http import json_error
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import DomainError
from ..users.auth import current_user, roles_required, token_required
from .pdf import render_payslip_pdf
from .service import parse_adjustments

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/payroll/generate/<int:employee_id>", methods=["GET"], endpoint="payroll_generate")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def generate(employee_id: int):
        try:
            payslip = container.payroll_service.compute(
                employee_id,
                request.args.get("month"),
                request.args.get("year"),
            )
            pdf = render_payslip_pdf(payslip, company_name=container.company_name)
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("Error generating payslip for employee %s", employee_id)
            return json_error("Failed to generate payslip", 500)

        return Response(
            pdf,
            mimetype="application/pdf",
            headers={"Content-Disposition": "attachment;filename=payslip.pdf"},
        )

    @app.route("/api/payroll/my-pay", methods=["GET"], endpoint="payroll_my_pay")
    @token_required
    def my_pay():
        try:
            payslip = container.payroll_service.compute_for_user(
                current_user().user_id,
                request.args.get("month"),
                request.args.get("year"),
            )
            return jsonify(payslip.to_dict())
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("Error in my-pay for user %s", current_user().user_id)
            return json_error("Failed to compute pay", 500)

    @app.route("/api/payroll/preview/<int:employee_id>", methods=["GET"], endpoint="payroll_preview")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def preview(employee_id: int):
        try:
            result = container.payroll_service.preview(
                employee_id,
                request.args.get("month"),
                request.args.get("year"),
                adjustments=parse_adjustments(request.args),
            )
            return jsonify(result.to_dict())
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("Error previewing pay for employee %s", employee_id)
            return json_error("Failed to preview pay", 500)
