from __future__ import annotations

import io

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from .calculator.base import money
from .service import Payslip


def render_payslip_pdf(payslip: Payslip, *, company_name: str = "") -> bytes:
    """One-page payslip: employee, period, present days, daily rate and total."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    width, height = A4
    y = height - 60

    if company_name:
        c.setFont("Helvetica", 10)
        c.drawCentredString(width / 2, y, company_name)
        y -= 22

    c.setFont("Helvetica-Bold", 20)
    c.drawCentredString(width / 2, y, "Payslip")
    y -= 36

    c.setFont("Helvetica", 12)
    lines = [
        ("Employee", payslip.employee.name),
        ("Month/Year", f"{payslip.month}/{payslip.year}"),
        ("Days Present", str(payslip.present_days)),
        ("Daily Rate", f"Rs.{money(payslip.breakdown.daily_rate)}"),
        ("Total Salary", f"Rs.{money(payslip.breakdown.total_salary)}"),
    ]
    for label, value in lines:
        c.drawString(60, y, f"{label}: {value}")
        y -= 18

    c.showPage()
    c.save()
    return buf.getvalue()
