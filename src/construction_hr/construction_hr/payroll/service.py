from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds, now_local
from ..common.validators import optional_decimal, require_int_in_range
from ..core.exceptions import ValidationError
from ..employees.model import Employee
from ..employees.service import EmployeeService
from .calculator.base import PayBreakdown, PayrollCalculator, money
from .calculator.extended_calculator import ExtendedPayBreakdown, ExtendedPayrollCalculator, PayAdjustments
from .calculator.standard_calculator import DailyRatePayrollCalculator

logger = logging.getLogger(__name__)

_MISSING = "Missing required parameters: employeeId, month and year"


@dataclass(frozen=True)
class Payslip:
    employee: Employee
    month: int
    year: int
    breakdown: PayBreakdown

    @property
    def present_days(self) -> int:
        return self.breakdown.days_present

    def to_dict(self) -> dict:
        return {
            "employeeName": self.employee.name,
            "month": self.month,
            "year": self.year,
            "presentDays": self.present_days,
            "dailyRate": str(money(self.breakdown.daily_rate)),
            "totalSalary": str(money(self.breakdown.total_salary)),
        }


@dataclass(frozen=True)
class PayPreview:
    payslip: Payslip
    extended: ExtendedPayBreakdown

    def to_dict(self) -> dict:
        adj = self.extended.adjustments
        data = self.payslip.to_dict()
        data.update(
            {
                "employeeId": self.payslip.employee.employee_id,
                "baseSalary": str(money(self.extended.base.total_salary)),
                "overtimeHours": str(adj.overtime_hours),
                "overtimeRate": str(adj.overtime_rate),
                "overtimePay": str(money(self.extended.overtime_pay)),
                "bonus": str(money(adj.bonus)),
                "grossPay": str(money(self.extended.gross_pay)),
                "taxRate": str(adj.tax_rate_percent),
                "taxAmount": str(money(self.extended.tax_amount)),
                "deductions": str(money(adj.deductions)),
                "totalDeductions": str(money(self.extended.total_deductions)),
                "netPay": str(money(self.extended.net_pay)),
            }
        )
        return data


def parse_adjustments(args: dict) -> PayAdjustments:
    """Read what-if inputs (query string or JSON) with their defaults."""
    defaults = PayAdjustments()
    return PayAdjustments(
        overtime_hours=optional_decimal(args.get("overtimeHours"), "overtimeHours"),
        overtime_rate=optional_decimal(args.get("overtimeRate"), "overtimeRate", default=str(defaults.overtime_rate)),
        bonus=optional_decimal(args.get("bonus"), "bonus"),
        deductions=optional_decimal(args.get("deductions"), "deductions"),
        tax_rate_percent=optional_decimal(args.get("taxRate"), "taxRate", default=str(defaults.tax_rate_percent)),
    )


class PayrollService:
    """Monthly pay from the attendance ledger: salary / 30 per Present row."""

    def __init__(
        self,
        employees: EmployeeService,
        attendance: AttendanceRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._employees = employees
        self._attendance = attendance
        self._calculator = calculator or DailyRatePayrollCalculator()
        self._extended = ExtendedPayrollCalculator(self._calculator)

    def _payslip(self, employee: Employee, month, year) -> Payslip:
        m = require_int_in_range(month, "month", 1, 12)
        y = require_int_in_range(year, "year", 1900, 9999)
        start, end = month_bounds(y, m)

        days_present = self._attendance.count_present(employee.employee_id, start=start, end=end)
        breakdown = self._calculator.calculate(salary=employee.salary, days_present=days_present)
        logger.info("Pay for %s %02d/%d: %s present days", employee.name, m, y, days_present)
        return Payslip(employee=employee, month=m, year=y, breakdown=breakdown)

    def compute(self, employee_id, month, year) -> Payslip:
        if month in (None, "") or year in (None, ""):
            raise ValidationError(_MISSING)
        try:
            eid = int(employee_id)
        except (TypeError, ValueError):
            raise ValidationError(_MISSING)
        return self._payslip(self._employees.get(eid), month, year)

    def compute_for_user(self, user_id: int, month=None, year=None) -> Payslip:
        today = now_local().date()
        employee = self._employees.get_for_user(user_id)
        return self._payslip(
            employee,
            month if month not in (None, "") else today.month,
            year if year not in (None, "") else today.year,
        )

    def preview(self, employee_id, month=None, year=None, *, adjustments: PayAdjustments) -> PayPreview:
        today = now_local().date()
        payslip = self.compute(employee_id, month or today.month, year or today.year)
        extended = self._extended.calculate(
            salary=payslip.employee.salary,
            days_present=payslip.present_days,
            adjustments=adjustments,
        )
        return PayPreview(payslip=payslip, extended=extended)
