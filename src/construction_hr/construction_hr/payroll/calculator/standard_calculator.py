from __future__ import annotations

from decimal import Decimal
from typing import Optional

from ...core.constants import PAYROLL_DAYS_PER_MONTH
from ...core.exceptions import DataIntegrityError
from .base import PayBreakdown, PayrollCalculator


class DailyRatePayrollCalculator(PayrollCalculator):
    """Standard rule: salary / 30 per present day, whatever the month length.

    No proration, overtime, bonus or tax.
    """

    def calculate(self, *, salary: Optional[Decimal], days_present: int) -> PayBreakdown:
        if salary is None or salary <= 0:
            raise DataIntegrityError("Employee salary is missing or invalid; cannot compute pay")
        if days_present < 0:
            raise ValueError("days_present must not be negative")

        daily_rate = Decimal(salary) / PAYROLL_DAYS_PER_MONTH
        return PayBreakdown(
            salary=Decimal(salary),
            days_present=int(days_present),
            daily_rate=daily_rate,
            total_salary=daily_rate * int(days_present),
        )
