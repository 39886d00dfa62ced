from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ...core.constants import DEFAULT_OVERTIME_RATE, DEFAULT_TAX_RATE_PERCENT, OVERTIME_HOURS_PER_DAY
from .base import PayBreakdown, PayrollCalculator
from .standard_calculator import DailyRatePayrollCalculator


@dataclass(frozen=True)
class PayAdjustments:
    overtime_hours: Decimal = Decimal("0")
    overtime_rate: Decimal = Decimal(DEFAULT_OVERTIME_RATE)
    bonus: Decimal = Decimal("0")
    deductions: Decimal = Decimal("0")
    tax_rate_percent: Decimal = Decimal(DEFAULT_TAX_RATE_PERCENT)


@dataclass(frozen=True)
class ExtendedPayBreakdown:
    base: PayBreakdown
    adjustments: PayAdjustments
    overtime_pay: Decimal
    gross_pay: Decimal
    tax_amount: Decimal
    total_deductions: Decimal
    net_pay: Decimal


class ExtendedPayrollCalculator:
    """What-if payslip on top of the base rule: overtime, bonus, deductions and tax.

    Results are previews only and are never stored.
    """

    def __init__(self, base: Optional[PayrollCalculator] = None):
        self._base = base or DailyRatePayrollCalculator()

    def calculate(self, *, salary: Optional[Decimal], days_present: int, adjustments: PayAdjustments) -> ExtendedPayBreakdown:
        base = self._base.calculate(salary=salary, days_present=days_present)

        hourly = base.daily_rate / OVERTIME_HOURS_PER_DAY
        overtime_pay = hourly * adjustments.overtime_hours * adjustments.overtime_rate
        gross = base.total_salary + overtime_pay + adjustments.bonus
        tax = gross * adjustments.tax_rate_percent / 100
        total_deductions = adjustments.deductions + tax

        return ExtendedPayBreakdown(
            base=base,
            adjustments=adjustments,
            overtime_pay=overtime_pay,
            gross_pay=gross,
            tax_amount=tax,
            total_deductions=total_deductions,
            net_pay=gross - total_deductions,
        )
