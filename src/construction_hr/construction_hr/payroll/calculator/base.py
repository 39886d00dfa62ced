from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

CENT = Decimal("0.01")


def money(value: Decimal) -> Decimal:
    """Round to two decimals for display (payslip, JSON)."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PayBreakdown:
    salary: Decimal
    days_present: int
    daily_rate: Decimal
    total_salary: Decimal


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def calculate(self, *, salary: Optional[Decimal], days_present: int) -> PayBreakdown:
        raise NotImplementedError
