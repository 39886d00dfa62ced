from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds, now_local
from ..common.validators import require_non_empty, require_positive_decimal
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..payroll.calculator.base import PayrollCalculator, money
from ..payroll.calculator.standard_calculator import DailyRatePayrollCalculator
from ..users.repository import UserRepository
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

_MANAGING_ROLES = (Role.ADMIN, Role.MANAGER)


@dataclass(frozen=True)
class EmployeeProfile:
    employee: Employee
    present: int
    total: int
    daily_rate: Decimal
    total_salary: Decimal

    @property
    def rate(self) -> int:
        if not self.total:
            return 0
        return int(round(self.present * 100 / self.total))

    def to_dict(self) -> dict:
        data = self.employee.to_dict()
        data["attendance"] = {"present": self.present, "total": self.total, "rate": self.rate}
        data["pay"] = {
            "dailyRate": str(money(self.daily_rate)),
            "totalSalary": str(money(self.total_salary)),
        }
        return data


class EmployeeService:
    def __init__(
        self,
        employees: EmployeeRepository,
        users: UserRepository,
        attendance: AttendanceRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._employees = employees
        self._users = users
        self._attendance = attendance
        self._calculator = calculator or DailyRatePayrollCalculator()

    def _ensure_manager(self, current_role: Role) -> None:
        if current_role not in _MANAGING_ROLES:
            raise AuthorizationError("Access forbidden: insufficient rights")

    def _check_link(self, user_id, *, employee_id: Optional[int] = None) -> Optional[int]:
        """Validate an Employee -> User link; None/empty means unlinked."""
        if user_id is None or str(user_id).strip() == "":
            return None
        try:
            uid = int(user_id)
        except (TypeError, ValueError):
            raise ValidationError("userId must be an integer")

        if not self._users.get_by_id(uid):
            raise NotFoundError("Linked user not found")
        holder = self._employees.get_by_user_id(uid)
        if holder and holder.employee_id != employee_id:
            raise ConflictError("User is already linked to another employee")
        return uid

    def create(self, *, current_role: Role, name: str, role: Optional[str], salary, user_id=None) -> Employee:
        self._ensure_manager(current_role)
        name = require_non_empty(name, "Name")
        job_title = require_non_empty(role or "Worker", "Role")
        amount = require_positive_decimal(salary, "Salary")
        uid = self._check_link(user_id)

        employee_id = self._employees.create(name=name, role=job_title, salary=amount, user_id=uid)
        logger.info("Employee %s created (id=%s, user=%s)", name, employee_id, uid)
        return self.get(employee_id)

    def list_all(self) -> Sequence[Employee]:
        return self._employees.list_all()

    def get(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def get_for_user(self, user_id: int) -> Employee:
        employee = self._employees.get_by_user_id(int(user_id))
        if not employee:
            logger.info("No employee linked to user %s", user_id)
            raise NotFoundError("Employee profile not found")
        return employee

    def update(self, *, current_role: Role, employee_id: int, fields: dict) -> Employee:
        self._ensure_manager(current_role)
        current = self.get(employee_id)

        name = require_non_empty(fields["name"], "Name") if "name" in fields else current.name
        job_title = require_non_empty(fields["role"], "Role") if "role" in fields else current.role
        if "salary" in fields:
            salary = require_positive_decimal(fields["salary"], "Salary")
        else:
            salary = current.salary
        if "userId" in fields:
            uid = self._check_link(fields["userId"], employee_id=current.employee_id)
        else:
            uid = current.user_id

        self._employees.update(
            employee_id=current.employee_id,
            name=name,
            role=job_title,
            salary=salary,
            user_id=uid,
        )
        return self.get(current.employee_id)

    def delete(self, *, current_role: Role, employee_id: int) -> None:
        self._ensure_manager(current_role)
        if not self._employees.delete(int(employee_id)):
            raise NotFoundError("Employee not found")
        logger.info("Employee %s deleted", employee_id)

    def profile(self, user_id: int, *, today: Optional[date] = None) -> EmployeeProfile:
        employee = self.get_for_user(user_id)
        today = today or now_local().date()
        start, end = month_bounds(today.year, today.month)

        records = self._attendance.list_for_employee(employee.employee_id, start=start, end=end)
        present = sum(1 for r in records if r.is_present)
        pay = self._calculator.calculate(salary=employee.salary, days_present=present)

        return EmployeeProfile(
            employee=employee,
            present=present,
            total=len(records),
            daily_rate=pay.daily_rate,
            total_salary=pay.total_salary,
        )
