from __future__ import annotations

import random
from datetime import date

import pytest

from src.construction_hr.construction_hr.core.enums import AttendanceStatus, Role
from src.construction_hr.construction_hr.core.exceptions import DataIntegrityError, NotFoundError, ValidationError
from src.construction_hr.construction_hr.payroll.service import parse_adjustments

PRESENT = AttendanceStatus.PRESENT
ABSENT = AttendanceStatus.ABSENT


def _mark(repos, employee, day, status):
    repos.attendance.add(employee_id=employee.employee_id, work_date=day, status=status)


def test_ravi_march_payslip(container, repos):
    ravi = repos.employees.add("Ravi", "15000")
    for d in range(1, 11):
        _mark(repos, ravi, date(2026, 3, d), PRESENT)
    for d in range(11, 16):
        _mark(repos, ravi, date(2026, 3, d), ABSENT)

    slip = container.payroll_service.compute(ravi.employee_id, "3", "2026")

    assert slip.to_dict() == {
        "employeeName": "Ravi",
        "month": 3,
        "year": 2026,
        "presentDays": 10,
        "dailyRate": "500.00",
        "totalSalary": "5000.00",
    }


def test_only_rows_inside_the_month_count(container, repos):
    ravi = repos.employees.add("Ravi", "15000")
    _mark(repos, ravi, date(2026, 2, 28), PRESENT)
    _mark(repos, ravi, date(2026, 3, 1), PRESENT)
    _mark(repos, ravi, date(2026, 3, 31), PRESENT)
    _mark(repos, ravi, date(2026, 4, 1), PRESENT)

    assert container.payroll_service.compute(ravi.employee_id, 3, 2026).present_days == 2


def test_duplicate_marks_on_one_day_both_count(container, repos):
    ravi = repos.employees.add("Ravi", "15000")
    _mark(repos, ravi, date(2026, 3, 5), PRESENT)
    _mark(repos, ravi, date(2026, 3, 5), PRESENT)

    slip = container.payroll_service.compute(ravi.employee_id, 3, 2026)

    assert slip.present_days == 2
    assert slip.to_dict()["totalSalary"] == "1000.00"


def test_result_does_not_depend_on_insertion_order(container, repos):
    marks = [(date(2026, 3, d), PRESENT if d % 3 else ABSENT) for d in range(1, 29)]
    shuffled = list(marks)
    random.Random(7).shuffle(shuffled)

    a = repos.employees.add("A", "12000")
    b = repos.employees.add("B", "12000")
    for day, status in marks:
        _mark(repos, a, day, status)
    for day, status in shuffled:
        _mark(repos, b, day, status)

    slip_a = container.payroll_service.compute(a.employee_id, 3, 2026).to_dict()
    slip_b = container.payroll_service.compute(b.employee_id, 3, 2026).to_dict()
    slip_a.pop("employeeName")
    slip_b.pop("employeeName")
    assert slip_a == slip_b


def test_no_attendance_pays_zero(container, repos):
    ravi = repos.employees.add("Ravi", "15000")

    slip = container.payroll_service.compute(ravi.employee_id, 3, 2026)

    assert slip.to_dict()["totalSalary"] == "0.00"


@pytest.mark.parametrize("month,year", [(None, 2026), ("3", ""), (None, None)])
def test_missing_month_or_year(container, repos, month, year):
    ravi = repos.employees.add("Ravi", "15000")

    with pytest.raises(ValidationError, match="Missing required parameters"):
        container.payroll_service.compute(ravi.employee_id, month, year)


@pytest.mark.parametrize("month", ["0", "13", "March"])
def test_invalid_month(container, repos, month):
    ravi = repos.employees.add("Ravi", "15000")

    with pytest.raises(ValidationError):
        container.payroll_service.compute(ravi.employee_id, month, 2026)


def test_unknown_employee(container):
    with pytest.raises(NotFoundError):
        container.payroll_service.compute(999, 3, 2026)


def test_missing_salary_is_reported_not_defaulted(container, repos):
    ghost = repos.employees.add("Ghost", None)
    _mark(repos, ghost, date(2026, 3, 2), PRESENT)

    with pytest.raises(DataIntegrityError):
        container.payroll_service.compute(ghost.employee_id, 3, 2026)


def test_my_pay_for_linked_user(container, repos):
    user = repos.users.add("ravi", role=Role.WORKER)
    ravi = repos.employees.add("Ravi", "15000", user_id=user.user_id)
    _mark(repos, ravi, date(2026, 3, 2), PRESENT)

    slip = container.payroll_service.compute_for_user(user.user_id, 3, 2026)

    assert slip.employee.employee_id == ravi.employee_id
    assert slip.present_days == 1


def test_my_pay_without_employee_record(container, repos):
    user = repos.users.add("drifter")

    with pytest.raises(NotFoundError, match="Employee profile not found"):
        container.payroll_service.compute_for_user(user.user_id, 3, 2026)


def test_preview_uses_defaults_and_inputs(container, repos):
    ravi = repos.employees.add("Ravi", "15000")
    for d in range(1, 11):
        _mark(repos, ravi, date(2026, 3, d), PRESENT)

    preview = container.payroll_service.preview(
        ravi.employee_id, 3, 2026, adjustments=parse_adjustments({"bonus": "500", "taxRate": "0"})
    )
    data = preview.to_dict()

    assert data["baseSalary"] == "5000.00"
    assert data["grossPay"] == "5500.00"
    assert data["netPay"] == "5500.00"
    assert data["overtimeRate"] == "1.5"


def test_negative_adjustment_rejected():
    with pytest.raises(ValidationError):
        parse_adjustments({"bonus": "-5"})
