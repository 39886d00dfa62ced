from __future__ import annotations

import os
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

os.environ.setdefault("APP_ENV", "testing")

from src.construction_hr.construction_hr.applications.model import Application, HireRecord, NewApplication
from src.construction_hr.construction_hr.attendance.model import AttendanceRecord
from src.construction_hr.construction_hr.common.uploads import UploadStore
from src.construction_hr.construction_hr.container import assemble
from src.construction_hr.construction_hr.core.enums import ApplicationStatus, LeaveStatus, Role
from src.construction_hr.construction_hr.core.exceptions import ConflictError, ValidationError
from src.construction_hr.construction_hr.employees.model import Employee
from src.construction_hr.construction_hr.leaves.model import LeaveRequest
from src.construction_hr.construction_hr.site_monitoring.model import SiteComment, SitePhoto, SiteReport
from src.construction_hr.construction_hr.users.model import User
from src.construction_hr.construction_hr.users.tokens import TokenService

JWT_SECRET = "test-jwt-secret"
FIXED_NOW = datetime(2026, 3, 31, 12, 0, 0)


class InMemoryUsers:
    def __init__(self):
        self._users: dict[int, User] = {}
        self._next_id = 1

    def add(self, username: str, password: str = "secret123", role: Role = Role.WORKER) -> User:
        user_id = self.create_user(username=username, password_hash=generate_password_hash(password), role=role)
        return self._users[user_id]

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._users.get(int(user_id))

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self._users.values() if u.username == username), None)

    def create_user(self, *, username: str, password_hash: str, role: Role) -> int:
        if self.get_by_username(username):
            raise ConflictError("Username already exists")
        user_id = self._next_id
        self._next_id += 1
        self._users[user_id] = User(user_id=user_id, username=username, password_hash=password_hash, role=role)
        return user_id

    def update_role(self, user_id: int, role: Role) -> bool:
        user = self._users.get(int(user_id))
        if not user:
            return False
        self._users[user.user_id] = replace(user, role=role)
        return True


class InMemoryEmployees:
    def __init__(self):
        self._rows: dict[int, Employee] = {}
        self._next_id = 1

    def add(self, name: str, salary="15000", *, role: str = "Worker", user_id: Optional[int] = None) -> Employee:
        employee_id = self.create(
            name=name,
            role=role,
            salary=Decimal(salary) if salary is not None else None,
            user_id=user_id,
        )
        return self._rows[employee_id]

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._rows.get(int(employee_id))

    def get_by_user_id(self, user_id: int) -> Optional[Employee]:
        return next((e for e in self._rows.values() if e.user_id == int(user_id)), None)

    def list_all(self):
        return sorted(self._rows.values(), key=lambda e: e.employee_id)

    def create(self, *, name, role, salary, user_id) -> int:
        employee_id = self._next_id
        self._next_id += 1
        self._rows[employee_id] = Employee(
            employee_id=employee_id, name=name, role=role, salary=salary, user_id=user_id, created_at=FIXED_NOW
        )
        return employee_id

    def update(self, *, employee_id, name, role, salary, user_id) -> bool:
        current = self._rows[int(employee_id)]
        self._rows[current.employee_id] = replace(current, name=name, role=role, salary=salary, user_id=user_id)
        return True

    def delete(self, employee_id: int) -> bool:
        return self._rows.pop(int(employee_id), None) is not None


class InMemoryAttendance:
    """Append-only like the real table: no (employee, date) uniqueness."""

    def __init__(self, employees: InMemoryEmployees):
        self._employees = employees
        self._rows: list[AttendanceRecord] = []

    def _populate(self, r: AttendanceRecord) -> AttendanceRecord:
        employee = self._employees.get_by_id(r.employee_id)
        return replace(r, employee_name=employee.name if employee else None)

    def add(self, *, employee_id, work_date, status) -> int:
        attendance_id = len(self._rows) + 1
        self._rows.append(
            AttendanceRecord(attendance_id=attendance_id, employee_id=int(employee_id), work_date=work_date, status=status)
        )
        return attendance_id

    def get_by_id(self, attendance_id: int):
        r = next((r for r in self._rows if r.attendance_id == int(attendance_id)), None)
        return self._populate(r) if r else None

    def list_all(self):
        rows = sorted(self._rows, key=lambda r: (r.work_date, r.attendance_id), reverse=True)
        return [self._populate(r) for r in rows]

    def list_for_employee(self, employee_id, *, start=None, end=None):
        rows = [
            r
            for r in self._rows
            if r.employee_id == int(employee_id)
            and (start is None or r.work_date >= start)
            and (end is None or r.work_date <= end)
        ]
        rows.sort(key=lambda r: (r.work_date, r.attendance_id), reverse=True)
        return [self._populate(r) for r in rows]

    def count_present(self, employee_id, *, start, end) -> int:
        return sum(1 for r in self.list_for_employee(employee_id, start=start, end=end) if r.is_present)


class InMemoryLeaves:
    def __init__(self, users: InMemoryUsers):
        self._users = users
        self._rows: dict[int, LeaveRequest] = {}
        self._next_id = 1

    def _populate(self, leave: LeaveRequest) -> LeaveRequest:
        user = self._users.get_by_id(leave.user_id)
        return replace(leave, username=user.username, user_role=user.role.value) if user else leave

    def create(self, *, user_id, from_date, to_date, reason) -> int:
        leave_id = self._next_id
        self._next_id += 1
        self._rows[leave_id] = LeaveRequest(
            leave_id=leave_id,
            user_id=int(user_id),
            from_date=from_date,
            to_date=to_date,
            reason=reason,
            status=LeaveStatus.PENDING,
            created_at=FIXED_NOW,
        )
        return leave_id

    def get_by_id(self, leave_id: int):
        leave = self._rows.get(int(leave_id))
        return self._populate(leave) if leave else None

    def list_for_user(self, user_id: int):
        return [self._populate(l) for l in self._rows.values() if l.user_id == int(user_id)]

    def list_all(self):
        return [self._populate(l) for l in sorted(self._rows.values(), key=lambda l: l.leave_id, reverse=True)]

    def decide(self, *, leave_id, status, decided_by) -> bool:
        leave = self._rows.get(int(leave_id))
        if not leave or leave.status != LeaveStatus.PENDING:
            return False
        self._rows[leave.leave_id] = replace(leave, status=status, decided_by=decided_by, decided_at=FIXED_NOW)
        return True


class InMemoryApplications:
    def __init__(self, users: InMemoryUsers, employees: InMemoryEmployees):
        self._users = users
        self._employees = employees
        self._rows: dict[int, Application] = {}
        self._next_id = 1

    def create(self, application: NewApplication) -> int:
        application_id = self._next_id
        self._next_id += 1
        self._rows[application_id] = Application(
            application_id=application_id,
            name=application.name,
            email=application.email,
            phone=application.phone,
            position=application.position,
            status=ApplicationStatus.PENDING,
            experience=application.experience,
            message=application.message,
            date_of_birth=application.date_of_birth,
            gender=application.gender,
            address=application.address,
            emergency_contact=application.emergency_contact,
            username=application.username,
            password_hash=application.password_hash,
            expected_salary=application.expected_salary,
            documents=dict(application.documents),
            application_date=FIXED_NOW,
        )
        return application_id

    def get_by_id(self, application_id: int):
        return self._rows.get(int(application_id))

    def list_all(self):
        return sorted(self._rows.values(), key=lambda a: a.application_id, reverse=True)

    def has_open_application(self, username: str) -> bool:
        return any(
            a.username == username and a.status in (ApplicationStatus.PENDING, ApplicationStatus.SHORTLISTED)
            for a in self._rows.values()
        )

    def set_status(self, *, application_id, status, reviewed_by) -> bool:
        app = self._rows.get(int(application_id))
        if not app or app.is_terminal:
            return False
        self._rows[app.application_id] = replace(app, status=status, reviewed_by=reviewed_by, review_date=FIXED_NOW)
        return True

    def hire(
        self,
        *,
        application_id,
        username,
        password_hash,
        user_role,
        employee_name,
        employee_role,
        salary,
        reviewed_by,
        review_comments,
    ) -> HireRecord:
        app = self._rows[int(application_id)]
        # Check everything before writing so a failure leaves nothing behind.
        if app.is_terminal:
            raise ValidationError("This applicant has already been hired")
        if self._users.get_by_username(username):
            raise ConflictError("Username already exists")

        user_id = self._users.create_user(username=username, password_hash=password_hash, role=user_role)
        employee_id = self._employees.create(name=employee_name, role=employee_role, salary=salary, user_id=user_id)
        self._rows[app.application_id] = replace(
            app,
            status=ApplicationStatus.HIRED,
            user_id=user_id,
            reviewed_by=reviewed_by,
            review_date=FIXED_NOW,
            review_comments=review_comments,
        )
        return HireRecord(user_id=user_id, employee_id=employee_id)


class InMemorySiteReports:
    def __init__(self, users: InMemoryUsers):
        self._users = users
        self._rows: dict[int, SiteReport] = {}
        self._next_id = 1
        self._next_photo = 1
        self._next_comment = 1

    def _photos(self, paths):
        photos = []
        for p in paths:
            photos.append(SitePhoto(photo_id=self._next_photo, path=p))
            self._next_photo += 1
        return tuple(photos)

    def create(self, *, title, description, location, progress, status, reported_by, photo_paths) -> int:
        report_id = self._next_id
        self._next_id += 1
        reporter = self._users.get_by_id(reported_by)
        self._rows[report_id] = SiteReport(
            report_id=report_id,
            title=title,
            description=description,
            location=location,
            progress=progress,
            status=status,
            reported_by=reported_by,
            reporter_username=reporter.username if reporter else None,
            reporter_role=reporter.role.value if reporter else None,
            report_date=FIXED_NOW,
            photos=self._photos(photo_paths),
        )
        return report_id

    def get_by_id(self, report_id: int):
        return self._rows.get(int(report_id))

    def list_all(self):
        return sorted(self._rows.values(), key=lambda r: r.report_id, reverse=True)

    def update(self, *, report_id, title, description, location, progress, status, removed_photo_ids, new_photo_paths):
        report = self._rows[int(report_id)]
        removed = set(removed_photo_ids)
        kept = tuple(p for p in report.photos if p.photo_id not in removed)
        self._rows[report.report_id] = replace(
            report,
            title=title,
            description=description,
            location=location,
            progress=progress,
            status=status,
            photos=kept + self._photos(new_photo_paths),
        )

    def delete(self, report_id: int) -> bool:
        return self._rows.pop(int(report_id), None) is not None

    def add_comment(self, *, report_id, author_id, text) -> int:
        report = self._rows[int(report_id)]
        author = self._users.get_by_id(author_id)
        comment = SiteComment(
            comment_id=self._next_comment,
            text=text,
            author_id=author_id,
            author_username=author.username if author else None,
            author_role=author.role.value if author else None,
            timestamp=FIXED_NOW,
        )
        self._next_comment += 1
        self._rows[report.report_id] = replace(report, comments=report.comments + (comment,))
        return comment.comment_id


class RecordingNotifier:
    def __init__(self):
        self.events = []

    def publish(self, event) -> None:
        self.events.append(event)

    def names(self) -> list[str]:
        return [e.name for e in self.events]


class RecordingEmailClient:
    def __init__(self, *, fail: bool = False):
        self.sent = []
        self.fail = fail

    def send(self, to, subject, text, html=None) -> None:
        if self.fail:
            raise OSError("SMTP server unavailable")
        self.sent.append({"to": to, "subject": subject, "text": text, "html": html})


class Repos:
    def __init__(self):
        self.users = InMemoryUsers()
        self.employees = InMemoryEmployees()
        self.attendance = InMemoryAttendance(self.employees)
        self.leaves = InMemoryLeaves(self.users)
        self.applications = InMemoryApplications(self.users, self.employees)
        self.site_reports = InMemorySiteReports(self.users)


@pytest.fixture
def repos() -> Repos:
    return Repos()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def mailbox() -> RecordingEmailClient:
    return RecordingEmailClient()


@pytest.fixture
def uploads(tmp_path) -> UploadStore:
    return UploadStore(tmp_path / "uploads", max_bytes=5 * 1024 * 1024)


@pytest.fixture
def container(repos, notifier, mailbox, uploads):
    return assemble(
        users_repo=repos.users,
        employees_repo=repos.employees,
        attendance_repo=repos.attendance,
        leaves_repo=repos.leaves,
        applications_repo=repos.applications,
        site_reports_repo=repos.site_reports,
        uploads=uploads,
        email_client=mailbox,
        notifier=notifier,
        jwt_secret=JWT_SECRET,
    )


@pytest.fixture
def app(container):
    from src.construction_hr.construction_hr.main import create_app

    flask_app = create_app(container=container)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(JWT_SECRET)


@pytest.fixture
def auth_header(tokens):
    def _header(user: User) -> dict:
        return {"Authorization": f"Bearer {tokens.issue(user)}"}

    return _header
