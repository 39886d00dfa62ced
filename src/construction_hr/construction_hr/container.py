from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .applications.mysql_application_repository import MySQLApplicationRepository
from .applications.repository import ApplicationRepository
from .applications.service import ApplicationService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.uploads import UploadStore
from .core.constants import MAX_UPLOAD_MB
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveService
from .mail.client import EmailClient, build_email_client
from .notifications.notifier import Notifier, SocketIONotifier
from .payroll.service import PayrollService
from .site_monitoring.mysql_site_report_repository import MySQLSiteReportRepository
from .site_monitoring.repository import SiteReportRepository
from .site_monitoring.service import SiteMonitoringService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService
from .users.tokens import TokenService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    leaves_repo: LeaveRepository
    applications_repo: ApplicationRepository
    site_reports_repo: SiteReportRepository

    uploads: UploadStore
    email_client: EmailClient
    notifier: Notifier
    company_name: str

    auth_service: AuthService
    user_service: UserService
    employee_service: EmployeeService
    attendance_service: AttendanceService
    payroll_service: PayrollService
    leave_service: LeaveService
    application_service: ApplicationService
    site_monitoring_service: SiteMonitoringService


def assemble(
    *,
    users_repo: UserRepository,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    leaves_repo: LeaveRepository,
    applications_repo: ApplicationRepository,
    site_reports_repo: SiteReportRepository,
    uploads: UploadStore,
    email_client: EmailClient,
    notifier: Notifier,
    jwt_secret: str,
    jwt_expires_hours: int = 24,
    company_name: str = "Sadhna Construction",
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services on top of the given repositories (MySQL or in-memory)."""
    tokens = TokenService(jwt_secret, expires_hours=jwt_expires_hours)

    auth_service = AuthService(users_repo, tokens)
    user_service = UserService(users_repo)
    employee_service = EmployeeService(employees_repo, users_repo, attendance_repo)
    attendance_service = AttendanceService(attendance_repo, employee_service, notifier=notifier)
    payroll_service = PayrollService(employee_service, attendance_repo)
    leave_service = LeaveService(leaves_repo, users_repo, notifier=notifier)
    application_service = ApplicationService(
        applications_repo,
        users_repo,
        uploads,
        email_client=email_client,
        company_name=company_name,
    )
    site_monitoring_service = SiteMonitoringService(site_reports_repo, uploads)

    return Container(
        conn=conn,
        users_repo=users_repo,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        applications_repo=applications_repo,
        site_reports_repo=site_reports_repo,
        uploads=uploads,
        email_client=email_client,
        notifier=notifier,
        company_name=company_name,
        auth_service=auth_service,
        user_service=user_service,
        employee_service=employee_service,
        attendance_service=attendance_service,
        payroll_service=payroll_service,
        leave_service=leave_service,
        application_service=application_service,
        site_monitoring_service=site_monitoring_service,
    )


def build_container(*, db_config: dict, settings, upload_dir: Path) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble(
        users_repo=MySQLUserRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        applications_repo=MySQLApplicationRepository(conn),
        site_reports_repo=MySQLSiteReportRepository(conn),
        uploads=UploadStore(upload_dir, max_bytes=int(getattr(settings, "MAX_UPLOAD_MB", MAX_UPLOAD_MB)) * 1024 * 1024),
        email_client=build_email_client(settings),
        # Bound to the Socket.IO server by create_app().
        notifier=SocketIONotifier(),
        jwt_secret=str(getattr(settings, "JWT_SECRET")),
        jwt_expires_hours=int(getattr(settings, "JWT_EXPIRES_HOURS", 24)),
        company_name=str(getattr(settings, "COMPANY_NAME", "Sadhna Construction")),
        conn=conn,
    )
