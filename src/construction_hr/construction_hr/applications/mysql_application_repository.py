from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

import mysql.connector

from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import ApplicationStatus, DocumentType, Role
from ..core.exceptions import ConflictError, ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Application, HireRecord, NewApplication
from .repository import ApplicationRepository

_DOCUMENT_COLUMNS = {
    DocumentType.RESUME: "resume_path",
    DocumentType.ID_PROOF: "id_proof_path",
    DocumentType.ADDRESS_PROOF: "address_proof_path",
    DocumentType.POLICE_VERIFICATION: "police_verification_path",
    DocumentType.PHOTO: "photo_path",
}

_COLUMNS = """
    application_id, name, email, phone, position, experience, message,
    date_of_birth, gender, address, emergency_contact, username, password_hash,
    expected_salary, resume_path, id_proof_path, address_proof_path,
    police_verification_path, photo_path, status, application_date,
    user_id, reviewed_by, review_date, review_comments
"""

_OPEN_STATUSES = (ApplicationStatus.PENDING.value, ApplicationStatus.SHORTLISTED.value)


def _row_to_application(r: dict) -> Application:
    documents = {t: r[col] for t, col in _DOCUMENT_COLUMNS.items() if r.get(col)}
    return Application(
        application_id=int(r["application_id"]),
        name=r["name"],
        email=r["email"],
        phone=r["phone"],
        position=r["position"],
        status=ApplicationStatus(r["status"]),
        experience=r.get("experience") or "",
        message=r.get("message") or "",
        date_of_birth=r.get("date_of_birth"),
        gender=r.get("gender"),
        address=r.get("address"),
        emergency_contact=r.get("emergency_contact"),
        username=r.get("username"),
        password_hash=r.get("password_hash"),
        expected_salary=r.get("expected_salary"),
        documents=documents,
        application_date=r.get("application_date"),
        user_id=int(r["user_id"]) if r.get("user_id") is not None else None,
        reviewed_by=int(r["reviewed_by"]) if r.get("reviewed_by") is not None else None,
        review_date=r.get("review_date"),
        review_comments=r.get("review_comments"),
    )


class MySQLApplicationRepository(ApplicationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, application: NewApplication) -> int:
        docs = application.documents
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO applications(
                    name, email, phone, position, experience, message,
                    date_of_birth, gender, address, emergency_contact, username,
                    password_hash, expected_salary, resume_path, id_proof_path,
                    address_proof_path, police_verification_path, photo_path, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    application.name,
                    application.email,
                    application.phone,
                    application.position,
                    application.experience,
                    application.message,
                    application.date_of_birth,
                    application.gender,
                    application.address,
                    application.emergency_contact,
                    application.username,
                    application.password_hash,
                    application.expected_salary,
                    docs.get(DocumentType.RESUME),
                    docs.get(DocumentType.ID_PROOF),
                    docs.get(DocumentType.ADDRESS_PROOF),
                    docs.get(DocumentType.POLICE_VERIFICATION),
                    docs.get(DocumentType.PHOTO),
                    ApplicationStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, application_id: int) -> Optional[Application]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM applications WHERE application_id=%s", (int(application_id),))
            r = fetchone(cur)
            return _row_to_application(r) if r else None

    def list_all(self) -> Sequence[Application]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM applications ORDER BY application_date DESC, application_id DESC LIMIT %s",
                (DEFAULT_LIST_LIMIT,),
            )
            return [_row_to_application(r) for r in fetchall(cur)]

    def has_open_application(self, username: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS found FROM applications WHERE username=%s AND status IN (%s,%s) LIMIT 1",
                (username, *_OPEN_STATUSES),
            )
            return fetchone(cur) is not None

    def set_status(self, *, application_id: int, status: ApplicationStatus, reviewed_by: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE applications
                SET status=%s, reviewed_by=%s, review_date=NOW()
                WHERE application_id=%s AND status IN (%s,%s)
                """,
                (status.value, int(reviewed_by), int(application_id), *_OPEN_STATUSES),
            )
            return cur.rowcount > 0

    def hire(
        self,
        *,
        application_id: int,
        username: str,
        password_hash: str,
        user_role: Role,
        employee_name: str,
        employee_role: str,
        salary: Decimal,
        reviewed_by: int,
        review_comments: str,
    ) -> HireRecord:
        # One db_cursor block is one transaction: any raise below rolls all three writes back.
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    "INSERT INTO users(username, password_hash, role) VALUES(%s,%s,%s)",
                    (username, password_hash, user_role.value),
                )
            except mysql.connector.IntegrityError:
                raise ConflictError("Username already exists")
            user_id = int(cur.lastrowid)

            cur.execute(
                "INSERT INTO employees(name, role, salary, user_id) VALUES(%s,%s,%s,%s)",
                (employee_name, employee_role, salary, user_id),
            )
            employee_id = int(cur.lastrowid)

            cur.execute(
                """
                UPDATE applications
                SET status=%s, user_id=%s, reviewed_by=%s, review_date=NOW(), review_comments=%s
                WHERE application_id=%s AND status IN (%s,%s)
                """,
                (
                    ApplicationStatus.HIRED.value,
                    user_id,
                    int(reviewed_by),
                    review_comments,
                    int(application_id),
                    *_OPEN_STATUSES,
                ),
            )
            if cur.rowcount == 0:
                raise ValidationError("This applicant has already been hired")

            return HireRecord(user_id=user_id, employee_id=employee_id)
