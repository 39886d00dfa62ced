from __future__ import annotations

import logging
import re
import secrets
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Mapping, Optional, Sequence

from werkzeug.security import generate_password_hash

from ..common.datetime_utils import age_on, now_local, parse_iso_date
from ..common.uploads import UploadStore, first_file
from ..common.validators import parse_enum, require_positive_decimal
from ..core.constants import DOCUMENT_EXTENSIONS, MINIMUM_APPLICANT_AGE
from ..core.enums import ApplicationStatus, DocumentType, Role
from ..core.exceptions import ConflictError, DomainError, NotFoundError, ValidationError
from ..mail.client import EmailClient
from ..users.model import AuthUser
from ..users.repository import UserRepository
from .emails import build_offer_letter
from .model import Application, NewApplication
from .repository import ApplicationRepository

logger = logging.getLogger(__name__)

UPLOAD_SUBDIR = "applications"
_GENDERS = ("male", "female", "other")
_REGISTER_REQUIRED = ("fullName", "surname", "email", "phone", "position", "username", "password")
_APPLY_REQUIRED = ("name", "email", "phone", "position")


@dataclass(frozen=True)
class HireOutcome:
    username: str
    password: Optional[str]  # only set when generated here; shown once
    role: Role
    user_id: int
    employee_id: int

    def to_dict(self) -> dict:
        return {
            "message": "Employee account created successfully",
            "employeeInfo": {
                "username": self.username,
                "password": self.password,
                "role": self.role.value,
                "userId": self.user_id,
                "employeeId": self.employee_id,
            },
        }


def _field(form: Mapping, name: str) -> str:
    return str(form.get(name) or "").strip()


def _require_fields(form: Mapping, names) -> None:
    if any(not _field(form, n) for n in names):
        raise ValidationError("Please provide all required fields")


def default_username(name: str) -> str:
    return re.sub(r"\s+", "_", name.strip().lower())


def generate_password(position: str) -> str:
    return f"{position.strip().lower()}{1000 + secrets.randbelow(9000)}"


class ApplicationService:
    """Job application intake, review and hiring."""

    def __init__(
        self,
        applications: ApplicationRepository,
        users: UserRepository,
        uploads: UploadStore,
        *,
        email_client: Optional[EmailClient] = None,
        company_name: str = "Sadhna Construction",
    ):
        self._applications = applications
        self._users = users
        self._uploads = uploads
        self._email = email_client
        self._company_name = company_name

    # -------- Intake --------
    def _store_documents(self, files, doc_types) -> dict:
        stored: dict = {}
        try:
            for doc_type in doc_types:
                f = first_file(files, doc_type.value)
                if f is None:
                    continue
                saved = self._uploads.save(
                    f,
                    subdir=UPLOAD_SUBDIR,
                    field_name=doc_type.value,
                    allowed_extensions=DOCUMENT_EXTENSIONS,
                )
                stored[doc_type] = saved.path
        except DomainError:
            self._discard(stored)
            raise
        return stored

    def _discard(self, documents: dict) -> None:
        for path in documents.values():
            self._uploads.remove(path)

    def register(self, form: Mapping, files=None, *, today: Optional[date] = None) -> Application:
        _require_fields(form, _REGISTER_REQUIRED)
        today = today or now_local().date()

        dob = None
        if _field(form, "dateOfBirth"):
            dob = parse_iso_date(_field(form, "dateOfBirth"))
            if age_on(dob, today) < MINIMUM_APPLICANT_AGE:
                raise ValidationError(f"You must be at least {MINIMUM_APPLICANT_AGE} years old to apply")

        gender = _field(form, "gender").lower() or None
        if gender is not None and gender not in _GENDERS:
            raise ValidationError("Invalid gender value (allowed: male, female, other)")

        username = _field(form, "username")
        if self._users.get_by_username(username) or self._applications.has_open_application(username):
            raise ConflictError("Username already exists. Please choose another username.")

        address_parts = [_field(form, k) for k in ("address", "city", "state", "pincode")]
        documents = self._store_documents(files, list(DocumentType))

        new_app = NewApplication(
            name=f"{_field(form, 'fullName')} {_field(form, 'surname')}",
            email=_field(form, "email"),
            phone=_field(form, "phone"),
            position=_field(form, "position"),
            experience=_field(form, "experience"),
            message=_field(form, "additionalInfo"),
            date_of_birth=dob,
            gender=gender,
            address=", ".join(p for p in address_parts if p) or None,
            emergency_contact=_field(form, "emergencyContact") or None,
            username=username,
            password_hash=generate_password_hash(str(form.get("password"))),
            expected_salary=_field(form, "expectedSalary") or None,
            documents=documents,
        )
        try:
            application_id = self._applications.create(new_app)
        except Exception:
            self._discard(documents)
            raise

        logger.info("Worker registration %s received for %s (%s)", application_id, new_app.name, new_app.position)
        return self.get(application_id)

    def apply(self, form: Mapping, files=None) -> Application:
        _require_fields(form, _APPLY_REQUIRED)
        documents = self._store_documents(files, [DocumentType.RESUME])

        new_app = NewApplication(
            name=_field(form, "name"),
            email=_field(form, "email"),
            phone=_field(form, "phone"),
            position=_field(form, "position"),
            experience=_field(form, "experience"),
            message=_field(form, "message"),
            documents=documents,
        )
        try:
            application_id = self._applications.create(new_app)
        except Exception:
            self._discard(documents)
            raise

        logger.info("Application %s received for %s (%s)", application_id, new_app.name, new_app.position)
        return self.get(application_id)

    # -------- Review --------
    def get(self, application_id: int) -> Application:
        application = self._applications.get_by_id(int(application_id))
        if not application:
            raise NotFoundError("Application not found")
        return application

    def list_all(self) -> Sequence[Application]:
        return self._applications.list_all()

    def update_status(self, *, reviewer: AuthUser, application_id: int, status: str) -> Application:
        target = parse_enum(ApplicationStatus, status, "status")
        if target == ApplicationStatus.HIRED:
            raise ValidationError("Use the hire action to hire an applicant")

        application = self.get(application_id)
        if application.status == target:
            return application
        if application.is_terminal:
            raise ValidationError(f"Application is already {application.status.value} and cannot be changed")

        if not self._applications.set_status(
            application_id=application.application_id,
            status=target,
            reviewed_by=reviewer.user_id,
        ):
            raise ValidationError("Application status could not be updated")

        logger.info(
            "Application %s: %s -> %s by %s",
            application.application_id,
            application.status.value,
            target.value,
            reviewer.username,
        )
        return self.get(application.application_id)

    # -------- Hiring --------
    def hire(self, *, reviewer: AuthUser, application_id: int, salary, role) -> HireOutcome:
        if salary in (None, "") or not str(role or "").strip():
            raise ValidationError("Please provide salary and role")
        amount = require_positive_decimal(salary, "Salary")
        user_role = Role.normalize(str(role))

        application = self.get(application_id)
        if application.status == ApplicationStatus.HIRED:
            raise ValidationError("This applicant has already been hired")
        if application.status == ApplicationStatus.REJECTED:
            raise ValidationError("A rejected application cannot be hired")

        username = application.username or default_username(application.name)
        if self._users.get_by_username(username):
            raise ConflictError("Username already exists")

        plain_password: Optional[str] = None
        password_hash = application.password_hash
        if not password_hash:
            plain_password = generate_password(application.position)
            password_hash = generate_password_hash(plain_password)

        record = self._applications.hire(
            application_id=application.application_id,
            username=username,
            password_hash=password_hash,
            user_role=user_role,
            employee_name=application.name,
            employee_role=user_role.value,
            salary=amount,
            reviewed_by=reviewer.user_id,
            review_comments=f"Hired as {user_role.value} with salary Rs.{amount}",
        )
        logger.info(
            "Application %s hired as %s (user=%s, employee=%s) by %s",
            application.application_id,
            user_role.value,
            record.user_id,
            record.employee_id,
            reviewer.username,
        )

        self._send_offer(application, username=username, password=plain_password, signed_by=reviewer.username)
        return HireOutcome(
            username=username,
            password=plain_password,
            role=user_role,
            user_id=record.user_id,
            employee_id=record.employee_id,
        )

    def _send_offer(self, application: Application, *, username: str, password: Optional[str], signed_by: str) -> None:
        if not self._email or not application.email:
            return
        letter = build_offer_letter(
            company_name=self._company_name,
            position=application.position,
            username=username,
            password=password,
            signed_by=signed_by or "HR Manager",
            today=now_local().date(),
        )
        try:
            self._email.send(application.email, letter.subject, letter.text, letter.html)
        except Exception:
            # The hire is already committed.
            logger.error("Failed to send offer email to %s", application.email, exc_info=True)

    # -------- Documents --------
    def document_path(self, application_id: int, doc_type: str) -> tuple[Path, DocumentType]:
        try:
            kind = DocumentType(doc_type)
        except ValueError:
            raise ValidationError("Invalid document type")

        application = self.get(application_id)
        relative = application.document(kind)
        if not relative:
            raise NotFoundError(f"{kind.label} not found")

        path = self._uploads.absolute(relative)
        if not path.is_file():
            logger.warning("%s for application %s missing on disk: %s", kind.label, application_id, relative)
            raise NotFoundError(f"{kind.label} not found")
        return path, kind
