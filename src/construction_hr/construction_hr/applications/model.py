from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import ApplicationStatus, DocumentType


@dataclass(frozen=True)
class NewApplication:
    """Fields captured at submission time (public forms)."""

    name: str
    email: str
    phone: str
    position: str
    experience: str = ""
    message: str = ""
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    address: Optional[str] = None
    emergency_contact: Optional[str] = None
    username: Optional[str] = None
    password_hash: Optional[str] = None
    expected_salary: Optional[str] = None
    documents: dict = field(default_factory=dict)  # DocumentType -> relative path


@dataclass(frozen=True)
class Application:
    application_id: int
    name: str
    email: str
    phone: str
    position: str
    status: ApplicationStatus
    experience: str = ""
    message: str = ""
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    address: Optional[str] = None
    emergency_contact: Optional[str] = None
    username: Optional[str] = None
    password_hash: Optional[str] = None
    expected_salary: Optional[str] = None
    documents: dict = field(default_factory=dict)
    application_date: Optional[datetime] = None
    user_id: Optional[int] = None
    reviewed_by: Optional[int] = None
    review_date: Optional[datetime] = None
    review_comments: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in (ApplicationStatus.REJECTED, ApplicationStatus.HIRED)

    def document(self, doc_type: DocumentType) -> Optional[str]:
        return self.documents.get(doc_type)

    def to_dict(self) -> dict:
        # The applicant's password hash never leaves the server.
        return {
            "_id": self.application_id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "position": self.position,
            "experience": self.experience,
            "message": self.message,
            "dateOfBirth": self.date_of_birth.isoformat() if self.date_of_birth else None,
            "gender": self.gender,
            "address": self.address,
            "emergencyContact": self.emergency_contact,
            "username": self.username,
            "expectedSalary": self.expected_salary,
            "resumePath": self.document(DocumentType.RESUME),
            "idProofPath": self.document(DocumentType.ID_PROOF),
            "addressProofPath": self.document(DocumentType.ADDRESS_PROOF),
            "policeVerificationPath": self.document(DocumentType.POLICE_VERIFICATION),
            "photoPath": self.document(DocumentType.PHOTO),
            "status": self.status.value,
            "applicationDate": self.application_date.isoformat() if self.application_date else None,
            "userId": self.user_id,
            "reviewedBy": self.reviewed_by,
            "reviewDate": self.review_date.isoformat() if self.review_date else None,
            "reviewComments": self.review_comments,
        }


@dataclass(frozen=True)
class HireRecord:
    """Rows written by a successful hire."""

    user_id: int
    employee_id: int
