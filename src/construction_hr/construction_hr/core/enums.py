from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """System permission role stored on the user account."""

    ADMIN = "Admin"
    MANAGER = "Manager"
    SUPERVISOR = "Supervisor"
    WORKER = "Worker"

    @classmethod
    def normalize(cls, value: str) -> "Role":
        """Accept any casing ("worker", "SUPERVISOR") and fall back to Worker."""
        lowered = (value or "").strip().lower()
        for role in cls:
            if role.value.lower() == lowered:
                return role
        return cls.WORKER


class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"


class LeaveStatus(str, Enum):
    """Leave workflow: Pending -> Approved | Rejected (both terminal)."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class ApplicationStatus(str, Enum):
    PENDING = "Pending"
    SHORTLISTED = "Shortlisted"
    REJECTED = "Rejected"
    HIRED = "Hired"


class SiteStatus(str, Enum):
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    ON_HOLD = "On Hold"
    DELAYED = "Delayed"


class DocumentType(str, Enum):
    """Upload fields accepted on a job application."""

    RESUME = "resume"
    ID_PROOF = "idProof"
    ADDRESS_PROOF = "addressProof"
    POLICE_VERIFICATION = "policeVerification"
    PHOTO = "photo"

    @property
    def label(self) -> str:
        return {
            DocumentType.RESUME: "Resume",
            DocumentType.ID_PROOF: "ID Proof",
            DocumentType.ADDRESS_PROOF: "Address Proof",
            DocumentType.POLICE_VERIFICATION: "Police Verification",
            DocumentType.PHOTO: "Photo",
        }[self]
