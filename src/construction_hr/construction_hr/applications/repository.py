from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import ApplicationStatus, Role
from .model import Application, HireRecord, NewApplication


class ApplicationRepository(Protocol):
    def create(self, application: NewApplication) -> int:
        raise NotImplementedError

    def get_by_id(self, application_id: int) -> Optional[Application]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Application]:
        """Newest first."""

        raise NotImplementedError

    def has_open_application(self, username: str) -> bool:
        """True if a Pending/Shortlisted application already claims ``username``."""

        raise NotImplementedError

    def set_status(self, *, application_id: int, status: ApplicationStatus, reviewed_by: int) -> bool:
        raise NotImplementedError

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
        """Create the user and the linked employee and mark the application Hired.

        All three writes succeed together or not at all.
        """

        raise NotImplementedError
