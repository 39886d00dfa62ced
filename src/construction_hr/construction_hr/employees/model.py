from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Payroll/attendance subject.

    ``user_id`` is either None (an unlinked employee created directly by an
    admin) or the id of exactly one existing user; the link is validated when
    written, never guessed afterwards.
    """

    employee_id: int
    name: str
    role: str
    salary: Optional[Decimal]
    user_id: Optional[int] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "_id": self.employee_id,
            "name": self.name,
            "role": self.role,
            "salary": float(self.salary) if self.salary is not None else None,
            "userId": self.user_id,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
