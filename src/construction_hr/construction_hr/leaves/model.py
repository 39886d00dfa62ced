from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus


@dataclass(frozen=True)
class LeaveRequest:
    leave_id: int
    user_id: int
    from_date: date
    to_date: date
    reason: str
    status: LeaveStatus
    created_at: Optional[datetime] = None
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    # Filled when the owner is joined in (admin listing, notifications).
    username: Optional[str] = None
    user_role: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status != LeaveStatus.PENDING

    def to_dict(self) -> dict:
        owner = self.user_id
        if self.username is not None:
            owner = {"_id": self.user_id, "username": self.username, "role": self.user_role}
        return {
            "_id": self.leave_id,
            "userId": owner,
            "fromDate": self.from_date.isoformat(),
            "toDate": self.to_date.isoformat(),
            "reason": self.reason,
            "status": self.status.value,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "decidedBy": self.decided_by,
            "decidedAt": self.decided_at.isoformat() if self.decided_at else None,
        }
