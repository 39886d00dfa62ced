from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..core.enums import Role

ATTENDANCE_ADDED = "attendanceAdded"
LEAVE_APPLIED = "leaveApplied"
LEAVE_STATUS_UPDATED = "leaveStatusUpdated"


def user_room(user_id: int) -> str:
    return f"user:{int(user_id)}"


def role_room(role: Role) -> str:
    return f"role:{role.value}"


@dataclass(frozen=True)
class Audience:
    """Who may receive an event: explicit users plus whole roles."""

    user_ids: frozenset = field(default_factory=frozenset)
    roles: frozenset = field(default_factory=frozenset)

    @classmethod
    def of(cls, *, roles: Iterable[Role] = (), user_ids: Iterable[Optional[int]] = ()) -> "Audience":
        return cls(
            user_ids=frozenset(int(u) for u in user_ids if u is not None),
            roles=frozenset(roles),
        )

    def rooms(self) -> list[str]:
        rooms = [role_room(r) for r in self.roles] + [user_room(u) for u in self.user_ids]
        return sorted(rooms)


@dataclass(frozen=True)
class Event:
    name: str
    payload: dict
    audience: Audience


def attendance_added(attendance: dict, *, employee_user_id: Optional[int]) -> Event:
    return Event(
        name=ATTENDANCE_ADDED,
        payload={"attendance": attendance, "message": "New attendance record added"},
        audience=Audience.of(
            roles=(Role.ADMIN, Role.MANAGER, Role.SUPERVISOR),
            user_ids=(employee_user_id,),
        ),
    )


def leave_applied(leave: dict, *, owner_id: int) -> Event:
    return Event(
        name=LEAVE_APPLIED,
        payload={"leave": leave, "message": "New leave application submitted"},
        audience=Audience.of(roles=(Role.ADMIN, Role.MANAGER), user_ids=(owner_id,)),
    )


def leave_status_updated(leave: dict, *, owner_id: int, status: str) -> Event:
    return Event(
        name=LEAVE_STATUS_UPDATED,
        payload={"leave": leave, "status": status, "message": f"Leave request {status.lower()}"},
        audience=Audience.of(roles=(Role.ADMIN, Role.MANAGER), user_ids=(owner_id,)),
    )
