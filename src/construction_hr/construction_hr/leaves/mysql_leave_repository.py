from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import LeaveStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveRequest
from .repository import LeaveRepository

_SELECT = """
    SELECT l.leave_id, l.user_id, l.from_date, l.to_date, l.reason, l.status,
           l.created_at, l.decided_by, l.decided_at,
           u.username, u.role AS user_role
    FROM leaves l
    JOIN users u ON u.user_id = l.user_id
"""


def _row_to_leave(r: dict) -> LeaveRequest:
    return LeaveRequest(
        leave_id=int(r["leave_id"]),
        user_id=int(r["user_id"]),
        from_date=r["from_date"],
        to_date=r["to_date"],
        reason=r["reason"],
        status=LeaveStatus(r["status"]),
        created_at=r.get("created_at"),
        decided_by=int(r["decided_by"]) if r.get("decided_by") is not None else None,
        decided_at=r.get("decided_at"),
        username=r.get("username"),
        user_role=r.get("user_role"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, user_id: int, from_date: date, to_date: date, reason: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leaves(user_id, from_date, to_date, reason, status)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(user_id), from_date, to_date, reason, LeaveStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get_by_id(self, leave_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE l.leave_id=%s", (int(leave_id),))
            r = fetchone(cur)
            return _row_to_leave(r) if r else None

    def list_for_user(self, user_id: int) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE l.user_id=%s ORDER BY l.created_at DESC, l.leave_id DESC",
                (int(user_id),),
            )
            return [_row_to_leave(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " ORDER BY l.created_at DESC, l.leave_id DESC LIMIT %s",
                (DEFAULT_LIST_LIMIT,),
            )
            return [_row_to_leave(r) for r in fetchall(cur)]

    def decide(self, *, leave_id: int, status: LeaveStatus, decided_by: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leaves
                SET status=%s, decided_by=%s, decided_at=NOW()
                WHERE leave_id=%s AND status=%s
                """,
                (status.value, int(decided_by), int(leave_id), LeaveStatus.PENDING.value),
            )
            return cur.rowcount > 0
