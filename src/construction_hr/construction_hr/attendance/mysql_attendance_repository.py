from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_SELECT = """
    SELECT a.attendance_id, a.employee_id, a.work_date, a.status, a.created_at,
           e.name AS employee_name
    FROM attendance a
    JOIN employees e ON e.employee_id = a.employee_id
"""


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        status=AttendanceStatus(r["status"]),
        employee_name=r.get("employee_name"),
        created_at=r.get("created_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add(self, *, employee_id: int, work_date: date, status: AttendanceStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO attendance(employee_id, work_date, status) VALUES(%s,%s,%s)",
                (int(employee_id), work_date, status.value),
            )
            return int(cur.lastrowid)

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE a.attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def list_all(self) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY a.work_date DESC, a.attendance_id DESC")
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_for_employee(
        self,
        employee_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["a.employee_id=%s"]
        params: list[object] = [int(employee_id)]
        if start is not None:
            clauses.append("a.work_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("a.work_date <= %s")
            params.append(end)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY a.work_date DESC, a.attendance_id DESC",
                tuple(params),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def count_present(self, employee_id: int, *, start: date, end: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS days_present
                FROM attendance
                WHERE employee_id=%s AND status=%s AND work_date BETWEEN %s AND %s
                """,
                (int(employee_id), AttendanceStatus.PRESENT.value, start, end),
            )
            row = fetchone(cur)
            return int(row["days_present"]) if row else 0
