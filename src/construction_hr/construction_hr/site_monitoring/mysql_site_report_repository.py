from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import SiteStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import SiteComment, SitePhoto, SiteReport
from .repository import SiteReportRepository

_SELECT_REPORTS = """
    SELECT r.report_id, r.title, r.description, r.location, r.progress, r.status,
           r.reported_by, r.report_date, u.username AS reporter_username, u.role AS reporter_role
    FROM site_reports r
    JOIN users u ON u.user_id = r.reported_by
"""


def _insert_photos(cur, report_id: int, paths: Sequence[str]) -> None:
    for p in paths:
        cur.execute(
            "INSERT INTO site_report_photos(report_id, path, caption) VALUES(%s,%s,%s)",
            (int(report_id), p, ""),
        )


class MySQLSiteReportRepository(SiteReportRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        title: str,
        description: str,
        location: str,
        progress: int,
        status: SiteStatus,
        reported_by: int,
        photo_paths: Sequence[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO site_reports(title, description, location, progress, status, reported_by)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (title, description, location, int(progress), status.value, int(reported_by)),
            )
            report_id = int(cur.lastrowid)
            _insert_photos(cur, report_id, photo_paths)
            return report_id

    def _load(self, cur, rows: list[dict]) -> list[SiteReport]:
        if not rows:
            return []
        ids = [int(r["report_id"]) for r in rows]

        cur.execute(
            f"SELECT photo_id, report_id, path, caption FROM site_report_photos "
            f"WHERE report_id IN ({in_clause(ids)}) ORDER BY photo_id",
            tuple(ids),
        )
        photos: dict[int, list[SitePhoto]] = {}
        for p in fetchall(cur):
            photos.setdefault(int(p["report_id"]), []).append(
                SitePhoto(photo_id=int(p["photo_id"]), path=p["path"], caption=p.get("caption") or "")
            )

        cur.execute(
            f"""
            SELECT c.comment_id, c.report_id, c.author_id, c.text, c.created_at,
                   u.username, u.role
            FROM site_report_comments c
            JOIN users u ON u.user_id = c.author_id
            WHERE c.report_id IN ({in_clause(ids)})
            ORDER BY c.comment_id
            """,
            tuple(ids),
        )
        comments: dict[int, list[SiteComment]] = {}
        for c in fetchall(cur):
            comments.setdefault(int(c["report_id"]), []).append(
                SiteComment(
                    comment_id=int(c["comment_id"]),
                    text=c["text"],
                    author_id=int(c["author_id"]),
                    author_username=c.get("username"),
                    author_role=c.get("role"),
                    timestamp=c.get("created_at"),
                )
            )

        return [
            SiteReport(
                report_id=int(r["report_id"]),
                title=r["title"],
                description=r["description"],
                location=r["location"],
                progress=int(r["progress"]),
                status=SiteStatus(r["status"]),
                reported_by=int(r["reported_by"]),
                reporter_username=r.get("reporter_username"),
                reporter_role=r.get("reporter_role"),
                report_date=r.get("report_date"),
                photos=tuple(photos.get(int(r["report_id"]), [])),
                comments=tuple(comments.get(int(r["report_id"]), [])),
            )
            for r in rows
        ]

    def get_by_id(self, report_id: int) -> Optional[SiteReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_REPORTS + " WHERE r.report_id=%s", (int(report_id),))
            row = fetchone(cur)
            if not row:
                return None
            return self._load(cur, [row])[0]

    def list_all(self) -> Sequence[SiteReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_REPORTS + " ORDER BY r.report_date DESC, r.report_id DESC LIMIT %s",
                (DEFAULT_LIST_LIMIT,),
            )
            return self._load(cur, fetchall(cur))

    def update(
        self,
        *,
        report_id: int,
        title: str,
        description: str,
        location: str,
        progress: int,
        status: SiteStatus,
        removed_photo_ids: Iterable[int],
        new_photo_paths: Sequence[str],
    ) -> None:
        removed = [int(p) for p in removed_photo_ids]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE site_reports
                SET title=%s, description=%s, location=%s, progress=%s, status=%s
                WHERE report_id=%s
                """,
                (title, description, location, int(progress), status.value, int(report_id)),
            )
            if removed:
                cur.execute(
                    f"DELETE FROM site_report_photos WHERE report_id=%s AND photo_id IN ({in_clause(removed)})",
                    (int(report_id), *removed),
                )
            _insert_photos(cur, report_id, new_photo_paths)

    def delete(self, report_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM site_reports WHERE report_id=%s", (int(report_id),))
            return cur.rowcount > 0

    def add_comment(self, *, report_id: int, author_id: int, text: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO site_report_comments(report_id, author_id, text) VALUES(%s,%s,%s)",
                (int(report_id), int(author_id), text),
            )
            return int(cur.lastrowid)
