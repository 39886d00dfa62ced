from __future__ import annotations

import json
import logging
from typing import Mapping, Optional, Sequence

from werkzeug.datastructures import FileStorage

from ..common.uploads import UploadStore
from ..common.validators import parse_enum, require_int_in_range, require_non_empty
from ..core.constants import IMAGE_EXTENSIONS, MAX_SITE_PHOTOS_PER_REQUEST
from ..core.enums import Role, SiteStatus
from ..core.exceptions import AuthorizationError, DomainError, NotFoundError, UploadError, ValidationError
from ..users.model import AuthUser
from .model import SiteComment, SiteReport
from .repository import SiteReportRepository

logger = logging.getLogger(__name__)

UPLOAD_SUBDIR = "site-monitoring"
_REPORTING_ROLES = (Role.ADMIN, Role.MANAGER, Role.SUPERVISOR)


def parse_photo_ids(raw) -> list[int]:
    """``removedPhotos`` arrives as a JSON list (string) in multipart forms."""
    if raw is None or raw == "":
        return []
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            raise ValidationError("removedPhotos must be a JSON list of photo ids")
    if not isinstance(raw, (list, tuple)):
        raise ValidationError("removedPhotos must be a JSON list of photo ids")
    try:
        return [int(v) for v in raw]
    except (TypeError, ValueError):
        raise ValidationError("removedPhotos must be a JSON list of photo ids")


class SiteMonitoringService:
    def __init__(self, reports: SiteReportRepository, uploads: UploadStore):
        self._reports = reports
        self._uploads = uploads

    @staticmethod
    def _ensure_reporter_role(caller: AuthUser) -> None:
        if caller.role not in _REPORTING_ROLES:
            raise AuthorizationError("Access denied. Only Supervisors and Admins can access this resource.")

    @staticmethod
    def _ensure_owner(caller: AuthUser, report: SiteReport, action: str) -> None:
        if report.reported_by != caller.user_id and caller.role != Role.ADMIN:
            raise AuthorizationError(f"Not authorized to {action} this report")

    def _save_photos(self, photos: Sequence[FileStorage]) -> list[str]:
        photos = [p for p in (photos or []) if p is not None and p.filename]
        if len(photos) > MAX_SITE_PHOTOS_PER_REQUEST:
            raise UploadError(f"At most {MAX_SITE_PHOTOS_PER_REQUEST} photos can be uploaded at once")

        saved: list[str] = []
        try:
            for photo in photos:
                stored = self._uploads.save(
                    photo,
                    subdir=UPLOAD_SUBDIR,
                    field_name="photos",
                    allowed_extensions=IMAGE_EXTENSIONS,
                )
                saved.append(stored.path)
        except DomainError:
            self._remove_files(saved)
            raise
        return saved

    def _remove_files(self, paths: Sequence[str]) -> None:
        for path in paths:
            self._uploads.remove(path)

    def get(self, report_id: int) -> SiteReport:
        report = self._reports.get_by_id(int(report_id))
        if not report:
            raise NotFoundError("Report not found")
        return report

    def list_all(self) -> Sequence[SiteReport]:
        return self._reports.list_all()

    def create(self, *, caller: AuthUser, fields: Mapping, photos: Sequence[FileStorage] = ()) -> SiteReport:
        self._ensure_reporter_role(caller)
        title = require_non_empty(fields.get("title"), "Title")
        description = require_non_empty(fields.get("description"), "Description")
        location = require_non_empty(fields.get("location"), "Location")
        progress = require_int_in_range(fields.get("progress"), "progress", 0, 100)
        status = parse_enum(SiteStatus, fields.get("status") or SiteStatus.IN_PROGRESS.value, "status")

        paths = self._save_photos(photos)
        try:
            report_id = self._reports.create(
                title=title,
                description=description,
                location=location,
                progress=progress,
                status=status,
                reported_by=caller.user_id,
                photo_paths=paths,
            )
        except Exception:
            self._remove_files(paths)
            raise

        logger.info("Site report %s created by %s with %d photos", report_id, caller.username, len(paths))
        return self.get(report_id)

    def update(
        self,
        *,
        caller: AuthUser,
        report_id: int,
        fields: Mapping,
        removed_photo_ids=None,
        photos: Sequence[FileStorage] = (),
    ) -> SiteReport:
        self._ensure_reporter_role(caller)
        report = self.get(report_id)
        self._ensure_owner(caller, report, "update")

        title = str(fields.get("title") or "").strip() or report.title
        description = str(fields.get("description") or "").strip() or report.description
        location = str(fields.get("location") or "").strip() or report.location
        progress = report.progress
        if fields.get("progress") not in (None, ""):
            progress = require_int_in_range(fields.get("progress"), "progress", 0, 100)
        status = report.status
        if fields.get("status"):
            status = parse_enum(SiteStatus, fields.get("status"), "status")

        removed_ids = set(parse_photo_ids(removed_photo_ids))
        removed_paths = [p.path for p in report.photos if p.photo_id in removed_ids]
        new_paths = self._save_photos(photos)
        try:
            self._reports.update(
                report_id=report.report_id,
                title=title,
                description=description,
                location=location,
                progress=progress,
                status=status,
                removed_photo_ids=sorted(removed_ids),
                new_photo_paths=new_paths,
            )
        except Exception:
            self._remove_files(new_paths)
            raise

        self._remove_files(removed_paths)
        logger.info(
            "Site report %s updated by %s (-%d/+%d photos)",
            report.report_id,
            caller.username,
            len(removed_paths),
            len(new_paths),
        )
        return self.get(report.report_id)

    def delete(self, *, caller: AuthUser, report_id: int) -> None:
        self._ensure_reporter_role(caller)
        report = self.get(report_id)
        self._ensure_owner(caller, report, "delete")

        if not self._reports.delete(report.report_id):
            raise NotFoundError("Report not found")
        self._remove_files(report.photo_paths())
        logger.info("Site report %s deleted by %s", report.report_id, caller.username)

    def add_comment(self, *, caller: AuthUser, report_id: int, text: Optional[str]) -> SiteComment:
        body = require_non_empty(text, "Comment text")
        report = self.get(report_id)
        comment_id = self._reports.add_comment(report_id=report.report_id, author_id=caller.user_id, text=body)

        for comment in self.get(report.report_id).comments:
            if comment.comment_id == comment_id:
                return comment
        raise NotFoundError("Comment not found")
