from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import SiteStatus
from .model import SiteReport


class SiteReportRepository(Protocol):
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
        raise NotImplementedError

    def get_by_id(self, report_id: int) -> Optional[SiteReport]:
        """Report with its photos and comments."""

        raise NotImplementedError

    def list_all(self) -> Sequence[SiteReport]:
        """Newest first."""

        raise NotImplementedError

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
        """Drop ``removed_photo_ids`` first, then append ``new_photo_paths``."""

        raise NotImplementedError

    def delete(self, report_id: int) -> bool:
        raise NotImplementedError

    def add_comment(self, *, report_id: int, author_id: int, text: str) -> int:
        raise NotImplementedError
