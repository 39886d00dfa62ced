from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import SiteStatus


@dataclass(frozen=True)
class SitePhoto:
    photo_id: int
    path: str  # relative, "uploads/site-monitoring/..."
    caption: str = ""

    def to_dict(self) -> dict:
        return {"_id": self.photo_id, "path": self.path, "caption": self.caption}


@dataclass(frozen=True)
class SiteComment:
    comment_id: int
    text: str
    author_id: int
    author_username: Optional[str] = None
    author_role: Optional[str] = None
    timestamp: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "_id": self.comment_id,
            "text": self.text,
            "author": {"_id": self.author_id, "username": self.author_username, "role": self.author_role},
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }


@dataclass(frozen=True)
class SiteReport:
    report_id: int
    title: str
    description: str
    location: str
    progress: int
    status: SiteStatus
    reported_by: int
    reporter_username: Optional[str] = None
    reporter_role: Optional[str] = None
    report_date: Optional[datetime] = None
    photos: tuple = field(default_factory=tuple)
    comments: tuple = field(default_factory=tuple)

    def photo_paths(self) -> list[str]:
        return [p.path for p in self.photos]

    def to_dict(self) -> dict:
        return {
            "_id": self.report_id,
            "title": self.title,
            "description": self.description,
            "location": self.location,
            "progress": self.progress,
            "status": self.status.value,
            "reportedBy": {"_id": self.reported_by, "username": self.reporter_username, "role": self.reporter_role},
            "date": self.report_date.isoformat() if self.report_date else None,
            "photos": [p.to_dict() for p in self.photos],
            "comments": [c.to_dict() for c in self.comments],
        }
