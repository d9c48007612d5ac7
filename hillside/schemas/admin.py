"""
The Hillside Echo - Admin & Analytics Schemas
=============================================
Security logs, analytics aggregates, site settings and contact inbox.
"""

from datetime import datetime
from typing import Any, Generic, Optional, TypeVar, Union

from pydantic import BaseModel, Field

from hillside.schemas.content import Writer

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """Laravel length-aware paginator."""

    data: list[T] = Field(default_factory=list)
    current_page: int = 1
    last_page: int = 1
    per_page: int = 10
    total: int = 0

    class Config:
        extra = "ignore"

    @property
    def has_next(self) -> bool:
        return self.current_page < self.last_page

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1


class SystemStatus(BaseModel):
    locked: bool = False
    message: Optional[str] = None


class AuditLogEntry(BaseModel):
    id: int
    user: Union[Writer, str, None] = None
    action: str = ""
    details: Optional[str] = None
    ip: Optional[str] = None
    date: Optional[str] = None

    @property
    def actor_name(self) -> str:
        if isinstance(self.user, Writer):
            return self.user.name
        return self.user or "System"


class LoginRecord(BaseModel):
    id: int
    user: Union[Writer, str, None] = None
    ip: Optional[str] = None
    status: str = "Success"
    date: Optional[str] = None


class TrendSeries(BaseModel):
    data: list[dict[str, Any]] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)

    def totals_by_category(self) -> dict[str, int]:
        totals = {category: 0 for category in self.categories}
        for point in self.data:
            for category in self.categories:
                totals[category] += int(point.get(category) or 0)
        return totals


class ArticleStat(BaseModel):
    title: str
    category: Optional[str] = None
    views: int = 0
    created_at: Optional[str] = None
    author_name: str = "Unknown"


class StaffStat(BaseModel):
    name: str
    position: str = "Staff"
    article_count: int = 0
    last_active: Optional[str] = None


class DashboardStats(BaseModel):
    """Counters from /publications/dashboard/stats; unknown keys are kept."""

    class Config:
        extra = "allow"


class ContactSubmission(BaseModel):
    id: int
    name: str = ""
    email: Optional[str] = None
    subject: Optional[str] = None
    message: str = ""
    is_read: bool = False
    created_at: Optional[datetime] = None

    class Config:
        extra = "ignore"


class TeamPhoto(BaseModel):
    url: Optional[str] = None


class TeamIntro(BaseModel):
    text: str = ""
