"""
The Hillside Echo - Schemas
===========================
"""

from hillside.schemas.admin import (
    ArticleStat,
    AuditLogEntry,
    ContactSubmission,
    DashboardStats,
    LoginRecord,
    Page,
    StaffStat,
    SystemStatus,
    TeamIntro,
    TeamPhoto,
    TrendSeries,
)
from hillside.schemas.content import (
    Comment,
    CommentRevision,
    CreditRequest,
    PrintMedia,
    PrintMediaRef,
    Publication,
    PublicationRef,
    Requestable,
    Writer,
    requestable_kind_from_type,
)
from hillside.schemas.users import ProfilePayload, User

__all__ = [
    "ArticleStat",
    "AuditLogEntry",
    "Comment",
    "CommentRevision",
    "ContactSubmission",
    "CreditRequest",
    "DashboardStats",
    "LoginRecord",
    "Page",
    "PrintMedia",
    "PrintMediaRef",
    "ProfilePayload",
    "Publication",
    "PublicationRef",
    "Requestable",
    "StaffStat",
    "SystemStatus",
    "TeamIntro",
    "TeamPhoto",
    "TrendSeries",
    "User",
    "Writer",
    "requestable_kind_from_type",
]
