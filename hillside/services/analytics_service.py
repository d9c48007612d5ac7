"""
The Hillside Echo Client - Analytics & Security Service
=======================================================
Read-only access to aggregates, audit trail and login history, plus the
report export.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Literal, Optional

from hillside.api.http import HttpClient
from hillside.schemas import ArticleStat, AuditLogEntry, LoginRecord, Page, StaffStat, TrendSeries

Granularity = Literal["daily", "weekly", "monthly"]
ExportFormat = Literal["pdf", "excel"]
ReportType = Literal["articles", "staff"]


@dataclass(slots=True)
class DateRange:
    start: Optional[date] = None
    end: Optional[date] = None

    def as_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.start:
            params["start_date"] = self.start.isoformat()
        if self.end:
            params["end_date"] = self.end.isoformat()
        return params


def export_filename(report: ReportType, fmt: ExportFormat) -> str:
    return f"{report}_report.{'csv' if fmt == 'excel' else 'pdf'}"


class AnalyticsService:
    def __init__(self, http: HttpClient):
        self.http = http

    async def trends(self, period: DateRange, granularity: Granularity = "daily") -> TrendSeries:
        payload = await self.http.get(
            "/analytics/trends",
            params={**period.as_params(), "granularity": granularity},
        )
        return TrendSeries.model_validate(payload or {})

    async def articles(self, period: DateRange) -> list[ArticleStat]:
        payload = await self.http.get("/analytics/articles", params=period.as_params())
        return [ArticleStat.model_validate(item) for item in payload or []]

    async def staff(self, period: DateRange) -> list[StaffStat]:
        payload = await self.http.get("/analytics/staff", params=period.as_params())
        return [StaffStat.model_validate(item) for item in payload or []]

    async def audit_logs(self, period: DateRange, page: int = 1) -> Page[AuditLogEntry]:
        payload = await self.http.get("/analytics/audit", params={**period.as_params(), "page": page})
        return Page[AuditLogEntry].model_validate(payload)

    async def login_history(self, period: DateRange, page: int = 1) -> Page[LoginRecord]:
        payload = await self.http.get("/analytics/logins", params={**period.as_params(), "page": page})
        return Page[LoginRecord].model_validate(payload)

    async def export(self, period: DateRange, report: ReportType, fmt: ExportFormat) -> bytes:
        return await self.http.get(
            "/analytics/export",
            params={**period.as_params(), "format": fmt, "type": report},
            expect="bytes",
        )
