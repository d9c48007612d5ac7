"""
The Hillside Echo Client - Admin Views
======================================
Dashboard, review queues, CRUD pages, analytics, security logs, system
modules, feedback inbox and site settings. Every mutation sends one request
and then re-reads; nothing is applied optimistically.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Any, Literal, Optional

from hillside.api.http import FileField
from hillside.core.errors import ApiError, TransportError, ValidationFailed
from hillside.core.logging import get_logger
from hillside.domain.publications import IN_REVIEW, PublicationAction
from hillside.forms.validation import validate_print_media_form, validate_publication_form, validate_user_form
from hillside.forms.writers import WriterPicker
from hillside.models import REVIEW_QUEUE_ORDER
from hillside.schemas import (
    ArticleStat,
    AuditLogEntry,
    ContactSubmission,
    DashboardStats,
    LoginRecord,
    Page,
    PrintMedia,
    Publication,
    StaffStat,
    TeamIntro,
    TeamPhoto,
    TrendSeries,
    User,
)
from hillside.services.analytics_service import DateRange, ExportFormat, Granularity, ReportType, export_filename
from hillside.services.credit_request_service import CreditRequestQueue, parse_credit_requests
from hillside.services.lockdown_service import LockdownControl
from hillside.services.workflow_service import PublicationWorkflow
from hillside.views.base import View

if TYPE_CHECKING:
    from hillside.app import AppContext

logger = get_logger("views.admin")

ACTION_FAILED = "Action failed."
IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})
REVIEW_PANEL_ACTIONS = frozenset(
    {PublicationAction.APPROVE, PublicationAction.PUBLISH, PublicationAction.REJECT, PublicationAction.RETURN}
)


def review_queue(items: list[Publication]) -> list[Publication]:
    pending = [item for item in items if item.status in IN_REVIEW]
    return sorted(pending, key=lambda item: REVIEW_QUEUE_ORDER.index(item.status))


@dataclass(slots=True)
class ReviewConfirmation:
    publication: Publication
    action: PublicationAction

    @property
    def title(self) -> str:
        verb = {
            PublicationAction.APPROVE: "Approve",
            PublicationAction.PUBLISH: "Publish",
            PublicationAction.REJECT: "Reject",
            PublicationAction.RETURN: "Return",
        }[self.action]
        return f'{verb} "{self.publication.title}"?'


class PendingReviewsPanel:
    """Publications moving through review; every decision asks first."""

    def __init__(self, ctx: "AppContext"):
        self.ctx = ctx
        self.workflow = PublicationWorkflow(
            ctx.session, ctx.publications, ctx.print_media, ctx.notices, loader=self.load_all
        )
        self.confirmation: Optional[ReviewConfirmation] = None

    @property
    def items(self) -> list[Publication]:
        return review_queue(self.workflow.items)

    async def load_all(self) -> list[Publication]:
        page = await self.ctx.publications.list_all(per_page=100)
        return page.data

    async def refresh(self) -> list[Publication]:
        await self.workflow.refresh()
        return self.items

    def request(self, publication: Publication, action: PublicationAction) -> ReviewConfirmation:
        if action not in REVIEW_PANEL_ACTIONS:
            raise ValueError(f"{action.value} is not a review decision")
        self.confirmation = ReviewConfirmation(publication, action)
        return self.confirmation

    def cancel(self) -> None:
        self.confirmation = None

    async def confirm(self) -> bool:
        if self.confirmation is None:
            return False
        pending, self.confirmation = self.confirmation, None
        return await self.workflow.perform(pending.publication, pending.action)


class PendingUsersPanel:
    def __init__(self, ctx: "AppContext"):
        self.ctx = ctx
        self.users: list[User] = []
        self._in_flight: set[int] = set()

    def is_busy(self, user_id: int) -> bool:
        return user_id in self._in_flight

    async def refresh(self) -> list[User]:
        self.users = await self.ctx.users.pending()
        return self.users

    async def approve(self, user_id: int) -> bool:
        return await self._resolve(user_id, approve=True)

    async def reject(self, user_id: int) -> bool:
        return await self._resolve(user_id, approve=False)

    async def _resolve(self, user_id: int, *, approve: bool) -> bool:
        if self.is_busy(user_id):
            return False
        self._in_flight.add(user_id)
        try:
            if approve:
                await self.ctx.users.approve(user_id)
            else:
                await self.ctx.users.delete(user_id)
        except (ApiError, TransportError) as exc:
            logger.warning("pending_user_resolve_failed", user_id=user_id, approve=approve, error=str(exc))
            self.ctx.notices.error(ACTION_FAILED)
            return False
        finally:
            self._in_flight.discard(user_id)

        self.users = [user for user in self.users if user.id != user_id]
        self.ctx.notices.success("User approved successfully." if approve else "User registration rejected.")
        return True


class DashboardView(View):
    name = "dashboard"

    def __init__(self, ctx: "AppContext"):
        super().__init__(ctx)
        self.stats = DashboardStats()
        self.reviews = PendingReviewsPanel(ctx)
        self.pending_users = PendingUsersPanel(ctx)
        self.credit_requests = CreditRequestQueue(ctx.http, ctx.notices)
        self.add_poller(ctx.settings.dashboard_poll_seconds, self.refresh)

    async def load(self) -> None:
        self.loading = True
        try:
            await self.refresh()
        except (ApiError, TransportError) as exc:
            logger.error("dashboard_load_failed", error=str(exc))
            self.error = "Failed to load dashboard."
        finally:
            self.loading = False

    async def refresh(self) -> None:
        publications, stats, requests, users = await asyncio.gather(
            self.reviews.load_all(),
            self.ctx.publications.dashboard_stats(),
            self.ctx.http.get("/admin/credit-requests"),
            self.ctx.users.pending(),
        )
        if self.discard("dashboard"):
            return
        self.reviews.workflow.items = publications
        self.stats = stats
        self.credit_requests.pending = parse_credit_requests(requests)
        self.pending_users.users = users


class PublicationsAdminView(View):
    name = "admin_publications"

    def __init__(self, ctx: "AppContext"):
        super().__init__(ctx)
        self.page: Page[Publication] = Page[Publication]()
        self.field_errors: dict[str, str] = {}
        self.workflow = PublicationWorkflow(
            ctx.session, ctx.publications, ctx.print_media, ctx.notices, loader=self._reload
        )

    async def _reload(self) -> list[Publication]:
        await self.load(self.page.current_page)
        return self.page.data

    async def load(self, page: int = 1) -> Page[Publication]:
        result = await self.ctx.publications.list_all(page=page)
        if not self.discard("publications"):
            self.page = result
            self.workflow.items = list(result.data)
        return self.page

    def writer_picker(self, publication: Optional[Publication] = None) -> WriterPicker:
        if publication is None:
            return WriterPicker.for_author(self.ctx.users, self.ctx.session.user)
        return WriterPicker.for_publication(self.ctx.users, publication)

    async def _save(self, publication_id: Optional[int], fields: dict[str, Any], image: FileField | None) -> bool:
        self.field_errors = validate_publication_form(fields)
        if self.field_errors:
            return False
        try:
            if publication_id is None:
                await self.ctx.publications.create(fields, image=image)
            else:
                await self.ctx.publications.update(publication_id, fields, image=image)
        except ValidationFailed as exc:
            self.field_errors = dict(exc.field_errors)
            return False
        except (ApiError, TransportError) as exc:
            logger.error("admin_publication_save_failed", publication_id=publication_id, error=str(exc))
            self.ctx.notices.error()
            return False
        self.ctx.notices.success(
            "Publication created successfully" if publication_id is None else "Publication updated successfully"
        )
        await self.load(self.page.current_page)
        return True

    async def create(self, fields: dict[str, Any], image: FileField | None = None) -> bool:
        return await self._save(None, fields, image)

    async def update(self, publication_id: int, fields: dict[str, Any], image: FileField | None = None) -> bool:
        return await self._save(publication_id, fields, image)

    async def delete(self, publication: Publication) -> bool:
        removed = await self.workflow.perform(publication, PublicationAction.DELETE)
        if removed:
            self.page.data = list(self.workflow.items)
        return removed


class UsersAdminView(View):
    name = "admin_users"

    def __init__(self, ctx: "AppContext"):
        super().__init__(ctx)
        self.users: list[User] = []
        self.query = ""
        self.field_errors: dict[str, str] = {}

    async def load(self) -> list[User]:
        users = await (self.ctx.users.search(self.query) if self.query else self.ctx.users.list())
        if not self.discard("users"):
            self.users = users
        return self.users

    async def search(self, query: str) -> list[User]:
        self.query = (query or "").strip()
        return await self.load()

    async def _save(self, user_id: Optional[int], data: dict[str, Any], confirm_password: str) -> bool:
        self.field_errors = validate_user_form(data, confirm_password=confirm_password, editing=user_id is not None)
        if self.field_errors:
            return False
        fields = {**data, "password_confirmation": confirm_password} if data.get("password") else dict(data)
        try:
            if user_id is None:
                await self.ctx.users.create(fields)
            else:
                await self.ctx.users.update(user_id, fields)
        except ValidationFailed as exc:
            self.field_errors = dict(exc.field_errors)
            return False
        except (ApiError, TransportError) as exc:
            logger.error("admin_user_save_failed", user_id=user_id, error=str(exc))
            self.ctx.notices.error()
            return False
        self.ctx.notices.success("User created successfully" if user_id is None else "User updated successfully")
        await self.load()
        return True

    async def create(self, data: dict[str, Any], confirm_password: str = "") -> bool:
        return await self._save(None, data, confirm_password)

    async def update(self, user_id: int, data: dict[str, Any], confirm_password: str = "") -> bool:
        return await self._save(user_id, data, confirm_password)

    async def delete(self, user_id: int) -> bool:
        try:
            await self.ctx.users.delete(user_id)
        except (ApiError, TransportError) as exc:
            logger.error("admin_user_delete_failed", user_id=user_id, error=str(exc))
            self.ctx.notices.error(ACTION_FAILED)
            return False
        self.users = [user for user in self.users if user.id != user_id]
        self.ctx.notices.success("User deleted successfully")
        return True


class AnalyticsView(View):
    name = "analytics"

    def __init__(self, ctx: "AppContext", period: Optional[DateRange] = None):
        super().__init__(ctx)
        self.period = period or DateRange()
        self.granularity: Granularity = "daily"
        self.trends = TrendSeries()
        self.articles: list[ArticleStat] = []
        self.staff: list[StaffStat] = []
        self.add_poller(ctx.settings.analytics_poll_seconds, self.refresh)

    def set_range(self, start: Optional[date], end: Optional[date]) -> None:
        self.period = DateRange(start, end)

    async def refresh(self) -> None:
        trends, articles, staff = await asyncio.gather(
            self.ctx.analytics.trends(self.period, self.granularity),
            self.ctx.analytics.articles(self.period),
            self.ctx.analytics.staff(self.period),
        )
        if self.discard("analytics"):
            return
        self.trends, self.articles, self.staff = trends, articles, staff

    async def load(self) -> None:
        self.loading = True
        try:
            await self.refresh()
        except (ApiError, TransportError) as exc:
            logger.error("analytics_load_failed", error=str(exc))
            self.error = "Failed to load analytics."
        finally:
            self.loading = False

    async def export(self, report: ReportType, fmt: ExportFormat) -> tuple[str, bytes]:
        payload = await self.ctx.analytics.export(self.period, report, fmt)
        filename = export_filename(report, fmt)
        logger.info("analytics_report_exported", report=report, format=fmt, size=len(payload))
        return filename, payload


class SecurityView(View):
    name = "security"

    def __init__(self, ctx: "AppContext", period: Optional[DateRange] = None):
        super().__init__(ctx)
        self.period = period or DateRange()
        self.tab: Literal["audit", "logins"] = "audit"
        self.page = 1
        self.audit: Page[AuditLogEntry] = Page[AuditLogEntry]()
        self.logins: Page[LoginRecord] = Page[LoginRecord]()
        self.add_poller(ctx.settings.security_poll_seconds, self.refresh)

    @property
    def current(self) -> Page[Any]:
        return self.audit if self.tab == "audit" else self.logins

    async def refresh(self) -> None:
        if self.tab == "audit":
            result = await self.ctx.analytics.audit_logs(self.period, page=self.page)
        else:
            result = await self.ctx.analytics.login_history(self.period, page=self.page)
        if self.discard(self.tab):
            return
        if self.tab == "audit":
            self.audit = result
        else:
            self.logins = result

    async def set_tab(self, tab: Literal["audit", "logins"]) -> None:
        self.tab = tab
        self.page = 1
        await self.refresh()

    async def next_page(self) -> None:
        if self.current.has_next:
            self.page += 1
            await self.refresh()

    async def prev_page(self) -> None:
        if self.page > 1:
            self.page -= 1
            await self.refresh()


class ModulesView(View):
    name = "modules"

    def __init__(self, ctx: "AppContext"):
        super().__init__(ctx)
        self.lockdown = LockdownControl(ctx.http, ctx.notices)

    async def load(self) -> bool:
        return await self.lockdown.load()


class FeedbackView(View):
    name = "feedback"

    def __init__(self, ctx: "AppContext"):
        super().__init__(ctx)
        self.submissions: list[ContactSubmission] = []
        self.unread_count = 0
        self.add_poller(ctx.settings.inbox_poll_seconds, self.refresh_unread, name="inbox_unread")

    async def load(self) -> list[ContactSubmission]:
        submissions, unread = await asyncio.gather(
            self.ctx.site.contact_submissions(),
            self.ctx.site.unread_count(),
        )
        if not self.discard("feedback"):
            self.submissions, self.unread_count = submissions, unread
        return self.submissions

    async def refresh_unread(self) -> None:
        count = await self.ctx.site.unread_count()
        if not self.discard("unread_count"):
            self.unread_count = count

    async def _mutate(self, event: str, submission_id: int, call) -> bool:
        try:
            await call
        except (ApiError, TransportError) as exc:
            logger.error(event, submission_id=submission_id, error=str(exc))
            self.ctx.notices.error(ACTION_FAILED)
            return False
        await self.load()
        return True

    async def mark_read(self, submission_id: int) -> bool:
        return await self._mutate("feedback_mark_read_failed", submission_id, self.ctx.site.mark_read(submission_id))

    async def delete(self, submission_id: int) -> bool:
        return await self._mutate(
            "feedback_delete_failed", submission_id, self.ctx.site.delete_submission(submission_id)
        )

    async def reply(self, submission_id: int, message: str) -> bool:
        if not (message or "").strip():
            self.ctx.notices.warning("Reply message is required.")
            return False
        sent = await self._mutate(
            "feedback_reply_failed", submission_id, self.ctx.site.reply(submission_id, message.strip())
        )
        if sent:
            self.ctx.notices.success("Reply sent successfully.")
        return sent


class SiteSettingsView(View):
    name = "site_settings"

    def __init__(self, ctx: "AppContext"):
        super().__init__(ctx)
        self.photo = TeamPhoto()
        self.intro = TeamIntro()

    async def load(self) -> None:
        photo, intro = await asyncio.gather(self.ctx.site.team_photo(), self.ctx.site.team_intro())
        if not self.discard("site_settings"):
            self.photo, self.intro = photo, intro

    async def upload_photo(self, photo: FileField) -> bool:
        if photo[2] not in IMAGE_TYPES:
            self.ctx.notices.warning("Please choose an image file.")
            return False
        try:
            self.photo = await self.ctx.site.upload_team_photo(photo)
        except (ApiError, TransportError) as exc:
            logger.error("team_photo_upload_failed", error=str(exc))
            self.ctx.notices.error("Failed to upload photo.")
            return False
        self.ctx.notices.success("Team photo updated successfully!")
        return True

    async def save_intro(self, text: str) -> bool:
        try:
            await self.ctx.site.update_team_intro(text)
        except (ApiError, TransportError) as exc:
            logger.error("team_intro_update_failed", error=str(exc))
            self.ctx.notices.error("Failed to update introduction.")
            return False
        self.intro = TeamIntro(text=text)
        self.ctx.notices.success("Team introduction updated successfully!")
        return True


class PrintMediaAdminView(View):
    name = "admin_print_media"

    def __init__(self, ctx: "AppContext"):
        super().__init__(ctx)
        self.items: list[PrintMedia] = []
        self.field_errors: dict[str, str] = {}

    async def load(self) -> list[PrintMedia]:
        items = await self.ctx.print_media.list()
        if not self.discard("print_media"):
            self.items = items
        return self.items

    async def _save(
        self,
        media_id: Optional[int],
        fields: dict[str, Any],
        document: FileField | None,
        thumbnail: FileField | None,
    ) -> bool:
        self.field_errors = validate_print_media_form(
            fields,
            filename=document[0] if document else None,
            editing=media_id is not None,
        )
        if self.field_errors:
            return False
        try:
            if media_id is None:
                await self.ctx.print_media.create(fields, document, thumbnail)
            else:
                await self.ctx.print_media.update(media_id, fields, document, thumbnail)
        except ValidationFailed as exc:
            self.field_errors = dict(exc.field_errors)
            return False
        except (ApiError, TransportError) as exc:
            logger.error("admin_print_media_save_failed", media_id=media_id, error=str(exc))
            self.ctx.notices.error()
            return False
        # archive pages read through the cache
        self.ctx.cache.clear()
        self.ctx.notices.success("Print media saved successfully")
        await self.load()
        return True

    async def create(self, fields: dict[str, Any], document: FileField, thumbnail: FileField | None = None) -> bool:
        return await self._save(None, fields, document, thumbnail)

    async def update(
        self,
        media_id: int,
        fields: dict[str, Any],
        document: FileField | None = None,
        thumbnail: FileField | None = None,
    ) -> bool:
        return await self._save(media_id, fields, document, thumbnail)

    async def delete(self, media_id: int) -> bool:
        try:
            await self.ctx.print_media.delete(media_id)
        except (ApiError, TransportError) as exc:
            logger.error("admin_print_media_delete_failed", media_id=media_id, error=str(exc))
            self.ctx.notices.error(ACTION_FAILED)
            return False
        self.items = [item for item in self.items if item.id != media_id]
        self.ctx.notices.success("Print media deleted successfully")
        return True
