"""
The Hillside Echo Client - Public Site Views
============================================
Home, category pages, article detail, search, about, print archive and
profiles. Read paths go through the session cache; polled refreshes fetch
fresh data and write it back.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from hillside.api.http import FileField
from hillside.core.errors import ApiError, FormInvalid, TransportError, ValidationFailed
from hillside.core.logging import get_logger
from hillside.domain.publications import PublicationAction, is_publicly_visible
from hillside.forms.validation import validate_contact_form, validate_publication_form
from hillside.models import Category, PrintMediaType, PublicationStatus
from hillside.schemas import (
    Comment,
    CommentRevision,
    PrintMedia,
    ProfilePayload,
    Publication,
    TeamIntro,
    TeamPhoto,
    User,
)
from hillside.services.cache_service import CacheKey
from hillside.services.workflow_service import ClaimOutcome, PublicationWorkflow
from hillside.viewer import PrintMediaViewer, PypdfRenderer, open_document
from hillside.views.base import View

if TYPE_CHECKING:
    from hillside.app import AppContext

logger = get_logger("views.site")

LOAD_FAILED = "Failed to load content."
CONTACT_SENT = "Email sent successfully!"
HOME_SECTIONS: tuple[Category, ...] = tuple(Category)


def public_only(items: list[Publication]) -> list[Publication]:
    return [item for item in items if is_publicly_visible(item.status)]


def workflow_for(ctx: "AppContext", loader=None) -> PublicationWorkflow:
    return PublicationWorkflow(ctx.session, ctx.publications, ctx.print_media, ctx.notices, loader=loader)


@dataclass(slots=True)
class HomeContent:
    featured: list[Publication] = field(default_factory=list)
    sections: dict[Category, list[Publication]] = field(default_factory=dict)


@dataclass(slots=True)
class AboutContent:
    members: list[User] = field(default_factory=list)
    photo: TeamPhoto = field(default_factory=TeamPhoto)
    intro: TeamIntro = field(default_factory=TeamIntro)


class HomeView(View):
    name = "home"

    def __init__(self, ctx: "AppContext"):
        super().__init__(ctx)
        self.content: Optional[HomeContent] = None
        self.add_poller(ctx.settings.home_poll_seconds, self.refresh)

    async def _fetch(self) -> HomeContent:
        featured, *sections = await asyncio.gather(
            self.ctx.publications.list(),
            *(self.ctx.publications.by_category(category) for category in HOME_SECTIONS),
        )
        return HomeContent(
            featured=public_only(featured.data),
            sections={category: public_only(items) for category, items in zip(HOME_SECTIONS, sections)},
        )

    async def load(self) -> Optional[HomeContent]:
        cached = self.ctx.cache.get(CacheKey.HOME)
        if cached is not None:
            self.content = cached
            return cached
        self.loading = True
        try:
            await self.refresh()
        except (ApiError, TransportError) as exc:
            logger.error("home_load_failed", error=str(exc))
            self.error = LOAD_FAILED
        finally:
            self.loading = False
        return self.content

    async def refresh(self) -> None:
        content = await self._fetch()
        if self.discard("home"):
            return
        self.ctx.cache.put(CacheKey.HOME, content)
        self.content = content


class CategoryView(View):
    name = "category"

    def __init__(self, ctx: "AppContext", category: Category):
        super().__init__(ctx)
        self.category = category
        self.items: list[Publication] = []

    async def load(self) -> list[Publication]:
        self.loading = True
        try:
            items = await self.ctx.cache.get_or_load(
                CacheKey.category(self.category),
                lambda: self.ctx.publications.by_category(self.category),
            )
        except (ApiError, TransportError) as exc:
            logger.error("category_load_failed", category=self.category.value, error=str(exc))
            self.error = LOAD_FAILED
            return self.items
        finally:
            self.loading = False
        if not self.discard("category"):
            self.items = public_only(items)
        return self.items


class CommentThread:
    """Discussion under one article; hidden from guests."""

    def __init__(self, ctx: "AppContext", publication_id: int):
        self.ctx = ctx
        self.publication_id = publication_id
        self.comments: list[Comment] = []
        self.editing_id: Optional[int] = None
        self.draft = ""
        self.deleting_id: Optional[int] = None

    @property
    def visible(self) -> bool:
        return self.ctx.session.is_authenticated

    def can_modify(self, comment: Comment) -> bool:
        capabilities = self.ctx.session.capabilities
        return capabilities.is_admin or (
            capabilities.user_id is not None and comment.user.id == capabilities.user_id
        )

    async def load(self) -> list[Comment]:
        if not self.visible:
            self.comments = []
            return self.comments
        try:
            self.comments = await self.ctx.comments.list(self.publication_id)
        except (ApiError, TransportError) as exc:
            logger.warning("comments_load_failed", publication_id=self.publication_id, error=str(exc))
        return self.comments

    async def post(self, body: str) -> Optional[Comment]:
        body = (body or "").strip()
        if not body or not self.visible:
            return None
        try:
            comment = await self.ctx.comments.post(self.publication_id, body)
        except (ApiError, TransportError) as exc:
            logger.warning("comment_post_failed", publication_id=self.publication_id, error=str(exc))
            self.ctx.notices.error("Failed to post comment.")
            return None
        self.comments.insert(0, comment)
        self.ctx.notices.success("Comment posted!")
        return comment

    def _find(self, comment_id: int) -> Optional[Comment]:
        return next((item for item in self.comments if item.id == comment_id), None)

    def start_edit(self, comment_id: int) -> bool:
        comment = self._find(comment_id)
        if comment is None or not self.can_modify(comment):
            return False
        self.editing_id = comment_id
        self.draft = comment.body
        return True

    def cancel_edit(self) -> None:
        self.editing_id = None
        self.draft = ""

    async def save_edit(self, body: Optional[str] = None) -> Optional[Comment]:
        if self.editing_id is None:
            return None
        text = (self.draft if body is None else body).strip()
        if not text:
            return None
        comment_id = self.editing_id
        try:
            updated = await self.ctx.comments.update(comment_id, text)
        except (ApiError, TransportError) as exc:
            logger.warning("comment_update_failed", comment_id=comment_id, error=str(exc))
            self.ctx.notices.error("Failed to update comment")
            return None
        self.comments = [updated if item.id == comment_id else item for item in self.comments]
        self.cancel_edit()
        self.ctx.notices.success("Comment updated")
        return updated

    def request_delete(self, comment_id: int) -> bool:
        comment = self._find(comment_id)
        self.deleting_id = comment_id if comment is not None and self.can_modify(comment) else None
        return self.deleting_id is not None

    def cancel_delete(self) -> None:
        self.deleting_id = None

    async def confirm_delete(self) -> bool:
        if self.deleting_id is None:
            return False
        comment_id, self.deleting_id = self.deleting_id, None
        try:
            await self.ctx.comments.delete(comment_id)
        except (ApiError, TransportError) as exc:
            logger.warning("comment_delete_failed", comment_id=comment_id, error=str(exc))
            self.ctx.notices.error("Failed to delete comment")
            return False
        self.comments = [item for item in self.comments if item.id != comment_id]
        self.ctx.notices.success("Comment deleted")
        return True

    async def history(self, comment_id: int) -> list[CommentRevision]:
        return await self.ctx.comments.history(comment_id)


class ArticleDetailView(View):
    name = "article"

    def __init__(self, ctx: "AppContext", publication_id: int):
        super().__init__(ctx)
        self.publication_id = publication_id
        self.publication: Optional[Publication] = None
        self.confirming_claim = False
        self.comments = CommentThread(ctx, publication_id)
        self.workflow = workflow_for(ctx, loader=self._reload)

    async def _reload(self) -> list[Publication]:
        publication = await self.ctx.publications.get(self.publication_id)
        if not self.discard("article"):
            self.publication = publication
        return [publication]

    async def load(self) -> Optional[Publication]:
        self.loading = True
        try:
            await self._reload()
        except (ApiError, TransportError) as exc:
            logger.error("article_load_failed", publication_id=self.publication_id, error=str(exc))
            self.error = "Article not found."
        finally:
            self.loading = False
        if self.publication is not None:
            await self.comments.load()
        return self.publication

    @property
    def actions(self) -> frozenset[PublicationAction]:
        if self.publication is None:
            return frozenset()
        return self.workflow.actions_for(self.publication)

    @property
    def can_claim(self) -> bool:
        return PublicationAction.CLAIM_AUTHORSHIP in self.actions

    async def perform(self, action: PublicationAction) -> bool:
        if self.publication is None:
            return False
        return await self.workflow.perform(self.publication, action)

    def request_claim(self) -> bool:
        self.confirming_claim = self.can_claim
        return self.confirming_claim

    def cancel_claim(self) -> None:
        self.confirming_claim = False

    async def confirm_claim(self) -> Optional[ClaimOutcome]:
        if not self.confirming_claim or self.publication is None:
            return None
        self.confirming_claim = False
        return await self.workflow.claim_authorship(self.publication)


class SearchView(View):
    name = "search"

    def __init__(self, ctx: "AppContext"):
        super().__init__(ctx)
        self.query = ""
        self.results: list[Publication] = []

    async def search(self, query: str) -> list[Publication]:
        self.query = (query or "").strip()
        if not self.query:
            self.results = []
            return self.results
        self.loading = True
        try:
            results = await self.ctx.publications.search(self.query)
        except (ApiError, TransportError) as exc:
            logger.error("search_failed", query=self.query, error=str(exc))
            self.error = "Search failed."
            return self.results
        finally:
            self.loading = False
        if not self.discard("search"):
            self.results = public_only(results)
        return self.results


class AboutView(View):
    name = "about"

    def __init__(self, ctx: "AppContext"):
        super().__init__(ctx)
        self.content: Optional[AboutContent] = None

    async def _fetch(self) -> AboutContent:
        members, photo, intro = await asyncio.gather(
            self.ctx.users.members(),
            self.ctx.site.team_photo(),
            self.ctx.site.team_intro(),
        )
        return AboutContent(members=members, photo=photo, intro=intro)

    async def load(self) -> Optional[AboutContent]:
        try:
            content = await self.ctx.cache.get_or_load(CacheKey.ABOUT, self._fetch)
        except (ApiError, TransportError) as exc:
            logger.error("about_load_failed", error=str(exc))
            self.error = LOAD_FAILED
            return self.content
        if not self.discard("about"):
            self.content = content
        return self.content


class ContactView(View):
    name = "contact"

    def __init__(self, ctx: "AppContext"):
        super().__init__(ctx)
        self.field_errors: dict[str, str] = {}
        self.sent = False

    async def submit(self, fields: dict[str, Any]) -> bool:
        self.sent = False
        self.field_errors = validate_contact_form(fields)
        if self.field_errors:
            return False
        payload = {"email": str(fields["email"]).strip(), "message": str(fields["message"]).strip()}
        self.loading = True
        try:
            await self.ctx.site.submit_contact(payload)
        except ValidationFailed as exc:
            self.field_errors = dict(exc.field_errors)
            return False
        except (ApiError, TransportError) as exc:
            logger.error("contact_submit_failed", error=str(exc))
            self.ctx.notices.error()
            return False
        finally:
            self.loading = False
        self.sent = True
        self.ctx.notices.success(CONTACT_SENT)
        return True


class PrintArchiveView(View):
    name = "print_archive"

    def __init__(self, ctx: "AppContext", media_type: Optional[PrintMediaType] = None):
        super().__init__(ctx)
        self.media_type = media_type
        self.items: list[PrintMedia] = []
        self.workflow = workflow_for(ctx)

    @property
    def cache_key(self) -> str:
        if self.media_type is None:
            return CacheKey.PRINT_MEDIA
        return CacheKey.print_media_type(self.media_type)

    async def load(self) -> list[PrintMedia]:
        try:
            items = await self.ctx.cache.get_or_load(
                self.cache_key,
                lambda: self.ctx.print_media.list(self.media_type),
            )
        except (ApiError, TransportError) as exc:
            logger.error("print_archive_load_failed", media_type=self.cache_key, error=str(exc))
            self.error = LOAD_FAILED
            return self.items
        if not self.discard("print_archive"):
            self.items = items
        return self.items

    async def open_reader(self, media: PrintMedia) -> tuple[PrintMediaViewer, PypdfRenderer]:
        payload = await self.ctx.print_media.fetch_document(media)
        renderer = PypdfRenderer(payload)
        viewer = PrintMediaViewer(settings=self.ctx.settings)
        await open_document(viewer, renderer)
        return viewer, renderer

    def download(self, media: PrintMedia) -> str:
        return self.ctx.print_media.open_download(media.id)

    async def claim(self, media: PrintMedia) -> ClaimOutcome:
        return await self.workflow.claim_authorship(media)


class ProfileView(View):
    name = "profile"

    def __init__(self, ctx: "AppContext", user_id: Optional[int] = None):
        super().__init__(ctx)
        self.user_id = user_id
        self.profile: Optional[ProfilePayload] = None
        self.field_errors: dict[str, str] = {}
        self.workflow = workflow_for(ctx, loader=self._articles)
        self.add_poller(ctx.settings.profile_poll_seconds, self.refresh)

    @property
    def is_own_profile(self) -> bool:
        if not self.ctx.session.is_authenticated:
            return False
        return self.user_id is None or self.user_id == self.ctx.session.capabilities.user_id

    async def _articles(self) -> list[Publication]:
        await self.refresh()
        return self.profile.articles if self.profile else []

    async def load(self) -> Optional[ProfilePayload]:
        key = CacheKey.profile(self.user_id)
        try:
            profile = await self.ctx.cache.get_or_load(key, lambda: self.ctx.users.profile(self.user_id))
        except (ApiError, TransportError) as exc:
            logger.error("profile_load_failed", user_id=self.user_id, error=str(exc))
            self.error = "Profile not found."
            return self.profile
        if not self.discard("profile"):
            self.profile = profile
            self.workflow.items = list(profile.articles)
        return self.profile

    async def refresh(self) -> None:
        profile = await self.ctx.users.profile(self.user_id)
        if self.discard("profile"):
            return
        self.ctx.cache.put(CacheKey.profile(self.user_id), profile)
        self.profile = profile
        self.workflow.items = list(profile.articles)

    async def submit_publication(self, fields: dict[str, Any], image: FileField | None = None) -> Optional[Publication]:
        """Create a draft (or submit straight away when ``status`` says so) from the profile page."""
        if not self.is_own_profile:
            raise FormInvalid({"form": "You can only post from your own profile."})
        if "writer_ids" not in fields:
            fields = {**fields, "writer_ids": [self.ctx.session.capabilities.user_id]}
        self.field_errors = validate_publication_form(fields)
        if self.field_errors:
            return None
        payload = {**fields, "status": fields.get("status") or PublicationStatus.DRAFT.value}
        try:
            publication = await self.ctx.publications.create(payload, image=image)
        except ValidationFailed as exc:
            self.field_errors = dict(exc.field_errors)
            return None
        except (ApiError, TransportError) as exc:
            logger.error("profile_publication_create_failed", error=str(exc))
            self.ctx.notices.error()
            return None
        self.ctx.notices.success("Publication created successfully")
        await self.refresh()
        return publication
