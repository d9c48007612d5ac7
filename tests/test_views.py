from __future__ import annotations

import asyncio

import pytest

from hillside.domain.publications import PublicationAction
from hillside.models import Category
from hillside.schemas import AuditLogEntry, Page, Writer
from hillside.services.notification_service import NoticeLevel
from hillside.services.workflow_service import ClaimOutcome
from hillside.views import (
    AboutView,
    ArticleDetailView,
    ContactView,
    DashboardView,
    FeedbackView,
    HomeView,
    PendingReviewsPanel,
    PrintMediaAdminView,
    ProfileView,
    SearchView,
    SecurityView,
    UsersAdminView,
)
from tests.conftest import publication_payload, user_payload


def _route_home(backend) -> None:
    backend.on(
        "GET",
        "/api/publications",
        json_body={"data": [publication_payload(1), publication_payload(2, status="draft")], "current_page": 1, "last_page": 1},
    )
    for category in Category:
        backend.on("GET", f"/api/publications/category/{category.value}", json_body=[publication_payload(3)])


@pytest.mark.asyncio
async def test_home_loads_in_parallel_then_serves_from_cache(ctx, backend) -> None:
    _route_home(backend)
    view = HomeView(ctx)

    content = await view.load()
    first_round = len(backend.calls)
    await HomeView(ctx).load()

    assert first_round == 1 + len(Category)
    assert len(backend.calls) == first_round
    assert [item.id for item in content.featured] == [1]
    assert content.sections[Category.SPORTS][0].id == 3


@pytest.mark.asyncio
async def test_home_refresh_rewrites_cache(ctx, backend) -> None:
    _route_home(backend)
    view = HomeView(ctx)
    await view.load()
    backend.on("GET", "/api/publications", json_body={"data": [publication_payload(9)]})

    await view.refresh()

    assert [item.id for item in (await HomeView(ctx).load()).featured] == [9]


@pytest.mark.asyncio
async def test_empty_search_makes_no_request(ctx, backend) -> None:
    view = SearchView(ctx)

    assert await view.search("   ") == []
    assert backend.calls == []


@pytest.mark.asyncio
async def test_about_fetches_members_photo_and_intro(ctx, backend) -> None:
    backend.on("GET", "/api/members", json_body=[user_payload(3)])
    backend.on("GET", "/api/site-settings/team-photo", json_body={"url": "http://cdn/team.jpg"})
    backend.on("GET", "/api/site-settings/team-intro", json_body={"text": "We are the Echo."})

    content = await AboutView(ctx).load()

    assert content.intro.text == "We are the Echo."
    assert content.photo.url == "http://cdn/team.jpg"
    assert [member.id for member in content.members] == [3]


@pytest.mark.asyncio
async def test_results_arriving_after_close_are_discarded(ctx, backend) -> None:
    release = asyncio.Event()

    class _AnalyticsStub:
        async def audit_logs(self, period, page=1):
            await release.wait()
            return Page[AuditLogEntry](data=[AuditLogEntry(id=1, action="login")], total=1)

    ctx.analytics = _AnalyticsStub()
    view = SecurityView(ctx)
    pending = asyncio.create_task(view.refresh())
    await asyncio.sleep(0)

    await view.close()
    release.set()
    await pending

    assert view.audit.data == []


@pytest.mark.asyncio
async def test_article_claim_needs_confirmation(ctx, backend) -> None:
    backend.on("GET", "/api/me", json_body={"user": user_payload(9)})
    backend.on("GET", "/api/publications/10", json_body=publication_payload(10, user_id=2, writers=[{"id": 1, "name": "A"}]))
    backend.on("GET", "/api/publications/10/comments", json_body=[])
    backend.on("POST", "/api/publications/10/request-credit", json_body={"message": "sent"})
    await ctx.session.check_auth()
    view = ArticleDetailView(ctx, 10)
    await view.load()

    assert view.can_claim is True
    assert await view.confirm_claim() is None
    view.request_claim()
    view.cancel_claim()
    assert backend.calls_to("POST", "/api/publications/10/request-credit") == []

    view.request_claim()
    assert await view.confirm_claim() == ClaimOutcome.SUBMITTED
    assert len(backend.calls_to("POST", "/api/publications/10/request-credit")) == 1
    assert view.publication.writers == [Writer(id=1, name="A")]
    assert len(backend.calls_to("GET", "/api/publications/10")) == 1
    assert ctx.notices.last.level == NoticeLevel.SUCCESS


@pytest.mark.asyncio
async def test_pending_review_approval_sends_single_review(ctx, backend) -> None:
    backend.on("GET", "/api/me", json_body={"user": user_payload(1, role="admin", position="")})
    backend.on(
        "GET",
        "/api/admin/all-publications",
        json_body={"data": [publication_payload(5, status="pending"), publication_payload(6)], "current_page": 1},
    )
    backend.on("PUT", "/api/publications/5/review", json_body={"status": "published"})
    await ctx.session.check_auth()
    panel = PendingReviewsPanel(ctx)
    await panel.refresh()

    assert [item.id for item in panel.items] == [5]
    confirmation = panel.request(panel.items[0], PublicationAction.APPROVE)
    assert confirmation.title == 'Approve "Story 5"?'
    assert await panel.confirm() is True

    reviews = backend.calls_to("PUT", "/api/publications/5/review")
    assert len(reviews) == 1
    assert backend.json_of(reviews[0]) == {"status": "approved"}


@pytest.mark.asyncio
async def test_dashboard_loads_all_panels(ctx, backend) -> None:
    backend.on("GET", "/api/admin/all-publications", json_body={"data": [publication_payload(5, status="submitted")]})
    backend.on("GET", "/api/publications/dashboard/stats", json_body={"total_publications": 12})
    backend.on("GET", "/api/admin/credit-requests", json_body=[])
    backend.on("GET", "/api/users", json_body=[user_payload(4, status="pending"), user_payload(5)])
    view = DashboardView(ctx)

    await view.load()

    assert view.error is None
    assert [item.id for item in view.reviews.items] == [5]
    assert [user.id for user in view.pending_users.users] == [4]
    assert view.stats.model_extra["total_publications"] == 12
    await view.close()


@pytest.mark.asyncio
async def test_user_form_errors_block_request(ctx, backend) -> None:
    view = UsersAdminView(ctx)

    assert await view.create({"name": "", "email": "bad", "role": "admin"}, confirm_password="") is False
    assert view.field_errors["name"] == "Name is required"
    assert view.field_errors["email"] == "Email is invalid"
    assert backend.calls == []


@pytest.mark.asyncio
async def test_feedback_reply_refreshes_inbox(ctx, backend) -> None:
    backend.on("GET", "/api/admin/contact-submissions", json_body=[{"id": 1, "name": "Ana", "message": "Hi"}])
    backend.on("GET", "/api/admin/inquiries/unread-count", json_body={"count": 1})
    backend.on("POST", "/api/admin/contact-submissions/1/reply", json_body={"message": "sent"})
    view = FeedbackView(ctx)
    await view.load()

    assert view.unread_count == 1
    assert await view.reply(1, "") is False
    assert await view.reply(1, "Thanks!") is True
    assert backend.json_of(backend.calls_to("POST", "/api/admin/contact-submissions/1/reply")[0]) == {"message": "Thanks!"}
    assert ctx.notices.last.message == "Reply sent successfully."


@pytest.mark.asyncio
async def test_print_media_upload_requires_pdf_then_posts_multipart(ctx, backend) -> None:
    backend.on("POST", "/api/print-media", 201, json_body={"id": 4, "title": "Folio", "type": "folio"})
    backend.on("GET", "/api/print-media", json_body=[{"id": 4, "title": "Folio", "type": "folio"}])
    fields = {"title": "Folio", "description": "Annual", "date_published": "2024-06-01", "byline": "Staff", "type": "folio"}
    view = PrintMediaAdminView(ctx)

    assert await view.create(fields, ("issue.docx", b"doc", "application/msword")) is False
    assert view.field_errors == {"file": "Only PDF files are allowed."}
    assert backend.calls == []

    assert await view.create(fields, ("issue.pdf", b"%PDF-1.4", "application/pdf")) is True
    upload = backend.calls_to("POST", "/api/print-media")[0]
    assert upload.headers["content-type"].startswith("multipart/form-data")
    assert [item.id for item in view.items] == [4]


@pytest.mark.asyncio
async def test_contact_form_validates_before_sending(ctx, backend) -> None:
    backend.on("POST", "/api/contact-us", json_body={"message": "Email sent successfully!"})
    view = ContactView(ctx)

    assert await view.submit({"email": "reader", "message": "Hi"}) is False
    assert set(view.field_errors) == {"email", "message"}
    assert backend.calls == []

    assert await view.submit({"email": " reader@hillside.test ", "message": "Loved the folio."}) is True
    assert backend.json_of(backend.calls[0]) == {"email": "reader@hillside.test", "message": "Loved the folio."}
    assert view.sent is True
    assert ctx.notices.last.message == "Email sent successfully!"


@pytest.mark.asyncio
async def test_contact_form_shows_server_field_errors(ctx, backend) -> None:
    backend.on("POST", "/api/contact-us", 422, json_body={"errors": {"email": ["The email field must be a valid email address."]}})
    view = ContactView(ctx)

    assert await view.submit({"email": "reader@hillside.tst", "message": "Hello there"}) is False
    assert view.field_errors == {"email": "The email field must be a valid email address."}
    assert view.sent is False


@pytest.mark.asyncio
async def test_profile_post_credits_the_author_by_default(ctx, backend) -> None:
    backend.on("GET", "/api/me", json_body={"user": user_payload(4)})
    backend.on("POST", "/api/publications", 201, json_body=publication_payload(20, status="draft", user_id=4))
    backend.on("GET", "/api/profile", json_body={"user": user_payload(4), "articles": []})
    await ctx.session.check_auth()
    view = ProfileView(ctx)

    created = await view.submit_publication({"title": "T", "byline": "B", "body": "Body", "category": "local"})

    assert created.id == 20
    sent = backend.calls_to("POST", "/api/publications")[0].content
    assert sent.count(b"writer_ids%5B%5D=4") == 1
    assert b"status=draft" in sent
