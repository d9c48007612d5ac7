from __future__ import annotations

import pytest

from hillside.schemas import Comment
from hillside.services.notification_service import NoticeLevel
from hillside.views import ArticleDetailView, CommentThread
from tests.conftest import publication_payload, user_payload


def comment_payload(comment_id: int, author_id: int = 2, body: str = "Nice piece", **extra) -> dict:
    return {
        "id": comment_id,
        "body": body,
        "user": {"id": author_id, "name": f"User {author_id}"},
        "created_at": "2024-05-01T08:00:00Z",
        "is_edited": False,
        **extra,
    }


def _comments(*ids: int) -> list[Comment]:
    # Comment 1 belongs to user 2, the rest to user 9.
    return [Comment.model_validate(comment_payload(i, 2 if i == 1 else 9)) for i in ids]


async def _sign_in(ctx, backend, **user) -> None:
    backend.on("GET", "/api/me", json_body={"user": user_payload(**user)})
    await ctx.session.check_auth()
    backend.calls.clear()


@pytest.mark.asyncio
async def test_guests_see_no_comments_and_make_no_request(ctx, backend) -> None:
    backend.on("GET", "/api/me", 401, json_body={"message": "Unauthenticated."})
    backend.on("GET", "/api/publications/10", json_body=publication_payload(10))
    await ctx.session.check_auth()
    backend.calls.clear()

    view = ArticleDetailView(ctx, 10)
    await view.load()

    assert view.comments.visible is False
    assert view.comments.comments == []
    assert backend.calls_to("GET", "/api/publications/10/comments") == []


@pytest.mark.asyncio
async def test_article_loads_thread_for_signed_in_readers(ctx, backend) -> None:
    await _sign_in(ctx, backend, user_id=9)
    backend.on("GET", "/api/publications/10", json_body=publication_payload(10))
    backend.on("GET", "/api/publications/10/comments", json_body={"data": [comment_payload(1), comment_payload(2, 9)]})

    view = ArticleDetailView(ctx, 10)
    await view.load()

    assert [comment.id for comment in view.comments.comments] == [1, 2]
    assert [view.comments.can_modify(comment) for comment in view.comments.comments] == [False, True]


@pytest.mark.asyncio
async def test_post_prepends_and_blank_body_is_ignored(ctx, backend) -> None:
    await _sign_in(ctx, backend, user_id=9)
    backend.on("POST", "/api/publications/10/comments", 201, json_body=comment_payload(5, 9, "First!"))
    thread = CommentThread(ctx, 10)
    thread.comments = []

    assert await thread.post("   ") is None
    assert backend.calls == []

    posted = await thread.post(" First! ")

    assert posted.id == 5
    assert backend.json_of(backend.calls[0]) == {"body": "First!"}
    assert thread.comments[0].id == 5
    assert ctx.notices.last.message == "Comment posted!"


@pytest.mark.asyncio
async def test_failed_post_notifies(ctx, backend) -> None:
    await _sign_in(ctx, backend, user_id=9)
    backend.on("POST", "/api/publications/10/comments", 500, json_body={"message": "down"})

    assert await CommentThread(ctx, 10).post("Hello") is None
    assert ctx.notices.last.level == NoticeLevel.ERROR
    assert ctx.notices.last.message == "Failed to post comment."


@pytest.mark.asyncio
async def test_edit_replaces_comment_with_server_copy(ctx, backend) -> None:
    await _sign_in(ctx, backend, user_id=9)
    backend.on("PUT", "/api/comments/2", json_body=comment_payload(2, 9, "Fixed typo", is_edited=True))
    thread = CommentThread(ctx, 10)
    thread.comments = _comments(1, 2)

    assert thread.start_edit(1) is False
    assert thread.start_edit(2) is True
    assert thread.draft == "Nice piece"

    updated = await thread.save_edit("Fixed typo")

    assert backend.json_of(backend.calls[0]) == {"body": "Fixed typo"}
    assert updated.is_edited is True
    assert thread.comments[1].body == "Fixed typo"
    assert thread.editing_id is None
    assert ctx.notices.last.message == "Comment updated"


@pytest.mark.asyncio
async def test_delete_waits_for_confirmation(ctx, backend) -> None:
    await _sign_in(ctx, backend, user_id=9)
    backend.on("DELETE", "/api/comments/2", 204)
    thread = CommentThread(ctx, 10)
    thread.comments = _comments(1, 2)

    assert thread.request_delete(1) is False
    thread.request_delete(2)
    thread.cancel_delete()
    assert await thread.confirm_delete() is False
    assert backend.calls == []

    thread.request_delete(2)
    assert await thread.confirm_delete() is True

    assert len(backend.calls_to("DELETE", "/api/comments/2")) == 1
    assert [comment.id for comment in thread.comments] == [1]
    assert ctx.notices.last.message == "Comment deleted"


@pytest.mark.asyncio
async def test_admin_may_remove_anyones_comment(ctx, backend) -> None:
    await _sign_in(ctx, backend, user_id=1, role="admin")
    backend.on("DELETE", "/api/comments/1", 500, json_body={"message": "down"})
    thread = CommentThread(ctx, 10)
    thread.comments = _comments(1, 2)

    assert thread.request_delete(1) is True
    assert await thread.confirm_delete() is False
    assert [comment.id for comment in thread.comments] == [1, 2]
    assert ctx.notices.last.message == "Failed to delete comment"


@pytest.mark.asyncio
async def test_history_lists_previous_bodies(ctx, backend) -> None:
    await _sign_in(ctx, backend, user_id=9)
    backend.on(
        "GET",
        "/api/comments/2/history",
        json_body=[{"id": 7, "comment_id": 2, "body": "Nice peice", "created_at": "2024-05-01T08:00:00Z"}],
    )

    revisions = await CommentThread(ctx, 10).history(2)

    assert [revision.body for revision in revisions] == ["Nice peice"]

