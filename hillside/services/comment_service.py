"""
The Hillside Echo Client - Comment Service
==========================================
Reader discussion under an article. Every route requires a signed-in user;
edits keep the previous body as a revision on the server.
"""

from __future__ import annotations

from typing import Any

from hillside.api.http import HttpClient
from hillside.core.logging import get_logger
from hillside.schemas import Comment, CommentRevision

logger = get_logger("comment_service")


def parse_comments(payload: Any) -> list[Comment]:
    if isinstance(payload, dict):
        payload = payload.get("data", [])
    return [Comment.model_validate(item) for item in payload or []]


class CommentService:
    def __init__(self, http: HttpClient):
        self.http = http

    async def list(self, publication_id: int) -> list[Comment]:
        return parse_comments(await self.http.get(f"/publications/{publication_id}/comments"))

    async def post(self, publication_id: int, body: str) -> Comment:
        comment = Comment.model_validate(
            await self.http.post(f"/publications/{publication_id}/comments", json={"body": body})
        )
        logger.info("comment_posted", publication_id=publication_id, comment_id=comment.id)
        return comment

    async def update(self, comment_id: int, body: str) -> Comment:
        return Comment.model_validate(await self.http.put(f"/comments/{comment_id}", json={"body": body}))

    async def delete(self, comment_id: int) -> None:
        await self.http.delete(f"/comments/{comment_id}")
        logger.info("comment_deleted", comment_id=comment_id)

    async def history(self, comment_id: int) -> list[CommentRevision]:
        payload = await self.http.get(f"/comments/{comment_id}/history")
        return [CommentRevision.model_validate(item) for item in payload or []]
