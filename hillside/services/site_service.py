"""
The Hillside Echo Client - Site Settings & Inbox Service
========================================================
Team photo/intro for the About page and the contact-form inbox.
"""

from __future__ import annotations

from typing import Any

from hillside.api.http import FileField, HttpClient
from hillside.core.logging import get_logger
from hillside.schemas import ContactSubmission, TeamIntro, TeamPhoto

logger = get_logger("site_service")


class SiteService:
    def __init__(self, http: HttpClient):
        self.http = http

    async def team_photo(self) -> TeamPhoto:
        return TeamPhoto.model_validate(await self.http.get("/site-settings/team-photo") or {})

    async def team_intro(self) -> TeamIntro:
        return TeamIntro.model_validate(await self.http.get("/site-settings/team-intro") or {})

    async def upload_team_photo(self, photo: FileField) -> TeamPhoto:
        payload = await self.http.post("/admin/site-settings/team-photo", files={"photo": photo})
        return TeamPhoto.model_validate(payload or {})

    async def update_team_intro(self, text: str) -> Any:
        return await self.http.post("/admin/site-settings/team-intro", json={"text": text})

    async def submit_contact(self, fields: dict[str, Any]) -> Any:
        return await self.http.post("/contact-us", json=fields)

    async def contact_submissions(self) -> list[ContactSubmission]:
        payload = await self.http.get("/admin/contact-submissions")
        if isinstance(payload, dict):
            payload = payload.get("data", [])
        return [ContactSubmission.model_validate(item) for item in payload or []]

    async def mark_read(self, submission_id: int) -> Any:
        return await self.http.put(f"/admin/contact-submissions/{submission_id}/read")

    async def delete_submission(self, submission_id: int) -> None:
        await self.http.delete(f"/admin/contact-submissions/{submission_id}")
        logger.info("contact_submission_deleted", submission_id=submission_id)

    async def reply(self, submission_id: int, message: str) -> Any:
        return await self.http.post(
            f"/admin/contact-submissions/{submission_id}/reply",
            json={"message": message},
        )

    async def unread_count(self) -> int:
        payload = await self.http.get("/admin/inquiries/unread-count") or {}
        if isinstance(payload, dict):
            return int(payload.get("count") or 0)
        return int(payload or 0)
