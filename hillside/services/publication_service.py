"""
The Hillside Echo Client - Publication Service
==============================================
Endpoint wrappers for articles: listings, CRUD, workflow transitions and
authorship claims.
"""

from __future__ import annotations

from typing import Any, Optional

from hillside.api.http import FileField, HttpClient, with_method_override
from hillside.core.logging import get_logger
from hillside.models import Category, PublicationStatus
from hillside.schemas import DashboardStats, Page, Publication

logger = get_logger("publication_service")

REVIEW_DECISIONS = frozenset({PublicationStatus.APPROVED, PublicationStatus.REJECTED, PublicationStatus.RETURNED})


def parse_publications(payload: Any) -> list[Publication]:
    """Accept both bare lists and paginator envelopes."""
    if isinstance(payload, dict):
        payload = payload.get("data", [])
    return [Publication.model_validate(item) for item in payload or []]


class PublicationService:
    def __init__(self, http: HttpClient):
        self.http = http

    async def list(self, page: int = 1, per_page: Optional[int] = None) -> Page[Publication]:
        payload = await self.http.get(
            "/publications",
            params={"page": page, "per_page": per_page or self.http.settings.default_per_page},
        )
        if isinstance(payload, list):
            return Page[Publication](data=parse_publications(payload), total=len(payload), per_page=len(payload) or 1)
        return Page[Publication].model_validate(payload)

    async def list_all(self, page: int = 1, per_page: Optional[int] = None) -> Page[Publication]:
        payload = await self.http.get(
            "/admin/all-publications",
            params={"page": page, "per_page": per_page or self.http.settings.default_per_page},
        )
        return Page[Publication].model_validate(payload)

    async def by_category(self, category: Category) -> list[Publication]:
        payload = await self.http.get(f"/publications/category/{category.value}")
        return parse_publications(payload)

    async def search(self, query: str) -> list[Publication]:
        query = (query or "").strip()
        if not query:
            return []
        payload = await self.http.get("/publications/search", params={"q": query})
        return parse_publications(payload)

    async def get(self, publication_id: int) -> Publication:
        return Publication.model_validate(await self.http.get(f"/publications/{publication_id}"))

    async def create(self, fields: dict[str, Any], image: FileField | None = None) -> Publication:
        files = {"image": image} if image else None
        payload = await self.http.post("/publications", data=fields, files=files)
        publication = Publication.model_validate(payload)
        logger.info("publication_created", publication_id=publication.id, status=publication.status.value)
        return publication

    async def update(self, publication_id: int, fields: dict[str, Any], image: FileField | None = None) -> Publication:
        files = {"image": image} if image else None
        payload = await self.http.post(
            f"/publications/{publication_id}",
            data=with_method_override(fields, "PUT"),
            files=files,
        )
        return Publication.model_validate(payload)

    async def delete(self, publication_id: int) -> None:
        await self.http.delete(f"/publications/{publication_id}")
        logger.info("publication_deleted", publication_id=publication_id)

    async def change_status(self, publication_id: int, command: str) -> Any:
        """Workflow step on the status endpoint: submit, cancel, review, approve, publish or return."""
        result = await self.http.post(f"/publications/{publication_id}/status", json={"action": command})
        logger.info("publication_status_changed", publication_id=publication_id, command=command)
        return result

    async def review(self, publication_id: int, decision: PublicationStatus) -> Any:
        if decision not in REVIEW_DECISIONS:
            raise ValueError(f"Unsupported review decision: {decision.value}")
        return await self.http.put(f"/publications/{publication_id}/review", json={"status": decision.value})

    async def request_credit(self, publication_id: int) -> Any:
        return await self.http.post(f"/publications/{publication_id}/request-credit")

    async def dashboard_stats(self) -> DashboardStats:
        return DashboardStats.model_validate(await self.http.get("/publications/dashboard/stats") or {})
