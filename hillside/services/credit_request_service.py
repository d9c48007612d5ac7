"""
The Hillside Echo Client - Credit Request Review
================================================
Administrator queue of pending authorship claims.
"""

from __future__ import annotations

from typing import Any, Literal

from hillside.api.http import HttpClient
from hillside.core.errors import ApiError, TransportError
from hillside.core.logging import get_logger
from hillside.models import RequestableKind
from hillside.schemas import CreditRequest
from hillside.services.notification_service import NotificationCenter

logger = get_logger("credit_request_service")

Decision = Literal["approve", "reject"]


def parse_credit_requests(payload: Any) -> list[CreditRequest]:
    if isinstance(payload, dict):
        payload = payload.get("data", [])
    return [CreditRequest.model_validate(item) for item in payload or []]


def claim_text(request: CreditRequest) -> str:
    if request.kind == RequestableKind.PRINT_MEDIA:
        return "claims ownership of:"
    return "claims to have written:"


def item_label(request: CreditRequest) -> str:
    if request.requestable is None:
        return "[Item Deleted]"
    return f'"{request.requestable.title}"'


class CreditRequestQueue:
    def __init__(self, http: HttpClient, notices: NotificationCenter):
        self.http = http
        self.notices = notices
        self.pending: list[CreditRequest] = []
        self._in_flight: set[int] = set()

    def is_busy(self, request_id: int) -> bool:
        return request_id in self._in_flight

    async def refresh(self) -> list[CreditRequest]:
        self.pending = parse_credit_requests(await self.http.get("/admin/credit-requests"))
        return self.pending

    async def approve(self, request_id: int) -> bool:
        return await self._resolve(request_id, "approve")

    async def reject(self, request_id: int) -> bool:
        return await self._resolve(request_id, "reject")

    async def _resolve(self, request_id: int, decision: Decision) -> bool:
        if self.is_busy(request_id):
            return False

        self._in_flight.add(request_id)
        try:
            await self.http.put(f"/admin/credit-requests/{request_id}/{decision}")
        except (ApiError, TransportError) as exc:
            logger.warning("credit_request_resolve_failed", request_id=request_id, decision=decision, error=str(exc))
            self.notices.error("Action failed.")
            return False
        finally:
            self._in_flight.discard(request_id)

        # The writer set is not touched locally; it shows up on the next fetch.
        self.pending = [item for item in self.pending if item.id != request_id]
        self.notices.success(f"Request {decision}d successfully.")
        logger.info(f"credit_request_{decision}d", request_id=request_id)
        return True
