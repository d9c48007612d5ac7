"""
The Hillside Echo Client - User Service
=======================================
Account administration, registration approval and public profiles.
"""

from __future__ import annotations

from typing import Any, Optional

from hillside.api.http import HttpClient
from hillside.core.logging import get_logger
from hillside.models import AccountStatus
from hillside.schemas import ProfilePayload, User

logger = get_logger("user_service")


def parse_users(payload: Any) -> list[User]:
    if isinstance(payload, dict):
        payload = payload.get("data", [])
    return [User.model_validate(item) for item in payload or []]


class UserService:
    def __init__(self, http: HttpClient):
        self.http = http

    async def list(self) -> list[User]:
        return parse_users(await self.http.get("/users"))

    async def pending(self) -> list[User]:
        return [user for user in await self.list() if user.status == AccountStatus.pending]

    async def search(self, query: str) -> list[User]:
        """Name lookup (id and name only, at most ten) used by writer pickers."""
        query = (query or "").strip()
        if not query:
            return []
        return parse_users(await self.http.get("/users/search", params={"query": query}))

    async def members(self) -> list[User]:
        return parse_users(await self.http.get("/members"))

    async def create(self, fields: dict[str, Any]) -> User:
        user = User.model_validate(await self.http.post("/users", json=fields))
        logger.info("user_created", user_id=user.id, role=user.role.value)
        return user

    async def update(self, user_id: int, fields: dict[str, Any]) -> User:
        payload = {key: value for key, value in fields.items() if value not in (None, "")}
        return User.model_validate(await self.http.put(f"/users/{user_id}", json=payload))

    async def delete(self, user_id: int) -> None:
        await self.http.delete(f"/users/{user_id}")
        logger.info("user_deleted", user_id=user_id)

    async def approve(self, user_id: int) -> Any:
        result = await self.http.put(f"/users/{user_id}/approve")
        logger.info("user_approved", user_id=user_id)
        return result

    async def profile(self, user_id: Optional[int] = None) -> ProfilePayload:
        path = f"/profile/{user_id}" if user_id is not None else "/profile"
        return ProfilePayload.model_validate(await self.http.get(path))
