"""
The Hillside Echo Client - Cache Service
========================================
Session-lifetime, in-memory read-through cache for list/detail payloads.

There is no TTL, no size bound and no invalidation hook: a view that mutates
data must refetch and ``put`` again, otherwise stale entries are served until
``clear()`` (logout) or a restart.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional

from hillside.core.logging import get_logger
from hillside.models import Category, PrintMediaType

logger = get_logger("cache_service")


class CacheKey:
    ABOUT = "about"
    HOME = "home"
    PRINT_MEDIA = "print_media"

    @staticmethod
    def category(category: Category) -> str:
        return f"category:{category.value}"

    @staticmethod
    def print_media_type(media_type: PrintMediaType) -> str:
        return f"print_media:{media_type.value}"

    @staticmethod
    def profile(user_id: int | None) -> str:
        return f"profile:{user_id if user_id is not None else 'me'}"


class ResponseCache:
    """Keyed store; last write wins and values are returned as stored."""

    def __init__(self):
        self._entries: dict[str, Any] = {}

    def get(self, key: str) -> Optional[Any]:
        return self._entries.get(key)

    def put(self, key: str, value: Any) -> None:
        self._entries[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    async def get_or_load(self, key: str, loader: Callable[[], Awaitable[Any]]) -> Any:
        cached = self.get(key)
        if cached is not None:
            logger.debug("cache_hit", key=key)
            return cached
        value = await loader()
        self.put(key, value)
        logger.debug("cache_fill", key=key)
        return value

    def clear(self) -> None:
        self._entries.clear()
        logger.info("cache_cleared")
