import pytest

from hillside.models import Category, PrintMediaType
from hillside.services.cache_service import CacheKey, ResponseCache


@pytest.mark.asyncio
async def test_get_or_load_only_loads_once() -> None:
    cache = ResponseCache()
    loads: list[int] = []

    async def loader() -> list[str]:
        loads.append(1)
        return ["story"]

    first = await cache.get_or_load(CacheKey.category(Category.SPORTS), loader)
    second = await cache.get_or_load(CacheKey.category(Category.SPORTS), loader)

    assert first is second
    assert loads == [1]


def test_last_write_wins_and_clear_empties() -> None:
    cache = ResponseCache()
    cache.put(CacheKey.ABOUT, "old")
    cache.put(CacheKey.ABOUT, "new")

    assert cache.get(CacheKey.ABOUT) == "new"
    assert CacheKey.print_media_type(PrintMediaType.FOLIO) == "print_media:folio"
    assert CacheKey.profile(None) == "profile:me"

    cache.clear()
    assert len(cache) == 0
    assert CacheKey.ABOUT not in cache
