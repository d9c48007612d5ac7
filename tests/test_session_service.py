from __future__ import annotations

import pytest

from hillside.core.errors import FormInvalid, SystemLocked
from hillside.services.cache_service import CacheKey
from tests.conftest import user_payload


@pytest.mark.asyncio
async def test_check_auth_unauthenticated_leaves_guest(ctx, backend) -> None:
    backend.on("GET", "/api/me", 401, json_body={"message": "Unauthenticated."})

    assert await ctx.session.check_auth() is None
    assert ctx.session.is_authenticated is False
    assert ctx.session.is_loading is False


@pytest.mark.asyncio
async def test_check_auth_fails_closed_on_server_error(ctx, backend) -> None:
    backend.on("GET", "/api/me", json_body={"user": user_payload(3)})
    await ctx.session.check_auth()
    backend.on("GET", "/api/me", 500, json_body={"message": "down"})

    await ctx.session.check_auth()

    assert ctx.session.user is None
    assert ctx.session.capabilities.is_authenticated is False


@pytest.mark.asyncio
async def test_capabilities_follow_position(ctx, backend) -> None:
    backend.on("GET", "/api/me", json_body={"user": user_payload(4, position="Editor-in-Chief")})

    await ctx.session.check_auth()

    assert ctx.session.capabilities.is_editor_in_chief is True
    assert ctx.session.capabilities.can_review is True
    assert ctx.session.is_admin is False


@pytest.mark.asyncio
async def test_logout_always_clears_locally(ctx, backend) -> None:
    visited: list[str] = []
    ctx.session.navigate = visited.append
    backend.on("GET", "/api/me", json_body={"user": user_payload(5)})
    backend.on("POST", "/api/logout", 500, json_body={"message": "fail"})
    await ctx.session.check_auth()
    ctx.cache.put(CacheKey.HOME, ["cached"])

    await ctx.session.logout()

    assert ctx.session.user is None
    assert len(ctx.cache) == 0
    assert visited == ["/"]
    assert len(backend.calls_to("POST", "/api/logout")) == 1


@pytest.mark.asyncio
async def test_login_refused_for_non_admin_during_lockdown(ctx, backend) -> None:
    backend.on("GET", "/sanctum/csrf-cookie", 204)
    backend.on("POST", "/api/login", json_body={"message": "ok"})
    backend.on("GET", "/api/me", json_body={"user": user_payload(6)})
    backend.on("GET", "/api/analytics/system-status", json_body={"locked": True})
    backend.on("POST", "/api/logout", json_body={"message": "bye"})

    with pytest.raises(SystemLocked) as exc_info:
        await ctx.session.login("writer@hillside.test", "secret123")

    assert "Only administrators can log in" in exc_info.value.message
    assert ctx.session.is_authenticated is False
    assert backend.calls[0].url.path == "/sanctum/csrf-cookie"
    assert len(backend.calls_to("POST", "/api/logout")) == 1


@pytest.mark.asyncio
async def test_admin_can_log_in_during_lockdown(ctx, backend) -> None:
    backend.on("GET", "/sanctum/csrf-cookie", 204)
    backend.on("POST", "/api/login", json_body={"message": "ok"})
    backend.on("GET", "/api/me", json_body={"user": user_payload(1, role="admin", position="")})
    backend.on("GET", "/api/analytics/system-status", json_body={"locked": True})

    user = await ctx.session.login("admin@hillside.test", "secret123")

    assert user.id == 1
    assert ctx.session.is_admin is True
    assert backend.calls_to("POST", "/api/logout") == []


@pytest.mark.asyncio
async def test_login_validates_before_any_request(ctx, backend) -> None:
    with pytest.raises(FormInvalid) as exc_info:
        await ctx.session.login("", "")

    assert set(exc_info.value.field_errors) == {"email", "password"}
    assert backend.calls == []


@pytest.mark.asyncio
async def test_expired_session_drops_cached_profile_before_next_sign_in(ctx, backend) -> None:
    backend.on("GET", "/api/me", json_body={"user": user_payload(2)})
    await ctx.session.check_auth()
    ctx.cache.put(CacheKey.profile(None), "profile of user 2")
    backend.on("GET", "/api/me", 401, json_body={"message": "Unauthenticated."})

    await ctx.session.check_auth()

    assert ctx.session.user is None
    assert CacheKey.profile(None) not in ctx.cache


@pytest.mark.asyncio
async def test_switching_accounts_without_logout_clears_cache(ctx, backend) -> None:
    backend.on("GET", "/api/me", json_body={"user": user_payload(2)})
    await ctx.session.check_auth()
    ctx.cache.put(CacheKey.profile(None), "profile of user 2")
    backend.on("GET", "/api/me", json_body={"user": user_payload(3)})

    await ctx.session.check_auth()

    assert ctx.session.user.id == 3
    assert len(ctx.cache) == 0
