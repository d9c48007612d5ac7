from __future__ import annotations

import pytest

from hillside.services.lockdown_service import LockdownControl


@pytest.mark.asyncio
async def test_cancel_sends_nothing(ctx, backend) -> None:
    control = LockdownControl(ctx.http, ctx.notices)

    confirmation = control.request_toggle()
    control.cancel()

    assert confirmation.title == "Enable Maintenance?"
    assert control.confirmation is None
    assert await control.confirm() is False
    assert backend.calls == []


@pytest.mark.asyncio
async def test_confirmed_lockdown_flips_state_with_one_post(ctx, backend) -> None:
    backend.on("GET", "/api/analytics/system-status", json_body={"locked": False})
    backend.on("POST", "/api/analytics/toggle-status", json_body={"locked": True, "message": "System locked"})
    control = LockdownControl(ctx.http, ctx.notices)
    await control.load()

    assert control.badge == "System Online"
    confirmation = control.request_toggle()
    assert confirmation.confirm_label == "Confirm Lockdown"
    assert await control.confirm() is True

    assert len(backend.calls_to("POST", "/api/analytics/toggle-status")) == 1
    assert control.locked is True
    assert control.badge == "Maintenance"
    assert control.toggle_label == "Turn On"
    assert control.access_label == "Public Access Blocked"
    assert control.request_toggle().title == "Restore Access?"


@pytest.mark.asyncio
async def test_toggle_failure_keeps_state(ctx, backend) -> None:
    backend.on("POST", "/api/analytics/toggle-status", 500, json_body={"message": "down"})
    control = LockdownControl(ctx.http, ctx.notices)
    control.request_toggle()

    assert await control.confirm() is False
    assert control.locked is False
    assert control.confirmation is not None
    assert ctx.notices.last.message == "Failed to toggle system status."


@pytest.mark.asyncio
async def test_unlock_from_maintenance_restores_online_badge(ctx, backend) -> None:
    backend.on("GET", "/api/analytics/system-status", json_body={"locked": True})
    backend.on("POST", "/api/analytics/toggle-status", json_body={"locked": False, "message": "System unlocked"})
    control = LockdownControl(ctx.http, ctx.notices)
    await control.load()

    assert control.toggle_label == "Turn On"
    assert control.request_toggle().confirm_label == "Confirm Unlock"
    assert control.badge == "Maintenance"
    assert await control.confirm() is True

    assert len(backend.calls_to("POST", "/api/analytics/toggle-status")) == 1
    assert control.badge == "System Online"
    assert control.description == "All systems operational. Regular user access is enabled."
