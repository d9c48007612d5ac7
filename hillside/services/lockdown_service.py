"""
The Hillside Echo Client - System Lockdown Control
==================================================
Admin toggle for maintenance mode. Each direction needs an explicit
confirmation before the request is sent; the audit entry is written by the
backend.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from hillside.api.http import HttpClient
from hillside.core.errors import ApiError, TransportError
from hillside.core.logging import get_logger
from hillside.schemas import SystemStatus
from hillside.services.notification_service import NotificationCenter

logger = get_logger("lockdown_service")


@dataclass(frozen=True, slots=True)
class LockdownConfirmation:
    locking: bool
    title: str
    message: str
    confirm_label: str
    cancel_label: str = "Cancel"
    footnote: str = "This action is logged in the Audit Trail for security purposes."


def confirmation_for(currently_locked: bool) -> LockdownConfirmation:
    if currently_locked:
        return LockdownConfirmation(
            locking=False,
            title="Restore Access?",
            message="You are about to unlock the system. All user access will be restored immediately.",
            confirm_label="Confirm Unlock",
        )
    return LockdownConfirmation(
        locking=True,
        title="Enable Maintenance?",
        message=(
            "You are about to lock the system. Regular users will be blocked from "
            "logging in or posting content immediately."
        ),
        confirm_label="Confirm Lockdown",
    )


class LockdownControl:
    def __init__(self, http: HttpClient, notices: NotificationCenter):
        self.http = http
        self.notices = notices
        self.locked = False
        self.loading = True
        self.toggling = False
        self.confirmation: Optional[LockdownConfirmation] = None

    @property
    def badge(self) -> str:
        return "Maintenance" if self.locked else "System Online"

    @property
    def toggle_label(self) -> str:
        return "Turn On" if self.locked else "Turn Off"

    @property
    def access_label(self) -> str:
        return "Public Access Blocked" if self.locked else "Public Access Active"

    @property
    def description(self) -> str:
        if self.locked:
            return "Global lockdown active. Only administrators have access."
        return "All systems operational. Regular user access is enabled."

    async def load(self) -> bool:
        try:
            payload = await self.http.get("/analytics/system-status")
            self.locked = SystemStatus.model_validate(payload or {}).locked
        except (ApiError, TransportError) as exc:
            logger.error("system_status_fetch_failed", error=str(exc))
        finally:
            self.loading = False
        return self.locked

    def request_toggle(self) -> LockdownConfirmation:
        self.confirmation = confirmation_for(self.locked)
        return self.confirmation

    def cancel(self) -> None:
        if self.toggling:
            return
        self.confirmation = None

    async def confirm(self) -> bool:
        if self.confirmation is None or self.toggling:
            return False

        self.toggling = True
        try:
            payload = await self.http.post("/analytics/toggle-status")
        except (ApiError, TransportError) as exc:
            logger.error("system_status_toggle_failed", error=str(exc))
            self.notices.error("Failed to toggle system status.")
            return False
        finally:
            self.toggling = False

        self.locked = SystemStatus.model_validate(payload or {}).locked
        self.confirmation = None
        logger.info("system_status_toggled", locked=self.locked)
        return True
