"""
The Hillside Echo Client - Session Service
==========================================
Who is logged in, what they may do, and the login/logout round trips.
"""

from __future__ import annotations

from typing import Callable, Optional

from pydantic import ValidationError

from hillside.api.http import HttpClient
from hillside.core.errors import (
    ApiError,
    AuthenticationRequired,
    FormInvalid,
    SystemLocked,
    TransportError,
)
from hillside.core.logging import get_logger
from hillside.domain.publications import GUEST, Capabilities, derive_capabilities
from hillside.forms.validation import validate_login
from hillside.models import UserRole
from hillside.schemas import SystemStatus, User
from hillside.services.cache_service import ResponseCache

logger = get_logger("session_service")

Navigate = Callable[[str], None]


def _noop_navigate(_path: str) -> None:
    return None


class Session:
    """Process-wide identity, owned by the app context and passed to views."""

    def __init__(
        self,
        http: HttpClient,
        cache: ResponseCache,
        navigate: Optional[Navigate] = None,
    ):
        self.http = http
        self.cache = cache
        self.navigate = navigate or _noop_navigate
        self.user: Optional[User] = None
        self.capabilities: Capabilities = GUEST
        self.is_loading = True

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_admin(self) -> bool:
        return self.capabilities.is_admin

    def _set_user(self, user: Optional[User]) -> None:
        # Cached payloads such as profile:me belong to the identity that loaded them.
        if self.user is not None and (user is None or user.id != self.user.id):
            logger.info("session_identity_changed", previous_user_id=self.user.id)
            self.cache.clear()
        self.user = user
        self.capabilities = derive_capabilities(user)

    def clear(self) -> None:
        self._set_user(None)

    async def check_auth(self) -> Optional[User]:
        """Fetch the current user; any failure leaves the session logged out."""
        try:
            payload = await self.http.get("/me")
            raw = payload.get("user", payload) if isinstance(payload, dict) else payload
            user = User.model_validate(raw)
        except AuthenticationRequired:
            self.clear()
            return None
        except (ApiError, TransportError, ValidationError) as exc:
            logger.warning("check_auth_failed", error=str(exc))
            self.clear()
            return None
        finally:
            self.is_loading = False

        self._set_user(user)
        logger.info("session_loaded", user_id=user.id, role=user.role.value)
        return user

    async def system_status(self) -> SystemStatus:
        return SystemStatus.model_validate(await self.http.get("/analytics/system-status") or {})

    async def login(self, email: str, password: str) -> User:
        errors = validate_login(email, password)
        if errors:
            raise FormInvalid(errors)

        await self.http.ensure_csrf_cookie()
        await self.http.post("/login", json={"email": email.strip(), "password": password})

        user = await self.check_auth()
        if user is None:
            raise AuthenticationRequired(401, "Login failed. Please check your credentials.")

        status = await self.system_status()
        if status.locked and user.role != UserRole.admin:
            logger.warning("login_refused_lockdown", user_id=user.id)
            await self._notify_logout()
            await self.check_auth()
            self.clear()
            raise SystemLocked()

        return user

    async def _notify_logout(self) -> None:
        try:
            await self.http.post("/logout")
        except (ApiError, TransportError) as exc:
            logger.info("logout_request_failed", error=str(exc))

    async def logout(self) -> None:
        """Best-effort server logout; locally it always succeeds."""
        try:
            await self._notify_logout()
        finally:
            self.clear()
            self.cache.clear()
            self.navigate("/")
        logger.info("session_cleared")
