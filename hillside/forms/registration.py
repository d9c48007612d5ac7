"""Two-step self registration (account details, then school profile)."""

from __future__ import annotations

from typing import Any

from hillside.api.http import HttpClient
from hillside.core.errors import ApiError, TransportError, ValidationFailed
from hillside.core.logging import get_logger
from hillside.forms.validation import validate_registration_step_one, validate_registration_step_two
from hillside.services.notification_service import GENERIC_FAILURE, NotificationCenter

logger = get_logger("forms.registration")

STEP_ONE_FIELDS = frozenset({"email", "name", "password", "password_confirmation"})


class RegistrationFlow:
    def __init__(self, http: HttpClient, notices: NotificationCenter):
        self.http = http
        self.notices = notices
        self.step = 1
        self.data: dict[str, Any] = {"role": "hillsider"}
        self.errors: dict[str, str] = {}
        self.loading = False
        self.completed = False

    def update(self, **fields: Any) -> None:
        self.data.update(fields)
        for name in fields:
            self.errors.pop(name, None)

    def next_step(self) -> bool:
        errors = validate_registration_step_one(self.data)
        if errors:
            self.errors = errors
            return False
        self.errors = {}
        self.step = 2
        return True

    def back(self) -> None:
        self.step = 1

    async def submit(self) -> bool:
        if self.step != 2 and not self.next_step():
            return False

        errors = validate_registration_step_two(self.data)
        if errors:
            self.errors = errors
            return False

        self.loading = True
        try:
            await self.http.post("/register", json=self.data)
        except ValidationFailed as exc:
            self.errors = dict(exc.field_errors)
            if STEP_ONE_FIELDS & self.errors.keys():
                self.step = 1
            return False
        except (ApiError, TransportError) as exc:
            logger.warning("registration_failed", error=str(exc))
            self.notices.error(GENERIC_FAILURE)
            return False
        finally:
            self.loading = False

        self.completed = True
        logger.info("registration_submitted", email=self.data.get("email"))
        return True
