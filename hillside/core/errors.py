"""
Client error taxonomy.

Every failed backend call is raised as one of the ApiError subclasses below;
rule violations detected before any request is sent have their own types.
"""

from __future__ import annotations

from typing import Any


class HillsideError(Exception):
    """Base class for every error raised by the client."""


class ApiError(HillsideError):
    def __init__(self, status_code: int, message: str, payload: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.payload = payload

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.status_code}: {self.message}>"


class ValidationFailed(ApiError):
    """422 with a Laravel-style ``errors`` bag."""

    def __init__(self, message: str, payload: Any = None, field_errors: dict[str, str] | None = None):
        super().__init__(422, message, payload)
        self.field_errors = field_errors or {}


class AuthenticationRequired(ApiError):
    pass


class PermissionDenied(ApiError):
    pass


class NotFound(ApiError):
    pass


class Conflict(ApiError):
    pass


class ServerError(ApiError):
    pass


class TransportError(HillsideError):
    """The request never produced a response."""


class ActionNotAllowed(HillsideError):
    def __init__(self, action: str, status: str, reason: str = "action is not available"):
        super().__init__(f"{action} not allowed from {status}: {reason}")
        self.action = action
        self.status = status


class SystemLocked(HillsideError):
    """Login refused because maintenance lockdown is active."""

    def __init__(self, message: str = "System is currently under maintenance. Only administrators can log in."):
        super().__init__(message)
        self.message = message


class FormInvalid(HillsideError):
    def __init__(self, field_errors: dict[str, str]):
        super().__init__(", ".join(f"{k}: {v}" for k, v in field_errors.items()))
        self.field_errors = field_errors


def first_field_errors(errors: Any) -> dict[str, str]:
    """Flatten ``{"field": ["msg", ...]}`` to ``{"field": "msg"}``."""
    if not isinstance(errors, dict):
        return {}
    flat: dict[str, str] = {}
    for field, messages in errors.items():
        if isinstance(messages, (list, tuple)):
            if messages:
                flat[str(field)] = str(messages[0])
        elif messages:
            flat[str(field)] = str(messages)
    return flat


def error_for_status(status_code: int, payload: Any) -> ApiError:
    message = ""
    if isinstance(payload, dict):
        message = str(payload.get("message") or payload.get("error") or "")
    message = message or f"Request failed with status {status_code}"

    if status_code == 422:
        errors = payload.get("errors") if isinstance(payload, dict) else None
        return ValidationFailed(message, payload, first_field_errors(errors))
    if status_code == 401:
        return AuthenticationRequired(status_code, message, payload)
    if status_code == 403:
        return PermissionDenied(status_code, message, payload)
    if status_code == 404:
        return NotFound(status_code, message, payload)
    if status_code == 409:
        return Conflict(status_code, message, payload)
    return ServerError(status_code, message, payload)
