"""
Client-side form validation.

Each validator returns a ``{field: message}`` mapping; an empty mapping means
the form may be sent. Nothing here touches the network.
"""

from __future__ import annotations

import re
from typing import Any, Mapping

from hillside.models import PROFILED_ROLES, Category, PrintMediaType, UserRole

EMAIL_RE = re.compile(r"\S+@\S+\.\S+")
YEAR_RE = re.compile(r"^\d{4}$")
PASSWORD_MISMATCH = "Passwords do not match."
WRITER_REQUIRED = "Please select at least one writer."
MIN_PASSWORD_LENGTH = 8
MIN_CONTACT_MESSAGE_LENGTH = 5


def _text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if hasattr(value, "value"):
        value = value.value
    return str(value).strip()


def _role(data: Mapping[str, Any], default: UserRole = UserRole.hillsider) -> UserRole:
    raw = _text(data, "role")
    try:
        return UserRole(raw) if raw else default
    except ValueError:
        return default


def validate_login(email: str, password: str) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not (email or "").strip():
        errors["email"] = "Email address is required."
    elif not EMAIL_RE.fullmatch(email.strip()):
        errors["email"] = "Email is invalid."
    if not password:
        errors["password"] = "Password is required."
    return errors


def validate_profile_fields(data: Mapping[str, Any], role: UserRole) -> dict[str, str]:
    """Department/course/position for staff roles; graduation year for alumni."""
    errors: dict[str, str] = {}
    if role not in PROFILED_ROLES:
        return errors
    if not _text(data, "department"):
        errors["department"] = "Please select a department."
    if not _text(data, "course"):
        errors["course"] = "Please select a course."
    if not _text(data, "position"):
        errors["position"] = "Please select a position."
    if role == UserRole.alumni:
        year = _text(data, "year_graduated")
        if not year:
            errors["year_graduated"] = "Year graduated is required."
        elif not YEAR_RE.fullmatch(year):
            errors["year_graduated"] = "Year graduated must be a 4-digit year."
    return errors


def validate_registration_step_one(data: Mapping[str, Any]) -> dict[str, str]:
    errors: dict[str, str] = {}
    email = _text(data, "email")
    if not email:
        errors["email"] = "Email address is required."
    elif not EMAIL_RE.fullmatch(email):
        errors["email"] = "Email is invalid."
    if not _text(data, "name"):
        errors["name"] = "Full Name is required."

    password = data.get("password") or ""
    confirmation = data.get("password_confirmation") or ""
    if not password:
        errors["password"] = "Password is required."
    if not confirmation:
        errors["password_confirmation"] = "Please confirm your password."
    if password and confirmation and password != confirmation:
        errors["password"] = PASSWORD_MISMATCH
        errors["password_confirmation"] = PASSWORD_MISMATCH
    return errors


def validate_registration_step_two(data: Mapping[str, Any]) -> dict[str, str]:
    return validate_profile_fields(data, _role(data))


def validate_publication_form(data: Mapping[str, Any]) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not _text(data, "title"):
        errors["title"] = "Title is required."
    if not _text(data, "byline"):
        errors["byline"] = "Byline is required."
    if not _text(data, "body"):
        errors["body"] = "Body is required."
    category = _text(data, "category")
    if not category:
        errors["category"] = "Please select a category."
    elif category.lower() not in {item.value for item in Category}:
        errors["category"] = "Unknown category."
    if not [item for item in data.get("writer_ids") or () if item not in (None, "")]:
        errors["writer_ids"] = WRITER_REQUIRED
    return errors


def validate_user_form(
    data: Mapping[str, Any],
    *,
    confirm_password: str = "",
    editing: bool = False,
) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not _text(data, "name"):
        errors["name"] = "Name is required"
    email = _text(data, "email")
    if not email:
        errors["email"] = "Email is required"
    elif not EMAIL_RE.fullmatch(email):
        errors["email"] = "Email is invalid"

    password = _text(data, "password")
    if not editing and not password:
        errors["password"] = "Password is required"
    elif password and len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = "Password must be at least 8 chars"

    if (not editing or password) and confirm_password != (data.get("password") or ""):
        errors["confirmPassword"] = "Passwords do not match"

    errors.update(validate_profile_fields(data, _role(data)))
    return errors


def validate_print_media_form(
    data: Mapping[str, Any],
    *,
    filename: str | None = None,
    editing: bool = False,
) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not _text(data, "title"):
        errors["title"] = "Title is required."
    if not _text(data, "description"):
        errors["description"] = "Description is required."
    if not _text(data, "date_published"):
        errors["date_published"] = "Date is required."
    if not _text(data, "byline"):
        errors["byline"] = "Byline is required."
    media_type = _text(data, "type")
    if media_type and media_type.lower() not in {item.value for item in PrintMediaType}:
        errors["type"] = "Unknown print media type."
    if not filename and not editing:
        errors["file"] = "Please upload a PDF file."
    elif filename and not filename.lower().endswith(".pdf"):
        errors["file"] = "Only PDF files are allowed."
    return errors


def validate_contact_form(data: Mapping[str, Any]) -> dict[str, str]:
    errors: dict[str, str] = {}
    email = _text(data, "email")
    if not email:
        errors["email"] = "Email address is required."
    elif not EMAIL_RE.fullmatch(email):
        errors["email"] = "Email is invalid."
    if len(_text(data, "message")) < MIN_CONTACT_MESSAGE_LENGTH:
        errors["message"] = f"Message must be at least {MIN_CONTACT_MESSAGE_LENGTH} characters."
    return errors
