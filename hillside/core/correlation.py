"""Request/correlation ids shared by outbound calls, the dev proxy and the log context."""

from __future__ import annotations

from contextvars import ContextVar
from uuid import uuid4

import structlog

request_id_ctx: ContextVar[str] = ContextVar("request_id", default="")
correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="")


def new_request_id() -> str:
    return f"req-{uuid4().hex[:20]}"


def new_correlation_id() -> str:
    return f"corr-{uuid4().hex[:20]}"


def get_request_id() -> str:
    return request_id_ctx.get("")


def get_correlation_id() -> str:
    return correlation_id_ctx.get("")


def ensure_correlation_id() -> str:
    """Return the active correlation id, starting a new one if none is bound."""
    current = get_correlation_id()
    if not current:
        current = new_correlation_id()
        correlation_id_ctx.set(current)
    return current


def bind_ids(request_id: str | None = None, correlation_id: str | None = None) -> tuple[str, str]:
    """Adopt incoming ids (or mint new ones) and expose them to structlog."""
    request_id = request_id or new_request_id()
    correlation_id = correlation_id or new_correlation_id()
    request_id_ctx.set(request_id)
    correlation_id_ctx.set(correlation_id)
    structlog.contextvars.bind_contextvars(request_id=request_id, correlation_id=correlation_id)
    return request_id, correlation_id


def clear_ids() -> None:
    request_id_ctx.set("")
    correlation_id_ctx.set("")
    structlog.contextvars.clear_contextvars()
