"""
The Hillside Echo - Development Proxy
=====================================
Serves the same-origin ``/api`` surface during local development by forwarding
every request (method, query, body, cookies) to the Laravel backend and
passing its response back untouched, ``Set-Cookie`` headers included.
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import Response

from hillside.api.envelope import error_envelope
from hillside.core.config import Settings, get_settings
from hillside.core.correlation import bind_ids, clear_ids, get_correlation_id, get_request_id
from hillside.core.logging import get_logger, setup_logging

logger = get_logger("proxy")

HOP_BY_HOP = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailers",
        "transfer-encoding",
        "upgrade",
        "host",
        "content-length",
        "content-encoding",
    }
)
METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


def _forward_headers(headers) -> dict[str, str]:
    return {key: value for key, value in headers.items() if key.lower() not in HOP_BY_HOP}


def create_app(
    settings: Optional[Settings] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level, settings.log_json)
        app.state.upstream = httpx.AsyncClient(
            base_url=settings.proxy_target.rstrip("/"),
            timeout=settings.request_timeout_seconds,
            transport=transport,
        )
        logger.info("proxy_starting", target=settings.proxy_target)
        try:
            yield
        finally:
            await app.state.upstream.aclose()
            logger.info("proxy_stopped")

    app = FastAPI(title=f"{settings.app_name} dev proxy", lifespan=lifespan, docs_url=None, redoc_url=None)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id, correlation_id = bind_ids(
            request.headers.get("x-request-id"),
            request.headers.get("x-correlation-id"),
        )
        start = time.time()
        response = None
        try:
            response = await call_next(request)
            return response
        finally:
            elapsed = round((time.time() - start) * 1000, 2)
            status_code = 500
            if response is not None:
                response.headers["x-request-id"] = request_id
                response.headers["x-correlation-id"] = correlation_id
                status_code = response.status_code
            if request.url.path != "/health":
                logger.info(
                    "proxy_request",
                    method=request.method,
                    path=request.url.path,
                    status=status_code,
                    elapsed_ms=elapsed,
                )
            clear_ids()

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "target": settings.proxy_target}

    async def forward(request: Request, prefix: str, path: str) -> Response:
        upstream: httpx.AsyncClient = request.app.state.upstream
        headers = _forward_headers(request.headers)
        headers["x-request-id"] = get_request_id()
        headers["x-correlation-id"] = get_correlation_id()
        try:
            upstream_response = await upstream.request(
                request.method,
                f"/{prefix}/{path}",
                params=list(request.query_params.multi_items()),
                content=await request.body(),
                headers=headers,
            )
        except httpx.TransportError as exc:
            logger.error("proxy_upstream_unreachable", target=settings.proxy_target, error=str(exc))
            return error_envelope(
                code="upstream_unreachable",
                message="Backend is unreachable",
                details=str(exc),
                meta={"path": request.url.path},
            )

        response = Response(content=upstream_response.content, status_code=upstream_response.status_code)
        for key, value in upstream_response.headers.multi_items():
            if key.lower() not in HOP_BY_HOP:
                response.headers.append(key, value)
        return response

    @app.api_route("/api/{path:path}", methods=METHODS)
    async def forward_api(request: Request, path: str) -> Response:
        return await forward(request, "api", path)

    @app.api_route("/sanctum/{path:path}", methods=METHODS)
    async def forward_sanctum(request: Request, path: str) -> Response:
        return await forward(request, "sanctum", path)

    return app


app = create_app()
