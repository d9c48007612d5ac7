"""
The Hillside Echo Client - HTTP Adapter
=======================================
Single funnel for every backend call: base URL, cookie session, CSRF header,
JSON vs multipart bodies and one response hook that classifies failures.
"""

from __future__ import annotations

from typing import Any, Literal
from urllib.parse import unquote

import httpx

from hillside.core.config import Settings, get_settings
from hillside.core.correlation import ensure_correlation_id, new_request_id
from hillside.core.errors import TransportError, error_for_status
from hillside.core.logging import get_logger

logger = get_logger("api.http")

FileField = tuple[str, bytes, str]


def with_method_override(fields: dict[str, Any], method: str = "PUT") -> dict[str, Any]:
    """Multipart updates are tunnelled through POST with a ``_method`` field."""
    return {**fields, "_method": method.upper()}


def _field_value(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if hasattr(value, "value"):
        return str(value.value)
    return str(value)


def form_fields(values: dict[str, Any]) -> dict[str, str | list[str]]:
    """Drop empty values and stringify the rest, the way a FormData body is built.

    Sequences become one ``key[]`` field per item (``writer_ids[]=3&writer_ids[]=4``);
    httpx repeats list values in both urlencoded and multipart bodies.
    """
    clean: dict[str, str | list[str]] = {}
    for key, value in values.items():
        if value is None or value == "":
            continue
        if isinstance(value, (list, tuple, set, frozenset)):
            items = [_field_value(item) for item in value if item is not None and item != ""]
            if items:
                clean[key if key.endswith("[]") else f"{key}[]"] = items
            continue
        clean[key] = _field_value(value)
    return clean


class HttpClient:
    """Async adapter around ``httpx.AsyncClient`` bound to ``{origin}/api``."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or get_settings()
        self._client = httpx.AsyncClient(
            base_url=self.settings.api_base_url,
            timeout=self.settings.request_timeout_seconds,
            transport=transport,
            headers={
                "Accept": "application/json",
                "X-Requested-With": "XMLHttpRequest",
            },
        )

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def cookies(self) -> httpx.Cookies:
        return self._client.cookies

    def url_for(self, path: str) -> str:
        return f"{self.settings.api_base_url}/{path.lstrip('/')}"

    def xsrf_token(self) -> str | None:
        for cookie in self._client.cookies.jar:
            if cookie.name == self.settings.xsrf_cookie_name and cookie.value:
                return unquote(cookie.value)
        return None

    def _headers(self, *, has_json: bool) -> dict[str, str]:
        headers = {
            "x-request-id": new_request_id(),
            "x-correlation-id": ensure_correlation_id(),
        }
        token = self.xsrf_token()
        if token:
            headers[self.settings.xsrf_header_name] = token
        if has_json:
            headers["Content-Type"] = "application/json"
        return headers

    async def ensure_csrf_cookie(self) -> None:
        """Prime the XSRF-TOKEN cookie before a state-changing login."""
        await self.request("GET", self.settings.csrf_cookie_url, expect="none")

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        data: dict[str, Any] | None = None,
        files: dict[str, FileField] | None = None,
        params: dict[str, Any] | None = None,
        expect: Literal["json", "bytes", "none"] = "json",
    ) -> Any:
        is_multipart = bool(files) or data is not None
        headers = self._headers(has_json=json is not None and not is_multipart)
        query = {k: v for k, v in (params or {}).items() if v is not None and v != ""}
        try:
            response = await self._client.request(
                method,
                path,
                json=json if not is_multipart else None,
                data=form_fields(data or {}) if is_multipart else None,
                files=files or None,
                params=query or None,
                headers=headers,
            )
        except httpx.TransportError as exc:
            logger.error("http_transport_error", method=method, path=path, error=str(exc))
            raise TransportError(f"{method} {path} failed: {exc}") from exc

        return self._handle_response(method, path, response, expect)

    def _handle_response(self, method: str, path: str, response: httpx.Response, expect: str) -> Any:
        if response.is_success:
            if expect == "bytes":
                return response.content
            if expect == "none" or not response.content:
                return None
            try:
                return response.json()
            except ValueError:
                return response.text

        try:
            payload = response.json()
        except ValueError:
            payload = {"message": response.text}

        error = error_for_status(response.status_code, payload)
        if response.status_code != 422:
            logger.error(
                "http_response_error",
                method=method,
                path=path,
                status=response.status_code,
                message=error.message,
            )
        raise error

    async def get(self, path: str, **kwargs) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs) -> Any:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs) -> Any:
        return await self.request("PUT", path, **kwargs)

    async def delete(self, path: str, **kwargs) -> Any:
        return await self.request("DELETE", path, **kwargs)
