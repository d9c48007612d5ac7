from __future__ import annotations

import httpx
import pytest

from hillside.api.http import HttpClient, form_fields, with_method_override
from hillside.core.errors import Conflict, NotFound, ServerError, TransportError, ValidationFailed
from hillside.services.publication_service import PublicationService


@pytest.mark.asyncio
async def test_xsrf_cookie_is_url_decoded_into_header(settings, backend) -> None:
    backend.on("GET", "/api/me", json_body={"user": None})
    client = HttpClient(settings, transport=backend.transport())
    client.cookies.set("XSRF-TOKEN", "abc%3D%3D")

    await client.get("/me")

    assert backend.calls[0].headers["x-xsrf-token"] == "abc=="
    assert backend.calls[0].headers["x-request-id"].startswith("req-")
    await client.aclose()


@pytest.mark.asyncio
async def test_json_and_multipart_bodies_get_matching_content_types(settings, backend) -> None:
    backend.on("POST", "/api/contact-us", json_body={"ok": True})
    backend.on("POST", "/api/publications", json_body={"id": 5, "title": "New", "category": "local"})
    client = HttpClient(settings, transport=backend.transport())

    await client.post("/contact-us", json={"name": "Ana"})
    await client.post("/publications", data={"title": "New"}, files={"image": ("a.png", b"png", "image/png")})

    assert backend.calls[0].headers["content-type"] == "application/json"
    assert backend.calls[1].headers["content-type"].startswith("multipart/form-data")
    await client.aclose()


@pytest.mark.asyncio
async def test_failures_are_classified_by_status(settings, backend) -> None:
    backend.on("POST", "/api/register", 422, json_body={"message": "invalid", "errors": {"email": ["Taken.", "Bad."]}})
    backend.on("POST", "/api/publications/1/request-credit", 409, json_body={"message": "exists"})
    backend.on("GET", "/api/analytics/trends", 500, json_body={"message": "boom"})
    client = HttpClient(settings, transport=backend.transport())

    with pytest.raises(ValidationFailed) as validation:
        await client.post("/register", json={})
    with pytest.raises(Conflict):
        await client.post("/publications/1/request-credit")
    with pytest.raises(ServerError):
        await client.get("/analytics/trends")
    with pytest.raises(NotFound):
        await client.get("/unknown")

    assert validation.value.field_errors == {"email": "Taken."}
    await client.aclose()


@pytest.mark.asyncio
async def test_network_failure_raises_transport_error(settings) -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = HttpClient(settings, transport=httpx.MockTransport(refuse))

    with pytest.raises(TransportError):
        await client.get("/me")
    await client.aclose()


@pytest.mark.asyncio
async def test_publication_update_tunnels_put_through_post(settings, backend) -> None:
    backend.on("POST", "/api/publications/7", json_body={"id": 7, "title": "Edited", "category": "sports"})
    service = PublicationService(HttpClient(settings, transport=backend.transport()))

    updated = await service.update(7, {"title": "Edited"}, image=("p.jpg", b"jpg", "image/jpeg"))

    body = backend.calls[0].content
    assert updated.title == "Edited"
    assert b'name="_method"' in body and b"PUT" in body


def test_form_fields_drop_empty_values() -> None:
    assert form_fields({"title": "A", "image": None, "credits": "", "featured": True}) == {
        "title": "A",
        "featured": "1",
    }
    assert with_method_override({"a": 1})["_method"] == "PUT"


def test_form_fields_expand_sequences_into_array_fields() -> None:
    assert form_fields({"writer_ids": [3, 4], "title": "x", "tags": []}) == {
        "writer_ids[]": ["3", "4"],
        "title": "x",
    }


@pytest.mark.asyncio
async def test_publication_create_sends_one_field_per_writer(settings, backend) -> None:
    backend.on("POST", "/api/publications", json_body={"id": 8, "title": "Two hands", "category": "local", "status": "draft"})
    service = PublicationService(HttpClient(settings, transport=backend.transport()))

    await service.create({"title": "Two hands", "writer_ids": [3, 4]})
    await service.create({"title": "Two hands", "writer_ids": [3, 4]}, image=("p.jpg", b"jpg", "image/jpeg"))

    urlencoded, multipart = backend.calls[0].content, backend.calls[1].content
    assert urlencoded.count(b"writer_ids%5B%5D=") == 2
    assert b"%5B3%2C" not in urlencoded
    assert multipart.count(b'name="writer_ids[]"') == 2


@pytest.mark.asyncio
async def test_bodiless_requests_carry_no_content_type(settings, backend) -> None:
    backend.on("GET", "/api/me", json_body={"user": None})
    backend.on("DELETE", "/api/publications/3", 204)
    client = HttpClient(settings, transport=backend.transport())

    await client.get("/me")
    await client.delete("/publications/3")

    assert all("content-type" not in call.headers for call in backend.calls)
    await client.aclose()
