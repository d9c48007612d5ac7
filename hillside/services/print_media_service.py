"""
The Hillside Echo Client - Print Media Service
==============================================
Folios, magazines, tabloids and newsletters stored as PDF documents.
"""

from __future__ import annotations

import webbrowser
from typing import Any, Optional
from urllib.parse import quote

from hillside.api.http import FileField, HttpClient, with_method_override
from hillside.core.logging import get_logger
from hillside.models import PrintMediaType
from hillside.schemas import PrintMedia

logger = get_logger("print_media_service")


def parse_print_media(payload: Any) -> list[PrintMedia]:
    if isinstance(payload, dict):
        payload = payload.get("data", [])
    return [PrintMedia.model_validate(item) for item in payload or []]


class PrintMediaService:
    def __init__(self, http: HttpClient):
        self.http = http

    async def list(self, media_type: Optional[PrintMediaType] = None) -> list[PrintMedia]:
        items = parse_print_media(await self.http.get("/print-media"))
        if media_type is None:
            return items
        return [item for item in items if item.type == media_type]

    async def get(self, media_id: int) -> PrintMedia:
        return PrintMedia.model_validate(await self.http.get(f"/print-media/{media_id}"))

    async def create(
        self,
        fields: dict[str, Any],
        document: FileField,
        thumbnail: FileField | None = None,
    ) -> PrintMedia:
        files = {"file": document}
        if thumbnail:
            files["thumbnail"] = thumbnail
        payload = await self.http.post("/print-media", data=fields, files=files)
        media = PrintMedia.model_validate(payload)
        logger.info("print_media_created", media_id=media.id, type=media.type.value)
        return media

    async def update(
        self,
        media_id: int,
        fields: dict[str, Any],
        document: FileField | None = None,
        thumbnail: FileField | None = None,
    ) -> PrintMedia:
        files: dict[str, FileField] = {}
        if document:
            files["file"] = document
        if thumbnail:
            files["thumbnail"] = thumbnail
        payload = await self.http.post(
            f"/print-media/{media_id}",
            data=with_method_override(fields, "PUT"),
            files=files or None,
        )
        return PrintMedia.model_validate(payload)

    async def delete(self, media_id: int) -> None:
        await self.http.delete(f"/print-media/{media_id}")
        logger.info("print_media_deleted", media_id=media_id)

    async def request_credit(self, media_id: int) -> Any:
        return await self.http.post(f"/print-media/{media_id}/request-credit")

    def file_url(self, media: PrintMedia) -> Optional[str]:
        if media.file_url:
            return media.file_url
        if not media.file_path:
            return None
        return self.http.url_for(f"/print-media/file/{quote(media.file_path)}")

    def download_url(self, media_id: int) -> str:
        return self.http.url_for(f"/print-media/{media_id}/download")

    def open_download(self, media_id: int) -> str:
        """Hand the download URL to the browser; the file is never fetched here."""
        url = self.download_url(media_id)
        webbrowser.open(url, new=2)
        logger.info("print_media_download_opened", media_id=media_id)
        return url

    async def fetch_document(self, media: PrintMedia) -> bytes:
        url = self.file_url(media)
        if not url:
            raise ValueError(f"Print media {media.id} has no file")
        return await self.http.get(url, expect="bytes")
