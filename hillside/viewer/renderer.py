from __future__ import annotations

import asyncio
from dataclasses import dataclass
from io import BytesIO
from typing import Optional, Protocol

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from hillside.core.logging import get_logger
from hillside.viewer.viewer import PrintMediaViewer

logger = get_logger("viewer.renderer")


@dataclass(slots=True)
class RenderedPage:
    number: int
    width: float
    height: float
    scale: float
    text: str


class PdfRenderer(Protocol):
    async def page_count(self) -> int: ...

    async def render_page(self, number: int, scale: float) -> RenderedPage: ...


class PypdfRenderer:
    """Reads page geometry and text with pypdf off the event loop."""

    def __init__(self, payload: bytes):
        self.payload = payload
        self._reader: Optional[PdfReader] = None

    async def _open(self) -> PdfReader:
        if self._reader is None:
            try:
                self._reader = await asyncio.to_thread(PdfReader, BytesIO(self.payload))
            except PdfReadError as exc:
                raise ValueError("Invalid or unreadable PDF file") from exc
        return self._reader

    async def page_count(self) -> int:
        reader = await self._open()
        return len(reader.pages)

    async def render_page(self, number: int, scale: float) -> RenderedPage:
        reader = await self._open()
        if number < 1 or number > len(reader.pages):
            raise IndexError(f"page {number} out of range")
        page = reader.pages[number - 1]
        text = await asyncio.to_thread(page.extract_text)
        return RenderedPage(
            number=number,
            width=float(page.mediabox.width) * scale,
            height=float(page.mediabox.height) * scale,
            scale=scale,
            text=(text or "").strip(),
        )


async def open_document(viewer: PrintMediaViewer, renderer: PdfRenderer) -> int:
    total = await renderer.page_count()
    viewer.load(total)
    logger.info("print_media_document_loaded", pages=total)
    return total


async def render_visible(viewer: PrintMediaViewer, renderer: PdfRenderer) -> dict[int, Optional[RenderedPage]]:
    """Render every visible page; a page that fails maps to None and the rest still render."""
    numbers = viewer.visible_pages()
    results = await asyncio.gather(
        *(renderer.render_page(number, viewer.scale) for number in numbers),
        return_exceptions=True,
    )
    pages: dict[int, Optional[RenderedPage]] = {}
    for number, result in zip(numbers, results):
        if isinstance(result, Exception):
            logger.warning("print_media_page_render_failed", page=number, error=str(result))
            pages[number] = None
        else:
            pages[number] = result
    return pages
