"""
The Hillside Echo Client - Print Media Viewer
=============================================
Page/zoom/mode state for reading a print-media PDF. Rendering is delegated to
a ``PdfRenderer``; this module only decides which pages are visible and at
what scale.
"""

from __future__ import annotations

import enum
from typing import Optional

from hillside.core.config import Settings, get_settings


class ViewMode(str, enum.Enum):
    CONTINUOUS = "continuous"
    BOOK = "book"


class PrintMediaViewer:
    def __init__(self, total_pages: int = 0, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.total_pages = max(0, total_pages)
        self.page = 1
        self.mode = ViewMode.CONTINUOUS
        self.scale = self.settings.viewer_default_scale

    @property
    def min_scale(self) -> float:
        return self.settings.viewer_min_scale

    @property
    def max_scale(self) -> float:
        return self.settings.viewer_max_scale

    @property
    def step(self) -> int:
        return 2 if self.mode == ViewMode.BOOK else 1

    def load(self, total_pages: int) -> None:
        self.total_pages = max(0, total_pages)
        self.page = 1

    def set_scale(self, value: float) -> float:
        self.scale = round(min(self.max_scale, max(self.min_scale, value)), 2)
        return self.scale

    def zoom_in(self) -> float:
        return self.set_scale(round(self.scale + self.settings.viewer_scale_step, 1))

    def zoom_out(self) -> float:
        return self.set_scale(round(self.scale - self.settings.viewer_scale_step, 1))

    def set_mode(self, mode: ViewMode) -> None:
        if mode == self.mode:
            return
        self.mode = mode
        if mode == ViewMode.BOOK:
            self.page = 1
            self.set_scale(self.settings.viewer_book_scale)
        else:
            self.set_scale(self.settings.viewer_default_scale)

    def toggle_mode(self) -> ViewMode:
        self.set_mode(ViewMode.CONTINUOUS if self.mode == ViewMode.BOOK else ViewMode.BOOK)
        return self.mode

    def go_to(self, page: int) -> int:
        if self.total_pages == 0:
            return self.page
        page = min(self.total_pages, max(1, page))
        if self.mode == ViewMode.BOOK:
            # spreads start on odd pages
            page -= (page - 1) % 2
        self.page = page
        return self.page

    def next_page(self) -> int:
        if self.page + self.step <= self.total_pages:
            self.page += self.step
        return self.page

    def prev_page(self) -> int:
        self.page = max(1, self.page - self.step)
        return self.page

    def visible_pages(self) -> list[int]:
        if self.total_pages == 0:
            return []
        if self.mode == ViewMode.CONTINUOUS:
            return list(range(1, self.total_pages + 1))
        return [number for number in (self.page, self.page + 1) if number <= self.total_pages]
