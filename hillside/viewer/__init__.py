from hillside.viewer.renderer import PdfRenderer, PypdfRenderer, RenderedPage, open_document, render_visible
from hillside.viewer.viewer import PrintMediaViewer, ViewMode

__all__ = [
    "PdfRenderer",
    "PrintMediaViewer",
    "PypdfRenderer",
    "RenderedPage",
    "ViewMode",
    "open_document",
    "render_visible",
]
