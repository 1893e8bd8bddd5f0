"""Presentation writers - Document 轉 HTML"""

from .page_renderer import render_block, render_document, render_report_page

__all__ = [
    "render_block",
    "render_document",
    "render_report_page",
]
