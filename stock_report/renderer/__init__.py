"""Report renderer - LLM 報告文字轉結構化 Document"""

from .blocks import (
    EXCHANGES,
    BulletItem,
    BuyStrategyBlock,
    ChartAnchor,
    ChartData,
    ContentBlock,
    Document,
    EmbeddedSeries,
    Heading,
    Paragraph,
    Table,
    document_to_dicts,
)
from .embedded_data import extract_embedded_series
from .report_renderer import render, render_cached
from .scanner import ReportScanner, ScanMode, split_table_row
from .sections import DEFAULT_RULES, SectionRules, load_section_rules

__all__ = [
    "EXCHANGES",
    "BulletItem",
    "BuyStrategyBlock",
    "ChartAnchor",
    "ChartData",
    "ContentBlock",
    "Document",
    "EmbeddedSeries",
    "Heading",
    "Paragraph",
    "Table",
    "document_to_dicts",
    "extract_embedded_series",
    "render",
    "render_cached",
    "ReportScanner",
    "ScanMode",
    "split_table_row",
    "DEFAULT_RULES",
    "SectionRules",
    "load_section_rules",
]
