"""Page Renderer - Document 轉完整 HTML 頁面

render_document(): 逐一把 ContentBlock 交給對應元件。
render_report_page(): 組出可直接開啟／列印成 PDF 的獨立 HTML 檔。
"""

from datetime import datetime
from html import escape
from typing import Optional

from ..providers.base import AnalysisResult
from ..renderer.blocks import (
    BulletItem,
    BuyStrategyBlock,
    ChartAnchor,
    ChartData,
    ContentBlock,
    Document,
    Heading,
    Paragraph,
    Table,
)
from ..utils.logging import get_logger
from ..utils.time import format_datetime, get_now
from .chart_components import render_chart_widget, render_price_line_chart
from .html_components import (
    BASE_STYLES,
    render_bullet,
    render_buy_strategy_box,
    render_data_table,
    render_disclaimer,
    render_heading,
    render_paragraph,
    render_print_header,
    render_reference_links,
    render_source_list,
)

logger = get_logger(__name__)

PAGE_CSS = """
body { margin: 0; background: #f8fafc; }
.print-only { display: none; }
@media (max-width: 1024px) {
    .report-layout { grid-template-columns: 1fr !important; }
}
@media print {
    @page { size: A4; margin: 16mm; }
    body { background: #ffffff; color: #000000; }
    .screen-only { display: none !important; }
    .print-only { display: block !important; }
    .report-layout { display: block !important; }
    .report-card { border: none !important; box-shadow: none !important; padding: 0 !important; }
    .report-table, .buy-strategy, .price-chart { break-inside: avoid; }
    h1, h2, h3 { break-after: avoid; color: #000000 !important; }
    .report-paragraph { color: #000000 !important; }
}
"""


def render_block(block: ContentBlock) -> str:
    """單一 block → HTML"""
    if isinstance(block, Heading):
        return render_heading(block.level, block.text)
    if isinstance(block, Paragraph):
        return render_paragraph(block.text, emphasized=block.emphasized)
    if isinstance(block, BulletItem):
        return render_bullet(block.text, emphasized=block.emphasized)
    if isinstance(block, Table):
        return render_data_table(block.header_row, block.body_rows)
    if isinstance(block, ChartAnchor):
        return render_chart_widget(block.symbol, block.exchange)
    if isinstance(block, ChartData):
        return render_price_line_chart(block.series)
    if isinstance(block, BuyStrategyBlock):
        inner = "\n".join(render_block(child) for child in block.children)
        return render_buy_strategy_box(block.title, inner, title_level=block.title_level)

    logger.warning(f"Unknown block type: {type(block).__name__}")
    return ""


def render_document(document: Document) -> str:
    """整份 Document → 報告內文 HTML"""
    body = "\n".join(render_block(block) for block in document)
    return f'<div class="analysis-report">{body}</div>'


def render_report_page(
    result: AnalysisResult,
    document: Document,
    generated_at: Optional[datetime] = None,
) -> str:
    """組出完整的報告頁面

    Args:
        result: Analysis provider 結果（代碼、市場別、引用來源）
        document: render() 產生的 Document
        generated_at: 報告時間（預設為台北現在時間）

    Returns:
        完整 HTML 文件字串
    """
    generated_at = generated_at or get_now()
    report_date = format_datetime(generated_at, "zh")
    code = escape(result.stock_code)

    return f'''<!DOCTYPE html>
<html lang="zh-TW">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>台股深度研究報告 - {code}</title>
<style>{PAGE_CSS}</style>
</head>
<body style="font-family: {BASE_STYLES["font_family"]}; color: {BASE_STYLES["text_color"]};">
<main style="max-width: 1280px; margin: 0 auto; padding: 40px 24px;">
    <div class="report-layout" style="display: grid; grid-template-columns: 2fr 1fr; gap: 32px; align-items: start;">
        <article class="report-card" style="background: #ffffff; border: 1px solid {BASE_STYLES["border_color"]}; border-radius: 24px; padding: 40px 32px;">
            <div class="screen-only" style="display: flex; justify-content: space-between; align-items: center; margin-bottom: 24px;">
                <div style="font-size: 18px; font-weight: 700;">專業深度分析報告</div>
                <span style="padding: 4px 12px; background: {BASE_STYLES["accent_soft"]}; color: {BASE_STYLES["accent_color"]}; border-radius: 999px; font-size: 12px; font-weight: 900;">代碼: {code} · {escape(result.exchange)}</span>
            </div>
            {render_print_header(result.stock_code, report_date)}
            {render_document(document)}
            {render_reference_links(result.stock_code, result.exchange)}
            {render_disclaimer()}
        </article>
        {render_source_list(result.source_urls)}
    </div>
</main>
</body>
</html>
'''
