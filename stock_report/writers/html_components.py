"""HTML Components - 台股報告設計系統

每個 ContentBlock 對應一個元件，另有頁面用的 header / 引用來源 / 參考連結 /
免責聲明元件。樣式以 inline CSS 為主，列印相關規則放在 page_renderer
的 <style>（.screen-only / .print-only）。

元件清單：
1. Heading - h1/h2/h3
2. Paragraph - 段落（買入策略內加強顯示）
3. BulletItem - 條列
4. DataTable - pipe 表格（斑馬紋）
5. BuyStrategyBox - 建議買入價格／交易時機區塊
6. PrintHeader - 列印用報告抬頭
7. ReferenceLinks - Yahoo 股市 / TradingView
8. SourceList - 引用來源
9. Disclaimer - 法律聲明
"""

from html import escape
from typing import Optional, Sequence

from ..providers.base import Citation

BASE_STYLES = {
    "font_family": "system-ui, -apple-system, 'Noto Sans TC', 'PingFang TC', 'Microsoft JhengHei', sans-serif",
    "text_color": "#0f172a",
    "body_color": "#475569",
    "muted_color": "#94a3b8",
    "border_color": "#e2e8f0",
    "accent_color": "#4f46e5",   # Indigo
    "accent_soft": "#e0e7ff",
    "strategy_bg": "#fffbeb",    # Amber
    "strategy_border": "#f59e0b",
    "strategy_text": "#92400e",
}

HEADING_STYLES = {
    1: f"margin: 16px 0 32px 0; padding-bottom: 16px; font-size: 30px; font-weight: 900; color: {BASE_STYLES['text_color']}; border-bottom: 4px solid {BASE_STYLES['text_color']};",
    2: f"margin: 48px 0 24px 0; padding-bottom: 8px; font-size: 24px; font-weight: 700; color: {BASE_STYLES['accent_color']}; border-bottom: 2px solid {BASE_STYLES['accent_soft']};",
    3: f"margin: 32px 0 16px 0; padding-left: 12px; font-size: 20px; font-weight: 700; color: #1e293b; border-left: 4px solid {BASE_STYLES['accent_color']};",
}


def render_heading(level: int, text: str) -> str:
    """元件 1: Heading"""
    level = level if level in HEADING_STYLES else 2
    return f'<h{level} style="{HEADING_STYLES[level]}">{escape(text)}</h{level}>'


def render_paragraph(text: str, emphasized: bool = False) -> str:
    """元件 2: Paragraph

    原始行可能帶前導空白，white-space: pre-wrap 保留縮排。
    """
    color = BASE_STYLES["strategy_text"] if emphasized else BASE_STYLES["body_color"]
    weight = "600" if emphasized else "400"
    return (
        f'<p class="report-paragraph" style="margin: 0 0 16px 0; line-height: 1.75; '
        f'white-space: pre-wrap; color: {color}; font-weight: {weight};">{escape(text)}</p>'
    )


def render_bullet(text: str, emphasized: bool = False) -> str:
    """元件 3: BulletItem"""
    marker_color = BASE_STYLES["strategy_border"] if emphasized else BASE_STYLES["accent_color"]
    text_color = BASE_STYLES["strategy_text"] if emphasized else BASE_STYLES["body_color"]
    weight = "600" if emphasized else "400"
    return f'''
    <div style="display: flex; gap: 12px; margin: 0 0 12px 16px;">
        <span class="screen-only" style="color: {marker_color}; font-weight: 700;">›</span>
        <p style="margin: 0; line-height: 1.75; color: {text_color}; font-weight: {weight};">{escape(text)}</p>
    </div>
    '''


def render_data_table(header_row: Sequence[str], body_rows: Sequence[Sequence[str]]) -> str:
    """元件 4: DataTable

    欄位數不一致的列照原樣輸出，不補空格。
    """
    header_cells = "".join(
        f'<th style="padding: 12px 16px; text-align: left; font-size: 12px; font-weight: 700; '
        f'color: #64748b; letter-spacing: 0.05em;">{escape(cell)}</th>'
        for cell in header_row
    )

    rows_html = ""
    for i, row in enumerate(body_rows):
        background = "#ffffff" if i % 2 == 0 else "#f8fafc"
        cells = "".join(
            f'<td style="padding: 12px 16px; font-size: 14px; color: {BASE_STYLES["body_color"]}; '
            f'border-top: 1px solid {BASE_STYLES["border_color"]};">{escape(cell)}</td>'
            for cell in row
        )
        rows_html += f'<tr style="background: {background};">{cells}</tr>'

    return f'''
    <div class="report-table" style="margin: 24px 0; overflow-x: auto; border: 1px solid {BASE_STYLES["border_color"]}; border-radius: 12px;">
        <table style="min-width: 100%; border-collapse: collapse;">
            <thead style="background: #f8fafc;">
                <tr>{header_cells}</tr>
            </thead>
            <tbody>
                {rows_html}
            </tbody>
        </table>
    </div>
    '''


def render_buy_strategy_box(title: str, inner_html: str, title_level: Optional[int] = None) -> str:
    """元件 5: BuyStrategyBox

    Args:
        title: 開啟區塊的那一行（已去除 markdown 標記）
        inner_html: 已渲染的子 block
        title_level: 開頭行原本是 heading 時輸出 h1-h3，否則用 div
    """
    tag = f"h{title_level}" if title_level in HEADING_STYLES else "div"
    title_html = (
        f'<{tag} style="margin: 0 0 16px 0; font-size: 18px; font-weight: 800; color: {BASE_STYLES["strategy_text"]};">'
        f'🎯 {escape(title)}</{tag}>'
        if title else ""
    )
    return f'''
    <section class="buy-strategy" style="margin: 32px 0; padding: 24px; background: {BASE_STYLES["strategy_bg"]}; border: 2px solid {BASE_STYLES["strategy_border"]}; border-radius: 16px;">
        {title_html}
        {inner_html}
    </section>
    '''


def render_print_header(stock_code: str, report_date: str) -> str:
    """元件 6: PrintHeader（只在列印 / PDF 顯示）"""
    return f'''
    <div class="print-only" style="margin-bottom: 40px; padding-bottom: 24px; border-bottom: 2px solid {BASE_STYLES["text_color"]};">
        <div style="display: flex; justify-content: space-between; align-items: flex-end; margin-bottom: 16px;">
            <h1 style="margin: 0; font-size: 36px; font-weight: 900;">台股深度研究報告</h1>
            <div style="text-align: right;">
                <p style="margin: 0; font-size: 18px; font-weight: 700;">市場標的：{escape(stock_code)}</p>
                <p style="margin: 0; font-size: 14px; color: #64748b;">報告日期：{escape(report_date)}</p>
            </div>
        </div>
        <p style="margin: 0; font-size: 14px; font-style: italic; color: {BASE_STYLES["muted_color"]};">本報告由 AI 自動生成，數據來自公開市場資訊，僅供內部參考。</p>
    </div>
    '''


def quote_urls(stock_code: str, exchange: str) -> dict[str, str]:
    """外部行情頁網址；上櫃股票在 Yahoo 使用 .TWO 後綴"""
    suffix = "TWO" if exchange == "TPEX" else "TW"
    return {
        "yahoo": f"https://tw.stock.yahoo.com/quote/{stock_code}.{suffix}",
        "tradingview": f"https://www.tradingview.com/symbols/{exchange}-{stock_code}/",
    }


def render_reference_links(stock_code: str, exchange: str) -> str:
    """元件 7: ReferenceLinks"""
    urls = quote_urls(stock_code, exchange)
    cards = [
        (urls["yahoo"], "Yahoo 股市資訊", "即時報價、技術走勢與財務比率"),
        (urls["tradingview"], "TradingView 技術分析", "全功能互動 K 線圖與技術指標"),
    ]
    cards_html = "".join(
        f'''
        <a href="{escape(href)}" target="_blank" rel="noreferrer" style="display: block; padding: 20px; background: #f8fafc; border: 1px solid {BASE_STYLES["border_color"]}; border-radius: 16px; text-decoration: none;">
            <p style="margin: 0; font-weight: 700; color: #334155;">{label}</p>
            <p style="margin: 4px 0 0 0; font-size: 12px; color: {BASE_STYLES["muted_color"]};">{caption}</p>
        </a>
        '''
        for href, label, caption in cards
    )
    return f'''
    <div style="margin-top: 48px; padding-top: 32px; border-top: 1px solid {BASE_STYLES["border_color"]};">
        <h3 style="margin: 0 0 24px 0; font-size: 20px; font-weight: 700; color: #1e293b;">詳細圖表數據參考</h3>
        <div class="reference-grid" style="display: grid; grid-template-columns: repeat(2, 1fr); gap: 16px;">
            {cards_html}
        </div>
    </div>
    '''


def render_source_list(citations: Sequence[Citation], title: Optional[str] = None) -> str:
    """元件 8: SourceList

    沒有引用來源時回傳空字串。
    """
    if not citations:
        return ""

    items_html = ""
    for i, citation in enumerate(citations, 1):
        items_html += f'''
        <a href="{escape(citation.uri)}" target="_blank" rel="noopener noreferrer" style="display: flex; align-items: center; gap: 12px; padding: 12px; border-radius: 16px; text-decoration: none;">
            <span style="flex-shrink: 0; width: 28px; height: 28px; line-height: 28px; text-align: center; background: #f1f5f9; border-radius: 8px; font-size: 10px; font-weight: 700; color: {BASE_STYLES["muted_color"]};">{i}</span>
            <span style="font-size: 14px; font-weight: 600; color: #334155; overflow: hidden; text-overflow: ellipsis; white-space: nowrap;">{escape(citation.title)}</span>
        </a>
        '''

    heading = title or f"引用來源 ({len(citations)})"
    return f'''
    <aside class="screen-only" style="background: #ffffff; border: 1px solid {BASE_STYLES["border_color"]}; border-radius: 24px; overflow: hidden;">
        <div style="padding: 16px 24px; background: #f8fafc; border-bottom: 1px solid {BASE_STYLES["border_color"]}; font-weight: 700; color: #1e293b;">{escape(heading)}</div>
        <div style="padding: 16px; max-height: 400px; overflow-y: auto;">
            {items_html}
        </div>
    </aside>
    '''


def render_disclaimer() -> str:
    """元件 9: Disclaimer（只在列印 / PDF 顯示）"""
    return f'''
    <div class="print-only" style="margin-top: 80px; padding-top: 40px; border-top: 1px solid {BASE_STYLES["border_color"]}; font-size: 10pt; font-style: italic; line-height: 1.75; color: #64748b;">
        <p style="margin: 0 0 8px 0; font-weight: 700; color: #1e293b;">【重要法律聲明】</p>
        <p style="margin: 0;">本文件內容係基於人工智慧收集之公開資訊，僅提供作為一般性參考用途，不應被視為投資建議。作者與系統不保證資訊之準確性，對於任何投資損失不負責任。股市投資有風險，申購前應詳閱公開說明書。</p>
    </div>
    '''
