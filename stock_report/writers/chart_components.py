"""Chart Components - 技術線圖

- ChartAnchor → TradingView 互動式 K 線圖容器（螢幕顯示）
- ChartData → inline SVG 收盤價折線圖（列印與無 JavaScript 時的備援）
"""

import json
from html import escape

from ..renderer.blocks import EmbeddedSeries

TRADINGVIEW_SCRIPT = "https://s3.tradingview.com/external-embedding/embed-widget-advanced-chart.js"

SVG_WIDTH = 640
SVG_HEIGHT = 240
SVG_PADDING = 32


def tradingview_symbol(symbol: str, exchange: str) -> str:
    """TradingView 代碼，例如 TWSE:2330、TPEX:6488"""
    return f"{exchange}:{symbol}"


def render_chart_widget(symbol: str, exchange: str, height: int = 480) -> str:
    """渲染 TradingView 互動式線圖容器

    Args:
        symbol: 股票代碼
        exchange: "TWSE" 或 "TPEX"
        height: 圖表高度 (px)

    Returns:
        HTML 字串
    """
    config = {
        "symbol": tradingview_symbol(symbol, exchange),
        "interval": "D",
        "range": "24M",
        "timezone": "Asia/Taipei",
        "theme": "light",
        "style": "1",
        "locale": "zh_TW",
        "allow_symbol_change": False,
        "autosize": True,
    }
    # "</" 不能出現在 <script> 內文
    config_json = json.dumps(config, ensure_ascii=False).replace("</", "<\\/")
    return f'''
    <div class="chart-widget screen-only" data-symbol="{escape(config["symbol"])}" style="margin: 24px 0; height: {height}px; border: 1px solid #e2e8f0; border-radius: 16px; overflow: hidden;">
        <div class="tradingview-widget-container" style="height: 100%; width: 100%;">
            <div class="tradingview-widget-container__widget" style="height: 100%; width: 100%;"></div>
            <script type="text/javascript" src="{TRADINGVIEW_SCRIPT}" async>
            {config_json}
            </script>
        </div>
    </div>
    '''


def series_points(
    prices: tuple[float, ...],
    width: int = SVG_WIDTH,
    height: int = SVG_HEIGHT,
    padding: int = SVG_PADDING,
) -> list[tuple[float, float]]:
    """把價格換算成 SVG 座標；價格全相同時畫在中線"""
    if not prices:
        return []

    low, high = min(prices), max(prices)
    span = high - low
    step = (width - 2 * padding) / max(len(prices) - 1, 1)
    plot_height = height - 2 * padding

    points = []
    for i, price in enumerate(prices):
        x = padding + i * step
        ratio = (price - low) / span if span else 0.5
        y = height - padding - ratio * plot_height
        points.append((round(x, 1), round(y, 1)))
    return points


def render_price_line_chart(series: EmbeddedSeries, title: str = "近期股價走勢") -> str:
    """渲染靜態收盤價折線圖

    Args:
        series: 股價序列（至少 2 點才會由 renderer 產生）
        title: 圖表標題

    Returns:
        HTML 字串
    """
    points = series_points(series.prices)
    polyline = " ".join(f"{x},{y}" for x, y in points)

    first_label = series.labels[0] if series.labels else ""
    last_label = series.labels[-1] if series.labels else ""
    low, high = min(series.prices), max(series.prices)
    color = "#10b981" if series.prices[-1] >= series.prices[0] else "#ef4444"

    return f'''
    <figure class="price-chart" style="margin: 24px 0; padding: 16px; background: #f8fafc; border: 1px solid #e2e8f0; border-radius: 16px;">
        <figcaption style="margin-bottom: 8px; font-size: 14px; font-weight: 700; color: #1e293b;">📈 {escape(title)}</figcaption>
        <svg viewBox="0 0 {SVG_WIDTH} {SVG_HEIGHT}" width="100%" role="img" aria-label="{escape(title)}">
            <polyline fill="none" stroke="{color}" stroke-width="2.5" stroke-linejoin="round" points="{polyline}" />
            <text x="{SVG_PADDING}" y="{SVG_HEIGHT - 8}" font-size="12" fill="#64748b">{escape(first_label)}</text>
            <text x="{SVG_WIDTH - SVG_PADDING}" y="{SVG_HEIGHT - 8}" font-size="12" fill="#64748b" text-anchor="end">{escape(last_label)}</text>
            <text x="{SVG_PADDING}" y="20" font-size="12" fill="#64748b">高 {high:,.2f} / 低 {low:,.2f}</text>
        </svg>
    </figure>
    '''
