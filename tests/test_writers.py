"""Tests for HTML writers"""

from datetime import datetime
from zoneinfo import ZoneInfo

from stock_report.providers.base import AnalysisResult, Citation
from stock_report.renderer import (
    BulletItem,
    BuyStrategyBlock,
    ChartAnchor,
    ChartData,
    EmbeddedSeries,
    Heading,
    Paragraph,
    Table,
    render,
)
from stock_report.writers.chart_components import (
    render_chart_widget,
    render_price_line_chart,
    series_points,
    tradingview_symbol,
)
from stock_report.writers.html_components import quote_urls, render_data_table, render_source_list
from stock_report.writers.page_renderer import render_block, render_document, render_report_page


class TestRenderBlock:
    def test_heading_levels(self):
        assert render_block(Heading(level=1, text="標題")).startswith("<h1")
        assert "<h3" in render_block(Heading(level=3, text="小節"))

    def test_text_is_escaped(self):
        html = render_block(Paragraph(text="<script>alert(1)</script>"))

        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_emphasized_paragraph_styled(self):
        plain = render_block(Paragraph(text="文字"))
        emphasized = render_block(Paragraph(text="文字", emphasized=True))

        assert plain != emphasized
        assert "font-weight: 600" in emphasized

    def test_bullet(self):
        html = render_block(BulletItem(text="第一點"))

        assert "第一點" in html

    def test_table(self):
        html = render_block(Table(header_row=("年度", "EPS"), body_rows=(("2023", "32.3"),)))

        assert html.count("<th") == 2
        assert html.count("<td") == 2
        assert "32.3" in html

    def test_ragged_table_not_padded(self):
        html = render_data_table(("a", "b", "c"), [("1",), ("1", "2", "3", "4")])

        assert html.count("<td") == 5

    def test_chart_anchor(self):
        html = render_block(ChartAnchor(symbol="6488", exchange="TPEX"))

        assert '"symbol": "TPEX:6488"' in html
        assert "tradingview" in html

    def test_chart_data(self):
        series = EmbeddedSeries(labels=("1月", "2月"), prices=(100.0, 110.0))

        html = render_block(ChartData(series=series))

        assert "<svg" in html
        assert "<polyline" in html
        assert "1月" in html and "2月" in html

    def test_buy_strategy(self):
        block = BuyStrategyBlock(
            children=(BulletItem(text="600 元", emphasized=True),),
            title="建議買入價格",
        )

        html = render_block(block)

        assert 'class="buy-strategy"' in html
        assert "建議買入價格" in html
        assert "600 元" in html

    def test_buy_strategy_heading_title(self):
        block = BuyStrategyBlock(
            children=(Paragraph(text="逢低布局", emphasized=True),),
            title="6. 交易時機",
            title_level=2,
        )

        html = render_block(block)

        assert "<h2" in html
        assert "🎯 6. 交易時機</h2>" in html


class TestChartComponents:
    def test_tradingview_symbol(self):
        assert tradingview_symbol("2330", "TWSE") == "TWSE:2330"

    def test_widget_escapes_script_close(self):
        html = render_chart_widget("</script>", "TWSE")

        assert html.count("</script>") == 1

    def test_series_points_span_plot(self):
        points = series_points((10.0, 20.0), width=100, height=100, padding=10)

        assert points == [(10.0, 90.0), (90.0, 10.0)]

    def test_flat_series_centered(self):
        points = series_points((5.0, 5.0, 5.0), width=100, height=100, padding=10)

        assert {y for _, y in points} == {50.0}

    def test_falling_series_red(self):
        html = render_price_line_chart(EmbeddedSeries(labels=(), prices=(2.0, 1.0)))

        assert "#ef4444" in html


class TestReportPage:
    def test_full_page(self, sample_report):
        result = AnalysisResult(
            stock_code="2330",
            overview=sample_report,
            exchange="TWSE",
            source_urls=(Citation(title="鉅亨網", uri="https://news.cnyes.com/a"),),
        )
        document = render(sample_report, "2330", "TWSE")
        generated_at = datetime(2025, 1, 5, 9, 30, tzinfo=ZoneInfo("Asia/Taipei"))

        html = render_report_page(result, document, generated_at=generated_at)

        assert html.startswith("<!DOCTYPE html>")
        assert "市場標的：2330" in html
        assert "報告日期：2025/1/5" in html
        assert "@media print" in html
        assert "引用來源 (1)" in html
        assert "https://news.cnyes.com/a" in html
        assert "https://tw.stock.yahoo.com/quote/2330.TW" in html
        assert "【重要法律聲明】" in html

    def test_document_only(self):
        html = render_document((Heading(level=2, text="章節"), Paragraph(text="內容")))

        assert html.startswith('<div class="analysis-report">')
        assert html.index("章節") < html.index("內容")

    def test_no_sources_section_when_empty(self):
        assert render_source_list(()) == ""

    def test_tpex_quote_urls(self):
        urls = quote_urls("6488", "TPEX")

        assert urls["yahoo"] == "https://tw.stock.yahoo.com/quote/6488.TWO"
        assert urls["tradingview"] == "https://www.tradingview.com/symbols/TPEX-6488/"
