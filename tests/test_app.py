"""Tests for the CLI"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from stock_report.app import block_summary, cli
from stock_report.providers.base import AnalysisError, AnalysisResult, BaseAnalysisProvider
from stock_report.renderer.blocks import ChartAnchor, Table

SAMPLE_REPORT_PATH = Path(__file__).parent / "fixtures" / "sample_report.txt"


class FakeProvider(BaseAnalysisProvider):
    def __init__(self, overview: str, error: Exception = None):
        self.overview = overview
        self.error = error

    @property
    def provider_name(self) -> str:
        return "fake"

    def analyze(self, stock_code: str) -> AnalysisResult:
        if self.error:
            raise self.error
        return AnalysisResult(stock_code=stock_code, overview=self.overview, exchange="TPEX")


@pytest.fixture
def runner(tmp_path, monkeypatch):
    # 在空目錄執行，使用預設設定
    monkeypatch.chdir(tmp_path)
    return CliRunner()


class TestRenderCommand:
    def test_render_html(self, runner, tmp_path):
        output = tmp_path / "report.html"

        result = runner.invoke(cli, ["render", str(SAMPLE_REPORT_PATH), "--code", "2330", "-o", str(output)])

        assert result.exit_code == 0, result.output
        html = output.read_text(encoding="utf-8")
        assert html.startswith("<!DOCTYPE html>")
        assert "buy-strategy" in html
        assert "TWSE:2330" in html

    def test_render_json(self, runner, tmp_path):
        output = tmp_path / "report.json"

        result = runner.invoke(
            cli,
            ["render", str(SAMPLE_REPORT_PATH), "--code", "2330", "--format", "json", "-o", str(output)],
        )

        assert result.exit_code == 0, result.output
        payload = json.loads(output.read_text(encoding="utf-8"))
        assert payload["analysis"]["stock_code"] == "2330"
        assert len(payload["document"]) == 20
        assert payload["document"][15]["kind"] == "buy_strategy"
        assert "generated_at" in payload

    def test_render_default_output_dir(self, runner, tmp_path):
        result = runner.invoke(cli, ["render", str(SAMPLE_REPORT_PATH), "--code", "2330"])

        assert result.exit_code == 0, result.output
        written = list((tmp_path / "out").glob("2330_*.html"))
        assert len(written) == 1

    def test_render_rejects_unknown_exchange(self, runner):
        result = runner.invoke(cli, ["render", str(SAMPLE_REPORT_PATH), "--code", "2330", "--exchange", "NYSE"])

        assert result.exit_code != 0

    def test_render_bad_sections_file(self, runner, tmp_path):
        sections = tmp_path / "sections.yaml"
        sections.write_text("sections:\n  chart_markers: 技術面\n", encoding="utf-8")

        result = runner.invoke(
            cli,
            ["render", str(SAMPLE_REPORT_PATH), "--code", "2330", "--sections", str(sections)],
        )

        assert result.exit_code == 1


class TestInitCommand:
    def test_init(self, runner):
        result = runner.invoke(cli, ["init"])

        assert result.exit_code == 0, result.output
        assert "Initialization complete" in result.output

    def test_init_missing_sections_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["init", "--sections", str(tmp_path / "missing.yaml")])

        assert result.exit_code == 1
        assert "Section rules file not found" in result.output
        assert "Initialization complete" not in result.output


class TestInspectCommand:
    def test_inspect(self, runner):
        result = runner.invoke(cli, ["inspect", str(SAMPLE_REPORT_PATH), "--code", "2330"])

        assert result.exit_code == 0, result.output
        assert "2330" in result.output
        assert "buy_strategy" in result.output


class TestAnalyzeCommand:
    def test_analyze_writes_report(self, runner, tmp_path, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        provider = FakeProvider("市場別：上櫃\n## 4. 技術走勢分析\n內容")

        with patch("stock_report.app.GeminiAnalysisProvider.from_config", return_value=provider):
            result = runner.invoke(cli, ["analyze", "6488", "-o", str(tmp_path / "reports"), "--format", "json"])

        assert result.exit_code == 0, result.output
        written = list((tmp_path / "reports").glob("6488_*.json"))
        assert len(written) == 1
        payload = json.loads(written[0].read_text(encoding="utf-8"))
        assert payload["analysis"]["exchange"] == "TPEX"
        assert payload["document"][2] == {"kind": "chart_anchor", "symbol": "6488", "exchange": "TPEX"}

    def test_analyze_failure_exits(self, runner, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        provider = FakeProvider("", error=AnalysisError("HTTP 503"))

        with patch("stock_report.app.GeminiAnalysisProvider.from_config", return_value=provider):
            result = runner.invoke(cli, ["analyze", "2330"])

        assert result.exit_code == 1

    def test_analyze_requires_api_key(self, runner, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.delenv("API_KEY", raising=False)

        result = runner.invoke(cli, ["analyze", "2330"])

        assert result.exit_code == 1
        assert "GEMINI_API_KEY" in result.output


def test_block_summary():
    assert block_summary(ChartAnchor(symbol="2330", exchange="TWSE")) == "TWSE:2330"
    assert block_summary(Table(header_row=("a", "b"), body_rows=(("1", "2"),))) == "2 cols × 1 rows"
