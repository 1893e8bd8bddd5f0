"""Tests for section recognition rules"""

import pytest

from stock_report.config import ConfigError
from stock_report.renderer import render
from stock_report.renderer.sections import (
    DEFAULT_RULES,
    SectionRules,
    load_section_rules,
    rules_from_dict,
)


class TestDefaultRules:
    @pytest.mark.parametrize("line", ["## 4. 技術走勢分析", "技術面分析：偏多"])
    def test_chart_markers(self, line):
        assert DEFAULT_RULES.is_chart_section(line)

    def test_chart_marker_missing(self):
        assert not DEFAULT_RULES.is_chart_section("## 4. 技術分析")

    @pytest.mark.parametrize("line", ["建議買入價格：600 元", "## 6. 交易時機"])
    def test_strategy_open(self, line):
        assert DEFAULT_RULES.opens_strategy(line)

    @pytest.mark.parametrize("line", [
        "## 7. 新聞",
        "### 小節",
        "7. 近一個月新聞",
        "8.股利",
        "**7. 新聞**",
    ])
    def test_strategy_close(self, line):
        assert DEFAULT_RULES.closes_strategy(line)

    @pytest.mark.parametrize("line", [
        "# 標題",
        "6. 交易時機",
        "78. 其他",
        "- 7. 項目",
        "第7.點",
    ])
    def test_strategy_not_closed(self, line):
        assert not DEFAULT_RULES.closes_strategy(line)

    def test_rules_are_hashable(self):
        assert hash(SectionRules()) == hash(DEFAULT_RULES)
        assert SectionRules() == DEFAULT_RULES


class TestRulesFromDict:
    def test_partial_override(self):
        rules = rules_from_dict({"chart_markers": ["K線分析"]})

        assert rules.chart_markers == ("K線分析",)
        assert rules.strategy_open_markers == DEFAULT_RULES.strategy_open_markers

    def test_invalid_regex(self):
        with pytest.raises(ConfigError):
            rules_from_dict({"strategy_close_patterns": ["[unclosed"]})

    @pytest.mark.parametrize("value", ["技術面", [1, 2]])
    def test_invalid_marker_list(self, value):
        with pytest.raises(ConfigError):
            rules_from_dict({"chart_markers": value})

    def test_not_a_mapping(self):
        with pytest.raises(ConfigError):
            rules_from_dict(["chart_markers"])

    def test_custom_rules_drive_render(self):
        rules = rules_from_dict({
            "chart_markers": ["K線"],
            "strategy_open_markers": ["進場策略"],
            "strategy_close_patterns": [r"^9\."],
        })
        text = "## K線\n進場策略\n- 600 元\n9. 附錄"

        document = render(text, "2330", "TWSE", rules)

        assert [block.kind for block in document] == ["heading", "chart_anchor", "buy_strategy", "paragraph"]


class TestLoadSectionRules:
    def test_missing_default_file_uses_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        assert load_section_rules() is DEFAULT_RULES

    def test_explicit_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_section_rules(tmp_path / "missing.yaml")

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "sections.yaml"
        path.write_text(
            "sections:\n"
            "  chart_markers:\n"
            "    - 技術指標\n"
            "  strategy_close_patterns:\n"
            "    - '^[9]\\.'\n",
            encoding="utf-8",
        )

        rules = load_section_rules(path)

        assert rules.chart_markers == ("技術指標",)
        assert rules.closes_strategy("9. 結論")
        assert not rules.closes_strategy("7. 新聞")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "sections.yaml"
        path.write_text("sections: [unclosed", encoding="utf-8")

        with pytest.raises(ConfigError):
            load_section_rules(path)

    def test_repository_config_matches_defaults(self):
        from pathlib import Path

        path = Path(__file__).parent.parent / "config" / "sections.yaml"

        assert load_section_rules(path) == DEFAULT_RULES
