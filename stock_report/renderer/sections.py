"""Section recognition rules

報告段落的辨識依賴 prompt 約定的字串（「技術走勢分析」、「建議買入價格」、
「7.」章節編號等）。這些 matcher 集中在 SectionRules，可由
config/sections.yaml 覆寫，prompt 改版時不必動 scanner。
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

import yaml

from ..config import ConfigError
from ..utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_SECTIONS_PATH = "config/sections.yaml"


@dataclass(frozen=True)
class SectionRules:
    """段落辨識規則"""

    chart_markers: tuple[str, ...] = ("技術走勢分析", "技術面分析")
    strategy_open_markers: tuple[str, ...] = ("建議買入價格", "交易時機")
    strategy_close_prefixes: tuple[str, ...] = ("##",)
    # 比對前先去掉行首的 "*"，"**7. 近期新聞**" 也能命中
    strategy_close_patterns: tuple[str, ...] = (r"^[78]\.",)
    _compiled: tuple[re.Pattern, ...] = field(
        default=(), init=False, repr=False, compare=False, hash=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "_compiled",
            tuple(re.compile(p) for p in self.strategy_close_patterns),
        )

    def is_chart_section(self, trimmed: str) -> bool:
        return any(marker in trimmed for marker in self.chart_markers)

    def opens_strategy(self, trimmed: str) -> bool:
        return any(marker in trimmed for marker in self.strategy_open_markers)

    def closes_strategy(self, trimmed: str) -> bool:
        if trimmed.startswith(self.strategy_close_prefixes):
            return True
        unstarred = trimmed.lstrip("*")
        return any(pattern.match(unstarred) for pattern in self._compiled)


DEFAULT_RULES = SectionRules()

_YAML_KEYS = (
    "chart_markers",
    "strategy_open_markers",
    "strategy_close_prefixes",
    "strategy_close_patterns",
)


def rules_from_dict(data: dict) -> SectionRules:
    """從設定 dict 建立規則，缺少的 key 使用預設值"""
    if not isinstance(data, dict):
        raise ConfigError("sections config must be a mapping")

    overrides = {}
    for key in _YAML_KEYS:
        value = data.get(key)
        if value is None:
            continue
        if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
            raise ConfigError(f"sections.{key} must be a list of strings")
        overrides[key] = tuple(value)

    try:
        return SectionRules(**overrides)
    except re.error as e:
        raise ConfigError(f"Invalid strategy_close_patterns regex: {e}") from e


def load_section_rules(path: Optional[Union[str, Path]] = None) -> SectionRules:
    """載入 config/sections.yaml

    Args:
        path: 設定檔路徑，預設 config/sections.yaml

    Returns:
        SectionRules（預設路徑不存在時回傳預設規則）

    Raises:
        ConfigError: 指定的檔案不存在或格式錯誤
    """
    config_path = Path(path or DEFAULT_SECTIONS_PATH)
    if not config_path.exists():
        if path is not None:
            raise ConfigError(f"Section rules file not found: {config_path}")
        logger.debug(f"Section rules not found at {config_path}, using defaults")
        return DEFAULT_RULES

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Cannot parse {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping")
    return rules_from_dict(data.get("sections", data))
