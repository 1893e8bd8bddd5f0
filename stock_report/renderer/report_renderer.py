"""Report Renderer

render() 是純函式：相同輸入永遠得到相同 Document，沒有 I/O。
"""

from functools import lru_cache

from ..utils.logging import get_logger
from .blocks import Document
from .embedded_data import extract_embedded_series
from .scanner import ReportScanner
from .sections import DEFAULT_RULES, SectionRules

logger = get_logger(__name__)


def render(
    raw_text: str,
    stock_code: str,
    exchange: str,
    rules: SectionRules = DEFAULT_RULES,
) -> Document:
    """將 LLM 報告文字轉成 Document

    Args:
        raw_text: Analysis provider 回傳的原始報告
        stock_code: 股票代碼（ChartAnchor 的 symbol）
        exchange: "TWSE" 或 "TPEX"
        rules: 段落辨識規則

    Returns:
        有序的 ContentBlock tuple
    """
    cleaned, series = extract_embedded_series(raw_text)

    scanner = ReportScanner(stock_code, exchange, series=series, rules=rules)
    for line in cleaned.split("\n"):
        scanner.feed(line)

    document = scanner.finish()
    logger.debug(f"Rendered {stock_code}: {len(document)} blocks, series={'yes' if series else 'no'}")
    return document


@lru_cache(maxsize=32)
def render_cached(
    raw_text: str,
    stock_code: str,
    exchange: str,
    rules: SectionRules = DEFAULT_RULES,
) -> Document:
    """render() 的 memoized 版本"""
    return render(raw_text, stock_code, exchange, rules)
