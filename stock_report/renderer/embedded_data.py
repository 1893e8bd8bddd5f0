"""Embedded data block extraction

LLM 報告中可夾帶一段 `[DATA_START]{...}[DATA_END]` 的 JSON 股價序列，
供靜態走勢圖使用。解析失敗一律視為「沒有序列」，絕不中斷渲染。
"""

import json
import math
import re
from typing import Optional

import jsonschema

from ..utils.logging import get_logger
from .blocks import EmbeddedSeries

logger = get_logger(__name__)

DATA_BLOCK_PATTERN = re.compile(r"\[DATA_START\]([\s\S]*?)\[DATA_END\]")

SERIES_SCHEMA = {
    "type": "object",
    "required": ["labels", "prices"],
    "properties": {
        "labels": {"type": "array", "items": {"type": "string"}},
        "prices": {"type": "array", "items": {"type": "number"}},
    },
}


def parse_series(payload: str) -> Optional[EmbeddedSeries]:
    """解析 data block 內文

    Args:
        payload: [DATA_START] 與 [DATA_END] 之間的文字

    Returns:
        EmbeddedSeries，格式不符時回傳 None
    """
    try:
        data = json.loads(payload)
        jsonschema.validate(data, SERIES_SCHEMA)
        prices = tuple(float(p) for p in data["prices"])
    except jsonschema.ValidationError as e:
        logger.debug(f"Embedded data has wrong shape: {e.message}")
        return None
    # JSONDecodeError 是 ValueError；超長整數、過深巢狀也在這裡擋下
    except (ValueError, OverflowError, RecursionError) as e:
        logger.debug(f"Embedded data is not usable JSON: {type(e).__name__}: {e}")
        return None

    if not all(math.isfinite(p) for p in prices):
        logger.debug("Embedded data has non-finite prices")
        return None

    return EmbeddedSeries(labels=tuple(data["labels"]), prices=prices)


def extract_embedded_series(raw_text: str) -> tuple[str, Optional[EmbeddedSeries]]:
    """抽出第一個 data block

    整段（含標記）會從文字中移除，不論內文能否解析；第二段以後的
    data block 保持原樣。

    Args:
        raw_text: LLM 原始報告

    Returns:
        (cleaned_text, series)
    """
    match = DATA_BLOCK_PATTERN.search(raw_text)
    if not match:
        return raw_text, None

    cleaned = raw_text[: match.start()] + raw_text[match.end():]
    return cleaned, parse_series(match.group(1))
