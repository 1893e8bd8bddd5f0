"""Content blocks - 報告渲染輸出單位

Renderer 將 LLM 報告文字轉成一串有序的 block，交給 writers 轉成 HTML。
所有 block 皆為 frozen dataclass，產生後不可變更，整份 Document 可 hash，
方便以 (raw_text, stock_code, exchange) 做 memoize。
"""

from dataclasses import dataclass, field
from typing import Literal, Optional, Union

Exchange = Literal["TWSE", "TPEX"]

EXCHANGES: tuple[str, ...] = ("TWSE", "TPEX")


@dataclass(frozen=True)
class EmbeddedSeries:
    """[DATA_START]...[DATA_END] 內的股價序列"""

    labels: tuple[str, ...] = ()
    prices: tuple[float, ...] = ()

    def to_dict(self) -> dict:
        return {
            "labels": list(self.labels),
            "prices": list(self.prices),
        }


@dataclass(frozen=True)
class Heading:
    """標題（level 1-3）"""

    level: int
    text: str
    kind: str = field(default="heading", init=False)

    def to_dict(self) -> dict:
        return {"kind": self.kind, "level": self.level, "text": self.text}


@dataclass(frozen=True)
class Paragraph:
    """段落，text 保留原始（未 trim）行內容"""

    text: str
    emphasized: bool = False
    kind: str = field(default="paragraph", init=False)

    def to_dict(self) -> dict:
        return {"kind": self.kind, "text": self.text, "emphasized": self.emphasized}


@dataclass(frozen=True)
class BulletItem:
    """條列項目"""

    text: str
    emphasized: bool = False
    kind: str = field(default="bullet", init=False)

    def to_dict(self) -> dict:
        return {"kind": self.kind, "text": self.text, "emphasized": self.emphasized}


@dataclass(frozen=True)
class Table:
    """Pipe 表格；列的欄位數不一定一致"""

    header_row: tuple[str, ...]
    body_rows: tuple[tuple[str, ...], ...] = ()
    kind: str = field(default="table", init=False)

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "header_row": list(self.header_row),
            "body_rows": [list(row) for row in self.body_rows],
        }


@dataclass(frozen=True)
class ChartAnchor:
    """互動式技術線圖的插入點"""

    symbol: str
    exchange: str
    kind: str = field(default="chart_anchor", init=False)

    def to_dict(self) -> dict:
        return {"kind": self.kind, "symbol": self.symbol, "exchange": self.exchange}


@dataclass(frozen=True)
class ChartData:
    """靜態走勢圖資料（備援圖表）"""

    series: EmbeddedSeries
    kind: str = field(default="chart_data", init=False)

    def to_dict(self) -> dict:
        return {"kind": self.kind, "series": self.series.to_dict()}


@dataclass(frozen=True)
class BuyStrategyBlock:
    """建議買入價格／交易時機的強調區塊"""

    children: tuple["ContentBlock", ...]
    title: str = ""
    # 開頭行是 markdown heading 時的層級，否則為 None
    title_level: Optional[int] = None
    kind: str = field(default="buy_strategy", init=False)

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "title": self.title,
            "title_level": self.title_level,
            "children": [child.to_dict() for child in self.children],
        }


ContentBlock = Union[
    Heading,
    Paragraph,
    BulletItem,
    Table,
    ChartAnchor,
    ChartData,
    BuyStrategyBlock,
]

Document = tuple[ContentBlock, ...]


def document_to_dicts(document: Document) -> list[dict]:
    """Document 轉成可 JSON 序列化的 list"""
    return [block.to_dict() for block in document]
