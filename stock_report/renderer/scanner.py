"""Report line scanner

單次掃描的狀態機，把清理後的報告逐行轉成 ContentBlock。

狀態：
- NORMAL: 一般內容直接進入主文件
- IN_TABLE: 正在累積 pipe 表格列
- IN_BUY_STRATEGY: 買入策略擷取中，內容改寫入 side buffer
- IN_BUY_STRATEGY_IN_TABLE: 擷取中且正在累積表格

每行處理順序：
1. 表格列 → 累積，結束
2. 非表格列 → 先 flush 表格
3. 擷取中且符合結束條件 → 收束 BuyStrategyBlock，同一行繼續往下處理
4. 技術分析段落 → 插入 heading + ChartAnchor (+ ChartData)，結束
5. 符合買入策略開頭 → 進入擷取，結束
6. heading / bullet / 空行 / paragraph 分類
"""

from enum import Enum
from typing import Optional, Sequence

from ..utils.logging import get_logger
from ..utils.text import strip_markers
from .blocks import (
    BulletItem,
    BuyStrategyBlock,
    ChartAnchor,
    ChartData,
    ContentBlock,
    Document,
    EmbeddedSeries,
    Heading,
    Paragraph,
    Table,
)
from .sections import DEFAULT_RULES, SectionRules

logger = get_logger(__name__)

SEPARATOR_MARK = "---"
MIN_CHART_POINTS = 2


class ScanMode(Enum):
    NORMAL = "normal"
    IN_TABLE = "in_table"
    IN_BUY_STRATEGY = "in_buy_strategy"
    IN_BUY_STRATEGY_IN_TABLE = "in_buy_strategy_in_table"

    @property
    def in_table(self) -> bool:
        return self in (ScanMode.IN_TABLE, ScanMode.IN_BUY_STRATEGY_IN_TABLE)

    @property
    def capturing(self) -> bool:
        return self in (ScanMode.IN_BUY_STRATEGY, ScanMode.IN_BUY_STRATEGY_IN_TABLE)


def is_table_row(trimmed: str) -> bool:
    return trimmed.startswith("|") and trimmed.endswith("|")


def split_table_row(line: str) -> tuple[str, ...]:
    """切割表格列

    以 "|" 切開後去掉頭尾兩個欄位（行首行尾分隔符產生的），
    中間的空欄位保留為空字串。

    >>> split_table_row("| a | b |")
    ('a', 'b')
    """
    fields = line.split("|")
    return tuple(cell.strip() for cell in fields[1:-1])


def is_separator_row(row: Sequence[str]) -> bool:
    return any(SEPARATOR_MARK in cell for cell in row)


def build_table(rows: Sequence[tuple[str, ...]]) -> Table:
    """第一列為表頭，其餘列去掉 markdown 分隔列後為內容"""
    header, *rest = rows
    body = tuple(row for row in rest if not is_separator_row(row))
    return Table(header_row=header, body_rows=body)


def heading_level(trimmed: str) -> Optional[int]:
    """Markdown heading 層級（###、##、"# " 對應 3、2、1），不是 heading 時為 None"""
    if trimmed.startswith("###"):
        return 3
    if trimmed.startswith("##"):
        return 2
    if trimmed.startswith("# "):
        return 1
    return None


def classify_line(line: str, trimmed: str, emphasized: bool = False) -> Optional[ContentBlock]:
    """單行分類（不含表格、圖表、買入策略規則）

    Args:
        line: 原始行
        trimmed: 去頭尾空白後的行
        emphasized: 是否在買入策略區塊內

    Returns:
        ContentBlock，空行回傳 None
    """
    level = heading_level(trimmed)
    if level is not None:
        return Heading(level=level, text=trimmed[level:].strip())
    if trimmed.startswith(("-", "*")):
        return BulletItem(text=trimmed[1:].strip(), emphasized=emphasized)
    if not trimmed:
        return None
    return Paragraph(text=line, emphasized=emphasized)


class ReportScanner:
    """報告掃描器

    Usage:
        scanner = ReportScanner("2330", "TWSE", series=series)
        for line in text.split("\\n"):
            scanner.feed(line)
        document = scanner.finish()
    """

    def __init__(
        self,
        stock_code: str,
        exchange: str,
        series: Optional[EmbeddedSeries] = None,
        rules: SectionRules = DEFAULT_RULES,
    ):
        self.stock_code = stock_code
        self.exchange = exchange
        self.series = series
        self.rules = rules

        self.mode = ScanMode.NORMAL
        self.table_rows: list[tuple[str, ...]] = []
        self.strategy_buffer: list[ContentBlock] = []
        self.strategy_title = ""
        self.strategy_title_level: Optional[int] = None
        self._document: list[ContentBlock] = []

    # ------------------------------------------------------------------
    # 狀態轉移
    # ------------------------------------------------------------------

    def _append_table_row(self, line: str) -> None:
        self.table_rows.append(split_table_row(line))
        if self.mode is ScanMode.NORMAL:
            self.mode = ScanMode.IN_TABLE
        elif self.mode is ScanMode.IN_BUY_STRATEGY:
            self.mode = ScanMode.IN_BUY_STRATEGY_IN_TABLE

    def _flush_table(self) -> None:
        if not self.mode.in_table:
            return
        table = build_table(self.table_rows)
        self.table_rows = []
        self.mode = ScanMode.IN_BUY_STRATEGY if self.mode.capturing else ScanMode.NORMAL
        self._emit(table)

    def _open_strategy(self, trimmed: str) -> None:
        self._flush_table()
        self.strategy_title = strip_markers(trimmed)
        self.strategy_title_level = heading_level(trimmed)
        self.strategy_buffer = []
        self.mode = ScanMode.IN_BUY_STRATEGY
        logger.debug(f"Buy strategy capture opened: {self.strategy_title}")

    def _close_strategy(self) -> None:
        self._flush_table()
        if self.strategy_buffer:
            self._document.append(
                BuyStrategyBlock(
                    children=tuple(self.strategy_buffer),
                    title=self.strategy_title,
                    title_level=self.strategy_title_level,
                )
            )
        else:
            logger.debug("Buy strategy capture closed with no content")
        self.strategy_buffer = []
        self.strategy_title = ""
        self.strategy_title_level = None
        self.mode = ScanMode.NORMAL

    # ------------------------------------------------------------------
    # 輸出
    # ------------------------------------------------------------------

    def _emit(self, block: ContentBlock) -> None:
        if self.mode.capturing:
            self.strategy_buffer.append(block)
        else:
            self._document.append(block)

    def _inject_chart(self, trimmed: str) -> None:
        # 圖表固定放在主文件，不進入買入策略區塊
        self._document.append(Heading(level=2, text=strip_markers(trimmed, "#")))
        self._document.append(ChartAnchor(symbol=self.stock_code, exchange=self.exchange))
        if self.series is not None and len(self.series.prices) >= MIN_CHART_POINTS:
            self._document.append(ChartData(series=self.series))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def feed(self, line: str) -> None:
        """處理一行"""
        trimmed = line.strip()

        if is_table_row(trimmed):
            self._append_table_row(line)
            return

        self._flush_table()

        if self.mode.capturing and self.rules.closes_strategy(trimmed):
            self._close_strategy()

        if self.rules.is_chart_section(trimmed):
            self._inject_chart(trimmed)
            return

        if not self.mode.capturing and self.rules.opens_strategy(trimmed):
            self._open_strategy(trimmed)
            return

        block = classify_line(line, trimmed, emphasized=self.mode.capturing)
        if block is not None:
            self._emit(block)

    def finish(self) -> Document:
        """結束掃描，flush 未完成的表格與買入策略區塊"""
        self._flush_table()
        if self.mode.capturing:
            self._close_strategy()
        return tuple(self._document)
