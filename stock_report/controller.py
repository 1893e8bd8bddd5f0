"""Search controller

單一請求的狀態機：IDLE → LOADING → SUCCESS / ERROR，
SUCCESS / ERROR 可再次 search 回到 LOADING。

同一時間只允許一個請求；LOADING 中再次 search 不做任何事。
reset() 會遞增 request token，已被取代的回應抵達時直接丟棄。
"""

import asyncio
from enum import Enum
from typing import Optional

from .providers.base import AnalysisError, AnalysisResult, BaseAnalysisProvider
from .renderer import Document, render_cached
from .renderer.sections import DEFAULT_RULES, SectionRules
from .utils.logging import get_logger

logger = get_logger(__name__)

ANALYSIS_ERROR_MESSAGE = "分析過程發生錯誤。這可能是由於網路問題或 API 限制，請稍後再試。"


class RequestStatus(Enum):
    IDLE = "IDLE"
    LOADING = "LOADING"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


class SearchController:
    """個股搜尋控制器"""

    def __init__(self, provider: BaseAnalysisProvider, rules: SectionRules = DEFAULT_RULES):
        self.provider = provider
        self.rules = rules
        self.status = RequestStatus.IDLE
        self.result: Optional[AnalysisResult] = None
        self.error: Optional[str] = None
        self._token = 0

    @property
    def is_loading(self) -> bool:
        return self.status is RequestStatus.LOADING

    @property
    def document(self) -> Optional[Document]:
        """目前結果的渲染 Document（memoized）"""
        if self.result is None:
            return None
        return render_cached(
            self.result.overview,
            self.result.stock_code,
            self.result.exchange,
            self.rules,
        )

    def reset(self) -> None:
        """回到 IDLE，並使進行中的請求失效"""
        self._token += 1
        self.status = RequestStatus.IDLE
        self.result = None
        self.error = None

    async def search(self, stock_code: str) -> bool:
        """送出分析請求

        Args:
            stock_code: 股票代碼

        Returns:
            是否有套用新的狀態（空白代碼、LOADING 中或回應已被取代時為 False）
        """
        stock_code = stock_code.strip()
        if not stock_code or self.is_loading:
            return False

        self._token += 1
        token = self._token
        self.status = RequestStatus.LOADING
        self.error = None

        try:
            result = await asyncio.to_thread(self.provider.analyze, stock_code)
        except Exception as e:
            if token != self._token:
                logger.info(f"Discarding superseded failure for {stock_code}")
                return False
            if isinstance(e, AnalysisError):
                logger.error(f"Analysis failed for {stock_code}: {e}")
            else:
                # 非預期錯誤也要離開 LOADING，否則之後的 search 都會被忽略
                logger.exception(f"Unexpected error while analyzing {stock_code}")
            self.result = None
            self.error = ANALYSIS_ERROR_MESSAGE
            self.status = RequestStatus.ERROR
            return True

        if token != self._token:
            logger.info(f"Discarding superseded response for {stock_code}")
            return False

        self.result = result
        self.status = RequestStatus.SUCCESS
        return True
