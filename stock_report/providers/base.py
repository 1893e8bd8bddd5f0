"""Base analysis provider interface"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


class AnalysisError(Exception):
    """Analysis provider 呼叫失敗（網路、API、回應格式）"""


@dataclass(frozen=True)
class Citation:
    """搜尋引用來源"""

    title: str
    uri: str

    def to_dict(self) -> dict:
        return {"title": self.title, "uri": self.uri}


@dataclass(frozen=True)
class AnalysisResult:
    """Analysis provider 回傳的報告"""

    stock_code: str
    overview: str
    exchange: str = "TWSE"
    source_urls: tuple[Citation, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "stock_code": self.stock_code,
            "overview": self.overview,
            "exchange": self.exchange,
            "source_urls": [c.to_dict() for c in self.source_urls],
        }


class BaseAnalysisProvider(ABC):
    """Analysis provider 基礎類別"""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider 名稱"""
        pass

    @abstractmethod
    def analyze(self, stock_code: str) -> AnalysisResult:
        """產生個股分析報告

        Raises:
            AnalysisError: 任何傳輸或 API 錯誤
        """
        pass

    def close(self) -> None:
        """釋放連線資源"""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
