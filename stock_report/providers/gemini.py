"""Gemini Analysis Provider

透過 Gemini generateContent REST API（啟用 google_search grounding）
產生個股分析報告。

https://ai.google.dev/api/generate-content
"""

import re
import time
from typing import Any, Optional

import httpx

from ..config import DEFAULT_RUNTIME_CONFIG, get_api_key
from ..utils.http import backoff_delay, create_http_client
from ..utils.logging import get_logger
from .base import AnalysisError, AnalysisResult, BaseAnalysisProvider, Citation
from .prompts import EMPTY_REPORT_TEXT, build_analysis_prompt

logger = get_logger(__name__)

_DEFAULTS = DEFAULT_RUNTIME_CONFIG["provider"]

EXCHANGE_PATTERN = re.compile(r"市場別\s*[：:]\s*\**\s*(上櫃|上市|TPEX|TWSE)", re.IGNORECASE)

EXCHANGE_ALIASES = {
    "上市": "TWSE",
    "TWSE": "TWSE",
    "上櫃": "TPEX",
    "TPEX": "TPEX",
}

RETRYABLE_STATUS = {429, 500, 502, 503, 504}


def detect_exchange(text: str, default: str = "TWSE") -> str:
    """從報告中的「市場別」標示判斷上市／上櫃"""
    match = EXCHANGE_PATTERN.search(text)
    if not match:
        return default
    return EXCHANGE_ALIASES[match.group(1).upper()]


def extract_citations(candidate: dict[str, Any]) -> tuple[Citation, ...]:
    """取出 groundingChunks 中的 web 來源（保留順序、去除重複 URI）"""
    chunks = (candidate.get("groundingMetadata") or {}).get("groundingChunks") or []

    citations = []
    seen = set()
    for chunk in chunks:
        web = chunk.get("web")
        if not web or not web.get("uri"):
            continue
        uri = web["uri"]
        if uri in seen:
            continue
        seen.add(uri)
        citations.append(Citation(title=web.get("title") or uri, uri=uri))
    return tuple(citations)


def extract_text(candidate: dict[str, Any]) -> str:
    """合併 candidate 的所有文字 parts"""
    parts = (candidate.get("content") or {}).get("parts") or []
    return "".join(part.get("text", "") for part in parts)


class GeminiAnalysisProvider(BaseAnalysisProvider):
    """Gemini 個股分析"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = _DEFAULTS["model"],
        base_url: str = _DEFAULTS["base_url"],
        timeout: float = _DEFAULTS["timeout"],
        max_retries: int = _DEFAULTS["max_retries"],
        temperature: float = _DEFAULTS["temperature"],
        client: Optional[httpx.Client] = None,
    ):
        """初始化 Gemini provider

        Args:
            api_key: Gemini API key（預設從 GEMINI_API_KEY / API_KEY 讀取）
            model: 模型名稱
            base_url: API base URL
            timeout: 請求超時（秒）；grounded search 常需 1-3 分鐘
            max_retries: 429 / 5xx / 連線錯誤的最大嘗試次數
            temperature: 生成溫度
            client: 外部注入的 httpx.Client（測試用）
        """
        self.api_key = api_key or get_api_key()
        if not self.api_key:
            logger.warning("GEMINI_API_KEY not set")

        self.model = model
        self.base_url = base_url.rstrip("/")
        self.max_retries = max(1, max_retries)
        self.temperature = temperature

        self._owns_client = client is None
        self._client = client or create_http_client(timeout=timeout)

    @classmethod
    def from_config(cls, config: dict, **kwargs: Any) -> "GeminiAnalysisProvider":
        """從 load_runtime_config() 的結果建立"""
        provider_config = config.get("provider", {})
        return cls(
            model=provider_config.get("model", _DEFAULTS["model"]),
            base_url=provider_config.get("base_url", _DEFAULTS["base_url"]),
            timeout=float(provider_config.get("timeout", _DEFAULTS["timeout"])),
            max_retries=int(provider_config.get("max_retries", _DEFAULTS["max_retries"])),
            temperature=float(provider_config.get("temperature", _DEFAULTS["temperature"])),
            **kwargs,
        )

    @property
    def provider_name(self) -> str:
        return "gemini"

    def _build_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "tools": [{"google_search": {}}],
            "generationConfig": {"temperature": self.temperature},
        }

    def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        """POST generateContent，429/5xx 與連線錯誤以指數退避重試"""
        if not self.api_key:
            raise AnalysisError("Gemini API key not configured")

        url = f"{self.base_url}/models/{self.model}:generateContent"
        headers = {"x-goog-api-key": self.api_key}
        last_error: Optional[Exception] = None

        for attempt in range(self.max_retries):
            try:
                response = self._client.post(url, json=payload, headers=headers)
                response.raise_for_status()
                return response.json()

            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                if status not in RETRYABLE_STATUS:
                    logger.error(f"Gemini HTTP error {status}")
                    raise AnalysisError(f"Gemini API returned HTTP {status}") from e
                last_error = e
                logger.warning(f"Gemini HTTP {status}, attempt {attempt + 1}/{self.max_retries}")

            except httpx.RequestError as e:
                last_error = e
                logger.warning(f"Gemini request error: {e}, attempt {attempt + 1}/{self.max_retries}")

            except ValueError as e:
                raise AnalysisError("Gemini returned a non-JSON response") from e

            if attempt < self.max_retries - 1:
                time.sleep(backoff_delay(attempt))

        raise AnalysisError(f"Gemini request failed after {self.max_retries} attempts") from last_error

    def analyze(self, stock_code: str) -> AnalysisResult:
        """產生個股分析報告

        Args:
            stock_code: 台股代碼，如 "2330"

        Returns:
            AnalysisResult

        Raises:
            AnalysisError: API 失敗或回應沒有 candidates
        """
        stock_code = stock_code.strip()
        logger.info(f"Requesting Gemini analysis for {stock_code} (model={self.model})")

        data = self._post(self._build_payload(build_analysis_prompt(stock_code)))

        if not isinstance(data, dict):
            raise AnalysisError(f"Gemini returned unexpected JSON: {type(data).__name__}")

        candidates = data.get("candidates") or []
        if not candidates:
            feedback = data.get("promptFeedback", {})
            raise AnalysisError(f"Gemini returned no candidates: {feedback}")

        try:
            candidate = candidates[0]
            text = extract_text(candidate) or EMPTY_REPORT_TEXT
            citations = extract_citations(candidate)
        except (AttributeError, KeyError, TypeError) as e:
            raise AnalysisError(f"Gemini response has unexpected shape: {e}") from e

        logger.info(f"Gemini analysis for {stock_code}: {len(text)} chars, {len(citations)} sources")

        return AnalysisResult(
            stock_code=stock_code,
            overview=text,
            exchange=detect_exchange(text),
            source_urls=citations,
        )

    def close(self) -> None:
        """關閉 HTTP client"""
        if self._owns_client:
            self._client.close()
