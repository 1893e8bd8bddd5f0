"""Analysis providers"""

from .base import AnalysisError, AnalysisResult, BaseAnalysisProvider, Citation
from .gemini import GeminiAnalysisProvider, detect_exchange

__all__ = [
    "AnalysisError",
    "AnalysisResult",
    "BaseAnalysisProvider",
    "Citation",
    "GeminiAnalysisProvider",
    "detect_exchange",
]
