"""台股 AI 智慧分析 - LLM 報告渲染器"""

__version__ = "0.1.0"
