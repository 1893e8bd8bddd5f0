"""Shared pytest fixtures"""

from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SAMPLE_REPORT_PATH = FIXTURES_DIR / "sample_report.txt"


@pytest.fixture
def sample_report() -> str:
    """載入範例 LLM 報告"""
    return SAMPLE_REPORT_PATH.read_text(encoding="utf-8")
