"""Time utilities"""

from datetime import datetime
from zoneinfo import ZoneInfo

DEFAULT_TZ = "Asia/Taipei"


def get_now(tz: str = DEFAULT_TZ) -> datetime:
    """Get current datetime in the given timezone (Taipei by default)."""
    return datetime.now(ZoneInfo(tz))


def format_datetime(dt: datetime, fmt: str = "iso") -> str:
    """Format datetime to string.

    Args:
        dt: Datetime object
        fmt: Format type ('iso', 'date', 'zh', 'stamp') or a strftime pattern

    Returns:
        Formatted datetime string
    """
    if fmt == "zh":
        # 報告日期 uses the zh-TW short form, e.g. 2025/1/5
        return f"{dt.year}/{dt.month}/{dt.day}"

    formats = {
        "iso": "%Y-%m-%dT%H:%M:%S%z",
        "date": "%Y-%m-%d",
        "stamp": "%Y%m%d_%H%M%S",
    }
    return dt.strftime(formats.get(fmt, fmt))
