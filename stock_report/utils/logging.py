"""Logging utilities

CLI 輸出走 rich console（stdout），log 一律寫到 stderr，
--log-format json 時改為一行一筆 JSON，方便排程環境收集。
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

JSON_LINE_FORMAT = (
    '{"time": "%(asctime)s", "level": "%(levelname)s", '
    '"logger": "%(name)s", "message": "%(message)s"}'
)

# httpx 每個 request 都打 INFO，會淹沒報告進度
NOISY_LOGGERS = ("httpx", "httpcore")


def _console_handler(log_format: str) -> tuple[logging.Handler, str]:
    if log_format == "rich":
        handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_path=False,
            markup=False,
        )
        return handler, "%(message)s"
    return logging.StreamHandler(sys.stderr), JSON_LINE_FORMAT


def setup_logging(
    level: str = "INFO",
    log_format: str = "rich",
    log_file: Optional[Path] = None,
) -> None:
    """設定 root logger

    Args:
        level: DEBUG / INFO / WARNING / ERROR
        log_format: "rich" 或 "json"
        log_file: 另外寫一份 JSON lines log
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    console_handler, format_str = _console_handler(log_format)
    console_handler.setFormatter(logging.Formatter(format_str))
    handlers: list[logging.Handler] = [console_handler]

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(JSON_LINE_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(level=log_level, handlers=handlers, force=True)

    quiet_level = logging.DEBUG if log_level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
