"""Runtime configuration

config/runtime.yaml 覆寫程式內預設值，環境變數再覆寫 YAML。
"""

import copy
import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from .utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_RUNTIME_PATH = "config/runtime.yaml"

DEFAULT_RUNTIME_CONFIG: dict[str, Any] = {
    "provider": {
        "name": "gemini",
        "model": "gemini-2.5-pro",
        "base_url": "https://generativelanguage.googleapis.com/v1beta",
        "timeout": 180.0,
        "max_retries": 3,
        "temperature": 0.4,
    },
    "output": {
        "dir": "out",
        "format": "html",
    },
    "report": {
        "timezone": "Asia/Taipei",
    },
}

# 環境變數 → (section, key, type)
ENV_OVERRIDES = {
    "GEMINI_MODEL": ("provider", "model", str),
    "GEMINI_BASE_URL": ("provider", "base_url", str),
    "GEMINI_TIMEOUT": ("provider", "timeout", float),
    "GEMINI_MAX_RETRIES": ("provider", "max_retries", int),
    "REPORT_OUTPUT_DIR": ("output", "dir", str),
}


class ConfigError(Exception):
    """設定檔讀取或格式錯誤"""


def deep_merge(base: dict, override: dict) -> dict:
    """遞迴合併 dict，override 優先"""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _apply_env_overrides(config: dict) -> dict:
    for env_name, (section, key, cast) in ENV_OVERRIDES.items():
        raw = os.getenv(env_name)
        if raw is None or raw == "":
            continue
        try:
            config[section][key] = cast(raw)
        except ValueError as e:
            raise ConfigError(f"{env_name}={raw!r} is not a valid {cast.__name__}") from e
    return config


def load_runtime_config(path: Optional[Union[str, Path]] = None) -> dict:
    """載入 runtime 設定

    Args:
        path: YAML 路徑，預設 config/runtime.yaml（不存在時只用預設值）

    Returns:
        合併後的設定 dict
    """
    config_path = Path(path or DEFAULT_RUNTIME_PATH)
    file_config: dict = {}

    if config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                file_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Cannot parse {config_path}: {e}") from e
        if not isinstance(file_config, dict):
            raise ConfigError(f"{config_path} must contain a mapping")
    elif path is not None:
        raise ConfigError(f"Config file not found: {config_path}")
    else:
        logger.debug(f"{config_path} not found, using defaults")

    return _apply_env_overrides(deep_merge(DEFAULT_RUNTIME_CONFIG, file_config))


def get_api_key() -> Optional[str]:
    """Gemini API key（GEMINI_API_KEY 優先，其次 API_KEY）"""
    return os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
