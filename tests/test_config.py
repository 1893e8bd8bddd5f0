"""Tests for runtime configuration"""

import pytest

from stock_report.config import (
    DEFAULT_RUNTIME_CONFIG,
    ConfigError,
    deep_merge,
    get_api_key,
    load_runtime_config,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("GEMINI_MODEL", "GEMINI_BASE_URL", "GEMINI_TIMEOUT", "GEMINI_MAX_RETRIES", "REPORT_OUTPUT_DIR"):
        monkeypatch.delenv(name, raising=False)


def test_defaults_when_file_missing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    config = load_runtime_config()

    assert config == DEFAULT_RUNTIME_CONFIG
    assert config is not DEFAULT_RUNTIME_CONFIG


def test_yaml_overrides_defaults(tmp_path):
    path = tmp_path / "runtime.yaml"
    path.write_text("provider:\n  model: gemini-2.5-flash\noutput:\n  format: json\n", encoding="utf-8")

    config = load_runtime_config(path)

    assert config["provider"]["model"] == "gemini-2.5-flash"
    assert config["provider"]["max_retries"] == 3
    assert config["output"]["format"] == "json"
    assert config["output"]["dir"] == "out"


def test_env_overrides_yaml(tmp_path, monkeypatch):
    path = tmp_path / "runtime.yaml"
    path.write_text("provider:\n  model: gemini-2.5-flash\n", encoding="utf-8")
    monkeypatch.setenv("GEMINI_MODEL", "gemini-2.0-pro")
    monkeypatch.setenv("GEMINI_MAX_RETRIES", "5")

    config = load_runtime_config(path)

    assert config["provider"]["model"] == "gemini-2.0-pro"
    assert config["provider"]["max_retries"] == 5


def test_invalid_env_value(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GEMINI_TIMEOUT", "slow")

    with pytest.raises(ConfigError):
        load_runtime_config()


def test_explicit_missing_path(tmp_path):
    with pytest.raises(ConfigError):
        load_runtime_config(tmp_path / "missing.yaml")


def test_non_mapping_yaml(tmp_path):
    path = tmp_path / "runtime.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_runtime_config(path)


def test_invalid_yaml(tmp_path):
    path = tmp_path / "runtime.yaml"
    path.write_text("provider: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_runtime_config(path)


def test_deep_merge_does_not_mutate():
    base = {"a": {"b": 1, "c": 2}}

    merged = deep_merge(base, {"a": {"b": 10}})

    assert merged == {"a": {"b": 10, "c": 2}}
    assert base == {"a": {"b": 1, "c": 2}}


def test_api_key_fallback(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("API_KEY", "fallback")
    assert get_api_key() == "fallback"

    monkeypatch.setenv("GEMINI_API_KEY", "primary")
    assert get_api_key() == "primary"
