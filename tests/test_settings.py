"""Tests for environment and config.yaml driven settings."""

import pytest

from docmeta.core import settings as settings_module
from docmeta.core.settings import Settings


@pytest.fixture(autouse=True)
def no_yaml(monkeypatch):
    monkeypatch.setattr(settings_module, "_load_yaml_config", lambda: {})


def test_defaults():
    s = Settings()
    assert s.ollama_api_url == "http://localhost:11434"
    assert s.ollama_timeout == 1200.0
    assert s.use_prompt_tags is False
    assert s.use_existing_data is False
    assert s.prompt_log_max_bytes == 10 * 1024 * 1024


def test_yes_no_flags_from_env(monkeypatch):
    monkeypatch.setenv("USE_PROMPT_TAGS", "yes")
    monkeypatch.setenv("USE_EXISTING_DATA", "no")
    monkeypatch.setenv("PROMPT_TAGS", "Invoice, Tax")
    monkeypatch.setenv("SYSTEM_PROMPT", "Custom generic prompt")
    s = Settings()
    assert s.use_prompt_tags is True
    assert s.use_existing_data is False
    assert s.prompt_tags == "Invoice, Tax"
    assert s.system_prompt == "Custom generic prompt"


def test_yaml_overrides(monkeypatch):
    monkeypatch.setenv("OLLAMA_MODEL", "from-env")
    monkeypatch.setenv("OLLAMA_API_URL", "http://env:11434")
    monkeypatch.setattr(
        settings_module,
        "_load_yaml_config",
        lambda: {"ollama": {"model": "from-yaml"}, "storage": {"image_dir": "/tmp/thumbs"}},
    )
    s = Settings()
    assert s.ollama_model == "from-yaml"
    assert s.ollama_api_url == "http://env:11434"
    assert s.image_dir == "/tmp/thumbs"
