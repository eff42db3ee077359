from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic_settings import BaseSettings

from docmeta.services.prompts import DEFAULT_PREDEFINED_TAGS_PROMPT, DEFAULT_SYSTEM_PROMPT


def _load_yaml_config() -> dict:
    root = Path(__file__).resolve().parents[2]  # project root
    cfg_path = root / "config.yaml"
    if not cfg_path.exists():
        return {}
    with open(cfg_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


# yaml section -> {yaml key: settings field}
_YAML_FIELDS = {
    "ollama": {
        "api_url": "ollama_api_url",
        "model": "ollama_model",
        "timeout": "ollama_timeout",
    },
    "prompt": {
        "use_prompt_tags": "use_prompt_tags",
        "prompt_tags": "prompt_tags",
        "use_existing_data": "use_existing_data",
        "system_prompt": "system_prompt",
        "predefined_tags_prompt": "special_prompt_predefined_tags",
        "lenient_json_repair": "lenient_json_repair",
    },
    "paperless": {
        "api_url": "paperless_api_url",
        "api_token": "paperless_api_token",
    },
    "storage": {
        "image_dir": "image_dir",
        "prompt_log": "prompt_log_path",
        "prompt_log_max_bytes": "prompt_log_max_bytes",
    },
}


def _yaml_overrides(cfg: dict) -> dict[str, Any]:
    # Only keys present in config.yaml are passed on, so env vars still apply to the rest.
    out: dict[str, Any] = {}
    for section, fields in _YAML_FIELDS.items():
        block = cfg.get(section) or {}
        for key, field in fields.items():
            if key in block:
                out[field] = block[key]
    if "log_level" in cfg:
        out["log_level"] = cfg["log_level"]
    return out


class Settings(BaseSettings):
    # Ollama
    ollama_api_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.2"
    ollama_timeout: float = 1200.0

    # Prompt
    use_prompt_tags: bool = False
    prompt_tags: str = ""
    use_existing_data: bool = False
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    special_prompt_predefined_tags: str = DEFAULT_PREDEFINED_TAGS_PROMPT
    lenient_json_repair: bool = False

    # Paperless (thumbnails)
    paperless_api_url: str = "http://localhost:8000/api"
    paperless_api_token: Optional[str] = None

    # Local storage
    image_dir: str = "./public/images"
    prompt_log_path: str = "./logs/prompt.txt"
    prompt_log_max_bytes: int = 10 * 1024 * 1024

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"

    def __init__(self, **kwargs):
        cfg = _load_yaml_config()
        super().__init__(**{**_yaml_overrides(cfg), **kwargs})
