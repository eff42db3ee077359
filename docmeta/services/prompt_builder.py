from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterable, Optional


@dataclass
class PromptConfig:
    use_existing_data: bool = False
    use_predefined_tags: bool = False
    predefined_tag_list: str = ""
    generic_system_prompt: str = ""
    predefined_tags_prompt: str = ""


def _entry_name(entry: Any) -> str:
    if isinstance(entry, str):
        return entry
    if isinstance(entry, dict):
        return entry.get("name") or ""
    return getattr(entry, "name", None) or ""


def _join_names(entries: Any, allow_bare_strings: bool) -> str:
    if not isinstance(entries, (list, tuple)):
        return ""
    names = []
    for e in entries:
        if not e:
            continue
        if isinstance(e, str) and not allow_bare_strings:
            continue
        name = str(_entry_name(e)).strip()
        if name:
            names.append(name)
    return ", ".join(names)


def format_existing_tags(tags: Optional[Iterable[Any]]) -> str:
    # Tag entries carry a name; bare strings are not tag records.
    return _join_names(tags, allow_bare_strings=False)


def format_existing_correspondents(correspondents: Optional[Iterable[Any]]) -> str:
    return _join_names(correspondents, allow_bare_strings=True)


def build_prompt(
    content: Any,
    existing_tags: Any = None,
    existing_correspondents: Any = None,
    config: Optional[PromptConfig] = None,
) -> str:
    cfg = config or PromptConfig()

    if cfg.use_predefined_tags:
        header = f"{cfg.predefined_tags_prompt}\n\nPredefined tags: {cfg.predefined_tag_list}"
    else:
        header = cfg.generic_system_prompt

    parts = [header]
    if cfg.use_existing_data:
        parts.append(f"Existing tags: {format_existing_tags(existing_tags)}")
        parts.append(f"Existing Correspondents: {format_existing_correspondents(existing_correspondents)}")
    parts.append(json.dumps(content, ensure_ascii=False, default=str))

    return "\n\n".join(parts) + "\n"
