from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

from docmeta.schemas.analysis import DocumentMetadata

logger = logging.getLogger(__name__)

_JSON_SPAN = re.compile(r"\{.*\}", re.DOTALL)
_TRAILING_COMMA_BRACE = re.compile(r",\s*}")
_TRAILING_COMMA_BRACKET = re.compile(r",\s*]")
_PROPERTY_NAME = re.compile(r"(['\"])?([a-zA-Z0-9_]+)(['\"])?\s*:")


def sanitize_json(text: str) -> str:
    """
    Syntactic repair only: drop trailing commas and double-quote property names.
    Values are not checked, so a repaired object may still carry wrong data.
    """
    text = _TRAILING_COMMA_BRACE.sub("}", text)
    text = _TRAILING_COMMA_BRACKET.sub("]", text)
    return _PROPERTY_NAME.sub(r'"\2":', text)


def _text_or_none(value: Any) -> Optional[str]:
    if not value:
        return None
    return value if isinstance(value, str) else str(value)


def _tag_text(tag: Any) -> Optional[str]:
    if isinstance(tag, str):
        return tag
    if isinstance(tag, dict):
        name = tag.get("name")
        return name if isinstance(name, str) and name else None
    if isinstance(tag, (int, float)):
        return str(tag)
    return None


def _to_metadata(result: Any) -> DocumentMetadata:
    if not isinstance(result, dict):
        return DocumentMetadata()

    tags = result.get("tags")
    if not isinstance(tags, list):
        tags = []

    return DocumentMetadata(
        tags=[name for name in map(_tag_text, tags) if name is not None],
        correspondent=_text_or_none(result.get("correspondent")),
        title=_text_or_none(result.get("title")),
        document_date=_text_or_none(result.get("document_date")),
        language=_text_or_none(result.get("language")),
    )


def _lenient_loads(candidate: str) -> Any:
    from json_repair import repair_json

    return json.loads(repair_json(candidate))


def parse_response(text: str, lenient: bool = False) -> DocumentMetadata:
    """
    Extract {...} → strict parse → sanitize → parse.

    Never raises. Anything that cannot be recovered yields empty tags and no
    other fields. With ``lenient`` the span is also run through json_repair
    before giving up.
    """
    m = _JSON_SPAN.search(text or "")
    if not m:
        logger.debug("No JSON object found in model response")
        return DocumentMetadata()

    candidate = m.group(0)
    logger.debug("Extracted JSON string: %s", candidate)

    # RecursionError: json.loads on very deeply nested input
    try:
        return _to_metadata(json.loads(candidate))
    except (ValueError, RecursionError) as e:
        logger.warning("Error parsing JSON from response: %s: %s", type(e).__name__, e)
        logger.warning("Attempting to sanitize the JSON...")

    try:
        return _to_metadata(json.loads(sanitize_json(candidate)))
    except (ValueError, RecursionError):
        pass

    if lenient:
        try:
            return _to_metadata(_lenient_loads(candidate))
        except Exception as e:
            logger.warning("json_repair could not recover the response: %s: %s", type(e).__name__, e)

    logger.error(
        "Final JSON parsing failed after sanitization. The model returned a "
        "structure too broken to repair; review the prompt or the model."
    )
    return DocumentMetadata()
