"""Tolerant JSON extraction and validation of model output."""

from __future__ import annotations

import json
from typing import Any

from ..errors import ValidationError


def parse_json_response(content: str) -> dict[str, Any]:
    """Parse a JSON object from model output.

    Accepts bare JSON, a fenced ```json block, or the outermost ``{...}``
    span of surrounding prose.

    Raises:
        json.JSONDecodeError: If no JSON object can be recovered
        ValidationError: If the JSON is not an object
    """
    if not content:
        raise json.JSONDecodeError("Empty content", content or "", 0)
    try:
        obj = json.loads(content)
    except json.JSONDecodeError:
        obj = json.loads(_extract_json_snippet(content))
    if not isinstance(obj, dict):
        raise ValidationError(f"Expected a JSON object, got {type(obj).__name__}")
    return obj


def _extract_json_snippet(content: str) -> str:
    fence = _extract_fenced_json(content)
    if fence:
        return fence
    start = content.find("{")
    end = content.rfind("}")
    if start == -1 or end == -1 or end <= start:
        raise json.JSONDecodeError("No JSON object found", content, 0)
    return content[start : end + 1]


def _extract_fenced_json(content: str) -> str | None:
    lines = content.splitlines()
    start_idx = None
    for idx, line in enumerate(lines):
        if line.strip().startswith("```") and "json" in line.lower():
            start_idx = idx + 1
            break
    if start_idx is None:
        return None
    for idx in range(start_idx, len(lines)):
        if lines[idx].strip().startswith("```"):
            snippet = "\n".join(lines[start_idx:idx]).strip()
            return snippet or None
    return None


def coerce_confidence(value: Any) -> float:
    """Return ``value`` as a float clamped to [0, 1]."""
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"Invalid confidence: {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid confidence: {value!r}") from exc
    if number != number:
        raise ValidationError("Confidence is NaN")
    return min(1.0, max(0.0, number))


def coerce_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"true", "yes", "1"}
    return bool(value)


def require_text(obj: dict[str, Any], *keys: str) -> str:
    """Return the first non-empty string among ``keys``."""
    for key in keys:
        value = obj.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    raise ValidationError(f"Missing required field: {' or '.join(keys)}")
