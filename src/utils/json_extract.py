"""
Best-effort JSON extraction from free-form LLM output.

Models frequently wrap JSON in markdown fences or surround it with prose.
"""

import json
from typing import Any


def _strip_fences(content: str) -> str:
    """Remove a markdown code block around the payload, if any."""
    if "```json" in content:
        return content.split("```json")[1].split("```")[0].strip()
    if "```" in content:
        parts = content.split("```")
        if len(parts) >= 3:
            return parts[1].strip()
    return content


def _loads_object(candidate: str) -> dict[str, Any] | None:
    try:
        parsed = json.loads(candidate)
    except (json.JSONDecodeError, ValueError):
        return None
    return parsed if isinstance(parsed, dict) else None


def extract_json_object(content: str | None) -> dict[str, Any] | None:
    """
    Extract a JSON object from model output.

    Tries, in order: the whole text, the text inside a markdown code
    block, and the slice between the first "{" and the last "}".

    Args:
        content: Raw model output

    Returns:
        Parsed dict, or None if no JSON object could be recovered
    """
    if not content:
        return None

    trimmed = content.strip()
    if not trimmed:
        return None

    parsed = _loads_object(trimmed)
    if parsed is not None:
        return parsed

    unfenced = _strip_fences(trimmed)
    if unfenced != trimmed:
        parsed = _loads_object(unfenced)
        if parsed is not None:
            return parsed

    start = trimmed.find("{")
    end = trimmed.rfind("}")
    if start >= 0 and end > start:
        return _loads_object(trimmed[start : end + 1])

    return None
