"""Helpers for pulling JSON out of free-form LLM responses.

Models wrap JSON in markdown fences or add prose around it; these helpers
recover the first complete JSON object or array.
"""

import json
from typing import Any


def strip_code_fences(text: str) -> str:
    """Return the content of the first markdown code block, if any.

    Args:
        text: Raw model output

    Returns:
        Fenced content, or the stripped input when there is no fence
    """
    text = text.strip()
    if "```json" in text:
        start = text.find("```json") + 7
        end = text.find("```", start)
        return text[start : end if end != -1 else None].strip()
    if "```" in text:
        start = text.find("```") + 3
        end = text.find("```", start)
        return text[start : end if end != -1 else None].strip()
    return text


def _extract_balanced(text: str, open_char: str, close_char: str) -> Any:
    """Parse the first balanced JSON value delimited by open/close chars.

    Raises:
        json.JSONDecodeError: If no complete value is found
    """
    start = text.find(open_char)
    if start == -1:
        raise json.JSONDecodeError(f"No JSON value starting with {open_char!r}", text, 0)

    # Track nesting to find the complete value
    depth = 0
    in_string = False
    escape_next = False

    for i, char in enumerate(text[start:], start):
        if escape_next:
            escape_next = False
            continue

        if char == "\\":
            escape_next = True
            continue

        if char == '"':
            in_string = not in_string
            continue

        if in_string:
            continue

        if char == open_char:
            depth += 1
        elif char == close_char:
            depth -= 1
            if depth == 0:
                return json.loads(text[start : i + 1])

    raise json.JSONDecodeError("Incomplete JSON value", text, len(text))


def extract_first_json_object(text: str) -> dict[str, Any]:
    """Extract the first valid JSON object from text.

    Handles markdown fences and extra text around the JSON.

    Args:
        text: Text potentially containing JSON

    Returns:
        Parsed JSON object

    Raises:
        json.JSONDecodeError: If no valid JSON object is found
    """
    text = strip_code_fences(text)
    try:
        result = json.loads(text)
    except json.JSONDecodeError:
        result = _extract_balanced(text, "{", "}")

    if not isinstance(result, dict):
        raise json.JSONDecodeError("Expected a JSON object", text, 0)
    return result


def extract_first_json_array(text: str) -> list[Any]:
    """Extract the first valid JSON array from text.

    Args:
        text: Text potentially containing a JSON array

    Returns:
        Parsed list

    Raises:
        json.JSONDecodeError: If no valid JSON array is found
    """
    text = strip_code_fences(text)
    try:
        result = json.loads(text)
    except json.JSONDecodeError:
        result = _extract_balanced(text, "[", "]")

    if not isinstance(result, list):
        raise json.JSONDecodeError("Expected a JSON array", text, 0)
    return result


__all__ = [
    "extract_first_json_array",
    "extract_first_json_object",
    "strip_code_fences",
]
