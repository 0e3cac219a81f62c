"""Recover a JSON object embedded in free-form model output."""

import json
from typing import Any


def find_first_object_span(text: str) -> str | None:
    """Return the first balanced `{...}` span, ignoring braces inside strings."""
    start = text.find("{")
    if start < 0:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start:index + 1]
    return None


def recover_json_object(text: str) -> dict[str, Any] | None:
    """Parse the first balanced object in `text`, or None if there is none."""
    span = find_first_object_span(text)
    if span is None:
        return None
    try:
        parsed = json.loads(span)
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None
