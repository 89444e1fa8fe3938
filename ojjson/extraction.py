from __future__ import annotations

import json
from typing import Any

from .exceptions import ParseError
from .schemas import Violation


def extract_json_block(text: str) -> str:
    """Return everything from the first ``{`` through the last ``}``.

    Tolerates prose or code fences around the payload. No attempt is made to
    balance brackets; a malformed object is left for the JSON parser to reject.
    """
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        return ""
    return text[start : end + 1]


def parse_reply(text: str) -> Any:
    block = extract_json_block(text)
    if not block:
        raise ParseError(
            "Reply contains no JSON object",
            [Violation(path=(), message="No JSON object found in the output", code="json_invalid")],
            text,
        )
    try:
        return json.loads(block)
    except json.JSONDecodeError as exc:
        raise ParseError(
            f"Reply is not valid JSON: {exc.msg}",
            [
                Violation(
                    path=(),
                    message=f"Could not parse the output as JSON ({exc.msg} at line {exc.lineno} column {exc.colno})",
                    code="json_invalid",
                )
            ],
            text,
        ) from exc


__all__ = ["extract_json_block", "parse_reply"]
