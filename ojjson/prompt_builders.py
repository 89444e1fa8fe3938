from __future__ import annotations

import json
from typing import Any, Optional, Sequence

from pydantic import BaseModel

from .prompt_texts import (
    CONVERSION_HELP_SECTION,
    CORRECTION_PROMPT,
    INSTRUCTION_PROMPT,
    OUTPUT_RULES,
    PARSE_CORRECTION_PROMPT,
)
from .schemas import Violation


# -------------------------
# Helpers
# -------------------------

def to_payload_text(value: Any) -> str:
    """Serialize an input or output value the way it is shown to the model."""
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json", by_alias=True)
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _format_issues(violations: Sequence[Violation]) -> str:
    return "".join(f"* {violation.describe()}\n" for violation in violations)


# -------------------------
# Prompt Builders
# -------------------------

def build_instruction_prompt(
    input_description: str,
    output_description: str,
    conversion_help: Optional[str] = None,
) -> str:
    prompt = INSTRUCTION_PROMPT.format(
        input_description=input_description,
        output_description=output_description,
    )
    if conversion_help:
        prompt += CONVERSION_HELP_SECTION.format(conversion_help=conversion_help)
    return prompt + OUTPUT_RULES


def build_correction_prompt(violations: Sequence[Violation]) -> str:
    issues = _format_issues(violations)
    if violations and all(violation.code == "json_invalid" for violation in violations):
        return PARSE_CORRECTION_PROMPT.format(issues=issues)
    return CORRECTION_PROMPT.format(issues=issues)


__all__ = ["build_correction_prompt", "build_instruction_prompt", "to_payload_text"]
