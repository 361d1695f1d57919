"""
Best-effort extraction of JSON arrays from free-form LLM replies.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Optional


_ARRAY_RE = re.compile(r"\[[\s\S]*\]")


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of a parse: either a value or the reason there is none."""

    ok: bool
    value: Optional[list[Any]] = None
    reason: Optional[str] = None

    @classmethod
    def success(cls, value: list[Any]) -> "ExtractionResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, reason: str) -> "ExtractionResult":
        return cls(ok=False, reason=reason)


def _strip_code_fences(text: str) -> str:
    if "```json" in text:
        return text.split("```json", 1)[1].split("```", 1)[0]
    if "```" in text:
        parts = text.split("```")
        if len(parts) >= 3:
            return parts[1]
    return text


def extract_json_array(text: Optional[str]) -> ExtractionResult:
    """
    Pull the outermost `[...]` span out of a reply and parse it.

    Markdown code fences are unwrapped first. The regex is greedy, so the
    span runs from the first '[' to the last ']'.
    """
    if not text or not text.strip():
        return ExtractionResult.failure("empty response")

    candidate = _strip_code_fences(text.strip())
    match = _ARRAY_RE.search(candidate) or _ARRAY_RE.search(text)
    if not match:
        return ExtractionResult.failure("no JSON array found in response")

    try:
        value = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        return ExtractionResult.failure(f"invalid JSON: {e.msg} at position {e.pos}")

    return ExtractionResult.success(value)
