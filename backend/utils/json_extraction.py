"""
Helpers for pulling JSON out of free-form LLM responses.

Models asked for "only JSON" still wrap it in markdown fences or follow
it with prose.  ``strip_code_fences`` removes the fences and
``extract_json_array`` finds the first balanced ``[...]`` literal,
ignoring brackets that appear inside quoted strings.
"""

import re
from dataclasses import dataclass
from typing import Optional

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Remove ```json / ``` markers and surrounding whitespace."""
    return _FENCE_RE.sub("", text).strip()


@dataclass
class _ScanState:
    depth: int = 0
    in_string: bool = False
    escape_next: bool = False


def extract_json_array(text: str) -> Optional[str]:
    """
    Return the first balanced JSON array literal in ``text``.

    Scanning starts at the first ``[``.  Returns None when there is no
    ``[`` or the brackets never balance (e.g. a truncated response).
    """
    start = text.find("[")
    if start == -1:
        return None

    state = _ScanState()
    for i in range(start, len(text)):
        char = text[i]

        if state.escape_next:
            state.escape_next = False
            continue

        if state.in_string:
            if char == "\\":
                state.escape_next = True
            elif char == '"':
                state.in_string = False
            continue

        if char == '"':
            state.in_string = True
        elif char == "[":
            state.depth += 1
        elif char == "]":
            state.depth -= 1
            if state.depth == 0:
                return text[start:i + 1]

    return None
