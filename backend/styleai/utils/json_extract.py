"""
Permissive JSON extraction from generative model output.

Models wrap JSON in prose or markdown fences no matter how the prompt is
worded. These helpers only locate and decode a candidate value; validating
its shape is the caller's job.
"""
import json
import logging
import re
from typing import Any, Optional

logger = logging.getLogger(__name__)

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)

_CLOSERS = {"{": "}", "[": "]"}


def _scan_balanced(text: str, opener: str) -> Optional[Any]:
    """Decode the first balanced {...} or [...] span that parses."""
    closer = _CLOSERS[opener]
    start_idx = text.find(opener)
    while start_idx != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start_idx, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == opener:
                depth += 1
            elif ch == closer:
                depth -= 1
                if depth == 0:
                    try:
                        return json.loads(text[start_idx:i + 1])
                    except json.JSONDecodeError:
                        break
        start_idx = text.find(opener, start_idx + 1)
    return None


def extract_json(text: Optional[str], expect: type = dict) -> Optional[Any]:
    """
    Extract a JSON object (expect=dict) or array (expect=list) from text.

    Tries, in order: the whole text, the first fenced code block, and the
    first balanced bracket span that decodes.

    Returns:
        The decoded value if it has the expected type, otherwise None
    """
    if not isinstance(text, str) or not text.strip():
        return None

    candidates = [text.strip()]
    fenced = _FENCED_BLOCK.search(text)
    if fenced:
        candidates.append(fenced.group(1))

    for candidate in candidates:
        try:
            value = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(value, expect):
            return value

    opener = "{" if expect is dict else "["
    for candidate in candidates[::-1]:
        value = _scan_balanced(candidate, opener)
        if isinstance(value, expect):
            return value

    logger.debug(f"No JSON {expect.__name__} found in model output: {text[:200]}")
    return None
