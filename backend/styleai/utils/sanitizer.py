"""
Sanitization of untrusted free text before it is embedded in a model prompt
or a retailer search URL.

This is defense in depth against prompt injection, not a classifier: it
removes structure (newlines, bracket delimiters, control characters) and an
explicit denylist of instruction-override phrases. Anything outside the
denylist passes through.
"""
import re
from typing import Any

# Line breaks (including unicode line/paragraph separators) and tabs become spaces
_LINE_BREAKS = re.compile(r"[\r\n\t\x0b\x0c\x85\u2028\u2029]+")
# Remaining C0 control characters and DEL are dropped
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0e-\x1f\x7f]")
_BRACKETS = re.compile(r"[<>{}\[\]]")
_SCAN_FACTOR = 4

INJECTION_PATTERNS = (
    re.compile(r"ignore.*previous.*instructions?", re.IGNORECASE),
    re.compile(r"system.*prompt", re.IGNORECASE),
    re.compile(r"you.*are.*now", re.IGNORECASE),
)


def _strip_injection_phrases(text: str) -> str:
    # Removing one phrase can join fragments into another, so repeat until stable
    while True:
        cleaned = text
        for pattern in INJECTION_PATTERNS:
            cleaned = pattern.sub("", cleaned)
        if cleaned == text:
            return cleaned
        text = cleaned


def sanitize(text: Any, max_length: int = 200) -> str:
    """
    Normalize an untrusted value for prompt embedding.

    Args:
        text: Any value; only strings survive, everything else becomes ""
        max_length: Maximum length of the returned string

    Returns:
        Single-line text without brackets, control characters or known
        override phrases, at most max_length characters, trimmed.
    """
    if not isinstance(text, str) or max_length <= 0:
        return ""

    # The denylist never scans more than max_length * _SCAN_FACTOR characters
    cleaned = text[:max_length * _SCAN_FACTOR]
    cleaned = _LINE_BREAKS.sub(" ", cleaned)
    cleaned = _CONTROL_CHARS.sub("", cleaned)
    cleaned = _BRACKETS.sub("", cleaned)
    cleaned = _strip_injection_phrases(cleaned)
    return cleaned[:max_length].strip()
