"""Description canonicalization shared by matching, suggestions and disputes."""

from typing import Optional
import re

_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize(text: Optional[str]) -> str:
    """
    Canonicalize free text for comparison.

    Punctuation becomes whitespace, runs of whitespace collapse to one
    space, and the result is trimmed and lower-cased.
    """
    if not text:
        return ""
    desc = _PUNCTUATION.sub(" ", text)
    desc = _WHITESPACE.sub(" ", desc)
    return desc.strip().lower()


def normalize_reference(reference: Optional[str]) -> Optional[str]:
    """Strip a reference number down to upper-case alphanumerics."""
    if not reference:
        return None
    cleaned = re.sub(r"[^a-zA-Z0-9]", "", reference).upper()
    return cleaned or None
