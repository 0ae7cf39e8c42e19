"""Text normalisation helpers for scraped page content."""

import re
from typing import Optional

# Inline footnote markers after an author name: "张三1", "张三1,2", "Li Si 2，3"
_FOOTNOTE_MARKER = re.compile(r"\s*\d+(?:\s*[,，]\s*\d+)*")
_EDGE_PUNCTUATION = " \t\r\n,，;；"
_WHITESPACE = re.compile(r"\s+")
_INTEGER = re.compile(r"\d[\d,，]*")


def clean_author_name(text: str) -> str:
    """Strip numeric footnote markers from an author entry.

    Applying it twice gives the same result as applying it once.
    """
    if not text:
        return ""
    cleaned = _FOOTNOTE_MARKER.sub("", text)
    cleaned = _WHITESPACE.sub(" ", cleaned)
    return cleaned.strip(_EDGE_PUNCTUATION)


def normalize_text(text: Optional[str]) -> str:
    """Collapse whitespace and trim; None becomes an empty string."""
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text).strip()


def parse_page_mark(text: str) -> int:
    """Return the total page count from a ``"<current>/<total>"`` marker.

    Raises:
        ValueError: If the text is not of that form
    """
    parts = (text or "").strip().split("/")
    if len(parts) != 2:
        raise ValueError(f"Unrecognised page marker: {text!r}")
    total = parts[1].strip()
    if not total.isdigit():
        raise ValueError(f"Unrecognised page marker: {text!r}")
    return int(total)


def parse_count(text: Optional[str]) -> Optional[int]:
    """Parse the first integer in a string, allowing thousands separators.

    Returns:
        The integer, or None if the text holds no digits
    """
    match = _INTEGER.search(text or "")
    if not match:
        return None
    return int(re.sub(r"[,，]", "", match.group(0)))
