"""Text utilities"""

import re
import unicodedata


def slugify(text: str, max_length: int = 60) -> str:
    """Convert a stock code or title to a file-name friendly slug.

    Non-ASCII characters are dropped, so "2330 台積電" becomes "2330".
    """
    text = unicodedata.normalize("NFKD", text)
    text = text.encode("ascii", "ignore").decode("ascii")

    text = text.lower().strip()
    text = re.sub(r"[^\w\s-]", "", text)
    text = re.sub(r"[-\s]+", "-", text)

    if len(text) > max_length:
        text = text[:max_length].rsplit("-", 1)[0]

    return text.strip("-")


def strip_markers(text: str, markers: str = "#*") -> str:
    """Remove every markdown marker character and trim the result."""
    return text.translate({ord(ch): None for ch in markers}).strip()


def truncate(text: str, max_length: int = 60, suffix: str = "...") -> str:
    """Truncate text for console tables."""
    if len(text) <= max_length:
        return text
    return text[: max_length - len(suffix)] + suffix
